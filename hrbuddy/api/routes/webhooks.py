"""Zapier form-submission webhook."""

import logging

import httpx
from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from hrbuddy.api.deps import verify_webhook_secret
from hrbuddy.api.schemas import ZapierSubmission
from hrbuddy.config import settings
from hrbuddy.db import Applicant, Application, ApplicationStage, File, Position, get_db
from hrbuddy.services.analysis import analyze_application
from hrbuddy.tools.file_storage import save_file

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_webhook_secret)])


async def download_resume(url: str) -> bytes:
    """Fetch a resume from the temporary URL Zapier provides."""
    async with httpx.AsyncClient(timeout=settings.request_timeout, follow_redirects=True) as client:
        response = await client.get(url)
        response.raise_for_status()
    return response.content


async def run_analysis(session_factory: sessionmaker, application_id: str):
    """Background task: analyze the new application's resume."""
    db = session_factory()
    try:
        outcome = await analyze_application(db, application_id)
        logger.info(f"[{application_id}] Analysis finished: {outcome['status'].value}")
    finally:
        db.close()


def _upsert_applicant(db: Session, form: ZapierSubmission) -> Applicant:
    fields = {
        "first_name": form.first_name,
        "last_name": form.last_name,
        "phone": form.phone,
        "location": form.location,
        "linkedin_url": form.linkedin_url,
        "portfolio_url": form.portfolio_url,
        "source": form.referral_source,
    }
    applicant = db.scalar(select(Applicant).where(Applicant.email == form.email))
    if applicant is None:
        applicant = Applicant(email=form.email, **fields)
        db.add(applicant)
    else:
        for name, value in fields.items():
            setattr(applicant, name, value)
    db.flush()
    return applicant


def _find_or_create_position(db: Session, form: ZapierSubmission) -> Position:
    position = db.scalar(select(Position).where(Position.title == form.position_applied))
    if position is None:
        position = Position(
            title=form.position_applied,
            department=form.department or "Unknown",
            description=form.position_description or "",
        )
        db.add(position)
        db.flush()
    return position


async def _store_resume(db: Session, application: Application, form: ZapierSubmission) -> None:
    content = await download_resume(form.resume_url)
    file_name = form.resume_filename or "resume.pdf"
    storage_path = save_file(content, file_name, application.id)

    db.add(
        File(
            application_id=application.id,
            file_name=file_name,
            file_type=form.resume_content_type or "application/pdf",
            file_size=len(content),
            storage_path=storage_path,
            file_category="resume",
        )
    )
    db.commit()


@router.post("/zapier")
async def zapier_webhook(
    form: ZapierSubmission,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """Record an application submitted through the Zapier form."""
    try:
        applicant = _upsert_applicant(db, form)
        position = _find_or_create_position(db, form)

        application = Application(
            applicant_id=applicant.id,
            position_id=position.id,
            status="new",
            cover_letter=form.cover_letter,
            form_data=form.model_dump(mode="json"),
        )
        db.add(application)
        db.flush()

        db.add(
            ApplicationStage(
                application_id=application.id,
                stage="applied",
                notes="Application received via Zapier form",
                changed_by="system",
            )
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Webhook error: {e}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to process submission"},
        )

    # The application stands even if the resume cannot be fetched
    if form.resume_url:
        try:
            await _store_resume(db, application, form)
        except (httpx.HTTPError, OSError, SQLAlchemyError) as e:
            db.rollback()
            logger.error(f"[{application.id}] Error processing resume file: {e}")

    background_tasks.add_task(run_analysis, sessionmaker(bind=db.get_bind()), application.id)

    return {"success": True, "applicant_id": applicant.id, "application_id": application.id}
