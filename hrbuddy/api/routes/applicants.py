"""Applicant endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session, selectinload

from hrbuddy.api.deps import get_mcp_service
from hrbuddy.api.schemas import (
    AnalysisResponse,
    ApplicantCreate,
    ApplicantDetailResponse,
    ApplicantListItem,
    ApplicantListResponse,
    ApplicantMutationResponse,
    ApplicantRef,
    ApplicantSkillResponse,
    ApplicantUpdate,
    ApplicationResponse,
    ApplicationSummary,
    PositionInput,
    PositionSummary,
    SkillInput,
    StageResponse,
    StoredFileResponse,
    WorkflowRequest,
)
from hrbuddy.db import Applicant, ApplicantSkill, Application, ApplicationStage, Position, Skill, get_db
from hrbuddy.errors import GenerationError
from hrbuddy.services import ai_service
from hrbuddy.services.mcp_service import McpService
from hrbuddy.services.workflow import process_applicant_workflow
from hrbuddy.tools import file_storage

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_applicant(db: Session, applicant_id: str) -> Applicant:
    applicant = db.get(Applicant, applicant_id)
    if not applicant:
        raise HTTPException(status_code=404, detail="Applicant not found")
    return applicant


def _find_or_create_skill(db: Session, name: str, category: str | None = None) -> Skill:
    skill = db.scalar(select(Skill).where(Skill.name == name))
    if skill is None:
        skill = Skill(name=name, category=category)
        db.add(skill)
        db.flush()
    return skill


def _apply_skill(db: Session, applicant: Applicant, data: SkillInput) -> None:
    """Update an existing skill link by id, or link a skill by name."""
    if data.id:
        link = db.get(ApplicantSkill, data.id)
        if link is None or link.applicant_id != applicant.id:
            raise HTTPException(status_code=404, detail=f"Applicant skill not found: {data.id}")
        link.years_experience = data.years_experience
        link.proficiency_level = data.proficiency_level
        link.is_highlighted = data.is_highlighted
        return

    if not data.name:
        raise HTTPException(status_code=400, detail="Skill name is required")

    skill = _find_or_create_skill(db, data.name, data.category)
    link = db.scalar(
        select(ApplicantSkill).where(
            ApplicantSkill.applicant_id == applicant.id, ApplicantSkill.skill_id == skill.id
        )
    )
    if link is None:
        link = ApplicantSkill(applicant_id=applicant.id, skill_id=skill.id, is_ai_detected=False)
        db.add(link)
        db.flush()
    link.years_experience = data.years_experience
    link.proficiency_level = data.proficiency_level
    link.is_highlighted = data.is_highlighted


def _resolve_position(db: Session, data: PositionInput) -> Position:
    position = db.get(Position, data.id) if data.id else None
    if position is None:
        position = db.scalar(select(Position).where(Position.title == data.title))
    if position is None:
        position = Position(title=data.title, department=data.department, description=data.description)
        db.add(position)
        db.flush()
    return position


def _skill_response(link: ApplicantSkill) -> ApplicantSkillResponse:
    return ApplicantSkillResponse(
        id=link.skill.id,
        name=link.skill.name,
        category=link.skill.category,
        years_experience=link.years_experience,
        proficiency_level=link.proficiency_level,
        is_highlighted=link.is_highlighted,
        is_ai_detected=link.is_ai_detected,
    )


def list_item(applicant: Applicant) -> ApplicantListItem:
    return ApplicantListItem(
        id=applicant.id,
        name=applicant.full_name,
        email=applicant.email,
        phone=applicant.phone,
        location=applicant.location,
        positions=[
            ApplicationSummary(
                id=app.position.id, title=app.position.title, status=app.status, applied_at=app.applied_at
            )
            for app in applicant.applications
        ],
        skills=[_skill_response(link) for link in applicant.skills],
    )


def _application_response(app: Application) -> ApplicationResponse:
    latest = app.ai_analyses[0] if app.ai_analyses else None
    return ApplicationResponse(
        id=app.id,
        position=PositionSummary(
            id=app.position.id, title=app.position.title, department=app.position.department
        ),
        status=app.status,
        applied_at=app.applied_at,
        updated_at=app.updated_at,
        cover_letter=app.cover_letter,
        files=[StoredFileResponse.model_validate(f) for f in app.files],
        stages=[StageResponse.model_validate(s) for s in app.stages],
        ai_analysis=AnalysisResponse(
            id=latest.id,
            type=latest.analysis_type,
            result=latest.analysis_result or {},
            confidence_score=latest.confidence_score,
            created_at=latest.created_at,
        )
        if latest
        else None,
    )


@router.get("", response_model=ApplicantListResponse)
def list_applicants(
    position: str | None = None,
    skill: str | None = None,
    status: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
):
    """List applicants, newest first, with optional filters."""
    stmt = (
        select(Applicant)
        .options(
            selectinload(Applicant.applications).selectinload(Application.position),
            selectinload(Applicant.skills).selectinload(ApplicantSkill.skill),
        )
        .order_by(Applicant.created_at.desc())
    )

    conditions = []
    if position:
        conditions.append(
            Applicant.applications.any(Application.position.has(Position.title.ilike(f"%{position}%")))
        )
    if skill:
        conditions.append(
            Applicant.skills.any(ApplicantSkill.skill.has(Skill.name.ilike(f"%{skill}%")))
        )
    if status:
        conditions.append(Applicant.applications.any(Application.status == status))
    if search:
        pattern = f"%{search}%"
        conditions.append(
            or_(
                Applicant.first_name.ilike(pattern),
                Applicant.last_name.ilike(pattern),
                Applicant.email.ilike(pattern),
            )
        )
    if conditions:
        stmt = stmt.where(and_(*conditions))

    applicants = db.scalars(stmt).all()
    return ApplicantListResponse(applicants=[list_item(a) for a in applicants], count=len(applicants))


@router.post("", response_model=ApplicantMutationResponse)
def create_applicant(data: ApplicantCreate, db: Session = Depends(get_db)):
    """Create an applicant, optionally with skills and an application."""
    if db.scalar(select(Applicant).where(Applicant.email == data.email)):
        raise HTTPException(status_code=409, detail="An applicant with this email already exists")

    applicant = Applicant(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        phone=data.phone,
        location=data.location,
        linkedin_url=data.linkedin_url,
        portfolio_url=data.portfolio_url,
        source=data.source,
    )
    db.add(applicant)
    db.flush()

    for skill_data in data.skills:
        _apply_skill(db, applicant, skill_data.model_copy(update={"id": None}))

    if data.position and data.position.title:
        position = _resolve_position(db, data.position)
        application = Application(
            applicant_id=applicant.id,
            position_id=position.id,
            status="new",
            cover_letter=data.position.cover_letter,
        )
        db.add(application)
        db.flush()
        db.add(
            ApplicationStage(
                application_id=application.id,
                stage="applied",
                notes="Created via API",
                changed_by="system",
            )
        )

    db.commit()
    db.refresh(applicant)
    logger.info(f"Created applicant {applicant.id}")

    return ApplicantMutationResponse(applicant=ApplicantRef.model_validate(applicant))


@router.get("/{applicant_id}", response_model=ApplicantDetailResponse)
def get_applicant(applicant_id: str, db: Session = Depends(get_db)):
    """Get an applicant with applications, files, stages and analyses."""
    applicant = _get_applicant(db, applicant_id)

    return ApplicantDetailResponse(
        id=applicant.id,
        first_name=applicant.first_name,
        last_name=applicant.last_name,
        full_name=applicant.full_name,
        email=applicant.email,
        phone=applicant.phone,
        location=applicant.location,
        linkedin_url=applicant.linkedin_url,
        portfolio_url=applicant.portfolio_url,
        source=applicant.source,
        created_at=applicant.created_at,
        updated_at=applicant.updated_at,
        applications=[_application_response(app) for app in applicant.applications],
        skills=[_skill_response(link) for link in applicant.skills],
    )


@router.put("/{applicant_id}", response_model=ApplicantMutationResponse)
def update_applicant(applicant_id: str, data: ApplicantUpdate, db: Session = Depends(get_db)):
    """Update applicant fields and skills."""
    applicant = _get_applicant(db, applicant_id)

    fields = data.model_dump(exclude_unset=True, exclude={"skills", "remove_skills"})
    if "email" in fields and fields["email"] != applicant.email:
        if db.scalar(select(Applicant).where(Applicant.email == fields["email"])):
            raise HTTPException(status_code=409, detail="An applicant with this email already exists")
    for name, value in fields.items():
        setattr(applicant, name, value)

    for skill_data in data.skills or []:
        _apply_skill(db, applicant, skill_data)

    for skill_id in data.remove_skills:
        link = db.scalar(
            select(ApplicantSkill).where(
                ApplicantSkill.applicant_id == applicant.id, ApplicantSkill.skill_id == skill_id
            )
        )
        if link is not None:
            db.delete(link)

    db.commit()
    db.refresh(applicant)

    return ApplicantMutationResponse(applicant=ApplicantRef.model_validate(applicant))


@router.delete("/{applicant_id}")
def delete_applicant(applicant_id: str, db: Session = Depends(get_db)):
    """Delete an applicant and everything attached to it."""
    applicant = _get_applicant(db, applicant_id)
    application_ids = [app.id for app in applicant.applications]
    db.delete(applicant)
    db.commit()

    for application_id in application_ids:
        for path in file_storage.list_application_files(application_id):
            try:
                file_storage.delete_file(path)
            except OSError as e:
                logger.warning(f"Could not remove stored file {path}: {e}")
    return {"success": True, "message": "Applicant deleted successfully"}


@router.post("/{applicant_id}/summary")
async def generate_summary(applicant_id: str, db: Session = Depends(get_db)):
    """Generate an HTML summary of the applicant with Gemini."""
    applicant = _get_applicant(db, applicant_id)
    try:
        return await ai_service.generate_applicant_summary(applicant)
    except GenerationError as e:
        logger.error(f"Summary generation failed for {applicant_id}: {e}")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})


@router.post("/{applicant_id}/workflow")
async def run_workflow(
    applicant_id: str,
    data: WorkflowRequest,
    db: Session = Depends(get_db),
    mcp: McpService = Depends(get_mcp_service),
):
    """Move the applicant to a new stage: email, ClickUp task and history entry."""
    _get_applicant(db, applicant_id)
    result = await process_applicant_workflow(
        db,
        mcp,
        applicant_id=applicant_id,
        position_title=data.position_title,
        stage=data.stage,
        list_id=data.list_id,
        comments=data.comments,
    )
    if not result["success"]:
        return JSONResponse(status_code=500, content=result)
    return result
