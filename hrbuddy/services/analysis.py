"""
Resume analysis for new applications.

Finds resume text for an application, runs it through Gemini, stores the
result as an AIAnalysis row and links any detected skills to the applicant.
"""

import logging
from enum import Enum
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from hrbuddy.config import settings
from hrbuddy.db import AIAnalysis, ApplicantSkill, Application, File, Skill
from hrbuddy.services import ai_service
from hrbuddy.tools import file_storage
from hrbuddy.tools.pdf_parser import parse_pdf

logger = logging.getLogger(__name__)

# Placeholder until the model reports its own confidence
DEFAULT_CONFIDENCE = 0.9


class AnalysisStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    NO_RESUME = "no_resume"
    FAILED = "failed"


def _resume_text(application: Application, resume: File) -> str:
    """Resume text from the submitted form, else from the stored PDF."""
    form_data = application.form_data if isinstance(application.form_data, dict) else {}
    text = form_data.get("resume_text") or ""
    if text:
        return text

    if resume.file_type == "application/pdf" or resume.file_name.lower().endswith(".pdf"):
        try:
            return parse_pdf(file_storage.read_file(resume.storage_path))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read resume {resume.storage_path}: {e}")
    return ""


def _record(db: Session, application_id: str, analysis_type: str, result: dict, confidence=None):
    db.add(
        AIAnalysis(
            application_id=application_id,
            analysis_type=analysis_type,
            analysis_result=result,
            confidence_score=confidence,
            model_version=settings.gemini_model,
        )
    )
    db.commit()


def _link_skills(db: Session, applicant_id: str, skill_names: list[Any]) -> None:
    names = dict.fromkeys(n.strip() for n in skill_names if isinstance(n, str) and n.strip())
    for name in names:
        skill = db.scalar(select(Skill).where(Skill.name == name))
        if skill is None:
            skill = Skill(name=name)
            db.add(skill)
            db.flush()

        link = db.scalar(
            select(ApplicantSkill).where(
                ApplicantSkill.applicant_id == applicant_id, ApplicantSkill.skill_id == skill.id
            )
        )
        if link is None:
            db.add(ApplicantSkill(applicant_id=applicant_id, skill_id=skill.id, is_ai_detected=True))
            db.flush()
        else:
            link.is_ai_detected = True
    db.commit()


async def analyze_application(db: Session, application_id: str) -> dict[str, Any]:
    """
    Analyze the resume attached to an application.

    Returns:
        ``{"status": AnalysisStatus, "message": str}``

    Raises:
        LookupError: The application does not exist
    """
    application = db.get(Application, application_id)
    if application is None:
        raise LookupError("Application not found")

    resume = next((f for f in application.files if f.file_category == "resume"), None)
    if resume is None:
        message = "No resume file found for analysis"
        _record(db, application_id, "resume_analysis", {"status": "no_resume", "message": message})
        return {"status": AnalysisStatus.NO_RESUME, "message": message}

    resume_text = _resume_text(application, resume)
    if not resume_text.strip():
        _record(
            db,
            application_id,
            "resume_parsing",
            {"status": "pending", "message": "Resume text extraction required"},
        )
        return {
            "status": AnalysisStatus.PENDING,
            "message": "Resume text extraction required before analysis can proceed",
        }

    try:
        result = await ai_service.analyze_resume(resume_text)
    except Exception as e:
        logger.error(f"[{application_id}] Resume analysis error: {e}")
        db.rollback()
        _record(
            db,
            application_id,
            "resume_analysis",
            {"error": "Failed to analyze resume", "message": str(e)},
        )
        return {"status": AnalysisStatus.FAILED, "message": "Failed to analyze resume"}

    _record(db, application_id, "resume_analysis", result, confidence=DEFAULT_CONFIDENCE)

    skills = result.get("skills")
    if isinstance(skills, list):
        _link_skills(db, application.applicant_id, skills)

    logger.info(f"[{application_id}] Resume analysis completed")
    return {"status": AnalysisStatus.COMPLETED, "message": "Resume analysis completed"}
