"""
Natural-language applicant search.

Turns the loosely-typed object Gemini extracts from a query into a
``QueryFilter`` and runs it against applications.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session, selectinload

from hrbuddy.db import AIAnalysis, Applicant, ApplicantSkill, Application, Position, Skill

logger = logging.getLogger(__name__)


def _string_set(value: Any) -> set[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return set()
    return {item.strip() for item in value if isinstance(item, str) and item.strip()}


@dataclass
class QueryFilter:
    """Search criteria. Empty fields place no constraint."""

    skills: set[str] = field(default_factory=set)
    experience: float | None = None
    job_titles: set[str] = field(default_factory=set)
    education: str | None = None

    @classmethod
    def from_interpreted(cls, data: dict[str, Any]) -> "QueryFilter":
        """Build a filter, dropping any field with an unexpected type."""
        experience = data.get("experience")
        if isinstance(experience, bool) or not isinstance(experience, (int, float)) or experience <= 0:
            experience = None

        education = data.get("education")
        if not isinstance(education, str) or not education.strip():
            education = None

        return cls(
            skills=_string_set(data.get("skills")),
            experience=experience,
            job_titles=_string_set(data.get("jobTitles")),
            education=education.strip() if education else None,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.skills or self.experience or self.job_titles or self.education)


def build_conditions(query_filter: QueryFilter) -> list:
    """SQL conditions on Application for each constraint in the filter."""
    conditions = []

    if query_filter.skills:
        names = [s.lower() for s in query_filter.skills]
        conditions.append(
            Application.applicant.has(
                Applicant.skills.any(ApplicantSkill.skill.has(func.lower(Skill.name).in_(names)))
            )
        )

    if query_filter.experience:
        conditions.append(
            Application.applicant.has(
                Applicant.skills.any(ApplicantSkill.years_experience >= query_filter.experience)
            )
        )

    if query_filter.job_titles:
        titles = [t.lower() for t in query_filter.job_titles]
        conditions.append(Application.position.has(func.lower(Position.title).in_(titles)))

    if query_filter.education:
        conditions.append(
            Application.ai_analyses.any(
                and_(
                    AIAnalysis.analysis_type == "resume_analysis",
                    AIAnalysis.analysis_result["education"].as_string().ilike(f"%{query_filter.education}%"),
                )
            )
        )

    return conditions


def search_applications(db: Session, query_filter: QueryFilter) -> list[Application]:
    """Find applications matching every constraint, most recently updated first."""
    stmt = (
        select(Application)
        .options(
            selectinload(Application.applicant),
            selectinload(Application.position),
            selectinload(Application.files),
            selectinload(Application.ai_analyses),
        )
        .order_by(Application.updated_at.desc())
    )
    conditions = build_conditions(query_filter)
    if conditions:
        stmt = stmt.where(and_(*conditions))

    applications = list(db.scalars(stmt).all())
    logger.info(f"Search matched {len(applications)} applications")
    return applications


def format_result(application: Application) -> dict[str, Any]:
    applicant = application.applicant
    resume = next((f for f in application.files if f.file_category == "resume"), None)
    analysis = next(
        (a for a in application.ai_analyses if a.analysis_type == "resume_analysis"), None
    )
    return {
        "id": application.id,
        "applicant": {
            "id": applicant.id,
            "name": applicant.full_name,
            "email": applicant.email,
            "phone": applicant.phone,
            "location": applicant.location,
        },
        "position": {
            "id": application.position.id,
            "title": application.position.title,
        },
        "status": application.status,
        "appliedAt": application.applied_at,
        "resumeUrl": resume.storage_path if resume else None,
        "aiAnalysis": analysis.analysis_result if analysis else None,
    }
