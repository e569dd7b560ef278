"""Database package."""

from hrbuddy.db.base import Base, get_db, init_db
from hrbuddy.db.tables import (
    AIAnalysis,
    Applicant,
    ApplicantSkill,
    Application,
    ApplicationStage,
    File,
    Position,
    Skill,
)

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "Applicant",
    "Position",
    "Application",
    "ApplicationStage",
    "Skill",
    "ApplicantSkill",
    "File",
    "AIAnalysis",
]
