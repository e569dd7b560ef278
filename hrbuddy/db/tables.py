"""Database table models."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrbuddy.db.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class Applicant(Base):
    """A person who applied for one or more positions."""

    __tablename__ = "applicants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100), default=None)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    phone: Mapped[str | None] = mapped_column(String(50), default=None)
    location: Mapped[str | None] = mapped_column(String(255), default=None)
    linkedin_url: Mapped[str | None] = mapped_column(Text, default=None)
    portfolio_url: Mapped[str | None] = mapped_column(Text, default=None)
    source: Mapped[str | None] = mapped_column(String(100), default=None)  # referral source
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    applications: Mapped[list["Application"]] = relationship(
        back_populates="applicant",
        cascade="all, delete-orphan",
        order_by="Application.applied_at.desc()",
    )
    skills: Mapped[list["ApplicantSkill"]] = relationship(
        back_populates="applicant", cascade="all, delete-orphan"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()


class Position(Base):
    """An open role."""

    __tablename__ = "positions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    title: Mapped[str] = mapped_column(String(255))
    department: Mapped[str] = mapped_column(String(100), default="General")
    description: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    applications: Mapped[list["Application"]] = relationship(back_populates="position")


class Application(Base):
    """An applicant's application for a position."""

    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    applicant_id: Mapped[str] = mapped_column(ForeignKey("applicants.id", ondelete="CASCADE"))
    position_id: Mapped[str] = mapped_column(ForeignKey("positions.id"))
    status: Mapped[str] = mapped_column(String(30), default="new")
    cover_letter: Mapped[str | None] = mapped_column(Text, default=None)
    form_data: Mapped[dict | None] = mapped_column(JSON, default=None)  # raw webhook payload
    applied_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    applicant: Mapped["Applicant"] = relationship(back_populates="applications")
    position: Mapped["Position"] = relationship(back_populates="applications")
    stages: Mapped[list["ApplicationStage"]] = relationship(
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="ApplicationStage.changed_at.desc()",
    )
    files: Mapped[list["File"]] = relationship(
        back_populates="application", cascade="all, delete-orphan"
    )
    ai_analyses: Mapped[list["AIAnalysis"]] = relationship(
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="AIAnalysis.created_at.desc()",
    )


class ApplicationStage(Base):
    """A stage change in an application's history."""

    __tablename__ = "application_stages"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    application_id: Mapped[str] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"))
    stage: Mapped[str] = mapped_column(String(50))
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    changed_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    changed_by: Mapped[str] = mapped_column(String(100), default="system")

    application: Mapped["Application"] = relationship(back_populates="stages")


class Skill(Base):
    """A named skill shared across applicants."""

    __tablename__ = "skills"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    category: Mapped[str | None] = mapped_column(String(100), default=None)


class ApplicantSkill(Base):
    """Link between an applicant and a skill."""

    __tablename__ = "applicant_skills"
    __table_args__ = (UniqueConstraint("applicant_id", "skill_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    applicant_id: Mapped[str] = mapped_column(ForeignKey("applicants.id", ondelete="CASCADE"))
    skill_id: Mapped[str] = mapped_column(ForeignKey("skills.id"))
    years_experience: Mapped[float | None] = mapped_column(Float, default=None)
    proficiency_level: Mapped[int | None] = mapped_column(Integer, default=None)
    is_highlighted: Mapped[bool] = mapped_column(Boolean, default=False)
    is_ai_detected: Mapped[bool] = mapped_column(Boolean, default=False)

    applicant: Mapped["Applicant"] = relationship(back_populates="skills")
    skill: Mapped["Skill"] = relationship()


class File(Base):
    """A stored file attached to an application."""

    __tablename__ = "files"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    application_id: Mapped[str] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"))
    file_name: Mapped[str] = mapped_column(String(255))
    file_type: Mapped[str] = mapped_column(String(100))
    file_size: Mapped[int] = mapped_column(Integer, default=0)
    storage_path: Mapped[str] = mapped_column(Text)
    file_category: Mapped[str] = mapped_column(String(50), default="resume")  # resume, cover_letter, other
    uploaded_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    application: Mapped["Application"] = relationship(back_populates="files")


class AIAnalysis(Base):
    """Stored output of an AI analysis run."""

    __tablename__ = "ai_analyses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    application_id: Mapped[str] = mapped_column(ForeignKey("applications.id", ondelete="CASCADE"))
    analysis_type: Mapped[str] = mapped_column(String(50))  # resume_analysis, resume_parsing
    analysis_result: Mapped[dict] = mapped_column(JSON, default=dict)
    confidence_score: Mapped[float | None] = mapped_column(Float, default=None)
    model_version: Mapped[str | None] = mapped_column(String(100), default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    application: Mapped["Application"] = relationship(back_populates="ai_analyses")
