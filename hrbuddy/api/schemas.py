"""API request/response schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON keys are camelCase; snake_case field names are accepted on input too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Auth schemas
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class SessionUser(BaseModel):
    id: str
    name: str
    email: str
    role: str


# Applicant schemas
class SkillInput(CamelModel):
    id: str | None = Field(default=None, description="Existing applicant-skill link to update")
    name: str | None = None
    category: str | None = None
    years_experience: float | None = None
    proficiency_level: int | None = None
    is_highlighted: bool = False


class PositionInput(CamelModel):
    id: str | None = None
    title: str
    department: str = "General"
    description: str = ""
    cover_letter: str = ""


class ApplicantCreate(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone: str | None = None
    location: str | None = None
    linkedin_url: str | None = None
    portfolio_url: str | None = None
    source: str | None = None
    skills: list[SkillInput] = []
    position: PositionInput | None = None


class ApplicantUpdate(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    location: str | None = None
    linkedin_url: str | None = None
    portfolio_url: str | None = None
    source: str | None = None
    skills: list[SkillInput] | None = None
    remove_skills: list[str] = Field(default=[], description="Skill IDs to unlink")


class ApplicantSkillResponse(CamelModel):
    id: str
    name: str
    category: str | None = None
    years_experience: float | None
    proficiency_level: int | None = None
    is_highlighted: bool = False
    is_ai_detected: bool


class PositionSummary(CamelModel):
    id: str
    title: str
    department: str | None = None


class ApplicationSummary(CamelModel):
    id: str
    title: str
    status: str
    applied_at: datetime


class StoredFileResponse(CamelModel):
    id: str
    file_name: str
    file_type: str
    file_category: str
    uploaded_at: datetime
    storage_path: str


class StageResponse(CamelModel):
    id: str
    stage: str
    notes: str | None
    changed_at: datetime
    changed_by: str


class AnalysisResponse(CamelModel):
    id: str
    type: str
    result: dict[str, Any]
    confidence_score: float | None
    created_at: datetime


class ApplicationResponse(CamelModel):
    id: str
    position: PositionSummary
    status: str
    applied_at: datetime
    updated_at: datetime
    cover_letter: str | None
    files: list[StoredFileResponse]
    stages: list[StageResponse]
    ai_analysis: AnalysisResponse | None


class ApplicantDetailResponse(CamelModel):
    id: str
    first_name: str
    last_name: str | None
    full_name: str
    email: str
    phone: str | None
    location: str | None
    linkedin_url: str | None
    portfolio_url: str | None
    source: str | None
    created_at: datetime
    updated_at: datetime
    applications: list[ApplicationResponse]
    skills: list[ApplicantSkillResponse]


class ApplicantListItem(CamelModel):
    id: str
    name: str
    email: str
    phone: str | None
    location: str | None
    positions: list[ApplicationSummary]
    skills: list[ApplicantSkillResponse]


class ApplicantListResponse(CamelModel):
    applicants: list[ApplicantListItem]
    count: int


class ApplicantRef(CamelModel):
    id: str
    first_name: str
    last_name: str | None
    email: str
    updated_at: datetime | None = None


class ApplicantMutationResponse(CamelModel):
    success: bool = True
    applicant: ApplicantRef


class WorkflowRequest(CamelModel):
    position_title: str
    stage: str
    list_id: str
    comments: str | None = None


# Search schemas
class SearchRequest(BaseModel):
    query: str = ""


# Email schemas
class EmailRequest(CamelModel):
    to: EmailStr | list[EmailStr]
    subject: str = Field(min_length=1)
    html: str = Field(min_length=1)
    from_email: EmailStr | None = Field(default=None, alias="from")
    cc: EmailStr | list[EmailStr] | None = None
    bcc: EmailStr | list[EmailStr] | None = None
    reply_to: EmailStr | None = None


# MCP schemas
class McpRequest(BaseModel):
    service: Literal["clickup", "neon"]
    operation: str
    params: dict[str, Any] = {}


# Webhook / analysis schemas
class ZapierSubmission(BaseModel):
    """Form submission forwarded by Zapier. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    email: EmailStr
    first_name: str
    last_name: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin_url: str | None = None
    portfolio_url: str | None = None
    referral_source: str | None = None
    position_applied: str
    department: str | None = None
    position_description: str | None = None
    cover_letter: str | None = None
    resume_url: str | None = None
    resume_filename: str | None = None
    resume_content_type: str | None = None
    resume_text: str | None = None


class AnalysisQueueRequest(BaseModel):
    application_id: str


# Dashboard schemas
class DashboardStats(CamelModel):
    applicant_count: int
    application_count: int
    position_count: int
    recent_applicants: list[ApplicantListItem]
