"""Job posting Pydantic schemas."""
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from jobforms.schemas.prescreen import PrescreenQuestion


class JobSubmission(BaseModel):
    """
    Payload of POST /jobs/comprehensive-post.

    Superset object: the mapped basic fields below plus every raw field of
    the comprehensive posting form (kept as extras and stored in `details`).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow"
    )

    title: str
    description: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[str] = None
    work_mode: Optional[str] = None
    experience_level: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    requirements: Optional[str] = None
    skills_required: list[str] = Field(default_factory=list)
    benefits: Optional[str] = None
    application_deadline: Optional[str] = None
    category: Optional[str] = None
    application_method: str = "internal"
    prescreen_questions: list[PrescreenQuestion] = Field(default_factory=list)
    posted_by_id: Optional[UUID] = None
    status: str = "draft"


class JobResponse(BaseModel):
    """Schema for job posting response."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True
    )

    id: int
    title: str
    description: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[str] = None
    work_mode: Optional[str] = None
    experience_level: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    category: Optional[str] = None
    application_method: str
    prescreen_questions: list[dict[str, Any]] = Field(default_factory=list)
    details: Optional[dict[str, Any]] = None
    posted_by_id: UUID
    status: str
    is_active: bool
    created_at: datetime
