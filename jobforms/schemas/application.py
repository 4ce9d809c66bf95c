"""Job application Pydantic schemas."""
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApplicationCreate(BaseModel):
    """Body of POST /jobs/{job_id}/apply."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    form_id: Optional[int] = None
    application_data: dict[str, Any] = Field(default_factory=dict)
    cover_letter: Optional[str] = None


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True
    )

    id: int
    job_id: int
    applicant_id: UUID
    form_id: Optional[int] = None
    status: str
    applied_at: datetime


class RenderedAnswerResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    field_id: str
    label: str
    answer: str


class ApplicationAnswersResponse(BaseModel):
    """Read-only view of an application's answers in form order."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    application_id: int
    job_id: int
    form_title: Optional[str] = None
    answers: list[RenderedAnswerResponse] = Field(default_factory=list)
    prescreen_answers: list[RenderedAnswerResponse] = Field(default_factory=list)
