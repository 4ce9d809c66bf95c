"""Prescreen question Pydantic schemas."""
import enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class PostingMode(str, enum.Enum):
    """How a job posting is authored; decides the prescreen question cap."""
    MANUAL = "manual"
    AI = "ai"


PRESCREEN_LIMITS: dict[PostingMode, int] = {
    PostingMode.MANUAL: 3,
    PostingMode.AI: 5,
}

# Highest cap of any mode; the server never stores more than this
MAX_PRESCREEN_QUESTIONS = max(PRESCREEN_LIMITS.values())


class PrescreenQuestion(BaseModel):
    """One question embedded directly in a job posting draft."""
    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    type: Literal["text", "select", "textarea"] = "text"
    question: str = ""
    options: list[str] = Field(default_factory=list)
    required: bool = False
    placeholder: Optional[str] = None


DEFAULT_PRESCREEN_QUESTIONS: list[PrescreenQuestion] = [
    PrescreenQuestion(
        id="years_experience",
        type="select",
        question="How many years of relevant experience do you have?",
        options=["Less than 1 year", "1-2 years", "3-5 years", "6-10 years", "More than 10 years"],
        required=True,
    ),
    PrescreenQuestion(
        id="salary_expectation",
        type="text",
        question="What is your salary expectation for this role?",
        placeholder="e.g., ₱50,000 per month",
        required=False,
    ),
    PrescreenQuestion(
        id="availability",
        type="select",
        question="When are you available to start?",
        options=["Immediately", "Within 1 week", "Within 2 weeks", "Within 1 month", "More than 1 month"],
        required=True,
    ),
    PrescreenQuestion(
        id="location_preference",
        type="select",
        question="Are you open to working on-site?",
        options=[
            "Yes, I prefer on-site work",
            "Yes, but prefer hybrid",
            "Remote work only",
            "Flexible with any arrangement",
        ],
        required=True,
    ),
    PrescreenQuestion(
        id="work_authorization",
        type="select",
        question="Do you have authorization to work in the Philippines?",
        options=["Yes, I am a Filipino citizen", "Yes, I have a work permit", "No, I would need sponsorship"],
        required=True,
    ),
]


class PrescreenDraftRequest(BaseModel):
    """Body of PUT /drafts/prescreen."""
    questions: list[PrescreenQuestion]


class PrescreenDraftResponse(BaseModel):
    key: str
    questions: list[PrescreenQuestion] = Field(default_factory=list)
