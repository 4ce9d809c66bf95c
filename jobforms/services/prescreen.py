"""
Prescreen questions attached to a job posting draft.

Business rules:
- A draft holds at most 3 questions in manual mode and 5 in AI mode;
  `add_question` refuses past the cap.
- Every change to a non-empty list is written to the draft cache under
  `<prefix>-<user_id|anonymous>`; a new draft without initial data
  restores from that entry.
- Any submit attempt, successful or not, deletes the cache entry.
- Without the prescreen premium feature the submitted question list is
  always empty, whatever the draft holds.
"""
import json
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from pydantic import TypeAdapter, ValidationError

from jobforms.config import settings
from jobforms.models.subscription import Subscription
from jobforms.models.user import User
from jobforms.schemas.prescreen import (
    DEFAULT_PRESCREEN_QUESTIONS,
    PRESCREEN_LIMITS,
    PostingMode,
    PrescreenQuestion,
)
from jobforms.services.draft_store import DraftStore, draft_key
from jobforms.services.premium import PremiumFeature, has_premium_feature

logger = logging.getLogger(__name__)

SubmitHandler = Callable[[dict[str, Any]], Awaitable[Any]]

DEFAULT_QUESTION_COUNT = 3

_questions_adapter = TypeAdapter(list[PrescreenQuestion])


def serialize_questions(questions: list[PrescreenQuestion]) -> list[dict[str, Any]]:
    return [q.model_dump(mode="json", exclude_none=True) for q in questions]


def parse_questions(raw: str) -> list[PrescreenQuestion]:
    """Decode a cached question list. Raises ValueError on bad data."""
    try:
        return _questions_adapter.validate_python(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ValueError(f"Invalid prescreen draft: {e}") from e


def default_questions(count: int = DEFAULT_QUESTION_COUNT) -> list[PrescreenQuestion]:
    return [q.model_copy(deep=True) for q in DEFAULT_PRESCREEN_QUESTIONS[:count]]


def _parse_int(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class PrescreenDraft:
    """Prescreen question list of one job posting being drafted."""

    def __init__(
        self,
        store: DraftStore,
        user_id: Optional[object] = None,
        mode: PostingMode | str = PostingMode.MANUAL,
        initial_data: Optional[dict[str, Any]] = None,
        key_prefix: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.user_id = user_id
        self.mode = PostingMode(mode)
        self.initial_data = initial_data
        self.key = draft_key(key_prefix or settings.draft_key_prefix, user_id)
        self._clock = clock

        self.questions: list[PrescreenQuestion] = []
        self.using_defaults = False
        if initial_data is not None:
            self.questions = _questions_adapter.validate_python(
                initial_data.get("prescreenQuestions") or []
            )
            self.using_defaults = bool(initial_data.get("useDefaultQuestions", False))

    @classmethod
    async def open(cls, store: DraftStore, **kwargs: Any) -> "PrescreenDraft":
        """Create a draft and restore cached questions when no initial data was given."""
        draft = cls(store, **kwargs)
        if draft.initial_data is None:
            await draft.restore()
        return draft

    @property
    def limit(self) -> int:
        return PRESCREEN_LIMITS[self.mode]

    @property
    def can_add(self) -> bool:
        return len(self.questions) < self.limit

    @property
    def can_load_defaults(self) -> bool:
        return not self.using_defaults

    # ------------------------------------------------------------
    # Draft cache
    # ------------------------------------------------------------

    async def restore(self) -> bool:
        """Load questions from the draft cache. Returns True if anything was restored."""
        saved = await self.store.get(self.key)
        if not saved:
            return False
        try:
            questions = parse_questions(saved)
        except ValueError as e:
            logger.error(f"Error loading saved prescreen questions for {self.key}: {str(e)}")
            return False
        if not questions:
            return False
        if len(questions) > self.limit:
            logger.warning(
                f"Saved prescreen draft {self.key} has {len(questions)} questions, "
                f"keeping first {self.limit} ({self.mode.value} mode)"
            )
            questions = questions[:self.limit]
        self.questions = questions
        logger.info(f"Restored {len(questions)} prescreen questions from {self.key}")
        return True

    async def _autosave(self) -> None:
        if self.questions:
            await self.store.set(self.key, json.dumps(serialize_questions(self.questions)))

    # ------------------------------------------------------------
    # Question operations
    # ------------------------------------------------------------

    def _new_id(self) -> int:
        taken = {q.id for q in self.questions}
        candidate = int(self._clock() * 1000)
        while candidate in taken:
            candidate += 1
        return candidate

    async def add_question(self) -> Optional[PrescreenQuestion]:
        """Append an empty text question. Returns None once the mode's cap is reached."""
        if not self.can_add:
            logger.debug(f"Prescreen cap of {self.limit} reached for {self.key}")
            return None
        question = PrescreenQuestion(id=self._new_id(), type="text", question="", options=[], required=False)
        self.questions.append(question)
        await self._autosave()
        return question

    async def update_question(self, index: int, **changes: Any) -> Optional[PrescreenQuestion]:
        if not (0 <= index < len(self.questions)):
            return None
        changes.pop("id", None)
        updated = PrescreenQuestion.model_validate({**self.questions[index].model_dump(), **changes})
        self.questions[index] = updated
        await self._autosave()
        return updated

    async def remove_question(self, index: int) -> bool:
        if not (0 <= index < len(self.questions)):
            return False
        del self.questions[index]
        await self._autosave()
        return True

    async def load_default_questions(self) -> list[PrescreenQuestion]:
        """Replace the list with the first three default template questions."""
        self.questions = default_questions()
        self.using_defaults = True
        await self._autosave()
        return self.questions

    def clear_defaults(self) -> None:
        self.using_defaults = False

    # ------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------

    def build_submission(
        self,
        form_data: dict[str, Any],
        user: Optional[User],
        subscription: Optional[Subscription]
    ) -> dict[str, Any]:
        """
        Map comprehensive posting form data to the job postings API payload.

        Mapped basic fields come first, then every raw form field, then the
        gated prescreen list, owner and status (which always win).
        """
        city = form_data.get("city") or ""
        state = form_data.get("state") or ""
        gated = has_premium_feature(PremiumFeature.PRESCREEN_QUESTIONS, user, subscription)

        payload: dict[str, Any] = {
            "title": form_data.get("jobTitle"),
            "description": form_data.get("jobDescription"),
            "company": form_data.get("companyName"),
            "location": f"{city}, {state}",
            "jobType": form_data.get("jobType"),
            "workMode": form_data.get("workMode"),
            "experienceLevel": form_data.get("experienceLevel"),
            "salaryMin": _parse_int(form_data.get("customSalaryMin")),
            "salaryMax": _parse_int(form_data.get("customSalaryMax")),
            "requirements": form_data.get("qualification"),
            "skillsRequired": form_data.get("requiredSkills") or [],
            "benefits": form_data.get("benefits"),
            "applicationDeadline": form_data.get("applicationDeadline"),
            "category": form_data.get("industry"),
        }
        payload.update(form_data)
        payload.update({
            "hasPlacementFee": bool(form_data.get("hasPlacementFee")),
            "isPlacement": bool(form_data.get("isPlacement")),
            "useDefaultQuestions": self.using_defaults,
            "prescreenQuestions": serialize_questions(self.questions) if gated else [],
            "postedById": str(user.id) if user is not None else None,
            "status": "draft",
        })
        if not gated and self.questions:
            logger.info(f"Dropping {len(self.questions)} prescreen questions: premium feature not available")
        return payload

    async def submit(
        self,
        form_data: dict[str, Any],
        user: Optional[User],
        subscription: Optional[Subscription],
        on_submit: SubmitHandler
    ) -> Any:
        """
        Build the payload and hand it to `on_submit`.

        The draft cache entry is removed whether or not the submission
        succeeds; errors from `on_submit` propagate to the caller.
        """
        payload = self.build_submission(form_data, user, subscription)
        try:
            return await on_submit(payload)
        except Exception as e:
            logger.error(f"Job posting submission failed for {self.key}: {str(e)}", exc_info=True)
            raise
        finally:
            await self.store.delete(self.key)
