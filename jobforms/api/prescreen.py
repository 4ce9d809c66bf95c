"""
Prescreen question endpoints: default templates and the per-user draft cache.
"""
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobforms.config import settings
from jobforms.database import get_db
from jobforms.models.user import User
from jobforms.api.auth import get_current_user
from jobforms.schemas.prescreen import (
    MAX_PRESCREEN_QUESTIONS,
    PRESCREEN_LIMITS,
    PostingMode,
    PrescreenDraftRequest,
    PrescreenDraftResponse,
)
from jobforms.services.draft_store import DatabaseDraftStore, draft_key
from jobforms.services.premium import PremiumFeature, has_premium_feature
from jobforms.services.prescreen import default_questions, parse_questions, serialize_questions

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/prescreen/defaults")
async def get_default_questions(
    mode: PostingMode = Query(PostingMode.MANUAL, description="Posting mode (manual | ai)")
):
    """Default prescreen template (first three questions) and the mode's cap."""
    return {
        "mode": mode.value,
        "limit": PRESCREEN_LIMITS[mode],
        "questions": serialize_questions(default_questions()),
    }


@router.get("/drafts/prescreen", response_model=PrescreenDraftResponse)
async def get_prescreen_draft(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Caller's saved prescreen draft; an unreadable entry reads as empty."""
    key = draft_key(settings.draft_key_prefix, current_user.id)
    saved = await DatabaseDraftStore(db).get(key)
    if not saved:
        return PrescreenDraftResponse(key=key)
    try:
        questions = parse_questions(saved)
    except ValueError as e:
        logger.error(f"Error loading saved prescreen questions for {key}: {str(e)}")
        questions = []
    return PrescreenDraftResponse(key=key, questions=questions)


@router.put("/drafts/prescreen", response_model=PrescreenDraftResponse)
async def save_prescreen_draft(
    request: PrescreenDraftRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Overwrite the caller's prescreen draft (latest write wins).

    An empty list is not written, matching the client's auto-save which
    only persists non-empty drafts. Callers without the prescreen feature
    get 403.
    """
    if not has_premium_feature(PremiumFeature.PRESCREEN_QUESTIONS, current_user, current_user.subscription):
        logger.info(f"Rejected prescreen draft from {current_user.email}: premium feature not available")
        raise HTTPException(
            status_code=403,
            detail="Prescreen questions require a premium subscription"
        )

    if len(request.questions) > MAX_PRESCREEN_QUESTIONS:
        raise HTTPException(
            status_code=400,
            detail=f"At most {MAX_PRESCREEN_QUESTIONS} prescreen questions are allowed"
        )

    key = draft_key(settings.draft_key_prefix, current_user.id)
    if request.questions:
        await DatabaseDraftStore(db).set(key, json.dumps(serialize_questions(request.questions)))
        logger.info(f"Saved prescreen draft {key} ({len(request.questions)} questions)")
    return PrescreenDraftResponse(key=key, questions=request.questions)


@router.delete("/drafts/prescreen", status_code=204)
async def delete_prescreen_draft(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    key = draft_key(settings.draft_key_prefix, current_user.id)
    await DatabaseDraftStore(db).delete(key)
    return None
