"""
Job application API endpoints.
Collects answers to a job's application form and prescreen questions, and
renders them back for review.
"""
import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobforms.database import get_db
from jobforms.models.job_application import JobApplication
from jobforms.models.user import User
from jobforms.api.auth import get_current_user
from jobforms.schemas.application import (
    ApplicationAnswersResponse,
    ApplicationCreate,
    ApplicationResponse,
    RenderedAnswerResponse,
)
from jobforms.services.application_forms import get_active_form, get_form, get_job, screening_fields
from jobforms.services.form_renderer import normalize_fields, render_answers, validate_answers

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/jobs/{job_id}/apply", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(
    job_id: int,
    request: ApplicationCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Submit an application for a job.

    Answers are checked against the job's active form (or the default
    application fields) plus its prescreen questions.

    Returns:
        201: Application stored
        400: Job does not accept internal applications
        404: Job not found
        409: Caller already applied
        422: Answers failed validation; `detail.errors` maps field id to message
    """
    job = await get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    if job.application_method and job.application_method != "internal":
        raise HTTPException(
            status_code=400,
            detail="This job uses external or email application method"
        )

    existing = await db.execute(
        select(JobApplication).where(
            JobApplication.job_id == job.id,
            JobApplication.applicant_id == current_user.id
        )
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="You have already applied for this job")

    form = await get_active_form(db, job.id)
    if request.form_id is not None and (form is None or form.id != request.form_id):
        logger.warning(
            f"Application to job {job.id} referenced form {request.form_id}; "
            f"active form is {form.id if form else None}"
        )

    fields = normalize_fields(screening_fields(form)) + normalize_fields(job.prescreen_questions)
    errors = validate_answers(fields, request.application_data)
    if errors:
        logger.info(f"Application to job {job.id} rejected: {len(errors)} invalid answer(s)")
        raise HTTPException(
            status_code=422,
            detail={"message": "Some answers are missing or invalid", "errors": errors}
        )

    try:
        application = JobApplication(
            job_id=job.id,
            applicant_id=current_user.id,
            form_id=form.id if form else None,
            application_data=request.application_data,
            cover_letter=request.cover_letter,
            status="pending"
        )
        db.add(application)
        await db.commit()
        await db.refresh(application)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error applying to job {job.id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to apply")

    logger.info(f"User {current_user.email} applied to job {job.id} (application {application.id})")

    return application


@router.get("/applications/{application_id}/answers", response_model=ApplicationAnswersResponse)
async def get_application_answers(
    application_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Render an application's answers in form order.

    Visible to the applicant, the job's poster and admins. Unanswered
    questions show as "—".
    """
    result = await db.execute(
        select(JobApplication).where(JobApplication.id == application_id)
    )
    application = result.scalar_one_or_none()
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    job = await get_job(db, application.job_id, active_only=False)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    allowed = (
        application.applicant_id == current_user.id
        or job.posted_by_id == current_user.id
        or current_user.is_admin()
    )
    if not allowed:
        raise HTTPException(status_code=403, detail="Unauthorized to view this application")

    # Prefer the form the applicant actually answered, even if since orphaned
    form = None
    if application.form_id is not None:
        form = await get_form(db, application.form_id, active_only=False)
    if form is None:
        form = await get_active_form(db, job.id)

    answers = render_answers(screening_fields(form), application.application_data)
    prescreen_answers = render_answers(job.prescreen_questions, application.application_data)

    return ApplicationAnswersResponse(
        application_id=application.id,
        job_id=job.id,
        form_title=form.title if form else None,
        answers=[RenderedAnswerResponse(**asdict(a)) for a in answers],
        prescreen_answers=[RenderedAnswerResponse(**asdict(a)) for a in prescreen_answers],
    )
