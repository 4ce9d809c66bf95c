"""
Jobs API endpoints.
Handles comprehensive job posting submission, lookup and deletion.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobforms.database import get_db
from jobforms.models.job_posting import JobPosting
from jobforms.models.user import User
from jobforms.api.auth import get_current_user, require_employer
from jobforms.schemas.job import JobResponse, JobSubmission
from jobforms.schemas.prescreen import MAX_PRESCREEN_QUESTIONS
from jobforms.services.application_forms import get_job, orphan_forms_for_job
from jobforms.services.premium import PremiumFeature, has_premium_feature
from jobforms.services.prescreen import serialize_questions

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/comprehensive-post", response_model=JobResponse, status_code=201)
async def create_comprehensive_job(
    submission: JobSubmission,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a job posting from the comprehensive posting form.

    Prescreen questions are re-gated here: without the premium feature the
    stored list is empty no matter what the client sent. The poster is
    always the caller, whatever `postedById` says.

    Returns:
        201: Job created
        400: More prescreen questions than any posting mode allows
    """
    questions = submission.prescreen_questions
    if not has_premium_feature(PremiumFeature.PRESCREEN_QUESTIONS, current_user, current_user.subscription):
        if questions:
            logger.info(
                f"Dropping {len(questions)} prescreen questions from {current_user.email}: "
                f"premium feature not available"
            )
        questions = []
    elif len(questions) > MAX_PRESCREEN_QUESTIONS:
        raise HTTPException(
            status_code=400,
            detail=f"At most {MAX_PRESCREEN_QUESTIONS} prescreen questions are allowed"
        )

    if submission.posted_by_id is not None and submission.posted_by_id != current_user.id:
        logger.warning(
            f"postedById {submission.posted_by_id} does not match caller {current_user.id}; using caller"
        )

    job = JobPosting(
        title=submission.title,
        description=submission.description,
        company=submission.company,
        location=submission.location,
        job_type=submission.job_type,
        work_mode=submission.work_mode,
        experience_level=submission.experience_level,
        salary_min=submission.salary_min,
        salary_max=submission.salary_max,
        requirements=submission.requirements,
        skills_required=submission.skills_required,
        benefits=submission.benefits,
        application_deadline=submission.application_deadline,
        category=submission.category,
        application_method=submission.application_method,
        details=dict(submission.model_extra or {}),
        prescreen_questions=serialize_questions(questions),
        posted_by_id=current_user.id,
        status=submission.status,
        is_active=True
    )

    try:
        db.add(job)
        await db.commit()
        await db.refresh(job)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error creating job posting: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create job posting")

    log_data = {
        "job_id": job.id,
        "posted_by_id": str(current_user.id),
        "prescreen_count": len(job.prescreen_questions),
        "application_method": job.application_method,
    }
    logger.info(f"Created job {job.id}: {job.title} at {job.company}", extra=log_data)

    return job


@router.get("/{job_id}", response_model=JobResponse)
async def get_job_posting(
    job_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get an active job posting, including its prescreen questions."""
    job = await get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.delete("/{job_id}", status_code=204)
async def delete_job(
    job_id: int,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a job posting.

    The row is kept (applications reference it) but deactivated, and its
    application forms are orphaned (deactivated) with it.
    """
    job = await get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    if job.posted_by_id != current_user.id and not current_user.is_admin():
        raise HTTPException(status_code=403, detail="Unauthorized to delete this job")

    try:
        job.is_active = False
        job.status = "closed"
        orphaned = await orphan_forms_for_job(db, job.id)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error deleting job {job_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete job")

    logger.info(f"Deleted job {job_id} ({orphaned} form(s) orphaned)")

    return None
