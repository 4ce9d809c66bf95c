"""Application form persistence helpers shared by the forms, jobs and applications routers."""
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from jobforms.models.application_form import ApplicationForm
from jobforms.models.job_posting import JobPosting
from jobforms.schemas.form import dump_fields
from jobforms.services.form_builder import default_fields

logger = logging.getLogger(__name__)


async def get_active_form(db: AsyncSession, job_id: int) -> Optional[ApplicationForm]:
    result = await db.execute(
        select(ApplicationForm).where(
            ApplicationForm.job_id == job_id,
            ApplicationForm.is_active.is_(True)
        )
    )
    return result.scalars().first()


async def get_form(db: AsyncSession, form_id: int, active_only: bool = True) -> Optional[ApplicationForm]:
    query = select(ApplicationForm).where(ApplicationForm.id == form_id)
    if active_only:
        query = query.where(ApplicationForm.is_active.is_(True))
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_job(db: AsyncSession, job_id: int, active_only: bool = True) -> Optional[JobPosting]:
    query = select(JobPosting).where(JobPosting.id == job_id)
    if active_only:
        query = query.where(JobPosting.is_active.is_(True))
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def orphan_forms_for_job(db: AsyncSession, job_id: int) -> int:
    """
    Deactivate every form bound to `job_id`. Returns the number of forms touched.
    Commit handled by caller.
    """
    result = await db.execute(
        update(ApplicationForm)
        .where(
            ApplicationForm.job_id == job_id,
            ApplicationForm.is_active.is_(True)
        )
        .values(is_active=False, updated_at=datetime.utcnow())
    )
    if result.rowcount:
        logger.info(f"Orphaned {result.rowcount} application form(s) of job {job_id}")
    return result.rowcount or 0


def screening_fields(form: Optional[ApplicationForm]) -> list[dict[str, Any]]:
    """Fields an applicant must answer: the job's custom form, or the default starter set."""
    if form is not None:
        return form.fields or []
    return dump_fields(default_fields())
