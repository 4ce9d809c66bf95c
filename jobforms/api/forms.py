"""
Application forms API endpoints.
Stores the Form Definitions produced by the form builder, one active form per job.
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobforms.database import get_db
from jobforms.models.application_form import ApplicationForm
from jobforms.models.user import User
from jobforms.api.auth import get_optional_user, require_employer
from jobforms.schemas.form import (
    FormEnvelope,
    FormListEnvelope,
    FormResponse,
    FormSaveRequest,
    FormSummary,
    dump_fields,
)
from jobforms.services.application_forms import get_active_form, get_form, get_job

logger = logging.getLogger(__name__)
router = APIRouter()


# Endpoints
@router.post("/", response_model=FormEnvelope, status_code=201)
async def create_form(
    request: FormSaveRequest,
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """
    Create the application form for a job the caller posted.

    Returns:
        201: Form created
        400: Missing job id, title or fields
        404: Job not found or not posted by the caller
        409: The job already has an active form
    """
    logger.info(
        f"Application form creation attempt: user={current_user.id} job={request.job_id} "
        f"fields={len(request.fields or [])}"
    )

    if request.job_id is None:
        raise HTTPException(status_code=400, detail="Job ID is required")
    if not request.title or request.fields is None:
        raise HTTPException(status_code=400, detail="Form title and fields are required")

    job = await get_job(db, request.job_id)
    if not job or job.posted_by_id != current_user.id:
        raise HTTPException(status_code=404, detail="Job not found or unauthorized")

    if await get_active_form(db, job.id):
        raise HTTPException(status_code=409, detail="An application form for this job already exists")

    try:
        form = ApplicationForm(
            job_id=job.id,
            created_by=current_user.id,
            title=request.title,
            description=request.description or None,
            fields=dump_fields(request.fields),
            is_active=True
        )
        db.add(form)
        await db.commit()
        await db.refresh(form)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error creating application form: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create application form")

    logger.info(f"Application form {form.id} created for job {form.job_id}: {form.title}")

    return FormEnvelope(
        message="Application form created successfully",
        form=FormResponse.model_validate(form)
    )


@router.get("/")
async def get_forms(
    form_id: Optional[int] = Query(None, alias="formId", description="Fetch one form by id"),
    job_id: Optional[int] = Query(None, alias="jobId", description="Fetch the active form of a job"),
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Fetch application forms.

    - `?formId=`: a single active form (404 if missing)
    - `?jobId=`: the job's active form, or `form: null` when the job uses the default form
    - no parameters: the caller's own active forms, newest first (auth required)
    """
    if form_id is not None:
        form = await get_form(db, form_id)
        if not form:
            raise HTTPException(status_code=404, detail="Form not found")
        return FormEnvelope(form=FormResponse.model_validate(form))

    if job_id is not None:
        form = await get_active_form(db, job_id)
        if not form:
            return FormEnvelope(
                form=None,
                message="No custom form found for this job. Using default form."
            )
        return FormEnvelope(form=FormResponse.model_validate(form))

    if current_user is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    result = await db.execute(
        select(ApplicationForm)
        .where(
            ApplicationForm.created_by == current_user.id,
            ApplicationForm.is_active.is_(True)
        )
        .order_by(ApplicationForm.created_at.desc(), ApplicationForm.id.desc())
    )
    forms = result.scalars().all()

    return FormListEnvelope(forms=[FormSummary.model_validate(f) for f in forms])


@router.put("/", response_model=FormEnvelope)
async def update_form(
    request: FormSaveRequest,
    form_id: Optional[int] = Query(None, alias="id"),
    current_user: User = Depends(require_employer),
    db: AsyncSession = Depends(get_db)
):
    """
    Replace a form's title, description and fields.

    Only the form's creator or a super admin may update it. Field order in
    the body becomes the stored order.
    """
    if form_id is None:
        raise HTTPException(status_code=400, detail="Form ID is required")
    if not request.title or request.fields is None:
        raise HTTPException(status_code=400, detail="Form title and fields are required")

    form = await get_form(db, form_id, active_only=False)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")

    if form.created_by != current_user.id and not current_user.is_super_admin():
        logger.warning(f"User {current_user.email} attempted to update form {form_id} they do not own")
        raise HTTPException(status_code=403, detail="Unauthorized to update this form")

    try:
        form.title = request.title
        form.description = request.description or None
        form.fields = dump_fields(request.fields)
        form.updated_at = datetime.utcnow()
        await db.commit()
        await db.refresh(form)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error updating application form {form_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update application form")

    logger.info(f"Application form {form.id} updated ({len(request.fields)} fields)")

    return FormEnvelope(
        message="Application form updated successfully",
        form=FormResponse.model_validate(form)
    )
