"""
Jobs API endpoints.
Handles job CRUD for a company and bulk import from CSV/Excel files.
"""
import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.database import get_db
from app.models.job import Job, JobStatus
from app.models.user import User
from app.api.auth import get_current_user
from app.api.companies import get_company_for_owner
from app.schemas.job import (
    JobCreate,
    JobUpdate,
    JobResponse,
    JobImportUrlRequest,
    JobImportResponse,
)
from app.services.import_files import ImportFileError, read_job_rows, fetch_job_rows
from app.services.job_import import SlugListingError, import_jobs
from app.services.job_store import SqlAlchemyJobStore
from app.services.slugs import slugify, ensure_unique_slug

logger = logging.getLogger(__name__)
router = APIRouter()


# Helper functions
async def get_job_for_owner(job_id: UUID, user: User, db: AsyncSession) -> Job:
    """
    Get a job by ID and verify the user owns its company.

    Raises:
        HTTPException 404: Job not found
        HTTPException 403: User doesn't own the company
    """
    result = await db.execute(
        select(Job).where(Job.id == job_id)
    )
    job = result.scalar_one_or_none()

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    await get_company_for_owner(job.company_id, user, db)
    return job


async def run_import(company_id: UUID, rows: list, db: AsyncSession) -> JobImportResponse:
    """Feed parsed rows to the importer and shape the summary for the dashboard."""
    try:
        summary = await import_jobs(SqlAlchemyJobStore(db), company_id, rows)
    except SlugListingError as e:
        raise HTTPException(
            status_code=503,
            detail=f"Import aborted before any job was created: {e}"
        )

    return JobImportResponse(
        success=summary.success,
        failed=summary.failed,
        message=summary.message,
    )


# ============================================================
# COMPANY JOB ENDPOINTS
# ============================================================

@router.get("/companies/{company_id}/jobs", response_model=List[JobResponse])
async def list_jobs(
    company_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List all jobs of a company (open and closed), newest first."""
    await get_company_for_owner(company_id, current_user, db)

    result = await db.execute(
        select(Job)
        .where(Job.company_id == company_id)
        .order_by(Job.created_at.desc())
    )
    jobs = result.scalars().all()

    logger.info(f"Listed {len(jobs)} jobs for company {company_id}")
    return jobs


@router.post("/companies/{company_id}/jobs", response_model=JobResponse, status_code=201)
async def create_job(
    company_id: UUID,
    job: JobCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a single job.

    The slug is derived from the title and suffixed (-1, -2, ...) when the
    company already has a job with that slug.
    """
    await get_company_for_owner(company_id, current_user, db)

    result = await db.execute(
        select(Job.slug).where(Job.company_id == company_id)
    )
    taken = set(result.scalars().all())
    slug = ensure_unique_slug(slugify(job.title) or "job", taken)

    new_job = Job(company_id=company_id, slug=slug, **job.model_dump())
    db.add(new_job)
    await db.commit()
    await db.refresh(new_job)

    logger.info(f"Created job {new_job.id}: {new_job.title} ({new_job.slug}) for company {company_id}")
    return new_job


@router.post("/companies/{company_id}/jobs/import", response_model=JobImportResponse)
async def import_jobs_from_file(
    company_id: UUID,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Bulk import jobs from an uploaded CSV or Excel file.

    Rows without a title and rows that fail to save are counted as failed;
    the rest of the file is still imported.
    """
    await get_company_for_owner(company_id, current_user, db)

    content = await file.read()
    if len(content) > settings.import_max_file_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File is larger than {settings.import_max_file_bytes} bytes"
        )

    try:
        rows = await run_in_threadpool(
            read_job_rows, content, file.filename or "", file.content_type or ""
        )
    except ImportFileError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Importing {len(rows)} rows from {file.filename} into company {company_id}")
    return await run_import(company_id, rows, db)


@router.post("/companies/{company_id}/jobs/import-url", response_model=JobImportResponse)
async def import_jobs_from_url(
    company_id: UUID,
    request: JobImportUrlRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Bulk import jobs from a CSV or Excel file hosted at a URL."""
    await get_company_for_owner(company_id, current_user, db)

    try:
        rows = await fetch_job_rows(str(request.url))
    except ImportFileError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Importing {len(rows)} rows from {request.url} into company {company_id}")
    return await run_import(company_id, rows, db)


# ============================================================
# SINGLE JOB ENDPOINTS
# ============================================================

@router.get("/jobs/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await get_job_for_owner(job_id, current_user, db)


@router.patch("/jobs/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: UUID,
    request: JobUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update job fields. The slug is never changed, even when the title is."""
    job = await get_job_for_owner(job_id, current_user, db)

    updates = request.model_dump(exclude_unset=True)
    for field_name, value in updates.items():
        if value is None and field_name in ("title", "description", "location", "job_type", "status", "posted_days_ago"):
            continue
        setattr(job, field_name, value)

    await db.commit()
    await db.refresh(job)

    logger.info(f"Updated job {job.id}: {sorted(updates)}")
    return job


@router.post("/jobs/{job_id}/toggle-status", response_model=JobResponse)
async def toggle_job_status(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Flip a job between open and closed."""
    job = await get_job_for_owner(job_id, current_user, db)

    job.status = JobStatus.CLOSED if job.status == JobStatus.OPEN else JobStatus.OPEN
    await db.commit()
    await db.refresh(job)

    logger.info(f"Job {job.id} is now {job.status.value}")
    return job


@router.delete("/jobs/{job_id}", status_code=204)
async def delete_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    job = await get_job_for_owner(job_id, current_user, db)

    await db.delete(job)
    await db.commit()

    logger.info(f"Deleted job {job_id}")
    return None
