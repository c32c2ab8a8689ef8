"""
Public careers page endpoints.

No authentication: these serve the candidate-facing page at
/{company_slug}/careers. Draft companies and closed jobs are reported as
not found.
"""
import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_

from app.config import settings
from app.database import get_db
from app.models.company import Company
from app.models.job import Job, JobStatus, JobType
from app.schemas.careers import CareersPageResponse
from app.schemas.company import Section
from app.schemas.job import JobPage, JobResponse
from app.services.sections import visible_sections

logger = logging.getLogger(__name__)
router = APIRouter()


async def get_published_company(company_slug: str, db: AsyncSession) -> Company:
    result = await db.execute(
        select(Company).where(
            and_(Company.slug == company_slug, Company.is_published.is_(True))
        )
    )
    company = result.scalar_one_or_none()

    if not company:
        raise HTTPException(status_code=404, detail="Careers page not found")

    return company


def open_jobs_filter(company: Company):
    return and_(Job.company_id == company.id, Job.status == JobStatus.OPEN)


@router.get("/{company_slug}", response_model=CareersPageResponse)
async def get_careers_page(
    company_slug: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Published company page: branding, visible sections in display order,
    open job count and the distinct locations used by the location filter.
    """
    company = await get_published_company(company_slug, db)

    count_result = await db.execute(
        select(func.count(Job.id)).where(open_jobs_filter(company))
    )
    locations_result = await db.execute(
        select(Job.location)
        .where(open_jobs_filter(company))
        .distinct()
        .order_by(Job.location)
    )

    return CareersPageResponse(
        name=company.name,
        slug=company.slug,
        primary_color=company.primary_color,
        accent_color=company.accent_color,
        logo_url=company.logo_url,
        banner_url=company.banner_url,
        culture_video_url=company.culture_video_url,
        social_links=company.social_links,
        sections=[Section.model_validate(s) for s in visible_sections(company.sections)],
        open_job_count=count_result.scalar_one(),
        locations=list(locations_result.scalars().all()),
    )


@router.get("/{company_slug}/jobs", response_model=JobPage)
async def list_open_jobs(
    company_slug: str,
    search: Optional[str] = Query(None, description="Case-insensitive title search"),
    location: Optional[str] = Query(None, description="Exact location"),
    job_type: Optional[JobType] = Query(None, description="Filter by job type"),
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_db)
):
    """Paginated open jobs of a published company, newest first."""
    company = await get_published_company(company_slug, db)

    filters = [open_jobs_filter(company)]
    if search:
        filters.append(Job.title.icontains(search.strip(), autoescape=True))
    if location:
        filters.append(Job.location == location)
    if job_type:
        filters.append(Job.job_type == job_type)

    where = and_(*filters)
    total_result = await db.execute(select(func.count(Job.id)).where(where))
    total = total_result.scalar_one()

    page_size = settings.jobs_per_page
    result = await db.execute(
        select(Job)
        .where(where)
        .order_by(Job.created_at.desc(), Job.title)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    jobs = result.scalars().all()

    logger.info(
        f"Careers page {company_slug}: {total} jobs match "
        f"(search={search}, location={location}, job_type={job_type}, page={page})"
    )
    return JobPage(
        items=[JobResponse.model_validate(job) for job in jobs],
        total=total,
        page=page,
        total_pages=math.ceil(total / page_size),
    )


@router.get("/{company_slug}/jobs/{job_slug}", response_model=JobResponse)
async def get_open_job(
    company_slug: str,
    job_slug: str,
    db: AsyncSession = Depends(get_db)
):
    """Job detail page."""
    company = await get_published_company(company_slug, db)

    result = await db.execute(
        select(Job).where(and_(open_jobs_filter(company), Job.slug == job_slug))
    )
    job = result.scalar_one_or_none()

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return job
