"""
Companies API endpoints.
Handles company profile CRUD, publishing and careers page sections.
"""
import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, or_

from app.database import get_db
from app.models.company import Company, DEFAULT_PRIMARY_COLOR, DEFAULT_ACCENT_COLOR
from app.models.job import Job
from app.models.user import User
from app.api.auth import get_current_user
from app.schemas.company import (
    CompanyCreate,
    CompanyUpdate,
    CompanyResponse,
    Section,
    SectionCreate,
    SectionUpdate,
    SectionMove,
    SectionsReplace,
)
from app.services import sections as section_service
from app.services.sections import SectionNotFoundError
from app.services.slugs import slugify, ensure_unique_slug

logger = logging.getLogger(__name__)
router = APIRouter()


# Helper functions
async def get_company_for_owner(company_id: UUID, user: User, db: AsyncSession) -> Company:
    """
    Get a company by ID and verify the user owns it.

    Raises:
        HTTPException 404: Company not found
        HTTPException 403: User doesn't own the company
    """
    result = await db.execute(
        select(Company).where(Company.id == company_id)
    )
    company = result.scalar_one_or_none()

    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    if company.owner_id != user.id:
        logger.warning(f"Access denied: User {user.id} tried to access company {company_id} owned by {company.owner_id}")
        raise HTTPException(
            status_code=403,
            detail="Access denied. You don't have permission to manage this company."
        )

    return company


async def generate_company_slug(name: str, db: AsyncSession) -> str:
    """Derive a site-wide unique slug from a company name."""
    base_slug = slugify(name) or "company"

    result = await db.execute(
        select(Company.slug).where(
            or_(Company.slug == base_slug, Company.slug.like(f"{base_slug}-%"))
        )
    )
    taken = set(result.scalars().all())
    return ensure_unique_slug(base_slug, taken)


async def count_jobs(company_id: UUID, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(Job.id)).where(Job.company_id == company_id)
    )
    return result.scalar_one()


def to_response(company: Company, job_count: int = 0) -> CompanyResponse:
    return CompanyResponse.model_validate(company).model_copy(update={"job_count": job_count})


async def save_sections(company: Company, sections: list, db: AsyncSession) -> List[Section]:
    company.sections = sections
    await db.commit()
    await db.refresh(company)
    return [Section.model_validate(s) for s in section_service.sorted_sections(company.sections)]


# ============================================================
# COMPANY ENDPOINTS
# ============================================================

@router.post("/", response_model=CompanyResponse, status_code=201)
async def create_company(
    request: CompanyCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a draft company page with the default sections.

    The slug is derived from the name and suffixed (-1, -2, ...) when another
    company already uses it.
    """
    slug = await generate_company_slug(request.name, db)

    company = Company(
        owner_id=current_user.id,
        name=request.name.strip(),
        slug=slug,
        primary_color=request.primary_color or DEFAULT_PRIMARY_COLOR,
        accent_color=request.accent_color or DEFAULT_ACCENT_COLOR,
        logo_url=request.logo_url,
        banner_url=request.banner_url,
        culture_video_url=request.culture_video_url,
        social_links=request.social_links.model_dump(exclude_none=True) if request.social_links else {},
        sections=section_service.default_sections(),
        is_published=False,
    )
    db.add(company)
    await db.commit()
    await db.refresh(company)

    logger.info(f"Created company {company.id} ({company.slug}) for user {current_user.id}")
    return to_response(company)


@router.get("/", response_model=List[CompanyResponse])
async def list_companies(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List the recruiter's companies, newest first, with job counts."""
    result = await db.execute(
        select(Company, func.count(Job.id))
        .outerjoin(Job, Job.company_id == Company.id)
        .where(Company.owner_id == current_user.id)
        .group_by(Company.id)
        .order_by(Company.created_at.desc())
    )
    rows = result.all()

    logger.info(f"Listed {len(rows)} companies for user {current_user.id}")
    return [to_response(company, job_count) for company, job_count in rows]


@router.get("/slug/{slug}", response_model=CompanyResponse)
async def get_company_by_slug(
    slug: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get one of the recruiter's companies by slug (editor view)."""
    result = await db.execute(
        select(Company).where(Company.slug == slug)
    )
    company = result.scalar_one_or_none()

    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    company = await get_company_for_owner(company.id, current_user, db)
    return to_response(company, await count_jobs(company.id, db))


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(
    company_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    company = await get_company_for_owner(company_id, current_user, db)
    return to_response(company, await count_jobs(company.id, db))


@router.patch("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: UUID,
    request: CompanyUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update branding and profile fields.

    The slug is kept even when the name changes so published links stay valid.
    """
    company = await get_company_for_owner(company_id, current_user, db)

    updates = request.model_dump(exclude_unset=True)
    if "social_links" in updates:
        updates["social_links"] = (
            request.social_links.model_dump(exclude_none=True) if request.social_links else {}
        )
    for field_name, value in updates.items():
        if field_name in ("name", "primary_color", "accent_color") and value is None:
            continue
        setattr(company, field_name, value.strip() if field_name == "name" else value)

    await db.commit()
    await db.refresh(company)

    logger.info(f"Updated company {company.id}: {sorted(updates)}")
    return to_response(company, await count_jobs(company.id, db))


@router.delete("/{company_id}", status_code=204)
async def delete_company(
    company_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a company and all of its jobs."""
    company = await get_company_for_owner(company_id, current_user, db)

    result = await db.execute(delete(Job).where(Job.company_id == company.id))
    await db.delete(company)
    await db.commit()

    logger.info(f"Deleted company {company_id} and {result.rowcount} jobs")
    return None


@router.post("/{company_id}/publish", response_model=CompanyResponse)
async def publish_company(
    company_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Make the careers page publicly visible."""
    company = await get_company_for_owner(company_id, current_user, db)
    company.is_published = True
    await db.commit()
    await db.refresh(company)

    logger.info(f"Published company {company.slug}")
    return to_response(company, await count_jobs(company.id, db))


@router.post("/{company_id}/unpublish", response_model=CompanyResponse)
async def unpublish_company(
    company_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Take the careers page back to draft."""
    company = await get_company_for_owner(company_id, current_user, db)
    company.is_published = False
    await db.commit()
    await db.refresh(company)

    logger.info(f"Unpublished company {company.slug}")
    return to_response(company, await count_jobs(company.id, db))


# ============================================================
# SECTION ENDPOINTS
# ============================================================

@router.put("/{company_id}/sections", response_model=List[Section])
async def replace_sections(
    company_id: UUID,
    request: SectionsReplace,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Replace all sections. List position becomes the display order."""
    company = await get_company_for_owner(company_id, current_user, db)

    ids = [s.id for s in request.sections]
    if len(ids) != len(set(ids)):
        raise HTTPException(status_code=422, detail="Section ids must be unique")

    sections = section_service.renumber([s.model_dump(exclude_none=True) for s in request.sections])
    return await save_sections(company, sections, db)


@router.post("/{company_id}/sections", response_model=List[Section], status_code=201)
async def add_section(
    company_id: UUID,
    request: SectionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Append a new section of the requested type."""
    company = await get_company_for_owner(company_id, current_user, db)

    data = request.data.model_dump(exclude_none=True) if request.data else None
    sections = section_service.add_section(company.sections or [], request.type, data)
    return await save_sections(company, sections, db)


@router.patch("/{company_id}/sections/{section_id}", response_model=List[Section])
async def update_section(
    company_id: UUID,
    section_id: str,
    request: SectionUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    company = await get_company_for_owner(company_id, current_user, db)

    try:
        sections = section_service.update_section(
            company.sections or [],
            section_id,
            data=request.data.model_dump(exclude_none=True) if request.data else None,
            visible=request.visible,
        )
    except SectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return await save_sections(company, sections, db)


@router.delete("/{company_id}/sections/{section_id}", response_model=List[Section])
async def delete_section(
    company_id: UUID,
    section_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    company = await get_company_for_owner(company_id, current_user, db)

    try:
        sections = section_service.delete_section(company.sections or [], section_id)
    except SectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return await save_sections(company, sections, db)


@router.post("/{company_id}/sections/{section_id}/toggle-visibility", response_model=List[Section])
async def toggle_section_visibility(
    company_id: UUID,
    section_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    company = await get_company_for_owner(company_id, current_user, db)

    try:
        sections = section_service.toggle_visibility(company.sections or [], section_id)
    except SectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return await save_sections(company, sections, db)


@router.post("/{company_id}/sections/{section_id}/move", response_model=List[Section])
async def move_section(
    company_id: UUID,
    section_id: str,
    request: SectionMove,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Move a section to a new position; the others shift to make room."""
    company = await get_company_for_owner(company_id, current_user, db)

    try:
        sections = section_service.move_section(company.sections or [], section_id, request.new_index)
    except SectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return await save_sections(company, sections, db)
