"""
Bulk job import.

Turns loosely-typed spreadsheet rows into canonical jobs for one company:
- rows without a title are counted as failed and skipped
- slugs come from the job_slug column or the title (both slugified), made unique against the
  company's existing slugs and every slug assigned earlier in the batch
- free-text job type and "posted N days ago" columns are normalized
- each row is persisted on its own; a failure never stops the batch

Rows are processed strictly in order, one persistence call at a time, so the
in-memory slug snapshot stays consistent without locking. Two concurrent
imports for the same company are not coordinated; the (company_id, slug)
unique constraint is the only backstop.
"""
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Set
from uuid import UUID

from app.config import settings
from app.models.job import JobType, JobStatus
from app.schemas.job import JobRecord
from app.services.job_store import JobStore
from app.services.slugs import slugify, ensure_unique_slug

logger = logging.getLogger(__name__)


DEFAULT_LOCATION = "Remote"

# Checked in order, first substring match wins
JOB_TYPE_KEYWORDS = [
    ("intern", JobType.INTERNSHIP),
    ("contract", JobType.CONTRACT),
    ("temporary", JobType.CONTRACT),
    ("part", JobType.PART_TIME),
]

DESCRIPTION_TEMPLATE = """We are looking for a {title} to join our {department} team.

Role overview:
- Department: {department}
- Experience level: {experience_level}
- Employment type: {employment_type}
- Salary range: {salary_range}

Apply now to become part of a team that values ownership, collaboration and growth."""

_DIGITS = re.compile(r"\d+")


class SlugListingError(Exception):
    """Raised when existing slugs cannot be read before an import starts"""
    pass


@dataclass
class ImportSummary:
    """Outcome of one import batch."""
    success: int = 0
    failed: int = 0

    @property
    def message(self) -> str:
        if self.success == 0:
            return "Failed to import jobs. Please check your file format."
        if self.failed:
            return f"Successfully imported {self.success} jobs ({self.failed} failed)"
        return f"Successfully imported {self.success} jobs"


@dataclass
class ImportState:
    """Accumulator folded over the rows of one batch."""
    slugs: Set[str] = field(default_factory=set)
    success: int = 0
    failed: int = 0

    def summary(self) -> ImportSummary:
        return ImportSummary(success=self.success, failed=self.failed)


def _clean(value) -> Optional[str]:
    """Strip a cell value; blank cells become None."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    text = str(value).strip()
    return text or None


def map_job_type(job_type: Optional[str], employment_type: Optional[str] = None) -> JobType:
    """
    Map free-text job/employment type to a canonical JobType.

    job_type wins when present; otherwise employment_type is inspected.
    Anything unrecognised is full-time.
    """
    source = _clean(job_type) or _clean(employment_type)
    if not source:
        return JobType.FULL_TIME

    lowered = source.lower()
    for keyword, mapped in JOB_TYPE_KEYWORDS:
        if keyword in lowered:
            return mapped
    return JobType.FULL_TIME


def parse_posted_days_ago(value: Optional[str]) -> int:
    """
    Parse "Posted 3 days ago" style text into a day count.

    "today" anywhere in the text is 0; otherwise the first number found;
    otherwise 0.
    """
    text = _clean(value)
    if not text:
        return 0
    if "today" in text.lower():
        return 0
    match = _DIGITS.search(text)
    return int(match.group()) if match else 0


def build_description(
    title: str,
    department: Optional[str] = None,
    experience_level: Optional[str] = None,
    employment_type: Optional[str] = None,
    salary_range: Optional[str] = None,
) -> str:
    """Synthesize a description for rows that do not carry one."""
    return DESCRIPTION_TEMPLATE.format(
        title=title,
        department=department or "General",
        experience_level=experience_level or "Not specified",
        employment_type=employment_type or "Full time",
        salary_range=salary_range or "Competitive",
    )


def plan_row(
    company_id: UUID,
    row: Mapping[str, Optional[str]],
    existing_slugs: Set[str],
    prefer_source_description: bool = True,
) -> Optional[JobRecord]:
    """
    Decide what to persist for one row, without touching any store.

    Returns None when the row is rejected (missing title). Does not modify
    existing_slugs; the caller records the returned slug.
    """
    title = _clean(row.get("title"))
    if not title:
        return None

    base_slug = slugify(_clean(row.get("job_slug")) or "") or slugify(title) or "job"
    slug = ensure_unique_slug(base_slug, existing_slugs)

    department = _clean(row.get("department"))
    experience_level = _clean(row.get("experience_level"))
    employment_type = _clean(row.get("employment_type"))
    salary_range = _clean(row.get("salary_range"))

    description = _clean(row.get("description")) if prefer_source_description else None
    if not description:
        description = build_description(
            title, department, experience_level, employment_type, salary_range
        )

    return JobRecord(
        company_id=company_id,
        slug=slug,
        title=title,
        description=description,
        location=_clean(row.get("location")) or DEFAULT_LOCATION,
        job_type=map_job_type(row.get("job_type"), employment_type),
        status=JobStatus.OPEN,
        work_policy=_clean(row.get("work_policy")),
        department=department,
        employment_type=employment_type,
        experience_level=experience_level,
        salary_range=salary_range,
        posted_days_ago=parse_posted_days_ago(row.get("posted_days_ago")),
    )


async def import_jobs(
    store: JobStore,
    company_id: UUID,
    rows: Iterable[Mapping[str, Optional[str]]],
    prefer_source_description: Optional[bool] = None,
) -> ImportSummary:
    """
    Import rows as jobs of company_id and return the success/failure tally.

    Raises:
        SlugListingError: existing slugs could not be loaded; nothing was
            imported.
    """
    if prefer_source_description is None:
        prefer_source_description = settings.import_prefer_source_description

    try:
        existing = await store.list_slugs(company_id)
    except Exception as e:
        logger.error(f"Could not load job slugs for company {company_id}: {e}", exc_info=True)
        raise SlugListingError(f"Could not load existing job slugs for company {company_id}") from e

    state = ImportState(slugs=set(existing))

    for index, row in enumerate(rows, start=1):
        record = plan_row(company_id, row, state.slugs, prefer_source_description)

        if record is None:
            logger.debug(f"Row {index}: missing title, skipped")
            state.failed += 1
            continue

        # Reserve before persisting so later rows cannot reuse it
        state.slugs.add(record.slug)

        try:
            await store.insert_job(record)
            state.success += 1
            logger.debug(f"Row {index}: imported '{record.title}' as {record.slug}")
        except Exception as e:
            state.failed += 1
            logger.warning(f"Row {index}: failed to import '{record.title}' ({record.slug}): {e}")

    summary = state.summary()
    logger.info(
        f"Imported {summary.success} jobs for company {company_id} "
        f"({summary.failed} failed)"
    )
    return summary


def normalize_row_keys(row: Mapping[str, object]) -> Dict[str, Optional[str]]:
    """
    Normalize spreadsheet headers to import keys.

    "Job Slug" -> "job_slug", "posted-days-ago" -> "posted_days_ago".
    Blank cells are dropped.
    """
    normalized: Dict[str, Optional[str]] = {}
    for key, value in row.items():
        name = re.sub(r"[\s\-]+", "_", str(key).strip().lstrip("\ufeff").lower())
        cleaned = _clean(value)
        if name and cleaned is not None:
            normalized[name] = cleaned
    return normalized
