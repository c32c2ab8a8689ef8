"""
Tests for the bulk job import pipeline.

Validates:
- Row validation (missing/blank titles count as failed)
- Slug assignment unique within a batch and against existing jobs
- Job type and posted-days-ago normalization
- Description synthesis vs. source description
- Per-row persistence failures never abort the batch
- Slug listing failure is batch-fatal
"""
import uuid

import pytest
from sqlalchemy import select

from app.models.job import Job, JobType, JobStatus
from app.services.job_import import (
    ImportSummary,
    SlugListingError,
    build_description,
    import_jobs,
    map_job_type,
    normalize_row_keys,
    parse_posted_days_ago,
    plan_row,
)
from app.services.job_store import InMemoryJobStore, SqlAlchemyJobStore


COMPANY_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")


class FailingOnTitleStore(InMemoryJobStore):
    """In-memory store that rejects inserts for one title."""

    def __init__(self, failing_title: str):
        super().__init__()
        self.failing_title = failing_title
        self.attempted = []

    async def insert_job(self, record):
        self.attempted.append(record.title)
        if record.title == self.failing_title:
            raise ConnectionError("store unreachable")
        await super().insert_job(record)


class UnreachableStore(InMemoryJobStore):
    async def list_slugs(self, company_id):
        raise ConnectionError("store unreachable")


# ============================================================
# ROW MAPPING
# ============================================================

@pytest.mark.parametrize(
    "job_type,employment_type,expected",
    [
        ("Senior Intern", None, JobType.INTERNSHIP),
        (None, "Contract - 6mo", JobType.CONTRACT),
        ("Temporary", None, JobType.CONTRACT),
        ("PART TIME", None, JobType.PART_TIME),
        (None, None, JobType.FULL_TIME),
        ("Permanent", None, JobType.FULL_TIME),
        ("full-time", "contract", JobType.FULL_TIME),
        ("  ", "Internship", JobType.INTERNSHIP),
        # "intern" is checked before "contract"
        ("Contract intern", None, JobType.INTERNSHIP),
        ("Contract, part time", None, JobType.CONTRACT),
    ],
)
def test_map_job_type(job_type, employment_type, expected):
    assert map_job_type(job_type, employment_type) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Posted 3 days ago", 3),
        ("today", 0),
        ("Posted Today", 0),
        ("30+ days ago", 30),
        ("yesterday", 0),
        ("", 0),
        (None, 0),
        ("12", 12),
    ],
)
def test_parse_posted_days_ago(text, expected):
    assert parse_posted_days_ago(text) == expected


def test_build_description_uses_defaults():
    description = build_description("Data Analyst")

    assert "Data Analyst" in description
    assert "General" in description
    assert "Not specified" in description
    assert "Full time" in description
    assert "Competitive" in description
    assert "\n" in description


def test_build_description_embeds_row_values():
    description = build_description(
        "Data Analyst", "Finance", "Senior", "Part time", "$90k - $110k"
    )

    assert "Finance" in description
    assert "Senior" in description
    assert "Part time" in description
    assert "$90k - $110k" in description
    assert "General" not in description


def test_plan_row_rejects_missing_title():
    assert plan_row(COMPANY_ID, {"location": "Berlin"}, set()) is None
    assert plan_row(COMPANY_ID, {"title": "   "}, set()) is None


def test_plan_row_maps_all_fields():
    row = {
        "title": " Backend Engineer ",
        "location": "Austin, TX",
        "department": "Engineering",
        "employment_type": "Full time",
        "experience_level": "Mid",
        "job_type": "Contract",
        "salary_range": "$120k",
        "work_policy": "Hybrid",
        "posted_days_ago": "Posted 5 days ago",
    }

    record = plan_row(COMPANY_ID, row, set())

    assert record.company_id == COMPANY_ID
    assert record.title == "Backend Engineer"
    assert record.slug == "backend-engineer"
    assert record.location == "Austin, TX"
    assert record.job_type == JobType.CONTRACT
    assert record.status == JobStatus.OPEN
    assert record.work_policy == "Hybrid"
    assert record.department == "Engineering"
    assert record.employment_type == "Full time"
    assert record.experience_level == "Mid"
    assert record.salary_range == "$120k"
    assert record.posted_days_ago == 5


def test_plan_row_defaults_location_to_remote():
    record = plan_row(COMPANY_ID, {"title": "Designer"}, set())

    assert record.location == "Remote"
    assert record.job_type == JobType.FULL_TIME
    assert record.posted_days_ago == 0


def test_plan_row_prefers_explicit_slug():
    record = plan_row(COMPANY_ID, {"title": "Designer", "job_slug": "ux-designer"}, {"ux-designer"})

    assert record.slug == "ux-designer-1"


@pytest.mark.parametrize(
    "job_slug,expected",
    [
        ("Eng / NYC", "eng-nyc"),
        ("  UX_Designer  ", "ux-designer"),
        ("ux-designer", "ux-designer"),
        ("///", "designer"),
    ],
)
def test_plan_row_slugifies_explicit_slug(job_slug, expected):
    record = plan_row(COMPANY_ID, {"title": "Designer", "job_slug": job_slug}, set())

    assert record.slug == expected


def test_plan_row_does_not_touch_snapshot():
    slugs = {"designer"}
    plan_row(COMPANY_ID, {"title": "Designer"}, slugs)

    assert slugs == {"designer"}


def test_plan_row_uses_source_description_when_present():
    record = plan_row(COMPANY_ID, {"title": "Designer", "description": "Our own words."}, set())

    assert record.description == "Our own words."


def test_plan_row_can_ignore_source_description():
    record = plan_row(
        COMPANY_ID,
        {"title": "Designer", "description": "Our own words."},
        set(),
        prefer_source_description=False,
    )

    assert record.description == build_description("Designer")


def test_plan_row_falls_back_to_job_slug_when_title_has_no_word_chars():
    record = plan_row(COMPANY_ID, {"title": "!!!"}, set())

    assert record.slug == "job"


def test_normalize_row_keys():
    row = {" Title ": "Engineer", "Job Slug": "eng", "posted-days-ago": "today", "Department": "  "}

    assert normalize_row_keys(row) == {
        "title": "Engineer",
        "job_slug": "eng",
        "posted_days_ago": "today",
    }


# ============================================================
# ORCHESTRATOR
# ============================================================

@pytest.mark.asyncio
async def test_import_counts_blank_titles_as_failed():
    store = InMemoryJobStore()
    rows = [
        {"title": "Engineer"},
        {"title": ""},
        {"title": "Engineer"},
        {"location": "Remote"},
        {"title": "Engineer"},
    ]

    summary = await import_jobs(store, COMPANY_ID, rows)

    assert summary == ImportSummary(success=3, failed=2)
    slugs = [job["slug"] for job in store.jobs_for(COMPANY_ID)]
    assert slugs == ["engineer", "engineer-1", "engineer-2"]


@pytest.mark.asyncio
async def test_import_avoids_existing_slugs():
    store = InMemoryJobStore()
    await import_jobs(store, COMPANY_ID, [{"title": "Engineer"}])

    summary = await import_jobs(store, COMPANY_ID, [{"title": "Engineer"}, {"title": "Engineer"}])

    assert summary.success == 2
    assert await store.list_slugs(COMPANY_ID) == {"engineer", "engineer-1", "engineer-2"}


@pytest.mark.asyncio
async def test_reimport_produces_disjoint_slugs():
    store = InMemoryJobStore()
    rows = [{"title": "Engineer"}, {"title": "Designer"}, {"title": "Engineer"}]

    await import_jobs(store, COMPANY_ID, rows)
    first = await store.list_slugs(COMPANY_ID)
    await import_jobs(store, COMPANY_ID, rows)
    second = await store.list_slugs(COMPANY_ID) - first

    assert len(second) == 3
    assert first.isdisjoint(second)


@pytest.mark.asyncio
async def test_import_slugs_are_scoped_per_company():
    store = InMemoryJobStore()
    other_company = uuid.uuid4()

    await import_jobs(store, COMPANY_ID, [{"title": "Engineer"}])
    await import_jobs(store, other_company, [{"title": "Engineer"}])

    assert await store.list_slugs(COMPANY_ID) == {"engineer"}
    assert await store.list_slugs(other_company) == {"engineer"}


@pytest.mark.asyncio
async def test_persistence_failure_does_not_abort_batch():
    store = FailingOnTitleStore(failing_title="Job 3")
    rows = [{"title": f"Job {i}"} for i in range(1, 6)]

    summary = await import_jobs(store, COMPANY_ID, rows)

    assert summary == ImportSummary(success=4, failed=1)
    assert store.attempted == ["Job 1", "Job 2", "Job 3", "Job 4", "Job 5"]


@pytest.mark.asyncio
async def test_failed_row_still_consumes_its_slug():
    """The slug is reserved before persisting, so a failed row's slug is not reused."""
    store = FailingOnTitleStore(failing_title="Engineer")
    rows = [{"title": "Engineer"}, {"title": "Engineer!", "job_slug": "engineer"}]

    summary = await import_jobs(store, COMPANY_ID, rows)

    assert summary == ImportSummary(success=1, failed=1)
    assert await store.list_slugs(COMPANY_ID) == {"engineer-1"}


@pytest.mark.asyncio
async def test_slug_listing_failure_is_fatal():
    store = UnreachableStore()

    with pytest.raises(SlugListingError):
        await import_jobs(store, COMPANY_ID, [{"title": "Engineer"}])

    assert store.jobs == {}


@pytest.mark.asyncio
async def test_import_empty_batch():
    summary = await import_jobs(InMemoryJobStore(), COMPANY_ID, [])

    assert summary == ImportSummary(success=0, failed=0)


def test_summary_messages():
    assert ImportSummary(success=3, failed=2).message == "Successfully imported 3 jobs (2 failed)"
    assert ImportSummary(success=3, failed=0).message == "Successfully imported 3 jobs"
    assert ImportSummary(success=0, failed=4).message.startswith("Failed to import jobs")


# ============================================================
# SQLALCHEMY STORE
# ============================================================

@pytest.mark.asyncio
async def test_import_into_database(db, company, make_job):
    db.add(make_job(slug="engineer", title="Engineer"))
    await db.commit()

    rows = [
        {"title": "Engineer", "job_type": "Senior Intern", "posted_days_ago": "Posted 3 days ago"},
        {"title": "Engineer", "employment_type": "Contract - 6mo"},
        {"title": ""},
    ]

    summary = await import_jobs(SqlAlchemyJobStore(db), company.id, rows)

    assert summary == ImportSummary(success=2, failed=1)

    result = await db.execute(
        select(Job).where(Job.company_id == company.id).order_by(Job.slug)
    )
    jobs = result.scalars().all()
    assert [job.slug for job in jobs] == ["engineer", "engineer-1", "engineer-2"]

    imported = {job.slug: job for job in jobs}
    assert imported["engineer-1"].job_type == JobType.INTERNSHIP
    assert imported["engineer-1"].posted_days_ago == 3
    assert imported["engineer-1"].status == JobStatus.OPEN
    assert imported["engineer-2"].job_type == JobType.CONTRACT
    assert imported["engineer-2"].location == "Remote"


@pytest.mark.asyncio
async def test_database_constraint_failure_is_counted(db, company, make_job):
    """A slug taken after the snapshot was read hits the unique constraint and counts as failed."""

    class StaleSnapshotStore(SqlAlchemyJobStore):
        async def list_slugs(self, company_id):
            return set()

    company_id = company.id
    db.add(make_job(slug="engineer", title="Engineer"))
    await db.commit()

    summary = await import_jobs(
        StaleSnapshotStore(db), company_id, [{"title": "Engineer"}, {"title": "Designer"}]
    )

    assert summary == ImportSummary(success=1, failed=1)
    slugs = await SqlAlchemyJobStore(db).list_slugs(company_id)
    assert slugs == {"engineer", "designer"}


@pytest.mark.asyncio
async def test_imported_explicit_slug_is_reachable_on_careers_page(client, db, company):
    company_id = company.id

    response = await client.post(
        f"/api/companies/{company_id}/jobs/import",
        files={"file": ("jobs.csv", b"title,job_slug\nEngineer,Eng / NYC\n", "text/csv")},
    )
    assert response.json()["success"] == 1

    slugs = await SqlAlchemyJobStore(db).list_slugs(company_id)
    assert slugs == {"eng-nyc"}

    published = await client.post(f"/api/companies/{company_id}/publish")
    assert published.status_code == 200

    detail = await client.get("/api/careers/techcorp-inc/jobs/eng-nyc")
    assert detail.status_code == 200
    assert detail.json()["title"] == "Engineer"
