"""
Persistence adapters used by the bulk job import.

The importer only needs two operations, so it depends on the small
``JobStore`` protocol instead of a database session. ``SqlAlchemyJobStore``
backs the API; ``InMemoryJobStore`` keeps the same uniqueness rule for tests
and scripts.
"""
import logging
import uuid
from datetime import datetime
from typing import Dict, Protocol, Set, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.job import Job
from app.schemas.job import JobRecord

logger = logging.getLogger(__name__)


class DuplicateSlugError(Exception):
    """Raised when (company_id, slug) is already taken"""
    pass


class JobStore(Protocol):
    async def list_slugs(self, company_id: UUID) -> Set[str]:
        """Return every job slug currently used by the company."""
        ...

    async def insert_job(self, record: JobRecord) -> None:
        """Persist one job. Raises on any failure."""
        ...


class SqlAlchemyJobStore:
    """
    JobStore backed by an async SQLAlchemy session.

    Each insert is committed on its own so that a failed row never undoes
    rows persisted before it.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_slugs(self, company_id: UUID) -> Set[str]:
        result = await self.db.execute(
            select(Job.slug).where(Job.company_id == company_id)
        )
        return set(result.scalars().all())

    async def insert_job(self, record: JobRecord) -> None:
        job = Job(**record.model_dump())
        self.db.add(job)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise


class InMemoryJobStore:
    """JobStore keeping jobs in a dict keyed by (company_id, slug)."""

    def __init__(self):
        self.jobs: Dict[Tuple[UUID, str], dict] = {}

    async def list_slugs(self, company_id: UUID) -> Set[str]:
        return {slug for (owner, slug) in self.jobs if owner == company_id}

    async def insert_job(self, record: JobRecord) -> None:
        key = (record.company_id, record.slug)
        if key in self.jobs:
            raise DuplicateSlugError(
                f"Job slug '{record.slug}' already exists for company {record.company_id}"
            )
        now = datetime.utcnow()
        self.jobs[key] = {
            "id": uuid.uuid4(),
            **record.model_dump(),
            "created_at": now,
            "updated_at": now,
        }

    def jobs_for(self, company_id: UUID) -> list:
        """Jobs of one company in insertion order."""
        return [job for (owner, _), job in self.jobs.items() if owner == company_id]
