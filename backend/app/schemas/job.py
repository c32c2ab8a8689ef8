"""Job-related Pydantic schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from app.models.job import JobType, JobStatus


class JobBase(BaseModel):
    """Base schema with common job fields."""
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1)
    job_type: JobType = JobType.FULL_TIME
    status: JobStatus = JobStatus.OPEN
    work_policy: Optional[str] = None  # Remote | Hybrid | On-site
    department: Optional[str] = None
    employment_type: Optional[str] = None
    experience_level: Optional[str] = None
    salary_range: Optional[str] = None
    posted_days_ago: int = Field(default=0, ge=0)


class JobCreate(JobBase):
    """Schema for creating a job from the recruiter form."""
    pass


class JobUpdate(BaseModel):
    """Partial update. The slug is not editable."""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = Field(default=None, min_length=1)
    job_type: Optional[JobType] = None
    status: Optional[JobStatus] = None
    work_policy: Optional[str] = None
    department: Optional[str] = None
    employment_type: Optional[str] = None
    experience_level: Optional[str] = None
    salary_range: Optional[str] = None
    posted_days_ago: Optional[int] = Field(default=None, ge=0)


class JobRecord(JobBase):
    """Canonical job produced by the import pipeline, ready to persist."""
    company_id: UUID
    slug: str
    description: str = ""


class JobResponse(JobBase):
    """Schema for job response."""
    id: UUID
    company_id: UUID
    slug: str
    description: str
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class JobImportUrlRequest(BaseModel):
    """Import jobs from a CSV/Excel file hosted at a URL."""
    url: HttpUrl


class JobImportResponse(BaseModel):
    success: int
    failed: int
    message: str


class JobPage(BaseModel):
    """One page of public job listings."""
    items: list[JobResponse]
    total: int
    page: int
    total_pages: int
