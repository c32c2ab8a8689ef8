"""Job model: one listing on a company's careers page."""
from datetime import datetime
from sqlalchemy import (
    Column, String, Integer, Text, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
import uuid
import enum

from app.database import Base
from app.database_types import GUID


class JobType(str, enum.Enum):
    """Canonical job types shown on the careers page."""
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class JobStatus(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (
        # Backstop for slug uniqueness within a company
        UniqueConstraint("company_id", "slug", name="uq_jobs_company_slug"),
    )
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        GUID, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Assigned once at creation, never changed by updates
    slug = Column(String, nullable=False)
    
    # Job details
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String, nullable=False, default="Remote")
    job_type = Column(
        SQLEnum(JobType, name="job_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=JobType.FULL_TIME,
    )
    status = Column(
        SQLEnum(JobStatus, name="job_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=JobStatus.OPEN,
        index=True,
    )
    
    # Extended fields (mostly populated by bulk import)
    work_policy = Column(String, nullable=True)  # Remote | Hybrid | On-site
    department = Column(String, nullable=True)
    employment_type = Column(String, nullable=True)
    experience_level = Column(String, nullable=True)
    salary_range = Column(String, nullable=True)
    posted_days_ago = Column(Integer, nullable=False, default=0)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    company = relationship("Company", back_populates="jobs")
