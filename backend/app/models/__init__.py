"""Database models"""
from app.models.user import User
from app.models.company import Company
from app.models.job import Job, JobType, JobStatus

__all__ = [
    "User",
    "Company",
    "Job",
    "JobType",
    "JobStatus",
]
