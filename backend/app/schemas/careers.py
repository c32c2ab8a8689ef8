"""Public careers page schemas."""
from typing import Any, Optional
from pydantic import BaseModel

from app.schemas.company import Section


class CareersPageResponse(BaseModel):
    """Published company as seen by candidates."""
    name: str
    slug: str
    primary_color: str
    accent_color: str
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    culture_video_url: Optional[str] = None
    social_links: Optional[dict[str, Any]] = None
    sections: list[Section]
    open_job_count: int
    locations: list[str]
