"""Company and section Pydantic schemas."""
from datetime import datetime
from typing import Any, Literal, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


SectionType = Literal["hero", "about", "culture", "values", "perks", "custom"]


class SocialLinks(BaseModel):
    linkedin: Optional[str] = None
    github: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    reddit: Optional[str] = None


class SectionData(BaseModel):
    """Section content; extra keys are kept as-is."""
    title: Optional[str] = None
    subtitle: Optional[str] = None
    content: Optional[str] = None
    items: Optional[list[str]] = None
    
    model_config = ConfigDict(extra="allow")


class Section(BaseModel):
    id: str
    type: SectionType
    visible: bool = True
    order: int = 0
    data: SectionData = Field(default_factory=SectionData)


class SectionCreate(BaseModel):
    """Request to append a section of the given type."""
    type: SectionType
    data: Optional[SectionData] = None


class SectionUpdate(BaseModel):
    data: Optional[SectionData] = None
    visible: Optional[bool] = None


class SectionMove(BaseModel):
    """Request to move a section to a new position (0-based)."""
    new_index: int = Field(ge=0)


class SectionsReplace(BaseModel):
    sections: list[Section]


class CompanyBase(BaseModel):
    primary_color: Optional[str] = None
    accent_color: Optional[str] = None
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    culture_video_url: Optional[str] = None
    social_links: Optional[SocialLinks] = None


class CompanyCreate(CompanyBase):
    """Schema for creating a company. The slug is derived from the name."""
    name: str = Field(min_length=1)


class CompanyUpdate(CompanyBase):
    """Partial update; the slug never changes."""
    name: Optional[str] = Field(default=None, min_length=1)


class CompanyResponse(BaseModel):
    id: UUID
    owner_id: UUID
    name: str
    slug: str
    primary_color: str
    accent_color: str
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    culture_video_url: Optional[str] = None
    social_links: Optional[dict[str, Any]] = None
    sections: list[Section]
    is_published: bool
    status: Literal["draft", "published"]
    job_count: int = 0
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)
