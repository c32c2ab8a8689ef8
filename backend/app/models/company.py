"""Company model: a recruiter's branded careers page."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
import uuid

from app.database import Base
from app.database_types import GUID


DEFAULT_PRIMARY_COLOR = "#0284c7"
DEFAULT_ACCENT_COLOR = "#7c3aed"


class Company(Base):
    __tablename__ = "companies"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    owner_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    
    name = Column(String, nullable=False)
    # Public URL segment (/{slug}/careers), unique across all companies
    slug = Column(String, nullable=False, unique=True, index=True)
    
    # Branding
    primary_color = Column(String(20), nullable=False, default=DEFAULT_PRIMARY_COLOR)
    accent_color = Column(String(20), nullable=False, default=DEFAULT_ACCENT_COLOR)
    logo_url = Column(String(500), nullable=True)
    banner_url = Column(String(500), nullable=True)
    culture_video_url = Column(String(500), nullable=True)
    # Structure: {"linkedin": "...", "github": "...", "twitter": "...", ...}
    social_links = Column(JSON, nullable=True, default=dict)
    
    # Page content, see app.services.sections
    # Structure: [{"id": "1", "type": "hero", "visible": true, "order": 0, "data": {...}}, ...]
    sections = Column(JSON, nullable=False, default=list)
    
    is_published = Column(Boolean, default=False, nullable=False, index=True)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    owner = relationship("User", back_populates="companies")
    jobs = relationship(
        "Job",
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    @property
    def status(self) -> str:
        """Publication status as shown to recruiters."""
        return "published" if self.is_published else "draft"
