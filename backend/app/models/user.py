from datetime import datetime
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
import uuid

from app.database import Base
from app.database_types import GUID


class User(Base):
    """Recruiter account. Sign-in is handled by the identity provider."""
    __tablename__ = "users"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    companies = relationship(
        "Company",
        back_populates="owner",
        cascade="all, delete-orphan",
    )
