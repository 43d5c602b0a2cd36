"""
Company ORM Model
"""
import uuid
from sqlalchemy import Column, String, Integer, Float, DateTime, Text, Boolean, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from core.database import Base


class CompanyModel(Base):
    """Company table ORM model"""

    __tablename__ = "companies"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    # Profile
    name = Column(String(200), nullable=False, unique=True)
    slug = Column(String(220), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    email = Column(String(255), nullable=False)
    website = Column(String(500), nullable=True)
    phone = Column(String(50), nullable=True)
    industry = Column(String(50), nullable=True, index=True)
    company_size = Column(String(20), nullable=True)
    founded_year = Column(Integer, nullable=True)
    headquarters_city = Column(String(100), nullable=True)
    headquarters_state = Column(String(100), nullable=True)
    logo_url = Column(String(500), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    verification_requested_at = Column(DateTime(timezone=True), nullable=True)

    # Derived statistics
    average_rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)
    active_jobs_count = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<CompanyModel {self.slug}>"
