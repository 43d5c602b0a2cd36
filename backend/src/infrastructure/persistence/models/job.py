"""
Job ORM Model
SQLAlchemy model for job postings
"""
import uuid
from sqlalchemy import Column, String, Integer, DateTime, Text, Boolean, JSON, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from core.database import Base


class JobModel(Base):
    """Job posting table ORM model"""

    __tablename__ = "jobs"

    # Primary Key
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Ownership
    posted_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(UUID(as_uuid=True), ForeignKey("companies.id", ondelete="SET NULL"), nullable=True, index=True)

    # Details
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    job_type = Column(String(20), nullable=False, index=True)
    experience_level = Column(String(20), nullable=False, index=True)
    category = Column(String(20), nullable=False, index=True)
    department = Column(String(100), nullable=True)
    required_skills = Column(JSON, nullable=False, default=list)
    benefits = Column(JSON, nullable=False, default=list)

    # Location
    location_city = Column(String(100), nullable=True, index=True)
    location_state = Column(String(100), nullable=True)
    is_remote = Column(Boolean, nullable=False, default=False)

    # Salary
    salary_min = Column(Integer, nullable=True, index=True)
    salary_max = Column(Integer, nullable=True)
    salary_currency = Column(String(3), nullable=False, default="USD")
    salary_visible = Column(Boolean, nullable=False, default=True)
    salary_type = Column(String(20), nullable=False, default="Annual")

    # Lifecycle
    status = Column(String(20), nullable=False, default="published", index=True)
    published_at = Column(DateTime(timezone=True), nullable=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    # Counters
    views = Column(Integer, nullable=False, default=0)
    application_count = Column(Integer, nullable=False, default=0)
    save_count = Column(Integer, nullable=False, default=0)

    # Optimistic concurrency
    version = Column(Integer, nullable=False, default=1)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<JobModel {self.title} - {self.status}>"
