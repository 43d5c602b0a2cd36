"""
Job Domain Entity
Immutable job posting business object
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from ..value_objects import Salary, JobLocation, JobStatus
from ..enums import JobType, ExperienceLevel, JobCategory


@dataclass(frozen=True)
class Job:
    """Job posting domain entity - immutable"""

    id: UUID
    posted_by: UUID
    title: str
    description: str

    # Job details
    job_type: JobType
    experience_level: ExperienceLevel
    category: JobCategory
    company_id: Optional[UUID] = None
    department: Optional[str] = None

    location: JobLocation = field(default_factory=JobLocation)
    salary: Salary = field(default_factory=Salary)

    required_skills: List[str] = field(default_factory=list)
    benefits: List[str] = field(default_factory=list)

    # Lifecycle
    status: JobStatus = JobStatus.PUBLISHED
    published_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    # Counters (written only through atomic increments)
    views: int = 0
    application_count: int = 0
    save_count: int = 0

    # Optimistic concurrency token
    version: int = 1

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate job data"""
        if not self.title or len(self.title.strip()) == 0:
            raise ValueError("Job title cannot be empty")

        if (self.closed_at is not None) != (self.status == JobStatus.CLOSED):
            raise ValueError("closed_at must be set exactly when the job is closed")

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.posted_by == user_id

    def is_published(self) -> bool:
        return self.status == JobStatus.PUBLISHED

    def __str__(self) -> str:
        return f"Job({self.title}, status={self.status.value})"
