"""
Job Schemas
Pydantic schemas for job postings
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.entities import Job
from domain.enums import Currency, ExperienceLevel, JobCategory, JobType, SalaryType
from domain.value_objects import JobStatus


class LocationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    is_remote: bool = False


class SalarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    min_salary: Optional[int] = Field(None, ge=0)
    max_salary: Optional[int] = Field(None, ge=0)
    currency: Currency = Currency.USD
    is_visible: bool = True
    salary_type: SalaryType = SalaryType.ANNUAL

    @model_validator(mode="after")
    def check_range(self) -> "SalarySchema":
        if self.min_salary is not None and self.max_salary is not None and self.max_salary < self.min_salary:
            raise ValueError("Maximum salary cannot be less than minimum salary")
        return self


class JobCreateRequest(BaseModel):
    """Request schema for posting a job"""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    job_type: JobType
    experience_level: ExperienceLevel
    category: JobCategory
    department: Optional[str] = Field(None, max_length=100)
    location: Optional[LocationSchema] = None
    salary: Optional[SalarySchema] = None
    required_skills: List[str] = []
    benefits: List[str] = []
    status: Optional[JobStatus] = Field(None, description="draft or published (default)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Senior Backend Engineer",
                "description": "Build and run our API platform.",
                "job_type": "Full-time",
                "experience_level": "Senior",
                "category": "IT",
                "location": {"city": "Tel Aviv", "is_remote": True},
                "salary": {"min_salary": 30000, "max_salary": 40000, "currency": "ILS"},
                "required_skills": ["Python", "PostgreSQL"],
            }
        }
    )


class JobUpdateRequest(BaseModel):
    """Descriptive fields only; status moves through publish/unpublish/close"""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    job_type: Optional[JobType] = None
    experience_level: Optional[ExperienceLevel] = None
    category: Optional[JobCategory] = None
    department: Optional[str] = Field(None, max_length=100)
    location: Optional[LocationSchema] = None
    salary: Optional[SalarySchema] = None
    required_skills: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    status: Optional[JobStatus] = None


class JobResponse(BaseModel):
    """Response schema for a single job"""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    posted_by: UUID
    company_id: Optional[UUID] = None
    title: str
    description: str
    job_type: JobType
    experience_level: ExperienceLevel
    category: JobCategory
    department: Optional[str] = None
    location: LocationSchema
    salary: Optional[SalarySchema] = None
    required_skills: List[str]
    benefits: List[str]
    status: JobStatus
    published_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    views: int
    application_count: int
    save_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, job: Job, viewer_id: Optional[UUID] = None) -> "JobResponse":
        """Hidden salaries are only shown to the poster"""
        response = cls.model_validate(job)
        if not job.salary.is_visible and not (viewer_id and job.is_owned_by(viewer_id)):
            response.salary = None
        return response


class CategoryCount(BaseModel):
    category: str
    count: int


class JobStatsResponse(BaseModel):
    total_jobs: int
    category_stats: List[CategoryCount]
