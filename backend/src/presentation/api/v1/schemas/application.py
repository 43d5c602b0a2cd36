"""
Application Schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects import ApplicationStatus


class ApplicationSubmitRequest(BaseModel):
    job_id: UUID
    cover_letter: Optional[str] = Field(None, max_length=5000)
    resume_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    expected_salary: Optional[str] = Field(None, max_length=100)


class StatusUpdateRequest(BaseModel):
    """Employer move of an application through its lifecycle"""

    status: ApplicationStatus
    reason: Optional[str] = Field(None, max_length=500)
    rejection_reason: Optional[str] = Field(None, max_length=1000)
    internal_notes: Optional[str] = Field(None, max_length=2000)


class DecisionRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class StatusChangeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: ApplicationStatus
    changed_at: datetime
    changed_by: Optional[UUID] = None
    reason: Optional[str] = None


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_id: UUID
    user_id: UUID
    company_id: Optional[UUID] = None
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    expected_salary: Optional[str] = None
    status: ApplicationStatus
    status_history: List[StatusChangeSchema]
    rejection_reason: Optional[str] = None
    applied_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    decision_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_viewed: bool
    viewed_at: Optional[datetime] = None


class EmployerApplicationResponse(ApplicationResponse):
    """Adds the employer-only notes"""

    internal_notes: Optional[str] = None


class AppliedCheckResponse(BaseModel):
    has_applied: bool
