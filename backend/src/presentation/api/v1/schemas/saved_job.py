"""
Saved Job Schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.entities import Job, SavedJob
from .job import JobResponse


class SaveJobRequest(BaseModel):
    job_id: UUID
    notes: Optional[str] = Field(None, max_length=1000)


class BulkRemoveRequest(BaseModel):
    job_ids: List[UUID]


class SavedJobResponse(BaseModel):
    id: UUID
    job_id: UUID
    notes: Optional[str] = None
    saved_at: Optional[datetime] = None
    job: Optional[JobResponse] = None

    @classmethod
    def from_entity(cls, saved: SavedJob, job: Optional[Job] = None) -> "SavedJobResponse":
        return cls(
            id=saved.id,
            job_id=saved.job_id,
            notes=saved.notes,
            saved_at=saved.saved_at,
            job=JobResponse.from_entity(job) if job else None,
        )


class SavedCheckResponse(BaseModel):
    is_saved: bool
    saved_at: Optional[datetime] = None
    notes: Optional[str] = None


class CountResponse(BaseModel):
    count: int
