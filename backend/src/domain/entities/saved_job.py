"""
SavedJob Domain Entity
A job bookmarked by a job seeker.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class SavedJob:
    id: UUID
    user_id: UUID
    job_id: UUID
    notes: Optional[str] = None
    saved_at: Optional[datetime] = None
