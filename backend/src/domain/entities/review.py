"""
Review Domain Entity
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ..value_objects import MIN_RATING, MAX_RATING


@dataclass(frozen=True)
class Review:
    """Company review written by a job seeker"""

    id: UUID
    company_id: UUID
    user_id: UUID
    rating: int
    title: str
    job_id: Optional[UUID] = None

    comment: Optional[str] = None
    pros: Optional[str] = None
    cons: Optional[str] = None
    advice_to_management: Optional[str] = None

    # Moderation
    is_approved: bool = True
    is_flagged: bool = False
    likes_count: int = 0
    report_count: int = 0

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not MIN_RATING <= self.rating <= MAX_RATING:
            raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

    def is_written_by(self, user_id: UUID) -> bool:
        return self.user_id == user_id
