"""
Review Schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects import RatingSummary


class ReviewCreateRequest(BaseModel):
    company_id: UUID
    job_id: Optional[UUID] = None
    # Range is enforced by the review service
    rating: int
    title: str = Field(..., min_length=1, max_length=200)
    comment: Optional[str] = Field(None, max_length=5000)
    pros: Optional[str] = Field(None, max_length=2000)
    cons: Optional[str] = Field(None, max_length=2000)
    advice_to_management: Optional[str] = Field(None, max_length=2000)


class ReviewUpdateRequest(BaseModel):
    rating: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    comment: Optional[str] = Field(None, max_length=5000)
    pros: Optional[str] = Field(None, max_length=2000)
    cons: Optional[str] = Field(None, max_length=2000)
    advice_to_management: Optional[str] = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    user_id: UUID
    job_id: Optional[UUID] = None
    rating: int
    title: str
    comment: Optional[str] = None
    pros: Optional[str] = None
    cons: Optional[str] = None
    advice_to_management: Optional[str] = None
    is_approved: bool = True
    is_flagged: bool = False
    likes_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReviewReportRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)


class ReviewModerationRequest(BaseModel):
    approve: bool


class ReviewLikeResponse(BaseModel):
    liked: bool
    likes_count: int


class RatingBucket(BaseModel):
    rating: int
    count: int
    percentage: float


class RatingStatsResponse(BaseModel):
    average_rating: float
    total_reviews: int
    rating_distribution: List[RatingBucket]

    @classmethod
    def from_summary(cls, summary: RatingSummary) -> "RatingStatsResponse":
        return cls(
            average_rating=summary.average_rating,
            total_reviews=summary.review_count,
            rating_distribution=[RatingBucket(**bucket) for bucket in summary.percentages()],
        )
