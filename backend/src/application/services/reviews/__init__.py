"""
Reviews Service Package
"""
from .rating import RatingAggregationService
from .service import ReviewService

__all__ = ["RatingAggregationService", "ReviewService"]
