"""
Rating Aggregation Service
Keeps a company's derived rating in step with its approved reviews
"""
from uuid import UUID

from loguru import logger

from domain.value_objects import RatingSummary
from application.repositories.interfaces import ICompanyRepository, IReviewRepository


class RatingAggregationService:
    """Recomputes average_rating / review_count with SQL aggregates after each review change"""

    def __init__(self, review_repository: IReviewRepository, company_repository: ICompanyRepository):
        self.review_repo = review_repository
        self.company_repo = company_repository

    async def recompute_company_rating(self, company_id: UUID) -> RatingSummary:
        average, count = await self.review_repo.rating_aggregate(company_id)
        summary = RatingSummary.from_aggregate(average, count)
        await self.company_repo.set_rating(company_id, summary.average_rating, summary.review_count)
        logger.info(
            f"Company {company_id} rating recomputed: "
            f"{summary.average_rating} over {summary.review_count} reviews"
        )
        return summary

    async def rating_stats(self, company_id: UUID) -> RatingSummary:
        average, count = await self.review_repo.rating_aggregate(company_id)
        distribution = await self.review_repo.rating_distribution(company_id) if count else {}
        return RatingSummary.from_aggregate(average, count, distribution)
