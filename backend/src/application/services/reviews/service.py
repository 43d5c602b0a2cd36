"""
Review Service
Company reviews written by job seekers
"""
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple
from uuid import UUID, uuid4

from loguru import logger

from core.config import settings
from core.exceptions import (
    AuthorizationException,
    DuplicateResourceException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.entities import Review, User
from domain.enums import UserType
from domain.value_objects import ApplicationStatus, MIN_RATING, MAX_RATING
from application.repositories.interfaces import (
    IApplicationRepository,
    ICompanyRepository,
    IJobRepository,
    IReviewRepository,
)
from application.services.pagination import Page, PageRequest
from .rating import RatingAggregationService


EDITABLE_FIELDS = ("rating", "title", "comment", "pros", "cons", "advice_to_management")


def _check_rating(rating: Any) -> None:
    if not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationException("rating", f"Rating must be between {MIN_RATING} and {MAX_RATING}")


class ReviewService:
    def __init__(
        self,
        review_repository: IReviewRepository,
        company_repository: ICompanyRepository,
        job_repository: IJobRepository,
        application_repository: IApplicationRepository,
        rating_aggregation: RatingAggregationService,
        flag_threshold: Optional[int] = None,
    ):
        self.review_repo = review_repository
        self.company_repo = company_repository
        self.job_repo = job_repository
        self.application_repo = application_repository
        self.ratings = rating_aggregation
        self.flag_threshold = flag_threshold or settings.REVIEW_FLAG_THRESHOLD

    async def create_review(self, author: User, data: Dict[str, Any]) -> Review:
        if author.user_type != UserType.JOB_SEEKER:
            raise AuthorizationException("Only job seekers can write reviews")

        company_id = data["company_id"]
        if await self.company_repo.get_by_id(company_id) is None:
            raise ResourceNotFoundException("Company", str(company_id))

        job_id = data.get("job_id")
        if job_id is not None:
            if await self.job_repo.get_by_id(job_id) is None:
                raise ResourceNotFoundException("Job", str(job_id))
            application = await self.application_repo.get_by_user_and_job(author.id, job_id)
            if application is None or application.status != ApplicationStatus.ACCEPTED:
                logger.warning(f"User {author.id} refused review of company {company_id}: no accepted application")
                raise AuthorizationException("You can only review companies where you were employed")

        if await self.review_repo.get_by_user_and_company(author.id, company_id):
            raise DuplicateResourceException("Review", "company_id", str(company_id))

        _check_rating(data.get("rating"))

        now = datetime.now(timezone.utc)
        review = await self.review_repo.create(
            Review(
                id=uuid4(),
                company_id=company_id,
                user_id=author.id,
                job_id=job_id,
                rating=data["rating"],
                title=data.get("title") or "",
                comment=data.get("comment"),
                pros=data.get("pros"),
                cons=data.get("cons"),
                advice_to_management=data.get("advice_to_management"),
                created_at=now,
                updated_at=now,
            )
        )
        logger.info(f"Review {review.id} created for company {company_id} by {author.id}")

        await self.ratings.recompute_company_rating(company_id)
        return review

    async def update_review(self, review_id: UUID, actor_id: UUID, data: Dict[str, Any]) -> Review:
        review = await self._get_authored(review_id, actor_id, "update")

        changes = {key: data[key] for key in EDITABLE_FIELDS if data.get(key) is not None}
        if "rating" in changes:
            _check_rating(changes["rating"])

        updated = await self.review_repo.update(
            replace(review, **changes, updated_at=datetime.now(timezone.utc))
        )
        await self.ratings.recompute_company_rating(review.company_id)
        return updated

    async def delete_review(self, review_id: UUID, actor_id: UUID) -> None:
        review = await self._get_authored(review_id, actor_id, "delete")
        await self.review_repo.delete(review_id)
        logger.info(f"Review {review_id} deleted by {actor_id}")
        await self.ratings.recompute_company_rating(review.company_id)

    async def get_review(self, review_id: UUID) -> Review:
        review = await self.review_repo.get_by_id(review_id)
        if review is None:
            raise ResourceNotFoundException("Review", str(review_id))
        return review

    async def list_company_reviews(
        self,
        company_id: UUID,
        rating: Optional[int],
        request: PageRequest,
    ) -> Page[Review]:
        items, total = await self.review_repo.list_by_company(company_id, rating, request.offset, request.limit)
        return Page.build(items, total, request)

    async def list_user_reviews(self, user_id: UUID, request: PageRequest) -> Page[Review]:
        items, total = await self.review_repo.list_by_user(user_id, request.offset, request.limit)
        return Page.build(items, total, request)

    async def like_review(self, review_id: UUID, user_id: UUID) -> Tuple[bool, int]:
        """Toggle the caller's like; returns (liked, likes_count)"""
        await self.get_review(review_id)
        liked, likes = await self.review_repo.toggle_like(review_id, user_id)
        logger.info(f"Review {review_id} {'liked' if liked else 'unliked'} by {user_id}")
        return liked, likes

    async def report_review(
        self,
        review_id: UUID,
        reporter_id: UUID,
        reason: str,
        description: Optional[str] = None,
    ) -> Review:
        """One report per user; enough reports hide the review until a moderator decides"""
        review = await self.get_review(review_id)
        if review.is_written_by(reporter_id):
            raise ValidationException("review", "You cannot report your own review")
        if not reason or not reason.strip():
            raise ValidationException("reason", "Report reason is required")

        reports = await self.review_repo.add_report(review_id, reporter_id, reason.strip(), description)
        logger.info(f"Review {review_id} reported by {reporter_id} ({reports} reports)")

        if reports >= self.flag_threshold and not review.is_flagged:
            review = await self.review_repo.update(
                replace(review, is_flagged=True, is_approved=False, updated_at=datetime.now(timezone.utc))
            )
            logger.warning(f"Review {review_id} flagged after {reports} reports")
            await self.ratings.recompute_company_rating(review.company_id)
        return review

    async def moderate_review(self, review_id: UUID, moderator: User, approve: bool) -> Review:
        """Administrators publish or hide a review; either way the flag is cleared"""
        if not moderator.is_admin():
            raise AuthorizationException("Only administrators can moderate reviews")
        review = await self.get_review(review_id)

        moderated = await self.review_repo.update(
            replace(review, is_approved=approve, is_flagged=False, updated_at=datetime.now(timezone.utc))
        )
        logger.info(f"Review {review_id} {'approved' if approve else 'rejected'} by {moderator.id}")
        await self.ratings.recompute_company_rating(review.company_id)
        return moderated

    async def list_flagged_reviews(self, moderator: User, request: PageRequest) -> Page[Review]:
        if not moderator.is_admin():
            raise AuthorizationException("Only administrators can moderate reviews")
        items, total = await self.review_repo.list_flagged(request.offset, request.limit)
        return Page.build(items, total, request)

    async def _get_authored(self, review_id: UUID, actor_id: UUID, action: str) -> Review:
        review = await self.get_review(review_id)
        if not review.is_written_by(actor_id):
            logger.warning(f"User {actor_id} refused to {action} review {review_id}")
            raise AuthorizationException(f"Not authorized to {action} this review")
        return review
