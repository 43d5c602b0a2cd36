"""
Review Repository Implementation
"""
from typing import Optional, List, Tuple, Dict
from uuid import UUID

from sqlalchemy import select, delete, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Review
from application.repositories.interfaces import IReviewRepository
from infrastructure.persistence.models.review import ReviewModel, ReviewLikeModel, ReviewReportModel
from core.exceptions import DuplicateResourceException, RepositoryException, ResourceNotFoundException


class SQLAlchemyReviewRepository(IReviewRepository):
    """SQLAlchemy implementation of review repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, review_id: UUID) -> Optional[Review]:
        try:
            result = await self.session.execute(
                select(ReviewModel).where(ReviewModel.id == review_id)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get review {review_id}: {str(e)}")
            raise RepositoryException(f"Failed to get review: {str(e)}")

    async def get_by_user_and_company(self, user_id: UUID, company_id: UUID) -> Optional[Review]:
        try:
            result = await self.session.execute(
                select(ReviewModel).where(
                    ReviewModel.user_id == user_id,
                    ReviewModel.company_id == company_id,
                )
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get review of {user_id} for company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to get review: {str(e)}")

    async def create(self, review: Review) -> Review:
        try:
            model = self._to_model(review)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except IntegrityError:
            raise DuplicateResourceException("Review", "company_id", str(review.company_id))
        except Exception as e:
            logger.error(f"Failed to create review: {str(e)}")
            raise RepositoryException(f"Failed to create review: {str(e)}")

    async def update(self, review: Review) -> Review:
        result = await self.session.execute(
            select(ReviewModel).where(ReviewModel.id == review.id)
        )
        model = result.scalar_one_or_none()
        if not model:
            raise ResourceNotFoundException("Review", str(review.id))

        try:
            model.rating = review.rating
            model.title = review.title
            model.comment = review.comment
            model.pros = review.pros
            model.cons = review.cons
            model.advice_to_management = review.advice_to_management
            model.is_approved = review.is_approved
            model.is_flagged = review.is_flagged

            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to update review {review.id}: {str(e)}")
            raise RepositoryException(f"Failed to update review: {str(e)}")

    async def delete(self, review_id: UUID) -> bool:
        try:
            result = await self.session.execute(
                delete(ReviewModel).where(ReviewModel.id == review_id)
            )
            return result.rowcount > 0

        except Exception as e:
            logger.error(f"Failed to delete review {review_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete review: {str(e)}")

    async def list_by_company(
        self,
        company_id: UUID,
        rating: Optional[int],
        offset: int,
        limit: int,
    ) -> Tuple[List[Review], int]:
        conditions = [ReviewModel.company_id == company_id, ReviewModel.is_approved.is_(True)]
        if rating:
            conditions.append(ReviewModel.rating == rating)
        return await self._page(conditions, offset, limit)

    async def list_by_user(self, user_id: UUID, offset: int, limit: int) -> Tuple[List[Review], int]:
        return await self._page([ReviewModel.user_id == user_id], offset, limit)

    async def list_flagged(self, offset: int, limit: int) -> Tuple[List[Review], int]:
        return await self._page([ReviewModel.is_flagged.is_(True)], offset, limit)

    async def rating_aggregate(self, company_id: UUID) -> Tuple[Optional[float], int]:
        try:
            result = await self.session.execute(
                select(func.avg(ReviewModel.rating), func.count(ReviewModel.id)).where(
                    ReviewModel.company_id == company_id,
                    ReviewModel.is_approved.is_(True),
                )
            )
            average, count = result.one()
            return (float(average) if average is not None else None), count or 0

        except Exception as e:
            logger.error(f"Failed to aggregate ratings for company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to aggregate ratings: {str(e)}")

    async def rating_distribution(self, company_id: UUID) -> Dict[int, int]:
        try:
            result = await self.session.execute(
                select(ReviewModel.rating, func.count(ReviewModel.id))
                .where(
                    ReviewModel.company_id == company_id,
                    ReviewModel.is_approved.is_(True),
                )
                .group_by(ReviewModel.rating)
            )
            return {rating: count for rating, count in result.all()}

        except Exception as e:
            logger.error(f"Failed to load rating distribution for company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to load rating distribution: {str(e)}")

    async def toggle_like(self, review_id: UUID, user_id: UUID) -> Tuple[bool, int]:
        try:
            existing = await self.session.scalar(
                select(ReviewLikeModel.id).where(
                    ReviewLikeModel.review_id == review_id,
                    ReviewLikeModel.user_id == user_id,
                )
            )
            if existing is not None:
                await self.session.execute(delete(ReviewLikeModel).where(ReviewLikeModel.id == existing))
                delta = -1
            else:
                self.session.add(ReviewLikeModel(review_id=review_id, user_id=user_id))
                await self.session.flush()
                delta = 1

            await self.session.execute(
                update(ReviewModel)
                .where(ReviewModel.id == review_id)
                .values(likes_count=ReviewModel.likes_count + delta)
                .execution_options(synchronize_session=False)
            )
            likes = await self.session.scalar(
                select(ReviewModel.likes_count).where(ReviewModel.id == review_id)
            )
            return delta > 0, likes or 0

        except IntegrityError:
            raise DuplicateResourceException("Like", "review_id", str(review_id))
        except Exception as e:
            logger.error(f"Failed to toggle like on review {review_id}: {str(e)}")
            raise RepositoryException(f"Failed to toggle like: {str(e)}")

    async def add_report(self, review_id: UUID, user_id: UUID, reason: str, description: Optional[str]) -> int:
        try:
            self.session.add(
                ReviewReportModel(review_id=review_id, user_id=user_id, reason=reason, description=description)
            )
            await self.session.flush()
            await self.session.execute(
                update(ReviewModel)
                .where(ReviewModel.id == review_id)
                .values(report_count=ReviewModel.report_count + 1)
                .execution_options(synchronize_session=False)
            )
            reports = await self.session.scalar(
                select(ReviewModel.report_count).where(ReviewModel.id == review_id)
            )
            return reports or 0

        except IntegrityError:
            logger.warning(f"User {user_id} reported review {review_id} twice")
            raise DuplicateResourceException("Report", "review_id", str(review_id))
        except Exception as e:
            logger.error(f"Failed to report review {review_id}: {str(e)}")
            raise RepositoryException(f"Failed to report review: {str(e)}")

    async def _page(self, conditions: list, offset: int, limit: int) -> Tuple[List[Review], int]:
        try:
            total = await self.session.scalar(
                select(func.count()).select_from(ReviewModel).where(*conditions)
            )
            result = await self.session.execute(
                select(ReviewModel)
                .where(*conditions)
                .order_by(ReviewModel.created_at.desc())
                .offset(offset)
                .limit(limit)
            )
            return [self._to_entity(m) for m in result.scalars().all()], total or 0

        except Exception as e:
            logger.error(f"Failed to list reviews: {str(e)}")
            raise RepositoryException(f"Failed to list reviews: {str(e)}")

    @staticmethod
    def _to_entity(model: ReviewModel) -> Review:
        return Review(
            id=model.id,
            company_id=model.company_id,
            user_id=model.user_id,
            job_id=model.job_id,
            rating=model.rating,
            title=model.title,
            comment=model.comment,
            pros=model.pros,
            cons=model.cons,
            advice_to_management=model.advice_to_management,
            is_approved=model.is_approved,
            is_flagged=model.is_flagged,
            likes_count=model.likes_count,
            report_count=model.report_count,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_model(review: Review) -> ReviewModel:
        model = ReviewModel(
            id=review.id,
            company_id=review.company_id,
            user_id=review.user_id,
            job_id=review.job_id,
            rating=review.rating,
            title=review.title,
            comment=review.comment,
            pros=review.pros,
            cons=review.cons,
            advice_to_management=review.advice_to_management,
            is_approved=review.is_approved,
            is_flagged=review.is_flagged,
            likes_count=review.likes_count,
            report_count=review.report_count,
        )
        if review.created_at:
            model.created_at = review.created_at
            model.updated_at = review.updated_at or review.created_at
        return model
