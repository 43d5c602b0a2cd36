"""
Application Repository Implementation
SQLAlchemy-based job application repository
"""
from datetime import datetime
from typing import Optional, List, Tuple, Dict
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError
from loguru import logger

from domain.entities import Application, StatusChange
from domain.value_objects import ApplicationStatus
from application.repositories.interfaces import IApplicationRepository
from infrastructure.persistence.models.application import ApplicationModel
from infrastructure.persistence.models.job import JobModel
from core.exceptions import (
    ConcurrencyConflictException,
    DuplicateResourceException,
    RepositoryException,
    ResourceNotFoundException,
)


class SQLAlchemyApplicationRepository(IApplicationRepository):
    """SQLAlchemy implementation of application repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        try:
            result = await self.session.execute(
                select(ApplicationModel).where(ApplicationModel.id == application_id)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to get application: {str(e)}")

    async def get_by_user_and_job(self, user_id: UUID, job_id: UUID) -> Optional[Application]:
        try:
            result = await self.session.execute(
                select(ApplicationModel).where(
                    ApplicationModel.user_id == user_id,
                    ApplicationModel.job_id == job_id,
                )
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get application of {user_id} for job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to get application: {str(e)}")

    async def create(self, application: Application) -> Application:
        try:
            model = self._to_model(application)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except IntegrityError:
            logger.warning(f"Duplicate application of {application.user_id} for job {application.job_id}")
            raise DuplicateResourceException("Application", "job_id", str(application.job_id))
        except Exception as e:
            logger.error(f"Failed to create application: {str(e)}")
            raise RepositoryException(f"Failed to create application: {str(e)}")

    async def update(self, application: Application) -> Application:
        result = await self.session.execute(
            select(ApplicationModel).where(ApplicationModel.id == application.id)
        )
        model = result.scalar_one_or_none()
        if not model:
            raise ResourceNotFoundException("Application", str(application.id))
        if model.version != application.version:
            raise ConcurrencyConflictException("Application", str(application.id))

        try:
            model.cover_letter = application.cover_letter
            model.resume_url = application.resume_url
            model.portfolio_url = application.portfolio_url
            model.linkedin_url = application.linkedin_url
            model.expected_salary = application.expected_salary
            model.status = application.status.value
            model.status_history = self._history_to_json(application.status_history)
            model.rejection_reason = application.rejection_reason
            model.internal_notes = application.internal_notes
            model.reviewed_at = application.reviewed_at
            model.decision_at = application.decision_at
            model.is_viewed = application.is_viewed
            model.viewed_at = application.viewed_at

            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except StaleDataError:
            logger.warning(f"Concurrent modification of application {application.id}")
            raise ConcurrencyConflictException("Application", str(application.id))
        except Exception as e:
            logger.error(f"Failed to update application {application.id}: {str(e)}")
            raise RepositoryException(f"Failed to update application: {str(e)}")

    async def list_by_user(
        self,
        user_id: UUID,
        status: Optional[ApplicationStatus],
        offset: int,
        limit: int,
    ) -> Tuple[List[Application], int]:
        return await self._page(select(ApplicationModel).where(ApplicationModel.user_id == user_id), status, offset, limit)

    async def list_by_job(
        self,
        job_id: UUID,
        status: Optional[ApplicationStatus],
        offset: int,
        limit: int,
    ) -> Tuple[List[Application], int]:
        return await self._page(select(ApplicationModel).where(ApplicationModel.job_id == job_id), status, offset, limit)

    async def list_by_job_poster(
        self,
        posted_by: UUID,
        status: Optional[ApplicationStatus],
        offset: int,
        limit: int,
    ) -> Tuple[List[Application], int]:
        query = (
            select(ApplicationModel)
            .join(JobModel, JobModel.id == ApplicationModel.job_id)
            .where(JobModel.posted_by == posted_by)
        )
        return await self._page(query, status, offset, limit)

    async def list_by_company(self, company_id: UUID, offset: int, limit: int) -> Tuple[List[Application], int]:
        return await self._page(
            select(ApplicationModel).where(ApplicationModel.company_id == company_id), None, offset, limit
        )

    async def count_by_status_for_job(self, job_id: UUID) -> Dict[str, int]:
        try:
            result = await self.session.execute(
                select(ApplicationModel.status, func.count())
                .where(ApplicationModel.job_id == job_id)
                .group_by(ApplicationModel.status)
            )
            return {status: count for status, count in result.all()}

        except Exception as e:
            logger.error(f"Failed to count applications for job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to count applications: {str(e)}")

    async def daily_counts_for_job(self, job_id: UUID, since: datetime) -> List[Tuple[str, int]]:
        day = func.date(ApplicationModel.applied_at)
        try:
            result = await self.session.execute(
                select(day, func.count())
                .where(ApplicationModel.job_id == job_id, ApplicationModel.applied_at >= since)
                .group_by(day)
                .order_by(day)
            )
            return [(str(date), count) for date, count in result.all()]

        except Exception as e:
            logger.error(f"Failed to load application timeline for job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to load application timeline: {str(e)}")

    async def _page(self, query, status: Optional[ApplicationStatus], offset: int, limit: int) -> Tuple[List[Application], int]:
        if status:
            query = query.where(ApplicationModel.status == status.value)

        try:
            total = await self.session.scalar(
                select(func.count()).select_from(query.subquery())
            )
            result = await self.session.execute(
                query.order_by(ApplicationModel.applied_at.desc()).offset(offset).limit(limit)
            )
            return [self._to_entity(m) for m in result.scalars().all()], total or 0

        except Exception as e:
            logger.error(f"Failed to list applications: {str(e)}")
            raise RepositoryException(f"Failed to list applications: {str(e)}")

    @staticmethod
    def _history_to_json(history: Tuple[StatusChange, ...]) -> list:
        return [
            {
                "status": change.status.value,
                "changed_at": change.changed_at.isoformat(),
                "changed_by": str(change.changed_by) if change.changed_by else None,
                "reason": change.reason,
            }
            for change in history
        ]

    @staticmethod
    def _history_from_json(raw: Optional[list]) -> Tuple[StatusChange, ...]:
        return tuple(
            StatusChange(
                status=ApplicationStatus(entry["status"]),
                changed_at=datetime.fromisoformat(entry["changed_at"]),
                changed_by=UUID(entry["changed_by"]) if entry.get("changed_by") else None,
                reason=entry.get("reason"),
            )
            for entry in raw or []
        )

    def _to_entity(self, model: ApplicationModel) -> Application:
        return Application(
            id=model.id,
            job_id=model.job_id,
            user_id=model.user_id,
            company_id=model.company_id,
            cover_letter=model.cover_letter,
            resume_url=model.resume_url,
            portfolio_url=model.portfolio_url,
            linkedin_url=model.linkedin_url,
            expected_salary=model.expected_salary,
            status=ApplicationStatus(model.status),
            status_history=self._history_from_json(model.status_history),
            rejection_reason=model.rejection_reason,
            internal_notes=model.internal_notes,
            applied_at=model.applied_at,
            reviewed_at=model.reviewed_at,
            decision_at=model.decision_at,
            updated_at=model.updated_at,
            is_viewed=model.is_viewed,
            viewed_at=model.viewed_at,
            version=model.version,
        )

    def _to_model(self, application: Application) -> ApplicationModel:
        model = ApplicationModel(
            id=application.id,
            job_id=application.job_id,
            user_id=application.user_id,
            company_id=application.company_id,
            cover_letter=application.cover_letter,
            resume_url=application.resume_url,
            portfolio_url=application.portfolio_url,
            linkedin_url=application.linkedin_url,
            expected_salary=application.expected_salary,
            status=application.status.value,
            status_history=self._history_to_json(application.status_history),
            rejection_reason=application.rejection_reason,
            internal_notes=application.internal_notes,
            is_viewed=application.is_viewed,
        )
        if application.applied_at:
            model.applied_at = application.applied_at
            model.updated_at = application.updated_at or application.applied_at
        return model
