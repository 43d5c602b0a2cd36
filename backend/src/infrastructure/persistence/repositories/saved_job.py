"""
SavedJob Repository Implementation
"""
from typing import Optional, List, Tuple
from uuid import UUID

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Job, SavedJob
from domain.value_objects import JobStatus
from application.repositories.interfaces import ISavedJobRepository
from infrastructure.persistence.models.job import JobModel
from infrastructure.persistence.models.saved_job import SavedJobModel
from infrastructure.persistence.repositories.job import SQLAlchemyJobRepository
from core.exceptions import DuplicateResourceException, RepositoryException


class SQLAlchemySavedJobRepository(ISavedJobRepository):
    """SQLAlchemy implementation of saved job repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: UUID, job_id: UUID) -> Optional[SavedJob]:
        try:
            result = await self.session.execute(
                select(SavedJobModel).where(
                    SavedJobModel.user_id == user_id,
                    SavedJobModel.job_id == job_id,
                )
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get saved job {job_id} for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get saved job: {str(e)}")

    async def create(self, saved_job: SavedJob) -> SavedJob:
        try:
            model = SavedJobModel(
                id=saved_job.id,
                user_id=saved_job.user_id,
                job_id=saved_job.job_id,
                notes=saved_job.notes,
            )
            if saved_job.saved_at:
                model.saved_at = saved_job.saved_at
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except IntegrityError:
            raise DuplicateResourceException("SavedJob", "job_id", str(saved_job.job_id))
        except Exception as e:
            logger.error(f"Failed to save job {saved_job.job_id}: {str(e)}")
            raise RepositoryException(f"Failed to save job: {str(e)}")

    async def delete(self, user_id: UUID, job_id: UUID) -> bool:
        return await self.delete_many(user_id, [job_id]) > 0

    async def delete_many(self, user_id: UUID, job_ids: List[UUID]) -> int:
        try:
            result = await self.session.execute(
                delete(SavedJobModel)
                .where(SavedJobModel.user_id == user_id, SavedJobModel.job_id.in_(job_ids))
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

        except Exception as e:
            logger.error(f"Failed to remove saved jobs for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to remove saved jobs: {str(e)}")

    async def count_by_user(self, user_id: UUID) -> int:
        try:
            total = await self.session.scalar(
                select(func.count()).select_from(SavedJobModel).where(SavedJobModel.user_id == user_id)
            )
            return total or 0

        except Exception as e:
            logger.error(f"Failed to count saved jobs for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to count saved jobs: {str(e)}")

    async def list_published_by_user(
        self,
        user_id: UUID,
        offset: int,
        limit: int,
    ) -> Tuple[List[Tuple[SavedJob, Job]], int]:
        conditions = [
            SavedJobModel.user_id == user_id,
            JobModel.status == JobStatus.PUBLISHED.value,
        ]

        try:
            total = await self.session.scalar(
                select(func.count())
                .select_from(SavedJobModel)
                .join(JobModel, JobModel.id == SavedJobModel.job_id)
                .where(*conditions)
            )
            result = await self.session.execute(
                select(SavedJobModel, JobModel)
                .join(JobModel, JobModel.id == SavedJobModel.job_id)
                .where(*conditions)
                .order_by(SavedJobModel.saved_at.desc())
                .offset(offset)
                .limit(limit)
            )
            items = [
                (self._to_entity(saved), SQLAlchemyJobRepository._to_entity(job))
                for saved, job in result.all()
            ]
            return items, total or 0

        except Exception as e:
            logger.error(f"Failed to list saved jobs for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list saved jobs: {str(e)}")

    @staticmethod
    def _to_entity(model: SavedJobModel) -> SavedJob:
        return SavedJob(
            id=model.id,
            user_id=model.user_id,
            job_id=model.job_id,
            notes=model.notes,
            saved_at=model.saved_at,
        )
