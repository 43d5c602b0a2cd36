"""
Saved Job Service
Job seekers' bookmarks
"""
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from loguru import logger

from core.exceptions import (
    AuthorizationException,
    DuplicateResourceException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.entities import Job, SavedJob, User
from domain.enums import UserType
from application.repositories.interfaces import IJobRepository, ISavedJobRepository
from application.services.jobs import JobLifecycleService
from application.services.pagination import Page, PageRequest
from application.services.side_effects import SavepointFactory, best_effort


class SavedJobService:
    def __init__(
        self,
        saved_job_repository: ISavedJobRepository,
        job_repository: IJobRepository,
        job_lifecycle: JobLifecycleService,
        savepoint: Optional[SavepointFactory] = None,
    ):
        self.saved_job_repo = saved_job_repository
        self.job_repo = job_repository
        self.job_lifecycle = job_lifecycle
        self.savepoint = savepoint

    async def save_job(self, user: User, job_id: UUID, notes: Optional[str] = None) -> SavedJob:
        if user.user_type != UserType.JOB_SEEKER:
            raise AuthorizationException("Only job seekers can save jobs")

        job = await self.job_repo.get_by_id(job_id)
        if job is None or not job.is_published():
            raise ResourceNotFoundException("Job", f"{job_id} (not found or not available)")

        if await self.saved_job_repo.get(user.id, job_id):
            raise DuplicateResourceException("SavedJob", "job_id", str(job_id))

        saved = await self.saved_job_repo.create(
            SavedJob(
                id=uuid4(),
                user_id=user.id,
                job_id=job_id,
                notes=notes,
                saved_at=datetime.now(timezone.utc),
            )
        )
        logger.info(f"Job {job_id} saved by {user.id}")

        await best_effort(
            "increment job saves",
            lambda: self.job_lifecycle.increment_saves(job_id),
            self.savepoint,
        )
        return saved

    async def remove_saved_job(self, user_id: UUID, job_id: UUID) -> None:
        if not await self.saved_job_repo.delete(user_id, job_id):
            raise ResourceNotFoundException("SavedJob", str(job_id))

    async def bulk_remove(self, user_id: UUID, job_ids: List[UUID]) -> int:
        if not job_ids:
            raise ValidationException("job_ids", "Job IDs array is required")
        return await self.saved_job_repo.delete_many(user_id, job_ids)

    async def is_saved(self, user_id: UUID, job_id: UUID) -> Optional[SavedJob]:
        """The bookmark when the job is saved, otherwise None"""
        return await self.saved_job_repo.get(user_id, job_id)

    async def count_saved(self, user_id: UUID) -> int:
        return await self.saved_job_repo.count_by_user(user_id)

    async def list_saved_jobs(self, user_id: UUID, request: PageRequest) -> Page[Tuple[SavedJob, Job]]:
        """Only bookmarks whose job is still published are returned"""
        items, total = await self.saved_job_repo.list_published_by_user(user_id, request.offset, request.limit)
        return Page.build(items, total, request)
