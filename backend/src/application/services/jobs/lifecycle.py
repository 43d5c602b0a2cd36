"""
Job Lifecycle Service
Creates job postings and moves them through draft / published / closed
"""
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from loguru import logger

from core.exceptions import (
    AuthorizationException,
    InvalidTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.entities import Job
from domain.enums import DatePosted, ExperienceLevel, JobCategory, JobType
from domain.value_objects import JobLocation, JobStatus, Salary
from application.repositories.interfaces import (
    ICompanyRepository,
    IJobRepository,
    IUserRepository,
    JobSearchCriteria,
)
from application.services.pagination import Page, PageRequest
from application.services.side_effects import SavepointFactory, best_effort


REQUIRED_FIELDS = ("title", "description", "job_type", "experience_level", "category")

# Fields the owner may edit with update_job
EDITABLE_FIELDS = (
    "title",
    "description",
    "job_type",
    "experience_level",
    "category",
    "department",
    "required_skills",
    "benefits",
)

ENUM_FIELDS = {
    "job_type": JobType,
    "experience_level": ExperienceLevel,
    "category": JobCategory,
}

DATE_POSTED_WINDOWS = {
    DatePosted.TODAY: timedelta(days=1),
    DatePosted.WEEK: timedelta(days=7),
    DatePosted.MONTH: timedelta(days=30),
}


def posted_after(window: Optional[DatePosted], now: Optional[datetime] = None) -> Optional[datetime]:
    """Lower bound on created_at for a date-posted filter"""
    if window is None:
        return None
    return (now or datetime.now(timezone.utc)) - DATE_POSTED_WINDOWS[window]


class JobLifecycleService:
    """
    Job posting lifecycle.

    State machine: draft <-> published, draft|published -> closed (terminal).
    Every transition is owner-only and keeps the owning company's
    active_jobs_count in step.
    """

    def __init__(
        self,
        job_repository: IJobRepository,
        company_repository: ICompanyRepository,
        user_repository: IUserRepository,
        savepoint: Optional[SavepointFactory] = None,
    ):
        self.job_repo = job_repository
        self.company_repo = company_repository
        self.user_repo = user_repository
        self.savepoint = savepoint

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_job(self, data: Dict[str, Any], posted_by: UUID) -> Job:
        """Create a posting; published immediately unless a draft is requested"""
        for field_name in REQUIRED_FIELDS:
            if not data.get(field_name):
                raise ValidationException(field_name, "is required")

        try:
            status = JobStatus(data.get("status") or JobStatus.PUBLISHED)
        except ValueError:
            raise ValidationException("status", f"unknown status {data.get('status')!r}")
        if status not in (JobStatus.DRAFT, JobStatus.PUBLISHED):
            raise ValidationException("status", "a new job must be draft or published")

        company_id = data.get("company_id")
        if company_id is None:
            poster = await self.user_repo.get_by_id(posted_by)
            if poster is not None:
                company_id = poster.company_id

        now = datetime.now(timezone.utc)
        try:
            job = Job(
                id=uuid4(),
                posted_by=posted_by,
                company_id=company_id,
                title=data["title"].strip(),
                description=data["description"],
                job_type=JobType(data["job_type"]),
                experience_level=ExperienceLevel(data["experience_level"]),
                category=JobCategory(data["category"]),
                department=data.get("department"),
                location=JobLocation(**(data.get("location") or {})),
                salary=Salary(**(data.get("salary") or {})),
                required_skills=list(data.get("required_skills") or []),
                benefits=list(data.get("benefits") or []),
                status=status,
                published_at=now if status == JobStatus.PUBLISHED else None,
                created_at=now,
                updated_at=now,
            )
        except ValueError as e:
            raise ValidationException("job", str(e))

        created = await self.job_repo.create(job)
        logger.info(f"Job {created.id} created by {posted_by} with status {created.status.value}")

        if created.company_id:
            await best_effort(
                "increment company active jobs",
                lambda: self.company_repo.adjust_active_jobs(created.company_id, 1),
                self.savepoint,
            )
        return created

    async def publish_job(self, job_id: UUID, actor_id: UUID) -> Job:
        job = await self._get_owned_job(job_id, actor_id, "publish")
        self._check_transition(job, JobStatus.PUBLISHED)

        published = await self.job_repo.update(
            replace(
                job,
                status=JobStatus.PUBLISHED,
                published_at=datetime.now(timezone.utc),
                updated_at=datetime.now(timezone.utc),
            )
        )
        logger.info(f"Job {job_id} published")
        return published

    async def unpublish_job(self, job_id: UUID, actor_id: UUID) -> Job:
        job = await self._get_owned_job(job_id, actor_id, "unpublish")
        self._check_transition(job, JobStatus.DRAFT)

        drafted = await self.job_repo.update(
            replace(job, status=JobStatus.DRAFT, updated_at=datetime.now(timezone.utc))
        )
        logger.info(f"Job {job_id} moved back to draft")
        return drafted

    async def close_job(self, job_id: UUID, actor_id: UUID) -> Job:
        job = await self._get_owned_job(job_id, actor_id, "close")
        self._check_transition(job, JobStatus.CLOSED)

        now = datetime.now(timezone.utc)
        closed = await self.job_repo.update(
            replace(job, status=JobStatus.CLOSED, closed_at=now, updated_at=now)
        )
        logger.info(f"Job {job_id} closed")

        if closed.company_id:
            await best_effort(
                "decrement company active jobs",
                lambda: self.company_repo.adjust_active_jobs(closed.company_id, -1),
                self.savepoint,
            )
        return closed

    async def update_job(self, job_id: UUID, data: Dict[str, Any], actor_id: UUID) -> Job:
        """Edit descriptive fields; status only changes through the transitions"""
        job = await self._get_owned_job(job_id, actor_id, "update")

        if "status" in data:
            raise ValidationException("status", "use the publish, unpublish or close operations")

        changes = {key: data[key] for key in EDITABLE_FIELDS if key in data}
        try:
            for key, enum_type in ENUM_FIELDS.items():
                if key in changes:
                    changes[key] = enum_type(changes[key])
            if "location" in data:
                changes["location"] = JobLocation(**(data["location"] or {}))
            if "salary" in data:
                changes["salary"] = Salary(**(data["salary"] or {}))
            updated = replace(job, **changes, updated_at=datetime.now(timezone.utc))
        except ValueError as e:
            raise ValidationException("job", str(e))

        saved = await self.job_repo.update(updated)
        logger.info(f"Job {job_id} updated: {sorted(changes)}")
        return saved

    async def delete_job(self, job_id: UUID, actor_id: UUID) -> None:
        """Hard delete; applications to the job are left in place"""
        job = await self._get_owned_job(job_id, actor_id, "delete")

        await self.job_repo.delete(job_id)
        logger.info(f"Job {job_id} deleted by {actor_id}")

        # A closed job was already taken off the company's active count
        if job.company_id and job.status != JobStatus.CLOSED:
            await best_effort(
                "decrement company active jobs",
                lambda: self.company_repo.adjust_active_jobs(job.company_id, -1),
                self.savepoint,
            )

    async def increment_views(self, job_id: UUID) -> None:
        await self._require_job(job_id)
        await self.job_repo.increment_views(job_id)

    async def increment_applications(self, job_id: UUID) -> None:
        await self.job_repo.increment_applications(job_id)

    async def increment_saves(self, job_id: UUID) -> None:
        await self.job_repo.increment_saves(job_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_job(self, job_id: UUID, viewer_id: Optional[UUID] = None) -> Job:
        """Read a job, counting a view unless the viewer posted it"""
        job = await self._require_job(job_id)

        if viewer_id is None or not job.is_owned_by(viewer_id):
            counted = await best_effort(
                "increment job views",
                lambda: self.job_repo.increment_views(job_id),
                self.savepoint,
            )
            if counted:
                job = replace(job, views=job.views + 1)
        return job

    async def list_jobs(self, criteria: JobSearchCriteria, request: PageRequest) -> Page[Job]:
        jobs, total = await self.job_repo.search(criteria, request.offset, request.limit)
        return Page.build(jobs, total, request)

    async def list_employer_jobs(
        self,
        posted_by: UUID,
        status: Optional[JobStatus],
        request: PageRequest,
    ) -> Page[Job]:
        jobs, total = await self.job_repo.list_by_poster(posted_by, status, request.offset, request.limit)
        return Page.build(jobs, total, request)

    async def trending_jobs(self, limit: int = 10) -> List[Job]:
        return await self.job_repo.trending(limit)

    async def job_stats(self) -> Dict[str, Any]:
        by_category = await self.job_repo.count_by_category(JobStatus.PUBLISHED)
        return {
            "total_jobs": sum(by_category.values()),
            "category_stats": [
                {"category": category, "count": count}
                for category, count in sorted(by_category.items(), key=lambda item: -item[1])
            ],
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_job(self, job_id: UUID) -> Job:
        job = await self.job_repo.get_by_id(job_id)
        if job is None:
            raise ResourceNotFoundException("Job", str(job_id))
        return job

    async def _get_owned_job(self, job_id: UUID, actor_id: UUID, action: str) -> Job:
        job = await self._require_job(job_id)
        if not job.is_owned_by(actor_id):
            logger.warning(f"User {actor_id} refused to {action} job {job_id} owned by {job.posted_by}")
            raise AuthorizationException(f"Not authorized to {action} this job")
        return job

    @staticmethod
    def _check_transition(job: Job, target: JobStatus) -> None:
        if not job.status.can_transition_to(target):
            raise InvalidTransitionException("Job", job.status.value, target.value)
