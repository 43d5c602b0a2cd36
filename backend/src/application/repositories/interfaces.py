"""
Repository Interfaces (Abstract Base Classes)
Define contracts for data access without implementation details
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, List, Tuple, Dict
from uuid import UUID

from domain.entities import User, Company, Job, Application, Review, Notification, SavedJob
from domain.enums import JobType, ExperienceLevel, JobCategory, CompanyIndustry
from domain.value_objects import JobStatus, ApplicationStatus


@dataclass(frozen=True)
class JobSearchCriteria:
    """Filters for the public job listing"""

    status: JobStatus = JobStatus.PUBLISHED
    search: Optional[str] = None
    category: Optional[JobCategory] = None
    job_type: Optional[JobType] = None
    experience_level: Optional[ExperienceLevel] = None
    city: Optional[str] = None
    is_remote: Optional[bool] = None
    company_id: Optional[UUID] = None
    min_salary: Optional[int] = None
    max_salary: Optional[int] = None
    posted_after: Optional[datetime] = None
    sort_by: str = "created_at"
    descending: bool = True


class IUserRepository(ABC):
    """User repository interface"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool:
        """Delete user"""
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Check if user exists by email"""
        pass

    @abstractmethod
    async def set_company(self, user_id: UUID, company_id: Optional[UUID]) -> None:
        """Link (or unlink) an employer to a company"""
        pass

    @abstractmethod
    async def search_job_seekers(self, search: Optional[str], offset: int, limit: int) -> Tuple[List[User], int]:
        """Active job seekers matching name or skills, newest first"""
        pass


class ICompanyRepository(ABC):
    """Company repository interface"""

    @abstractmethod
    async def get_by_id(self, company_id: UUID) -> Optional[Company]:
        pass

    @abstractmethod
    async def get_by_owner(self, owner_id: UUID) -> Optional[Company]:
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[Company]:
        pass

    @abstractmethod
    async def exists_by_name(self, name: str) -> bool:
        pass

    @abstractmethod
    async def create(self, company: Company) -> Company:
        pass

    @abstractmethod
    async def update(self, company: Company) -> Company:
        """Persist descriptive fields (derived statistics are left untouched)"""
        pass

    @abstractmethod
    async def delete(self, company_id: UUID) -> bool:
        pass

    @abstractmethod
    async def search(
        self,
        search: Optional[str],
        industry: Optional[CompanyIndustry],
        offset: int,
        limit: int,
    ) -> Tuple[List[Company], int]:
        """Return one page of companies and the total match count"""
        pass

    @abstractmethod
    async def set_rating(self, company_id: UUID, average_rating: float, review_count: int) -> None:
        """Overwrite the derived rating fields"""
        pass

    @abstractmethod
    async def adjust_active_jobs(self, company_id: UUID, delta: int) -> None:
        """Atomically add delta to active_jobs_count"""
        pass


class IJobRepository(ABC):
    """Job repository interface"""

    @abstractmethod
    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        pass

    @abstractmethod
    async def create(self, job: Job) -> Job:
        pass

    @abstractmethod
    async def update(self, job: Job) -> Job:
        """
        Persist a new job state.

        Counters are never written here; raises ConcurrencyConflictException
        when job.version is stale.
        """
        pass

    @abstractmethod
    async def delete(self, job_id: UUID) -> bool:
        pass

    @abstractmethod
    async def increment_views(self, job_id: UUID) -> None:
        pass

    @abstractmethod
    async def increment_applications(self, job_id: UUID) -> None:
        pass

    @abstractmethod
    async def increment_saves(self, job_id: UUID) -> None:
        pass

    @abstractmethod
    async def search(self, criteria: JobSearchCriteria, offset: int, limit: int) -> Tuple[List[Job], int]:
        pass

    @abstractmethod
    async def list_by_poster(
        self,
        posted_by: UUID,
        status: Optional[JobStatus],
        offset: int,
        limit: int,
    ) -> Tuple[List[Job], int]:
        pass

    @abstractmethod
    async def trending(self, limit: int) -> List[Job]:
        """Published jobs ordered by views"""
        pass

    @abstractmethod
    async def count_by_category(self, status: JobStatus) -> Dict[str, int]:
        pass

    @abstractmethod
    async def list_by_company(self, company_id: UUID, offset: int, limit: int) -> Tuple[List[Job], int]:
        """Every job of the company whatever its status, newest first"""
        pass

    @abstractmethod
    async def count_by_status_for_company(self, company_id: UUID) -> Dict[str, int]:
        pass


class IApplicationRepository(ABC):
    """Application repository interface"""

    @abstractmethod
    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        pass

    @abstractmethod
    async def get_by_user_and_job(self, user_id: UUID, job_id: UUID) -> Optional[Application]:
        pass

    @abstractmethod
    async def create(self, application: Application) -> Application:
        """Insert; raises DuplicateResourceException on (user_id, job_id) collision"""
        pass

    @abstractmethod
    async def update(self, application: Application) -> Application:
        """Persist a new state; raises ConcurrencyConflictException when stale"""
        pass

    @abstractmethod
    async def list_by_user(
        self,
        user_id: UUID,
        status: Optional[ApplicationStatus],
        offset: int,
        limit: int,
    ) -> Tuple[List[Application], int]:
        pass

    @abstractmethod
    async def list_by_job(
        self,
        job_id: UUID,
        status: Optional[ApplicationStatus],
        offset: int,
        limit: int,
    ) -> Tuple[List[Application], int]:
        pass

    @abstractmethod
    async def list_by_job_poster(
        self,
        posted_by: UUID,
        status: Optional[ApplicationStatus],
        offset: int,
        limit: int,
    ) -> Tuple[List[Application], int]:
        """Applications to any job posted by the given employer"""
        pass

    @abstractmethod
    async def list_by_company(self, company_id: UUID, offset: int, limit: int) -> Tuple[List[Application], int]:
        pass

    @abstractmethod
    async def count_by_status_for_job(self, job_id: UUID) -> Dict[str, int]:
        pass

    @abstractmethod
    async def daily_counts_for_job(self, job_id: UUID, since: datetime) -> List[Tuple[str, int]]:
        """(YYYY-MM-DD, count) pairs for applications since the cutoff, oldest first"""
        pass


class IReviewRepository(ABC):
    """Review repository interface"""

    @abstractmethod
    async def get_by_id(self, review_id: UUID) -> Optional[Review]:
        pass

    @abstractmethod
    async def get_by_user_and_company(self, user_id: UUID, company_id: UUID) -> Optional[Review]:
        pass

    @abstractmethod
    async def create(self, review: Review) -> Review:
        pass

    @abstractmethod
    async def update(self, review: Review) -> Review:
        pass

    @abstractmethod
    async def delete(self, review_id: UUID) -> bool:
        pass

    @abstractmethod
    async def list_by_company(
        self,
        company_id: UUID,
        rating: Optional[int],
        offset: int,
        limit: int,
    ) -> Tuple[List[Review], int]:
        """Approved reviews only"""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: UUID, offset: int, limit: int) -> Tuple[List[Review], int]:
        pass

    @abstractmethod
    async def list_flagged(self, offset: int, limit: int) -> Tuple[List[Review], int]:
        pass

    @abstractmethod
    async def rating_aggregate(self, company_id: UUID) -> Tuple[Optional[float], int]:
        """(AVG, COUNT) over the approved reviews of the company"""
        pass

    @abstractmethod
    async def rating_distribution(self, company_id: UUID) -> Dict[int, int]:
        """Approved review count per star"""
        pass

    @abstractmethod
    async def toggle_like(self, review_id: UUID, user_id: UUID) -> Tuple[bool, int]:
        """Like or unlike; returns (liked, likes_count)"""
        pass

    @abstractmethod
    async def add_report(self, review_id: UUID, user_id: UUID, reason: str, description: Optional[str]) -> int:
        """Record a report and return the report count; DuplicateResourceException on a second report"""
        pass


class INotificationRepository(ABC):
    """Notification repository interface"""

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        pass

    @abstractmethod
    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        pass

    @abstractmethod
    async def list_by_user(
        self,
        user_id: UUID,
        unread_only: bool,
        offset: int,
        limit: int,
    ) -> Tuple[List[Notification], int]:
        pass

    @abstractmethod
    async def count_unread(self, user_id: UUID) -> int:
        pass

    @abstractmethod
    async def count(self, user_id: UUID) -> int:
        pass

    @abstractmethod
    async def mark_read(self, notification_id: UUID, read_at: datetime) -> Notification:
        pass

    @abstractmethod
    async def mark_all_read(self, user_id: UUID, read_at: datetime) -> int:
        """Returns the number of notifications changed"""
        pass

    @abstractmethod
    async def delete(self, notification_id: UUID) -> bool:
        pass

    @abstractmethod
    async def delete_all_for_user(self, user_id: UUID) -> int:
        pass

    @abstractmethod
    async def delete_older_than(self, cutoff: datetime) -> int:
        pass


class ISavedJobRepository(ABC):
    """Saved job repository interface"""

    @abstractmethod
    async def get(self, user_id: UUID, job_id: UUID) -> Optional[SavedJob]:
        pass

    @abstractmethod
    async def create(self, saved_job: SavedJob) -> SavedJob:
        """Insert; raises DuplicateResourceException on (user_id, job_id) collision"""
        pass

    @abstractmethod
    async def delete(self, user_id: UUID, job_id: UUID) -> bool:
        pass

    @abstractmethod
    async def delete_many(self, user_id: UUID, job_ids: List[UUID]) -> int:
        pass

    @abstractmethod
    async def count_by_user(self, user_id: UUID) -> int:
        pass

    @abstractmethod
    async def list_published_by_user(
        self,
        user_id: UUID,
        offset: int,
        limit: int,
    ) -> Tuple[List[Tuple[SavedJob, Job]], int]:
        """Saved jobs whose job is still published, newest first"""
        pass
