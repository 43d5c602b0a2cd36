"""
Dashboard Service
Read-only summaries for job owners, company owners and signed-in users
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from core.exceptions import AuthorizationException, ResourceNotFoundException
from domain.entities import Application, Company, Job, User
from domain.enums import UserType
from domain.value_objects import ApplicationStatus, JobStatus, RatingSummary
from application.repositories.interfaces import (
    IApplicationRepository,
    ICompanyRepository,
    IJobRepository,
    IReviewRepository,
    ISavedJobRepository,
    IUserRepository,
    JobSearchCriteria,
)
from application.services.pagination import Page, PageRequest


RECENT_ITEMS = 5
ANALYTICS_WINDOW_DAYS = 30


@dataclass(frozen=True)
class JobAnalytics:
    job: Job
    total_applications: int
    by_status: Dict[str, int]
    applications_over_time: List[Tuple[str, int]]


@dataclass(frozen=True)
class UserDashboard:
    user: User
    stats: Dict[str, int]
    recent_applications: List[Application] = field(default_factory=list)
    jobs: List[Job] = field(default_factory=list)


@dataclass(frozen=True)
class CompanyDashboard:
    company: Company
    stats: Dict[str, float]
    recent_jobs: List[Job] = field(default_factory=list)
    recent_applications: List[Application] = field(default_factory=list)


class DashboardService:
    def __init__(
        self,
        job_repository: IJobRepository,
        application_repository: IApplicationRepository,
        company_repository: ICompanyRepository,
        review_repository: IReviewRepository,
        saved_job_repository: ISavedJobRepository,
        user_repository: IUserRepository,
    ):
        self.job_repo = job_repository
        self.application_repo = application_repository
        self.company_repo = company_repository
        self.review_repo = review_repository
        self.saved_job_repo = saved_job_repository
        self.user_repo = user_repository

    async def job_analytics(self, job_id: UUID, actor_id: UUID, now: Optional[datetime] = None) -> JobAnalytics:
        job = await self.job_repo.get_by_id(job_id)
        if job is None:
            raise ResourceNotFoundException("Job", str(job_id))
        if not job.is_owned_by(actor_id):
            raise AuthorizationException("Not authorized to view this job analytics")

        counts = await self.application_repo.count_by_status_for_job(job_id)
        by_status = {status.value: counts.get(status.value, 0) for status in ApplicationStatus}
        since = (now or datetime.now(timezone.utc)) - timedelta(days=ANALYTICS_WINDOW_DAYS)
        timeline = await self.application_repo.daily_counts_for_job(job_id, since)

        return JobAnalytics(
            job=job,
            total_applications=sum(by_status.values()),
            by_status=by_status,
            applications_over_time=timeline,
        )

    async def user_dashboard(self, user: User) -> UserDashboard:
        """Seekers see their applications and fresh jobs; employers see their postings"""
        if user.user_type == UserType.JOB_SEEKER:
            applications, applied = await self.application_repo.list_by_user(user.id, None, 0, RECENT_ITEMS)
            recommended, _ = await self.job_repo.search(JobSearchCriteria(), 0, RECENT_ITEMS)
            return UserDashboard(
                user=user,
                stats={
                    "applications_count": applied,
                    "saved_jobs_count": await self.saved_job_repo.count_by_user(user.id),
                },
                recent_applications=applications,
                jobs=recommended,
            )

        if user.user_type == UserType.EMPLOYER:
            jobs, posted = await self.job_repo.list_by_poster(user.id, None, 0, RECENT_ITEMS)
            _, published = await self.job_repo.list_by_poster(user.id, JobStatus.PUBLISHED, 0, 1)
            applications, received = await self.application_repo.list_by_job_poster(user.id, None, 0, RECENT_ITEMS)
            return UserDashboard(
                user=user,
                stats={
                    "jobs_count": posted,
                    "active_jobs_count": published,
                    "applications_count": received,
                },
                recent_applications=applications,
                jobs=jobs,
            )

        raise AuthorizationException("Dashboard is available to job seekers and employers")

    async def company_dashboard(self, company_id: UUID, actor_id: UUID) -> CompanyDashboard:
        company = await self.company_repo.get_by_id(company_id)
        if company is None:
            raise ResourceNotFoundException("Company", str(company_id))
        if not company.is_owned_by(actor_id):
            raise AuthorizationException("Not authorized to view this company dashboard")

        job_counts = await self.job_repo.count_by_status_for_company(company_id)
        recent_jobs, _ = await self.job_repo.list_by_company(company_id, 0, RECENT_ITEMS)
        recent_applications, applications = await self.application_repo.list_by_company(company_id, 0, RECENT_ITEMS)
        average, reviews = await self.review_repo.rating_aggregate(company_id)
        rating = RatingSummary.from_aggregate(average, reviews)

        return CompanyDashboard(
            company=company,
            stats={
                "total_jobs": sum(job_counts.values()),
                "active_jobs": job_counts.get(JobStatus.PUBLISHED.value, 0),
                "total_applications": applications,
                "total_reviews": rating.review_count,
                "average_rating": rating.average_rating,
            },
            recent_jobs=recent_jobs,
            recent_applications=recent_applications,
        )

    async def list_job_seekers(self, search: Optional[str], request: PageRequest) -> Page[User]:
        items, total = await self.user_repo.search_job_seekers(search, request.offset, request.limit)
        return Page.build(items, total, request)
