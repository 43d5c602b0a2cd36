"""
Dashboard and Analytics Schemas
"""
from typing import Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel

from application.services.dashboards import CompanyDashboard, JobAnalytics, UserDashboard
from domain.entities import User
from .application import ApplicationResponse
from .auth import UserResponse
from .job import JobResponse


class JobSummary(BaseModel):
    id: UUID
    title: str
    views: int
    application_count: int


class DailyCount(BaseModel):
    date: str
    count: int


class JobAnalyticsResponse(BaseModel):
    job: JobSummary
    total_applications: int
    by_status: Dict[str, int]
    applications_over_time: List[DailyCount]

    @classmethod
    def from_analytics(cls, analytics: JobAnalytics) -> "JobAnalyticsResponse":
        job = analytics.job
        return cls(
            job=JobSummary(id=job.id, title=job.title, views=job.views, application_count=job.application_count),
            total_applications=analytics.total_applications,
            by_status=analytics.by_status,
            applications_over_time=[DailyCount(date=day, count=count) for day, count in analytics.applications_over_time],
        )


class UserDashboardResponse(BaseModel):
    user: UserResponse
    stats: Dict[str, int]
    recent_applications: List[ApplicationResponse]
    jobs: List[JobResponse]

    @classmethod
    def from_dashboard(cls, dashboard: UserDashboard) -> "UserDashboardResponse":
        user = dashboard.user
        return cls(
            user=UserResponse.from_entity(user),
            stats=dashboard.stats,
            recent_applications=[ApplicationResponse.model_validate(a) for a in dashboard.recent_applications],
            jobs=[JobResponse.from_entity(job, user.id) for job in dashboard.jobs],
        )


class CompanySummary(BaseModel):
    id: UUID
    name: str
    slug: str
    logo_url: Optional[str] = None
    is_verified: bool


class CompanyDashboardResponse(BaseModel):
    company: CompanySummary
    stats: Dict[str, Union[int, float]]
    recent_jobs: List[JobResponse]
    recent_applications: List[ApplicationResponse]

    @classmethod
    def from_dashboard(cls, dashboard: CompanyDashboard, viewer: User) -> "CompanyDashboardResponse":
        company = dashboard.company
        return cls(
            company=CompanySummary(
                id=company.id,
                name=company.name,
                slug=company.slug,
                logo_url=company.logo_url,
                is_verified=company.is_verified,
            ),
            stats=dashboard.stats,
            recent_jobs=[JobResponse.from_entity(job, viewer.id) for job in dashboard.recent_jobs],
            recent_applications=[
                ApplicationResponse.model_validate(application)
                for application in dashboard.recent_applications
            ],
        )
