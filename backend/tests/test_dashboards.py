"""
Tests for dashboards, job analytics and the job seeker directory
"""
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
import pytest_asyncio

from application.services.dashboards import DashboardService
from application.services.pagination import PageRequest
from core.exceptions import AuthorizationException, ResourceNotFoundException
from domain.entities import Application, Review, SavedJob
from domain.enums import UserType
from domain.value_objects import ApplicationStatus, JobStatus
from fakes import (
    InMemoryApplicationRepository,
    InMemoryCompanyRepository,
    InMemoryJobRepository,
    InMemoryReviewRepository,
    InMemorySavedJobRepository,
    InMemoryUserRepository,
    make_company,
    make_job,
    make_user,
)


NOW = datetime(2026, 3, 31, 12, 0, tzinfo=timezone.utc)


class Board:
    def __init__(self):
        self.users = InMemoryUserRepository()
        self.companies = InMemoryCompanyRepository()
        self.jobs = InMemoryJobRepository()
        self.applications = InMemoryApplicationRepository(self.jobs)
        self.reviews = InMemoryReviewRepository()
        self.saved_jobs = InMemorySavedJobRepository(self.jobs)
        self.service = DashboardService(
            self.jobs, self.applications, self.companies, self.reviews, self.saved_jobs, self.users
        )

    async def apply(self, job, status=ApplicationStatus.PENDING, applied_at=NOW):
        seeker = await self.users.create(make_user())
        return await self.applications.create(
            Application(id=uuid4(), job_id=job.id, user_id=seeker.id, status=status, applied_at=applied_at)
        )


@pytest_asyncio.fixture
async def board():
    board = Board()
    board.employer = await board.users.create(make_user(UserType.EMPLOYER))
    board.company = await board.companies.create(make_company(board.employer.id))
    board.job = await board.jobs.create(make_job(board.employer.id, board.company.id))
    return board


class TestJobAnalytics:
    @pytest.mark.asyncio
    async def test_counts_and_timeline(self, board):
        await board.apply(board.job)
        await board.apply(board.job, ApplicationStatus.REJECTED)
        await board.apply(board.job, applied_at=NOW - timedelta(days=3))
        await board.apply(board.job, applied_at=NOW - timedelta(days=45))

        analytics = await board.service.job_analytics(board.job.id, board.employer.id, now=NOW)

        assert analytics.total_applications == 4
        assert analytics.by_status["pending"] == 3
        assert analytics.by_status["rejected"] == 1
        assert analytics.by_status["accepted"] == 0
        assert set(analytics.by_status) == {status.value for status in ApplicationStatus}
        assert analytics.applications_over_time == [("2026-03-28", 1), ("2026-03-31", 2)]

    @pytest.mark.asyncio
    async def test_only_owner(self, board):
        with pytest.raises(AuthorizationException):
            await board.service.job_analytics(board.job.id, uuid4())
        with pytest.raises(ResourceNotFoundException):
            await board.service.job_analytics(uuid4(), board.employer.id)


class TestUserDashboard:
    @pytest.mark.asyncio
    async def test_job_seeker(self, board):
        seeker = await board.users.create(make_user())
        await board.applications.create(Application(id=uuid4(), job_id=board.job.id, user_id=seeker.id))
        await board.saved_jobs.create(SavedJob(id=uuid4(), user_id=seeker.id, job_id=board.job.id))
        await board.jobs.create(make_job(board.employer.id, status=JobStatus.DRAFT))

        dashboard = await board.service.user_dashboard(seeker)

        assert dashboard.stats == {"applications_count": 1, "saved_jobs_count": 1}
        assert [a.job_id for a in dashboard.recent_applications] == [board.job.id]
        assert [j.id for j in dashboard.jobs] == [board.job.id]

    @pytest.mark.asyncio
    async def test_employer(self, board):
        await board.jobs.create(make_job(board.employer.id, status=JobStatus.CLOSED))
        await board.apply(board.job)

        dashboard = await board.service.user_dashboard(board.employer)

        assert dashboard.stats == {"jobs_count": 2, "active_jobs_count": 1, "applications_count": 1}
        assert len(dashboard.jobs) == 2

    @pytest.mark.asyncio
    async def test_admin_has_no_dashboard(self, board):
        with pytest.raises(AuthorizationException):
            await board.service.user_dashboard(make_user(UserType.ADMIN))


class TestCompanyDashboard:
    @pytest.mark.asyncio
    async def test_stats(self, board):
        await board.jobs.create(make_job(board.employer.id, board.company.id, status=JobStatus.CLOSED))
        await board.apply(board.job)
        for rating, approved in ((4, True), (5, True), (1, False)):
            await board.reviews.create(Review(
                id=uuid4(),
                company_id=board.company.id,
                user_id=uuid4(),
                rating=rating,
                title="Review",
                is_approved=approved,
            ))

        dashboard = await board.service.company_dashboard(board.company.id, board.employer.id)

        assert dashboard.stats == {
            "total_jobs": 2,
            "active_jobs": 1,
            "total_applications": 1,
            "total_reviews": 2,
            "average_rating": 4.5,
        }
        assert len(dashboard.recent_jobs) == 2
        assert len(dashboard.recent_applications) == 1

    @pytest.mark.asyncio
    async def test_only_owner(self, board):
        with pytest.raises(AuthorizationException):
            await board.service.company_dashboard(board.company.id, uuid4())


class TestJobSeekerDirectory:
    @pytest.mark.asyncio
    async def test_search_by_name_or_skill(self, board):
        ada = await board.users.create(make_user(first_name="Ada", skills=["Python"]))
        await board.users.create(make_user(first_name="Grace", skills=["COBOL"]))
        await board.users.create(make_user(first_name="Alan", is_active=False))

        by_skill = await board.service.list_job_seekers("python", PageRequest.of())
        everyone = await board.service.list_job_seekers(None, PageRequest.of())

        assert [u.id for u in by_skill.items] == [ada.id]
        assert everyone.total == 2
