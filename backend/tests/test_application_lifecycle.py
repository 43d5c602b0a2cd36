"""
Tests for the job application lifecycle and its cascades
"""
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
import pytest_asyncio

from application.services.applications import ApplicationLifecycleService
from application.services.jobs import JobLifecycleService
from application.services.notifications import NotificationService
from application.services.pagination import PageRequest
from core.exceptions import (
    AuthorizationException,
    DuplicateResourceException,
    InvalidTransitionException,
    ResourceNotFoundException,
)
from domain.enums import NotificationType, UserType
from domain.value_objects import ApplicationStatus, JobStatus
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository
from infrastructure.persistence.repositories.company import SQLAlchemyCompanyRepository
from infrastructure.persistence.repositories.job import SQLAlchemyJobRepository
from infrastructure.persistence.repositories.notification import SQLAlchemyNotificationRepository
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from fakes import (
    InMemoryApplicationRepository,
    InMemoryCompanyRepository,
    InMemoryJobRepository,
    InMemoryNotificationRepository,
    InMemoryUserRepository,
    make_company,
    make_job,
    make_user,
)


class Board:
    """Repositories and services wired together over in-memory fakes"""

    def __init__(self, email_service):
        self.users = InMemoryUserRepository()
        self.companies = InMemoryCompanyRepository()
        self.jobs = InMemoryJobRepository()
        self.applications = InMemoryApplicationRepository(self.jobs)
        self.notification_repo = InMemoryNotificationRepository()
        self.notifications = NotificationService(self.notification_repo)
        self.email = email_service
        self.job_lifecycle = JobLifecycleService(self.jobs, self.companies, self.users)
        self.service = ApplicationLifecycleService(
            self.applications,
            self.jobs,
            self.users,
            self.companies,
            self.job_lifecycle,
            self.notifications,
            self.email,
        )


@pytest_asyncio.fixture
async def board(email_service):
    board = Board(email_service)
    employer_id = uuid4()
    board.company = await board.companies.create(make_company(employer_id, active_jobs_count=1))
    board.employer = await board.users.create(
        make_user(UserType.EMPLOYER, id=employer_id, company_id=board.company.id)
    )
    board.seeker = await board.users.create(make_user(first_name="Avi", last_name="Cohen"))
    board.job = await board.jobs.create(make_job(board.employer.id, board.company.id))
    return board


async def submit(board, seeker=None):
    return await board.service.submit_application(
        board.job.id, seeker or board.seeker, {"cover_letter": "Hire me"}
    )


class TestSubmitApplication:
    @pytest.mark.asyncio
    async def test_submit_creates_pending_application(self, board):
        application = await submit(board)

        assert application.status == ApplicationStatus.PENDING
        assert application.company_id == board.company.id
        assert application.cover_letter == "Hire me"
        assert application.applied_at is not None

    @pytest.mark.asyncio
    async def test_submit_runs_side_effects(self, board):
        application = await submit(board)

        assert (await board.jobs.get_by_id(board.job.id)).application_count == 1
        board.email.send.assert_awaited_once()
        assert board.email.send.await_args.args[0] == str(board.seeker.email)

        [notification] = board.notification_repo.notifications.values()
        assert notification.user_id == board.employer.id
        assert notification.type == NotificationType.NEW_APPLICATION
        assert notification.title == "New Job Application"
        assert notification.message == "Avi Cohen applied for Backend Engineer"
        assert notification.related_application_id == application.id

    @pytest.mark.asyncio
    async def test_second_submit_is_a_conflict(self, board):
        await submit(board)

        with pytest.raises(DuplicateResourceException):
            await submit(board)
        assert len(board.applications.applications) == 1

    @pytest.mark.asyncio
    async def test_unpublished_job_is_not_found(self, board):
        draft = await board.jobs.create(make_job(board.employer.id, status=JobStatus.DRAFT))

        with pytest.raises(ResourceNotFoundException):
            await board.service.submit_application(draft.id, board.seeker, {})

    @pytest.mark.asyncio
    async def test_employers_cannot_apply(self, board):
        with pytest.raises(AuthorizationException):
            await submit(board, seeker=board.employer)

    @pytest.mark.asyncio
    async def test_company_falls_back_to_poster_company(self, board):
        job = await board.jobs.create(make_job(board.employer.id, company_id=None))

        application = await board.service.submit_application(job.id, board.seeker, {})

        assert application.company_id == board.company.id

    @pytest.mark.asyncio
    async def test_application_counter_goes_through_job_lifecycle(self, board):
        board.job_lifecycle.increment_applications = AsyncMock()

        await submit(board)

        board.job_lifecycle.increment_applications.assert_awaited_once_with(board.job.id)

    @pytest.mark.asyncio
    async def test_side_effect_failures_are_swallowed(self, board):
        board.email.send.side_effect = RuntimeError("smtp down")
        board.jobs.increment_applications = AsyncMock(side_effect=RuntimeError("db down"))
        board.notification_repo.create = AsyncMock(side_effect=RuntimeError("db down"))

        application = await submit(board)

        assert await board.applications.get_by_id(application.id) is not None


class TestEmployerDecisions:
    @pytest.mark.asyncio
    async def test_accept_closes_job_even_when_collaborators_fail(self, board):
        application = await submit(board)
        board.email.send.side_effect = RuntimeError("smtp down")
        board.notification_repo.create = AsyncMock(side_effect=RuntimeError("db down"))

        accepted = await board.service.accept_application(application.id, board.employer.id)

        assert accepted.status == ApplicationStatus.ACCEPTED
        assert accepted.decision_at is not None
        job = await board.jobs.get_by_id(board.job.id)
        assert job.status == JobStatus.CLOSED
        assert job.closed_at is not None
        assert (await board.companies.get_by_id(board.company.id)).active_jobs_count == 0

    @pytest.mark.asyncio
    async def test_accept_survives_close_failure(self, board):
        application = await submit(board)
        board.job_lifecycle.close_job = AsyncMock(side_effect=RuntimeError("close failed"))

        accepted = await board.service.accept_application(application.id, board.employer.id)

        assert accepted.status == ApplicationStatus.ACCEPTED
        assert (await board.jobs.get_by_id(board.job.id)).status == JobStatus.PUBLISHED

    @pytest.mark.asyncio
    async def test_reject_stores_reason_and_history(self, board):
        application = await submit(board)

        rejected = await board.service.reject_application(application.id, board.employer.id, "Not a fit")

        assert rejected.status == ApplicationStatus.REJECTED
        assert rejected.rejection_reason == "Not a fit"
        assert rejected.reviewed_at is not None
        assert rejected.decision_at is not None
        [change] = rejected.status_history
        assert change.status == ApplicationStatus.REJECTED
        assert change.changed_by == board.employer.id
        assert change.reason == "Not a fit"

    @pytest.mark.asyncio
    async def test_shortlist_default_reason_and_notification(self, board):
        application = await submit(board)

        shortlisted = await board.service.shortlist_application(application.id, board.employer.id)

        assert shortlisted.status_history[-1].reason == "Shortlisted by employer"
        assert shortlisted.decision_at is None
        updates = [
            n for n in board.notification_repo.notifications.values()
            if n.type == NotificationType.APPLICATION_UPDATE
        ]
        assert [n.user_id for n in updates] == [board.seeker.id]
        assert updates[0].title == "Application Shortlisted"

    @pytest.mark.asyncio
    async def test_only_job_owner_may_change_status(self, board):
        application = await submit(board)
        other_employer = await board.users.create(make_user(UserType.EMPLOYER))

        with pytest.raises(AuthorizationException):
            await board.service.update_application_status(
                application.id, ApplicationStatus.REVIEWED, other_employer.id
            )

    @pytest.mark.asyncio
    async def test_decided_application_cannot_move(self, board):
        application = await submit(board)
        await board.service.reject_application(application.id, board.employer.id)

        with pytest.raises(InvalidTransitionException):
            await board.service.shortlist_application(application.id, board.employer.id)

    @pytest.mark.asyncio
    async def test_reviewed_and_shortlisted_move_both_ways(self, board):
        application = await submit(board)

        await board.service.update_application_status(application.id, ApplicationStatus.SHORTLISTED, board.employer.id)
        back = await board.service.update_application_status(
            application.id, ApplicationStatus.REVIEWED, board.employer.id
        )

        assert back.status == ApplicationStatus.REVIEWED
        assert [c.status for c in back.status_history] == [
            ApplicationStatus.SHORTLISTED,
            ApplicationStatus.REVIEWED,
        ]

    @pytest.mark.asyncio
    async def test_employer_cannot_withdraw_on_applicants_behalf(self, board):
        application = await submit(board)

        with pytest.raises(InvalidTransitionException, match="Only the applicant"):
            await board.service.update_application_status(
                application.id, ApplicationStatus.WITHDRAWN, board.employer.id
            )
        assert (await board.applications.get_by_id(application.id)).status == ApplicationStatus.PENDING

    @pytest.mark.asyncio
    async def test_accepting_through_status_update_closes_job(self, board):
        application = await submit(board)

        accepted = await board.service.update_application_status(
            application.id, ApplicationStatus.ACCEPTED, board.employer.id, internal_notes="Strong hire"
        )

        assert accepted.status == ApplicationStatus.ACCEPTED
        assert accepted.internal_notes == "Strong hire"
        assert accepted.status_history[-1].reason == "Accepted by employer"
        assert (await board.jobs.get_by_id(board.job.id)).status == JobStatus.CLOSED


class TestWithdraw:
    @pytest.mark.asyncio
    async def test_withdraw_pending(self, board):
        application = await submit(board)
        board.email.send.reset_mock()

        withdrawn = await board.service.withdraw_application(application.id, board.seeker.id)

        assert withdrawn.status == ApplicationStatus.WITHDRAWN
        assert withdrawn.status_history[-1].reason == "Withdrawn by applicant"
        board.email.send.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("decide", ["accept_application", "reject_application"])
    async def test_withdraw_after_decision_is_invalid(self, board, decide):
        application = await submit(board)
        await getattr(board.service, decide)(application.id, board.employer.id)

        with pytest.raises(InvalidTransitionException):
            await board.service.withdraw_application(application.id, board.seeker.id)

    @pytest.mark.asyncio
    async def test_only_applicant_may_withdraw(self, board):
        application = await submit(board)

        with pytest.raises(AuthorizationException):
            await board.service.withdraw_application(application.id, board.employer.id)


class TestApplicationQueries:
    @pytest.mark.asyncio
    async def test_owner_read_marks_viewed_once(self, board):
        application = await submit(board)

        seen = await board.service.get_application(application.id, board.employer.id)
        assert seen.is_viewed
        first_viewed_at = seen.viewed_at

        again = await board.service.get_application(application.id, board.employer.id)
        assert again.viewed_at == first_viewed_at

    @pytest.mark.asyncio
    async def test_applicant_read_does_not_mark_viewed(self, board):
        application = await submit(board)

        seen = await board.service.get_application(application.id, board.seeker.id)

        assert not seen.is_viewed

    @pytest.mark.asyncio
    async def test_strangers_cannot_read(self, board):
        application = await submit(board)

        with pytest.raises(AuthorizationException):
            await board.service.get_application(application.id, make_user().id)

    @pytest.mark.asyncio
    async def test_list_by_role(self, board):
        application = await submit(board)
        request = PageRequest.of(1, 10)

        mine = await board.service.list_applications(board.seeker, None, request)
        received = await board.service.list_applications(board.employer, None, request)

        assert [a.id for a in mine.items] == [application.id]
        assert [a.id for a in received.items] == [application.id]
        with pytest.raises(AuthorizationException):
            await board.service.list_applications(make_user(UserType.ADMIN), None, request)

    @pytest.mark.asyncio
    async def test_job_applications_restricted_to_owner(self, board):
        await submit(board)

        page = await board.service.list_job_applications(board.job.id, board.employer.id, None, PageRequest.of())
        assert page.total == 1

        with pytest.raises(AuthorizationException):
            await board.service.list_job_applications(board.job.id, board.seeker.id, None, PageRequest.of())

    @pytest.mark.asyncio
    async def test_has_applied(self, board):
        assert not await board.service.has_applied(board.seeker.id, board.job.id)
        await submit(board)
        assert await board.service.has_applied(board.seeker.id, board.job.id)


class TestSubmitAgainstDatabase:
    """Same service over the SQLAlchemy repositories"""

    @pytest_asyncio.fixture
    async def wired(self, session, email_service):
        users = SQLAlchemyUserRepository(session)
        companies = SQLAlchemyCompanyRepository(session)
        jobs = SQLAlchemyJobRepository(session)
        applications = SQLAlchemyApplicationRepository(session)
        employer = await users.create(make_user(UserType.EMPLOYER))
        company = await companies.create(make_company(employer.id))
        job = await jobs.create(make_job(employer.id, company.id))
        seeker = await users.create(make_user())
        service = ApplicationLifecycleService(
            applications,
            jobs,
            users,
            companies,
            JobLifecycleService(jobs, companies, users, session.begin_nested),
            NotificationService(SQLAlchemyNotificationRepository(session)),
            email_service,
            session.begin_nested,
        )
        return service, applications, job, seeker

    @pytest.mark.asyncio
    async def test_unique_constraint_catches_duplicate_missed_by_lookup(self, session, wired):
        service, applications, job, seeker = wired
        await service.submit_application(job.id, seeker, {"cover_letter": "First"})

        with patch.object(applications, "get_by_user_and_job", AsyncMock(return_value=None)):
            with pytest.raises(DuplicateResourceException):
                async with session.begin_nested():
                    await service.submit_application(job.id, seeker, {"cover_letter": "Second"})

        stored, total = await applications.list_by_job(job.id, None, 0, 10)
        assert total == 1
        assert stored[0].cover_letter == "First"
