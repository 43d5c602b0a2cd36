"""
Application Lifecycle Service
Submission, employer review and withdrawal of job applications
"""
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from loguru import logger

from core.exceptions import (
    AuthorizationException,
    DuplicateResourceException,
    InvalidTransitionException,
    ResourceNotFoundException,
)
from domain.entities import Application, Job, User
from domain.enums import NotificationType, UserType
from domain.value_objects import ApplicationStatus
from application.repositories.interfaces import (
    IApplicationRepository,
    ICompanyRepository,
    IJobRepository,
    IUserRepository,
)
from application.services.email import messages
from application.services.email.interfaces import IEmailService
from application.services.jobs import JobLifecycleService
from application.services.notifications import NotificationService
from application.services.pagination import Page, PageRequest
from application.services.side_effects import SavepointFactory, best_effort


CONTENT_FIELDS = ("cover_letter", "resume_url", "portfolio_url", "linkedin_url", "expected_salary")


class ApplicationLifecycleService:
    """
    Job application lifecycle.

    pending -> reviewed | shortlisted | rejected | accepted | withdrawn
    reviewed <-> shortlisted, both -> rejected | accepted | withdrawn
    rejected, accepted and withdrawn are terminal.

    The primary mutation is the only thing that can fail a call: counters,
    e-mails, notifications and the accept-closes-job cascade are best effort.
    """

    def __init__(
        self,
        application_repository: IApplicationRepository,
        job_repository: IJobRepository,
        user_repository: IUserRepository,
        company_repository: ICompanyRepository,
        job_lifecycle: JobLifecycleService,
        notification_service: NotificationService,
        email_service: IEmailService,
        savepoint: Optional[SavepointFactory] = None,
    ):
        self.application_repo = application_repository
        self.job_repo = job_repository
        self.user_repo = user_repository
        self.company_repo = company_repository
        self.job_lifecycle = job_lifecycle
        self.notifications = notification_service
        self.email = email_service
        self.savepoint = savepoint

    # ------------------------------------------------------------------
    # Applicant side
    # ------------------------------------------------------------------

    async def submit_application(self, job_id: UUID, applicant: User, content: Dict[str, Any]) -> Application:
        if applicant.user_type != UserType.JOB_SEEKER:
            raise AuthorizationException("Only job seekers can submit applications")

        job = await self.job_repo.get_by_id(job_id)
        if job is None or not job.is_published():
            raise ResourceNotFoundException("Job", f"{job_id} (not found or not available)")

        if await self.application_repo.get_by_user_and_job(applicant.id, job_id):
            raise DuplicateResourceException("Application", "job_id", str(job_id))

        company_id = job.company_id
        if company_id is None:
            poster = await self.user_repo.get_by_id(job.posted_by)
            if poster is not None:
                company_id = poster.company_id

        now = datetime.now(timezone.utc)
        application = Application(
            id=uuid4(),
            job_id=job_id,
            user_id=applicant.id,
            company_id=company_id,
            applied_at=now,
            updated_at=now,
            **{key: content.get(key) for key in CONTENT_FIELDS},
        )
        # Unique (user_id, job_id) makes a concurrent duplicate fail here
        created = await self.application_repo.create(application)
        logger.info(f"Application {created.id} submitted by {applicant.id} for job {job_id}")

        await best_effort(
            "increment job applications",
            lambda: self.job_lifecycle.increment_applications(job_id),
            self.savepoint,
        )
        await best_effort(
            "send application confirmation",
            lambda: self._send_confirmation(applicant, job, company_id),
        )
        await best_effort(
            "notify employer of new application",
            lambda: self.notifications.notify(
                job.posted_by,
                NotificationType.NEW_APPLICATION,
                "New Job Application",
                f"{applicant.full_name} applied for {job.title}",
                related_job_id=job_id,
                related_application_id=created.id,
            ),
            self.savepoint,
        )
        return created

    async def withdraw_application(self, application_id: UUID, actor_id: UUID) -> Application:
        application = await self._require_application(application_id)
        if application.user_id != actor_id:
            logger.warning(f"User {actor_id} refused to withdraw application {application_id}")
            raise AuthorizationException("Not authorized to withdraw this application")

        if application.status.is_decided:
            raise InvalidTransitionException(
                "Application",
                application.status.value,
                ApplicationStatus.WITHDRAWN.value,
                "Cannot withdraw application that has already been decided",
            )
        self._check_transition(application, ApplicationStatus.WITHDRAWN)

        withdrawn = await self.application_repo.update(
            application.with_status(
                ApplicationStatus.WITHDRAWN,
                changed_by=actor_id,
                reason="Withdrawn by applicant",
                at=datetime.now(timezone.utc),
            )
        )
        logger.info(f"Application {application_id} withdrawn by applicant")
        return withdrawn

    # ------------------------------------------------------------------
    # Employer side
    # ------------------------------------------------------------------

    async def update_application_status(
        self,
        application_id: UUID,
        new_status: ApplicationStatus,
        actor_id: UUID,
        reason: Optional[str] = None,
        rejection_reason: Optional[str] = None,
        internal_notes: Optional[str] = None,
    ) -> Application:
        """
        Employer-driven move. Withdrawal belongs to the applicant, and
        acceptance always goes through accept_application so the job closes.
        """
        if new_status == ApplicationStatus.WITHDRAWN:
            raise InvalidTransitionException(
                "Application",
                "any",
                new_status.value,
                "Only the applicant can withdraw an application",
            )
        if new_status == ApplicationStatus.ACCEPTED:
            return await self.accept_application(
                application_id, actor_id, reason=reason, internal_notes=internal_notes
            )
        return await self._change_status(
            application_id, new_status, actor_id, reason, rejection_reason, internal_notes
        )

    async def _change_status(
        self,
        application_id: UUID,
        new_status: ApplicationStatus,
        actor_id: UUID,
        reason: Optional[str] = None,
        rejection_reason: Optional[str] = None,
        internal_notes: Optional[str] = None,
    ) -> Application:
        application = await self._require_application(application_id)
        job = await self._require_job(application.job_id)
        if not job.is_owned_by(actor_id):
            logger.warning(f"User {actor_id} refused to update application {application_id}")
            raise AuthorizationException("Not authorized to update this application")

        self._check_transition(application, new_status)

        now = datetime.now(timezone.utc)
        updated = application.with_status(new_status, changed_by=actor_id, reason=reason, at=now)
        changes: Dict[str, Any] = {"updated_at": now}
        if new_status == ApplicationStatus.REJECTED and rejection_reason:
            changes["rejection_reason"] = rejection_reason
        if internal_notes is not None:
            changes["internal_notes"] = internal_notes
        saved = await self.application_repo.update(replace(updated, **changes))

        logger.info(
            f"Application {application_id}: {application.status.value} -> {new_status.value} by {actor_id}"
        )

        employer_message = rejection_reason if new_status == ApplicationStatus.REJECTED else None
        await best_effort(
            "send application status e-mail",
            lambda: self._send_status_update(saved, job, employer_message),
        )
        await best_effort(
            "notify applicant of status change",
            lambda: self.notifications.notify(
                saved.user_id,
                NotificationType.APPLICATION_UPDATE,
                f"Application {new_status.value.capitalize()}",
                f"Your application for {job.title} has been {new_status.value}",
                related_job_id=job.id,
                related_application_id=saved.id,
            ),
            self.savepoint,
        )
        return saved

    async def shortlist_application(
        self,
        application_id: UUID,
        actor_id: UUID,
        reason: Optional[str] = None,
    ) -> Application:
        return await self.update_application_status(
            application_id,
            ApplicationStatus.SHORTLISTED,
            actor_id,
            reason=reason or "Shortlisted by employer",
        )

    async def reject_application(
        self,
        application_id: UUID,
        actor_id: UUID,
        reason: Optional[str] = None,
    ) -> Application:
        return await self.update_application_status(
            application_id,
            ApplicationStatus.REJECTED,
            actor_id,
            reason=reason or "Rejected by employer",
            rejection_reason=reason,
        )

    async def accept_application(
        self,
        application_id: UUID,
        actor_id: UUID,
        reason: Optional[str] = None,
        internal_notes: Optional[str] = None,
    ) -> Application:
        """Accept, then close the job; a failed close does not undo the accept"""
        accepted = await self._change_status(
            application_id,
            ApplicationStatus.ACCEPTED,
            actor_id,
            reason=reason or "Accepted by employer",
            internal_notes=internal_notes,
        )
        await best_effort(
            "close job after acceptance",
            lambda: self.job_lifecycle.close_job(accepted.job_id, actor_id),
            self.savepoint,
        )
        return accepted

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_application(self, application_id: UUID, viewer_id: UUID) -> Application:
        """Readable by the applicant and the job owner; the owner's first read marks it viewed"""
        application = await self._require_application(application_id)
        if application.user_id == viewer_id:
            return application

        job = await self.job_repo.get_by_id(application.job_id)
        if job is None or not job.is_owned_by(viewer_id):
            raise AuthorizationException("Not authorized to view this application")

        if not application.is_viewed:
            application = await self.application_repo.update(
                replace(application, is_viewed=True, viewed_at=datetime.now(timezone.utc))
            )
        return application

    async def list_applications(
        self,
        viewer: User,
        status: Optional[ApplicationStatus],
        request: PageRequest,
    ) -> Page[Application]:
        if viewer.user_type == UserType.JOB_SEEKER:
            items, total = await self.application_repo.list_by_user(
                viewer.id, status, request.offset, request.limit
            )
        elif viewer.user_type == UserType.EMPLOYER:
            items, total = await self.application_repo.list_by_job_poster(
                viewer.id, status, request.offset, request.limit
            )
        else:
            raise AuthorizationException("Unauthorized user type")
        return Page.build(items, total, request)

    async def list_job_applications(
        self,
        job_id: UUID,
        actor_id: UUID,
        status: Optional[ApplicationStatus],
        request: PageRequest,
    ) -> Page[Application]:
        job = await self._require_job(job_id)
        if not job.is_owned_by(actor_id):
            raise AuthorizationException("Not authorized to view applications for this job")
        items, total = await self.application_repo.list_by_job(job_id, status, request.offset, request.limit)
        return Page.build(items, total, request)

    async def has_applied(self, user_id: UUID, job_id: UUID) -> bool:
        return await self.application_repo.get_by_user_and_job(user_id, job_id) is not None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_application(self, application_id: UUID) -> Application:
        application = await self.application_repo.get_by_id(application_id)
        if application is None:
            raise ResourceNotFoundException("Application", str(application_id))
        return application

    async def _require_job(self, job_id: UUID) -> Job:
        job = await self.job_repo.get_by_id(job_id)
        if job is None:
            raise ResourceNotFoundException("Job", str(job_id))
        return job

    @staticmethod
    def _check_transition(application: Application, target: ApplicationStatus) -> None:
        if not application.status.can_transition_to(target):
            raise InvalidTransitionException("Application", application.status.value, target.value)

    async def _send_confirmation(self, applicant: User, job: Job, company_id: Optional[UUID]) -> None:
        company_name = None
        if company_id:
            company = await self.company_repo.get_by_id(company_id)
            company_name = company.name if company else None
        subject, body = messages.application_confirmation(job.title, company_name)
        await self.email.send(str(applicant.email), subject, body)

    async def _send_status_update(self, application: Application, job: Job, message: Optional[str]) -> None:
        applicant = await self.user_repo.get_by_id(application.user_id)
        if applicant is None:
            return
        subject, body = messages.application_status_update(job.title, application.status.value, message)
        await self.email.send(str(applicant.email), subject, body)
