"""
Dependency Injection Container
Manages service and repository instances
"""
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends

from core.database import get_db
from application.repositories.interfaces import (
    IApplicationRepository,
    ICompanyRepository,
    IJobRepository,
    INotificationRepository,
    IReviewRepository,
    ISavedJobRepository,
    IUserRepository,
)
from application.services.auth.interfaces import IAuthService, IJwtService, IPasswordHasher
from application.services.email import IEmailService
from application.services.side_effects import SavepointFactory
from application.services.jobs import JobLifecycleService
from application.services.applications import ApplicationLifecycleService
from application.services.notifications import NotificationService
from application.services.reviews import RatingAggregationService, ReviewService
from application.services.saved_jobs import SavedJobService
from application.services.companies import CompanyService
from application.services.dashboards import DashboardService
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.persistence.repositories.company import SQLAlchemyCompanyRepository
from infrastructure.persistence.repositories.job import SQLAlchemyJobRepository
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository
from infrastructure.persistence.repositories.review import SQLAlchemyReviewRepository
from infrastructure.persistence.repositories.notification import SQLAlchemyNotificationRepository
from infrastructure.persistence.repositories.saved_job import SQLAlchemySavedJobRepository
from infrastructure.security.password_hasher import BcryptPasswordHasher
from infrastructure.security.jwt_service import JwtService
from infrastructure.external.email_service import SmtpEmailService


# Singleton instances
_password_hasher: IPasswordHasher | None = None
_jwt_service: IJwtService | None = None
_email_service: IEmailService | None = None


def get_password_hasher() -> IPasswordHasher:
    """Get password hasher instance (singleton)"""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = BcryptPasswordHasher()
    return _password_hasher


def get_jwt_service() -> IJwtService:
    """Get JWT service instance (singleton)"""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JwtService()
    return _jwt_service


def get_email_service() -> IEmailService:
    """Get e-mail service instance (singleton)"""
    global _email_service
    if _email_service is None:
        _email_service = SmtpEmailService()
    return _email_service


def get_savepoint(session: AsyncSession = Depends(get_db)) -> SavepointFactory:
    """SAVEPOINT factory on the request session, for best-effort side effects"""
    return session.begin_nested


# ----------------------------------------------------------------------
# Repositories (per-request, sharing the request session)
# ----------------------------------------------------------------------

def get_user_repository(session: AsyncSession = Depends(get_db)) -> IUserRepository:
    return SQLAlchemyUserRepository(session)


def get_company_repository(session: AsyncSession = Depends(get_db)) -> ICompanyRepository:
    return SQLAlchemyCompanyRepository(session)


def get_job_repository(session: AsyncSession = Depends(get_db)) -> IJobRepository:
    return SQLAlchemyJobRepository(session)


def get_application_repository(session: AsyncSession = Depends(get_db)) -> IApplicationRepository:
    return SQLAlchemyApplicationRepository(session)


def get_review_repository(session: AsyncSession = Depends(get_db)) -> IReviewRepository:
    return SQLAlchemyReviewRepository(session)


def get_notification_repository(session: AsyncSession = Depends(get_db)) -> INotificationRepository:
    return SQLAlchemyNotificationRepository(session)


def get_saved_job_repository(session: AsyncSession = Depends(get_db)) -> ISavedJobRepository:
    return SQLAlchemySavedJobRepository(session)


# ----------------------------------------------------------------------
# Services (per-request)
# ----------------------------------------------------------------------

def get_auth_service(
    user_repo: IUserRepository = Depends(get_user_repository),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    jwt_service: IJwtService = Depends(get_jwt_service),
    email_service: IEmailService = Depends(get_email_service),
) -> IAuthService:
    """Get auth service instance (per-request)"""
    from application.services.auth.impl import AuthService
    return AuthService(user_repo, password_hasher, jwt_service, email_service)


def get_job_lifecycle(
    job_repo: IJobRepository = Depends(get_job_repository),
    company_repo: ICompanyRepository = Depends(get_company_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
    savepoint: SavepointFactory = Depends(get_savepoint),
) -> JobLifecycleService:
    return JobLifecycleService(job_repo, company_repo, user_repo, savepoint)


def get_notification_service(
    notification_repo: INotificationRepository = Depends(get_notification_repository),
) -> NotificationService:
    return NotificationService(notification_repo)


def get_application_lifecycle(
    application_repo: IApplicationRepository = Depends(get_application_repository),
    job_repo: IJobRepository = Depends(get_job_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
    company_repo: ICompanyRepository = Depends(get_company_repository),
    job_lifecycle: JobLifecycleService = Depends(get_job_lifecycle),
    notification_service: NotificationService = Depends(get_notification_service),
    email_service: IEmailService = Depends(get_email_service),
    savepoint: SavepointFactory = Depends(get_savepoint),
) -> ApplicationLifecycleService:
    return ApplicationLifecycleService(
        application_repo,
        job_repo,
        user_repo,
        company_repo,
        job_lifecycle,
        notification_service,
        email_service,
        savepoint,
    )


def get_rating_aggregation(
    review_repo: IReviewRepository = Depends(get_review_repository),
    company_repo: ICompanyRepository = Depends(get_company_repository),
) -> RatingAggregationService:
    return RatingAggregationService(review_repo, company_repo)


def get_review_service(
    review_repo: IReviewRepository = Depends(get_review_repository),
    company_repo: ICompanyRepository = Depends(get_company_repository),
    job_repo: IJobRepository = Depends(get_job_repository),
    application_repo: IApplicationRepository = Depends(get_application_repository),
    rating_aggregation: RatingAggregationService = Depends(get_rating_aggregation),
) -> ReviewService:
    return ReviewService(review_repo, company_repo, job_repo, application_repo, rating_aggregation)


def get_saved_job_service(
    saved_job_repo: ISavedJobRepository = Depends(get_saved_job_repository),
    job_repo: IJobRepository = Depends(get_job_repository),
    job_lifecycle: JobLifecycleService = Depends(get_job_lifecycle),
    savepoint: SavepointFactory = Depends(get_savepoint),
) -> SavedJobService:
    return SavedJobService(saved_job_repo, job_repo, job_lifecycle, savepoint)


def get_company_service(
    company_repo: ICompanyRepository = Depends(get_company_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
) -> CompanyService:
    return CompanyService(company_repo, user_repo)


def get_dashboard_service(
    job_repo: IJobRepository = Depends(get_job_repository),
    application_repo: IApplicationRepository = Depends(get_application_repository),
    company_repo: ICompanyRepository = Depends(get_company_repository),
    review_repo: IReviewRepository = Depends(get_review_repository),
    saved_job_repo: ISavedJobRepository = Depends(get_saved_job_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
) -> DashboardService:
    return DashboardService(job_repo, application_repo, company_repo, review_repo, saved_job_repo, user_repo)
