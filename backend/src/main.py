"""Main FastAPI Application

Wires middleware, global exception handlers and the API routers from
`presentation`.

Run locally for development with:

    uvicorn main:app --reload

Keep application logic in `application`, `domain` and `infrastructure`
to preserve a clean architecture.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.database import init_db, close_db, get_db_session, health_check as db_health_check
from core.logging_config import configure_logging
from core.exceptions import (
    DomainException,
    AuthenticationException,
    AuthorizationException,
    ConcurrencyConflictException,
    DuplicateResourceException,
    InvalidTransitionException,
    RepositoryException,
    ResourceNotFoundException,
    ValidationException,
)
from application.services.auth.impl import AuthService
from application.services.notifications import NotificationService
from infrastructure.persistence.repositories.notification import SQLAlchemyNotificationRepository
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from presentation.api.v1.container import get_jwt_service, get_password_hasher
from presentation.api.v1.dependencies import limiter
from presentation.api.v1.endpoints import (
    auth_router,
    users_router,
    jobs_router,
    applications_router,
    companies_router,
    reviews_router,
    saved_jobs_router,
    notifications_router,
)


API_PREFIX = "/api/v1"

# Most specific first: isinstance() picks the first match
STATUS_BY_EXCEPTION = (
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (InvalidTransitionException, status.HTTP_400_BAD_REQUEST),
    (AuthenticationException, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationException, status.HTTP_403_FORBIDDEN),
    (ResourceNotFoundException, status.HTTP_404_NOT_FOUND),
    (DuplicateResourceException, status.HTTP_409_CONFLICT),
    (ConcurrencyConflictException, status.HTTP_409_CONFLICT),
    (RepositoryException, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


async def purge_expired_notifications() -> None:
    """Drop notifications past the retention window"""
    try:
        async with get_db_session() as session:
            await NotificationService(SQLAlchemyNotificationRepository(session)).purge_expired()
    except Exception as e:
        logger.error(f"Notification purge failed: {e}")


async def ensure_admin_account() -> None:
    """Create the configured administrator on first start"""
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return
    try:
        async with get_db_session() as session:
            auth_service = AuthService(SQLAlchemyUserRepository(session), get_password_hasher(), get_jwt_service())
            await auth_service.ensure_admin(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
    except Exception as e:
        logger.error(f"Administrator bootstrap failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    configure_logging()
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")

    await init_db()
    logger.info("Database initialized")

    await ensure_admin_account()
    await purge_expired_notifications()

    yield

    logger.info("Shutting down gracefully...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.APP_NAME,
    description="Job board API: postings, applications, companies, reviews and notifications",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting: global default plus per-route limits declared on the endpoints
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)


def error_response(status_code: int, message: str, errors: list = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    """Handle domain-level exceptions"""
    status_code = next(
        (code for exc_type, code in STATUS_BY_EXCEPTION if isinstance(exc, exc_type)),
        status.HTTP_400_BAD_REQUEST,
    )

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {str(exc)}")
        return error_response(status_code, "Internal server error")

    logger.warning(f"{request.method} {request.url.path} -> {status_code}: {str(exc)}")
    return error_response(status_code, str(exc))


@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit hit on {request.method} {request.url.path}: {exc.detail}")
    return error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        exc.limit.error_message or "Too many requests from this IP, please try again later.",
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Body/query validation failures are client errors"""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path")),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler"""
    logger.opt(exception=exc).error(f"Unhandled exception: {str(exc)}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


app.include_router(auth_router, prefix=f"{API_PREFIX}/auth", tags=["Authentication"])
app.include_router(users_router, prefix=f"{API_PREFIX}/users", tags=["Users"])
app.include_router(jobs_router, prefix=f"{API_PREFIX}/jobs", tags=["Jobs"])
app.include_router(applications_router, prefix=f"{API_PREFIX}/applications", tags=["Applications"])
app.include_router(companies_router, prefix=f"{API_PREFIX}/companies", tags=["Companies"])
app.include_router(reviews_router, prefix=f"{API_PREFIX}/reviews", tags=["Reviews"])
app.include_router(saved_jobs_router, prefix=f"{API_PREFIX}/saved-jobs", tags=["Saved Jobs"])
app.include_router(notifications_router, prefix=f"{API_PREFIX}/notifications", tags=["Notifications"])


@app.get("/health")
async def health():
    """Health check endpoint"""
    database_ok = await db_health_check()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "up" if database_ok else "down",
        "environment": settings.ENVIRONMENT,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
