"""
API V1 Endpoints Package
Exports routers used by main app
"""
from .auth import router as auth_router
from .users import router as users_router
from .jobs import router as jobs_router
from .applications import router as applications_router
from .companies import router as companies_router
from .reviews import router as reviews_router
from .saved_jobs import router as saved_jobs_router
from .notifications import router as notifications_router

__all__ = [
    "auth_router",
    "users_router",
    "jobs_router",
    "applications_router",
    "companies_router",
    "reviews_router",
    "saved_jobs_router",
    "notifications_router",
]
