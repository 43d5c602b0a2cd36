"""
User Endpoints
/api/v1/users/* routes
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from core.exceptions import ResourceNotFoundException
from domain.entities import User
from domain.enums import UserType
from domain.value_objects import ApplicationStatus
from application.repositories.interfaces import IUserRepository
from application.services.auth.interfaces import IAuthService
from application.services.applications import ApplicationLifecycleService
from application.services.dashboards import DashboardService
from application.services.pagination import PageRequest
from application.services.saved_jobs import SavedJobService
from presentation.api.v1.container import (
    get_application_lifecycle,
    get_auth_service,
    get_dashboard_service,
    get_saved_job_service,
    get_user_repository,
)
from presentation.api.v1.dependencies import get_current_user, get_optional_user, require_role
from presentation.api.v1.schemas.application import ApplicationResponse
from presentation.api.v1.schemas.auth import (
    JobSeekerResponse,
    PublicUserResponse,
    UpdateProfileRequest,
    UserResponse,
)
from presentation.api.v1.schemas.common import ApiResponse, ok, paginated
from presentation.api.v1.schemas.dashboard import UserDashboardResponse
from presentation.api.v1.schemas.saved_job import SavedJobResponse


router = APIRouter()


@router.get("/profile", response_model=ApiResponse[UserResponse])
async def get_profile(current_user: User = Depends(get_current_user)):
    return ok(UserResponse.from_entity(current_user))


@router.put("/profile", response_model=ApiResponse[UserResponse])
async def update_profile(
    body: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    auth_service: IAuthService = Depends(get_auth_service),
):
    user = await auth_service.update_profile(current_user.id, body.model_dump(exclude_unset=True))
    return ok(UserResponse.from_entity(user), "Profile updated successfully")


@router.get("/applications", response_model=ApiResponse[List[ApplicationResponse]])
async def get_my_applications(
    status: Optional[ApplicationStatus] = None,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: User = Depends(require_role(UserType.JOB_SEEKER)),
    applications: ApplicationLifecycleService = Depends(get_application_lifecycle),
):
    result = await applications.list_applications(current_user, status, PageRequest.of(page, limit))
    return paginated(result, ApplicationResponse.model_validate)


@router.get("/saved-jobs", response_model=ApiResponse[List[SavedJobResponse]])
async def get_my_saved_jobs(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    saved_jobs: SavedJobService = Depends(get_saved_job_service),
):
    result = await saved_jobs.list_saved_jobs(current_user.id, PageRequest.of(page, limit))
    return paginated(result, lambda item: SavedJobResponse.from_entity(*item))


@router.get("/dashboard", response_model=ApiResponse[UserDashboardResponse])
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    dashboards: DashboardService = Depends(get_dashboard_service),
):
    return ok(UserDashboardResponse.from_dashboard(await dashboards.user_dashboard(current_user)))


@router.get("/job-seekers", response_model=ApiResponse[List[JobSeekerResponse]])
async def list_job_seekers(
    search: Optional[str] = None,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: Optional[User] = Depends(get_optional_user),
    dashboards: DashboardService = Depends(get_dashboard_service),
):
    result = await dashboards.list_job_seekers(search, PageRequest.of(page, limit))
    return paginated(result, lambda user: JobSeekerResponse.for_viewer(user, current_user))


@router.get("/{user_id}", response_model=ApiResponse[PublicUserResponse])
async def get_public_profile(
    user_id: UUID,
    user_repo: IUserRepository = Depends(get_user_repository),
):
    user = await user_repo.get_by_id(user_id)
    if user is None or not user.is_active:
        raise ResourceNotFoundException("User", str(user_id))
    return ok(PublicUserResponse.from_entity(user))
