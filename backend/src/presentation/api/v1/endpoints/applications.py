"""
Application Endpoints
/api/v1/applications/* routes
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from core.config import settings
from domain.entities import Application, User
from domain.enums import UserType
from domain.value_objects import ApplicationStatus
from application.services.applications import ApplicationLifecycleService
from application.services.pagination import PageRequest
from presentation.api.v1.container import get_application_lifecycle
from presentation.api.v1.dependencies import get_current_user, limiter, require_role
from presentation.api.v1.schemas.application import (
    ApplicationResponse,
    ApplicationSubmitRequest,
    AppliedCheckResponse,
    DecisionRequest,
    EmployerApplicationResponse,
    StatusUpdateRequest,
)
from presentation.api.v1.schemas.common import ApiResponse, ok, paginated


router = APIRouter()


def _present(application: Application, viewer: User) -> ApplicationResponse:
    """Internal notes are only returned to the employer side"""
    if application.user_id == viewer.id:
        return ApplicationResponse.model_validate(application)
    return EmployerApplicationResponse.model_validate(application)


@router.get("", response_model=ApiResponse[List[EmployerApplicationResponse]])
async def list_applications(
    status: Optional[ApplicationStatus] = None,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_lifecycle),
):
    result = await applications.list_applications(current_user, status, PageRequest.of(page, limit))
    return paginated(result, lambda application: _present(application, current_user))


@router.post("", response_model=ApiResponse[ApplicationResponse], status_code=status.HTTP_201_CREATED)
@limiter.limit(
    settings.RATE_LIMIT_APPLICATIONS,
    error_message="You have reached the maximum number of applications per day.",
)
async def submit_application(
    request: Request,
    body: ApplicationSubmitRequest,
    current_user: User = Depends(require_role(UserType.JOB_SEEKER)),
    applications: ApplicationLifecycleService = Depends(get_application_lifecycle),
):
    application = await applications.submit_application(
        body.job_id, current_user, body.model_dump(exclude={"job_id"})
    )
    return ok(ApplicationResponse.model_validate(application), "Application submitted successfully")


@router.get("/check/{job_id}", response_model=ApiResponse[AppliedCheckResponse])
async def check_applied(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_lifecycle),
):
    return ok(AppliedCheckResponse(has_applied=await applications.has_applied(current_user.id, job_id)))


@router.get("/{application_id}", response_model=ApiResponse[EmployerApplicationResponse])
async def get_application(
    application_id: UUID,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_lifecycle),
):
    application = await applications.get_application(application_id, current_user.id)
    return ok(_present(application, current_user))


@router.put("/{application_id}/status", response_model=ApiResponse[EmployerApplicationResponse])
async def update_status(
    application_id: UUID,
    body: StatusUpdateRequest,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_lifecycle),
):
    application = await applications.update_application_status(
        application_id,
        body.status,
        current_user.id,
        reason=body.reason,
        rejection_reason=body.rejection_reason,
        internal_notes=body.internal_notes,
    )
    return ok(EmployerApplicationResponse.model_validate(application), "Application status updated successfully")


@router.delete("/{application_id}", response_model=ApiResponse[ApplicationResponse])
async def withdraw_application(
    application_id: UUID,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_lifecycle),
):
    application = await applications.withdraw_application(application_id, current_user.id)
    return ok(ApplicationResponse.model_validate(application), "Application withdrawn successfully")


@router.post("/{application_id}/shortlist", response_model=ApiResponse[EmployerApplicationResponse])
async def shortlist_application(
    application_id: UUID,
    body: Optional[DecisionRequest] = None,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_lifecycle),
):
    application = await applications.shortlist_application(
        application_id, current_user.id, reason=body.reason if body else None
    )
    return ok(EmployerApplicationResponse.model_validate(application), "Application shortlisted")


@router.post("/{application_id}/accept", response_model=ApiResponse[EmployerApplicationResponse])
async def accept_application(
    application_id: UUID,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_lifecycle),
):
    application = await applications.accept_application(application_id, current_user.id)
    return ok(EmployerApplicationResponse.model_validate(application), "Application accepted")


@router.post("/{application_id}/reject", response_model=ApiResponse[EmployerApplicationResponse])
async def reject_application(
    application_id: UUID,
    body: Optional[DecisionRequest] = None,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_lifecycle),
):
    application = await applications.reject_application(
        application_id, current_user.id, reason=body.reason if body else None
    )
    return ok(EmployerApplicationResponse.model_validate(application), "Application rejected")
