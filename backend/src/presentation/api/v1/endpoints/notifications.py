"""
Notification Endpoints
/api/v1/notifications/* routes
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from domain.entities import User
from domain.enums import NotificationType, UserType
from application.services.notifications import NotificationService
from application.services.pagination import PageRequest
from presentation.api.v1.container import get_notification_service
from presentation.api.v1.dependencies import get_current_user, require_role
from presentation.api.v1.schemas.common import ApiResponse, ok, paginated
from presentation.api.v1.schemas.notification import (
    NotificationBulkCreateRequest,
    NotificationCountResponse,
    NotificationCreateRequest,
    NotificationResponse,
)
from presentation.api.v1.schemas.saved_job import CountResponse


router = APIRouter()


@router.get("", response_model=ApiResponse[List[NotificationResponse]])
async def list_notifications(
    unread_only: bool = False,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    result = await notifications.list_notifications(current_user.id, unread_only, PageRequest.of(page, limit))
    return paginated(result, NotificationResponse.model_validate)


@router.post("", response_model=ApiResponse[NotificationResponse], status_code=status.HTTP_201_CREATED)
async def create_notification(
    body: NotificationCreateRequest,
    current_user: User = Depends(require_role(UserType.ADMIN)),
    notifications: NotificationService = Depends(get_notification_service),
):
    notification = await notifications.notify(
        body.user_id,
        body.type,
        body.title,
        body.message,
        related_job_id=body.related_job_id,
        related_application_id=body.related_application_id,
        related_company_id=body.related_company_id,
    )
    return ok(NotificationResponse.model_validate(notification), "Notification created successfully")


@router.post("/bulk", response_model=ApiResponse[List[NotificationResponse]], status_code=status.HTTP_201_CREATED)
async def create_notifications(
    body: NotificationBulkCreateRequest,
    current_user: User = Depends(require_role(UserType.ADMIN)),
    notifications: NotificationService = Depends(get_notification_service),
):
    created = await notifications.notify_many([item.model_dump() for item in body.notifications])
    return ok(
        [NotificationResponse.model_validate(notification) for notification in created],
        f"{len(created)} notifications created successfully",
    )


@router.get("/count", response_model=ApiResponse[NotificationCountResponse])
async def count_notifications(
    current_user: User = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    return ok(NotificationCountResponse(**await notifications.count(current_user.id)))


@router.get("/types", response_model=ApiResponse[List[str]])
async def notification_types():
    return ok([kind.value for kind in NotificationType])


@router.put("/mark-all-read", response_model=ApiResponse[CountResponse])
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    changed = await notifications.mark_all_as_read(current_user.id)
    return ok(CountResponse(count=changed), f"{changed} notifications marked as read")


@router.delete("", response_model=ApiResponse[CountResponse])
async def delete_all_notifications(
    current_user: User = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    removed = await notifications.delete_all_notifications(current_user.id)
    return ok(CountResponse(count=removed), f"{removed} notifications deleted")


@router.put("/{notification_id}/read", response_model=ApiResponse[NotificationResponse])
async def mark_as_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    notification = await notifications.mark_as_read(notification_id, current_user.id)
    return ok(NotificationResponse.model_validate(notification), "Notification marked as read")


@router.delete("/{notification_id}", response_model=ApiResponse[None])
async def delete_notification(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    await notifications.delete_notification(notification_id, current_user.id)
    return ok(message="Notification deleted successfully")
