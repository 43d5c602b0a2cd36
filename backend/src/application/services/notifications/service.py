"""
Notification Service
In-app notifications addressed to a single user
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from loguru import logger

from core.config import settings
from core.exceptions import ResourceNotFoundException, ValidationException
from domain.entities import Notification
from domain.enums import NotificationType
from application.repositories.interfaces import INotificationRepository
from application.services.pagination import Page, PageRequest


class NotificationService:
    """Create, list and acknowledge notifications"""

    def __init__(self, notification_repository: INotificationRepository):
        self.notification_repo = notification_repository

    async def notify(
        self,
        user_id: UUID,
        type: NotificationType,
        title: Optional[str],
        message: str,
        related_job_id: Optional[UUID] = None,
        related_application_id: Optional[UUID] = None,
        related_company_id: Optional[UUID] = None,
    ) -> Notification:
        notification = await self.notification_repo.create(
            Notification(
                id=uuid4(),
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                related_job_id=related_job_id,
                related_application_id=related_application_id,
                related_company_id=related_company_id,
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.debug(f"Notification {notification.id} ({type.value}) sent to {user_id}")
        return notification

    async def notify_many(self, items: List[Dict[str, Any]]) -> List[Notification]:
        """Create several notifications in the caller's transaction: all or none"""
        if not items:
            raise ValidationException("notifications", "Notifications array is required")
        created = [
            await self.notify(
                item["user_id"],
                item.get("type") or NotificationType.SYSTEM,
                item.get("title"),
                item["message"],
                related_job_id=item.get("related_job_id"),
                related_application_id=item.get("related_application_id"),
                related_company_id=item.get("related_company_id"),
            )
            for item in items
        ]
        logger.info(f"{len(created)} notifications created in bulk")
        return created

    async def list_notifications(
        self,
        user_id: UUID,
        unread_only: bool,
        request: PageRequest,
    ) -> Page[Notification]:
        items, total = await self.notification_repo.list_by_user(
            user_id, unread_only, request.offset, request.limit
        )
        return Page.build(items, total, request)

    async def count(self, user_id: UUID) -> Dict[str, int]:
        return {
            "unread_count": await self.notification_repo.count_unread(user_id),
            "total_count": await self.notification_repo.count(user_id),
        }

    async def mark_as_read(self, notification_id: UUID, user_id: UUID) -> Notification:
        notification = await self._get_own(notification_id, user_id)
        if notification.is_read:
            raise ValidationException("notification", "Notification is already read")
        return await self.notification_repo.mark_read(notification_id, datetime.now(timezone.utc))

    async def mark_all_as_read(self, user_id: UUID) -> int:
        changed = await self.notification_repo.mark_all_read(user_id, datetime.now(timezone.utc))
        logger.info(f"{changed} notifications marked as read for {user_id}")
        return changed

    async def delete_notification(self, notification_id: UUID, user_id: UUID) -> None:
        await self._get_own(notification_id, user_id)
        await self.notification_repo.delete(notification_id)

    async def delete_all_notifications(self, user_id: UUID) -> int:
        return await self.notification_repo.delete_all_for_user(user_id)

    async def purge_expired(self, retention_days: Optional[int] = None) -> int:
        """Delete notifications older than the retention window"""
        days = retention_days if retention_days is not None else settings.NOTIFICATION_RETENTION_DAYS
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        removed = await self.notification_repo.delete_older_than(cutoff)
        logger.info(f"Purged {removed} notifications older than {days} days")
        return removed

    async def _get_own(self, notification_id: UUID, user_id: UUID) -> Notification:
        notification = await self.notification_repo.get_by_id(notification_id)
        # Another user's notification is reported as missing
        if notification is None or notification.user_id != user_id:
            raise ResourceNotFoundException("Notification", str(notification_id))
        return notification
