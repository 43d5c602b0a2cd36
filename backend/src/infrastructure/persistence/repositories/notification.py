"""
Notification Repository Implementation
"""
from datetime import datetime
from typing import Optional, List, Tuple
from uuid import UUID

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Notification
from domain.enums import NotificationType
from application.repositories.interfaces import INotificationRepository
from infrastructure.persistence.models.notification import NotificationModel
from core.exceptions import RepositoryException, ResourceNotFoundException


class SQLAlchemyNotificationRepository(INotificationRepository):
    """SQLAlchemy implementation of notification repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, notification: Notification) -> Notification:
        try:
            model = self._to_model(notification)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to create notification for {notification.user_id}: {str(e)}")
            raise RepositoryException(f"Failed to create notification: {str(e)}")

    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        try:
            result = await self.session.execute(
                select(NotificationModel)
                .where(NotificationModel.id == notification_id)
                .execution_options(populate_existing=True)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get notification {notification_id}: {str(e)}")
            raise RepositoryException(f"Failed to get notification: {str(e)}")

    async def list_by_user(
        self,
        user_id: UUID,
        unread_only: bool,
        offset: int,
        limit: int,
    ) -> Tuple[List[Notification], int]:
        conditions = [NotificationModel.user_id == user_id]
        if unread_only:
            conditions.append(NotificationModel.is_read.is_(False))

        try:
            total = await self.session.scalar(
                select(func.count()).select_from(NotificationModel).where(*conditions)
            )
            result = await self.session.execute(
                select(NotificationModel)
                .where(*conditions)
                .order_by(NotificationModel.created_at.desc())
                .offset(offset)
                .limit(limit)
            )
            return [self._to_entity(m) for m in result.scalars().all()], total or 0

        except Exception as e:
            logger.error(f"Failed to list notifications for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list notifications: {str(e)}")

    async def count_unread(self, user_id: UUID) -> int:
        return await self._count(NotificationModel.user_id == user_id, NotificationModel.is_read.is_(False))

    async def count(self, user_id: UUID) -> int:
        return await self._count(NotificationModel.user_id == user_id)

    async def mark_read(self, notification_id: UUID, read_at: datetime) -> Notification:
        try:
            await self.session.execute(
                update(NotificationModel)
                .where(NotificationModel.id == notification_id)
                .values(is_read=True, read_at=read_at)
                .execution_options(synchronize_session=False)
            )
        except Exception as e:
            logger.error(f"Failed to mark notification {notification_id} read: {str(e)}")
            raise RepositoryException(f"Failed to update notification: {str(e)}")

        notification = await self.get_by_id(notification_id)
        if notification is None:
            raise ResourceNotFoundException("Notification", str(notification_id))
        return notification

    async def mark_all_read(self, user_id: UUID, read_at: datetime) -> int:
        try:
            result = await self.session.execute(
                update(NotificationModel)
                .where(NotificationModel.user_id == user_id, NotificationModel.is_read.is_(False))
                .values(is_read=True, read_at=read_at)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

        except Exception as e:
            logger.error(f"Failed to mark notifications read for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to update notifications: {str(e)}")

    async def delete(self, notification_id: UUID) -> bool:
        return await self._delete(NotificationModel.id == notification_id) > 0

    async def delete_all_for_user(self, user_id: UUID) -> int:
        return await self._delete(NotificationModel.user_id == user_id)

    async def delete_older_than(self, cutoff: datetime) -> int:
        return await self._delete(NotificationModel.created_at < cutoff)

    async def _count(self, *conditions) -> int:
        try:
            total = await self.session.scalar(
                select(func.count()).select_from(NotificationModel).where(*conditions)
            )
            return total or 0
        except Exception as e:
            logger.error(f"Failed to count notifications: {str(e)}")
            raise RepositoryException(f"Failed to count notifications: {str(e)}")

    async def _delete(self, condition) -> int:
        try:
            result = await self.session.execute(
                delete(NotificationModel)
                .where(condition)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount
        except Exception as e:
            logger.error(f"Failed to delete notifications: {str(e)}")
            raise RepositoryException(f"Failed to delete notifications: {str(e)}")

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            related_job_id=model.related_job_id,
            related_application_id=model.related_application_id,
            related_company_id=model.related_company_id,
            is_read=model.is_read,
            read_at=model.read_at,
            created_at=model.created_at,
        )

    @staticmethod
    def _to_model(notification: Notification) -> NotificationModel:
        model = NotificationModel(
            id=notification.id,
            user_id=notification.user_id,
            type=notification.type.value,
            title=notification.title,
            message=notification.message,
            related_job_id=notification.related_job_id,
            related_application_id=notification.related_application_id,
            related_company_id=notification.related_company_id,
            is_read=notification.is_read,
            read_at=notification.read_at,
        )
        if notification.created_at:
            model.created_at = notification.created_at
        return model
