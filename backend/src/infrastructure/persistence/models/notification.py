"""
Notification ORM Model
"""
import uuid
from sqlalchemy import Column, String, DateTime, Text, Boolean, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from core.database import Base


class NotificationModel(Base):
    """In-app notification table ORM model"""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "is_read"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(String(30), nullable=False)
    title = Column(String(200), nullable=True)
    message = Column(Text, nullable=False)

    related_job_id = Column(UUID(as_uuid=True), nullable=True)
    related_application_id = Column(UUID(as_uuid=True), nullable=True)
    related_company_id = Column(UUID(as_uuid=True), nullable=True)

    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)

    # Retention window is measured from here
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<NotificationModel {self.type} -> {self.user_id}>"
