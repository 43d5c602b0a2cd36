"""
Notification Schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.enums import NotificationType


class NotificationCreateRequest(BaseModel):
    """Administrative notification to one user"""

    user_id: UUID
    type: NotificationType = NotificationType.SYSTEM
    title: Optional[str] = Field(None, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)
    related_job_id: Optional[UUID] = None
    related_application_id: Optional[UUID] = None
    related_company_id: Optional[UUID] = None


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    type: NotificationType
    title: Optional[str] = None
    message: str
    related_job_id: Optional[UUID] = None
    related_application_id: Optional[UUID] = None
    related_company_id: Optional[UUID] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class NotificationCountResponse(BaseModel):
    unread_count: int
    total_count: int


class NotificationBulkCreateRequest(BaseModel):
    notifications: List[NotificationCreateRequest] = Field(default_factory=list, max_length=500)
