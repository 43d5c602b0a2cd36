"""
Notification Domain Entity
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ..enums import NotificationType


@dataclass(frozen=True)
class Notification:
    """In-app notification addressed to one user"""

    id: UUID
    user_id: UUID
    type: NotificationType
    message: str
    title: Optional[str] = None

    related_job_id: Optional[UUID] = None
    related_application_id: Optional[UUID] = None
    related_company_id: Optional[UUID] = None

    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
