"""
Notifications Service Package
"""
from .service import NotificationService

__all__ = ["NotificationService"]
