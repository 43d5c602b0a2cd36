"""Domain Entities - Core business objects"""

from .user import User
from .company import Company, slugify
from .job import Job
from .application import Application, StatusChange
from .review import Review
from .notification import Notification
from .saved_job import SavedJob
__all__ = [
    "User",
    "Company",
    "slugify",
    "Job",
    "Application",
    "StatusChange",
    "Review",
    "Notification",
    "SavedJob",
]
