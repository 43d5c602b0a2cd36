"""ORM Models Package"""

from .user import UserModel
from .company import CompanyModel
from .job import JobModel
from .application import ApplicationModel
from .review import ReviewModel, ReviewLikeModel, ReviewReportModel
from .notification import NotificationModel
from .saved_job import SavedJobModel

__all__ = [
    "UserModel",
    "CompanyModel",
    "JobModel",
    "ApplicationModel",
    "ReviewModel",
    "ReviewLikeModel",
    "ReviewReportModel",
    "NotificationModel",
    "SavedJobModel",
]
