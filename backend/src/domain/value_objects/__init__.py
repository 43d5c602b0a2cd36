"""Value Objects - Immutable objects defined by their attributes"""

from .email import Email
from .salary import Salary
from .location import JobLocation
from .rating import RatingSummary, round_rating, MIN_RATING, MAX_RATING
from .job_status import (
    JobStatus,
    ApplicationStatus,
    JOB_TRANSITIONS,
    APPLICATION_TRANSITIONS,
    DECIDED_APPLICATION_STATUSES,
)
__all__ = [
    "Email",
    "Salary",
    "JobLocation",
    "RatingSummary",
    "round_rating",
    "MIN_RATING",
    "MAX_RATING",
    "JobStatus",
    "ApplicationStatus",
    "JOB_TRANSITIONS",
    "APPLICATION_TRANSITIONS",
    "DECIDED_APPLICATION_STATUSES",
]
