"""
Job Status Enums
Status enumerations and allowed transitions for jobs and applications
"""
from enum import Enum
from typing import Dict, FrozenSet


class JobStatus(str, Enum):
    """Job posting status"""
    DRAFT = "draft"
    PUBLISHED = "published"
    CLOSED = "closed"
    EXPIRED = "expired"  # no transition produces this status

    def can_transition_to(self, target: "JobStatus") -> bool:
        """Check the job state machine"""
        return target in JOB_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return self == JobStatus.CLOSED


class ApplicationStatus(str, Enum):
    """Job application status"""
    PENDING = "pending"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    ACCEPTED = "accepted"
    WITHDRAWN = "withdrawn"

    def can_transition_to(self, target: "ApplicationStatus") -> bool:
        """Check the application state machine"""
        return target in APPLICATION_TRANSITIONS[self]

    @property
    def is_decided(self) -> bool:
        """Employer has made a final decision"""
        return self in DECIDED_APPLICATION_STATUSES

    @property
    def is_terminal(self) -> bool:
        return not APPLICATION_TRANSITIONS[self]


JOB_TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.DRAFT: frozenset({JobStatus.PUBLISHED, JobStatus.CLOSED}),
    JobStatus.PUBLISHED: frozenset({JobStatus.DRAFT, JobStatus.CLOSED}),
    JobStatus.EXPIRED: frozenset({JobStatus.CLOSED}),
    JobStatus.CLOSED: frozenset(),
}

DECIDED_APPLICATION_STATUSES: FrozenSet[ApplicationStatus] = frozenset({
    ApplicationStatus.ACCEPTED,
    ApplicationStatus.REJECTED,
})

APPLICATION_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset({
        ApplicationStatus.REVIEWED,
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.WITHDRAWN,
    }),
    ApplicationStatus.REVIEWED: frozenset({
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.WITHDRAWN,
    }),
    ApplicationStatus.SHORTLISTED: frozenset({
        ApplicationStatus.REVIEWED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.WITHDRAWN,
    }),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.WITHDRAWN: frozenset(),
}
