"""
Application Domain Entity
Immutable job application business object
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from ..value_objects import ApplicationStatus


@dataclass(frozen=True)
class StatusChange:
    """One entry of the append-only status history"""

    status: ApplicationStatus
    changed_at: datetime
    changed_by: Optional[UUID] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class Application:
    """Job application domain entity - immutable"""

    id: UUID
    job_id: UUID
    user_id: UUID
    company_id: Optional[UUID] = None

    # Application content
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    expected_salary: Optional[str] = None

    # Status tracking
    status: ApplicationStatus = ApplicationStatus.PENDING
    status_history: Tuple[StatusChange, ...] = ()

    # Feedback
    rejection_reason: Optional[str] = None
    internal_notes: Optional[str] = None

    # Timestamps
    applied_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    decision_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Employer read receipt
    is_viewed: bool = False
    viewed_at: Optional[datetime] = None

    # Optimistic concurrency token
    version: int = 1

    def with_status(
        self,
        new_status: ApplicationStatus,
        changed_by: Optional[UUID],
        reason: Optional[str],
        at: datetime,
    ) -> "Application":
        """Return the application moved to new_status with history recorded"""
        change = StatusChange(status=new_status, changed_at=at, changed_by=changed_by, reason=reason)
        reviewed_at = at if new_status != ApplicationStatus.PENDING else self.reviewed_at
        decision_at = at if new_status.is_decided else self.decision_at
        return replace(
            self,
            status=new_status,
            status_history=self.status_history + (change,),
            reviewed_at=reviewed_at,
            decision_at=decision_at,
        )

    def is_pending(self) -> bool:
        """Check if application is pending"""
        return self.status == ApplicationStatus.PENDING

    def is_terminal(self) -> bool:
        """Check if application is in terminal state"""
        return self.status.is_terminal

    def __str__(self) -> str:
        return f"Application({self.id}, status={self.status.value})"
