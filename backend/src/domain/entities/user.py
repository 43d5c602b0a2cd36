"""
User Domain Entity
Immutable user business object
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from ..value_objects import Email
from ..enums import UserType


@dataclass(frozen=True)
class User:
    """User domain entity - immutable"""

    id: UUID
    email: Email
    password_hash: str
    first_name: str
    last_name: str
    user_type: UserType

    # Employer link
    company_id: Optional[UUID] = None

    # Profile
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    resume_url: Optional[str] = None

    is_active: bool = True

    # Account lifecycle
    is_email_verified: bool = False
    email_verified_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate user data"""
        if not self.first_name or not self.first_name.strip():
            raise ValueError("First name cannot be empty")
        if not self.last_name or not self.last_name.strip():
            raise ValueError("Last name cannot be empty")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def is_job_seeker(self) -> bool:
        return self.user_type == UserType.JOB_SEEKER

    def is_employer(self) -> bool:
        return self.user_type == UserType.EMPLOYER

    def is_admin(self) -> bool:
        return self.user_type == UserType.ADMIN

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def __str__(self) -> str:
        return f"User({self.email}, {self.user_type.value})"
