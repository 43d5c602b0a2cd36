"""
Company Domain Entity
"""
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ..enums import CompanyIndustry, CompanySize


def slugify(value: str) -> str:
    """Lower-case, dash-separated URL slug"""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "company"


@dataclass(frozen=True)
class Company:
    """Company domain entity - immutable

    average_rating, review_count and active_jobs_count are derived values
    maintained by the lifecycle services, never edited by the owner.
    """

    id: UUID
    owner_id: UUID
    name: str
    description: str
    email: str
    slug: str = ""

    website: Optional[str] = None
    phone: Optional[str] = None
    industry: Optional[CompanyIndustry] = None
    company_size: Optional[CompanySize] = None
    founded_year: Optional[int] = None
    headquarters_city: Optional[str] = None
    headquarters_state: Optional[str] = None
    logo_url: Optional[str] = None

    is_verified: bool = False
    verification_requested_at: Optional[datetime] = None

    # Derived statistics
    average_rating: float = 0.0
    review_count: int = 0
    active_jobs_count: int = 0

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Company name cannot be empty")
        if not self.slug:
            object.__setattr__(self, "slug", slugify(self.name))

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.owner_id == user_id

    @property
    def verification_requested(self) -> bool:
        return self.verification_requested_at is not None

    def __str__(self) -> str:
        return f"Company({self.name})"
