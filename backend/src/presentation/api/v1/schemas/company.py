"""
Company Schemas
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from domain.enums import CompanyIndustry, CompanySize


class CompanyCreateRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=1, max_length=5000)
    email: EmailStr
    website: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=30)
    industry: Optional[CompanyIndustry] = None
    company_size: Optional[CompanySize] = None
    founded_year: Optional[int] = Field(None, ge=1800, le=2100)
    headquarters_city: Optional[str] = Field(None, max_length=100)
    headquarters_state: Optional[str] = Field(None, max_length=100)
    logo_url: Optional[str] = None


class CompanyUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=30)
    industry: Optional[CompanyIndustry] = None
    company_size: Optional[CompanySize] = None
    founded_year: Optional[int] = Field(None, ge=1800, le=2100)
    headquarters_city: Optional[str] = Field(None, max_length=100)
    headquarters_state: Optional[str] = Field(None, max_length=100)
    logo_url: Optional[str] = None


class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    name: str
    slug: str
    description: str
    email: str
    website: Optional[str] = None
    phone: Optional[str] = None
    industry: Optional[CompanyIndustry] = None
    company_size: Optional[CompanySize] = None
    founded_year: Optional[int] = None
    headquarters_city: Optional[str] = None
    headquarters_state: Optional[str] = None
    logo_url: Optional[str] = None
    is_verified: bool
    verification_requested_at: Optional[datetime] = None
    average_rating: float
    review_count: int
    active_jobs_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
