"""
Authentication Request/Response Schemas
Pydantic v2 models with strict validation
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from domain.entities import User
from domain.enums import UserType


class RegisterRequest(BaseModel):
    """New account"""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    user_type: UserType = UserType.JOB_SEEKER

    @field_validator("user_type")
    @classmethod
    def no_self_service_admin(cls, v: UserType) -> UserType:
        """Admin accounts are not created through registration"""
        if v == UserType.ADMIN:
            raise ValueError("user_type must be job_seeker or employer")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UpdateProfileRequest(BaseModel):
    """Fields a user may change on their own profile"""

    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone: Optional[str] = Field(None, max_length=30)
    location: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=2000)
    skills: Optional[List[str]] = None
    resume_url: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class EmailRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """User information response"""

    id: UUID
    email: str
    first_name: str
    last_name: str
    full_name: str
    user_type: UserType
    company_id: Optional[UUID] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    skills: List[str] = []
    resume_url: Optional[str] = None
    is_email_verified: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=str(user.email),
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
            user_type=user.user_type,
            company_id=user.company_id,
            phone=user.phone,
            location=user.location,
            bio=user.bio,
            skills=list(user.skills),
            resume_url=user.resume_url,
            is_email_verified=user.is_email_verified,
            created_at=user.created_at,
        )


class PublicUserResponse(BaseModel):
    """Profile fields visible to other users"""

    id: UUID
    full_name: str
    user_type: UserType
    location: Optional[str] = None
    bio: Optional[str] = None
    skills: List[str] = []

    @classmethod
    def from_entity(cls, user: User) -> "PublicUserResponse":
        return cls(
            id=user.id,
            full_name=user.full_name,
            user_type=user.user_type,
            location=user.location,
            bio=user.bio,
            skills=list(user.skills),
        )


class JobSeekerResponse(PublicUserResponse):
    """Directory entry; the e-mail is only filled in for employers"""

    email: Optional[str] = None

    @classmethod
    def for_viewer(cls, user: User, viewer: Optional[User]) -> "JobSeekerResponse":
        entry = cls(**PublicUserResponse.from_entity(user).model_dump())
        if viewer is not None and viewer.is_employer():
            entry.email = str(user.email)
        return entry


class AuthResponse(BaseModel):
    """Authenticated user with a bearer token"""

    user: UserResponse
    token: str
    token_type: str = "bearer"
