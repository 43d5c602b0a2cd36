"""
Authentication Service Interfaces
Abstract base classes for authentication services
"""
from abc import ABC, abstractmethod
from typing import Optional, Tuple, Dict, Any
from uuid import UUID

from domain.entities import User
from domain.enums import UserType


class IPasswordHasher(ABC):
    """Password hashing interface"""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """Hash a plain password"""
        pass

    @abstractmethod
    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify password against hash"""
        pass


class IJwtService(ABC):
    """JWT token service interface"""

    @abstractmethod
    def create_access_token(self, user_id: UUID, role: str) -> str:
        """Create access token"""
        pass

    @abstractmethod
    def create_purpose_token(
        self,
        user_id: UUID,
        purpose: str,
        expire_minutes: int,
        claims: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Short-lived token usable only for one purpose (password reset, e-mail verification)"""
        pass

    @abstractmethod
    def verify_token(self, token: str) -> Dict[str, Any]:
        """Verify and decode token, raising AuthenticationException when invalid"""
        pass


class IAuthService(ABC):
    """Authentication service interface"""

    @abstractmethod
    async def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        user_type: UserType = UserType.JOB_SEEKER,
    ) -> Tuple[User, str]:
        """
        Register a new user

        Returns:
            Tuple of (User, access token)
        """
        pass

    @abstractmethod
    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate user

        Returns:
            Tuple of (User, access token)
        """
        pass

    @abstractmethod
    async def verify_access_token(self, token: str) -> Optional[User]:
        """Resolve a bearer token to its user"""
        pass

    @abstractmethod
    async def update_profile(self, user_id: UUID, changes: Dict[str, Any]) -> User:
        pass

    @abstractmethod
    async def change_password(self, user_id: UUID, current_password: str, new_password: str) -> None:
        pass

    @abstractmethod
    async def request_password_reset(self, email: str) -> None:
        """Mail a reset link; silent when no such account exists"""
        pass

    @abstractmethod
    async def reset_password(self, token: str, new_password: str) -> User:
        pass

    @abstractmethod
    async def verify_email(self, token: str) -> Tuple[User, str]:
        """Confirm the address and return (User, access token)"""
        pass

    @abstractmethod
    async def resend_verification(self, email: str) -> None:
        pass

    @abstractmethod
    async def delete_account(self, user_id: UUID) -> None:
        """Soft delete: the row stays, login and tokens stop working"""
        pass

    @abstractmethod
    async def ensure_admin(self, email: str, password: str) -> User:
        """Create the administrator account unless it already exists"""
        pass
