"""
Authentication Service Implementation
Concrete implementation of IAuthService
"""
import hashlib
from dataclasses import replace
from datetime import datetime, timezone
from typing import Tuple, Optional, Dict, Any
from uuid import UUID, uuid4

from loguru import logger

from domain.entities import User
from domain.enums import UserType
from domain.value_objects import Email
from core.config import settings
from core.exceptions import (
    AuthenticationException,
    DuplicateResourceException,
    ResourceNotFoundException,
    ValidationException,
)
from application.repositories.interfaces import IUserRepository
from application.services.email import IEmailService, messages
from application.services.side_effects import best_effort
from .interfaces import IAuthService, IPasswordHasher, IJwtService


MIN_PASSWORD_LENGTH = 6

# Fields a user may edit on their own profile
PROFILE_FIELDS = ("first_name", "last_name", "phone", "location", "bio", "skills", "resume_url")

PASSWORD_RESET = "password_reset"
EMAIL_VERIFICATION = "email_verification"

INVALID_RESET_TOKEN = "Invalid or expired reset token"
INVALID_VERIFICATION_TOKEN = "Invalid or expired verification token"


def _password_fingerprint(password_hash: str) -> str:
    """Binds a reset token to the current hash so it stops working once used"""
    return hashlib.sha256(password_hash.encode()).hexdigest()[:16]


class AuthService(IAuthService):
    """Authentication service implementation"""

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        jwt_service: IJwtService,
        email_service: Optional[IEmailService] = None,
        require_email_verification: Optional[bool] = None,
        client_url: Optional[str] = None,
    ):
        self.user_repo = user_repository
        self.password_hasher = password_hasher
        self.jwt_service = jwt_service
        self.email_service = email_service
        self.require_email_verification = (
            settings.REQUIRE_EMAIL_VERIFICATION if require_email_verification is None else require_email_verification
        )
        self.client_url = (client_url or settings.CLIENT_URL).rstrip("/")

    async def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        user_type: UserType = UserType.JOB_SEEKER,
    ) -> Tuple[User, str]:
        """Register a new user"""

        logger.info(f"Registering new user: {email}")

        # Validate email format
        try:
            email_vo = Email(email)
        except ValueError as e:
            raise ValidationException("email", str(e))

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException("password", f"must be at least {MIN_PASSWORD_LENGTH} characters")

        # Check if user already exists
        if await self.user_repo.exists_by_email(str(email_vo)):
            raise DuplicateResourceException("User", "email", str(email_vo))

        now = datetime.now(timezone.utc)
        try:
            user = User(
                id=uuid4(),
                email=email_vo,
                password_hash=self.password_hasher.hash_password(password),
                first_name=first_name.strip(),
                last_name=last_name.strip(),
                user_type=user_type,
                created_at=now,
                updated_at=now,
            )
        except ValueError as e:
            raise ValidationException("name", str(e))

        created_user = await self.user_repo.create(user)

        logger.info(f"User registered successfully: {email_vo} ({user_type.value})")
        await self._send_verification(created_user)

        return created_user, self.jwt_service.create_access_token(created_user.id, created_user.user_type.value)

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """Authenticate user"""

        logger.info(f"Login attempt: {email}")

        user = await self.user_repo.get_by_email(email.strip().lower())
        if not user or user.is_deleted:
            logger.warning(f"Login failed: User not found - {email}")
            raise AuthenticationException("Invalid email or password")

        if not self.password_hasher.verify_password(password, user.password_hash):
            logger.warning(f"Login failed: Invalid password - {email}")
            raise AuthenticationException("Invalid email or password")

        if not user.is_active:
            logger.warning(f"Login failed: Account disabled - {email}")
            raise AuthenticationException("Account is disabled")

        if self.require_email_verification and not user.is_email_verified:
            logger.warning(f"Login failed: E-mail not verified - {email}")
            raise AuthenticationException("Please verify your email before logging in")

        logger.info(f"User logged in successfully: {email}")

        return user, self.jwt_service.create_access_token(user.id, user.user_type.value)

    async def verify_access_token(self, token: str) -> Optional[User]:
        """Decode token and load its subject"""
        payload = self.jwt_service.verify_token(token)

        if payload.get("type") != "access":
            raise AuthenticationException("Invalid token type")

        try:
            user_id = UUID(payload["sub"])
        except (KeyError, ValueError):
            raise AuthenticationException("Invalid token subject")

        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            return None
        return user

    async def update_profile(self, user_id: UUID, changes: Dict[str, Any]) -> User:
        user = await self._get_user(user_id)

        updates = {key: value for key, value in changes.items() if key in PROFILE_FIELDS}
        if not updates:
            return user

        try:
            updated = replace(user, **updates, updated_at=datetime.now(timezone.utc))
        except ValueError as e:
            raise ValidationException("profile", str(e))

        logger.info(f"Profile updated for user {user_id}: {sorted(updates)}")
        return await self.user_repo.update(updated)

    async def change_password(self, user_id: UUID, current_password: str, new_password: str) -> None:
        user = await self._get_user(user_id)

        if not self.password_hasher.verify_password(current_password, user.password_hash):
            logger.warning(f"Password change refused for user {user_id}: wrong current password")
            raise AuthenticationException("Current password is incorrect")

        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationException("new_password", f"must be at least {MIN_PASSWORD_LENGTH} characters")

        await self.user_repo.update(
            replace(
                user,
                password_hash=self.password_hasher.hash_password(new_password),
                updated_at=datetime.now(timezone.utc),
            )
        )
        logger.info(f"Password changed for user {user_id}")

    async def request_password_reset(self, email: str) -> None:
        user = await self.user_repo.get_by_email(email.strip().lower())
        if user is None or not user.is_active:
            logger.info(f"Password reset requested for unknown account: {email}")
            return

        token = self.jwt_service.create_purpose_token(
            user.id,
            PASSWORD_RESET,
            settings.PASSWORD_RESET_EXPIRE_MINUTES,
            {"pwd": _password_fingerprint(user.password_hash)},
        )
        subject, body = messages.password_reset(f"{self.client_url}/reset-password/{token}")
        await self._send(user, "password reset e-mail", subject, body)
        logger.info(f"Password reset link issued for user {user.id}")

    async def reset_password(self, token: str, new_password: str) -> User:
        user, payload = await self._resolve_purpose_token(token, PASSWORD_RESET, INVALID_RESET_TOKEN)
        if payload.get("pwd") != _password_fingerprint(user.password_hash):
            logger.warning(f"Reused password reset token for user {user.id}")
            raise ValidationException("token", INVALID_RESET_TOKEN)

        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationException("new_password", f"must be at least {MIN_PASSWORD_LENGTH} characters")

        updated = await self.user_repo.update(
            replace(
                user,
                password_hash=self.password_hasher.hash_password(new_password),
                updated_at=datetime.now(timezone.utc),
            )
        )
        logger.info(f"Password reset for user {user.id}")
        return updated

    async def verify_email(self, token: str) -> Tuple[User, str]:
        user, _ = await self._resolve_purpose_token(token, EMAIL_VERIFICATION, INVALID_VERIFICATION_TOKEN)
        if user.is_email_verified:
            raise ValidationException("token", INVALID_VERIFICATION_TOKEN)

        now = datetime.now(timezone.utc)
        verified = await self.user_repo.update(
            replace(user, is_email_verified=True, email_verified_at=now, updated_at=now)
        )
        logger.info(f"E-mail verified for user {user.id}")

        subject, body = messages.welcome(verified.first_name)
        await self._send(verified, "welcome e-mail", subject, body)
        return verified, self.jwt_service.create_access_token(verified.id, verified.user_type.value)

    async def resend_verification(self, email: str) -> None:
        user = await self.user_repo.get_by_email(email.strip().lower())
        if user is None or not user.is_active:
            logger.info(f"Verification resend requested for unknown account: {email}")
            return
        if user.is_email_verified:
            raise ValidationException("email", "This email is already verified. You can login directly.")
        await self._send_verification(user)

    async def delete_account(self, user_id: UUID) -> None:
        user = await self._get_user(user_id)
        now = datetime.now(timezone.utc)
        await self.user_repo.update(replace(user, is_active=False, deleted_at=now, updated_at=now))
        logger.info(f"Account {user_id} deleted")

    async def ensure_admin(self, email: str, password: str) -> User:
        existing = await self.user_repo.get_by_email(email.strip().lower())
        if existing is not None:
            if not existing.is_admin():
                raise DuplicateResourceException("User", "email", email)
            return existing

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException("password", f"must be at least {MIN_PASSWORD_LENGTH} characters")

        now = datetime.now(timezone.utc)
        admin = await self.user_repo.create(
            User(
                id=uuid4(),
                email=Email(email),
                password_hash=self.password_hasher.hash_password(password),
                first_name="Site",
                last_name="Administrator",
                user_type=UserType.ADMIN,
                is_email_verified=True,
                email_verified_at=now,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info(f"Administrator account created: {admin.email}")
        return admin

    async def _resolve_purpose_token(self, token: str, purpose: str, error: str) -> Tuple[User, Dict[str, Any]]:
        try:
            payload = self.jwt_service.verify_token(token)
            user_id = UUID(payload["sub"])
        except (AuthenticationException, KeyError, ValueError):
            raise ValidationException("token", error)
        if payload.get("type") != purpose:
            raise ValidationException("token", error)

        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise ValidationException("token", error)
        return user, payload

    async def _send_verification(self, user: User) -> None:
        token = self.jwt_service.create_purpose_token(
            user.id, EMAIL_VERIFICATION, settings.EMAIL_VERIFICATION_EXPIRE_MINUTES
        )
        subject, body = messages.email_verification(user.first_name, f"{self.client_url}/verify-email/{token}")
        await self._send(user, "verification e-mail", subject, body)

    async def _send(self, user: User, operation: str, subject: str, body: str) -> None:
        if self.email_service is None:
            return
        await best_effort(operation, lambda: self.email_service.send(str(user.email), subject, body))

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("User", str(user_id))
        return user
