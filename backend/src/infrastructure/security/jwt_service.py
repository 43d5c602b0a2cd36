"""
JWT Service Implementation
Signed access tokens carrying the user id and role, plus single-purpose tokens
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from jose import jwt, JWTError
from loguru import logger

from core.config import settings
from core.exceptions import AuthenticationException
from application.services.auth.interfaces import IJwtService


class JwtService(IJwtService):
    """JWT service using a shared signing secret"""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        self.secret_key = secret_key or settings.JWT_SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expire_minutes = expire_minutes or settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

        if settings.ENVIRONMENT == "production" and self.secret_key == "your-secret-key-change-in-production":
            logger.warning("JWT_SECRET_KEY is still the default value. Set a real secret in production!")

    def create_access_token(self, user_id: UUID, role: str) -> str:
        """Create access token"""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "role": role,
            "type": "access",
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def create_purpose_token(
        self,
        user_id: UUID,
        purpose: str,
        expire_minutes: int,
        claims: Optional[Dict[str, Any]] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **(claims or {}),
            "sub": str(user_id),
            "type": purpose,
            "iat": now,
            "exp": now + timedelta(minutes=expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """Verify and decode token"""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"JWT verification failed: {str(e)}")
            raise AuthenticationException("Invalid or expired token")
