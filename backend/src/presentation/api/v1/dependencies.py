"""
FastAPI Dependencies
Current user resolution, role guards and the request rate limiter
"""
from typing import Callable, Optional

from fastapi import Depends, HTTPException, status, Header
from slowapi import Limiter
from slowapi.util import get_remote_address

from domain.entities import User
from domain.enums import UserType
from application.services.auth.interfaces import IAuthService
from core.config import settings
from core.exceptions import AuthenticationException
from .container import get_auth_service


# Per client address; routes without their own limit get the default one
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract token from "Bearer <token>", None when the header is malformed"""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


async def get_current_user(
    authorization: Optional[str] = Header(None),
    auth_service: IAuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            ...
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = _bearer_token(authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user = await auth_service.verify_access_token(token)
    except AuthenticationException:
        user = None

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(
    authorization: Optional[str] = Header(None),
    auth_service: IAuthService = Depends(get_auth_service)
) -> Optional[User]:
    """Resolve the caller when a valid token is sent; anonymous otherwise"""
    token = _bearer_token(authorization)
    if token is None:
        return None
    try:
        return await auth_service.verify_access_token(token)
    except AuthenticationException:
        return None


def require_role(*roles: UserType) -> Callable:
    """
    Restrict an endpoint to the given account types

    Usage:
        @router.post("/jobs")
        async def create(user: User = Depends(require_role(UserType.EMPLOYER))):
            ...
    """
    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.user_type not in roles:
            allowed = ", ".join(role.value for role in roles)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"This action requires one of the roles: {allowed}",
            )
        return current_user

    return checker
