"""
Authentication Endpoints
/api/v1/auth/* routes
"""
from fastapi import APIRouter, Depends, Request, status

from core.config import settings
from domain.entities import User
from application.services.auth.interfaces import IAuthService
from presentation.api.v1.container import get_auth_service
from presentation.api.v1.dependencies import get_current_user, limiter
from presentation.api.v1.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    EmailRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
    UserResponse,
    VerifyEmailRequest,
)
from presentation.api.v1.schemas.common import ApiResponse, ok


router = APIRouter()

AUTH_LIMIT_MESSAGE = "Too many authentication attempts, please try again later."
RESET_REQUESTED = "If an account with that email exists, a password reset link has been sent."
VERIFICATION_REQUESTED = (
    "If an account with that email exists and is not yet verified, a verification email has been sent."
)


@router.post("/register", response_model=ApiResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
@limiter.shared_limit(settings.RATE_LIMIT_AUTH, scope="auth", error_message=AUTH_LIMIT_MESSAGE)
async def register(
    request: Request,
    body: RegisterRequest,
    auth_service: IAuthService = Depends(get_auth_service),
):
    user, token = await auth_service.register(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        user_type=body.user_type,
    )
    return ok(AuthResponse(user=UserResponse.from_entity(user), token=token), "User registered successfully")


@router.post("/login", response_model=ApiResponse[AuthResponse])
@limiter.shared_limit(settings.RATE_LIMIT_AUTH, scope="auth", error_message=AUTH_LIMIT_MESSAGE)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: IAuthService = Depends(get_auth_service),
):
    user, token = await auth_service.login(body.email, body.password)
    return ok(AuthResponse(user=UserResponse.from_entity(user), token=token), "Login successful")


@router.post("/forgot-password", response_model=ApiResponse[None])
@limiter.shared_limit(settings.RATE_LIMIT_AUTH, scope="auth", error_message=AUTH_LIMIT_MESSAGE)
async def forgot_password(
    request: Request,
    body: EmailRequest,
    auth_service: IAuthService = Depends(get_auth_service),
):
    """Same answer whether or not the account exists"""
    await auth_service.request_password_reset(body.email)
    return ok(message=RESET_REQUESTED)


@router.post("/reset-password", response_model=ApiResponse[None])
async def reset_password(
    body: ResetPasswordRequest,
    auth_service: IAuthService = Depends(get_auth_service),
):
    await auth_service.reset_password(body.token, body.new_password)
    return ok(message="Password reset successful")


@router.post("/verify-email", response_model=ApiResponse[AuthResponse])
async def verify_email(
    body: VerifyEmailRequest,
    auth_service: IAuthService = Depends(get_auth_service),
):
    user, token = await auth_service.verify_email(body.token)
    return ok(AuthResponse(user=UserResponse.from_entity(user), token=token), "Email verified successfully")


@router.post("/resend-verification", response_model=ApiResponse[None])
@limiter.limit(
    settings.RATE_LIMIT_VERIFICATION_EMAIL,
    error_message="Too many verification email requests. Please try again after 15 minutes.",
)
async def resend_verification(
    request: Request,
    body: EmailRequest,
    auth_service: IAuthService = Depends(get_auth_service),
):
    await auth_service.resend_verification(body.email)
    return ok(message=VERIFICATION_REQUESTED)


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(current_user: User = Depends(get_current_user)):
    return ok(UserResponse.from_entity(current_user))


@router.put("/update-profile", response_model=ApiResponse[UserResponse])
async def update_profile(
    body: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    auth_service: IAuthService = Depends(get_auth_service),
):
    user = await auth_service.update_profile(current_user.id, body.model_dump(exclude_unset=True))
    return ok(UserResponse.from_entity(user), "Profile updated successfully")


@router.put("/change-password", response_model=ApiResponse[None])
async def change_password(
    body: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    auth_service: IAuthService = Depends(get_auth_service),
):
    await auth_service.change_password(current_user.id, body.current_password, body.new_password)
    return ok(message="Password changed successfully")


@router.post("/logout", response_model=ApiResponse[None])
async def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy"""
    return ok(message="Logged out successfully")


@router.delete("/delete-account", response_model=ApiResponse[None])
async def delete_account(
    current_user: User = Depends(get_current_user),
    auth_service: IAuthService = Depends(get_auth_service),
):
    await auth_service.delete_account(current_user.id)
    return ok(message="Account deleted successfully")
