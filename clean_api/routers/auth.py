"""
Authentication router.

Sign in, registration, password management and the current user's profile.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..application.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    PasswordResetTokenResponse,
    RegisterRequest,
    ResetPasswordRequest,
    UserDto,
)
from ..config import settings
from ..dependencies import get_auth_service, get_current_user
from ..domain.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from ..identity.auth_service import AuthService
from ..logging_config import get_logger
from ..validators import PasswordValidator

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login", response_model=AuthResponse, summary="Sign in user")
async def login(request: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Sign in a user with email and password.

    Raises:
        UnauthorizedError: If the credentials are rejected (401)
    """
    result = await auth_service.login(request.email, request.password)
    if result is None:
        raise UnauthorizedError("Invalid email or password")
    return result


@router.post("/register", response_model=AuthResponse, summary="Register new user")
async def register(request: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Register a new user and sign them in.

    Raises:
        BadRequestError: If the email is taken or the password is too weak (400)
    """
    result = await auth_service.register(request)
    if result is None:
        raise BadRequestError(
            "Registration failed. The email may already be registered or the password "
            f"does not meet the requirements. {PasswordValidator.get_requirements_message()}"
        )
    return result


@router.post("/change-password", response_model=MessageResponse, summary="Change password")
async def change_password(
    request: ChangePasswordRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    if not await auth_service.change_password(current_user["user_id"], request):
        raise BadRequestError("Password change failed")
    return MessageResponse(message="Password changed successfully")


@router.post(
    "/forgot-password",
    response_model=PasswordResetTokenResponse,
    response_model_exclude_none=True,
    summary="Request password reset",
)
async def forgot_password(
    request: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Issue a password reset token.

    The response is the same whether or not the email exists. The token is
    only echoed back in debug mode; otherwise it would be delivered out of band.
    """
    token = await auth_service.generate_password_reset_token(request.email)
    return PasswordResetTokenResponse(
        message="If the email is registered, a password reset token has been generated",
        token=token if settings.DEBUG else None,
    )


@router.post("/reset-password", response_model=MessageResponse, summary="Reset password")
async def reset_password(
    request: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    if not await auth_service.reset_password(request):
        raise BadRequestError("Password reset failed")
    return MessageResponse(message="Password reset successfully")


@router.post("/logout", response_model=MessageResponse, summary="Sign out user")
async def logout(
    current_user: Dict[str, Any] = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Rotate the caller's security stamp.

    Bearer tokens already issued remain valid until they expire.
    """
    if not await auth_service.logout(current_user["user_id"]):
        raise UnauthorizedError("User no longer exists")
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserDto, summary="Current user")
async def me(
    current_user: Dict[str, Any] = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    user = await auth_service.get_current_user(current_user["user_id"])
    if user is None:
        raise NotFoundError("User", current_user["user_id"])
    return user
