"""
Authentication service.

Provides sign in, registration, password management and logout on top of the
identity tables. Failures follow the auth contract: ``None`` or ``False`` is
returned, never an exception, so callers cannot tell why a sign in failed.
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..application.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserDto,
)
from ..config import settings
from ..logging_config import get_logger
from ..metrics import track_auth_event
from ..security import (
    create_access_token,
    create_password_reset_token,
    decode_password_reset_token,
    generate_security_stamp,
    hash_password,
    verify_password,
)
from ..validators import PasswordValidator, normalize_email, sanitize_name
from .models import Role, User
from .user_service import to_user_dto

logger = get_logger(__name__)


class AuthService:
    """
    Service class for authentication operations.

    Bound to one session; changes are flushed here and committed by the
    request's unit of work.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _find_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(
            select(User).where(func.lower(User.email) == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def _find_by_id(self, user_id: str) -> Optional[User]:
        return await self._session.get(User, user_id)

    async def _default_role(self) -> Role:
        result = await self._session.execute(select(Role).where(Role.name == settings.DEFAULT_ROLE))
        role = result.scalar_one_or_none()
        if role is None:
            role = Role(name=settings.DEFAULT_ROLE, description="Standard user with limited access")
            self._session.add(role)
            logger.warning("Default role was missing and has been created", role=settings.DEFAULT_ROLE)
        return role

    def _set_password(self, user: User, password: str) -> None:
        user.password_hash = hash_password(password)
        user.security_stamp = generate_security_stamp()

    async def login(self, email: str, password: str) -> Optional[AuthResponse]:
        """
        Sign in a user with email and password.

        Args:
            email: User email, matched case-insensitively
            password: User password

        Returns:
            AuthResponse with a bearer token, or None if the credentials are
            rejected for any reason
        """
        user = await self._find_by_email(email)

        if user is None:
            logger.warning("Sign in failed - user not found", email=email)
            track_auth_event("login", success=False)
            return None

        if not user.is_active:
            logger.warning("Sign in failed - account disabled", user_id=user.id)
            track_auth_event("login", success=False)
            return None

        if not verify_password(password, user.password_hash):
            logger.warning("Sign in failed - invalid password", user_id=user.id)
            track_auth_event("login", success=False)
            return None

        user.update_last_login()
        await self._session.flush()

        roles = user.role_names
        token, expires_on = create_access_token(
            user_id=user.id,
            email=user.email,
            full_name=user.full_name,
            roles=roles,
        )

        track_auth_event("login", success=True)
        logger.info("User signed in", user_id=user.id)

        return AuthResponse(
            token=token,
            user_id=user.id,
            email=user.email,
            user_name=user.user_name,
            full_name=user.full_name,
            roles=roles,
            expires_on=expires_on,
        )

    async def register(self, request: RegisterRequest) -> Optional[AuthResponse]:
        """
        Register a new user in the default role and sign them in.

        Returns:
            AuthResponse for the new account, or None if the email is taken
            or the password does not meet the policy
        """
        email = normalize_email(request.email)

        if await self._find_by_email(email) is not None:
            logger.warning("Registration failed - email already exists", email=email)
            track_auth_event("register", success=False)
            return None

        problems = PasswordValidator.errors(request.password)
        if problems:
            logger.warning("Registration failed - weak password", email=email, problems=problems)
            track_auth_event("register", success=False)
            return None

        user = User(
            email=email,
            user_name=email,
            first_name=sanitize_name(request.first_name),
            last_name=sanitize_name(request.last_name),
            is_active=True,
        )
        self._set_password(user, request.password)
        user.roles.append(await self._default_role())

        self._session.add(user)
        await self._session.flush()

        track_auth_event("register", success=True)
        logger.info("User registered", user_id=user.id)

        return await self.login(email, request.password)

    async def change_password(self, user_id: str, request: ChangePasswordRequest) -> bool:
        user = await self._find_by_id(user_id)
        if user is None:
            track_auth_event("change_password", success=False)
            return False

        if not verify_password(request.current_password, user.password_hash):
            logger.warning("Password change failed - wrong current password", user_id=user_id)
            track_auth_event("change_password", success=False)
            return False

        if PasswordValidator.errors(request.new_password):
            logger.warning("Password change failed - weak password", user_id=user_id)
            track_auth_event("change_password", success=False)
            return False

        self._set_password(user, request.new_password)
        await self._session.flush()

        track_auth_event("change_password", success=True)
        logger.info("Password changed", user_id=user_id)
        return True

    async def generate_password_reset_token(self, email: str) -> Optional[str]:
        """
        Issue a password reset token for the account with ``email``.

        The token is bound to the user's current security stamp, so it stops
        working once the password changes or the user logs out.

        Returns:
            Encoded reset token, or None if no such user exists
        """
        user = await self._find_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email", email=email)
            return None

        if user.security_stamp is None:
            user.security_stamp = generate_security_stamp()
            await self._session.flush()

        logger.info("Password reset token issued", user_id=user.id)
        return create_password_reset_token(user.id, user.security_stamp)

    async def reset_password(self, request: ResetPasswordRequest) -> bool:
        user = await self._find_by_email(request.email)
        if user is None:
            track_auth_event("reset_password", success=False)
            return False

        payload = decode_password_reset_token(request.token)
        if (
            payload is None
            or payload.get("sub") != user.id
            or payload.get("stamp") != user.security_stamp
        ):
            logger.warning("Password reset failed - invalid token", user_id=user.id)
            track_auth_event("reset_password", success=False)
            return False

        if PasswordValidator.errors(request.new_password):
            logger.warning("Password reset failed - weak password", user_id=user.id)
            track_auth_event("reset_password", success=False)
            return False

        self._set_password(user, request.new_password)
        await self._session.flush()

        track_auth_event("reset_password", success=True)
        logger.info("Password reset", user_id=user.id)
        return True

    async def logout(self, user_id: str) -> bool:
        user = await self._find_by_id(user_id)
        if user is None:
            return False

        user.security_stamp = generate_security_stamp()
        await self._session.flush()

        track_auth_event("logout", success=True)
        logger.info("User logged out", user_id=user_id)
        return True

    async def get_current_user(self, user_id: str) -> Optional[UserDto]:
        user = await self._find_by_id(user_id)
        return to_user_dto(user) if user else None
