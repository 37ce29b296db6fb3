"""
User administration.

Lists and edits accounts, toggles activation and manages role membership.
Mutations are staged on the caller's session; the unit of work commits them.
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..application.schemas import UpdateUserRequest, UserDto
from ..domain.exceptions import BadRequestError
from ..logging_config import get_logger
from ..validators import normalize_email, sanitize_name
from .models import Role, User

logger = get_logger(__name__)


def to_user_dto(user: User) -> UserDto:
    """Project a user row onto its response model."""
    return UserDto(
        id=user.id,
        email=user.email,
        user_name=user.user_name,
        first_name=user.first_name or "",
        last_name=user.last_name or "",
        full_name=user.full_name,
        is_active=user.is_active,
        roles=user.role_names,
        last_login_at=user.last_login_at,
        created_at=user.created_at,
    )


class UserService:
    """Administrative operations over user accounts."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _find(self, user_id: str) -> Optional[User]:
        return await self._session.get(User, user_id)

    async def _find_role(self, role_name: str) -> Optional[Role]:
        result = await self._session.execute(
            select(Role).where(func.lower(Role.name) == role_name.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_users(self) -> List[UserDto]:
        result = await self._session.execute(select(User).order_by(User.email))
        return [to_user_dto(user) for user in result.scalars().all()]

    async def get_user(self, user_id: str) -> Optional[UserDto]:
        user = await self._find(user_id)
        return to_user_dto(user) if user else None

    async def update_user(self, user_id: str, request: UpdateUserRequest) -> bool:
        """
        Apply the non-null fields of ``request`` to a user.

        Returns:
            False if the user does not exist

        Raises:
            BadRequestError: If the new email belongs to another account
        """
        user = await self._find(user_id)
        if user is None:
            return False

        if request.first_name is not None:
            user.first_name = sanitize_name(request.first_name)
        if request.last_name is not None:
            user.last_name = sanitize_name(request.last_name)
        if request.is_active is not None:
            user.is_active = request.is_active

        if request.email is not None:
            email = normalize_email(request.email)
            if email != user.email:
                result = await self._session.execute(
                    select(func.count()).select_from(User).where(User.email == email)
                )
                if result.scalar_one() > 0:
                    raise BadRequestError("Email is already in use")
                user.email = email
                user.user_name = email

        await self._session.flush()
        logger.info("User updated", user_id=user_id)
        return True

    async def _set_active(self, user_id: str, active: bool) -> bool:
        user = await self._find(user_id)
        if user is None:
            return False
        user.is_active = active
        await self._session.flush()
        logger.info("User activation changed", user_id=user_id, is_active=active)
        return True

    async def activate_user(self, user_id: str) -> bool:
        return await self._set_active(user_id, True)

    async def deactivate_user(self, user_id: str) -> bool:
        return await self._set_active(user_id, False)

    async def assign_role(self, user_id: str, role_name: str) -> bool:
        """
        Add a user to a role.

        Returns:
            False if the user or role does not exist, True otherwise
            (including when the user already holds the role)
        """
        user = await self._find(user_id)
        role = await self._find_role(role_name)
        if user is None or role is None:
            return False

        if role not in user.roles:
            user.roles.append(role)
            await self._session.flush()
            logger.info("Role assigned", user_id=user_id, role=role.name)
        return True

    async def remove_role(self, user_id: str, role_name: str) -> bool:
        """
        Remove a user from a role.

        Returns:
            False if the user or role does not exist or the user does not hold it
        """
        user = await self._find(user_id)
        role = await self._find_role(role_name)
        if user is None or role is None or role not in user.roles:
            return False

        user.roles.remove(role)
        await self._session.flush()
        logger.info("Role removed", user_id=user_id, role=role.name)
        return True

    async def get_user_roles(self, user_id: str) -> List[str]:
        user = await self._find(user_id)
        return user.role_names if user else []

    async def is_user_in_role(self, user_id: str, role_name: str) -> bool:
        wanted = role_name.strip().lower()
        return any(name.lower() == wanted for name in await self.get_user_roles(user_id))
