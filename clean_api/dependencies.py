"""
Dependency functions for the catalog API.

Provides bearer token validation, role checks and the request-scoped unit of
work that handlers and services run inside.
"""

from typing import Any, AsyncGenerator, Callable, Dict, Optional

from fastapi import Depends, Header

from .application import Mediator
from .database import db_manager
from .domain.exceptions import ForbiddenError, UnauthorizedError
from .identity.auth_service import AuthService
from .identity.user_service import UserService
from .logging_config import get_logger
from .persistence.unit_of_work import UnitOfWork
from .security import decode_access_token, get_token_from_header

logger = get_logger(__name__)

ADMINISTRATOR = "Administrator"
MANAGER = "Manager"


def _user_from_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    return {
        "user_id": payload["sub"],
        "email": payload.get("email", ""),
        "name": payload.get("name", ""),
        "roles": list(roles),
    }


async def get_optional_user(
    authorization: Optional[str] = Header(None),
) -> Optional[Dict[str, Any]]:
    """
    Dependency returning the caller when a valid bearer token is present.

    Returns:
        Dictionary with user_id, email, name and roles, or None for anonymous
        callers and invalid tokens
    """
    token = get_token_from_header(authorization)
    if token is None:
        return None

    payload = decode_access_token(token)
    if payload is None:
        return None

    return _user_from_payload(payload)


async def get_current_user(
    user: Optional[Dict[str, Any]] = Depends(get_optional_user),
) -> Dict[str, Any]:
    """
    Dependency that requires an authenticated caller.

    Raises:
        UnauthorizedError: If the token is missing, malformed, expired or invalid
    """
    if user is None:
        raise UnauthorizedError("Invalid or missing bearer token")
    return user


def require_roles(*roles: str) -> Callable:
    """
    Build a dependency that admits callers holding any of ``roles``.

    Raises:
        UnauthorizedError: If the caller is not authenticated
        ForbiddenError: If the caller holds none of the roles
    """

    async def checker(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if not set(roles).intersection(user["roles"]):
            logger.warning("Access denied", user_id=user["user_id"], required_roles=list(roles))
            raise ForbiddenError(roles=list(roles))
        return user

    return checker


async def get_unit_of_work(
    user: Optional[Dict[str, Any]] = Depends(get_optional_user),
) -> AsyncGenerator[UnitOfWork, None]:
    """
    Yield a unit of work for the request.

    Commits when the endpoint returns normally and rolls back when it raises.
    The authenticated user id, if any, is recorded as the audit actor.
    """
    actor = user["user_id"] if user else None
    async with db_manager.unit_of_work(actor) as uow:
        yield uow


def get_mediator(uow: UnitOfWork = Depends(get_unit_of_work)) -> Mediator:
    return Mediator(uow)


def get_auth_service(uow: UnitOfWork = Depends(get_unit_of_work)) -> AuthService:
    return AuthService(uow.session)


def get_user_service(uow: UnitOfWork = Depends(get_unit_of_work)) -> UserService:
    return UserService(uow.session)
