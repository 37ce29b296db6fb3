"""
User administration router, restricted to administrators.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..application.schemas import (
    ErrorResponse,
    MessageResponse,
    RoleAssignment,
    UpdateUserRequest,
    UserDto,
)
from ..dependencies import ADMINISTRATOR, get_user_service, require_roles
from ..domain.exceptions import NotFoundError
from ..identity.user_service import UserService

router = APIRouter(
    prefix="/api/users",
    tags=["Users"],
    dependencies=[Depends(require_roles(ADMINISTRATOR))],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.get("", response_model=List[UserDto])
async def get_users(user_service: UserService = Depends(get_user_service)):
    return await user_service.get_users()


@router.get("/{user_id}", response_model=UserDto)
async def get_user(user_id: str, user_service: UserService = Depends(get_user_service)):
    user = await user_service.get_user(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


@router.patch("/{user_id}", response_model=MessageResponse)
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    user_service: UserService = Depends(get_user_service),
):
    """Apply the fields present in the body; omitted fields are left unchanged."""
    if not await user_service.update_user(user_id, request):
        raise NotFoundError("User", user_id)
    return MessageResponse(message="User updated successfully")


@router.post("/{user_id}/activate", response_model=MessageResponse)
async def activate_user(user_id: str, user_service: UserService = Depends(get_user_service)):
    if not await user_service.activate_user(user_id):
        raise NotFoundError("User", user_id)
    return MessageResponse(message="User activated")


@router.post("/{user_id}/deactivate", response_model=MessageResponse)
async def deactivate_user(user_id: str, user_service: UserService = Depends(get_user_service)):
    if not await user_service.deactivate_user(user_id):
        raise NotFoundError("User", user_id)
    return MessageResponse(message="User deactivated")


@router.get("/{user_id}/roles", response_model=List[str])
async def get_user_roles(user_id: str, user_service: UserService = Depends(get_user_service)):
    if await user_service.get_user(user_id) is None:
        raise NotFoundError("User", user_id)
    return await user_service.get_user_roles(user_id)


@router.post("/{user_id}/roles", response_model=MessageResponse)
async def assign_role(
    user_id: str,
    request: RoleAssignment,
    user_service: UserService = Depends(get_user_service),
):
    if not await user_service.assign_role(user_id, request.role_name):
        raise NotFoundError(f"User ({user_id}) or role ({request.role_name}) was not found")
    return MessageResponse(message=f"Role {request.role_name} assigned")


@router.delete("/{user_id}/roles/{role_name}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_role(
    user_id: str,
    role_name: str,
    user_service: UserService = Depends(get_user_service),
):
    if not await user_service.remove_role(user_id, role_name):
        raise NotFoundError(f"User ({user_id}) does not hold role ({role_name})")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
