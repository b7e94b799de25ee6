from typing import List, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.api.routes.auth import RegisterRequest
from src.app.services.authorization import CurrentUser
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import RegisterCommand, UserResponse
from src.app.use_cases.users import (
    BulkCreateUsersResponse,
    BulkCreateUsersUseCase,
    BulkDeleteUsersResponse,
    BulkDeleteUsersUseCase,
    BulkUpdateRolesResponse,
    BulkUpdateRolesUseCase,
    ChangeRoleUseCase,
    DeleteAccountResponse,
    DeleteAccountUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    RoleStatsResponse,
    RoleUpdate,
    SearchUsersUseCase,
    UserListResponse,
    UserRoleStatsUseCase,
)
from src.depends import get_password_hasher, get_unit_of_work, require_roles
from src.domain.entities import UserRole

router = APIRouter(prefix="/users", tags=["User"])

require_admin = require_roles(UserRole.admin)

BATCH_LIMIT = 100


class ChangeRoleRequest(BaseModel):
    role: str = Field(..., description="New role: student, lecturer or admin")


class NewUserRequest(RegisterRequest):
    """One account in a bulk create; admins may provision any role"""

    role: Literal["student", "lecturer", "admin"] = Field("student")


class BulkCreateRequest(BaseModel):
    users: List[NewUserRequest] = Field(..., min_length=1, max_length=BATCH_LIMIT)


class BulkRoleRequest(BaseModel):
    updates: List[RoleUpdate] = Field(..., min_length=1, max_length=BATCH_LIMIT)


class BulkDeleteRequest(BaseModel):
    user_ids: List[UUID] = Field(..., min_length=1, max_length=BATCH_LIMIT)


@router.get("", status_code=status.HTTP_200_OK, response_model=UserListResponse)
async def list_users(
    role: Optional[str] = None,
    current_user: CurrentUser = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListUsersUseCase(uow).execute(role=role)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/search", status_code=status.HTTP_200_OK, response_model=UserListResponse)
async def search_users(
    q: str = "",
    role: Optional[str] = None,
    current_user: CurrentUser = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Search users by username or email

    Raises:
        - 422 Unprocessable Entity: Empty query or unknown role
    """
    result = await SearchUsersUseCase(uow).execute(q, role=role)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/stats/roles", status_code=status.HTTP_200_OK, response_model=RoleStatsResponse)
async def role_stats(
    current_user: CurrentUser = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await UserRoleStatsUseCase(uow).execute()
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/bulk", status_code=status.HTTP_201_CREATED, response_model=BulkCreateUsersResponse
)
async def bulk_create_users(
    request: BulkCreateRequest,
    current_user: CurrentUser = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Create several accounts at once

    Raises:
        - 400 Bad Request: Email or username taken, or repeated in the batch
    """
    commands = [
        RegisterCommand(
            username=user.username,
            email=user.email,
            password=user.password,
            role=UserRole(user.role),
        )
        for user in request.users
    ]
    result = await BulkCreateUsersUseCase(uow, password_hasher).execute(
        current_user, commands
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put(
    "/bulk/role", status_code=status.HTTP_200_OK, response_model=BulkUpdateRolesResponse
)
async def bulk_update_roles(
    request: BulkRoleRequest,
    current_user: CurrentUser = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change the role of several users

    Raises:
        - 403 Forbidden: The batch includes the caller
        - 422 Unprocessable Entity: Unknown role
    """
    result = await BulkUpdateRolesUseCase(uow).execute(current_user, request.updates)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/bulk", status_code=status.HTTP_200_OK, response_model=BulkDeleteUsersResponse
)
async def bulk_delete_users(
    request: BulkDeleteRequest,
    current_user: CurrentUser = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Delete several users with their sessions and assignments"""
    result = await BulkDeleteUsersUseCase(uow).execute(current_user, request.user_ids)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserResponse)
async def get_user(
    user_id: UUID,
    current_user: CurrentUser = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetUserUseCase(uow).execute(user_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/{user_id}/role", status_code=status.HTTP_200_OK, response_model=UserResponse)
async def change_role(
    user_id: UUID,
    request: ChangeRoleRequest,
    current_user: CurrentUser = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change User Role

    Raises:
        - 403 Forbidden: Not an admin, or changing own role
        - 404 Not Found: User not found
        - 422 Unprocessable Entity: Unknown role
    """
    result = await ChangeRoleUseCase(uow).execute(current_user, user_id, request.role)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/{user_id}", status_code=status.HTTP_200_OK, response_model=DeleteAccountResponse
)
async def delete_user(
    user_id: UUID,
    current_user: CurrentUser = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Delete a user with their sessions and assignments"""
    result = await DeleteAccountUseCase(uow).execute(user_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
