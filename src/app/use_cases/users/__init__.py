"""
User Management Use Cases

Sessions, account deletion and admin user administration.
"""

from .manage_sessions_use_case import ManageSessionsUseCase
from .delete_account_use_case import DeleteAccountUseCase
from .change_role_use_case import ChangeRoleUseCase
from .query_users_use_case import (
    GetUserUseCase,
    ListUsersUseCase,
    SearchUsersUseCase,
    UserRoleStatsUseCase,
)
from .bulk_users_use_case import (
    BulkCreateUsersUseCase,
    BulkDeleteUsersUseCase,
    BulkUpdateRolesUseCase,
)
from .dtos import (
    BulkCreateUsersResponse,
    BulkDeleteUsersResponse,
    BulkUpdateRolesResponse,
    DeleteAccountResponse,
    RevokeSessionsResponse,
    RoleStatsResponse,
    RoleUpdate,
    SessionInfo,
    SessionListResponse,
    UserListResponse,
)

__all__ = [
    # Use Cases
    "ManageSessionsUseCase",
    "DeleteAccountUseCase",
    "ChangeRoleUseCase",
    "ListUsersUseCase",
    "GetUserUseCase",
    "SearchUsersUseCase",
    "UserRoleStatsUseCase",
    "BulkCreateUsersUseCase",
    "BulkUpdateRolesUseCase",
    "BulkDeleteUsersUseCase",
    # DTOs
    "BulkCreateUsersResponse",
    "BulkDeleteUsersResponse",
    "BulkUpdateRolesResponse",
    "DeleteAccountResponse",
    "RevokeSessionsResponse",
    "RoleStatsResponse",
    "RoleUpdate",
    "SessionInfo",
    "SessionListResponse",
    "UserListResponse",
]
