from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserInfo, UserResponse
from src.domain.entities import UserRole
from .dtos import RoleStatsResponse, UserListResponse


class ListUsersUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, role: Optional[str] = None) -> Result[UserListResponse]:
        role_filter = None
        if role is not None:
            try:
                role_filter = UserRole(role)
            except ValueError:
                return Return.err(Error("VALIDATION_FAILED", f"Invalid role: {role}"))

        async with self.uow:
            users = await self.uow.users.list(role=role_filter)
            return Return.ok(
                UserListResponse(
                    count=len(users), users=[UserInfo.from_user(u) for u in users]
                )
            )


class GetUserUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[UserResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("NOT_FOUND", "User not found"))
            return Return.ok(UserResponse(user=UserInfo.from_user(user)))


class SearchUsersUseCase:
    """Substring search over username and email, optionally within one role"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, query: str, role: Optional[str] = None
    ) -> Result[UserListResponse]:
        query = (query or "").strip()
        if not query:
            return Return.err(Error("VALIDATION_FAILED", "Search query is required"))

        role_filter = None
        if role is not None:
            try:
                role_filter = UserRole(role)
            except ValueError:
                return Return.err(Error("VALIDATION_FAILED", f"Invalid role: {role}"))

        async with self.uow:
            users = await self.uow.users.search(query, role=role_filter)
            return Return.ok(
                UserListResponse(
                    count=len(users), users=[UserInfo.from_user(u) for u in users]
                )
            )


class UserRoleStatsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[RoleStatsResponse]:
        async with self.uow:
            counts = await self.uow.users.count_by_role()
            roles = {role.value: counts.get(role, 0) for role in UserRole}
            return Return.ok(RoleStatsResponse(total=sum(roles.values()), roles=roles))
