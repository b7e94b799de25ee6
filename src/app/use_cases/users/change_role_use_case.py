"""
Change User Role Use Case

Handles an administrator changing another account's platform role.
"""

import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.authorization import CurrentUser, require_role
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserInfo, UserResponse
from src.domain.entities import UserRole

logger = logging.getLogger(__name__)


class ChangeRoleUseCase:
    """
    Use case for changing a user's role.

    Business Rules:
    - Only admins can change roles
    - An admin cannot change their own role (no self-demotion lock-out)
    - Target user must exist
    - Role must be one of student, lecturer, admin
    - Existing tokens stay valid; the new role applies on the next request
      because the guard reloads the user every time
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, current_user: CurrentUser, target_user_id: UUID, new_role: str
    ) -> Result[UserResponse]:
        """
        Execute change role use case.

        Args:
            current_user: Admin making the change
            target_user_id: User whose role is being changed
            new_role: New role to assign (student/lecturer/admin)

        Returns:
            Result with the updated user, or Error
        """
        allowed = require_role(current_user, UserRole.admin)
        if allowed.is_err():
            return Return.err(allowed.error)

        try:
            role = UserRole(new_role)
        except ValueError:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    f"Invalid role: {new_role}. Must be one of: student, lecturer, admin",
                )
            )

        if target_user_id == current_user.id:
            return Return.err(
                Error("FORBIDDEN", "Administrators cannot change their own role")
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            old_role = UserRole(user.role).value
            user.role = role
            user = await self.uow.users.update(user)

            await self.uow.commit()

            logger.info(
                f"Role of {user.email} changed from {old_role} to {role.value} "
                f"by {current_user.id}"
            )

            return Return.ok(UserResponse(user=UserInfo.from_user(user)))
