"""
Delete Account Use Case

Removes a user together with everything they own, in one transaction.
"""

import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import DeleteAccountResponse

logger = logging.getLogger(__name__)


class DeleteAccountUseCase:
    """
    Business Rules:
    - Deletes the user's assignments, then sessions, then the user
    - All or nothing: any failure rolls the whole cascade back
    - Used for self-service deletion and by admins
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[DeleteAccountResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            assignments_deleted = await self.uow.assignments.delete_all_by_owner(user.id)
            sessions_deleted = await self.uow.sessions.delete_all_by_user_id(user.id)
            email = user.email
            await self.uow.users.delete(user)

            await self.uow.commit()

            logger.info(f"User deleted: {email}")

            return Return.ok(
                DeleteAccountResponse(
                    message="User deleted successfully",
                    assignments_deleted=assignments_deleted,
                    sessions_deleted=sessions_deleted,
                )
            )
