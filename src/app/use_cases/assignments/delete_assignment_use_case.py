import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.authorization import CurrentUser, require_owner_or_role
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import MessageResponse
from src.domain.entities import UserRole

logger = logging.getLogger(__name__)


class DeleteAssignmentUseCase:
    """Only the creator or an admin may delete an assignment."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, current_user: CurrentUser, assignment_id: UUID
    ) -> Result[MessageResponse]:
        async with self.uow:
            assignment = await self.uow.assignments.get_by_id(assignment_id)
            if assignment is None:
                return Return.err(Error("NOT_FOUND", "Assignment not found"))

            allowed = require_owner_or_role(
                current_user, assignment.created_by, UserRole.admin
            )
            if allowed.is_err():
                return Return.err(allowed.error)

            await self.uow.assignments.delete(assignment)

            await self.uow.commit()

            logger.info(f"Assignment {assignment_id} deleted by {current_user.id}")

            return Return.ok(MessageResponse(message="Assignment deleted successfully"))
