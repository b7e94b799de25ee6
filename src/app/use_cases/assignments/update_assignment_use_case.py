import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.authorization import CurrentUser, require_owner_or_role
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import UserRole
from .dtos import AssignmentCommand, AssignmentInfo, AssignmentResponse

logger = logging.getLogger(__name__)


class UpdateAssignmentUseCase:
    """Only the creator or an admin may update an assignment."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, current_user: CurrentUser, assignment_id: UUID, command: AssignmentCommand
    ) -> Result[AssignmentResponse]:
        async with self.uow:
            assignment = await self.uow.assignments.get_by_id(assignment_id)
            if assignment is None:
                return Return.err(Error("NOT_FOUND", "Assignment not found"))

            allowed = require_owner_or_role(
                current_user, assignment.created_by, UserRole.admin
            )
            if allowed.is_err():
                return Return.err(allowed.error)

            for field, value in command.model_dump(exclude_none=True).items():
                setattr(assignment, field, value)
            assignment.updated_at = utcnow()
            assignment = await self.uow.assignments.update(assignment)

            await self.uow.commit()

            logger.info(f"Assignment {assignment.id} updated by {current_user.id}")

            return Return.ok(
                AssignmentResponse(assignment=AssignmentInfo.from_assignment(assignment))
            )
