import logging

from src.libs.result import Error, Result, Return
from src.app.services.authorization import CurrentUser, require_role
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Assignment, AssignmentStatus, UserRole
from .dtos import AssignmentCommand, AssignmentInfo, AssignmentResponse

logger = logging.getLogger(__name__)


class CreateAssignmentUseCase:
    """Lecturers and admins create assignments; the creator becomes the owner."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, current_user: CurrentUser, command: AssignmentCommand
    ) -> Result[AssignmentResponse]:
        allowed = require_role(current_user, UserRole.lecturer, UserRole.admin)
        if allowed.is_err():
            return Return.err(allowed.error)

        if not command.title or not command.description:
            return Return.err(
                Error("VALIDATION_FAILED", "Title and description are required")
            )

        async with self.uow:
            assignment = Assignment(
                title=command.title,
                description=command.description,
                total_points=command.total_points if command.total_points is not None else 100,
                status=command.status or AssignmentStatus.draft,
                due_date=command.due_date,
                created_by=current_user.id,
            )
            assignment = await self.uow.assignments.create(assignment)

            await self.uow.commit()

            logger.info(f"Assignment {assignment.id} created by {current_user.id}")

            return Return.ok(
                AssignmentResponse(assignment=AssignmentInfo.from_assignment(assignment))
            )
