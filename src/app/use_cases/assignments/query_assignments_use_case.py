from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import AssignmentInfo, AssignmentListResponse, AssignmentResponse


class ListAssignmentsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, created_by: Optional[UUID] = None) -> Result[AssignmentListResponse]:
        async with self.uow:
            assignments = await self.uow.assignments.list(created_by=created_by)
            return Return.ok(
                AssignmentListResponse(
                    count=len(assignments),
                    assignments=[AssignmentInfo.from_assignment(a) for a in assignments],
                )
            )


class GetAssignmentUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, assignment_id: UUID) -> Result[AssignmentResponse]:
        async with self.uow:
            assignment = await self.uow.assignments.get_by_id(assignment_id)
            if assignment is None:
                return Return.err(Error("NOT_FOUND", "Assignment not found"))
            return Return.ok(
                AssignmentResponse(assignment=AssignmentInfo.from_assignment(assignment))
            )
