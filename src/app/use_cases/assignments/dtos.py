from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.domain.entities import Assignment, AssignmentStatus


class AssignmentCommand(BaseModel):
    """Validated create/update payload; None fields are left unchanged on update"""

    title: Optional[str] = None
    description: Optional[str] = None
    total_points: Optional[int] = None
    status: Optional[AssignmentStatus] = None
    due_date: Optional[datetime] = None


class AssignmentInfo(BaseModel):
    id: str
    title: str
    description: str
    total_points: int
    status: str
    due_date: Optional[datetime] = None
    created_by: str
    created_at: datetime

    @classmethod
    def from_assignment(cls, assignment: Assignment) -> "AssignmentInfo":
        return cls(
            id=str(assignment.id),
            title=assignment.title,
            description=assignment.description,
            total_points=assignment.total_points,
            status=AssignmentStatus(assignment.status).value,
            due_date=assignment.due_date,
            created_by=str(assignment.created_by),
            created_at=assignment.created_at,
        )


class AssignmentResponse(BaseModel):
    success: bool = True
    assignment: AssignmentInfo


class AssignmentListResponse(BaseModel):
    success: bool = True
    count: int
    assignments: List[AssignmentInfo]
