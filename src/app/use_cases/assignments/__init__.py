"""
Assignment Use Cases

Coursework CRUD guarded by role and ownership checks.
"""

from .create_assignment_use_case import CreateAssignmentUseCase
from .update_assignment_use_case import UpdateAssignmentUseCase
from .delete_assignment_use_case import DeleteAssignmentUseCase
from .query_assignments_use_case import GetAssignmentUseCase, ListAssignmentsUseCase
from .dtos import (
    AssignmentCommand,
    AssignmentInfo,
    AssignmentListResponse,
    AssignmentResponse,
)

__all__ = [
    # Use Cases
    "CreateAssignmentUseCase",
    "UpdateAssignmentUseCase",
    "DeleteAssignmentUseCase",
    "GetAssignmentUseCase",
    "ListAssignmentsUseCase",
    # DTOs
    "AssignmentCommand",
    "AssignmentInfo",
    "AssignmentListResponse",
    "AssignmentResponse",
]
