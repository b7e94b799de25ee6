from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.app.services.authorization import CurrentUser
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.assignments import (
    AssignmentCommand,
    AssignmentListResponse,
    AssignmentResponse,
    CreateAssignmentUseCase,
    DeleteAssignmentUseCase,
    GetAssignmentUseCase,
    ListAssignmentsUseCase,
    UpdateAssignmentUseCase,
)
from src.app.use_cases.auth import MessageResponse
from src.depends import get_current_user, get_unit_of_work, require_roles
from src.domain.entities import AssignmentStatus, UserRole

router = APIRouter(prefix="/assignments", tags=["Assignments"])


class CreateAssignmentRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    total_points: int = Field(100, ge=0)
    status: AssignmentStatus = AssignmentStatus.draft
    due_date: Optional[datetime] = None


class UpdateAssignmentRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    total_points: Optional[int] = Field(None, ge=0)
    status: Optional[AssignmentStatus] = None
    due_date: Optional[datetime] = None


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=AssignmentResponse
)
async def create_assignment(
    request: CreateAssignmentRequest,
    current_user: CurrentUser = Depends(
        require_roles(UserRole.lecturer, UserRole.admin)
    ),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Assignment (lecturer or admin)

    Raises:
        - 403 Forbidden: Caller is a student
    """
    command = AssignmentCommand(**request.model_dump())
    result = await CreateAssignmentUseCase(uow).execute(current_user, command)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=AssignmentListResponse)
async def list_assignments(
    created_by: Optional[UUID] = None,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListAssignmentsUseCase(uow).execute(created_by=created_by)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get(
    "/{assignment_id}", status_code=status.HTTP_200_OK, response_model=AssignmentResponse
)
async def get_assignment(
    assignment_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetAssignmentUseCase(uow).execute(assignment_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put(
    "/{assignment_id}", status_code=status.HTTP_200_OK, response_model=AssignmentResponse
)
async def update_assignment(
    assignment_id: UUID,
    request: UpdateAssignmentRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Assignment (owner or admin)

    Raises:
        - 403 Forbidden: Not the creator
        - 404 Not Found: Assignment not found
    """
    command = AssignmentCommand(**request.model_dump(exclude_unset=True))
    result = await UpdateAssignmentUseCase(uow).execute(
        current_user, assignment_id, command
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/{assignment_id}", status_code=status.HTTP_200_OK, response_model=MessageResponse
)
async def delete_assignment(
    assignment_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Delete Assignment (owner or admin)"""
    result = await DeleteAssignmentUseCase(uow).execute(current_user, assignment_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
