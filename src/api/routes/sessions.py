from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.app.services.authorization import CurrentUser
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users import (
    ManageSessionsUseCase,
    RevokeSessionsResponse,
    SessionListResponse,
)
from src.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/sessions", tags=["Sessions"])


class RevokeAllSessionsRequest(BaseModel):
    """Request to revoke all sessions for a user"""

    user_id: Optional[UUID] = Field(
        None, description="User whose sessions will be revoked (defaults to the caller)"
    )


@router.get("", status_code=status.HTTP_200_OK, response_model=SessionListResponse)
async def list_sessions(
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """List the caller's active sessions, flagging the current one"""
    result = await ManageSessionsUseCase(uow).list_sessions(current_user)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/revoke-all",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionsResponse,
)
async def revoke_all_sessions(
    request: Optional[RevokeAllSessionsRequest] = None,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke All Sessions

    Ends every session of a user, including the caller's current one when
    revoking their own.

    Authorization:
    - Users can revoke their own sessions
    - Admins can revoke any user's sessions

    Raises:
        - 403 Forbidden: Insufficient permissions
        - 404 Not Found: User not found
    """
    target_user_id = request.user_id if request else None

    result = await ManageSessionsUseCase(uow).revoke_all_sessions(
        current_user, target_user_id
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionsResponse,
)
async def revoke_specific_session(
    session_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke Specific Session

    Authorization:
    - Users can revoke their own sessions
    - Admins can revoke any user's sessions

    Raises:
        - 403 Forbidden: Session belongs to someone else
        - 404 Not Found: Session not found
    """
    result = await ManageSessionsUseCase(uow).revoke_session(current_user, session_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
