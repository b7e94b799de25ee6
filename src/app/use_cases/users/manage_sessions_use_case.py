"""
Manage Sessions Use Case

Lists and revokes session records. Revoking a session makes every token
issued with it fail authentication.
"""

import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.authorization import CurrentUser, require_owner_or_role
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import UserRole
from .dtos import RevokeSessionsResponse, SessionInfo, SessionListResponse

logger = logging.getLogger(__name__)


class ManageSessionsUseCase:
    """
    Use case for listing and revoking user sessions.

    Business Rules:
    - Users can list and revoke their own sessions
    - Admins can revoke any user's sessions
    - Three operations: list, revoke one, revoke all
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def list_sessions(self, current_user: CurrentUser) -> Result[SessionListResponse]:
        """List the caller's sessions, newest first, flagging the current one."""
        async with self.uow:
            sessions = await self.uow.sessions.get_by_user_id(current_user.id)
            return Return.ok(
                SessionListResponse(
                    sessions=[
                        SessionInfo.from_session(s, current_user.session_id)
                        for s in sessions
                    ]
                )
            )

    async def revoke_session(
        self, current_user: CurrentUser, session_id: UUID
    ) -> Result[RevokeSessionsResponse]:
        """
        Revoke a specific session by ID.

        Args:
            current_user: Caller
            session_id: Session to revoke

        Returns:
            Result with revoked count, or Error(NOT_FOUND / FORBIDDEN)
        """
        async with self.uow:
            session = await self.uow.sessions.get_by_id(session_id)
            if session is None:
                return Return.err(Error("NOT_FOUND", "Session not found"))

            allowed = require_owner_or_role(current_user, session.user_id, UserRole.admin)
            if allowed.is_err():
                return Return.err(allowed.error)

            deleted = await self.uow.sessions.delete_by_id(session_id)

            await self.uow.commit()

            logger.info(f"Session {session_id} revoked by user {current_user.id}")

            return Return.ok(
                RevokeSessionsResponse(
                    message="Session revoked successfully",
                    revoked_count=1 if deleted else 0,
                )
            )

    async def revoke_all_sessions(
        self, current_user: CurrentUser, target_user_id: Optional[UUID] = None
    ) -> Result[RevokeSessionsResponse]:
        """
        Revoke all sessions for a user (the caller by default).

        Returns:
            Result with count of revoked sessions, or Error(FORBIDDEN / NOT_FOUND)
        """
        target_user_id = target_user_id or current_user.id

        async with self.uow:
            allowed = require_owner_or_role(current_user, target_user_id, UserRole.admin)
            if allowed.is_err():
                return Return.err(allowed.error)

            target_user = await self.uow.users.get_by_id(target_user_id)
            if target_user is None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            count = await self.uow.sessions.delete_all_by_user_id(target_user_id)

            await self.uow.commit()

            logger.info(
                f"{count} session(s) of user {target_user_id} revoked by {current_user.id}"
            )

            return Return.ok(
                RevokeSessionsResponse(
                    message=f"Successfully revoked {count} session(s)",
                    revoked_count=count,
                )
            )
