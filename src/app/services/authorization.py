"""
Authorization Guard

Resolves the caller's identity from a session token on every request and
provides the role / ownership predicates used by every resource endpoint.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import to_epoch_seconds
from src.domain.entities import User, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller, detached from the database session"""

    id: UUID
    username: str
    email: str
    role: UserRole
    session_id: UUID

    @classmethod
    def from_user(cls, user: User, session_id: UUID) -> "CurrentUser":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=UserRole(user.role),
            session_id=session_id,
        )


def _unauthenticated(message: str = "Not authorized to access this route") -> Result:
    return Return.err(Error("UNAUTHENTICATED", message))


class AuthorizationGuard:
    """
    Business Rules:
    - Token must be present, correctly signed and unexpired
    - Subject must still exist
    - Token must not predate the subject's last password change
    - Session the token was issued with must not have been revoked
    """

    def __init__(self, uow: UnitOfWork, token_codec: TokenCodec):
        self.uow = uow
        self.token_codec = token_codec

    async def authenticate(self, token: Optional[str]) -> Result[CurrentUser]:
        if not token:
            logger.warning("No authentication token provided")
            return _unauthenticated()

        claims = self.token_codec.verify(token)
        if claims is None or claims.session_id is None:
            return _unauthenticated()

        async with self.uow:
            user = await self.uow.users.get_by_id(claims.subject_id)
            if user is None:
                logger.warning(f"Token subject no longer exists: {claims.subject_id}")
                return _unauthenticated("User no longer exists")

            if changed_password_after(user, claims.issued_at):
                logger.warning(f"Token predates password change for user {user.id}")
                return _unauthenticated(
                    "User recently changed password. Please log in again"
                )

            session = await self.uow.sessions.get_by_id(claims.session_id)
            if session is None or session.user_id != user.id:
                return _unauthenticated("Session has been revoked. Please log in again")

            return Return.ok(CurrentUser.from_user(user, session.id))


def changed_password_after(user: User, issued_at: int) -> bool:
    """True if the password changed after a token issued at `issued_at` (epoch seconds)"""
    if user.password_changed_at is None:
        return False
    return to_epoch_seconds(user.password_changed_at) > issued_at


def require_role(user: CurrentUser, *allowed_roles: UserRole) -> Result[None]:
    """Pass iff the caller's role is one of allowed_roles"""
    if user.role not in allowed_roles:
        logger.warning(f"User {user.id} with role {user.role.value} denied")
        return Return.err(
            Error(
                "FORBIDDEN",
                f"User role {user.role.value} is not authorized to access this route",
            )
        )
    return Return.ok(None)


def require_owner_or_role(
    user: CurrentUser, owner_id: UUID, *bypass_roles: UserRole
) -> Result[None]:
    """Pass iff the caller owns the resource or holds one of bypass_roles"""
    if user.id == owner_id or user.role in bypass_roles:
        return Return.ok(None)
    logger.warning(f"User {user.id} attempted to modify resource owned by {owner_id}")
    return Return.err(
        Error("FORBIDDEN", "You can only access or modify your own resources")
    )
