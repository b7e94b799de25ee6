"""
Reset Password Use Case

Sets a new password using a single-use reset token.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import AuthResponse, ClientInfo, UserInfo
from .session_issuer import open_session

logger = logging.getLogger(__name__)


class ResetPasswordUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - Token is validated by hashing and comparing with the stored hash
    - Token must still be inside its reset window
    - Token fields are cleared by a conditional update, so of two racing
      resets with the same token only one succeeds
    - password_changed_at is bumped, invalidating earlier tokens
    - All existing sessions are removed and a fresh one is opened
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: PasswordHasher,
        token_codec: TokenCodec,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.token_codec = token_codec

    async def execute(
        self, token: str, new_password: str, client: Optional[ClientInfo] = None
    ) -> Result[AuthResponse]:
        """
        Execute reset password use case.

        Args:
            token: Password reset token (plain text from email)
            new_password: New password to set
            client: Device metadata for the new session

        Returns:
            Result with a fresh token, or Error(INVALID_TOKEN)
        """
        async with self.uow:
            token_hash = self.password_hasher.hash_token(token)
            now = utcnow()

            user = await self.uow.users.get_by_reset_token_hash(token_hash, now)
            if user is None:
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired reset token")
                )

            if not await self.uow.users.consume_reset_token(user.id, token_hash, now):
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired reset token")
                )

            user.reset_password_token_hash = None
            user.reset_password_expires_at = None
            user.password_hash = self.password_hasher.hash_password(new_password)
            user.password_changed_at = now
            user = await self.uow.users.update(user)

            revoked_count = await self.uow.sessions.delete_all_by_user_id(user.id)

            _, access_token = await open_session(
                self.uow, self.token_codec, user, client
            )

            await self.uow.commit()

            logger.info(
                f"User reset password: {user.email} ({revoked_count} session(s) revoked)"
            )

            return Return.ok(
                AuthResponse(token=access_token, user=UserInfo.from_user(user))
            )
