"""
Confirm Email Use Case

Marks an account's email as confirmed via a single-use token.
"""

import logging

from src.libs.result import Error, Result, Return
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from .dtos import MessageResponse

logger = logging.getLogger(__name__)


class ConfirmEmailUseCase:
    """
    Use case for email confirmation.

    Business Rules:
    - Raw token is hashed with SHA-256 and matched against unconfirmed users
    - Sets email_confirmed = True and clears the hash in one conditional update
    - A second use of the same token fails with INVALID_TOKEN
    """

    def __init__(self, uow: UnitOfWork, password_hasher: PasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(self, token: str) -> Result[MessageResponse]:
        """
        Execute email confirmation use case.

        Args:
            token: Confirmation token from the email link

        Returns:
            Result with confirmation message, or Error(INVALID_TOKEN)
        """
        async with self.uow:
            token_hash = self.password_hasher.hash_token(token)

            user = await self.uow.users.get_by_confirmation_token_hash(token_hash)
            if user is None:
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired confirmation token")
                )

            # Lost the race against a concurrent confirmation
            if not await self.uow.users.consume_confirmation_token(user.id, token_hash):
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired confirmation token")
                )

            await self.uow.commit()

            logger.info(f"Email confirmed: {user.email}")

            return Return.ok(MessageResponse(message="Email confirmed successfully"))
