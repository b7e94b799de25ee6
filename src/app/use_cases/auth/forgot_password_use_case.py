"""
Forgot Password Use Case

Generates a password reset token and emails it to the account owner.
"""

import logging
from datetime import timedelta

from src.libs.result import Result, Return
from src.app.services.notification_sink import NotificationSink
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import MessageResponse
from .emails import password_reset_email

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "If the email exists, a password reset link has been sent"


class ForgotPasswordUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Token is 20 random bytes (hex); only its SHA-256 hash is stored
    - Token expires after reset_token_ttl (10 minutes by default)
    - A new request replaces any previous token
    - No email enumeration (same response for known and unknown emails)
    - If the email cannot be delivered, the stored hash and expiry are
      cleared and the failure is logged; the caller still gets the generic
      message, otherwise a delivery error would reveal the account
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: PasswordHasher,
        notification_sink: NotificationSink,
        frontend_url: str,
        reset_token_ttl: timedelta,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.notification_sink = notification_sink
        self.frontend_url = frontend_url
        self.reset_token_ttl = reset_token_ttl

    async def execute(self, email: str) -> Result[MessageResponse]:
        """
        Execute forgot password use case.

        Args:
            email: User's email address

        Returns:
            Result with the generic message
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                return Return.ok(MessageResponse(message=GENERIC_MESSAGE))

            reset_token = self.password_hasher.generate_token()
            user.reset_password_token_hash = self.password_hasher.hash_token(reset_token)
            user.reset_password_expires_at = utcnow() + self.reset_token_ttl
            user = await self.uow.users.update(user)

            subject, html = password_reset_email(
                self.frontend_url,
                reset_token,
                int(self.reset_token_ttl.total_seconds() // 60),
            )
            if not await self.notification_sink.send(user.email, subject, html):
                logger.error(f"Password reset email could not be sent to {user.email}")
                user.reset_password_token_hash = None
                user.reset_password_expires_at = None
                await self.uow.users.update(user)
            else:
                logger.info(f"Password reset requested: {user.email}")

            await self.uow.commit()

            return Return.ok(MessageResponse(message=GENERIC_MESSAGE))
