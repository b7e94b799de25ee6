"""
Resend Confirmation Email Use Case

Issues a fresh confirmation token for an unconfirmed account.
"""

import logging

from src.libs.result import Result, Return
from src.app.services.notification_sink import NotificationSink
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from .dtos import MessageResponse
from .emails import confirmation_email

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "If the email exists and is unconfirmed, a confirmation link has been sent"


class ResendConfirmationUseCase:
    """
    Use case for resending the confirmation email.

    Business Rules:
    - New token replaces the old one (old link stops working)
    - Same response for unknown, confirmed and unconfirmed emails
    - If delivery fails the new hash is cleared and the failure only logged
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: PasswordHasher,
        notification_sink: NotificationSink,
        frontend_url: str,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.notification_sink = notification_sink
        self.frontend_url = frontend_url

    async def execute(self, email: str) -> Result[MessageResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None or user.email_confirmed:
                return Return.ok(MessageResponse(message=GENERIC_MESSAGE))

            token = self.password_hasher.generate_token()
            user.confirm_email_token_hash = self.password_hasher.hash_token(token)
            user = await self.uow.users.update(user)

            subject, html = confirmation_email(self.frontend_url, token)
            if not await self.notification_sink.send(user.email, subject, html):
                logger.error(f"Confirmation email could not be sent to {user.email}")
                user.confirm_email_token_hash = None
                await self.uow.users.update(user)

            await self.uow.commit()

            return Return.ok(MessageResponse(message=GENERIC_MESSAGE))
