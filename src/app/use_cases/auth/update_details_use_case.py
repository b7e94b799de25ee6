import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import UserInfo, UserResponse
from .register_use_case import duplicate_identity_error

logger = logging.getLogger(__name__)


class UpdateDetailsUseCase:
    """Change the caller's username and/or email, keeping both unique."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Result[UserResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            if email is not None and email != user.email:
                if await self.uow.users.get_by_email(email):
                    return Return.err(Error("DUPLICATE_EMAIL", "Email is already in use"))
                user.email = email
                # A changed address has to be confirmed again
                user.email_confirmed = False
                user.confirm_email_token_hash = None

            if username is not None and username != user.username:
                if await self.uow.users.get_by_username(username):
                    return Return.err(
                        Error("DUPLICATE_USERNAME", "Username is already taken")
                    )
                user.username = username

            try:
                user = await self.uow.users.update(user)
            except IntegrityError as exc:
                return Return.err(duplicate_identity_error(exc))
            await self.uow.commit()

            logger.info(f"User updated details: {user.email}")

            return Return.ok(UserResponse(user=UserInfo.from_user(user)))
