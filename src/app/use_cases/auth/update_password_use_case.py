import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import AuthResponse, ClientInfo, UserInfo
from .session_issuer import open_session

logger = logging.getLogger(__name__)


class UpdatePasswordUseCase:
    """
    Use case for changing a password while logged in.

    Business Rules:
    - Current password must verify (INVALID_CREDENTIALS otherwise)
    - password_changed_at is bumped; every earlier token stops working
    - All sessions are replaced by a single new one
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
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
        client: Optional[ClientInfo] = None,
    ) -> Result[AuthResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            if not self.password_hasher.verify_password(
                current_password, user.password_hash
            ):
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Password is incorrect")
                )

            user.password_hash = self.password_hasher.hash_password(new_password)
            user.password_changed_at = utcnow()
            user = await self.uow.users.update(user)

            await self.uow.sessions.delete_all_by_user_id(user.id)

            _, access_token = await open_session(
                self.uow, self.token_codec, user, client
            )

            await self.uow.commit()

            logger.info(f"User updated password: {user.email}")

            return Return.ok(
                AuthResponse(token=access_token, user=UserInfo.from_user(user))
            )
