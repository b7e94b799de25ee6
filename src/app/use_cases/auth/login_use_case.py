"""
Login Use Case

Checks credentials and either issues a session token or asks for a
two-factor code.
"""

import logging
from typing import Optional, Union

from src.libs.result import Error, Result, Return
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_codec import TWO_FACTOR_CHALLENGE, TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import AuthResponse, ClientInfo, TwoFactorRequiredResponse, UserInfo
from .session_issuer import open_session

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Same INVALID_CREDENTIALS error for unknown email and wrong password
    - Password hash check runs even when the email is unknown (timing)
    - Two-factor accounts get TwoFactorRequired with a short-lived challenge
      instead of a session token; VerifyTwoFactorUseCase.complete_login
      redeems the challenge together with a code
    - A passed password check resets the two-factor attempt counter
    - Creates a new session and updates user.last_login_at
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
        self, email: str, password: str, client: Optional[ClientInfo] = None
    ) -> Result[Union[AuthResponse, TwoFactorRequiredResponse]]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password
            client: Device metadata for the new session

        Returns:
            Result with AuthResponse, TwoFactorRequiredResponse, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                self.password_hasher.dummy_verify(password)
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid credentials"))

            if not self.password_hasher.verify_password(password, user.password_hash):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid credentials"))

            if user.two_factor_enabled:
                user.two_factor_failed_attempts = 0
                await self.uow.users.update(user)
                await self.uow.commit()

                logger.info(f"Two-factor code required for {user.email}")
                challenge = self.token_codec.issue_challenge(
                    user.id, TWO_FACTOR_CHALLENGE
                )
                return Return.ok(
                    TwoFactorRequiredResponse(
                        user_id=str(user.id), challenge_token=challenge
                    )
                )

            _, access_token = await open_session(
                self.uow, self.token_codec, user, client
            )

            user.last_login_at = utcnow()
            user = await self.uow.users.update(user)

            await self.uow.commit()

            logger.info(f"User logged in: {user.email}")

            return Return.ok(
                AuthResponse(token=access_token, user=UserInfo.from_user(user))
            )
