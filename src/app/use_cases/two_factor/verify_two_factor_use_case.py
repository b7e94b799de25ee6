"""
Verify Two-Factor Use Case

One TOTP check serving two transitions:
- setup confirmation: pending secret -> two_factor_enabled=True
- login step-up: password-checked challenge + code -> session token issued
"""

import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.authorization import changed_password_after
from src.app.services.token_codec import TWO_FACTOR_CHALLENGE, TokenCodec
from src.app.services.two_factor import TwoFactorProvider
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import AuthResponse, ClientInfo, UserInfo
from src.app.use_cases.auth.session_issuer import open_session
from src.domain.base import utcnow
from .dtos import TwoFactorStatusResponse

logger = logging.getLogger(__name__)

MAX_LOGIN_ATTEMPTS = 5


def _invalid_code() -> Result:
    return Return.err(Error("INVALID_TOKEN", "Invalid two-factor code"))


def _not_set_up() -> Result:
    return Return.err(
        Error("TWO_FACTOR_NOT_SET_UP", "Two-factor authentication has not been set up")
    )


class VerifyTwoFactorUseCase:
    """
    Business Rules:
    - Code checked against the stored secret with +/-1 step tolerance
    - Unknown user or wrong code: INVALID_TOKEN (indistinguishable)
    - No secret at all: TWO_FACTOR_NOT_SET_UP
    - execute only confirms setup and never opens a session
    - complete_login needs the challenge LoginUseCase issued after the
      password check; the challenge dies with a password change
    - At most max_attempts codes per challenge-issuing login
    """

    def __init__(
        self,
        uow: UnitOfWork,
        two_factor: TwoFactorProvider,
        token_codec: TokenCodec,
        max_attempts: int = MAX_LOGIN_ATTEMPTS,
    ):
        self.uow = uow
        self.two_factor = two_factor
        self.token_codec = token_codec
        self.max_attempts = max_attempts

    async def execute(self, user_id: UUID, code: str) -> Result[TwoFactorStatusResponse]:
        """Confirm a pending setup for an authenticated caller"""
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return _invalid_code()

            if not user.two_factor_secret:
                return _not_set_up()

            if not self.two_factor.verify(user.two_factor_secret, code):
                logger.warning(f"Invalid two-factor setup code for user {user.id}")
                return _invalid_code()

            if not user.two_factor_enabled:
                user.two_factor_enabled = True
                await self.uow.users.update(user)
                await self.uow.commit()
                logger.info(f"Two-factor authentication enabled for {user.email}")

            return Return.ok(TwoFactorStatusResponse(two_factor_enabled=True))

    async def complete_login(
        self, challenge_token: str, code: str, client: Optional[ClientInfo] = None
    ) -> Result[AuthResponse]:
        """
        Finish a login that LoginUseCase answered with TwoFactorRequired.

        Args:
            challenge_token: challenge_token from the login response
            code: Current TOTP code
            client: Device metadata for the new session

        Returns:
            Result with AuthResponse or Error
        """
        claims = self.token_codec.verify_challenge(challenge_token, TWO_FACTOR_CHALLENGE)
        if claims is None:
            return Return.err(
                Error("UNAUTHENTICATED", "Login challenge is invalid or expired")
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(claims.subject_id)
            if user is None or changed_password_after(user, claims.issued_at):
                return Return.err(
                    Error("UNAUTHENTICATED", "Login challenge is invalid or expired")
                )

            if not user.two_factor_secret or not user.two_factor_enabled:
                return _not_set_up()

            if not await self.uow.users.claim_two_factor_attempt(
                user.id, self.max_attempts
            ):
                logger.warning(f"Two-factor attempts exhausted for user {user.id}")
                return Return.err(
                    Error(
                        "UNAUTHENTICATED",
                        "Too many invalid two-factor codes. Please log in again",
                    )
                )

            if not self.two_factor.verify(user.two_factor_secret, code):
                await self.uow.commit()
                logger.warning(f"Invalid two-factor login code for user {user.id}")
                return _invalid_code()

            _, access_token = await open_session(
                self.uow, self.token_codec, user, client
            )
            user.two_factor_failed_attempts = 0
            user.last_login_at = utcnow()
            user = await self.uow.users.update(user)

            await self.uow.commit()

            logger.info(f"User logged in with two-factor code: {user.email}")

            return Return.ok(
                AuthResponse(token=access_token, user=UserInfo.from_user(user))
            )
