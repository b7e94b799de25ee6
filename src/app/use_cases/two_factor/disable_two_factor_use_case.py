import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.two_factor import TwoFactorProvider
from src.app.services.unit_of_work import UnitOfWork
from .dtos import TwoFactorStatusResponse

logger = logging.getLogger(__name__)


class DisableTwoFactorUseCase:
    """
    Turn two-factor authentication off.

    Requires a valid current code, so a stolen session token alone cannot
    strip the second factor.
    """

    def __init__(self, uow: UnitOfWork, two_factor: TwoFactorProvider):
        self.uow = uow
        self.two_factor = two_factor

    async def execute(self, user_id: UUID, code: str) -> Result[TwoFactorStatusResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            if not user.two_factor_secret:
                return Return.err(
                    Error(
                        "TWO_FACTOR_NOT_SET_UP",
                        "Two-factor authentication has not been set up",
                    )
                )

            if not self.two_factor.verify(user.two_factor_secret, code):
                return Return.err(Error("INVALID_TOKEN", "Invalid two-factor code"))

            user.two_factor_secret = None
            user.two_factor_enabled = False
            await self.uow.users.update(user)

            await self.uow.commit()

            logger.info(f"Two-factor authentication disabled for {user.email}")

            return Return.ok(TwoFactorStatusResponse(two_factor_enabled=False))
