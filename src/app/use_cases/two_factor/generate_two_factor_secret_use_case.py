import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.two_factor import TwoFactorProvider
from src.app.services.unit_of_work import UnitOfWork
from .dtos import TwoFactorSetupResponse

logger = logging.getLogger(__name__)


class GenerateTwoFactorSecretUseCase:
    """
    Start two-factor setup.

    Business Rules:
    - Stores a new secret with two_factor_enabled=False until a code is verified
    - Calling again before verification replaces the pending secret
    - Refused while 2FA is enabled; it has to be disabled (with a code) first
    """

    def __init__(self, uow: UnitOfWork, two_factor: TwoFactorProvider):
        self.uow = uow
        self.two_factor = two_factor

    async def execute(self, user_id: UUID) -> Result[TwoFactorSetupResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            if user.two_factor_enabled:
                return Return.err(
                    Error(
                        "TWO_FACTOR_ALREADY_ENABLED",
                        "Two-factor authentication is already enabled",
                    )
                )

            secret = self.two_factor.generate_secret()
            user.two_factor_secret = secret
            user.two_factor_enabled = False
            user = await self.uow.users.update(user)

            await self.uow.commit()

            otpauth_url = self.two_factor.provisioning_uri(secret, user.email)

            logger.info(f"Two-factor setup started for {user.email}")

            return Return.ok(
                TwoFactorSetupResponse(
                    secret=secret,
                    otpauth_url=otpauth_url,
                    qr_code=self.two_factor.qr_code_base64(otpauth_url),
                )
            )
