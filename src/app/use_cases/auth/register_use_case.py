import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from src.libs.result import Error, Result, Return
from src.app.services.notification_sink import NotificationSink
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User
from .dtos import ClientInfo, RegisterCommand, RegisterResponse, UserInfo
from .emails import confirmation_email
from .session_issuer import open_session

logger = logging.getLogger(__name__)


def duplicate_identity_error(exc: IntegrityError) -> Error:
    """Map a unique-index violation on users to the matching duplicate error"""
    if "username" in str(exc.orig).lower():
        return Error("DUPLICATE_USERNAME", "Username is already taken")
    return Error("DUPLICATE_EMAIL", "User already exists")


class RegisterUseCase:
    """
    Register Use Case

    Command/Response Pattern:
    - Input: RegisterCommand (validated business intent)
    - Output: Result[RegisterResponse] (structured response)

    Business Logic:
    1. Reject duplicate email / username
    2. Hash password with bcrypt
    3. Create User with email_confirmed=False
    4. Generate confirmation token, persist only its SHA-256 hash
    5. Email the raw token; if delivery fails, drop the stored hash so a
       token nobody received can never be consumed
    6. Open a session and issue a token bound to it
    7. Commit transaction atomically
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: PasswordHasher,
        token_codec: TokenCodec,
        notification_sink: NotificationSink,
        frontend_url: str,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.token_codec = token_codec
        self.notification_sink = notification_sink
        self.frontend_url = frontend_url

    async def execute(
        self, command: RegisterCommand, client: Optional[ClientInfo] = None
    ) -> Result[RegisterResponse]:
        """
        Execute register use case

        Args:
            command: RegisterCommand with validated username, email, password, role
            client: Device metadata for the new session

        Returns:
            Result[RegisterResponse] with token and public user fields,
            or Error(DUPLICATE_EMAIL / DUPLICATE_USERNAME)
        """
        async with self.uow:
            if await self.uow.users.get_by_email(command.email):
                return Return.err(Error("DUPLICATE_EMAIL", "User already exists"))

            if await self.uow.users.get_by_username(command.username):
                return Return.err(
                    Error("DUPLICATE_USERNAME", "Username is already taken")
                )

            confirmation_token = self.password_hasher.generate_token()

            user = User(
                username=command.username,
                email=command.email,
                role=command.role,
                password_hash=self.password_hasher.hash_password(command.password),
                email_confirmed=False,
                confirm_email_token_hash=self.password_hasher.hash_token(
                    confirmation_token
                ),
            )
            try:
                user = await self.uow.users.create(user)
            except IntegrityError as exc:
                # Lost a race with a concurrent registration
                logger.warning(f"Registration conflict for {command.email}")
                return Return.err(duplicate_identity_error(exc))

            subject, html = confirmation_email(self.frontend_url, confirmation_token)
            email_sent = await self.notification_sink.send(user.email, subject, html)
            if not email_sent:
                logger.warning(f"Confirmation email could not be sent to {user.email}")
                user.confirm_email_token_hash = None
                user = await self.uow.users.update(user)

            _, access_token = await open_session(
                self.uow, self.token_codec, user, client
            )

            await self.uow.commit()

            logger.info(f"New user registered: {user.email}")

            return Return.ok(
                RegisterResponse(
                    token=access_token,
                    user=UserInfo.from_user(user),
                    confirmation_email_sent=email_sent,
                )
            )
