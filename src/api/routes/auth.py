from datetime import timedelta
from typing import Literal, Optional, Union

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr, Field, field_validator

from src.api.error import raise_for_error
from src.api.utils.cookies import clear_auth_cookie, set_auth_cookie
from src.app.services.authorization import CurrentUser
from src.app.services.notification_sink import NotificationSink
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_codec import TokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AuthResponse,
    ClientInfo,
    ConfirmEmailUseCase,
    ForgotPasswordUseCase,
    LoginUseCase,
    MessageResponse,
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    ResendConfirmationUseCase,
    ResetPasswordUseCase,
    TwoFactorRequiredResponse,
    UpdateDetailsUseCase,
    UpdatePasswordUseCase,
    UserResponse,
)
from src.app.use_cases.users import (
    DeleteAccountResponse,
    DeleteAccountUseCase,
    GetUserUseCase,
    ManageSessionsUseCase,
)
from src.depends import (
    get_client_info,
    get_config,
    get_current_user,
    get_notification_sink,
    get_password_hasher,
    get_token_codec,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def validate_password(value: str) -> str:
    if not any(ch.isdigit() for ch in value):
        raise ValueError("Password must contain a number")
    return value


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    Admin accounts cannot be self-registered; admins promote users via /users.
    """

    username: str = Field(..., min_length=3, max_length=30, description="Unique username")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ..., min_length=6, max_length=72, description="Password (min 6 chars, one digit)"
    )
    role: Literal["student", "lecturer"] = Field("student", description="Requested role")

    @field_validator("password")
    @classmethod
    def password_has_digit(cls, value: str) -> str:
        return validate_password(value)


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse
)
async def register(
    request: RegisterRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_codec: TokenCodec = Depends(get_token_codec),
    notification_sink: NotificationSink = Depends(get_notification_sink),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_config),
):
    """
    Register a new account

    Creates an unconfirmed account, emails a confirmation link and logs the
    user straight in.

    Raises:
        - 400 Bad Request: Email or username already taken
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    command = RegisterCommand(
        username=request.username,
        email=request.email,
        password=request.password,
        role=request.role,
    )

    use_case = RegisterUseCase(
        uow, password_hasher, token_codec, notification_sink, config.FRONTEND_URL
    )
    result = await use_case.execute(command, client)

    if result.is_err():
        raise_for_error(result.error)

    set_auth_cookie(response, config, result.value.token)
    return result.value


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=Union[AuthResponse, TwoFactorRequiredResponse],
)
async def login(
    request: LoginRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_codec: TokenCodec = Depends(get_token_codec),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_config),
):
    """
    User Login

    Returns a session token, or `two_factor_required` with a short-lived
    `challenge_token` when the account has two-factor authentication enabled
    (send it with a code to /auth/2fa/login).

    Raises:
        - 401 Unauthorized: Invalid credentials
    """
    use_case = LoginUseCase(uow, password_hasher, token_codec)
    result = await use_case.execute(request.email, request.password, client)

    if result.is_err():
        raise_for_error(result.error)

    if isinstance(result.value, AuthResponse):
        set_auth_cookie(response, config, result.value.token)
    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def logout(
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    """Revoke the caller's current session and clear the auth cookie"""
    result = await ManageSessionsUseCase(uow).revoke_session(
        current_user, current_user.session_id
    )
    if result.is_err():
        raise_for_error(result.error)

    clear_auth_cookie(response, config)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserResponse)
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetUserUseCase(uow).execute(current_user.id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


class UpdateDetailsRequest(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=30)
    email: Optional[EmailStr] = None


@router.put("/me", status_code=status.HTTP_200_OK, response_model=UserResponse)
async def update_details(
    request: UpdateDetailsRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update username and/or email

    Raises:
        - 400 Bad Request: Email or username already taken
    """
    use_case = UpdateDetailsUseCase(uow)
    result = await use_case.execute(
        current_user.id, username=request.username, email=request.email
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


class UpdatePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(
        ..., min_length=6, max_length=72, description="New password (min 6 chars, one digit)"
    )

    @field_validator("new_password")
    @classmethod
    def password_has_digit(cls, value: str) -> str:
        return validate_password(value)


@router.put("/password", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def update_password(
    request: UpdatePasswordRequest,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_codec: TokenCodec = Depends(get_token_codec),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_config),
):
    """
    Change password while logged in

    Every other session is ended; the response carries a fresh token.

    Raises:
        - 401 Unauthorized: Current password is incorrect
    """
    use_case = UpdatePasswordUseCase(uow, password_hasher, token_codec)
    result = await use_case.execute(
        current_user.id, request.current_password, request.new_password, client
    )
    if result.is_err():
        raise_for_error(result.error)

    set_auth_cookie(response, config, result.value.token)
    return result.value


class EmailRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address")


@router.post(
    "/forgot-password", status_code=status.HTTP_200_OK, response_model=MessageResponse
)
async def forgot_password(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    notification_sink: NotificationSink = Depends(get_notification_sink),
    config=Depends(get_config),
):
    """
    Request Password Reset

    Security:
        - No email enumeration (same response for valid/invalid emails)

    Raises:
        - 500 Internal Server Error: Email could not be sent
    """
    use_case = ForgotPasswordUseCase(
        uow,
        password_hasher,
        notification_sink,
        config.FRONTEND_URL,
        timedelta(minutes=config.RESET_TOKEN_EXPIRE_MINUTES),
    )
    result = await use_case.execute(request.email)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


class ResetPasswordRequest(BaseModel):
    password: str = Field(
        ..., min_length=6, max_length=72, description="New password (min 6 chars, one digit)"
    )

    @field_validator("password")
    @classmethod
    def password_has_digit(cls, value: str) -> str:
        return validate_password(value)


@router.put(
    "/reset-password/{token}", status_code=status.HTTP_200_OK, response_model=AuthResponse
)
async def reset_password(
    token: str,
    request: ResetPasswordRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_codec: TokenCodec = Depends(get_token_codec),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_config),
):
    """
    Complete Password Reset

    Raises:
        - 400 Bad Request: Invalid, expired or already used token
    """
    use_case = ResetPasswordUseCase(uow, password_hasher, token_codec)
    result = await use_case.execute(token, request.password, client)
    if result.is_err():
        raise_for_error(result.error)

    set_auth_cookie(response, config, result.value.token)
    return result.value


@router.get(
    "/confirm-email/{token}", status_code=status.HTTP_200_OK, response_model=MessageResponse
)
async def confirm_email(
    token: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Email Confirmation

    Raises:
        - 400 Bad Request: Invalid or already used token
    """
    result = await ConfirmEmailUseCase(uow, password_hasher).execute(token)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/resend-confirmation", status_code=status.HTTP_200_OK, response_model=MessageResponse
)
async def resend_confirmation(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    notification_sink: NotificationSink = Depends(get_notification_sink),
    config=Depends(get_config),
):
    """Resend the confirmation link; same answer whatever the email"""
    use_case = ResendConfirmationUseCase(
        uow, password_hasher, notification_sink, config.FRONTEND_URL
    )
    result = await use_case.execute(request.email)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/account", status_code=status.HTTP_200_OK, response_model=DeleteAccountResponse
)
async def delete_account(
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    """Delete the caller's account with its sessions and assignments"""
    result = await DeleteAccountUseCase(uow).execute(current_user.id)
    if result.is_err():
        raise_for_error(result.error)

    clear_auth_cookie(response, config)
    return result.value
