from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.api.utils.cookies import set_auth_cookie
from src.app.services.authorization import CurrentUser
from src.app.services.token_codec import TokenCodec
from src.app.services.two_factor import TwoFactorProvider
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import AuthResponse, ClientInfo
from src.app.use_cases.two_factor import (
    DisableTwoFactorUseCase,
    GenerateTwoFactorSecretUseCase,
    TwoFactorSetupResponse,
    TwoFactorStatusResponse,
    VerifyTwoFactorUseCase,
)
from src.depends import (
    get_client_info,
    get_config,
    get_current_user,
    get_token_codec,
    get_two_factor_provider,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth/2fa", tags=["Two-Factor"])


class CodeRequest(BaseModel):
    code: str = Field(..., min_length=6, max_length=6, description="6-digit TOTP code")


class TwoFactorLoginRequest(CodeRequest):
    challenge_token: str = Field(
        ..., min_length=1, description="challenge_token returned by /auth/login"
    )


@router.post(
    "/generate", status_code=status.HTTP_200_OK, response_model=TwoFactorSetupResponse
)
async def generate_secret(
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    two_factor: TwoFactorProvider = Depends(get_two_factor_provider),
):
    """
    Start two-factor setup

    Returns the secret, an otpauth:// URL and a QR code. 2FA stays off until
    a code is confirmed at /auth/2fa/verify.
    """
    result = await GenerateTwoFactorSecretUseCase(uow, two_factor).execute(
        current_user.id
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/verify", status_code=status.HTTP_200_OK, response_model=TwoFactorStatusResponse
)
async def verify_setup(
    request: CodeRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    two_factor: TwoFactorProvider = Depends(get_two_factor_provider),
    token_codec: TokenCodec = Depends(get_token_codec),
):
    """
    Confirm two-factor setup with a code from the authenticator app

    Raises:
        - 400 Bad Request: Invalid code or no pending secret
    """
    result = await VerifyTwoFactorUseCase(uow, two_factor, token_codec).execute(
        current_user.id, request.code
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=AuthResponse,
)
async def login_with_code(
    request: TwoFactorLoginRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    two_factor: TwoFactorProvider = Depends(get_two_factor_provider),
    token_codec: TokenCodec = Depends(get_token_codec),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_config),
):
    """
    Second login step for accounts with two-factor authentication

    Raises:
        - 400 Bad Request: Invalid code or 2FA not set up
        - 401 Unauthorized: Missing, expired or exhausted login challenge
    """
    result = await VerifyTwoFactorUseCase(
        uow, two_factor, token_codec, max_attempts=config.TWO_FACTOR_MAX_ATTEMPTS
    ).complete_login(request.challenge_token, request.code, client)
    if result.is_err():
        raise_for_error(result.error)

    set_auth_cookie(response, config, result.value.token)
    return result.value


@router.post(
    "/disable", status_code=status.HTTP_200_OK, response_model=TwoFactorStatusResponse
)
async def disable(
    request: CodeRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    two_factor: TwoFactorProvider = Depends(get_two_factor_provider),
):
    """Turn two-factor authentication off; requires a current code"""
    result = await DisableTwoFactorUseCase(uow, two_factor).execute(
        current_user.id, request.code
    )
    if result.is_err():
        raise_for_error(result.error)
    return result.value
