from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import raise_for_error
from src.app.services.authorization import AuthorizationGuard, CurrentUser, require_role
from src.app.services.notification_sink import NotificationSink
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_codec import TokenCodec
from src.app.services.two_factor import TwoFactorProvider
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import ClientInfo
from src.domain.entities import UserRole

security = HTTPBearer(auto_error=False)


def get_config(request: Request):
    return request.app.state.config


async def get_unit_of_work(request: Request):
    async with request.app.state.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_notification_sink(request: Request) -> NotificationSink:
    return request.app.state.notification_sink


def get_two_factor_provider(request: Request) -> TwoFactorProvider:
    return request.app.state.two_factor


def get_client_info(request: Request) -> ClientInfo:
    return ClientInfo(
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
    )


def extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    """Bearer header first, then the auth cookie"""
    if credentials is not None and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return request.cookies.get(request.app.state.config.AUTH_COOKIE_NAME)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: TokenCodec = Depends(get_token_codec),
) -> CurrentUser:
    """
    Dependency resolving the authenticated caller.

    Returns:
        CurrentUser for a valid, unrevoked token

    Raises:
        ClientError: 401 UNAUTHENTICATED for a missing, invalid, expired,
        revoked or pre-password-change token
    """
    guard = AuthorizationGuard(uow, token_codec)
    result = await guard.authenticate(extract_token(request, credentials))
    if result.is_err():
        raise_for_error(result.error)
    return result.value


def require_roles(*roles: UserRole):
    """Dependency factory: authenticated caller holding one of `roles`"""

    async def dependency(
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        result = require_role(current_user, *roles)
        if result.is_err():
            raise_for_error(result.error)
        return current_user

    return dependency
