from datetime import timedelta
from uuid import uuid4

import pytest

from src.adapter.services.jose_token_codec import JoseTokenCodec
from src.app.services.authorization import (
    AuthorizationGuard,
    changed_password_after,
    require_owner_or_role,
    require_role,
)
from src.domain.base import to_epoch_seconds, utcnow
from src.domain.entities import Session, UserRole


@pytest.fixture
def user_with_session(mock_uow, make_user):
    user = make_user()
    session = Session(user_id=user.id)
    mock_uow.users.get_by_id.return_value = user
    mock_uow.sessions.get_by_id.return_value = session
    return user, session


@pytest.mark.asyncio
async def test_valid_token_resolves_current_user(mock_uow, token_codec, user_with_session):
    # Arrange
    user, session = user_with_session
    token = token_codec.issue(user.id, session_id=session.id)

    # Act
    result = await AuthorizationGuard(mock_uow, token_codec).authenticate(token)

    # Assert
    assert result.is_ok()
    current = result.value
    assert current.id == user.id
    assert current.role == UserRole.student
    assert current.session_id == session.id


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "not.a.jwt"])
async def test_missing_or_malformed_token(mock_uow, token_codec, token):
    result = await AuthorizationGuard(mock_uow, token_codec).authenticate(token)

    assert result.is_err()
    assert result.error.code == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_token_signed_with_other_secret(mock_uow, token_codec, user_with_session):
    user, session = user_with_session
    forged = JoseTokenCodec("other-secret", timedelta(hours=1)).issue(
        user.id, session_id=session.id
    )

    result = await AuthorizationGuard(mock_uow, token_codec).authenticate(forged)

    assert result.is_err()
    assert result.error.code == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_expired_token(mock_uow, user_with_session):
    user, session = user_with_session
    codec = JoseTokenCodec("unit-test-secret", timedelta(minutes=5))
    token = codec.issue(
        user.id, issued_at=utcnow() - timedelta(minutes=10), session_id=session.id
    )

    result = await AuthorizationGuard(mock_uow, codec).authenticate(token)

    assert result.is_err()
    assert result.error.code == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_deleted_user(mock_uow, token_codec):
    token = token_codec.issue(uuid4(), session_id=uuid4())

    result = await AuthorizationGuard(mock_uow, token_codec).authenticate(token)

    assert result.is_err()
    assert result.error.message == "User no longer exists"


@pytest.mark.asyncio
async def test_token_before_password_change(mock_uow, token_codec, user_with_session):
    """Tokens issued before the last password change are rejected"""
    user, session = user_with_session
    issued = utcnow() - timedelta(minutes=1)
    token = token_codec.issue(user.id, issued_at=issued, session_id=session.id)
    user.password_changed_at = utcnow()

    result = await AuthorizationGuard(mock_uow, token_codec).authenticate(token)

    assert result.is_err()
    assert result.error.code == "UNAUTHENTICATED"
    assert result.error.message == "User recently changed password. Please log in again"


@pytest.mark.asyncio
async def test_token_issued_same_second_as_password_change(
    mock_uow, token_codec, user_with_session
):
    """The fresh token returned by a password change must work immediately"""
    user, session = user_with_session
    now = utcnow()
    user.password_changed_at = now
    token = token_codec.issue(user.id, issued_at=now, session_id=session.id)

    result = await AuthorizationGuard(mock_uow, token_codec).authenticate(token)

    assert result.is_ok()


@pytest.mark.asyncio
async def test_revoked_session(mock_uow, token_codec, user_with_session):
    user, session = user_with_session
    token = token_codec.issue(user.id, session_id=session.id)
    mock_uow.sessions.get_by_id.return_value = None

    result = await AuthorizationGuard(mock_uow, token_codec).authenticate(token)

    assert result.is_err()
    assert result.error.message == "Session has been revoked. Please log in again"


@pytest.mark.asyncio
async def test_token_without_session_claim(mock_uow, token_codec, user_with_session):
    user, _ = user_with_session
    token = token_codec.issue(user.id)

    result = await AuthorizationGuard(mock_uow, token_codec).authenticate(token)

    assert result.is_err()
    assert result.error.code == "UNAUTHENTICATED"


def test_changed_password_after(make_user):
    user = make_user()
    assert changed_password_after(user, 0) is False

    user.password_changed_at = utcnow()
    iat = to_epoch_seconds(user.password_changed_at)
    assert changed_password_after(user, iat - 1) is True
    assert changed_password_after(user, iat) is False


def test_require_role(make_user, as_current_user):
    student = as_current_user(make_user())

    assert require_role(student, UserRole.student).is_ok()
    denied = require_role(student, UserRole.lecturer, UserRole.admin)
    assert denied.is_err()
    assert denied.error.code == "FORBIDDEN"
    assert denied.error.message == "User role student is not authorized to access this route"


def test_require_owner_or_role(make_user, as_current_user):
    student = as_current_user(make_user())
    admin = as_current_user(make_user(role=UserRole.admin))
    other_owner = uuid4()

    assert require_owner_or_role(student, student.id, UserRole.admin).is_ok()
    assert require_owner_or_role(admin, other_owner, UserRole.admin).is_ok()
    denied = require_owner_or_role(student, other_owner, UserRole.admin)
    assert denied.is_err()
    assert denied.error.code == "FORBIDDEN"
