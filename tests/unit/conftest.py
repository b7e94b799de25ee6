from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from src.adapter.services.jose_token_codec import JoseTokenCodec


def _passthrough(entity):
    return entity


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Mock repositories
    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_username = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.list = AsyncMock(return_value=[])
    uow.users.search = AsyncMock(return_value=[])
    uow.users.count_by_role = AsyncMock(return_value={})
    uow.users.create = AsyncMock(side_effect=_passthrough)
    uow.users.update = AsyncMock(side_effect=_passthrough)
    uow.users.delete = AsyncMock()
    uow.users.get_by_confirmation_token_hash = AsyncMock(return_value=None)
    uow.users.get_by_reset_token_hash = AsyncMock(return_value=None)
    uow.users.consume_confirmation_token = AsyncMock(return_value=True)
    uow.users.consume_reset_token = AsyncMock(return_value=True)
    uow.users.claim_two_factor_attempt = AsyncMock(return_value=True)

    uow.sessions = MagicMock()
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.get_by_user_id = AsyncMock(return_value=[])
    uow.sessions.create = AsyncMock(side_effect=_passthrough)
    uow.sessions.delete_by_id = AsyncMock(return_value=True)
    uow.sessions.delete_all_by_user_id = AsyncMock(return_value=0)

    uow.assignments = MagicMock()
    uow.assignments.get_by_id = AsyncMock(return_value=None)
    uow.assignments.list = AsyncMock(return_value=[])
    uow.assignments.create = AsyncMock(side_effect=_passthrough)
    uow.assignments.update = AsyncMock(side_effect=_passthrough)
    uow.assignments.delete = AsyncMock()
    uow.assignments.delete_all_by_owner = AsyncMock(return_value=0)

    return uow


@pytest.fixture(scope="session")
def password_hasher():
    # Lowest bcrypt cost keeps the suite fast
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def token_codec():
    return JoseTokenCodec(secret="unit-test-secret", expires_in=timedelta(hours=1))


@pytest.fixture
def notification_sink():
    sink = MagicMock()
    sink.send = AsyncMock(return_value=True)
    return sink


@pytest.fixture
def make_user(password_hasher):
    """Factory for persisted-looking users with a known password"""
    from src.domain.entities import User, UserRole

    def factory(
        username="alice",
        email="alice@example.com",
        password="secret1",
        role=UserRole.student,
        **fields,
    ):
        return User(
            username=username,
            email=email,
            role=role,
            password_hash=password_hasher.hash_password(password),
            **fields,
        )

    return factory


@pytest.fixture
def as_current_user():
    """Build the guard's CurrentUser view of a user"""
    from uuid import uuid4

    from src.app.services.authorization import CurrentUser

    def factory(user, session_id=None):
        return CurrentUser.from_user(user, session_id or uuid4())

    return factory
