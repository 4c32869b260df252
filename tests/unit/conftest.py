from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from config import ApplicationConfig
from src.api.utils.jwt import TokenService
from src.app.services.passwords import hash_password
from src.domain.entities import User, UserRole

ApplicationConfig.BCRYPT_ROUNDS = 4

PASSWORD = "SecurePass123!"


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def tokens():
    return TokenService(
        access_secret="unit-access-secret",
        refresh_secret="unit-refresh-secret",
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=7),
    )


@pytest.fixture
def make_user():
    def _make(role=UserRole.user, is_active=True, email="user@union.org", password=PASSWORD):
        return User(
            email=email,
            password_hash=hash_password(password),
            name="Test User",
            role=role,
            is_active=is_active,
        )

    return _make
