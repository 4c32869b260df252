from unittest.mock import AsyncMock

import pytest

from src.api.utils.jwt import hash_token_id
from src.app.use_cases.auth import LoginUseCase
from src.domain.entities import UserRole

PASSWORD = "SecurePass123!"


@pytest.fixture
def uow(mock_uow):
    mock_uow.users.get_by_email = AsyncMock()
    mock_uow.users.update = AsyncMock()
    mock_uow.sessions.create = AsyncMock()
    return mock_uow


@pytest.mark.asyncio
async def test_successful_login(uow, tokens, make_user):
    user = make_user(role=UserRole.admin)
    uow.users.get_by_email.return_value = user

    result = await LoginUseCase(uow, tokens).execute(
        " User@Union.org ", PASSWORD, ip_address="10.0.0.1", user_agent="pytest"
    )

    assert result.is_ok()
    data = result.value
    assert data.user.role == "admin"
    assert data.expires_in == 900

    access = tokens.verify_access(data.access_token)
    refresh = tokens.verify_refresh(data.refresh_token)
    assert access.user_id == refresh.user_id == user.id
    assert str(access.session_id) == data.session_id

    uow.users.get_by_email.assert_called_once_with("user@union.org")
    session = uow.sessions.create.call_args.args[0]
    assert session.user_id == user.id
    assert session.token_hash == hash_token_id(refresh.token_id)
    assert session.ip_address == "10.0.0.1"
    assert user.last_login_at is not None
    uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_login_wrong_password(uow, tokens, make_user):
    uow.users.get_by_email.return_value = make_user()

    result = await LoginUseCase(uow, tokens).execute("user@union.org", "WrongPassword!")

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    uow.sessions.create.assert_not_called()
    uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_login_unknown_email_same_error(uow, tokens):
    uow.users.get_by_email.return_value = None

    result = await LoginUseCase(uow, tokens).execute("ghost@union.org", PASSWORD)

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    assert result.error.message == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_inactive_user_same_error(uow, tokens, make_user):
    uow.users.get_by_email.return_value = make_user(is_active=False)

    result = await LoginUseCase(uow, tokens).execute("user@union.org", PASSWORD)

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    uow.sessions.create.assert_not_called()
