from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.app.use_cases.auth import AuthenticateUseCase
from src.domain.entities import UserRole


@pytest.fixture
def uow(mock_uow):
    mock_uow.users.get_by_id = AsyncMock()
    return mock_uow


@pytest.mark.asyncio
async def test_valid_token(uow, tokens, make_user):
    user = make_user(role=UserRole.moderator)
    uow.users.get_by_id.return_value = user
    pair = tokens.issue(user, uuid4())

    result = await AuthenticateUseCase(uow, tokens).execute(pair.access_token)

    assert result.is_ok()
    assert result.value.id == user.id
    assert result.value.role == "moderator"


@pytest.mark.asyncio
async def test_role_comes_from_store_not_token(uow, tokens, make_user):
    user = make_user(role=UserRole.admin)
    pair = tokens.issue(user, uuid4())
    user.role = UserRole.user
    uow.users.get_by_id.return_value = user

    result = await AuthenticateUseCase(uow, tokens).execute(pair.access_token)

    assert result.value.role == "user"


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "garbage"])
async def test_invalid_token(uow, tokens, token):
    result = await AuthenticateUseCase(uow, tokens).execute(token)

    assert result.is_err()
    assert result.error.code == "UNAUTHENTICATED"
    uow.users.get_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_missing_principal(uow, tokens, make_user):
    pair = tokens.issue(make_user(), uuid4())
    uow.users.get_by_id.return_value = None

    result = await AuthenticateUseCase(uow, tokens).execute(pair.access_token)

    assert result.error.code == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_inactive_principal(uow, tokens, make_user):
    user = make_user(is_active=False)
    uow.users.get_by_id.return_value = user
    pair = tokens.issue(user, uuid4())

    result = await AuthenticateUseCase(uow, tokens).execute(pair.access_token)

    assert result.error.code == "UNAUTHENTICATED"
