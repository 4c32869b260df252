from datetime import datetime, timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.api.utils.jwt import hash_token_id
from src.app.use_cases.auth import RefreshTokenUseCase
from src.domain.entities import Session


@pytest.fixture
def uow(mock_uow):
    mock_uow.sessions.get_by_id = AsyncMock()
    mock_uow.sessions.update = AsyncMock()
    mock_uow.sessions.revoke_by_id = AsyncMock(return_value=True)
    mock_uow.users.get_by_id = AsyncMock()
    return mock_uow


@pytest.fixture
def issued(tokens, make_user):
    """A user, its session row and the pair the session currently matches"""
    user = make_user()
    session_id = uuid4()
    pair = tokens.issue(user, session_id)
    session = Session(
        id=session_id,
        user_id=user.id,
        token_hash=hash_token_id(pair.refresh_token_id),
        expires_at=pair.refresh_expires_at,
    )
    return user, session, pair


@pytest.mark.asyncio
async def test_refresh_rotates_token(uow, tokens, issued):
    user, session, pair = issued
    uow.sessions.get_by_id.return_value = session
    uow.users.get_by_id.return_value = user
    old_hash = session.token_hash

    result = await RefreshTokenUseCase(uow, tokens).execute(pair.refresh_token)

    assert result.is_ok()
    new_claims = tokens.verify_refresh(result.value.refresh_token)
    assert new_claims.session_id == session.id
    assert session.token_hash == hash_token_id(new_claims.token_id)
    assert session.token_hash != old_hash
    assert session.last_used_at is not None
    uow.sessions.update.assert_called_once_with(session)
    uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_reused_token_revokes_session(uow, tokens, issued):
    user, session, pair = issued
    session.token_hash = hash_token_id("rotated-away")
    uow.sessions.get_by_id.return_value = session

    result = await RefreshTokenUseCase(uow, tokens).execute(pair.refresh_token)

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    uow.sessions.revoke_by_id.assert_called_once_with(session.id)
    uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_revoked_session(uow, tokens, issued):
    user, session, pair = issued
    session.revoked = True
    uow.sessions.get_by_id.return_value = session

    result = await RefreshTokenUseCase(uow, tokens).execute(pair.refresh_token)

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    uow.sessions.update.assert_not_called()


@pytest.mark.asyncio
async def test_expired_session(uow, tokens, issued):
    user, session, pair = issued
    session.expires_at = datetime.utcnow() - timedelta(minutes=1)
    uow.sessions.get_by_id.return_value = session

    result = await RefreshTokenUseCase(uow, tokens).execute(pair.refresh_token)

    assert result.is_err()


@pytest.mark.asyncio
async def test_inactive_principal(uow, tokens, issued):
    user, session, pair = issued
    user.is_active = False
    uow.sessions.get_by_id.return_value = session
    uow.users.get_by_id.return_value = user

    result = await RefreshTokenUseCase(uow, tokens).execute(pair.refresh_token)

    assert result.is_err()
    uow.sessions.update.assert_not_called()


@pytest.mark.asyncio
async def test_access_token_rejected(uow, tokens, issued):
    user, session, pair = issued

    result = await RefreshTokenUseCase(uow, tokens).execute(pair.access_token)

    assert result.is_err()
    uow.sessions.get_by_id.assert_not_called()
