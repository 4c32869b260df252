"""
Refresh Token Use Case

Exchanges a refresh token for a new token pair, rotating the refresh token.
"""

import logging
from datetime import datetime

from src.api.utils.jwt import TokenService, hash_token_id
from src.app.services.unit_of_work import UnitOfWork
from src.domain.result import Error, Result, Return
from .dtos import RefreshTokenResponse

logger = logging.getLogger(__name__)

INVALID_REFRESH_TOKEN = Error("INVALID_TOKEN", "Invalid or expired refresh token")


class RefreshTokenUseCase:
    """
    Use case for refreshing tokens.

    Business Rules:
    - Refresh token must verify against the refresh secret
    - Its session must exist, belong to the token subject, be unrevoked and unexpired
    - The token id must match the one stored on the session; a stale id means
      the token was already rotated out, so the session is revoked (reuse detection)
    - Principal is re-loaded and must still be active
    - Each refresh issues a new pair and replaces the stored token id hash
    - All failures return the same INVALID_TOKEN error
    """

    def __init__(self, uow: UnitOfWork, tokens: TokenService):
        self.uow = uow
        self.tokens = tokens

    async def execute(self, refresh_token: str) -> Result[RefreshTokenResponse]:
        claims = self.tokens.verify_refresh(refresh_token)
        if claims is None or claims.session_id is None:
            return Return.err(INVALID_REFRESH_TOKEN)

        async with self.uow:
            session = await self.uow.sessions.get_by_id(claims.session_id)

            if session is None or session.user_id != claims.user_id:
                logger.info("Refresh rejected: unknown session %s", claims.session_id)
                return Return.err(INVALID_REFRESH_TOKEN)

            if session.revoked:
                logger.info("Refresh rejected: session %s revoked", session.id)
                return Return.err(INVALID_REFRESH_TOKEN)

            now = datetime.utcnow()
            if session.expires_at < now:
                logger.info("Refresh rejected: session %s expired", session.id)
                return Return.err(INVALID_REFRESH_TOKEN)

            if session.token_hash != hash_token_id(claims.token_id):
                logger.warning(
                    "Refresh token reuse detected on session %s, revoking", session.id
                )
                await self.uow.sessions.revoke_by_id(session.id)
                await self.uow.commit()
                return Return.err(INVALID_REFRESH_TOKEN)

            user = await self.uow.users.get_by_id(session.user_id)
            if user is None or not user.is_active:
                logger.info("Refresh rejected: principal %s missing or inactive", session.user_id)
                return Return.err(INVALID_REFRESH_TOKEN)

            pair = self.tokens.issue(user, session.id)

            session.token_hash = hash_token_id(pair.refresh_token_id)
            session.expires_at = pair.refresh_expires_at
            session.last_used_at = now
            await self.uow.sessions.update(session)

            await self.uow.commit()

            return Return.ok(
                RefreshTokenResponse(
                    access_token=pair.access_token,
                    refresh_token=pair.refresh_token,
                    expires_in=int(self.tokens.access_ttl.total_seconds()),
                )
            )
