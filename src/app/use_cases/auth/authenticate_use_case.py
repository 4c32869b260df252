"""
Authenticate Use Case

Resolves a bearer access token to a live, active principal.
"""

import logging
from typing import Optional

from src.api.utils.jwt import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.result import Error, Result, Return
from .dtos import AuthenticatedPrincipal

logger = logging.getLogger(__name__)

UNAUTHENTICATED = Error("UNAUTHENTICATED", "Authentication required")


class AuthenticateUseCase:
    """
    Use case behind the auth gate.

    Business Rules:
    - Token signature and expiry must validate before any claim is used
    - Principal is re-loaded from the store; missing or inactive principals fail
    - Every failure yields the same UNAUTHENTICATED error; the reason is only logged
    """

    def __init__(self, uow: UnitOfWork, tokens: TokenService):
        self.uow = uow
        self.tokens = tokens

    async def execute(self, token: Optional[str]) -> Result[AuthenticatedPrincipal]:
        if not token:
            logger.info("Authentication failed: no bearer token")
            return Return.err(UNAUTHENTICATED)

        claims = self.tokens.verify_access(token)
        if claims is None:
            return Return.err(UNAUTHENTICATED)

        async with self.uow:
            user = await self.uow.users.get_by_id(claims.user_id)

        if user is None:
            logger.info("Authentication failed: principal %s not found", claims.user_id)
            return Return.err(UNAUTHENTICATED)

        if not user.is_active:
            logger.info("Authentication failed: principal %s inactive", claims.user_id)
            return Return.err(UNAUTHENTICATED)

        return Return.ok(AuthenticatedPrincipal(user=user, claims=claims, token=token))
