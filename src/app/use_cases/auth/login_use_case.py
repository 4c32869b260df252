"""
Login Use Case

Verifies credentials and opens a new session with an access/refresh token pair.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import uuid4

from src.api.utils.jwt import TokenService, hash_token_id
from src.app.services.passwords import burn_password_check, verify_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Session, normalize_email
from src.domain.result import Error, Result, Return
from .dtos import LoginResponse, UserInfo

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Constant-time password comparison; a hash check runs even for unknown emails
    - Unknown email, wrong password and inactive account share one error
    - Creates a session row holding the hash of the refresh token id
    - Updates user.last_login_at
    """

    def __init__(self, uow: UnitOfWork, tokens: TokenService):
        self.uow = uow
        self.tokens = tokens

    async def execute(
        self,
        email: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password
            ip_address: Caller address stored on the session
            user_agent: Caller user agent stored on the session

        Returns:
            Result with LoginResponse containing tokens and user info, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(normalize_email(email))

            if user is None:
                burn_password_check(password)
                logger.info("Login failed: unknown email")
                return Return.err(INVALID_CREDENTIALS)

            if not verify_password(password, user.password_hash):
                logger.info("Login failed: wrong password for user %s", user.id)
                return Return.err(INVALID_CREDENTIALS)

            if not user.is_active:
                logger.info("Login failed: user %s is inactive", user.id)
                return Return.err(INVALID_CREDENTIALS)

            session_id = uuid4()
            pair = self.tokens.issue(user, session_id)

            session = Session(
                id=session_id,
                user_id=user.id,
                token_hash=hash_token_id(pair.refresh_token_id),
                ip_address=ip_address,
                user_agent=user_agent,
                expires_at=pair.refresh_expires_at,
            )
            await self.uow.sessions.create(session)

            user.last_login_at = datetime.utcnow()
            await self.uow.users.update(user)

            await self.uow.commit()

            return Return.ok(
                LoginResponse(
                    access_token=pair.access_token,
                    refresh_token=pair.refresh_token,
                    expires_in=int(self.tokens.access_ttl.total_seconds()),
                    session_id=str(session_id),
                    user=UserInfo(
                        id=str(user.id),
                        email=user.email,
                        name=user.name,
                        role=user.role_name,
                    ),
                )
            )
