"""
Request Password Reset Use Case

Handles generating and sending password reset tokens.
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta

from config import ApplicationConfig
from src.app.services.mailer import IMailer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import PasswordResetToken, normalize_email
from src.domain.result import Result, Return
from .dtos import MessageResponse

logger = logging.getLogger(__name__)

RESET_REQUESTED = MessageResponse(
    message="If the email exists, a password reset link has been sent"
)


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Generate a cryptographically secure URL-safe token
    - Hash token with SHA-256 before storing
    - Token expires after PASSWORD_RESET_TTL_MINUTES
    - Earlier unused tokens of the same user are invalidated
    - No email enumeration (same response for unknown or inactive accounts)
    - The raw token only leaves through the mailer
    """

    def __init__(self, uow: UnitOfWork, mailer: IMailer):
        self.uow = uow
        self.mailer = mailer

    async def execute(self, email: str) -> Result[MessageResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_email(normalize_email(email))

            if user is None or not user.is_active:
                logger.info("Password reset requested for unknown or inactive account")
                return Return.ok(RESET_REQUESTED)

            reset_token = secrets.token_urlsafe(32)
            token_hash = hashlib.sha256(reset_token.encode()).hexdigest()

            await self.uow.password_reset_tokens.invalidate_for_user(user.id)
            await self.uow.password_reset_tokens.create(
                PasswordResetToken(
                    user_id=user.id,
                    token_hash=token_hash,
                    used=False,
                    expires_at=datetime.utcnow()
                    + timedelta(minutes=ApplicationConfig.PASSWORD_RESET_TTL_MINUTES),
                )
            )

            await self.uow.commit()

        await self.mailer.send_password_reset(user.email, reset_token)

        return Return.ok(RESET_REQUESTED)
