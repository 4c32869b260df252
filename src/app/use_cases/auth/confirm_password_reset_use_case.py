"""
Confirm Password Reset Use Case

Handles validating password reset tokens and updating passwords.
"""

import hashlib
import logging
from datetime import datetime

from src.app.services.passwords import hash_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain.result import Error, Result, Return
from .dtos import ConfirmPasswordResetResponse
from .password_policy import validate_password

logger = logging.getLogger(__name__)

INVALID_RESET_TOKEN = Error("INVALID_RESET_TOKEN", "Invalid or expired password reset token")


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Token is validated by hashing and comparing with stored hash
    - Token must be unused and unexpired; all token failures share one error
    - New password must meet the password policy
    - Password is re-hashed with bcrypt
    - All user sessions are revoked
    - Token is marked as used after successful reset
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str, new_password: str) -> Result[ConfirmPasswordResetResponse]:
        password_check = validate_password(new_password)
        if password_check.is_err():
            return Return.err(password_check.error)

        token_hash = hashlib.sha256(token.encode()).hexdigest()

        async with self.uow:
            reset_token = await self.uow.password_reset_tokens.get_by_token_hash(token_hash)

            if reset_token is None:
                return Return.err(INVALID_RESET_TOKEN)

            if reset_token.used:
                logger.info("Password reset rejected: token %s already used", reset_token.id)
                return Return.err(INVALID_RESET_TOKEN)

            if reset_token.expires_at < datetime.utcnow():
                logger.info("Password reset rejected: token %s expired", reset_token.id)
                return Return.err(INVALID_RESET_TOKEN)

            user = await self.uow.users.get_by_id(reset_token.user_id)
            if user is None or not user.is_active:
                return Return.err(INVALID_RESET_TOKEN)

            user.password_hash = hash_password(new_password)
            user.updated_at = datetime.utcnow()
            await self.uow.users.update(user)

            reset_token.used = True
            await self.uow.password_reset_tokens.update(reset_token)

            revoked_count = await self.uow.sessions.revoke_all_by_user_id(user.id)

            await self.uow.commit()

            return Return.ok(
                ConfirmPasswordResetResponse(
                    user_id=str(user.id),
                    message="Password has been reset successfully",
                    sessions_revoked=revoked_count,
                )
            )
