"""
Logout Use Case

Revokes the session the caller's access token was issued for.
"""

from typing import Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.result import Result, Return
from .dtos import MessageResponse


class LogoutUseCase:
    """
    Business Rules:
    - The session named by the access token's sid claim is revoked, so its
      refresh token can no longer be exchanged
    - Tokens without a session id still log out successfully
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, session_id: Optional[UUID]) -> Result[MessageResponse]:
        if session_id is not None:
            async with self.uow:
                await self.uow.sessions.revoke_by_id(session_id)
                await self.uow.commit()

        return Return.ok(MessageResponse(message="Logged out successfully"))
