"""
Get User Use Cases

Single principal lookup and that principal's audit activity.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.audit import serialize_events
from src.app.use_cases.auth.dtos import UserProfile
from src.domain.result import Result, Return
from .dtos import UserDetail
from .policies import USER_NOT_FOUND

RECENT_ACTIVITY_LIMIT = 10
MAX_PAGE_SIZE = 100


class GetUserUseCase:
    """Profile of one principal plus its 10 most recent audit events"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[UserDetail]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(USER_NOT_FOUND)

            events = await self.uow.audit_events.get_recent(
                limit=RECENT_ACTIVITY_LIMIT, actor_id=user.id
            )
            recent_activity = await serialize_events(self.uow, events)

        return Return.ok(
            UserDetail(user=UserProfile.from_user(user), recent_activity=recent_activity)
        )


class GetUserActivityUseCase:
    """Cursor-paginated audit events performed by one principal"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, limit: int = 20, cursor: Optional[str] = None
    ) -> Result[Dict[str, Any]]:
        limit = max(1, min(limit, MAX_PAGE_SIZE))

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(USER_NOT_FOUND)

            events, next_cursor = await self.uow.audit_events.get_paginated(
                limit=limit, cursor=cursor, actor_id=user.id
            )
            events_list = await serialize_events(self.uow, events)

        return Return.ok(
            {
                "user": {"id": str(user.id), "email": user.email, "name": user.name},
                "events": events_list,
                "next_cursor": next_cursor,
            }
        )
