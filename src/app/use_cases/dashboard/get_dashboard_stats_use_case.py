"""
Get Dashboard Stats Use Case

Overview counts for the admin dashboard landing page.
"""

from typing import Any, Dict

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.audit import serialize_events
from src.app.use_cases.content.kinds import CONTENT_KINDS
from src.domain.entities import UserRole
from src.domain.result import Result, Return

RECENT_ACTIVITY_LIMIT = 10


class GetDashboardStatsUseCase:
    """
    Returns:
    - overview: user totals and per-kind content counts (total and active)
    - users_by_role: count for every role, zero when absent
    - users_by_status: active / inactive counts
    - recent_activity: the 10 newest audit events with actor emails
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[Dict[str, Any]]:
        async with self.uow:
            total_users = await self.uow.users.count()
            active_users = await self.uow.users.count(is_active=True)
            by_role = await self.uow.users.count_by_role()

            content = {}
            for name in CONTENT_KINDS:
                repository = self.uow.content(name)
                content[name] = {
                    "total": await repository.count(),
                    "active": await repository.count(is_active=True),
                }
            content["sections"] = {"total": await self.uow.sections.count()}

            events = await self.uow.audit_events.get_recent(limit=RECENT_ACTIVITY_LIMIT)
            recent_activity = await serialize_events(self.uow, events)

        return Return.ok(
            {
                "overview": {
                    "total_users": total_users,
                    "active_users": active_users,
                    "content": content,
                },
                "users_by_role": {role.value: by_role.get(role.value, 0) for role in UserRole},
                "users_by_status": {
                    "active": active_users,
                    "inactive": total_users - active_users,
                },
                "recent_activity": recent_activity,
            }
        )
