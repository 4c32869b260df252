"""
Get Analytics Use Case

Audit-trail aggregates over a trailing period.
"""

from datetime import datetime, timedelta
from typing import Any, Dict

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditAction
from src.domain.result import Error, Result, Return

PERIODS = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}
TOP_ACTIONS_LIMIT = 10


class GetAnalyticsUseCase:
    """
    Aggregates for one of the periods 7d, 30d, 90d or 1y:
    - logins_per_day: successful LOGIN events per calendar day (UTC)
    - top_actions: the 10 most frequent actions
    - failure_rate: percentage of failed events, two decimals
    - average_duration_ms: mean duration of recorded actions
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, period: str = "30d") -> Result[Dict[str, Any]]:
        days = PERIODS.get(period)
        if days is None:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    f"Invalid period: {period}. Must be one of: {', '.join(PERIODS)}",
                )
            )

        since = datetime.utcnow() - timedelta(days=days)

        async with self.uow:
            logins = await self.uow.audit_events.daily_counts(AuditAction.LOGIN, since)
            top_actions = await self.uow.audit_events.count_by_action(
                since, limit=TOP_ACTIONS_LIMIT
            )
            total, failed, average_duration = await self.uow.audit_events.outcome_summary(since)

        return Return.ok(
            {
                "period": period,
                "since": since.isoformat() + "Z",
                "logins_per_day": [{"date": day, "count": count} for day, count in logins],
                "top_actions": [
                    {"action": action, "count": count} for action, count in top_actions
                ],
                "total_events": total,
                "failed_events": failed,
                "failure_rate": round(failed / total * 100, 2) if total else 0.0,
                "average_duration_ms": round(average_duration or 0.0, 2),
            }
        )
