"""
Get System Health Use Case

Operational snapshot for administrators: database reachability, process
uptime and the failure rate of recent audited actions.
"""

from datetime import datetime, timedelta
from typing import Any, Dict

from src.app.services.unit_of_work import UnitOfWork
from src.domain.result import Result, Return

ERROR_RATE_WINDOW = timedelta(hours=1)


class GetSystemHealthUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, database_ok: bool, uptime_seconds: float) -> Result[Dict[str, Any]]:
        now = datetime.utcnow()
        since = now - ERROR_RATE_WINDOW

        total, failed = 0, 0
        if database_ok:
            async with self.uow:
                total, failed, _ = await self.uow.audit_events.outcome_summary(since)

        return Return.ok(
            {
                "status": "healthy" if database_ok else "unhealthy",
                "database": {"connected": database_ok},
                "uptime_seconds": int(uptime_seconds),
                "error_rate": {
                    "window_minutes": int(ERROR_RATE_WINDOW.total_seconds() // 60),
                    "total_events": total,
                    "failed_events": failed,
                    "rate": round(failed / total * 100, 2) if total else 0.0,
                },
                "timestamp": now.isoformat() + "Z",
            }
        )
