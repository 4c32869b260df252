"""
Audit recorder backed by the database.

Each event is written in its own session and committed immediately, so it
is independent of the request's unit of work: a rolled-back mutation still
leaves its failure record, and a failed audit write never touches the
mutation. Failures are logged and swallowed.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from src.adapter.database import Database
from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.app.services.audit_recorder import IAuditRecorder
from src.domain.entities import AuditEvent

logger = logging.getLogger(__name__)


class SqlAlchemyAuditRecorder(IAuditRecorder):
    def __init__(self, database: Database):
        self.database = database

    async def record(self, event: AuditEvent) -> None:
        """Write an audit event. Never raises."""
        try:
            async with self.database.session() as session:
                await AuditEventRepository(session).create(event)
                await session.commit()
        except (SQLAlchemyError, OSError) as exc:
            logger.warning(
                "Failed to write audit event %s on %s: %s",
                event.action,
                event.resource,
                exc,
            )

    async def purge_expired(self, retention_days: int) -> int:
        """
        Delete events older than the retention window. Returns count of deleted rows.

        Skipped when retention_days <= 0 (keep forever). Never raises.
        """
        if retention_days <= 0:
            return 0

        cutoff = datetime.utcnow() - timedelta(days=retention_days)
        try:
            async with self.database.session() as session:
                count = await AuditEventRepository(session).purge_older_than(cutoff)
                await session.commit()
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Failed to purge audit events: %s", exc)
            return 0

        if count:
            logger.info("Purged %d audit events older than %s", count, cutoff.isoformat())
        return count
