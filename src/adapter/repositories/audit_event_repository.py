import base64
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import case, delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.domain.entities import AuditEvent


def encode_cursor(created_at: datetime) -> str:
    return base64.b64encode(created_at.isoformat().encode("utf-8")).decode("utf-8")


def decode_cursor(cursor: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(base64.b64decode(cursor).decode("utf-8"))
    except (ValueError, TypeError):
        return None


class AuditEventRepository(IAuditEventRepository):
    """AuditEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        self.session.add(audit_event)
        await self.session.flush()
        await self.session.refresh(audit_event)
        return audit_event

    async def get_paginated(
        self,
        limit: int = 50,
        cursor: Optional[str] = None,
        actor_id: Optional[UUID] = None,
        action: Optional[str] = None,
        resource: Optional[str] = None,
        success: Optional[bool] = None,
    ) -> Tuple[List[AuditEvent], Optional[str]]:
        """
        Get audit events with cursor-based pagination.

        Cursor format: base64-encoded ISO timestamp of created_at
        """
        stmt = select(AuditEvent)
        if actor_id is not None:
            stmt = stmt.where(AuditEvent.actor_id == actor_id)
        if action:
            stmt = stmt.where(AuditEvent.action == action)
        if resource:
            stmt = stmt.where(AuditEvent.resource == resource)
        if success is not None:
            stmt = stmt.where(AuditEvent.success == success)

        # Invalid cursor is ignored and the listing starts from the newest event
        if cursor:
            cursor_timestamp = decode_cursor(cursor)
            if cursor_timestamp is not None:
                stmt = stmt.where(AuditEvent.created_at < cursor_timestamp)

        stmt = stmt.order_by(AuditEvent.created_at.desc()).limit(limit + 1)

        result = await self.session.exec(stmt)
        events = list(result.all())

        has_more = len(events) > limit
        if has_more:
            events = events[:limit]

        next_cursor = None
        if has_more and events:
            next_cursor = encode_cursor(events[-1].created_at)

        return events, next_cursor

    async def get_recent(
        self, limit: int = 10, actor_id: Optional[UUID] = None
    ) -> List[AuditEvent]:
        stmt = select(AuditEvent)
        if actor_id is not None:
            stmt = stmt.where(AuditEvent.actor_id == actor_id)
        stmt = stmt.order_by(AuditEvent.created_at.desc()).limit(limit)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def purge_older_than(self, cutoff: datetime) -> int:
        stmt = delete(AuditEvent).where(AuditEvent.created_at < cutoff)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def count_by_action(
        self, since: datetime, limit: int = 10
    ) -> List[Tuple[str, int]]:
        total = func.count().label("total")
        stmt = (
            select(AuditEvent.action, total)
            .where(AuditEvent.created_at >= since)
            .group_by(AuditEvent.action)
            .order_by(total.desc())
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return [
            (action.value if hasattr(action, "value") else action, count)
            for action, count in result.all()
        ]

    async def daily_counts(
        self, action: str, since: datetime, success: Optional[bool] = True
    ) -> List[Tuple[str, int]]:
        day = func.date(AuditEvent.created_at).label("day")
        stmt = select(day, func.count()).where(
            AuditEvent.action == action, AuditEvent.created_at >= since
        )
        if success is not None:
            stmt = stmt.where(AuditEvent.success == success)
        stmt = stmt.group_by(day).order_by(day)
        result = await self.session.exec(stmt)
        return [(str(d), count) for d, count in result.all()]

    async def outcome_summary(self, since: datetime) -> Tuple[int, int, float]:
        stmt = select(
            func.count(),
            func.coalesce(func.sum(case((AuditEvent.success == False, 1), else_=0)), 0),
            func.coalesce(func.avg(AuditEvent.duration_ms), 0),
        ).where(AuditEvent.created_at >= since)
        result = await self.session.exec(stmt)
        total, failed, avg_duration = result.one()
        return int(total), int(failed), float(avg_duration)
