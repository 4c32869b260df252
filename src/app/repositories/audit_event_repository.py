from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from src.domain.entities import AuditEvent


class IAuditEventRepository(ABC):
    """AuditEvent repository interface - application layer"""

    @abstractmethod
    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        pass

    @abstractmethod
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

        Returns:
            Tuple of (events list, next_cursor)
            - events: List of audit events ordered by created_at DESC
            - next_cursor: Cursor for next page, None if no more events
        """
        pass

    @abstractmethod
    async def get_recent(
        self, limit: int = 10, actor_id: Optional[UUID] = None
    ) -> List[AuditEvent]:
        """Get the most recent audit events, optionally for one actor"""
        pass

    @abstractmethod
    async def purge_older_than(self, cutoff: datetime) -> int:
        """Delete audit events created before cutoff. Returns count of deleted rows."""
        pass

    @abstractmethod
    async def count_by_action(
        self, since: datetime, limit: int = 10
    ) -> List[Tuple[str, int]]:
        """Most frequent actions since a point in time, highest count first"""
        pass

    @abstractmethod
    async def daily_counts(
        self, action: str, since: datetime, success: Optional[bool] = True
    ) -> List[Tuple[str, int]]:
        """Per-day (YYYY-MM-DD) counts of one action since a point in time"""
        pass

    @abstractmethod
    async def outcome_summary(self, since: datetime) -> Tuple[int, int, float]:
        """Return (total events, failed events, average duration in ms) since a point in time"""
        pass
