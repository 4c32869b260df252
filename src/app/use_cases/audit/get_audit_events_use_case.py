"""
Get Audit Events Use Case

Retrieves audit events with filters and cursor pagination.
"""

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditAction, AuditEvent
from src.domain.result import Error, Result, Return

MAX_PAGE_SIZE = 100


def event_to_dict(event: AuditEvent, actor_email: Optional[str] = None) -> Dict[str, Any]:
    action = event.action.value if isinstance(event.action, AuditAction) else event.action
    return {
        "id": str(event.id),
        "actor_id": str(event.actor_id) if event.actor_id else None,
        "actor_email": actor_email,
        "action": action,
        "resource": event.resource,
        "resource_id": event.resource_id,
        "details": event.details or {},
        "changes": event.changes,
        "ip_address": event.ip_address,
        "user_agent": event.user_agent,
        "success": event.success,
        "error_message": event.error_message,
        "duration_ms": event.duration_ms,
        "timestamp": event.created_at.isoformat() + "Z",
    }


async def serialize_events(uow: UnitOfWork, events: Iterable[AuditEvent]) -> List[Dict[str, Any]]:
    """Serialize events, resolving actor emails with one lookup."""
    events = list(events)
    actor_ids = list({event.actor_id for event in events if event.actor_id})
    actors = await uow.users.get_many_by_ids(actor_ids) if actor_ids else []
    emails = {actor.id: actor.email for actor in actors}
    return [event_to_dict(event, emails.get(event.actor_id)) for event in events]


class GetAuditEventsUseCase:
    """
    Use case for browsing the audit trail.

    Business Rules:
    - Results ordered by newest first
    - Supports cursor-based pagination (limit capped at 100)
    - Optional filters: actor, action, resource, outcome
    - Each event includes the actor's email when the actor still exists
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        limit: int = 50,
        cursor: Optional[str] = None,
        actor_id: Optional[UUID] = None,
        action: Optional[str] = None,
        resource: Optional[str] = None,
        success: Optional[bool] = None,
    ) -> Result[Dict[str, Any]]:
        """
        Execute get audit events use case.

        Args:
            limit: Maximum number of events to return
            cursor: Pagination cursor (optional)
            actor_id: Only events of this principal
            action: Only events with this action
            resource: Only events on this resource
            success: Only successful (True) or failed (False) events

        Returns:
            Result with events list and next_cursor, or Error
        """
        if action is not None:
            try:
                action = AuditAction(action)
            except ValueError:
                return Return.err(Error("VALIDATION_ERROR", f"Unknown audit action: {action}"))

        limit = max(1, min(limit, MAX_PAGE_SIZE))

        async with self.uow:
            events, next_cursor = await self.uow.audit_events.get_paginated(
                limit=limit,
                cursor=cursor,
                actor_id=actor_id,
                action=action,
                resource=resource,
                success=success,
            )

            events_list = await serialize_events(self.uow, events)

        return Return.ok({"events": events_list, "next_cursor": next_cursor})
