"""
Audit Use Cases

All audit-related business logic.
"""

from .get_audit_events_use_case import GetAuditEventsUseCase, event_to_dict, serialize_events

__all__ = [
    "GetAuditEventsUseCase",
    "event_to_dict",
    "serialize_events",
]
