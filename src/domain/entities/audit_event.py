"""
AuditEvent Entity

Immutable record of one attempted privileged action.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import event
from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from .enums import AuditAction


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - one row per attempted privileged action, win or fail.

    Business Rules:
    - Insert-only; updates are rejected at the ORM level
    - Retained for AUDIT_RETENTION_DAYS (one year), then purged by created_at
    - actor_id is nullable for anonymous attempts that cannot be attributed
    - details never carries a plaintext password
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    actor_id: Optional[UUID] = Field(default=None, index=True)
    action: AuditAction = Field(max_length=32)
    resource: str = Field(max_length=100)
    resource_id: Optional[str] = Field(default=None, max_length=100, index=True)

    details: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    changes: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)

    success: bool = Field(default=True)
    error_message: Optional[str] = Field(default=None, max_length=1000)
    duration_ms: int = Field(default=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_actor_created", "actor_id", "created_at"),
        Index("idx_audit_action_created", "action", "created_at"),
        Index("idx_audit_resource_created", "resource", "created_at"),
    )


@event.listens_for(AuditEvent, "before_update")
def _reject_audit_update(mapper, connection, target):
    raise ValueError("Audit events are immutable")
