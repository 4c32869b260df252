"""
Audit API Routes

Handles audit event retrieval endpoints.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from src.api.error import to_exception
from src.api.utils.privileged import RoleGuard
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.audit import GetAuditEventsUseCase
from src.depends import get_unit_of_work
from src.domain.entities import AUDIT_VIEWERS, AuditAction

router = APIRouter(prefix="/audit", tags=["Audit"])

audit_guard = RoleGuard("audit_events", AUDIT_VIEWERS)


class AuditEventResponse(BaseModel):
    """Single audit event in response"""

    id: str
    actor_id: Optional[str]
    actor_email: Optional[str]
    action: str
    resource: str
    resource_id: Optional[str]
    details: Dict[str, Any]
    changes: Optional[Dict[str, Any]]
    ip_address: Optional[str]
    user_agent: Optional[str]
    success: bool
    error_message: Optional[str]
    duration_ms: int
    timestamp: str


class AuditEventsResponse(BaseModel):
    """GET /audit/events response payload"""

    events: List[AuditEventResponse]
    next_cursor: Optional[str]


@router.get(
    "/events",
    status_code=status.HTTP_200_OK,
    response_model=AuditEventsResponse,
)
async def get_audit_events(
    principal=Depends(audit_guard),
    uow: UnitOfWork = Depends(get_unit_of_work),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of events to return"),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
    actor_id: Optional[UUID] = Query(None, description="Only events of this user"),
    action: Optional[AuditAction] = Query(None, description="Only events with this action"),
    resource: Optional[str] = Query(
        None, max_length=100, description="Only events on this resource"
    ),
    success: Optional[bool] = Query(None, description="Only successful or failed events"),
):
    """
    Browse the audit trail, newest first.

    Only accessible by super_admin and admin roles; denied attempts are
    themselves audited.

    Returns:
        - events: List of audit events ordered by newest first
        - next_cursor: Cursor for next page (null if no more events)

    Raises:
        - 401 Unauthorized: Not authenticated
        - 403 Forbidden: Role not allowed
    """
    result = await GetAuditEventsUseCase(uow).execute(
        limit=limit,
        cursor=cursor,
        actor_id=actor_id,
        action=action.value if action else None,
        resource=resource,
        success=success,
    )
    if result.is_err():
        raise to_exception(result.error)
    return result.value
