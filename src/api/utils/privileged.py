"""
Privileged-Action Wrapper

Every state-changing (and every sensitive read) endpoint runs its handler
through ``PrivilegedAction``. The wrapper authenticates the caller, checks the
role, runs the handler, and writes exactly one audit event describing the
attempt, whatever its outcome. Route handlers never write audit events
themselves and never shape error responses.

Usage::

    create_user = PrivilegedAction(AuditAction.CREATE, "user", roles=USER_MANAGERS)

    @router.post("/users")
    async def create(
        body: CreateUserRequest,
        action=Depends(create_user),
        uow=Depends(get_unit_of_work),
    ):
        async def handler(ctx: ActionContext):
            return await CreateUserUseCase(uow).execute(ctx.principal.user, ...)
        return await action.run(handler, payload=body)

``RoleGuard`` is the read-only counterpart: it authenticates and checks the
role, auditing only denials.
"""

import logging
import time
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, TypeVar
from uuid import UUID

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from src.api.error import ClientError, to_exception
from src.api.utils.jwt import TokenService
from src.app.services.audit_recorder import IAuditRecorder
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import AuthenticateUseCase, AuthenticatedPrincipal
from src.depends import (
    bearer_token,
    get_audit_recorder,
    get_token_service,
    get_unit_of_work,
    security,
)
from src.domain.entities import ANY_ROLE, AuditAction, AuditEvent, UserRole, normalize_email
from src.domain.result import Error, Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

REDACTED = "[REDACTED]"
SENSITIVE_FIELDS = frozenset(
    {"password", "current_password", "new_password", "token", "refresh_token", "access_token"}
)

INSUFFICIENT_ROLE = Error("INSUFFICIENT_ROLE", "You do not have permission to perform this action")
INTERNAL_ERROR = Error("INTERNAL_ERROR", "Internal server error")


def redact(value: Any) -> Any:
    """Copy of a request payload with secret fields masked, at any depth."""
    if isinstance(value, dict):
        return {
            key: REDACTED if key in SENSITIVE_FIELDS else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact(item) for item in value]
    return value


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def _payload_dict(payload: Any) -> Optional[Dict[str, Any]]:
    if payload is None:
        return None
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", exclude_unset=True)
    return dict(payload)


def _role_set(roles: Iterable[UserRole]) -> frozenset:
    return frozenset(role.value if isinstance(role, UserRole) else role for role in roles)


class ActionContext:
    """
    Per-request state shared between the wrapper and a handler.

    Handlers may set ``resource_id``, ``changes`` (via ``record_changes``),
    extra ``details``, or, for anonymous actions, ``actor_id`` / ``actor_email``
    so the audit event can be attributed.
    """

    def __init__(self, request: Request, body: Optional[Dict[str, Any]] = None):
        self.request = request
        self.body = body
        self.principal: Optional[AuthenticatedPrincipal] = None
        self.actor_id: Optional[UUID] = None
        self.actor_email: Optional[str] = None
        self.resource_id: Optional[str] = None
        self.changes: Optional[Dict[str, Any]] = None
        self.details: Dict[str, Any] = {}

    def record_changes(self, before: Optional[Dict[str, Any]], after: Optional[Dict[str, Any]]):
        self.changes = {"before": before, "after": after}


class _Gate:
    """Auth gate plus role check shared by PrivilegedAction and RoleGuard"""

    def __init__(
        self,
        request: Request,
        token: Optional[str],
        uow: UnitOfWork,
        tokens: TokenService,
        recorder: IAuditRecorder,
    ):
        self.request = request
        self.token = token
        self.uow = uow
        self.tokens = tokens
        self.recorder = recorder

    async def authenticate(self, ctx: ActionContext) -> Optional[Error]:
        result = await AuthenticateUseCase(self.uow, self.tokens).execute(self.token)
        if result.is_err():
            # attribute the failed attempt when the token itself still verifies
            claims = self.tokens.verify_access(self.token) if self.token else None
            ctx.actor_id = claims.user_id if claims else None
            return result.error

        ctx.principal = result.value
        ctx.actor_id = result.value.id
        return None

    def check_role(
        self, ctx: ActionContext, roles: frozenset, action: str, resource: str
    ) -> Optional[Error]:
        if ctx.principal.role in roles:
            return None
        logger.warning(
            "Access denied: user %s with role %s attempted %s on %s",
            ctx.principal.id,
            ctx.principal.role,
            action,
            resource,
        )
        return INSUFFICIENT_ROLE

    async def resolve_actor(self, email: str) -> Optional[UUID]:
        try:
            async with self.uow:
                user = await self.uow.users.get_by_email(normalize_email(email))
        except SQLAlchemyError as exc:
            logger.warning("Could not resolve audit actor by email: %s", exc)
            return None
        return user.id if user else None

    async def record(
        self,
        ctx: ActionContext,
        action: AuditAction,
        resource: str,
        started: float,
        error: Optional[Error],
    ) -> None:
        request = self.request

        if ctx.actor_id is None and ctx.actor_email:
            ctx.actor_id = await self.resolve_actor(ctx.actor_email)

        resource_id = ctx.resource_id
        if resource_id is None:
            resource_id = next(iter(request.path_params.values()), None)
        if resource_id is None and ctx.body:
            resource_id = ctx.body.get("id")

        details = {
            "method": request.method,
            "url": request.url.path,
            "query": dict(request.query_params),
        }
        if ctx.body is not None:
            details["body"] = redact(ctx.body)
        details.update(ctx.details)

        user_agent = request.headers.get("user-agent")

        await self.recorder.record(
            AuditEvent(
                actor_id=ctx.actor_id,
                action=action,
                resource=resource,
                resource_id=str(resource_id) if resource_id is not None else None,
                details=details,
                changes=ctx.changes,
                ip_address=client_ip(request),
                user_agent=user_agent[:512] if user_agent else None,
                success=error is None,
                error_message=error.message[:1000] if error else None,
                duration_ms=max(0, int((time.perf_counter() - started) * 1000)),
            )
        )


class PrivilegedRun(_Gate):
    """A privileged action bound to one request"""

    def __init__(self, action: "PrivilegedAction", **kwargs):
        super().__init__(**kwargs)
        self.action = action

    async def run(
        self,
        handler: Callable[[ActionContext], Awaitable[Result[T]]],
        payload: Any = None,
    ) -> T:
        """
        Authenticate, authorize, run the handler and audit the attempt.

        Args:
            handler: Coroutine taking the ActionContext and returning a Result
            payload: Request body to record (secret fields are redacted)

        Returns:
            The handler's value on success

        Raises:
            ClientError / ServerError mapped from the failing Error
        """
        started = time.perf_counter()
        endpoint = self.action
        ctx = ActionContext(self.request, body=_payload_dict(payload))
        audit_action = endpoint.action
        error: Optional[Error] = None
        value = None

        try:
            if endpoint.authenticated:
                error = await self.authenticate(ctx)
                if error is None:
                    error = self.check_role(
                        ctx, endpoint.roles, endpoint.action.value, endpoint.resource
                    )
                    if error is not None:
                        audit_action = AuditAction.ACCESS_DENIED
                        ctx.details["attempted_action"] = endpoint.action.value

            if error is None:
                result = await handler(ctx)
                if result.is_err():
                    error = result.error
                    if endpoint.failure_action is not None:
                        audit_action = endpoint.failure_action
                else:
                    value = result.value
        except Exception:
            logger.exception(
                "Unhandled error during %s on %s", endpoint.action.value, endpoint.resource
            )
            error = INTERNAL_ERROR

        await self.record(ctx, audit_action, endpoint.resource, started, error)

        if error is not None:
            raise to_exception(error)
        return value


class PrivilegedAction:
    """
    Dependency factory for an audited endpoint.

    Args:
        action: Audit action recorded for the attempt
        resource: Audit resource name
        roles: Roles allowed to perform the action
        authenticated: False for anonymous actions such as login
        failure_action: Audit action recorded instead of ``action`` when the
            handler fails (e.g. LOGIN_FAILED)
    """

    def __init__(
        self,
        action: AuditAction,
        resource: str,
        roles: Iterable[UserRole] = ANY_ROLE,
        authenticated: bool = True,
        failure_action: Optional[AuditAction] = None,
    ):
        self.action = action
        self.resource = resource
        self.roles = _role_set(roles)
        self.authenticated = authenticated
        self.failure_action = failure_action

    async def __call__(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        uow=Depends(get_unit_of_work),
        tokens: TokenService = Depends(get_token_service),
        recorder: IAuditRecorder = Depends(get_audit_recorder),
    ) -> PrivilegedRun:
        return PrivilegedRun(
            self,
            request=request,
            token=bearer_token(credentials),
            uow=uow,
            tokens=tokens,
            recorder=recorder,
        )


class RoleGuard:
    """
    Dependency for read-only endpoints restricted to a role set.

    Returns the authenticated principal. Authentication failures raise 401;
    role denials are audited as ACCESS_DENIED and raise 403.
    """

    def __init__(self, resource: str, roles: Iterable[UserRole]):
        self.resource = resource
        self.roles = _role_set(roles)

    async def __call__(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        uow=Depends(get_unit_of_work),
        tokens: TokenService = Depends(get_token_service),
        recorder: IAuditRecorder = Depends(get_audit_recorder),
    ) -> AuthenticatedPrincipal:
        started = time.perf_counter()
        gate = _Gate(request, bearer_token(credentials), uow, tokens, recorder)
        ctx = ActionContext(request)

        error = await gate.authenticate(ctx)
        if error is not None:
            raise ClientError(error, status.HTTP_401_UNAUTHORIZED)

        error = gate.check_role(ctx, self.roles, AuditAction.READ.value, self.resource)
        if error is not None:
            ctx.details["attempted_action"] = AuditAction.READ.value
            await gate.record(ctx, AuditAction.ACCESS_DENIED, self.resource, started, error)
            raise ClientError(error, status.HTTP_403_FORBIDDEN)

        return ctx.principal
