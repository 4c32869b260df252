from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import SQLAlchemyError
from starlette.requests import Request

from src.adapter.services.audit_recorder import SqlAlchemyAuditRecorder
from src.api.error import ClientError, ServerError
from src.api.utils.privileged import PrivilegedAction, PrivilegedRun, client_ip, redact
from src.domain.entities import USER_MANAGERS, AuditAction, AuditEvent, UserRole
from src.domain.result import Error, Return


def make_request(path="/api/users", headers=None, path_params=None):
    raw_headers = [(b"user-agent", b"pytest")]
    for key, value in (headers or {}).items():
        raw_headers.append((key.lower().encode(), value.encode()))
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": path,
            "query_string": b"",
            "headers": raw_headers,
            "client": ("10.1.2.3", 5000),
            "path_params": path_params or {},
        }
    )


@pytest.fixture
def recorder():
    recorder = MagicMock()
    recorder.record = AsyncMock()
    return recorder


@pytest.fixture
def uow(mock_uow):
    mock_uow.users.get_by_id = AsyncMock()
    mock_uow.users.get_by_email = AsyncMock(return_value=None)
    return mock_uow


def bind(action, uow, tokens, recorder, token=None, request=None):
    return PrivilegedRun(
        action,
        request=request or make_request(),
        token=token,
        uow=uow,
        tokens=tokens,
        recorder=recorder,
    )


def signed_in(uow, tokens, user):
    uow.users.get_by_id.return_value = user
    return tokens.issue(user, uuid4()).access_token


def recorded(recorder) -> AuditEvent:
    recorder.record.assert_called_once()
    return recorder.record.call_args.args[0]


def test_redact_nested():
    body = {
        "email": "a@union.org",
        "password": "secret",
        "nested": {"new_password": "x", "items": [{"token": "t", "keep": 1}]},
    }

    assert redact(body) == {
        "email": "a@union.org",
        "password": "[REDACTED]",
        "nested": {"new_password": "[REDACTED]", "items": [{"token": "[REDACTED]", "keep": 1}]},
    }
    assert body["password"] == "secret"


def test_client_ip_prefers_forwarded_for():
    assert client_ip(make_request(headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})) == (
        "203.0.113.9"
    )
    assert client_ip(make_request()) == "10.1.2.3"


@pytest.mark.asyncio
async def test_success_records_one_event(uow, tokens, recorder, make_user):
    admin = make_user(role=UserRole.admin)
    token = signed_in(uow, tokens, admin)
    action = PrivilegedAction(AuditAction.CREATE, "user", roles=USER_MANAGERS)

    async def handler(ctx):
        ctx.resource_id = "abc"
        ctx.record_changes(None, {"name": "x"})
        return Return.ok({"created": True})

    value = await bind(action, uow, tokens, recorder, token=token).run(
        handler, payload={"name": "x", "password": "hunter22"}
    )

    assert value == {"created": True}
    event = recorded(recorder)
    assert event.action == AuditAction.CREATE
    assert event.actor_id == admin.id
    assert event.resource_id == "abc"
    assert event.success is True
    assert event.duration_ms >= 0
    assert event.details["body"] == {"name": "x", "password": "[REDACTED]"}
    assert event.changes == {"before": None, "after": {"name": "x"}}
    assert event.user_agent == "pytest"


@pytest.mark.asyncio
async def test_role_denial(uow, tokens, recorder, make_user):
    member = make_user(role=UserRole.user)
    token = signed_in(uow, tokens, member)
    action = PrivilegedAction(AuditAction.DELETE, "user", roles=USER_MANAGERS)
    handler = AsyncMock()

    with pytest.raises(ClientError) as exc_info:
        await bind(
            action, uow, tokens, recorder, token=token,
            request=make_request(path_params={"user_id": "42"}),
        ).run(handler)

    assert exc_info.value.status_code == 403
    assert exc_info.value.base_error.code == "INSUFFICIENT_ROLE"
    handler.assert_not_called()
    event = recorded(recorder)
    assert event.action == AuditAction.ACCESS_DENIED
    assert event.details["attempted_action"] == "DELETE"
    assert event.resource_id == "42"
    assert event.success is False


@pytest.mark.asyncio
async def test_unauthenticated(uow, tokens, recorder):
    action = PrivilegedAction(AuditAction.UPDATE, "service")
    handler = AsyncMock()

    with pytest.raises(ClientError) as exc_info:
        await bind(action, uow, tokens, recorder).run(handler)

    assert exc_info.value.status_code == 401
    handler.assert_not_called()
    event = recorded(recorder)
    assert event.actor_id is None
    assert event.success is False


@pytest.mark.asyncio
async def test_inactive_principal_attributed(uow, tokens, recorder, make_user):
    member = make_user(is_active=False)
    token = signed_in(uow, tokens, member)
    action = PrivilegedAction(AuditAction.UPDATE, "user")

    with pytest.raises(ClientError):
        await bind(action, uow, tokens, recorder, token=token).run(AsyncMock())

    assert recorded(recorder).actor_id == member.id


@pytest.mark.asyncio
async def test_handler_error_uses_failure_action(uow, tokens, recorder, make_user):
    user = make_user()
    uow.users.get_by_email.return_value = user
    action = PrivilegedAction(
        AuditAction.LOGIN, "auth", authenticated=False, failure_action=AuditAction.LOGIN_FAILED
    )

    async def handler(ctx):
        ctx.actor_email = user.email
        return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

    with pytest.raises(ClientError) as exc_info:
        await bind(action, uow, tokens, recorder).run(handler)

    assert exc_info.value.status_code == 401
    event = recorded(recorder)
    assert event.action == AuditAction.LOGIN_FAILED
    assert event.actor_id == user.id
    assert event.error_message == "Invalid email or password"


@pytest.mark.asyncio
async def test_unexpected_exception(uow, tokens, recorder, make_user):
    token = signed_in(uow, tokens, make_user(role=UserRole.admin))
    action = PrivilegedAction(AuditAction.UPDATE, "service")

    async def handler(ctx):
        raise RuntimeError("database exploded")

    with pytest.raises(ServerError) as exc_info:
        await bind(action, uow, tokens, recorder, token=token).run(handler)

    assert exc_info.value.base_error.code == "INTERNAL_ERROR"
    event = recorded(recorder)
    assert event.success is False
    assert "exploded" not in event.error_message


@pytest.mark.asyncio
async def test_recorder_swallows_storage_failure():
    database = MagicMock()
    database.session = MagicMock(side_effect=SQLAlchemyError("disk full"))

    await SqlAlchemyAuditRecorder(database).record(
        AuditEvent(action=AuditAction.LOGIN, resource="auth")
    )
