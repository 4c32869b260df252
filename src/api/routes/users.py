import csv
import io
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import to_exception
from src.api.utils.privileged import ActionContext, PrivilegedAction, RoleGuard
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import UserProfile
from src.app.use_cases.users import (
    BulkOperationResult,
    BulkUserOperationUseCase,
    ChangeRoleUseCase,
    ChangeStatusUseCase,
    CreateUserCommand,
    CreateUserUseCase,
    DeactivateUserUseCase,
    EXPORT_COLUMNS,
    ExportUsersUseCase,
    GetUserActivityUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
    UserDetail,
    UserList,
)
from src.depends import get_unit_of_work
from src.domain.entities import USER_MANAGERS, USER_VIEWERS, AuditAction

router = APIRouter(prefix="/users", tags=["Users"])

list_users_action = PrivilegedAction(AuditAction.READ, "users", roles=USER_MANAGERS)
get_user_action = PrivilegedAction(AuditAction.READ, "user", roles=USER_VIEWERS)
create_user_action = PrivilegedAction(AuditAction.CREATE, "user", roles=USER_MANAGERS)
update_user_action = PrivilegedAction(AuditAction.UPDATE, "user", roles=USER_MANAGERS)
change_role_action = PrivilegedAction(AuditAction.ROLE_CHANGE, "user", roles=USER_MANAGERS)
change_status_action = PrivilegedAction(AuditAction.STATUS_CHANGE, "user", roles=USER_MANAGERS)
delete_user_action = PrivilegedAction(AuditAction.DELETE, "user", roles=USER_MANAGERS)
bulk_action = PrivilegedAction(AuditAction.BULK_OPERATION, "users", roles=USER_MANAGERS)
export_action = PrivilegedAction(AuditAction.EXPORT, "users", roles=USER_MANAGERS)
activity_guard = RoleGuard("user", USER_VIEWERS)

RoleName = Literal["super_admin", "admin", "moderator", "user"]


class UserEnvelope(BaseModel):
    user: UserProfile


@router.get("", status_code=status.HTTP_200_OK, response_model=UserList)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    role: Optional[RoleName] = None,
    is_active: Optional[bool] = None,
    action=Depends(list_users_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List users, newest first.

    Filters: search (email or name substring), role, is_active.
    """

    async def handler(ctx: ActionContext):
        return await ListUsersUseCase(uow).execute(
            page=page, limit=limit, search=search, role=role, is_active=is_active
        )

    return await action.run(handler)


class CreateUserRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, description="Initial password (min 8 chars)")
    name: str = Field(..., min_length=1, max_length=255)
    role: RoleName = "user"
    is_active: bool = True


@router.post("", status_code=status.HTTP_201_CREATED, response_model=UserEnvelope)
async def create_user(
    body: CreateUserRequest,
    action=Depends(create_user_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create a user.

    Raises:
        - 403 Forbidden: Creating a super_admin without being one
        - 409 Conflict: Email already exists
    """

    async def handler(ctx: ActionContext):
        command = CreateUserCommand(**body.model_dump())
        result = await CreateUserUseCase(uow).execute(ctx.principal.user, command)
        if result.is_ok():
            ctx.resource_id = result.value.user.id
            ctx.record_changes(None, result.value.after)
        return result

    change = await action.run(handler, payload=body)
    return UserEnvelope(user=change.user)


class BulkOperationRequest(BaseModel):
    action: Literal["activate", "deactivate", "delete"]
    ids: List[UUID] = Field(..., min_length=1, max_length=100)


@router.post("/bulk", status_code=status.HTTP_200_OK, response_model=BulkOperationResult)
async def bulk_operation(
    body: BulkOperationRequest,
    action=Depends(bulk_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Activate, deactivate or soft-delete several users.

    Raises:
        - 403 Forbidden: The list contains the caller, or a super_admin when
          the caller is not one
    """

    async def handler(ctx: ActionContext):
        ctx.details["affected_ids"] = [str(user_id) for user_id in body.ids]
        return await BulkUserOperationUseCase(uow).execute(
            ctx.principal.user, body.action, body.ids
        )

    return await action.run(handler, payload=body)


class ExportRequest(BaseModel):
    ids: List[UUID] = Field(..., min_length=1, max_length=100)
    format: Literal["csv", "json"] = "csv"


class UserExport(BaseModel):
    users: List[UserProfile]
    count: int


def users_csv(users: List[UserProfile]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    for user in users:
        row = user.model_dump()
        writer.writerow([row[column] for column in EXPORT_COLUMNS])
    return output.getvalue()


@router.post("/export", status_code=status.HTTP_200_OK, response_model=UserExport)
async def export_users(
    body: ExportRequest,
    action=Depends(export_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Download the public fields of the selected users as CSV (default) or JSON.
    """

    async def handler(ctx: ActionContext):
        result = await ExportUsersUseCase(uow).execute(body.ids)
        if result.is_ok():
            ctx.details["exported_count"] = len(result.value)
            ctx.details["format"] = body.format
        return result

    users = await action.run(handler, payload=body)
    if body.format == "json":
        return UserExport(users=users, count=len(users))

    filename = f"users_{datetime.utcnow().strftime('%Y%m%d_%H%M%S')}.csv"
    return Response(
        content=users_csv(users),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserDetail)
async def get_user(
    user_id: UUID,
    action=Depends(get_user_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """User profile plus the 10 most recent audit events of that user."""

    async def handler(ctx: ActionContext):
        return await GetUserUseCase(uow).execute(user_id)

    return await action.run(handler)


class UpdateUserRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    role: Optional[RoleName] = None
    is_active: Optional[bool] = None


@router.put("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserEnvelope)
async def update_user(
    user_id: UUID,
    body: UpdateUserRequest,
    action=Depends(update_user_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update a user. Editing yourself ignores role and is_active.

    Raises:
        - 403 Forbidden: Editing or assigning super_admin without being one
        - 404 Not Found: Unknown user
        - 409 Conflict: Email already exists
    """

    async def handler(ctx: ActionContext):
        result = await UpdateUserUseCase(uow).execute(
            ctx.principal.user, user_id, body.model_dump(exclude_unset=True, exclude_none=True)
        )
        if result.is_ok():
            ctx.record_changes(result.value.before, result.value.after)
        return result

    change = await action.run(handler, payload=body)
    return UserEnvelope(user=change.user)


class ChangeRoleRequest(BaseModel):
    role: RoleName


@router.patch("/{user_id}/role", status_code=status.HTTP_200_OK, response_model=UserEnvelope)
async def change_role(
    user_id: UUID,
    body: ChangeRoleRequest,
    action=Depends(change_role_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change a user's role.

    Raises:
        - 403 Forbidden: Changing your own role, or touching super_admin without being one
        - 404 Not Found: Unknown user
    """

    async def handler(ctx: ActionContext):
        result = await ChangeRoleUseCase(uow).execute(ctx.principal.user, user_id, body.role)
        if result.is_ok():
            ctx.record_changes(result.value.before, result.value.after)
        return result

    change = await action.run(handler, payload=body)
    return UserEnvelope(user=change.user)


class ChangeStatusRequest(BaseModel):
    is_active: bool


@router.patch("/{user_id}/status", status_code=status.HTTP_200_OK, response_model=UserEnvelope)
async def change_status(
    user_id: UUID,
    body: ChangeStatusRequest,
    action=Depends(change_status_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Activate or deactivate a user. Deactivation revokes the user's sessions.

    Raises:
        - 403 Forbidden: Changing your own status, or a super_admin's without being one
        - 404 Not Found: Unknown user
    """

    async def handler(ctx: ActionContext):
        result = await ChangeStatusUseCase(uow).execute(
            ctx.principal.user, user_id, body.is_active
        )
        if result.is_ok():
            ctx.record_changes(result.value.before, result.value.after)
        return result

    change = await action.run(handler, payload=body)
    return UserEnvelope(user=change.user)


@router.delete("/{user_id}", status_code=status.HTTP_200_OK)
async def delete_user(
    user_id: UUID,
    action=Depends(delete_user_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Soft-delete a user: the account is deactivated and its sessions revoked.
    Audit events keep referencing it.

    Raises:
        - 403 Forbidden: Deleting yourself, or a super_admin without being one
        - 404 Not Found: Unknown user
    """

    async def handler(ctx: ActionContext):
        result = await DeactivateUserUseCase(uow).execute(ctx.principal.user, user_id)
        if result.is_ok():
            ctx.record_changes(result.value.before, result.value.after)
        return result

    await action.run(handler)
    return {"message": "User deactivated successfully"}


@router.get("/{user_id}/activity", status_code=status.HTTP_200_OK)
async def user_activity(
    user_id: UUID,
    limit: int = Query(20, ge=1, le=100),
    cursor: Optional[str] = None,
    principal=Depends(activity_guard),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Audit events performed by a user, newest first, cursor-paginated."""
    result = await GetUserActivityUseCase(uow).execute(user_id, limit=limit, cursor=cursor)
    if result.is_err():
        raise to_exception(result.error)
    return result.value
