"""
Content routes

Public reads and privileged writes for services, leaders, updates,
achievements and keyed content sections. The four item kinds share one
router factory; only their payload schemas and list filters differ.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import to_exception
from src.api.utils.privileged import ActionContext, PrivilegedAction
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.content import (
    ACHIEVEMENTS,
    LEADERS,
    SERVICES,
    UPDATES,
    ContentKind,
    CreateContentUseCase,
    DeleteContentSectionUseCase,
    DeleteContentUseCase,
    GetContentUseCase,
    ListContentSectionsUseCase,
    ListContentUseCase,
    SaveContentSectionUseCase,
    UpdateContentUseCase,
)
from src.depends import get_unit_of_work
from src.domain.entities import CONTENT_EDITORS, AuditAction, UpdateType


# ============================================================================
# Payload schemas
# ============================================================================


class ContentFields(BaseModel):
    is_active: Optional[bool] = None
    display_order: Optional[int] = Field(None, ge=0)


class ServiceCreate(ContentFields):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    icon: Optional[str] = Field(None, max_length=255)


class ServiceUpdate(ContentFields):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    icon: Optional[str] = Field(None, max_length=255)


class LeaderCreate(ContentFields):
    name: str = Field(..., min_length=1, max_length=255)
    position: str = Field(..., min_length=1, max_length=255)
    bio: Optional[str] = None
    image: Optional[str] = Field(None, max_length=1024)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=64)


class LeaderUpdate(ContentFields):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    position: Optional[str] = Field(None, min_length=1, max_length=255)
    bio: Optional[str] = None
    image: Optional[str] = Field(None, max_length=1024)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=64)


class UpdateCreate(ContentFields):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    type: UpdateType = UpdateType.news
    is_featured: bool = False
    publish_date: Optional[datetime] = None


class UpdateUpdate(ContentFields):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    type: Optional[UpdateType] = None
    is_featured: Optional[bool] = None
    publish_date: Optional[datetime] = None


class AchievementCreate(ContentFields):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    date: datetime
    image: Optional[str] = Field(None, max_length=1024)


class AchievementUpdate(ContentFields):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    image: Optional[str] = Field(None, max_length=1024)


def _values(body: BaseModel) -> Dict[str, Any]:
    data = body.model_dump(exclude_unset=True, exclude_none=True)
    # timestamps are stored as naive UTC
    for field, value in data.items():
        if isinstance(value, datetime) and value.tzinfo is not None:
            data[field] = value.astimezone(timezone.utc).replace(tzinfo=None)
    return data


# ============================================================================
# Item routes
# ============================================================================


def build_content_router(
    kind: ContentKind,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.name}", tags=["Content"])

    create_action = PrivilegedAction(AuditAction.CREATE, kind.resource, roles=CONTENT_EDITORS)
    update_action = PrivilegedAction(AuditAction.UPDATE, kind.resource, roles=CONTENT_EDITORS)
    delete_action = PrivilegedAction(AuditAction.DELETE, kind.resource, roles=CONTENT_EDITORS)

    @router.get("/{item_id}", status_code=status.HTTP_200_OK)
    async def get_item(item_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
        result = await GetContentUseCase(uow, kind).execute(item_id)
        if result.is_err():
            raise to_exception(result.error)
        return {"item": result.value}

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_item(
        body: create_schema,
        action=Depends(create_action),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ):
        async def handler(ctx: ActionContext):
            result = await CreateContentUseCase(uow, kind).execute(_values(body))
            if result.is_ok():
                ctx.resource_id = result.value.item["id"]
                ctx.record_changes(None, result.value.after)
            return result

        change = await action.run(handler, payload=body)
        return {"item": change.item}

    @router.put("/{item_id}", status_code=status.HTTP_200_OK)
    async def update_item(
        item_id: UUID,
        body: update_schema,
        action=Depends(update_action),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ):
        async def handler(ctx: ActionContext):
            result = await UpdateContentUseCase(uow, kind).execute(item_id, _values(body))
            if result.is_ok():
                ctx.record_changes(result.value.before, result.value.after)
            return result

        change = await action.run(handler, payload=body)
        return {"item": change.item}

    @router.delete("/{item_id}", status_code=status.HTTP_200_OK)
    async def delete_item(
        item_id: UUID,
        action=Depends(delete_action),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ):
        async def handler(ctx: ActionContext):
            result = await DeleteContentUseCase(uow, kind).execute(item_id)
            if result.is_ok():
                ctx.record_changes(result.value.before, None)
            return result

        await action.run(handler)
        return {"message": f"{kind.label} deleted successfully"}

    return router


services_router = build_content_router(SERVICES, ServiceCreate, ServiceUpdate)
leaders_router = build_content_router(LEADERS, LeaderCreate, LeaderUpdate)
updates_router = build_content_router(UPDATES, UpdateCreate, UpdateUpdate)
achievements_router = build_content_router(ACHIEVEMENTS, AchievementCreate, AchievementUpdate)


@services_router.get("", status_code=status.HTTP_200_OK)
async def list_services(uow: UnitOfWork = Depends(get_unit_of_work)):
    """Active services in display order."""
    result = await ListContentUseCase(uow, SERVICES).execute()
    return {"items": result.value}


@leaders_router.get("", status_code=status.HTTP_200_OK)
async def list_leaders(uow: UnitOfWork = Depends(get_unit_of_work)):
    """Active leaders in display order."""
    result = await ListContentUseCase(uow, LEADERS).execute()
    return {"items": result.value}


@updates_router.get("", status_code=status.HTTP_200_OK)
async def list_updates(
    type: Optional[UpdateType] = Query(None, description="news, job or announcement"),
    featured: Optional[bool] = Query(None, description="Only featured (true) or regular (false)"),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Active updates, newest publish date first."""
    result = await ListContentUseCase(uow, UPDATES).execute(
        {"type": type, "is_featured": featured}
    )
    return {"items": result.value}


@achievements_router.get("", status_code=status.HTTP_200_OK)
async def list_achievements(uow: UnitOfWork = Depends(get_unit_of_work)):
    """Active achievements in display order."""
    result = await ListContentUseCase(uow, ACHIEVEMENTS).execute()
    return {"items": result.value}


# ============================================================================
# Content sections
# ============================================================================

sections_router = APIRouter(prefix="/content", tags=["Content"])

save_section_action = PrivilegedAction(
    AuditAction.UPDATE, "content_section", roles=CONTENT_EDITORS
)
delete_section_action = PrivilegedAction(
    AuditAction.DELETE, "content_section", roles=CONTENT_EDITORS
)


class SectionPayload(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None


@sections_router.get("", status_code=status.HTTP_200_OK)
async def list_sections(uow: UnitOfWork = Depends(get_unit_of_work)):
    """Active content sections ordered by key."""
    result = await ListContentSectionsUseCase(uow).execute()
    return {"sections": result.value}


@sections_router.put("/{key}", status_code=status.HTTP_200_OK)
async def save_section(
    key: str,
    body: SectionPayload,
    action=Depends(save_section_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create or update the section stored under key.

    Raises:
        - 400 Bad Request: Invalid key, or title/content missing for a new section
    """

    async def handler(ctx: ActionContext):
        result = await SaveContentSectionUseCase(uow).execute(key, _values(body))
        if result.is_ok():
            ctx.resource_id = result.value.item["key"]
            ctx.details["created"] = result.value.created
            ctx.record_changes(result.value.before, result.value.after)
        return result

    change = await action.run(handler, payload=body)
    return {"section": change.item, "created": change.created}


@sections_router.delete("/{key}", status_code=status.HTTP_200_OK)
async def delete_section(
    key: str,
    action=Depends(delete_section_action),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    async def handler(ctx: ActionContext):
        result = await DeleteContentSectionUseCase(uow).execute(key)
        if result.is_ok():
            ctx.record_changes(result.value.before, None)
        return result

    await action.run(handler)
    return {"message": "Content section deleted successfully"}
