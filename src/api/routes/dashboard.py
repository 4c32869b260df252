"""
Dashboard API Routes

Overview statistics, audit analytics and system health for the admin dashboard.
"""

import time
from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status

from src.adapter.database import Database
from src.api.error import to_exception
from src.api.utils.privileged import RoleGuard
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.dashboard import (
    GetAnalyticsUseCase,
    GetDashboardStatsUseCase,
    GetSystemHealthUseCase,
)
from src.depends import get_database, get_unit_of_work
from src.domain.entities import DASHBOARD_VIEWERS, USER_MANAGERS

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

stats_guard = RoleGuard("dashboard", DASHBOARD_VIEWERS)
analytics_guard = RoleGuard("analytics", USER_MANAGERS)
system_health_guard = RoleGuard("system_health", USER_MANAGERS)


@router.get("/stats", status_code=status.HTTP_200_OK)
async def get_stats(
    principal=Depends(stats_guard),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """User and content counts plus the latest audit activity."""
    result = await GetDashboardStatsUseCase(uow).execute()
    if result.is_err():
        raise to_exception(result.error)
    return result.value


@router.get("/analytics", status_code=status.HTTP_200_OK)
async def get_analytics(
    period: Literal["7d", "30d", "90d", "1y"] = Query("30d"),
    principal=Depends(analytics_guard),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Logins per day, top actions, failure rate and average action duration."""
    result = await GetAnalyticsUseCase(uow).execute(period)
    if result.is_err():
        raise to_exception(result.error)
    return result.value


@router.get("/system-health", status_code=status.HTTP_200_OK)
async def get_system_health(
    request: Request,
    principal=Depends(system_health_guard),
    uow: UnitOfWork = Depends(get_unit_of_work),
    database: Database = Depends(get_database),
):
    """Database reachability, uptime and the failure rate of the last hour."""
    uptime = time.monotonic() - request.app.state.started_at
    result = await GetSystemHealthUseCase(uow).execute(await database.ping(), uptime)
    if result.is_err():
        raise to_exception(result.error)
    return result.value
