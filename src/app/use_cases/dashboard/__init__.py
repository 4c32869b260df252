"""
Dashboard Use Cases

Read-only aggregates for the admin dashboard.
"""

from .get_dashboard_stats_use_case import GetDashboardStatsUseCase
from .get_analytics_use_case import GetAnalyticsUseCase, PERIODS
from .get_system_health_use_case import GetSystemHealthUseCase

__all__ = [
    "GetDashboardStatsUseCase",
    "GetAnalyticsUseCase",
    "GetSystemHealthUseCase",
    "PERIODS",
]
