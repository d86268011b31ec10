"""Cross-platform identity analytics API routes."""

from fastapi import APIRouter, Depends, Query

from saas_analytics.api.services.analytics_service import CrossPlatformAnalyticsService
from saas_analytics.api.services.record_store import SqlPlatformRecordStore
from saas_analytics.core.auth import get_company_id, get_current_user
from saas_analytics.schemas.dashboard import DashboardResult, LicenseOptimizationReport
from saas_analytics.schemas.identity import (
    CorrelationResult,
    CorrelationSummary,
    CrossPlatformIdentity,
)

router = APIRouter(
    prefix="/api/v1/analytics",
    tags=["analytics"],
    dependencies=[Depends(get_current_user)],
)


def get_analytics_service() -> CrossPlatformAnalyticsService:
    """Dependency building the analytics service over the SQL record store."""
    return CrossPlatformAnalyticsService(SqlPlatformRecordStore())


@router.get("/dashboard", response_model=DashboardResult)
async def get_dashboard(
    company_id: str = Depends(get_company_id),
    service: CrossPlatformAnalyticsService = Depends(get_analytics_service),
):
    """Get the executive dashboard: totals, breakdowns, and recommendations."""
    return await service.get_dashboard(company_id)


@router.post("/correlate", response_model=CorrelationSummary)
async def correlate_users(
    timeout: float | None = Query(default=None, gt=0, le=300),
    company_id: str = Depends(get_company_id),
    service: CrossPlatformAnalyticsService = Depends(get_analytics_service),
):
    """Run cross-platform correlation on demand and return counts.

    Args:
        timeout: Fetch deadline in seconds (defaults to configuration)
    """
    return await service.summarize(company_id, timeout)


@router.get("/cross-platform-users", response_model=CorrelationResult)
async def get_cross_platform_users(
    timeout: float | None = Query(default=None, gt=0, le=300),
    company_id: str = Depends(get_company_id),
    service: CrossPlatformAnalyticsService = Depends(get_analytics_service),
):
    """Get every correlated identity, ordered by email."""
    return await service.correlate(company_id, timeout)


@router.get("/ghost-users", response_model=list[CrossPlatformIdentity])
async def get_ghost_users(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    company_id: str = Depends(get_company_id),
    service: CrossPlatformAnalyticsService = Depends(get_analytics_service),
):
    """Get ghost users, most inactive first."""
    users = await service.get_ghost_users(company_id)
    return users[offset : offset + limit]


@router.get("/security-risks", response_model=list[CrossPlatformIdentity])
async def get_security_risks(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    company_id: str = Depends(get_company_id),
    service: CrossPlatformAnalyticsService = Depends(get_analytics_service),
):
    """Get users with a non-zero security risk score, highest first."""
    users = await service.get_security_risks(company_id)
    return users[offset : offset + limit]


@router.get("/license-optimization", response_model=LicenseOptimizationReport)
async def get_license_optimization(
    company_id: str = Depends(get_company_id),
    service: CrossPlatformAnalyticsService = Depends(get_analytics_service),
):
    """Get license waste totals, per-platform waste, and affected users."""
    return await service.get_license_optimization(company_id)
