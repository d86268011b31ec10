"""Dashboard Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from saas_analytics.schemas.enums import (
    Platform,
    RecommendationPriority,
    RecommendationType,
)
from saas_analytics.schemas.identity import (
    CorrelationConflict,
    CrossPlatformIdentity,
    PlatformWarning,
)


class DashboardOverview(BaseModel):
    """Top-level counters for a company."""

    total_users: int = 0
    total_ghost_users: int = 0
    total_security_risks: int = 0
    total_wasted_cost: float = 0.0
    total_license_cost: float = 0.0
    waste_percentage: float = 0.0


class SecurityRiskBreakdown(BaseModel):
    """Identity counts per risk bucket."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    none: int = 0


class DashboardRecommendation(BaseModel):
    """Ranked dashboard recommendation."""

    type: RecommendationType
    priority: RecommendationPriority
    title: str
    description: str
    impact: str


class DashboardAggregate(BaseModel):
    """Dashboard rollup computed from a company's identity list."""

    overview: DashboardOverview
    platform_breakdown: dict[Platform, int] = Field(default_factory=dict)
    ghost_users_by_platform: dict[Platform, int] = Field(default_factory=dict)
    security_risk_breakdown: SecurityRiskBreakdown
    recommendations: list[DashboardRecommendation] = Field(default_factory=list, max_length=5)
    last_updated: datetime


class DashboardResult(BaseModel):
    """Dashboard plus the warnings collected while building it."""

    company_id: str
    dashboard: DashboardAggregate
    reachable_platforms: list[Platform] = Field(default_factory=list)
    warnings: list[PlatformWarning] = Field(default_factory=list)
    conflicts: list[CorrelationConflict] = Field(default_factory=list)


class LicenseOptimizationSummary(BaseModel):
    """Spend and savings across the identities that waste licenses."""

    total_wasted_cost: float = 0.0
    total_license_cost: float = 0.0
    waste_percentage: float = 0.0
    annual_savings_potential: float = 0.0
    affected_users: int = 0


class LicenseOptimizationReport(BaseModel):
    """License optimization view: summary, per-platform waste, and users."""

    company_id: str
    summary: LicenseOptimizationSummary
    platform_waste: dict[Platform, float] = Field(default_factory=dict)
    users: list[CrossPlatformIdentity] = Field(default_factory=list)
    warnings: list[PlatformWarning] = Field(default_factory=list)
