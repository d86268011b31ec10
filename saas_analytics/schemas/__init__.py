"""Pydantic schemas for identity analytics and API responses."""

from saas_analytics.schemas.dashboard import (
    DashboardAggregate,
    DashboardOverview,
    DashboardRecommendation,
    DashboardResult,
    LicenseOptimizationReport,
    LicenseOptimizationSummary,
    SecurityRiskBreakdown,
)
from saas_analytics.schemas.enums import (
    MembershipActivity,
    Platform,
    RecommendationPriority,
    RecommendationType,
    RiskBucket,
    WarningKind,
)
from saas_analytics.schemas.identity import (
    CorrelationConflict,
    CorrelationResult,
    CorrelationSummary,
    CrossPlatformIdentity,
    GhostStatus,
    LicenseWaste,
    PlatformUserRecord,
    PlatformWarning,
    SecurityRisk,
    normalize_email,
)

__all__ = [
    # Enums
    "Platform",
    "MembershipActivity",
    "RiskBucket",
    "WarningKind",
    "RecommendationType",
    "RecommendationPriority",
    # Identity
    "PlatformUserRecord",
    "CrossPlatformIdentity",
    "GhostStatus",
    "SecurityRisk",
    "LicenseWaste",
    "CorrelationConflict",
    "PlatformWarning",
    "CorrelationResult",
    "CorrelationSummary",
    "normalize_email",
    # Dashboard
    "DashboardOverview",
    "SecurityRiskBreakdown",
    "DashboardRecommendation",
    "DashboardAggregate",
    "DashboardResult",
    "LicenseOptimizationSummary",
    "LicenseOptimizationReport",
]
