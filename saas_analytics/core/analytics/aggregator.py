"""Dashboard aggregation over a company's identity list."""

from collections.abc import Sequence
from datetime import datetime

from saas_analytics.schemas.dashboard import (
    DashboardAggregate,
    DashboardOverview,
    DashboardRecommendation,
    SecurityRiskBreakdown,
)
from saas_analytics.schemas.enums import (
    Platform,
    RecommendationPriority,
    RecommendationType,
    RiskBucket,
)
from saas_analytics.schemas.identity import CrossPlatformIdentity

MAX_RECOMMENDATIONS = 5


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def build_recommendations(
    overview: DashboardOverview,
    critical_risks: int,
    limit: int = MAX_RECOMMENDATIONS,
) -> list[DashboardRecommendation]:
    """Build dashboard recommendations in fixed priority order.

    Order: ghost user removal, critical security risks, license waste.
    """
    recommendations: list[DashboardRecommendation] = []

    if overview.total_ghost_users > 0:
        recommendations.append(
            DashboardRecommendation(
                type=RecommendationType.COST,
                priority=RecommendationPriority.HIGH,
                title=f"Remove {_plural(overview.total_ghost_users, 'ghost user')}",
                description=(
                    f"Save ${overview.total_wasted_cost:.2f}/month by removing unused licenses"
                ),
                impact=f"${overview.total_wasted_cost * 12:.2f}/year potential savings",
            )
        )

    if critical_risks > 0:
        recommendations.append(
            DashboardRecommendation(
                type=RecommendationType.SECURITY,
                priority=RecommendationPriority.CRITICAL,
                title=f"Fix {_plural(critical_risks, 'critical security risk')}",
                description="Admin users without 2FA and suspended users with active access",
                impact="High security vulnerability",
            )
        )

    if overview.total_license_cost > 0:
        recommendations.append(
            DashboardRecommendation(
                type=RecommendationType.COST,
                priority=RecommendationPriority.MEDIUM,
                title=f"{overview.waste_percentage:.1f}% license waste detected",
                description="Optimize license allocation across platforms",
                impact=f"{overview.waste_percentage:.1f}% cost reduction opportunity",
            )
        )

    return recommendations[:limit]


def build_dashboard(
    identities: Sequence[CrossPlatformIdentity],
    now: datetime,
    max_recommendations: int = MAX_RECOMMENDATIONS,
) -> DashboardAggregate:
    """Roll classified identities up into dashboard counters.

    All counters are gathered in a single pass over the identity list.
    Identities missing a classification contribute only to membership
    counts.
    """
    platform_breakdown = {platform: 0 for platform in Platform}
    ghost_users_by_platform = {platform: 0 for platform in Platform}
    buckets = {bucket: 0 for bucket in RiskBucket}

    total_ghost_users = 0
    total_security_risks = 0
    total_wasted_cost = 0.0
    total_license_cost = 0.0

    for identity in identities:
        for platform in identity.platforms:
            platform_breakdown[platform] += 1

        ghost = identity.ghost_status
        if ghost is not None and ghost.is_ghost:
            total_ghost_users += 1
            for platform in ghost.never_logged_in_platforms:
                ghost_users_by_platform[platform] += 1

        risk = identity.security_risks
        if risk is not None:
            buckets[risk.bucket] += 1
            if risk.risk_score > 0:
                total_security_risks += 1
        else:
            buckets[RiskBucket.NONE] += 1

        waste = identity.license_waste
        if waste is not None:
            total_wasted_cost += waste.wasted_cost
            total_license_cost += waste.total_monthly_cost

    waste_percentage = 0.0
    if total_license_cost > 0:
        waste_percentage = round(total_wasted_cost / total_license_cost * 100, 1)

    overview = DashboardOverview(
        total_users=len(identities),
        total_ghost_users=total_ghost_users,
        total_security_risks=total_security_risks,
        total_wasted_cost=round(total_wasted_cost, 2),
        total_license_cost=round(total_license_cost, 2),
        waste_percentage=waste_percentage,
    )

    return DashboardAggregate(
        overview=overview,
        platform_breakdown=platform_breakdown,
        ghost_users_by_platform=ghost_users_by_platform,
        security_risk_breakdown=SecurityRiskBreakdown(
            critical=buckets[RiskBucket.CRITICAL],
            high=buckets[RiskBucket.HIGH],
            medium=buckets[RiskBucket.MEDIUM],
            low=buckets[RiskBucket.LOW],
            none=buckets[RiskBucket.NONE],
        ),
        recommendations=build_recommendations(
            overview,
            critical_risks=buckets[RiskBucket.CRITICAL],
            limit=max_recommendations,
        ),
        last_updated=now,
    )
