"""License waste estimation."""

from collections.abc import Mapping
from datetime import datetime

from saas_analytics.schemas.enums import MembershipActivity, Platform
from saas_analytics.schemas.identity import (
    CrossPlatformIdentity,
    GhostStatus,
    LicenseWaste,
    PlatformUserRecord,
)


def seat_cost(record: PlatformUserRecord, seat_costs: Mapping[Platform, float]) -> float:
    """Monthly cost of a membership: its own billed cost, else the platform default."""
    if record.monthly_seat_cost is not None:
        return record.monthly_seat_cost
    return seat_costs.get(record.platform, 0.0)


def _waste_reason(
    record: PlatformUserRecord,
    activity: MembershipActivity | None,
    now: datetime,
) -> str:
    if activity == MembershipActivity.INACTIVE and record.last_login is not None:
        return f"no login for {max((now - record.last_login).days, 0)} days"
    if record.last_login is None:
        return "never logged in"
    return "no recent activity"


def estimate_license_waste(
    identity: CrossPlatformIdentity,
    ghost_status: GhostStatus,
    seat_costs: Mapping[Platform, float],
    now: datetime,
) -> LicenseWaste:
    """Estimate monthly license cost and waste for an identity.

    A ghost wastes every paid seat it holds. Otherwise only memberships
    classified INACTIVE count as waste, while the identity stays active
    elsewhere.

    Args:
        identity: The correlated identity
        ghost_status: Output of ghost detection for the same identity
        seat_costs: Per-platform reference cost for seats without a billed cost
        now: Evaluation time, used in recommendation wording

    Returns:
        LicenseWaste with one recommendation per wasted seat, in platform order
    """
    total = 0.0
    wasted = 0.0
    wasted_by_platform: dict[Platform, float] = {}
    recommendations: list[str] = []

    for platform, record in identity.platforms.items():
        cost = seat_cost(record, seat_costs)
        if cost <= 0:
            continue
        total += cost

        activity = ghost_status.activity.get(platform)
        if ghost_status.is_ghost:
            wasted += cost
            wasted_by_platform[platform] = cost
            recommendations.append(
                f"Remove unused {platform.display_name} license: "
                f"{_waste_reason(record, activity, now)} (ghost user)"
            )
        elif activity == MembershipActivity.INACTIVE:
            wasted += cost
            wasted_by_platform[platform] = cost
            recommendations.append(
                f"Reclaim {platform.display_name} license: "
                f"{_waste_reason(record, activity, now)}"
            )

    return LicenseWaste(
        total_monthly_cost=round(total, 2),
        wasted_cost=round(wasted, 2),
        wasted_by_platform=wasted_by_platform,
        recommendations=recommendations,
    )
