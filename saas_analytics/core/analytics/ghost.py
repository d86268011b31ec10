"""Ghost user detection."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from saas_analytics.core.config import Settings
from saas_analytics.schemas.enums import MembershipActivity
from saas_analytics.schemas.identity import (
    CrossPlatformIdentity,
    GhostStatus,
    PlatformUserRecord,
)


@dataclass(frozen=True)
class GhostPolicy:
    """Thresholds for ghost and inactivity classification."""

    grace_period_days: int = 14
    inactivity_threshold_days: int = 90

    @classmethod
    def from_settings(cls, settings: Settings) -> "GhostPolicy":
        return cls(
            grace_period_days=settings.ghost_grace_period_days,
            inactivity_threshold_days=settings.inactivity_threshold_days,
        )


def _whole_days(now: datetime, then: datetime) -> int:
    """Whole days elapsed since ``then``, never negative."""
    return max((now - then).days, 0)


def classify_membership(
    record: PlatformUserRecord,
    now: datetime,
    policy: GhostPolicy,
) -> MembershipActivity:
    """Classify one platform membership's activity.

    Args:
        record: The platform membership
        now: Evaluation time (timezone-aware UTC)
        policy: Grace period and inactivity thresholds

    Returns:
        ACTIVE or INACTIVE when a login is recorded, otherwise
        NEVER_LOGGED_IN once the grace period has passed and PENDING before.
    """
    if record.last_login is not None:
        if now - record.last_login > timedelta(days=policy.inactivity_threshold_days):
            return MembershipActivity.INACTIVE
        return MembershipActivity.ACTIVE

    if now - record.created_at > timedelta(days=policy.grace_period_days):
        return MembershipActivity.NEVER_LOGGED_IN
    return MembershipActivity.PENDING


def detect_ghost(
    identity: CrossPlatformIdentity,
    now: datetime,
    policy: GhostPolicy | None = None,
) -> GhostStatus:
    """Compute the ghost status of an identity.

    An identity is a ghost when none of its memberships shows a login within
    the inactivity threshold, however many memberships it holds. A new
    account still inside its grace period shows no activity either; the
    grace period only decides how the membership is labelled.
    """
    policy = policy or GhostPolicy()

    activity = {
        platform: classify_membership(record, now, policy)
        for platform, record in identity.platforms.items()
    }
    is_ghost = not any(status == MembershipActivity.ACTIVE for status in activity.values())

    logins = [r.last_login for r in identity.memberships if r.last_login is not None]
    if logins:
        inactive_days = _whole_days(now, max(logins))
    else:
        inactive_days = _whole_days(now, min(r.created_at for r in identity.memberships))

    never_logged_in = [
        platform for platform, record in identity.platforms.items()
        if record.last_login is None
    ]

    return GhostStatus(
        is_ghost=is_ghost,
        never_logged_in_platforms=never_logged_in,
        inactive_days=inactive_days,
        activity=activity,
    )
