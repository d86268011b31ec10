"""Security risk scoring for cross-platform identities.

Each condition contributes a fixed number of points independently of the
others; the total is capped at 100. Buckets are derived from the final
score (see ``RiskBucket.for_score``).
"""

from saas_analytics.schemas.enums import MembershipActivity
from saas_analytics.schemas.identity import (
    CrossPlatformIdentity,
    GhostStatus,
    SecurityRisk,
)

ADMIN_WITHOUT_2FA_POINTS = 40
SUSPENDED_WITH_ACCESS_POINTS = 35
GHOST_POINTS = 15
UNENFORCED_MFA_ADMIN_POINTS = 10
MAX_RISK_SCORE = 100


def score_security_risk(
    identity: CrossPlatformIdentity,
    ghost_status: GhostStatus,
) -> SecurityRisk:
    """Calculate the security risk score for an identity.

    Conditions:
    - Admin on a platform without MFA enabled there (+40)
    - Suspended somewhere while another membership still grants live
      access, i.e. is unsuspended with a recent login (+35)
    - Ghost user (+15)
    - Admin somewhere with MFA enrolled but enforced nowhere (+10)
    """
    records = identity.platforms

    admin_without_2fa_platforms = [
        platform for platform, record in records.items()
        if record.is_admin and not record.mfa_enabled
    ]
    suspended_platforms = [
        platform for platform, record in records.items() if record.suspended
    ]
    has_live_access = any(
        not record.suspended
        and ghost_status.activity.get(platform) == MembershipActivity.ACTIVE
        for platform, record in records.items()
    )

    admin_without_2fa = bool(admin_without_2fa_platforms)
    suspended_with_access = bool(suspended_platforms) and has_live_access

    is_admin = any(record.is_admin for record in records.values())
    mfa_enforced = any(record.mfa_enforced for record in records.values())

    risk_score = 0
    if admin_without_2fa:
        risk_score += ADMIN_WITHOUT_2FA_POINTS
    if suspended_with_access:
        risk_score += SUSPENDED_WITH_ACCESS_POINTS
    if ghost_status.is_ghost:
        risk_score += GHOST_POINTS
    # Never stacks with admin_without_2fa
    if is_admin and not mfa_enforced and not admin_without_2fa:
        risk_score += UNENFORCED_MFA_ADMIN_POINTS

    return SecurityRisk(
        risk_score=min(risk_score, MAX_RISK_SCORE),
        admin_without_2fa=admin_without_2fa,
        suspended_with_access=suspended_with_access,
        admin_without_2fa_platforms=admin_without_2fa_platforms,
        suspended_platforms=suspended_platforms,
    )
