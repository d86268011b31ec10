"""Identity correlation and scoring engine."""

from saas_analytics.core.analytics.aggregator import build_dashboard, build_recommendations
from saas_analytics.core.analytics.correlator import Correlation, correlate_records
from saas_analytics.core.analytics.ghost import GhostPolicy, classify_membership, detect_ghost
from saas_analytics.core.analytics.license import estimate_license_waste, seat_cost
from saas_analytics.core.analytics.risk import score_security_risk

__all__ = [
    "Correlation",
    "correlate_records",
    "GhostPolicy",
    "classify_membership",
    "detect_ghost",
    "score_security_risk",
    "estimate_license_waste",
    "seat_cost",
    "build_dashboard",
    "build_recommendations",
]
