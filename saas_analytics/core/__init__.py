"""Core module initialization."""

from saas_analytics.core.config import Settings, get_settings
from saas_analytics.core.exceptions import (
    AllPlatformsUnreachable,
    AnalyticsError,
    InvalidRecord,
    MissingCompanyContext,
    PlatformFetchFailure,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "AnalyticsError",
    "MissingCompanyContext",
    "PlatformFetchFailure",
    "InvalidRecord",
    "AllPlatformsUnreachable",
]
