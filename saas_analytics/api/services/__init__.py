"""API services."""

from saas_analytics.api.services.analytics_service import CrossPlatformAnalyticsService
from saas_analytics.api.services.record_store import (
    PlatformRecords,
    PlatformRecordStore,
    SqlPlatformRecordStore,
)

__all__ = [
    "CrossPlatformAnalyticsService",
    "PlatformRecordStore",
    "PlatformRecords",
    "SqlPlatformRecordStore",
]
