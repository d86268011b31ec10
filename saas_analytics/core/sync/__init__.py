"""Platform user ingestion."""

from saas_analytics.core.sync.adapters import PLATFORM_ADAPTERS, adapt_user, parse_timestamp
from saas_analytics.core.sync.platform_users import (
    IngestResult,
    ingest_platform_users,
    upsert_seat_cost,
)

__all__ = [
    "PLATFORM_ADAPTERS",
    "adapt_user",
    "parse_timestamp",
    "IngestResult",
    "ingest_platform_users",
    "upsert_seat_cost",
]
