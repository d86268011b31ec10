"""Cross-platform identity correlation.

Groups per-platform user records into identities keyed by normalized
email. The join is pure: identical input always produces identical
identities in identical order, whatever order the platform fetches
completed in.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from saas_analytics.schemas.enums import Platform
from saas_analytics.schemas.identity import (
    CorrelationConflict,
    CrossPlatformIdentity,
    PlatformUserRecord,
    normalize_email,
)

logger = logging.getLogger(__name__)

_NEVER_SYNCED = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Correlation:
    """Output of a correlation run."""

    identities: list[CrossPlatformIdentity] = field(default_factory=list)
    conflicts: list[CorrelationConflict] = field(default_factory=list)


def _freshness_key(record: PlatformUserRecord) -> tuple[datetime, str]:
    """Sort key for duplicate resolution: newest sync wins, then external id."""
    return (record.synced_at or _NEVER_SYNCED, record.external_id)


def _resolve_duplicates(
    email: str,
    platform: Platform,
    records: list[PlatformUserRecord],
) -> tuple[PlatformUserRecord, list[CorrelationConflict]]:
    """Pick the freshest record and report every dropped one."""
    ranked = sorted(records, key=_freshness_key, reverse=True)
    kept = ranked[0]
    conflicts = [
        CorrelationConflict(
            platform=platform,
            email=email,
            kept_external_id=kept.external_id,
            dropped_external_id=dropped.external_id,
        )
        for dropped in ranked[1:]
    ]
    for conflict in conflicts:
        logger.warning(
            f"Duplicate {platform.value} record for {email}: kept "
            f"{conflict.kept_external_id}, dropped {conflict.dropped_external_id}"
        )
    return kept, conflicts


def correlate_records(
    records_by_platform: Mapping[Platform, Iterable[PlatformUserRecord]],
) -> Correlation:
    """Unify per-platform records into cross-platform identities.

    Args:
        records_by_platform: Records fetched from each reachable platform.
            A record is always filed under its own ``platform`` field.

    Returns:
        Identities sorted by normalized email, plus one conflict per
        duplicate record dropped within a platform.
    """
    grouped: dict[str, dict[Platform, list[PlatformUserRecord]]] = {}

    for records in records_by_platform.values():
        for record in records:
            email = normalize_email(record.email)
            grouped.setdefault(email, {}).setdefault(record.platform, []).append(record)

    identities: list[CrossPlatformIdentity] = []
    conflicts: list[CorrelationConflict] = []

    for email in sorted(grouped):
        memberships: dict[Platform, PlatformUserRecord] = {}
        for platform in sorted(grouped[email], key=lambda p: p.order):
            kept, dropped = _resolve_duplicates(email, platform, grouped[email][platform])
            memberships[platform] = kept
            conflicts.extend(dropped)

        sync_times = [r.synced_at for r in memberships.values() if r.synced_at is not None]
        identities.append(
            CrossPlatformIdentity(
                primary_email=email,
                platforms=memberships,
                last_sync=max(sync_times) if sync_times else None,
            )
        )

    return Correlation(identities=identities, conflicts=conflicts)
