"""Platform user snapshot ingestion."""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from saas_analytics.core.exceptions import InvalidRecord
from saas_analytics.core.sync.adapters import adapt_user
from saas_analytics.models.platform import PlatformSeatCost, PlatformUser
from saas_analytics.schemas.enums import Platform

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """Counts from one platform snapshot ingestion."""

    platform: Platform
    stored: int = 0
    skipped: int = 0
    replaced: int = 0
    errors: list[str] = field(default_factory=list)


def _naive_utc(value: datetime | None) -> datetime | None:
    """Stored timestamps are naive UTC."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _raw(payload: dict[str, Any]) -> dict[str, Any]:
    return json.loads(json.dumps(payload, default=str))


def ingest_platform_users(
    db: Session,
    company_id: str,
    platform: Platform,
    payloads: Iterable[dict[str, Any]],
    synced_at: datetime | None = None,
) -> IngestResult:
    """Replace a company's snapshot of one platform's users.

    Invalid payloads are skipped and logged; the rest of the batch is
    stored. When two payloads share an external id, the later one wins.

    Args:
        db: Database session (caller commits)
        company_id: Company owning the connection
        platform: Platform the payloads came from
        payloads: User objects as returned by the vendor API
        synced_at: Fetch time; defaults to now

    Returns:
        IngestResult with stored, skipped and replaced counts
    """
    synced_at = synced_at or datetime.now(timezone.utc)
    result = IngestResult(platform=platform)
    logger.info(f"Ingesting {platform.value} users for company {company_id}")

    rows: dict[str, PlatformUser] = {}
    for payload in payloads:
        try:
            record = adapt_user(platform, payload, synced_at=synced_at)
        except InvalidRecord as e:
            logger.warning(f"Skipping {platform.value} user: {e}")
            result.skipped += 1
            result.errors.append(str(e))
            continue

        rows[record.external_id] = PlatformUser(
            company_id=company_id,
            platform=platform.value,
            external_id=record.external_id,
            email=record.email,
            display_name=record.display_name,
            suspended=record.suspended,
            is_admin=record.is_admin,
            mfa_enabled=record.mfa_enabled,
            mfa_enforced=record.mfa_enforced,
            last_login=_naive_utc(record.last_login),
            account_created_at=_naive_utc(record.created_at),
            monthly_seat_cost=record.monthly_seat_cost,
            raw_data=_raw(payload),
            synced_at=_naive_utc(synced_at),
        )

    # Snapshot semantics: the previous sync for this platform is discarded
    result.replaced = (
        db.query(PlatformUser)
        .filter(
            PlatformUser.company_id == company_id,
            PlatformUser.platform == platform.value,
        )
        .delete(synchronize_session=False)
    )
    db.add_all(rows.values())
    db.flush()
    result.stored = len(rows)

    logger.info(
        f"Ingested {result.stored} {platform.value} users for company {company_id} "
        f"({result.skipped} skipped, {result.replaced} replaced)"
    )
    return result


def upsert_seat_cost(
    db: Session,
    company_id: str,
    platform: Platform,
    monthly_cost: float,
) -> PlatformSeatCost:
    """Record the billed per-seat monthly cost for a platform."""
    if monthly_cost < 0:
        raise ValueError("monthly_cost must not be negative")

    row = (
        db.query(PlatformSeatCost)
        .filter(
            PlatformSeatCost.company_id == company_id,
            PlatformSeatCost.platform == platform.value,
        )
        .first()
    )
    if row is None:
        row = PlatformSeatCost(company_id=company_id, platform=platform.value)
        db.add(row)
    row.monthly_cost = monthly_cost
    row.synced_at = _naive_utc(datetime.now(timezone.utc))
    db.flush()
    return row
