"""Read path into the synced platform records.

The analytics pipeline never talks to vendor APIs directly. Connectors
sync each platform's users into the record store; correlation reads the
latest snapshot back, one platform at a time.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field

from pydantic import ValidationError
from sqlalchemy.orm import Session

from saas_analytics.core.config import Settings, get_settings
from saas_analytics.core.database import SessionLocal
from saas_analytics.core.exceptions import InvalidRecord
from saas_analytics.models.platform import PlatformSeatCost, PlatformUser
from saas_analytics.schemas.enums import Platform
from saas_analytics.schemas.identity import PlatformUserRecord

logger = logging.getLogger(__name__)


@dataclass
class PlatformRecords:
    """One platform's usable records plus the ones that had to be skipped."""

    platform: Platform
    records: list[PlatformUserRecord] = field(default_factory=list)
    invalid: list[InvalidRecord] = field(default_factory=list)


class PlatformRecordStore(ABC):
    """Source of per-platform user records and seat costs for a company.

    Implementations must be safe to call from several threads at once;
    the analytics service reads every platform concurrently.
    """

    @abstractmethod
    def list_platform_users(self, company_id: str, platform: Platform) -> PlatformRecords:
        """Return the latest synced user records for one platform.

        Raises:
            PlatformFetchFailure: If the platform's records cannot be read
        """

    @abstractmethod
    def get_seat_costs(self, company_id: str) -> dict[Platform, float]:
        """Return the monthly per-seat cost for every platform."""


def default_seat_costs(settings: Settings) -> dict[Platform, float]:
    """Configured reference seat cost for each platform."""
    return {
        platform: settings.get_default_seat_cost(platform.value)
        for platform in Platform
    }


class SqlPlatformRecordStore(PlatformRecordStore):
    """Record store backed by the ``platform_users`` table.

    Each call opens its own session so concurrent platform reads never
    share a connection.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        settings: Settings | None = None,
    ):
        self.session_factory = session_factory
        self.settings = settings or get_settings()

    def list_platform_users(self, company_id: str, platform: Platform) -> PlatformRecords:
        db = self.session_factory()
        try:
            rows = (
                db.query(PlatformUser)
                .filter(
                    PlatformUser.company_id == company_id,
                    PlatformUser.platform == platform.value,
                )
                .order_by(PlatformUser.external_id)
                .all()
            )
            result = PlatformRecords(platform=platform)
            for row in rows:
                try:
                    result.records.append(self._to_record(row, platform))
                except ValidationError as e:
                    error = InvalidRecord(
                        platform.value, row.external_id, _first_error(e)
                    )
                    logger.warning(f"Skipping stored record: {error}")
                    result.invalid.append(error)
            return result
        finally:
            db.close()

    def get_seat_costs(self, company_id: str) -> dict[Platform, float]:
        costs = default_seat_costs(self.settings)

        db = self.session_factory()
        try:
            billed = (
                db.query(PlatformSeatCost)
                .filter(PlatformSeatCost.company_id == company_id)
                .all()
            )
        finally:
            db.close()

        for row in billed:
            try:
                costs[Platform(row.platform)] = row.monthly_cost
            except ValueError:
                logger.warning(
                    f"Ignoring seat cost for unknown platform {row.platform!r} "
                    f"(company {company_id})"
                )
        return costs

    @staticmethod
    def _to_record(row: PlatformUser, platform: Platform) -> PlatformUserRecord:
        return PlatformUserRecord(
            platform=platform,
            external_id=row.external_id,
            email=row.email,
            display_name=row.display_name or "",
            suspended=bool(row.suspended),
            is_admin=bool(row.is_admin),
            mfa_enabled=bool(row.mfa_enabled),
            mfa_enforced=bool(row.mfa_enforced),
            last_login=row.last_login,
            created_at=row.account_created_at,
            monthly_seat_cost=row.monthly_seat_cost,
            synced_at=row.synced_at,
        )


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "")
