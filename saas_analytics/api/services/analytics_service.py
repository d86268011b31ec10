"""Cross-platform identity analytics service.

Runs the request-scoped pipeline for one company: fetch every enabled
platform concurrently, correlate records into identities, classify each
identity, and roll the result up for the dashboard. Nothing is cached;
every call recomputes from the record store.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from saas_analytics.api.services.record_store import (
    PlatformRecords,
    PlatformRecordStore,
    default_seat_costs,
)
from saas_analytics.core.analytics import (
    GhostPolicy,
    build_dashboard,
    correlate_records,
    detect_ghost,
    estimate_license_waste,
    score_security_risk,
)
from saas_analytics.core.config import Settings, get_settings
from saas_analytics.core.exceptions import (
    AllPlatformsUnreachable,
    MissingCompanyContext,
    PlatformFetchFailure,
)
from saas_analytics.core.retry import RetryPolicy, call_with_retry
from saas_analytics.schemas.dashboard import (
    DashboardResult,
    LicenseOptimizationReport,
    LicenseOptimizationSummary,
)
from saas_analytics.schemas.enums import Platform, WarningKind
from saas_analytics.schemas.identity import (
    CorrelationResult,
    CorrelationSummary,
    CrossPlatformIdentity,
    PlatformUserRecord,
    PlatformWarning,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _wasteful(identities: list[CrossPlatformIdentity]) -> list[CrossPlatformIdentity]:
    wasteful = [i for i in identities if i.license_waste.wasted_cost > 0]
    return sorted(wasteful, key=lambda i: (-i.license_waste.wasted_cost, i.primary_email))


@dataclass
class FetchOutcome:
    """Everything the fetch stage produced for one company."""

    records: dict[Platform, list[PlatformUserRecord]] = field(default_factory=dict)
    reachable: list[Platform] = field(default_factory=list)
    warnings: list[PlatformWarning] = field(default_factory=list)
    seat_costs: dict[Platform, float] = field(default_factory=dict)


class CrossPlatformAnalyticsService:
    """Service for cross-platform identity analytics."""

    def __init__(
        self,
        store: PlatformRecordStore,
        settings: Settings | None = None,
        now_fn: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.now_fn = now_fn or _utcnow
        self.policy = GhostPolicy.from_settings(self.settings)
        self.retry_policy = RetryPolicy(
            max_retries=self.settings.fetch_max_retries,
            backoff_factor=self.settings.fetch_backoff_factor,
            max_wait=self.settings.fetch_timeout_seconds,
        )
        self.platforms = self._enabled_platforms()

    def _enabled_platforms(self) -> list[Platform]:
        enabled = []
        for name in self.settings.enabled_platforms:
            try:
                enabled.append(Platform(name.strip().lower()))
            except ValueError:
                logger.warning(f"Ignoring unknown platform in configuration: {name!r}")
        return sorted(set(enabled), key=lambda p: p.order)

    # =========================================================================
    # Fetch stage
    # =========================================================================

    async def _fetch_platform(self, company_id: str, platform: Platform) -> PlatformRecords:
        return await call_with_retry(
            self.retry_policy, self.store.list_platform_users, company_id, platform
        )

    async def _fetch_seat_costs(self, company_id: str) -> dict[Platform, float]:
        return await call_with_retry(self.retry_policy, self.store.get_seat_costs, company_id)

    async def _fetch_all(self, company_id: str, timeout: float | None = None) -> FetchOutcome:
        """Fetch every enabled platform concurrently.

        Fetches still running when ``timeout`` expires are cancelled and
        reported as timeout warnings; failed fetches become fetch-failure
        warnings. Only when no platform answers does the fetch fail.

        Cancelling a timed-out fetch abandons it but cannot interrupt its
        worker thread: a slow store call keeps its executor thread until it
        returns, and its result is discarded.

        Raises:
            AllPlatformsUnreachable: If no platform's records could be read
        """
        if not self.platforms:
            raise AllPlatformsUnreachable(company_id, [])

        timeout = self.settings.fetch_timeout_seconds if timeout is None else timeout

        tasks = {
            platform: asyncio.create_task(self._fetch_platform(company_id, platform))
            for platform in self.platforms
        }
        seat_cost_task = asyncio.create_task(self._fetch_seat_costs(company_id))

        done, pending = await asyncio.wait(
            [*tasks.values(), seat_cost_task], timeout=timeout
        )
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        outcome = FetchOutcome()

        # Walk platforms in enumeration order so warnings are deterministic
        for platform, task in tasks.items():
            if task not in done:
                message = f"{platform.display_name} fetch did not finish within {timeout:g}s"
                logger.warning(f"Company {company_id}: {message}")
                outcome.warnings.append(
                    PlatformWarning(platform=platform, kind=WarningKind.TIMEOUT, message=message)
                )
                continue

            error = task.exception()
            if error is not None:
                failure = (
                    error if isinstance(error, PlatformFetchFailure)
                    else PlatformFetchFailure(platform.value, str(error) or type(error).__name__)
                )
                logger.warning(f"Company {company_id}: {failure}")
                outcome.warnings.append(
                    PlatformWarning(
                        platform=platform, kind=WarningKind.FETCH_FAILURE, message=str(failure)
                    )
                )
                continue

            fetched: PlatformRecords = task.result()
            outcome.records[platform] = fetched.records
            outcome.reachable.append(platform)
            for invalid in fetched.invalid:
                outcome.warnings.append(
                    PlatformWarning(
                        platform=platform,
                        kind=WarningKind.INVALID_RECORD,
                        message=str(invalid),
                        external_id=invalid.external_id,
                    )
                )

        if not outcome.reachable:
            logger.error(f"Company {company_id}: no platform records reachable")
            raise AllPlatformsUnreachable(company_id, [p.value for p in self.platforms])

        if seat_cost_task in done and seat_cost_task.exception() is None:
            outcome.seat_costs = seat_cost_task.result()
        else:
            logger.warning(
                f"Company {company_id}: seat costs unavailable, using configured defaults"
            )
            outcome.seat_costs = default_seat_costs(self.settings)

        return outcome

    # =========================================================================
    # Classification stage
    # =========================================================================

    def _classify(
        self,
        identity: CrossPlatformIdentity,
        seat_costs: dict[Platform, float],
        now: datetime,
    ) -> CrossPlatformIdentity:
        ghost_status = detect_ghost(identity, now, self.policy)
        return identity.model_copy(
            update={
                "ghost_status": ghost_status,
                "security_risks": score_security_risk(identity, ghost_status),
                "license_waste": estimate_license_waste(identity, ghost_status, seat_costs, now),
            }
        )

    # =========================================================================
    # Exposed operations
    # =========================================================================

    async def correlate(self, company_id: str | None, timeout: float | None = None) -> CorrelationResult:
        """Correlate and classify every identity for a company.

        Args:
            company_id: Company whose platforms are read
            timeout: Fetch deadline in seconds; defaults to configuration

        Raises:
            MissingCompanyContext: If no company is given
            AllPlatformsUnreachable: If no platform could be read
        """
        if not company_id:
            raise MissingCompanyContext()

        now = self.now_fn()
        logger.info(f"Correlating identities for company {company_id}")

        fetched = await self._fetch_all(company_id, timeout)
        correlation = correlate_records(fetched.records)
        identities = [
            self._classify(identity, fetched.seat_costs, now)
            for identity in correlation.identities
        ]

        logger.info(
            f"Company {company_id}: {len(identities)} identities from "
            f"{len(fetched.reachable)}/{len(self.platforms)} platforms, "
            f"{len(fetched.warnings)} warnings"
        )

        return CorrelationResult(
            company_id=company_id,
            identities=identities,
            reachable_platforms=fetched.reachable,
            warnings=fetched.warnings,
            conflicts=correlation.conflicts,
            computed_at=now,
        )

    async def summarize(self, company_id: str | None, timeout: float | None = None) -> CorrelationSummary:
        """Run a correlation and report counts only."""
        result = await self.correlate(company_id, timeout)
        identities = result.identities
        return CorrelationSummary(
            message="Cross-platform correlation completed",
            total_users=len(identities),
            ghost_users=sum(1 for i in identities if i.ghost_status.is_ghost),
            security_risks=sum(1 for i in identities if i.security_risks.risk_score > 0),
            license_waste=sum(1 for i in identities if i.license_waste.wasted_cost > 0),
            warnings=result.warnings,
        )

    async def get_ghost_users(self, company_id: str | None) -> list[CrossPlatformIdentity]:
        """Ghost identities, most inactive first."""
        result = await self.correlate(company_id)
        ghosts = [i for i in result.identities if i.ghost_status.is_ghost]
        return sorted(ghosts, key=lambda i: (-i.ghost_status.inactive_days, i.primary_email))

    async def get_security_risks(self, company_id: str | None) -> list[CrossPlatformIdentity]:
        """Identities with a non-zero risk score, highest first."""
        result = await self.correlate(company_id)
        risky = [i for i in result.identities if i.security_risks.risk_score > 0]
        return sorted(risky, key=lambda i: (-i.security_risks.risk_score, i.primary_email))

    async def get_license_waste(self, company_id: str | None) -> list[CrossPlatformIdentity]:
        """Identities wasting license spend, largest waste first."""
        result = await self.correlate(company_id)
        return _wasteful(result.identities)

    async def get_license_optimization(self, company_id: str | None) -> LicenseOptimizationReport:
        """License waste totals, per-platform waste, and the affected users."""
        result = await self.correlate(company_id)
        users = _wasteful(result.identities)

        platform_waste = {platform: 0.0 for platform in Platform}
        total_wasted = 0.0
        total_cost = 0.0
        for identity in users:
            total_wasted += identity.license_waste.wasted_cost
            total_cost += identity.license_waste.total_monthly_cost
            for platform, cost in identity.license_waste.wasted_by_platform.items():
                platform_waste[platform] += cost

        summary = LicenseOptimizationSummary(
            total_wasted_cost=round(total_wasted, 2),
            total_license_cost=round(total_cost, 2),
            waste_percentage=round(total_wasted / total_cost * 100, 1) if total_cost > 0 else 0.0,
            annual_savings_potential=round(total_wasted * 12, 2),
            affected_users=len(users),
        )
        return LicenseOptimizationReport(
            company_id=result.company_id,
            summary=summary,
            platform_waste={p: round(v, 2) for p, v in platform_waste.items()},
            users=users,
            warnings=result.warnings,
        )

    async def get_dashboard(self, company_id: str | None) -> DashboardResult:
        """Dashboard counters and recommendations for a company."""
        result = await self.correlate(company_id)
        dashboard = build_dashboard(
            result.identities,
            result.computed_at,
            max_recommendations=self.settings.max_dashboard_recommendations,
        )
        return DashboardResult(
            company_id=result.company_id,
            dashboard=dashboard,
            reachable_platforms=result.reachable_platforms,
            warnings=result.warnings,
            conflicts=result.conflicts,
        )
