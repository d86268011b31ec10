"""Tests for the SQL-backed platform record store."""

from datetime import datetime

import pytest

from saas_analytics.api.services.record_store import SqlPlatformRecordStore
from saas_analytics.core.config import get_settings
from saas_analytics.core.sync.platform_users import ingest_platform_users, upsert_seat_cost
from saas_analytics.models.platform import PlatformSeatCost, PlatformUser
from saas_analytics.schemas.enums import Platform
from tests.fixtures.identity_fixtures import GOOGLE_USER, NOW, SLACK_USER, ZOOM_USER


@pytest.fixture
def store(session_factory):
    return SqlPlatformRecordStore(session_factory=session_factory, settings=get_settings())


@pytest.fixture
def seeded(db_session):
    ingest_platform_users(db_session, "company-1", Platform.SLACK, [SLACK_USER], synced_at=NOW)
    ingest_platform_users(
        db_session, "company-1", Platform.GOOGLE_WORKSPACE, [GOOGLE_USER], synced_at=NOW
    )
    ingest_platform_users(db_session, "company-2", Platform.ZOOM, [ZOOM_USER], synced_at=NOW)
    db_session.commit()
    return db_session


class TestListPlatformUsers:
    """Test suite for SqlPlatformRecordStore.list_platform_users."""

    def test_returns_company_platform_records(self, store, seeded):
        result = store.list_platform_users("company-1", Platform.SLACK)

        assert result.platform == Platform.SLACK
        assert result.invalid == []
        assert len(result.records) == 1
        record = result.records[0]
        assert record.email == "alice.smith@example.com"
        assert record.synced_at == NOW
        assert record.created_at.tzinfo is not None

    def test_unconnected_platform_is_empty(self, store, seeded):
        result = store.list_platform_users("company-1", Platform.ZOOM)
        assert result.records == []

    def test_scoped_to_company(self, store, seeded):
        result = store.list_platform_users("company-2", Platform.SLACK)
        assert result.records == []

    def test_invalid_stored_row_is_skipped(self, store, seeded):
        seeded.add(
            PlatformUser(
                company_id="company-1",
                platform="slack",
                external_id="U-broken",
                email="broken",
                account_created_at=datetime(2024, 1, 1),
            )
        )
        seeded.commit()

        result = store.list_platform_users("company-1", Platform.SLACK)

        assert len(result.records) == 1
        assert len(result.invalid) == 1
        assert result.invalid[0].external_id == "U-broken"


class TestGetSeatCosts:
    """Seat cost reference resolution."""

    def test_defaults_from_configuration(self, store):
        costs = store.get_seat_costs("company-1")

        assert set(costs) == set(Platform)
        assert costs[Platform.ZOOM] == get_settings().seat_cost_zoom

    def test_billing_record_overrides_default(self, store, db_session):
        upsert_seat_cost(db_session, "company-1", Platform.SLACK, 7.25)
        db_session.commit()

        costs = store.get_seat_costs("company-1")

        assert costs[Platform.SLACK] == 7.25
        assert store.get_seat_costs("company-2")[Platform.SLACK] == get_settings().seat_cost_slack

    def test_unknown_platform_row_ignored(self, store, db_session):
        db_session.add(PlatformSeatCost(company_id="company-1", platform="myspace", monthly_cost=1.0))
        db_session.commit()

        costs = store.get_seat_costs("company-1")

        assert set(costs) == set(Platform)
