"""Tests for database session helpers."""

import pytest

from saas_analytics.core.database import SessionLocal, get_db_context, init_db
from saas_analytics.models.platform import PlatformSeatCost


@pytest.fixture
def app_db():
    """Application database with tables created, cleaned up afterwards."""
    init_db()
    yield
    with SessionLocal() as db:
        db.query(PlatformSeatCost).filter(
            PlatformSeatCost.company_id == "db-context-company"
        ).delete()
        db.commit()


def _seat_cost_rows():
    with SessionLocal() as db:
        return (
            db.query(PlatformSeatCost)
            .filter(PlatformSeatCost.company_id == "db-context-company")
            .count()
        )


class TestGetDbContext:
    """Test suite for get_db_context."""

    def test_commits_on_success(self, app_db):
        with get_db_context() as db:
            db.add(PlatformSeatCost(company_id="db-context-company", platform="slack", monthly_cost=8.0))

        assert _seat_cost_rows() == 1

    def test_rolls_back_on_error(self, app_db):
        with pytest.raises(RuntimeError):
            with get_db_context() as db:
                db.add(PlatformSeatCost(company_id="db-context-company", platform="zoom", monthly_cost=15.0))
                db.flush()
                raise RuntimeError("sync job failed")

        assert _seat_cost_rows() == 0
