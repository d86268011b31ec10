"""Tests for license waste estimation."""

from saas_analytics.core.analytics import detect_ghost, estimate_license_waste, seat_cost
from saas_analytics.schemas.enums import Platform
from tests.fixtures import NOW, SEAT_COSTS, make_identity, make_record


def _waste(*records, seat_costs=SEAT_COSTS):
    identity = make_identity(*records)
    ghost = detect_ghost(identity, NOW)
    return ghost, estimate_license_waste(identity, ghost, seat_costs, NOW)


class TestSeatCost:
    """Seat cost resolution."""

    def test_billed_cost_overrides_default(self):
        record = make_record(Platform.SLACK, "a@co.com", monthly_seat_cost=6.75)
        assert seat_cost(record, SEAT_COSTS) == 6.75

    def test_falls_back_to_platform_default(self):
        record = make_record(Platform.ZOOM, "a@co.com")
        assert seat_cost(record, SEAT_COSTS) == 15.0

    def test_unknown_platform_cost_is_zero(self):
        record = make_record(Platform.ZOOM, "a@co.com")
        assert seat_cost(record, {}) == 0.0


class TestEstimateLicenseWaste:
    """Test suite for estimate_license_waste."""

    def test_active_user_wastes_nothing(self):
        _, waste = _waste(
            make_record(Platform.GOOGLE_WORKSPACE, "a@co.com"),
            make_record(Platform.SLACK, "a@co.com"),
        )

        assert waste.total_monthly_cost == 20.0
        assert waste.wasted_cost == 0.0
        assert waste.recommendations == []

    def test_ghost_wastes_every_paid_seat(self):
        ghost, waste = _waste(
            make_record(Platform.GOOGLE_WORKSPACE, "b@co.com", login_days_ago=None, created_days_ago=60),
            make_record(Platform.ZOOM, "b@co.com", login_days_ago=120),
            make_record(Platform.AWS, "b@co.com", login_days_ago=None, created_days_ago=60),
        )

        assert ghost.is_ghost is True
        assert waste.total_monthly_cost == 27.0
        assert waste.wasted_cost == waste.total_monthly_cost
        assert waste.wasted_by_platform == {
            Platform.GOOGLE_WORKSPACE: 12.0,
            Platform.ZOOM: 15.0,
        }
        assert waste.recommendations == [
            "Remove unused Google Workspace license: never logged in (ghost user)",
            "Remove unused Zoom license: no login for 120 days (ghost user)",
        ]

    def test_inactive_membership_of_active_user(self):
        """Only the idle seat counts while the user is active elsewhere."""
        ghost, waste = _waste(
            make_record(Platform.SLACK, "c@co.com", login_days_ago=2),
            make_record(Platform.ZOOM, "c@co.com", login_days_ago=100),
        )

        assert ghost.is_ghost is False
        assert waste.total_monthly_cost == 23.0
        assert waste.wasted_cost == 15.0
        assert waste.recommendations == ["Reclaim Zoom license: no login for 100 days"]

    def test_never_logged_in_seat_of_active_user_is_not_waste(self):
        _, waste = _waste(
            make_record(Platform.GOOGLE_WORKSPACE, "d@co.com", login_days_ago=None, created_days_ago=30),
            make_record(Platform.GITHUB, "d@co.com", login_days_ago=5),
        )

        assert waste.total_monthly_cost == 16.0
        assert waste.wasted_cost == 0.0

    def test_costs_rounded_to_cents(self):
        _, waste = _waste(
            make_record(Platform.SLACK, "e@co.com", login_days_ago=300, monthly_seat_cost=0.1),
            make_record(Platform.ZOOM, "e@co.com", login_days_ago=300, monthly_seat_cost=0.2),
        )

        assert waste.total_monthly_cost == 0.3
        assert waste.wasted_cost == 0.3

    def test_ghost_waste_equals_total(self):
        """Ghost identities always waste their whole spend."""
        for login in (None, 91, 365):
            ghost, waste = _waste(
                make_record(Platform.OFFICE365, "f@co.com", login_days_ago=login),
                make_record(Platform.SLACK, "f@co.com", login_days_ago=login),
            )
            assert ghost.is_ghost is True
            assert waste.wasted_cost == waste.total_monthly_cost

    def test_grace_period_seat_does_not_rescue_idle_identity(self):
        """A brand-new unused seat next to an idle one still makes a ghost."""
        ghost, waste = _waste(
            make_record(Platform.ZOOM, "g@co.com", login_days_ago=None, created_days_ago=3),
            make_record(Platform.SLACK, "g@co.com", login_days_ago=200),
        )

        assert ghost.is_ghost is True
        assert waste.total_monthly_cost == 23.0
        assert waste.wasted_cost == 23.0
