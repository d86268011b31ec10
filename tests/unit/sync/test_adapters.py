"""Tests for vendor payload adapters."""

from datetime import datetime, timezone

import pytest

from saas_analytics.core.exceptions import InvalidRecord
from saas_analytics.core.sync.adapters import (
    PLATFORM_ADAPTERS,
    adapt_user,
    parse_timestamp,
)
from saas_analytics.schemas.enums import Platform
from tests.fixtures.identity_fixtures import (
    AWS_USER,
    GITHUB_USER,
    GOOGLE_USER,
    MICROSOFT_USER,
    NOW,
    SLACK_USER,
    ZOOM_USER,
)


class TestParseTimestamp:
    """Vendor timestamp parsing."""

    def test_iso_with_z_suffix(self):
        parsed = parse_timestamp("2026-05-30T09:15:00.000Z")
        assert parsed == datetime(2026, 5, 30, 9, 15, tzinfo=timezone.utc)

    def test_epoch_seconds(self):
        assert parse_timestamp(1700000000) == datetime.fromtimestamp(1700000000, tz=timezone.utc)

    def test_naive_datetime_is_utc(self):
        parsed = parse_timestamp(datetime(2026, 1, 1))
        assert parsed.tzinfo == timezone.utc

    @pytest.mark.parametrize("value", [None, "", "not a date", "1970-01-01T00:00:00.000Z", 0])
    def test_missing_values(self, value):
        assert parse_timestamp(value) is None


class TestAdaptUser:
    """Test suite for adapt_user."""

    def test_every_platform_has_an_adapter(self):
        assert set(PLATFORM_ADAPTERS) == set(Platform)

    def test_google_workspace(self):
        record = adapt_user(Platform.GOOGLE_WORKSPACE, GOOGLE_USER, synced_at=NOW)

        assert record.platform == Platform.GOOGLE_WORKSPACE
        assert record.external_id == "108942234567890123456"
        assert record.email == "alice.smith@example.com"
        assert record.display_name == "Alice Smith"
        assert record.is_admin is True
        assert record.mfa_enabled is True
        assert record.mfa_enforced is True
        assert record.suspended is False
        assert record.last_login == datetime(2026, 5, 30, 9, 15, tzinfo=timezone.utc)
        assert record.synced_at == NOW

    def test_google_never_logged_in(self):
        payload = {**GOOGLE_USER, "lastLoginTime": "1970-01-01T00:00:00.000Z"}
        record = adapt_user(Platform.GOOGLE_WORKSPACE, payload)
        assert record.last_login is None

    def test_github_org_admin(self):
        record = adapt_user(Platform.GITHUB, GITHUB_USER)

        assert record.external_id == "583231"
        assert record.is_admin is True
        assert record.mfa_enabled is False
        assert record.last_login is None

    def test_github_noreply_email_rejected(self):
        payload = {**GITHUB_USER, "email": "583231+asmith@users.noreply.github.com"}

        with pytest.raises(InvalidRecord) as exc_info:
            adapt_user(Platform.GITHUB, payload)

        assert exc_info.value.platform == "github"
        assert exc_info.value.external_id == "583231"

    def test_slack(self):
        record = adapt_user(Platform.SLACK, SLACK_USER)

        assert record.email == "alice.smith@example.com"
        assert record.display_name == "Alice Smith"
        assert record.mfa_enabled is True
        assert record.last_login == datetime.fromtimestamp(1780000000, tz=timezone.utc)

    def test_slack_deleted_user_is_suspended(self):
        record = adapt_user(Platform.SLACK, {**SLACK_USER, "deleted": True})
        assert record.suspended is True

    def test_zoom(self):
        record = adapt_user(Platform.ZOOM, ZOOM_USER)

        assert record.display_name == "Bob Jones"
        assert record.suspended is True
        assert record.is_admin is False

    def test_aws_email_from_tags(self):
        record = adapt_user(Platform.AWS, AWS_USER)

        assert record.external_id == "AIDACKCEVSQ6C2EXAMPLE"
        assert record.email == "bob@example.com"
        assert record.is_admin is True
        assert record.mfa_enabled is False
        assert record.last_login is None

    @pytest.mark.parametrize("platform", [Platform.AZURE, Platform.OFFICE365])
    def test_microsoft_graph_user(self, platform):
        record = adapt_user(platform, MICROSOFT_USER)

        assert record.platform == platform
        assert record.email == "carol@example.com"
        assert record.suspended is True
        assert record.is_admin is True
        assert record.mfa_enabled is True
        assert record.last_login == datetime(2026, 5, 20, 8, 0, tzinfo=timezone.utc)

    def test_missing_email(self):
        payload = {**SLACK_USER, "profile": {"real_name": "Bot"}}

        with pytest.raises(InvalidRecord) as exc_info:
            adapt_user(Platform.SLACK, payload)

        assert exc_info.value.reason == "missing email"

    def test_malformed_email(self):
        with pytest.raises(InvalidRecord):
            adapt_user(Platform.ZOOM, {**ZOOM_USER, "email": "bob at example"})

    def test_missing_creation_time(self):
        payload = {k: v for k, v in GOOGLE_USER.items() if k != "creationTime"}

        with pytest.raises(InvalidRecord):
            adapt_user(Platform.GOOGLE_WORKSPACE, payload)

    def test_missing_id(self):
        payload = {k: v for k, v in ZOOM_USER.items() if k != "id"}

        with pytest.raises(InvalidRecord) as exc_info:
            adapt_user(Platform.ZOOM, payload)

        assert exc_info.value.external_id is None
