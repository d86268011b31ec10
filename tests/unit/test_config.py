"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from saas_analytics.core.config import Settings


class TestListSettings:
    """Comma-separated list settings."""

    def test_enabled_platforms_from_env(self, monkeypatch):
        monkeypatch.setenv("ENABLED_PLATFORMS", "github, slack")

        settings = Settings()

        assert settings.enabled_platforms == ["github", "slack"]

    def test_single_enabled_platform(self, monkeypatch):
        monkeypatch.setenv("ENABLED_PLATFORMS", "zoom")
        assert Settings().enabled_platforms == ["zoom"]

    def test_cors_origins_from_env(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com,https://b.example.com")

        settings = Settings()

        assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]

    def test_default_platforms_in_platform_order(self, monkeypatch):
        monkeypatch.delenv("ENABLED_PLATFORMS", raising=False)

        settings = Settings()

        assert settings.enabled_platforms[0] == "google-workspace"
        assert settings.enabled_platforms[-1] == "office365"


class TestProductionGuards:
    """Settings that are refused in production."""

    def test_debug_rejected_in_production(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("DEBUG", "true")

        with pytest.raises(ValidationError):
            Settings()

    def test_wildcard_cors_rejected_in_production(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("CORS_ORIGINS", "*")

        with pytest.raises(ValidationError):
            Settings()

    def test_wildcard_cors_allowed_in_development(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.setenv("CORS_ORIGINS", "*")

        settings = Settings()

        assert settings.is_production is False
        assert settings.cors_origins == ["*"]
