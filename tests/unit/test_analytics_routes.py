"""Tests for analytics API endpoints."""

import pytest

from saas_analytics.api.routes.analytics import get_analytics_service
from saas_analytics.api.services.analytics_service import CrossPlatformAnalyticsService
from saas_analytics.core.auth import jwt_manager
from saas_analytics.core.config import get_settings
from saas_analytics.schemas.enums import Platform
from tests.fixtures import NOW
from tests.fixtures.stores import FakeRecordStore, sample_records


@pytest.fixture
def store():
    return FakeRecordStore(sample_records())


@pytest.fixture
def auth_headers():
    """Bearer token for a user of company-1."""
    token = jwt_manager.create_access_token(
        user_id="test-user-123",
        company_id="company-1",
        email="test@example.com",
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_client(store):
    """Create a test client backed by an in-memory record store."""
    from fastapi.testclient import TestClient

    from saas_analytics.main import app

    settings = get_settings().model_copy(update={"fetch_max_retries": 0})

    def override_service():
        return CrossPlatformAnalyticsService(store, settings=settings, now_fn=lambda: NOW)

    app.dependency_overrides[get_analytics_service] = override_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def test_dashboard(auth_client, auth_headers):
    """Test the executive dashboard payload."""
    response = auth_client.get("/api/v1/analytics/dashboard", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["company_id"] == "company-1"
    overview = data["dashboard"]["overview"]
    assert overview["total_users"] == 4
    assert overview["total_ghost_users"] == 2
    assert overview["total_wasted_cost"] == 23.0
    assert data["dashboard"]["platform_breakdown"]["google-workspace"] == 2
    assert data["dashboard"]["security_risk_breakdown"]["critical"] == 1
    assert len(data["dashboard"]["recommendations"]) == 3
    assert data["warnings"] == []


def test_correlate_summary(auth_client, auth_headers):
    """Test on-demand correlation returns counts."""
    response = auth_client.post("/api/v1/analytics/correlate", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_users"] == 4
    assert data["ghost_users"] == 2
    assert data["security_risks"] == 3
    assert data["license_waste"] == 1


def test_cross_platform_users(auth_client, auth_headers):
    """Test listing every correlated identity."""
    response = auth_client.get("/api/v1/analytics/cross-platform-users", headers=auth_headers)
    assert response.status_code == 200
    identities = response.json()["identities"]
    assert [i["primary_email"] for i in identities] == [
        "a@co.com", "b@co.com", "c@co.com", "d@co.com",
    ]
    assert list(identities[0]["platforms"]) == ["google-workspace", "github"]
    assert identities[1]["security_risks"]["bucket"] == "high"


def test_ghost_users(auth_client, auth_headers):
    response = auth_client.get("/api/v1/analytics/ghost-users", headers=auth_headers)
    assert response.status_code == 200
    assert [u["primary_email"] for u in response.json()] == ["c@co.com", "b@co.com"]


def test_ghost_users_pagination(auth_client, auth_headers):
    response = auth_client.get(
        "/api/v1/analytics/ghost-users", params={"limit": 1, "offset": 1}, headers=auth_headers
    )
    assert response.status_code == 200
    assert [u["primary_email"] for u in response.json()] == ["b@co.com"]


def test_security_risks(auth_client, auth_headers):
    response = auth_client.get("/api/v1/analytics/security-risks", headers=auth_headers)
    assert response.status_code == 200
    scores = [u["security_risks"]["risk_score"] for u in response.json()]
    assert scores == [75, 55, 15]


def test_license_optimization(auth_client, auth_headers):
    response = auth_client.get("/api/v1/analytics/license-optimization", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["summary"]["affected_users"] == 1
    assert data["summary"]["annual_savings_potential"] == 276.0
    assert data["platform_waste"]["zoom"] == 15.0


def test_degraded_response_carries_warnings(auth_client, auth_headers, store):
    store.failing = {Platform.SLACK}
    response = auth_client.get("/api/v1/analytics/dashboard", headers=auth_headers)
    assert response.status_code == 200
    warnings = response.json()["warnings"]
    assert [(w["platform"], w["kind"]) for w in warnings] == [("slack", "fetch_failure")]


def test_all_platforms_unreachable_returns_503(auth_client, auth_headers, store):
    store.failing = set(Platform)
    response = auth_client.get("/api/v1/analytics/dashboard", headers=auth_headers)
    assert response.status_code == 503
    assert response.json()["company_id"] == "company-1"


def test_token_without_company_returns_401(auth_client):
    token = jwt_manager.create_access_token(user_id="test-user-123")
    response = auth_client.get(
        "/api/v1/analytics/dashboard", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Company ID not found in request"


def test_invalid_token_returns_401(auth_client):
    response = auth_client.get(
        "/api/v1/analytics/dashboard", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


def test_correlate_timeout_validated(auth_client, auth_headers):
    response = auth_client.post(
        "/api/v1/analytics/correlate", params={"timeout": 0}, headers=auth_headers
    )
    assert response.status_code == 422
