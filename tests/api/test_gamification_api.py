"""Tests for gamification endpoints (records, activities, badges, levels)"""
import pytest
from fastapi.testclient import TestClient

from fitquest import config
from fitquest.api.middleware import limiter
from fitquest.api.routes import get_gamification_service
from fitquest.api.server import create_api_application
from fitquest.models.gamification import BadgeKey

API_KEY = "test_key_123"
HEADERS = {"Authorization": f"Bearer {API_KEY}"}


@pytest.fixture
def client(monkeypatch, memory_store, service):
    """TestClient on an in-memory store with a fixed clock"""
    monkeypatch.setattr(config, "API_KEYS", [API_KEY])
    monkeypatch.setattr(limiter, "enabled", False)

    app = create_api_application(store=memory_store)
    app.dependency_overrides[get_gamification_service] = lambda: service

    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# Auth Tests
# ============================================================================

def test_missing_api_key(client, test_user_id):
    """Test requests without a key are rejected"""
    response = client.get(f"/api/v1/users/{test_user_id}/gamification")

    assert response.status_code in (401, 403)


def test_invalid_api_key(client, test_user_id):
    """Test requests with an unknown key are rejected"""
    response = client.get(
        f"/api/v1/users/{test_user_id}/gamification",
        headers={"Authorization": "Bearer wrong_key"}
    )

    assert response.status_code == 401


def test_no_keys_configured(client, monkeypatch):
    """Test the API refuses requests when no keys are configured"""
    monkeypatch.setattr(config, "API_KEYS", [])

    response = client.get("/api/v1/badges", headers=HEADERS)

    assert response.status_code == 503


# ============================================================================
# Record & Activity Tests
# ============================================================================

def test_get_gamification_missing(client, test_user_id):
    """Test a user without a record gets 404"""
    response = client.get(f"/api/v1/users/{test_user_id}/gamification", headers=HEADERS)

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "RecordNotFoundError"
    assert "request_id" in data


def test_record_workout_then_read(client, test_user_id):
    """Test recording a workout and reading the record back"""
    response = client.post(f"/api/v1/users/{test_user_id}/activities/workout", headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["result"]["streak"] == 1
    assert data["result"]["xp"]["new_total_xp"] == 50
    assert [b["key"] for b in data["result"]["badges_unlocked"]] == ["FIRST_WORKOUT", "QUICK_START"]
    assert len(data["badge_names"]) == 2

    response = client.get(f"/api/v1/users/{test_user_id}/gamification", headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    record = data["gamification"]
    assert record["xp"] == 50
    assert record["levelName"] == "Bronze"
    assert record["totalWorkouts"] == 1
    assert record["streaks"]["workout"] == 1
    assert record["badges"]["FIRST_WORKOUT"] is True
    assert data["level"]["next_level_name"] == "Silver"
    assert data["level"]["xp_to_next_level"] == 450


def test_record_unknown_category(client, test_user_id):
    """Test unknown categories are rejected"""
    response = client.post(f"/api/v1/users/{test_user_id}/activities/sleep", headers=HEADERS)

    assert response.status_code == 422


def test_user_badges(client, test_user_id):
    """Test badge overview after logging water"""
    client.post(f"/api/v1/users/{test_user_id}/activities/water", headers=HEADERS)

    response = client.get(f"/api/v1/users/{test_user_id}/badges", headers=HEADERS)

    assert response.status_code == 200
    badges = response.json()["badges"]
    assert {b["key"] for b in badges["unlocked"]} == {"FIRST_WATER", "QUICK_START"}
    assert badges["total_badges"] == len(BadgeKey)


# ============================================================================
# Catalog & Level Tests
# ============================================================================

def test_badge_catalog(client):
    """Test the full catalog is listed"""
    response = client.get("/api/v1/badges", headers=HEADERS)

    assert response.status_code == 200
    assert len(response.json()["badges"]) == len(BadgeKey)


@pytest.mark.parametrize("xp,level", [(0, "Bronze"), (500, "Silver"), (1499, "Silver"), (4000, "Platinum")])
def test_level_for_xp(client, xp, level):
    """Test level lookup by XP"""
    response = client.get(f"/api/v1/levels/{xp}", headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["level_name"] == level


def test_level_negative_xp(client):
    """Test negative XP is a validation error"""
    response = client.get("/api/v1/levels/-5", headers=HEADERS)

    assert response.status_code == 422
    assert response.json()["error"] == "ValidationError"


# ============================================================================
# Health & Metrics Tests
# ============================================================================

def test_health_check_no_auth_required(client):
    """Test health is public and reports the store"""
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["store"] == "connected"


def test_metrics_endpoint(client, test_user_id):
    """Test recorder metrics are exported"""
    client.post(f"/api/v1/users/{test_user_id}/activities/meal", headers=HEADERS)

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "activities_recorded_total" in response.text
    assert "fitquest_http_requests_total" in response.text
