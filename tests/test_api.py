"""
Tests for API endpoints
"""
import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

import sys
sys.path.insert(0, '.')

from rescue365.api.main import (
    app,
    get_store,
    get_notifier_dep,
    get_auth,
    get_optional_auth,
    get_geocoder_dep,
)
from rescue365.core.config import settings
from rescue365.core.exceptions import AuthError
from rescue365.services.auth import AuthSession, AuthUser
from rescue365.services.geocoding import AddressParts


class TestAPIEndpoints:
    """Test suite for API endpoints."""

    @pytest.fixture(autouse=True)
    def _client(self, mock_store, mock_notifier):
        self.store = mock_store
        self.notifier = mock_notifier
        self.auth = MagicMock()
        self.geocoder = MagicMock()

        app.dependency_overrides[get_store] = lambda: self.store
        app.dependency_overrides[get_notifier_dep] = lambda: self.notifier
        app.dependency_overrides[get_auth] = lambda: self.auth
        app.dependency_overrides[get_optional_auth] = lambda: self.auth
        app.dependency_overrides[get_geocoder_dep] = lambda: self.geocoder
        self.client = TestClient(app)
        yield
        app.dependency_overrides.clear()

    def test_health(self):
        response = self.client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["store"] in ("supabase", "sql")

    def test_create_report(self):
        response = self.client.post("/api/v1/reports", json={
            "animal_type": "Dog",
            "description": "Hurt paw",
            "latitude": 0.01,
            "longitude": 0.01,
            "image_url": "file:///photos/dog.jpg",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "Pending"
        assert data["id"] == "6"

    def test_create_incomplete_report(self):
        response = self.client.post("/api/v1/reports", json={
            "animal_type": "Dog",
            "description": "Hurt paw",
            "latitude": 0.01,
            "longitude": 0.01,
        })

        assert response.status_code == 400
        assert response.json()["detail"]["missing_fields"] == ["image_url"]
        assert self.store.calls == []

    def test_create_store_failure(self):
        self.store.fail_with = "insert failed"
        response = self.client.post("/api/v1/reports", json={
            "animal_type": "Dog",
            "description": "Hurt paw",
            "latitude": 0.01,
            "longitude": 0.01,
            "image_url": "file:///photos/dog.jpg",
        })
        assert response.status_code == 502

    def test_list_for_rescuer(self):
        response = self.client.get(
            "/api/v1/reports", params={"role": "rescuer", "latitude": 0, "longitude": 0}
        )

        assert response.status_code == 200
        data = response.json()
        assert [r["id"] for r in data["reports"]] == ["1", "2"]
        assert data["radius_meters"] == pytest.approx(16093.4)

    def test_list_for_rescuer_without_location(self):
        response = self.client.get("/api/v1/reports", params={"role": "rescuer"})
        assert response.json()["count"] == 0

    def test_list_for_vet(self):
        response = self.client.get("/api/v1/reports", params={"role": "vet"})
        data = response.json()
        assert [r["id"] for r in data["reports"]] == ["2", "5"]
        assert data["radius_meters"] is None

    def test_list_requires_valid_role(self):
        assert self.client.get("/api/v1/reports").status_code == 422
        assert self.client.get("/api/v1/reports", params={"role": "admin"}).status_code == 422

    def test_list_store_failure(self):
        self.store.fail_with = "timeout"
        response = self.client.get("/api/v1/reports", params={"role": "vet"})
        assert response.status_code == 502

    def test_complete_rescue(self):
        response = self.client.put(
            "/api/v1/reports/2/status", json={"status": "Rescue Complete"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["bystander_notified"] is True
        assert data["message"] == 'Rescue status set to "Rescue Complete".'
        assert len(self.notifier.sent_notifications) == 1

    def test_start_rescue(self):
        response = self.client.put(
            "/api/v1/reports/1/status", json={"status": "Rescue In Progress"}
        )
        assert response.json()["bystander_notified"] is False

    def test_update_unknown_report(self):
        response = self.client.put(
            "/api/v1/reports/99/status", json={"status": "Rescue Complete"}
        )
        assert response.status_code == 404

    def test_update_empty_status(self):
        response = self.client.put("/api/v1/reports/1/status", json={"status": ""})
        assert response.status_code == 422

    def test_forward_only_rejects_reopening_complete_rescue(self, monkeypatch):
        monkeypatch.setattr(settings, "transition_policy", "forward_only")

        response = self.client.put("/api/v1/reports/3/status", json={"status": "Pending"})

        assert response.status_code == 409
        assert "update_status" not in self.store.calls
        assert self.store.list_all()[2].status == "Rescue Complete"

    def test_forward_only_allows_completing(self, monkeypatch):
        monkeypatch.setattr(settings, "transition_policy", "forward_only")

        response = self.client.put(
            "/api/v1/reports/2/status", json={"status": "Rescue Complete"}
        )

        assert response.status_code == 200
        assert self.store.list_all()[1].status == "Rescue Complete"

    def test_status_update_when_reports_unavailable(self):
        self.store.fail_with = "timeout"
        response = self.client.put(
            "/api/v1/reports/1/status", json={"status": "Rescue Complete"}
        )
        assert response.status_code == 502
        assert "update_status" not in self.store.calls

    def test_signed_in_reporter_is_notified(self):
        self.auth.get_user.return_value = AuthUser(id="user-1")

        created = self.client.post(
            "/api/v1/reports",
            json={
                "animal_type": "Dog",
                "description": "Hurt paw",
                "latitude": 0.01,
                "longitude": 0.01,
                "image_url": "file:///photos/dog.jpg",
            },
            headers={"Authorization": "Bearer tok"},
        )
        report_id = created.json()["id"]
        self.auth.get_user.assert_called_once_with("tok")

        response = self.client.put(
            f"/api/v1/reports/{report_id}/status", json={"status": "Rescue Complete"}
        )

        assert response.json()["bystander_notified"] is True
        notification = self.notifier.sent_notifications[0]
        assert notification.recipient == "user-1"
        assert notification.body.startswith("The dog you reported")

    def test_anonymous_report_has_no_reporter(self):
        self.client.post("/api/v1/reports", json={
            "animal_type": "Dog",
            "description": "Hurt paw",
            "latitude": 0.01,
            "longitude": 0.01,
            "image_url": "file:///photos/dog.jpg",
        })
        self.auth.get_user.assert_not_called()
        assert self.store.list_all()[-1].reported_by is None

    def test_create_report_with_rejected_token(self):
        self.auth.get_user.side_effect = AuthError("JWT expired")
        response = self.client.post(
            "/api/v1/reports",
            json={"animal_type": "Dog"},
            headers={"Authorization": "Bearer stale"},
        )
        assert response.status_code == 401
        assert self.store.calls == []

    def test_reports_map(self):
        response = self.client.get(
            "/api/v1/map/reports", params={"latitude": 0, "longitude": 0}
        )
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]

    def test_navigation(self):
        response = self.client.get(
            "/api/v1/navigation", params={"latitude": 1.5, "longitude": 2.5, "platform": "ios"}
        )
        assert response.json()["url"] == "maps://?q=1.5,2.5"

    def test_navigation_invalid_platform(self):
        response = self.client.get(
            "/api/v1/navigation", params={"latitude": 1.5, "longitude": 2.5, "platform": "palm"}
        )
        assert response.status_code == 422

    def test_reverse_geocode(self):
        self.geocoder.reverse.return_value = AddressParts(
            name="Main St", city="Springfield", region="IL"
        )
        response = self.client.get(
            "/api/v1/geocode/reverse", params={"latitude": 39.8, "longitude": -89.6}
        )
        assert response.json()["address"] == "Main St, Springfield, IL"

    def test_reverse_geocode_unknown(self):
        self.geocoder.reverse.return_value = None
        response = self.client.get(
            "/api/v1/geocode/reverse", params={"latitude": 0, "longitude": 0}
        )
        assert response.status_code == 200
        assert response.json()["address"] == ""

    def test_google_sign_in(self):
        self.auth.authorize_url.return_value = "https://example.supabase.co/auth/v1/authorize?provider=google"
        response = self.client.get("/auth/google")
        assert response.json()["url"].endswith("provider=google")

    def test_create_session(self):
        self.auth.set_session.return_value = AuthSession(
            access_token="a", refresh_token="r", user=AuthUser(id="user-1")
        )
        response = self.client.post("/auth/session", json={
            "callback_url": "rescue365://auth/callback#access_token=a&refresh_token=r"
        })
        assert response.status_code == 200
        assert response.json()["user_id"] == "user-1"

    def test_create_session_without_tokens(self):
        response = self.client.post("/auth/session", json={"callback_url": "rescue365://x"})
        assert response.status_code == 400

    def test_create_session_rejected(self):
        self.auth.set_session.side_effect = AuthError("invalid JWT")
        response = self.client.post("/auth/session", json={
            "callback_url": "rescue365://auth/callback#access_token=a&refresh_token=r"
        })
        assert response.status_code == 401
