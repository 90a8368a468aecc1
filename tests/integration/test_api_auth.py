"""Integration tests for login and permission checks."""

from fastapi.testclient import TestClient


class TestLogin:
    """Tests for login-code authentication."""

    def test_login_returns_user_without_code(self, api_client: TestClient):
        response = api_client.post("/api/v1/auth/login", json={"code": "12345"})

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "admin@cookie.com"
        assert data["role"] == "admin"
        assert data["permissions"]["manage_users"] is True
        assert data["last_login"] is not None
        assert "login_code" not in data

    def test_login_with_wrong_code(self, api_client: TestClient):
        response = api_client.post("/api/v1/auth/login", json={"code": "99999"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_LOGIN_CODE"

    def test_me(self, api_client: TestClient, admin_headers):
        response = api_client.get("/api/v1/auth/me", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["id"] == 1


class TestPermissions:
    """Tests for the X-Login-Code header and permission flags."""

    def test_missing_header_returns_error_envelope(self, api_client: TestClient):
        response = api_client.get("/api/v1/products")

        assert response.status_code == 401
        data = response.json()
        assert data["error"]["code"] == "AUTH_REQUIRED"
        assert "request_id" in data
        assert "timestamp" in data

    def test_employee_cannot_manage_users(self, api_client: TestClient, admin_headers):
        created = api_client.post(
            "/api/v1/users",
            json={"email": "anna@cookie.com", "login_code": "4711", "name": "Anna"},
            headers=admin_headers,
        )
        assert created.status_code == 201
        assert created.json()["permissions"]["perform_inventory"] is True

        response = api_client.get("/api/v1/users", headers={"X-Login-Code": "4711"})

        assert response.status_code == 403
        assert response.json()["error"]["details"]["permission"] == "manage_users"

    def test_employee_can_view_products(self, api_client: TestClient, admin_headers):
        api_client.post(
            "/api/v1/users",
            json={"email": "anna@cookie.com", "login_code": "4711", "name": "Anna"},
            headers=admin_headers,
        )

        response = api_client.get("/api/v1/products", headers={"X-Login-Code": "4711"})

        assert response.status_code == 200

    def test_last_admin_cannot_be_deleted(self, api_client: TestClient, admin_headers):
        response = api_client.delete("/api/v1/users/1", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_role_presets(self, api_client: TestClient, admin_headers):
        response = api_client.get("/api/v1/users/roles/mitarbeiter/permissions", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["manage_users"] is False
