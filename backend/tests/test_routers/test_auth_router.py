"""Integration tests for auth API endpoints."""

from datetime import timedelta

from authentication.auth import create_access_token

REGISTER_PAYLOAD = {
    "username": "NewMember",
    "password": "password123",
    "confirmPassword": "password123",
}


class TestRegister:
    """Test cases for /api/auth/register"""

    def test_register(self, client):
        response = client.post("/api/auth/register", json=REGISTER_PAYLOAD)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["tokenType"] == "bearer"
        assert body["data"]["accessToken"]
        user = body["data"]["user"]
        assert user["username"] == "newmember"
        assert user["role"] == "USER"
        assert user["companyVerified"] is False
        assert user["nickname"]
        assert "hashedPassword" not in user

    def test_token_from_register_works(self, client):
        token = client.post("/api/auth/register", json=REGISTER_PAYLOAD).json()["data"][
            "accessToken"
        ]

        response = client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 200
        assert response.json()["data"]["username"] == "newmember"

    def test_password_mismatch(self, client):
        response = client.post(
            "/api/auth/register",
            json={**REGISTER_PAYLOAD, "confirmPassword": "password124"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_001"
        assert body["error"]["details"]["confirmPassword"] == ["Passwords do not match"]
        assert body["correlation_id"]

    def test_missing_fields(self, client):
        response = client.post("/api/auth/register", json={"username": "abcd"})

        assert response.status_code == 400
        details = response.json()["error"]["details"]
        assert "password" in details
        assert "confirmPassword" in details

    def test_duplicate_username(self, client, test_user):
        response = client.post(
            "/api/auth/register", json={**REGISTER_PAYLOAD, "username": "TestUser"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "AUTH_005"


class TestLogin:
    """Test cases for /api/auth/login"""

    def test_login(self, client, test_user):
        response = client.post(
            "/api/auth/login",
            json={"username": "testuser", "password": "testpassword123"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["id"] == test_user.id
        assert data["accessToken"]

    def test_login_wrong_password(self, client, test_user):
        response = client.post(
            "/api/auth/login",
            json={"username": "testuser", "password": "wrongpassword1"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_001"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_login_suspended(self, client, suspended_user):
        response = client.post(
            "/api/auth/login",
            json={"username": "suspended", "password": "testpassword123"},
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN_001"

    def test_login_rate_limited(self, client):
        payload = {"username": "nobody", "password": "whatever1"}
        for _ in range(10):
            assert client.post("/api/auth/login", json=payload).status_code == 401

        response = client.post("/api/auth/login", json=payload)
        assert response.status_code == 429
        assert response.json()["error"]["code"] == "RATE_001"


class TestMe:
    def test_me(self, client, test_user, auth_headers):
        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["nickname"] == test_user.nickname

    def test_me_includes_company(self, client, company_headers):
        response = client.get("/api/auth/me", headers=company_headers)

        assert response.json()["data"]["company"]["slug"] == "acme"

    def test_me_without_token(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        error = response.json()["error"]
        assert error["code"] == "AUTH_008"
        assert error["details"]["title"] == "Login Required"
        assert error["details"]["remedy"]["href"] == "/login"

    def test_me_with_garbage_token(self, client):
        response = client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_008"

    def test_me_with_expired_token(self, client, test_user):
        token = create_access_token(
            data={"sub": str(test_user.id)}, expires_delta=timedelta(minutes=-5)
        )

        response = client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_007"

    def test_me_suspended(self, client, suspended_headers):
        response = client.get("/api/auth/me", headers=suspended_headers)

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Account has been suspended."


class TestChangePassword:
    def test_change_password(self, client, auth_headers):
        response = client.post(
            "/api/auth/change-password",
            headers=auth_headers,
            json={
                "currentPassword": "testpassword123",
                "newPassword": "newpassword456",
                "confirmPassword": "newpassword456",
            },
        )
        assert response.status_code == 200

        login = client.post(
            "/api/auth/login",
            json={"username": "testuser", "password": "newpassword456"},
        )
        assert login.status_code == 200

    def test_change_password_wrong_current(self, client, auth_headers):
        response = client.post(
            "/api/auth/change-password",
            headers=auth_headers,
            json={
                "currentPassword": "wrongpassword1",
                "newPassword": "newpassword456",
                "confirmPassword": "newpassword456",
            },
        )

        assert response.status_code == 400
        assert "currentPassword" in response.json()["error"]["details"]


def test_health(client):
    response = client.get("/api/health")
    assert response.json() == {"status": "healthy"}


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND_001"
