"""Integration tests for the caller's tier and capability endpoints."""

from datetime import timedelta

from authentication.auth import create_access_token

PERMISSIONS_URL = "/api/users/me/permissions"


class TestPermissions:
    def test_guest(self, client):
        response = client.get(PERMISSIONS_URL)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["tier"] == "guest"
        assert data["isGuest"] is True
        assert data["label"] == "Guest"
        assert data["canAccessFreeTalk"] is False
        assert data["canCreatePost"] is False
        assert data["companySlug"] is None

    def test_general_member(self, client, auth_headers):
        data = client.get(PERMISSIONS_URL, headers=auth_headers).json()["data"]

        assert data["tier"] == "general"
        assert data["badgeStyle"] == "bg-green-100 text-green-700"
        assert data["canAccessFreeTalk"] is True
        assert data["canRequestCommunity"] is True
        assert data["canAccessCompanyBoards"] is False
        assert data["canAccessAdmin"] is False

    def test_company_member(self, client, company_headers):
        data = client.get(PERMISSIONS_URL, headers=company_headers).json()["data"]

        assert data["tier"] == "company"
        assert data["isCompanyUser"] is True
        assert data["canAccessCompanyBoards"] is True
        assert data["companySlug"] == "acme"
        assert data["companyName"] == "Acme Corp"
        assert data["badgeStyle"] == "bg-blue-100 text-blue-700"

    def test_admin(self, client, admin_headers):
        data = client.get(PERMISSIONS_URL, headers=admin_headers).json()["data"]

        assert data["tier"] == "admin"
        assert data["canAccessAdmin"] is True
        assert data["canAccessCompanyBoards"] is True

    def test_invalid_token_is_guest(self, client):
        response = client.get(
            PERMISSIONS_URL, headers={"Authorization": "Bearer garbage"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["tier"] == "guest"

    def test_expired_token_is_guest(self, client, test_user):
        token = create_access_token(
            data={"sub": str(test_user.id)}, expires_delta=timedelta(minutes=-5)
        )

        response = client.get(
            PERMISSIONS_URL, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["tier"] == "guest"

    def test_suspended_is_guest(self, client, suspended_headers):
        data = client.get(PERMISSIONS_URL, headers=suspended_headers).json()["data"]
        assert data["tier"] == "guest"

    def test_verification_takes_effect_immediately(
        self, client, db_session, test_user, test_company, auth_headers
    ):
        assert (
            client.get(PERMISSIONS_URL, headers=auth_headers).json()["data"]["tier"]
            == "general"
        )

        test_user.company_id = test_company.id
        test_user.company_verified = True
        db_session.commit()

        data = client.get(PERMISSIONS_URL, headers=auth_headers).json()["data"]
        assert data["tier"] == "company"
        assert data["companySlug"] == "acme"


class TestMyCompany:
    def test_general_member_denied(self, client, auth_headers):
        response = client.get("/api/users/me/company", headers=auth_headers)

        assert response.status_code == 403
        error = response.json()["error"]
        assert error["code"] == "COMMUNITY_004"
        assert error["details"]["title"] == "Company Verification Required"
        assert error["details"]["remedy"]["href"] == "/register?type=company"

    def test_guest_gets_company_denial(self, client):
        response = client.get("/api/users/me/company")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "COMMUNITY_004"

    def test_company_member(self, client, company_headers):
        response = client.get("/api/users/me/company", headers=company_headers)

        assert response.status_code == 200
        assert response.json()["data"]["slug"] == "acme"

    def test_admin_without_company(self, client, admin_headers):
        response = client.get("/api/users/me/company", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"] is None
