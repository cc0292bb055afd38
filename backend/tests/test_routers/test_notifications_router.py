"""Integration tests for notification API endpoints."""

import pytest

from repositories.db_models import Notification, NotificationType


@pytest.fixture
def notifications(db_session, test_user) -> list[Notification]:
    """Two unread notifications for test_user, oldest first."""
    created = []
    for title in ("Reply to your post", "New comment"):
        notification = Notification(
            user_id=test_user.id,
            type=NotificationType.COMMENT,
            title=title,
            body="Someone replied",
            data={"postId": 1},
        )
        db_session.add(notification)
        db_session.commit()
        db_session.refresh(notification)
        created.append(notification)
    return created


class TestOwnerEndpoints:
    def test_list(self, client, auth_headers, notifications):
        response = client.get("/api/notifications", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 2
        assert body["data"][0]["isRead"] is False
        assert body["data"][0]["data"] == {"postId": 1}
        assert body["meta"]["unreadCount"] == 2
        assert body["meta"]["total"] == 2

    def test_list_is_private(self, client, other_headers, notifications):
        body = client.get("/api/notifications", headers=other_headers).json()

        assert body["data"] == []
        assert body["meta"]["unreadCount"] == 0

    def test_limit_capped(self, client, auth_headers):
        response = client.get(
            "/api/notifications", headers=auth_headers, params={"limit": 51}
        )

        assert response.status_code == 400
        assert "limit" in response.json()["error"]["details"]

    def test_mark_read_is_idempotent(self, client, auth_headers, notifications):
        url = f"/api/notifications/{notifications[0].id}/read"

        first = client.patch(url, headers=auth_headers)
        second = client.patch(url, headers=auth_headers)

        assert first.status_code == 200
        assert second.status_code == 200
        assert first.json()["data"]["isRead"] is True
        assert first.json()["data"]["readAt"] == second.json()["data"]["readAt"]

        body = client.get("/api/notifications", headers=auth_headers).json()
        assert body["meta"]["unreadCount"] == 1

    def test_unread_only(self, client, auth_headers, notifications):
        client.patch(f"/api/notifications/{notifications[0].id}/read", headers=auth_headers)

        body = client.get(
            "/api/notifications", headers=auth_headers, params={"unreadOnly": "true"}
        ).json()

        assert [n["id"] for n in body["data"]] == [notifications[1].id]

    def test_mark_read_someone_elses(self, client, other_headers, notifications):
        response = client.patch(
            f"/api/notifications/{notifications[0].id}/read", headers=other_headers
        )

        assert response.status_code == 403

    def test_mark_read_missing(self, client, auth_headers):
        response = client.patch("/api/notifications/999/read", headers=auth_headers)
        assert response.status_code == 404

    def test_read_all(self, client, auth_headers, notifications):
        response = client.patch("/api/notifications/read-all", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {"updated": 2}

        again = client.patch("/api/notifications/read-all", headers=auth_headers)
        assert again.json()["data"] == {"updated": 0}

    def test_delete(self, client, auth_headers, notifications):
        response = client.delete(
            f"/api/notifications/{notifications[0].id}", headers=auth_headers
        )

        assert response.status_code == 200
        body = client.get("/api/notifications", headers=auth_headers).json()
        assert body["meta"]["total"] == 1

    def test_delete_someone_elses(self, client, other_headers, notifications):
        response = client.delete(
            f"/api/notifications/{notifications[0].id}", headers=other_headers
        )

        assert response.status_code == 403

    def test_guest_must_login(self, client):
        assert client.get("/api/notifications").status_code == 401


class TestAdminEndpoints:
    def test_send(self, client, admin_headers, test_user, auth_headers):
        response = client.post(
            "/api/notifications/admin/send",
            headers=admin_headers,
            json={"userId": test_user.id, "title": "Hello", "body": "Welcome aboard"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["type"] == "SYSTEM"

        body = client.get("/api/notifications", headers=auth_headers).json()
        assert body["meta"]["unreadCount"] == 1

    def test_send_to_missing_user(self, client, admin_headers):
        response = client.post(
            "/api/notifications/admin/send",
            headers=admin_headers,
            json={"userId": 999, "title": "Hello", "body": "Welcome aboard"},
        )

        assert response.status_code == 404

    def test_broadcast_skips_inactive(
        self, client, admin_headers, test_user, other_user, suspended_user
    ):
        response = client.post(
            "/api/notifications/admin/broadcast",
            headers=admin_headers,
            json={"title": "Maintenance", "body": "Down at midnight"},
        )

        assert response.status_code == 200
        # test_user, other_user and the admin
        assert response.json()["data"] == {"sent": 3}

    def test_admin_list_search(self, client, admin_headers, notifications):
        response = client.get(
            "/api/notifications/admin",
            headers=admin_headers,
            params={"search": "reply", "type": "COMMENT"},
        )

        assert response.status_code == 200
        body = response.json()
        assert [n["title"] for n in body["data"]] == ["Reply to your post"]
        assert body["data"][0]["user"]["nickname"] == "testuser_nick"

    def test_admin_delete(self, client, admin_headers, notifications):
        response = client.delete(
            f"/api/notifications/{notifications[0].id}/admin", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"message": "Notification deleted."}

    def test_admin_endpoints_require_admin(self, client, auth_headers):
        response = client.get("/api/notifications/admin", headers=auth_headers)
        assert response.status_code == 403


class TestRecipientLookup:
    URL = "/api/notifications/admin/users"

    def test_lists_active_users_by_nickname(
        self, client, admin_headers, admin_user, test_user, other_user, suspended_user
    ):
        response = client.get(self.URL, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert [u["nickname"] for u in body["data"]] == [
            "adminuser_nick",
            "otheruser_nick",
            "testuser_nick",
        ]
        assert body["data"][0] == {
            "id": admin_user.id,
            "nickname": "adminuser_nick",
            "role": "ADMIN",
        }
        assert body["meta"]["total"] == 3

    def test_search_by_nickname(self, client, admin_headers, test_user, other_user):
        response = client.get(
            self.URL, headers=admin_headers, params={"search": "OTHER"}
        )

        assert [u["nickname"] for u in response.json()["data"]] == ["otheruser_nick"]

    def test_paginated(self, client, admin_headers, test_user, other_user):
        body = client.get(
            self.URL, headers=admin_headers, params={"page": 2, "limit": 2}
        ).json()

        assert [u["nickname"] for u in body["data"]] == ["testuser_nick"]
        assert body["meta"]["hasPrev"] is True
        assert body["meta"]["hasNext"] is False

    def test_requires_admin(self, client, auth_headers):
        response = client.get(self.URL, headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN_001"
