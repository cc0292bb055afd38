"""Tests for UserRepository."""

from repositories.user_repository import UserRepository


class TestSearchActive:
    def test_excludes_suspended(self, db_session, test_user, suspended_user):
        users, total = UserRepository(db_session).search_active()

        assert [u.id for u in users] == [test_user.id]
        assert total == 1

    def test_nickname_search_is_case_insensitive(
        self, db_session, test_user, other_user
    ):
        users, total = UserRepository(db_session).search_active(search="TESTUSER")

        assert [u.nickname for u in users] == ["testuser_nick"]
        assert total == 1

    def test_ordered_by_nickname(self, db_session, test_user, other_user, admin_user):
        users, _ = UserRepository(db_session).search_active()

        assert [u.nickname for u in users] == [
            "adminuser_nick",
            "otheruser_nick",
            "testuser_nick",
        ]
