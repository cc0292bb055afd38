"""Tests for NotificationRepository."""

from datetime import datetime, timezone

from repositories.db_models import Notification, NotificationType
from repositories.notification_repository import NotificationRepository


def _add_notification(db_session, user, **kwargs) -> Notification:
    notification = Notification(
        user_id=user.id,
        type=kwargs.pop("type", NotificationType.COMMENT),
        title=kwargs.pop("title", "New comment"),
        body=kwargs.pop("body", "Someone commented"),
        **kwargs,
    )
    db_session.add(notification)
    db_session.commit()
    db_session.refresh(notification)
    return notification


class TestNotificationRepository:
    def test_count_unread(self, db_session, test_user, other_user):
        _add_notification(db_session, test_user)
        _add_notification(db_session, test_user, is_read=True)
        _add_notification(db_session, other_user)

        assert NotificationRepository(db_session).count_unread(test_user.id) == 1

    def test_mark_read_only_touches_unread(self, db_session, test_user):
        notification = _add_notification(db_session, test_user)
        repo = NotificationRepository(db_session)
        now = datetime.now(timezone.utc)

        assert repo.mark_read(notification.id, now) == 1
        repo.commit()
        assert repo.mark_read(notification.id, now) == 0

    def test_mark_all_read_scoped_to_user(self, db_session, test_user, other_user):
        _add_notification(db_session, test_user)
        _add_notification(db_session, test_user)
        other = _add_notification(db_session, other_user)
        repo = NotificationRepository(db_session)

        assert repo.mark_all_read(test_user.id, datetime.now(timezone.utc)) == 2
        repo.commit()

        db_session.refresh(other)
        assert other.is_read is False
        assert repo.count_unread(test_user.id) == 0

    def test_bulk_create(self, db_session, test_user, other_user):
        repo = NotificationRepository(db_session)

        staged = repo.bulk_create(
            [test_user.id, other_user.id], NotificationType.SYSTEM, "Hi", "Hello all"
        )
        repo.commit()

        assert staged == 2
        assert repo.count() == 2

    def test_user_cascade(self, db_session, test_user):
        _add_notification(db_session, test_user)

        db_session.delete(test_user)
        db_session.commit()

        assert db_session.query(Notification).count() == 0
