"""
Repository for user notification operations.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from repositories.db_models import Notification, NotificationType, User


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification entity database operations."""

    def __init__(self, db: Session):
        """
        Initialize notification repository.

        Args:
            db: Database session
        """
        super().__init__(Notification, db)

    def list_for_user(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
    ) -> tuple[list[Notification], int]:
        """
        Get a user's notifications, newest first.

        Args:
            user_id: Owner of the notifications
            page: 1-based page number
            limit: Page size
            unread_only: Only return unread notifications

        Returns:
            Tuple of (notifications, total_count)
        """
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))

        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
        return self.paginate(query, page, limit)

    def count_unread(self, user_id: int) -> int:
        return (
            self.db.query(func.count(Notification.id))
            .filter(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
            .scalar()
            or 0
        )

    def mark_read(self, notification_id: int, read_at: datetime) -> int:
        """
        Mark one notification read if it is still unread. Does not commit.

        Returns:
            Number of rows updated (0 when it was already read)
        """
        return (
            self.db.query(Notification)
            .filter(
                Notification.id == notification_id,
                Notification.is_read.is_(False),
            )
            .update({"is_read": True, "read_at": read_at}, synchronize_session=False)
        )

    def mark_all_read(self, user_id: int, read_at: datetime) -> int:
        """
        Mark every unread notification of a user read. Does not commit.

        Returns:
            Number of rows updated
        """
        return (
            self.db.query(Notification)
            .filter(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
            .update({"is_read": True, "read_at": read_at}, synchronize_session=False)
        )

    def bulk_create(
        self,
        user_ids: list[int],
        notification_type: NotificationType,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> int:
        """
        Stage one notification per user. Does not commit.

        Returns:
            Number of notifications staged
        """
        self.db.add_all(
            [
                Notification(
                    user_id=user_id,
                    type=notification_type,
                    title=title,
                    body=body,
                    data=data,
                )
                for user_id in user_ids
            ]
        )
        return len(user_ids)

    def list_all(
        self,
        search: str | None = None,
        notification_type: NotificationType | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Notification], int]:
        """
        Get notifications across all users for the admin console.

        Args:
            search: Substring matched against title, body and recipient nickname
            notification_type: Filter by type
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (notifications, total_count)
        """
        query = self.db.query(Notification).join(User, Notification.user_id == User.id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Notification.title.ilike(pattern),
                    Notification.body.ilike(pattern),
                    User.nickname.ilike(pattern),
                )
            )
        if notification_type:
            query = query.filter(Notification.type == notification_type)

        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
        return self.paginate(query, page, limit)
