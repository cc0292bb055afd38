"""
Service for in-app user notifications and their read state.

A notification is created unread by a domain event and only its owner may
mark it read or delete it. Marking an already-read notification succeeds
without touching ``read_at``.
"""

from datetime import datetime, timezone
from typing import Any

from loguru import logger
from sqlalchemy.orm import Session

from models.exceptions import (
    NotificationNotFoundException,
    NotNotificationOwnerException,
    UserNotFoundException,
)
from repositories.db_models import Notification, NotificationType, User
from repositories.notification_repository import NotificationRepository
from repositories.user_repository import UserRepository


class NotificationService:
    """Service for notification business logic."""

    @staticmethod
    def stage_notification(
        db: Session,
        user_id: int,
        notification_type: NotificationType,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> Notification:
        """
        Add a notification to the caller's transaction without committing.

        Used by workflows that must commit the notification together with
        their own state change.
        """
        notification = Notification(
            user_id=user_id,
            type=notification_type,
            title=title,
            body=body,
            data=data,
            is_read=False,
        )
        NotificationRepository(db).add(notification)
        return notification

    @staticmethod
    def create_notification(
        db: Session,
        user_id: int,
        notification_type: NotificationType,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> Notification:
        notification = NotificationService.stage_notification(
            db, user_id, notification_type, title, body, data
        )
        notification_repo = NotificationRepository(db)
        notification_repo.commit()
        notification_repo.refresh(notification)
        return notification

    @staticmethod
    def list_notifications(
        db: Session,
        user_id: int,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
    ) -> tuple[list[Notification], int, int]:
        """
        Get a page of the user's notifications.

        Args:
            db: Database session
            user_id: Owner of the notifications
            page: 1-based page number
            limit: Page size
            unread_only: Only return unread notifications

        Returns:
            Tuple of (notifications, total_count, unread_count)
        """
        notification_repo = NotificationRepository(db)
        notifications, total = notification_repo.list_for_user(
            user_id, page=page, limit=limit, unread_only=unread_only
        )
        return notifications, total, notification_repo.count_unread(user_id)

    @staticmethod
    def mark_read(db: Session, notification_id: int, user_id: int) -> Notification:
        """
        Mark a notification read.

        Idempotent: an already-read notification is returned unchanged.

        Raises:
            NotificationNotFoundException: If notification not found
            NotNotificationOwnerException: If it belongs to another user
        """
        notification = NotificationService._get_owned(db, notification_id, user_id)
        if notification.is_read:
            return notification

        notification_repo = NotificationRepository(db)
        notification_repo.mark_read(notification_id, datetime.now(timezone.utc))
        notification_repo.commit()
        notification_repo.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(db: Session, user_id: int) -> int:
        """
        Mark every unread notification of the user read.

        Returns:
            Number of notifications that changed (0 on a repeat call)
        """
        notification_repo = NotificationRepository(db)
        updated = notification_repo.mark_all_read(user_id, datetime.now(timezone.utc))
        notification_repo.commit()
        if updated:
            logger.info(f"Marked {updated} notifications read for user {user_id}")
        return updated

    @staticmethod
    def delete(db: Session, notification_id: int, user_id: int) -> None:
        """
        Delete one of the user's notifications.

        Raises:
            NotificationNotFoundException: If notification not found
            NotNotificationOwnerException: If it belongs to another user
        """
        notification = NotificationService._get_owned(db, notification_id, user_id)
        NotificationRepository(db).delete(notification)

    # =========================================================================
    # Admin
    # =========================================================================

    @staticmethod
    def list_all(
        db: Session,
        search: str | None = None,
        notification_type: NotificationType | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Notification], int]:
        return NotificationRepository(db).list_all(
            search=search,
            notification_type=notification_type,
            page=page,
            limit=limit,
        )

    @staticmethod
    def list_recipients(
        db: Session, search: str | None = None, page: int = 1, limit: int = 20
    ) -> tuple[list[User], int]:
        """Active users an admin can send a notification to."""
        return UserRepository(db).search_active(search=search, page=page, limit=limit)

    @staticmethod
    def send_to_user(
        db: Session,
        user_id: int,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> Notification:
        """
        Send a SYSTEM notification to one user.

        Raises:
            UserNotFoundException: If the user does not exist
        """
        if not UserRepository(db).get_by_id(user_id):
            raise UserNotFoundException(user_id)

        notification = NotificationService.create_notification(
            db, user_id, NotificationType.SYSTEM, title, body, data
        )
        logger.info(f"System notification {notification.id} sent to user {user_id}")
        return notification

    @staticmethod
    def broadcast(
        db: Session,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> int:
        """
        Send a SYSTEM notification to every ACTIVE user.

        Returns:
            Number of notifications created
        """
        user_ids = UserRepository(db).get_active_user_ids()
        notification_repo = NotificationRepository(db)
        count = notification_repo.bulk_create(
            user_ids, NotificationType.SYSTEM, title, body, data
        )
        notification_repo.commit()
        logger.info(f"Broadcast notification sent to {count} users")
        return count

    @staticmethod
    def admin_delete(db: Session, notification_id: int) -> None:
        """
        Delete any notification.

        Raises:
            NotificationNotFoundException: If notification not found
        """
        notification_repo = NotificationRepository(db)
        notification = notification_repo.get_by_id(notification_id)
        if not notification:
            raise NotificationNotFoundException(notification_id)
        notification_repo.delete(notification)

    @staticmethod
    def _get_owned(db: Session, notification_id: int, user_id: int) -> Notification:
        notification = NotificationRepository(db).get_by_id(notification_id)
        if not notification:
            raise NotificationNotFoundException(notification_id)
        if notification.user_id != user_id:
            raise NotNotificationOwnerException()
        return notification
