"""
Router for in-app notifications.

Static paths (``/read-all``, ``/admin/...``) are declared before the
``/{notification_id}`` routes so they are matched first.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PaginationLimit, PaginationPage, build_pagination_meta
from helpers.responses import envelope
from repositories.database import get_db
from services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=schemas.ApiResponse[list[schemas.NotificationResponse]])
def get_notifications(
    page: PaginationPage = 1,
    limit: PaginationLimit = 20,
    unread_only: bool = Query(False, alias="unreadOnly"),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> dict:
    """Get the current user's notifications with the unread counter in meta."""
    notifications, total, unread_count = NotificationService.list_notifications(
        db, current_user.id, page=page, limit=limit, unread_only=unread_only
    )
    return envelope(
        notifications,
        build_pagination_meta(page, limit, total, unread_count=unread_count),
    )


@router.patch(
    "/read-all", response_model=schemas.ApiResponse[schemas.MarkAllReadResponse]
)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> dict:
    updated = NotificationService.mark_all_read(db, current_user.id)
    return envelope({"updated": updated})


# Admin endpoints


@router.get(
    "/admin", response_model=schemas.ApiResponse[list[schemas.NotificationResponse]]
)
def get_all_notifications(
    search: Optional[str] = Query(None, max_length=100),
    notification_type: Optional[db_models.NotificationType] = Query(
        None, alias="type"
    ),
    page: PaginationPage = 1,
    limit: PaginationLimit = 20,
    db: Session = Depends(get_db),
    _: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    """Search notifications across all users."""
    notifications, total = NotificationService.list_all(
        db,
        search=search,
        notification_type=notification_type,
        page=page,
        limit=limit,
    )
    return envelope(notifications, build_pagination_meta(page, limit, total))


@router.get(
    "/admin/users", response_model=schemas.ApiResponse[list[schemas.RecipientSummary]]
)
def get_notification_recipients(
    search: Optional[str] = Query(None, max_length=100),
    page: PaginationPage = 1,
    limit: PaginationLimit = 20,
    db: Session = Depends(get_db),
    _: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    """Look up active users by nickname to address a notification."""
    users, total = NotificationService.list_recipients(
        db, search=search, page=page, limit=limit
    )
    return envelope(users, build_pagination_meta(page, limit, total))


@router.post(
    "/admin/send", response_model=schemas.ApiResponse[schemas.NotificationResponse]
)
def send_notification(
    payload: schemas.NotificationSend,
    db: Session = Depends(get_db),
    _: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    """Send a SYSTEM notification to one user."""
    notification = NotificationService.send_to_user(
        db, payload.user_id, payload.title, payload.body, payload.data
    )
    return envelope(notification)


@router.post(
    "/admin/broadcast", response_model=schemas.ApiResponse[schemas.BroadcastResponse]
)
def broadcast_notification(
    payload: schemas.NotificationBroadcast,
    db: Session = Depends(get_db),
    _: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    """Send a SYSTEM notification to every active user."""
    sent = NotificationService.broadcast(db, payload.title, payload.body, payload.data)
    return envelope({"sent": sent})


@router.delete(
    "/{notification_id}/admin",
    response_model=schemas.ApiResponse[schemas.MessageResponse],
)
def admin_delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    _: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    NotificationService.admin_delete(db, notification_id)
    return envelope({"message": "Notification deleted."})


# Owner endpoints


@router.patch(
    "/{notification_id}/read",
    response_model=schemas.ApiResponse[schemas.NotificationResponse],
)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> dict:
    """
    Mark a notification read.

    Marking an already-read notification succeeds and keeps its read time.
    """
    notification = NotificationService.mark_read(db, notification_id, current_user.id)
    return envelope(notification)


@router.delete(
    "/{notification_id}", response_model=schemas.ApiResponse[schemas.MessageResponse]
)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> dict:
    NotificationService.delete(db, notification_id, current_user.id)
    return envelope({"message": "Notification deleted."})
