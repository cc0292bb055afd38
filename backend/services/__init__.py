"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .admin_alert_service import AdminAlertService
from .auth_service import AuthService
from .notification_service import NotificationService
from .report_service import ReportService
from .community_request_service import CommunityRequestService

__all__ = [
    "AdminAlertService",
    "AuthService",
    "NotificationService",
    "ReportService",
    "CommunityRequestService",
]
