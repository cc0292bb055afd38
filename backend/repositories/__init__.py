"""
Repository pattern implementation for data access layer.
"""

from .base import BaseRepository
from .community_repository import (
    CommunityRepository,
    CompanyRepository,
    InterestCategoryRepository,
    PublicServantCategoryRepository,
)
from .community_request_repository import CommunityRequestRepository
from .content_repository import CommentRepository, PostRepository
from .notification_repository import NotificationRepository
from .report_repository import ReportRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "CommentRepository",
    "CommunityRepository",
    "CommunityRequestRepository",
    "CompanyRepository",
    "InterestCategoryRepository",
    "NotificationRepository",
    "PostRepository",
    "PublicServantCategoryRepository",
    "ReportRepository",
    "UserRepository",
]
