"""
Database models using SQLAlchemy 2.0 style with Mapped type hints.

Enum values are the upper-case strings used on the wire by the web client.
"""

import enum
from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repositories.database import Base


class UserRole(str, enum.Enum):
    USER = "USER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"


class UserStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    DELETED = "DELETED"


class CommunityType(str, enum.Enum):
    """Kind of community; also the target type of a community request."""

    COMPANY = "COMPANY"
    PUBLIC_SERVANT = "PUBLIC_SERVANT"
    INTEREST = "INTEREST"
    GENERAL = "GENERAL"


class ContentStatus(str, enum.Enum):
    """Visibility of a post or comment."""

    ACTIVE = "ACTIVE"
    HIDDEN = "HIDDEN"
    DELETED = "DELETED"


# Moderation Enums


class ReportReason(str, enum.Enum):
    SPAM = "SPAM"
    HARASSMENT = "HARASSMENT"
    HATE_SPEECH = "HATE_SPEECH"
    MISINFORMATION = "MISINFORMATION"
    PRIVACY_VIOLATION = "PRIVACY_VIOLATION"
    INAPPROPRIATE_CONTENT = "INAPPROPRIATE_CONTENT"
    OTHER = "OTHER"


class ReportStatus(str, enum.Enum):
    """
    Status of a report.

    REVIEWING is reserved: it is accepted as a source state for resolution
    but no code path sets it.
    """

    PENDING = "PENDING"
    REVIEWING = "REVIEWING"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class CommunityRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class NotificationType(str, enum.Enum):
    COMMENT = "COMMENT"
    REPLY = "REPLY"
    VOTE = "VOTE"
    MENTION = "MENTION"
    MESSAGE = "MESSAGE"
    SYSTEM = "SYSTEM"


OPEN_REPORT_STATUSES = (ReportStatus.PENDING, ReportStatus.REVIEWING)
TERMINAL_REPORT_STATUSES = (ReportStatus.RESOLVED, ReportStatus.DISMISSED)


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    email_domain: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    employees: Mapped[List["User"]] = relationship("User", back_populates="company")


class PublicServantCategory(Base):
    __tablename__ = "public_servant_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)


class InterestCategory(Base):
    __tablename__ = "interest_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)


class User(Base):
    __tablename__ = "users"
    __table_args__ = (Index("ix_users_status", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(
        String(20), unique=True, index=True, nullable=False
    )
    # Anonymous public handle, e.g. "swift_fox_8472"
    nickname: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String, unique=True, nullable=True)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole), default=UserRole.USER, nullable=False
    )
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus), default=UserStatus.ACTIVE, nullable=False
    )
    company_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    company_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("companies.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    last_active_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    company: Mapped[Optional["Company"]] = relationship(
        "Company", back_populates="employees"
    )
    notifications: Mapped[List["Notification"]] = relationship(
        "Notification", back_populates="user", cascade="all, delete-orphan"
    )


class Community(Base):
    __tablename__ = "communities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[CommunityType] = mapped_column(Enum(CommunityType), nullable=False)
    company_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("companies.id"), nullable=True
    )
    public_servant_category_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("public_servant_categories.id"), nullable=True
    )
    interest_category_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("interest_categories.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    posts: Mapped[List["Post"]] = relationship("Post", back_populates="community")


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (Index("ix_posts_community_status", "community_id", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    community_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("communities.id"), nullable=False
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=True)
    status: Mapped[ContentStatus] = mapped_column(
        Enum(ContentStatus), default=ContentStatus.ACTIVE, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    community: Mapped["Community"] = relationship("Community", back_populates="posts")
    author: Mapped["User"] = relationship("User")
    comments: Mapped[List["Comment"]] = relationship(
        "Comment", back_populates="post", foreign_keys="[Comment.post_id]"
    )


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("posts.id"), nullable=False
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("comments.id"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=True)
    status: Mapped[ContentStatus] = mapped_column(
        Enum(ContentStatus), default=ContentStatus.ACTIVE, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    post: Mapped["Post"] = relationship(
        "Post", back_populates="comments", foreign_keys=[post_id]
    )
    author: Mapped["User"] = relationship("User")


class Report(Base):
    """
    A member's report of a post, comment or user.

    Reports are never deleted; they are kept for audit once resolved.
    """

    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint(
            "post_id IS NOT NULL OR comment_id IS NOT NULL "
            "OR reported_user_id IS NOT NULL",
            name="ck_reports_has_target",
        ),
        Index("ix_reports_status", "status"),
        Index("ix_reports_reporter", "reporter_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    reporter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    post_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("posts.id"), nullable=True
    )
    comment_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("comments.id"), nullable=True
    )
    reported_user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    reason: Mapped[ReportReason] = mapped_column(Enum(ReportReason), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus), default=ReportStatus.PENDING, nullable=False
    )
    resolution: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    resolved_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    reporter: Mapped["User"] = relationship("User", foreign_keys=[reporter_id])
    reported_user: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[reported_user_id]
    )
    resolver: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[resolved_by]
    )
    post: Mapped[Optional["Post"]] = relationship("Post")
    comment: Mapped[Optional["Comment"]] = relationship("Comment")


class CommunityRequest(Base):
    """
    A member's request for a new community.

    PENDING -> APPROVED | REJECTED (admin) or CANCELLED (requester).
    An approved request always links the community it created.
    """

    __tablename__ = "community_requests"
    __table_args__ = (
        Index("ix_community_requests_status", "status"),
        Index("ix_community_requests_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    target_type: Mapped[CommunityType] = mapped_column(
        Enum(CommunityType), nullable=False
    )
    company_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("companies.id"), nullable=True
    )
    public_servant_category_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("public_servant_categories.id"), nullable=True
    )
    interest_category_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("interest_categories.id"), nullable=True
    )
    status: Mapped[CommunityRequestStatus] = mapped_column(
        Enum(CommunityRequestStatus),
        default=CommunityRequestStatus.PENDING,
        nullable=False,
    )
    admin_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_community_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("communities.id"), unique=True, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    user: Mapped["User"] = relationship("User", foreign_keys=[user_id])
    reviewer: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[reviewed_by]
    )
    company: Mapped[Optional["Company"]] = relationship("Company")
    public_servant_category: Mapped[Optional["PublicServantCategory"]] = relationship(
        "PublicServantCategory"
    )
    interest_category: Mapped[Optional["InterestCategory"]] = relationship(
        "InterestCategory"
    )
    created_community: Mapped[Optional["Community"]] = relationship("Community")


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_read", "user_id", "is_read"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType), nullable=False
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    # Opaque deep-link payload, e.g. {"postId": 4, "commentId": 17}
    data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    user: Mapped["User"] = relationship("User", back_populates="notifications")
