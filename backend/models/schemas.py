import re
from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from repositories.db_models import (
    CommunityRequestStatus,
    CommunityType,
    ContentStatus,
    NotificationType,
    ReportReason,
    ReportStatus,
    UserRole,
    UserStatus,
)

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-zA-Z])(?=.*\d)")

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base for API payloads.

    Serialized with camelCase keys for the web client; request bodies accept
    either camelCase or snake_case field names.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _check_password(value: str) -> str:
    if not PASSWORD_PATTERN.match(value):
        raise ValueError("Password must contain both letters and numbers")
    return value


# ============================================================================
# Envelope
# ============================================================================


class PaginationMeta(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool
    unread_count: Optional[int] = None


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope shared by every endpoint."""

    success: bool = True
    data: Optional[T] = None
    meta: Optional[PaginationMeta] = None


class MessageResponse(CamelModel):
    message: str


# ============================================================================
# Auth / User Schemas
# ============================================================================


class RegisterGeneral(CamelModel):
    username: str = Field(..., min_length=4, max_length=20)
    password: str = Field(..., min_length=8, max_length=100)
    confirm_password: str

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "Username can only contain letters, numbers, and underscores"
            )
        return v.lower().strip()

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        if v != info.data.get("password"):
            raise ValueError("Passwords do not match")
        return v


class LoginRequest(CamelModel):
    """Login with a username or email address."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def normalize_identifier(cls, v: str) -> str:
        return v.lower().strip()


class ChangePassword(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=100)
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        if v != info.data.get("new_password"):
            raise ValueError("Passwords do not match")
        return v


class UserSummary(CamelModel):
    """Public identity of a member: the anonymous nickname only."""

    id: int
    nickname: str


class CompanySummary(CamelModel):
    id: int
    name: str
    slug: str


class UserResponse(CamelModel):
    id: int
    username: str
    nickname: str
    role: UserRole
    status: UserStatus
    company_verified: bool
    company: Optional[CompanySummary] = None
    created_at: datetime


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class PermissionsResponse(CamelModel):
    """Classifier output for the current caller."""

    tier: str
    label: str
    badge_style: str
    is_admin: bool
    is_company_user: bool
    is_general_user: bool
    is_guest: bool
    can_access_company_hall: bool
    can_access_company_boards: bool
    can_access_public_servant: bool
    can_access_interests: bool
    can_access_free_talk: bool
    can_create_post: bool
    can_request_community: bool
    can_access_admin: bool
    company_slug: Optional[str] = None
    company_name: Optional[str] = None


# ============================================================================
# Content Schemas (input only; authoring endpoints are not served here)
# ============================================================================


class PostCreate(CamelModel):
    community_id: int
    title: str = Field(..., min_length=2, max_length=100)
    content: str = Field(..., min_length=10, max_length=10000)
    is_anonymous: bool = True
    tags: List[str] = Field(default_factory=list, max_length=5)
    media_urls: List[HttpUrl] = Field(default_factory=list, max_length=10)


class PostUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=2, max_length=100)
    content: Optional[str] = Field(None, min_length=10, max_length=10000)
    tags: Optional[List[str]] = Field(None, max_length=5)
    media_urls: Optional[List[HttpUrl]] = Field(None, max_length=10)


class CommentCreate(CamelModel):
    post_id: int
    parent_id: Optional[int] = None
    content: str = Field(..., min_length=1, max_length=2000)
    is_anonymous: bool = True


class CommentUpdate(CamelModel):
    content: str = Field(..., min_length=1, max_length=2000)


class MessageCreate(CamelModel):
    receiver_id: int
    content: str = Field(..., min_length=1, max_length=2000)
    context_post_id: Optional[int] = None


class CompanyReviewCreate(CamelModel):
    company_id: int
    overall_rating: int = Field(..., ge=1, le=5)
    salary_rating: Optional[int] = Field(None, ge=1, le=5)
    work_life_rating: Optional[int] = Field(None, ge=1, le=5)
    culture_rating: Optional[int] = Field(None, ge=1, le=5)
    management_rating: Optional[int] = Field(None, ge=1, le=5)
    title: str = Field(..., min_length=5, max_length=100)
    pros: str = Field(..., min_length=20, max_length=2000)
    cons: str = Field(..., min_length=20, max_length=2000)
    advice: Optional[str] = Field(None, max_length=2000)
    job_title: Optional[str] = Field(None, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    is_current_employee: bool = True
    years_at_company: Optional[int] = Field(None, ge=0, le=50)
    is_anonymous: bool = True


# ============================================================================
# Report Schemas
# ============================================================================


class ReportCreate(CamelModel):
    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    reported_user_id: Optional[int] = None
    reason: ReportReason
    description: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def require_target(self) -> "ReportCreate":
        if self.post_id is None and self.comment_id is None and (
            self.reported_user_id is None
        ):
            raise ValueError("Report target is required")
        return self


class ReportResolve(CamelModel):
    status: ReportStatus
    resolution: Optional[str] = Field(None, max_length=1000)

    @field_validator("status")
    @classmethod
    def terminal_status(cls, v: ReportStatus) -> ReportStatus:
        if v not in (ReportStatus.RESOLVED, ReportStatus.DISMISSED):
            raise ValueError("Status must be RESOLVED or DISMISSED")
        return v


class ReportedPostSummary(CamelModel):
    """The reported post as the moderation queue shows it."""

    id: int
    title: str
    content: str
    status: ContentStatus
    author: Optional[UserSummary] = None


class ReportedCommentSummary(CamelModel):
    id: int
    post_id: int
    content: str
    status: ContentStatus
    author: Optional[UserSummary] = None


class ReportResponse(CamelModel):
    id: int
    reporter_id: int
    post_id: Optional[int] = None
    comment_id: Optional[int] = None
    reported_user_id: Optional[int] = None
    reason: ReportReason
    description: Optional[str] = None
    status: ReportStatus
    resolution: Optional[str] = None
    resolved_by: Optional[int] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    reporter: Optional[UserSummary] = None
    reported_user: Optional[UserSummary] = None
    resolver: Optional[UserSummary] = None
    post: Optional[ReportedPostSummary] = None
    comment: Optional[ReportedCommentSummary] = None


class ReportStats(CamelModel):
    pending: int
    reviewing: int
    resolved: int
    dismissed: int
    total: int


# ============================================================================
# Community Request Schemas
# ============================================================================


class CommunityRequestCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    target_type: CommunityType
    company_id: Optional[int] = None
    public_servant_category_id: Optional[int] = None
    interest_category_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if len(stripped) < 2:
            raise ValueError("Name must be at least 2 characters")
        return stripped


class CommunityRequestReview(CamelModel):
    status: CommunityRequestStatus
    admin_note: Optional[str] = Field(None, max_length=500)

    @field_validator("status")
    @classmethod
    def review_status(cls, v: CommunityRequestStatus) -> CommunityRequestStatus:
        if v not in (CommunityRequestStatus.APPROVED, CommunityRequestStatus.REJECTED):
            raise ValueError("Status must be APPROVED or REJECTED")
        return v


class CommunitySummary(CamelModel):
    id: int
    name: str
    slug: str
    type: CommunityType


class CategorySummary(CamelModel):
    id: int
    name: str
    slug: str


class CommunityRequestResponse(CamelModel):
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    target_type: CommunityType
    company_id: Optional[int] = None
    public_servant_category_id: Optional[int] = None
    interest_category_id: Optional[int] = None
    status: CommunityRequestStatus
    admin_note: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_community_id: Optional[int] = None
    created_community: Optional[CommunitySummary] = None
    created_at: datetime
    user: Optional[UserSummary] = None
    reviewer: Optional[UserSummary] = None
    company: Optional[CompanySummary] = None
    public_servant_category: Optional[CategorySummary] = None
    interest_category: Optional[CategorySummary] = None


# ============================================================================
# Notification Schemas
# ============================================================================


class NotificationResponse(CamelModel):
    id: int
    user_id: int
    type: NotificationType
    title: str
    body: str
    data: Optional[dict[str, Any]] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    user: Optional[UserSummary] = None


class NotificationBroadcast(CamelModel):
    title: str = Field(..., min_length=1, max_length=100)
    body: str = Field(..., min_length=1, max_length=1000)
    data: Optional[dict[str, Any]] = None


class NotificationSend(NotificationBroadcast):
    user_id: int


class RecipientSummary(CamelModel):
    """An active member an admin can address a notification to."""

    id: int
    nickname: str
    role: UserRole


class MarkAllReadResponse(CamelModel):
    updated: int


class BroadcastResponse(CamelModel):
    sent: int
