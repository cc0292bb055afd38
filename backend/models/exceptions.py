"""
Custom domain exceptions for the application.

These exceptions are raised by the service layer and converted to the API
error envelope by centralized exception handlers in main.py, keeping services
HTTP-agnostic.

Each exception carries a stable error code (shared with the web client), an
optional field-level ``details`` mapping and the request correlation ID.
"""

from enum import Enum
from typing import TYPE_CHECKING

from core.correlation import generate_correlation_id, get_correlation_id

if TYPE_CHECKING:
    from models.permissions import AccessDenial


class ErrorCode(str, Enum):
    """Error codes returned in ``error.code`` of the response envelope."""

    # Auth
    INVALID_CREDENTIALS = "AUTH_001"
    USERNAME_TAKEN = "AUTH_005"
    SESSION_EXPIRED = "AUTH_007"
    UNAUTHORIZED = "AUTH_008"

    # Community
    COMMUNITY_NOT_FOUND = "COMMUNITY_001"
    COMPANY_VERIFICATION_REQUIRED = "COMMUNITY_004"

    # Content
    POST_NOT_FOUND = "POST_001"
    COMMENT_NOT_FOUND = "COMMENT_001"

    # General
    VALIDATION_ERROR = "VALIDATION_001"
    RATE_LIMIT_EXCEEDED = "RATE_001"
    INTERNAL_ERROR = "INTERNAL_001"
    NOT_FOUND = "NOT_FOUND_001"
    FORBIDDEN = "FORBIDDEN_001"
    INVALID_STATE = "STATE_001"

    # Settings
    REGISTRATION_DISABLED = "SETTINGS_001"


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        details: Optional mapping of field path to error messages.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        correlation_id: str | None = None,
    ):
        self.message = message
        self.details = details
        # Use request correlation ID if available, otherwise generate new one
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    code = ErrorCode.NOT_FOUND


class PermissionDeniedException(DomainException):
    """Raised when the actor lacks ownership or tier for an action."""

    code = ErrorCode.FORBIDDEN


class ValidationException(DomainException):
    """Raised when input is malformed or violates a business constraint."""

    code = ErrorCode.VALIDATION_ERROR


class InvalidStateException(DomainException):
    """Raised when a transition is attempted from a non-eligible state."""

    code = ErrorCode.INVALID_STATE


class AuthenticationException(DomainException):
    """Raised when authentication fails."""

    code = ErrorCode.UNAUTHORIZED


class AccessDeniedException(PermissionDeniedException):
    """
    Raised when the access gate denies a request.

    Carries the structured denial so the handler can surface the remedy.
    """

    def __init__(self, denial: "AccessDenial") -> None:
        from models.permissions import RequiredAccess

        super().__init__(denial.description)
        self.denial = denial
        if denial.required_access == RequiredAccess.AUTHENTICATED:
            self.code = ErrorCode.UNAUTHORIZED
        elif denial.required_access == RequiredAccess.COMPANY:
            self.code = ErrorCode.COMPANY_VERIFICATION_REQUIRED


# Auth / users


class InvalidCredentialsException(AuthenticationException):
    """Invalid username or password."""

    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self) -> None:
        super().__init__("Invalid username or password.")


class SessionExpiredException(AuthenticationException):
    """Token was valid once but has expired."""

    code = ErrorCode.SESSION_EXPIRED

    def __init__(self) -> None:
        super().__init__("Session expired. Please log in again.")


class AccountSuspendedException(PermissionDeniedException):
    """Account is suspended or deleted."""

    def __init__(self) -> None:
        super().__init__("Account has been suspended.")


class UsernameTakenException(ValidationException):
    """Username is already registered."""

    code = ErrorCode.USERNAME_TAKEN

    def __init__(self, username: str) -> None:
        super().__init__(
            "This username is already in use.",
            details={"username": [f"'{username}' is already taken"]},
        )


class RegistrationDisabledException(PermissionDeniedException):
    """New registrations are switched off."""

    code = ErrorCode.REGISTRATION_DISABLED

    def __init__(self) -> None:
        super().__init__("Registration is currently disabled.")


class UserNotFoundException(NotFoundException):
    """User not found."""

    def __init__(self, user_id: int | None = None) -> None:
        super().__init__("User not found.")
        self.user_id = user_id


# Content


class PostNotFoundException(NotFoundException):
    """Post not found or deleted."""

    code = ErrorCode.POST_NOT_FOUND

    def __init__(self, post_id: int) -> None:
        super().__init__("Post not found.")
        self.post_id = post_id


class CommentNotFoundException(NotFoundException):
    """Comment not found or deleted."""

    code = ErrorCode.COMMENT_NOT_FOUND

    def __init__(self, comment_id: int) -> None:
        super().__init__("Comment not found.")
        self.comment_id = comment_id


# Reports


class ReportNotFoundException(NotFoundException):
    """Report not found."""

    def __init__(self, report_id: int) -> None:
        super().__init__("Report not found.")
        self.report_id = report_id


class ReportTargetRequiredException(ValidationException):
    """A report must name a post, a comment or a user."""

    def __init__(self) -> None:
        super().__init__(
            "Report target is required",
            details={"target": ["Report target is required"]},
        )


class CannotReportOwnContentException(ValidationException):
    """Users cannot report themselves or their own content."""

    def __init__(self) -> None:
        super().__init__("You cannot report your own content")


class DuplicateReportException(ValidationException):
    """User already has an open report on this content."""

    def __init__(self) -> None:
        super().__init__("You have already reported this content")


class ReportAlreadyProcessedException(InvalidStateException):
    """Report is already resolved or dismissed."""

    def __init__(self, report_id: int) -> None:
        super().__init__("This report has already been processed")
        self.report_id = report_id


# Community requests


class CommunityRequestNotFoundException(NotFoundException):
    """Community request not found."""

    def __init__(self, request_id: int) -> None:
        super().__init__("Request not found.")
        self.request_id = request_id


class InvalidCommunityTargetException(ValidationException):
    """Target reference is missing or does not resolve."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, details={field: [message]})


class DuplicateCommunityRequestException(ValidationException):
    """User already has a pending request with the same name."""

    def __init__(self) -> None:
        super().__init__("A request with the same name is already pending.")


class CommunitySlugTakenException(ValidationException):
    """A community with the derived slug already exists."""

    def __init__(self, slug: str) -> None:
        super().__init__("A community with the same name already exists.")
        self.slug = slug


class NotRequestOwnerException(PermissionDeniedException):
    """Only the requester may cancel a community request."""

    def __init__(self) -> None:
        super().__init__("You can only cancel your own requests.")


class CommunityRequestAlreadyProcessedException(InvalidStateException):
    """Request is no longer pending."""

    def __init__(self, request_id: int, message: str | None = None) -> None:
        super().__init__(message or "This request has already been processed.")
        self.request_id = request_id


# Notifications


class NotificationNotFoundException(NotFoundException):
    """Notification not found."""

    def __init__(self, notification_id: int) -> None:
        super().__init__("Notification not found.")
        self.notification_id = notification_id


class NotNotificationOwnerException(PermissionDeniedException):
    """Notification belongs to another user."""

    def __init__(self) -> None:
        super().__init__("Permission denied.")
