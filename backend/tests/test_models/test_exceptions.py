"""
Unit tests for domain exception codes.
"""

from models.exceptions import (
    AccessDeniedException,
    CommunitySlugTakenException,
    DuplicateReportException,
    ErrorCode,
    InvalidCommunityTargetException,
    NotificationNotFoundException,
    NotNotificationOwnerException,
    PermissionDeniedException,
    PostNotFoundException,
    ReportAlreadyProcessedException,
    ReportTargetRequiredException,
    SessionExpiredException,
    UsernameTakenException,
    ValidationException,
)
from models.permissions import DENIALS, RequiredAccess


class TestErrorCodes:
    def test_family_codes(self):
        assert NotificationNotFoundException(1).code == ErrorCode.NOT_FOUND
        assert NotNotificationOwnerException().code == ErrorCode.FORBIDDEN
        assert DuplicateReportException().code == ErrorCode.VALIDATION_ERROR
        assert ReportAlreadyProcessedException(1).code == ErrorCode.INVALID_STATE

    def test_specific_codes(self):
        assert PostNotFoundException(1).code.value == "POST_001"
        assert SessionExpiredException().code.value == "AUTH_007"
        assert UsernameTakenException("anon").code.value == "AUTH_005"

    def test_field_details(self):
        exc = InvalidCommunityTargetException("companyId", "Company not found.")
        assert exc.details == {"companyId": ["Company not found."]}
        assert ReportTargetRequiredException().details == {
            "target": ["Report target is required"]
        }

    def test_slug_taken_is_validation(self):
        exc = CommunitySlugTakenException("runners")
        assert isinstance(exc, ValidationException)
        assert exc.slug == "runners"


class TestAccessDeniedException:
    def test_login_denial_is_unauthorized(self):
        exc = AccessDeniedException(DENIALS[RequiredAccess.AUTHENTICATED])
        assert exc.code == ErrorCode.UNAUTHORIZED
        assert exc.message == "Please login to use this feature."

    def test_company_denial_code(self):
        exc = AccessDeniedException(DENIALS[RequiredAccess.COMPANY])
        assert exc.code.value == "COMMUNITY_004"

    def test_admin_denial_is_forbidden(self):
        exc = AccessDeniedException(DENIALS[RequiredAccess.ADMIN])
        assert exc.code == ErrorCode.FORBIDDEN
        assert isinstance(exc, PermissionDeniedException)
