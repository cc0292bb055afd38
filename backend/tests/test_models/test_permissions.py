"""
Unit tests for the permission classifier and the access gate.
"""

import pytest

from models.permissions import (
    DENIALS,
    GUEST_SESSION,
    TIER_BADGE_STYLES,
    TIER_LABELS,
    CompanyInfo,
    PermissionTier,
    Remedies,
    RequiredAccess,
    SessionSnapshot,
    authorize,
    classify,
    classify_tier,
)
from repositories.db_models import UserRole

ACME = CompanyInfo(id=1, slug="acme", name="Acme Corp")

GENERAL = SessionSnapshot(is_authenticated=True)
COMPANY = SessionSnapshot(is_authenticated=True, company_verified=True, company=ACME)
ADMIN = SessionSnapshot(is_authenticated=True, role=UserRole.ADMIN)
VERIFIED_WITHOUT_COMPANY = SessionSnapshot(is_authenticated=True, company_verified=True)


class TestClassify:
    @pytest.mark.parametrize(
        "session,expected",
        [
            (None, PermissionTier.GUEST),
            ("not a session", PermissionTier.GUEST),
            (GUEST_SESSION, PermissionTier.GUEST),
            (GENERAL, PermissionTier.GENERAL),
            (VERIFIED_WITHOUT_COMPANY, PermissionTier.GENERAL),
            (COMPANY, PermissionTier.COMPANY),
            (ADMIN, PermissionTier.ADMIN),
        ],
    )
    def test_tier(self, session, expected):
        assert classify_tier(session) == expected

    def test_admin_wins_over_company(self):
        session = SessionSnapshot(
            is_authenticated=True,
            role=UserRole.ADMIN,
            company_verified=True,
            company=ACME,
        )
        permissions = classify(session)

        assert permissions.is_admin
        assert not permissions.is_company_user
        assert permissions.company_slug == "acme"

    def test_moderator_is_general(self):
        session = SessionSnapshot(is_authenticated=True, role=UserRole.MODERATOR)
        assert classify(session).tier == PermissionTier.GENERAL

    def test_guest_capabilities(self):
        permissions = classify(None)

        assert permissions.is_guest
        assert permissions.label == "Guest"
        assert not permissions.can_access_company_hall
        assert not permissions.can_access_free_talk
        assert not permissions.can_create_post
        assert not permissions.can_request_community
        assert not permissions.can_access_admin
        assert permissions.company_slug is None

    def test_general_capabilities(self):
        permissions = classify(GENERAL)

        assert permissions.is_general_user
        assert permissions.label == "Member"
        assert permissions.can_access_company_hall
        assert permissions.can_access_public_servant
        assert permissions.can_access_interests
        assert permissions.can_access_free_talk
        assert permissions.can_create_post
        assert permissions.can_request_community
        assert not permissions.can_access_company_boards
        assert not permissions.can_access_admin

    def test_company_capabilities(self):
        permissions = classify(COMPANY)

        assert permissions.is_company_user
        assert permissions.label == "Company Verified"
        assert permissions.can_access_company_boards
        assert not permissions.can_access_admin
        assert permissions.company_slug == "acme"
        assert permissions.company_name == "Acme Corp"

    def test_admin_capabilities(self):
        permissions = classify(ADMIN)

        assert permissions.label == "Admin"
        assert permissions.can_access_company_boards
        assert permissions.can_access_admin

    def test_is_deterministic(self):
        assert classify(COMPANY) == classify(COMPANY)

    def test_every_tier_has_label_and_badge(self):
        for tier in PermissionTier:
            assert tier in TIER_LABELS
            assert tier in TIER_BADGE_STYLES

    def test_as_dict_shape(self):
        data = classify(COMPANY).as_dict()

        assert data["tier"] == "company"
        assert data["is_company_user"] is True
        assert data["company_slug"] == "acme"


class TestAuthorize:
    @pytest.mark.parametrize(
        "session,required_access",
        [
            (GENERAL, RequiredAccess.AUTHENTICATED),
            (COMPANY, RequiredAccess.AUTHENTICATED),
            (COMPANY, RequiredAccess.COMPANY),
            (ADMIN, RequiredAccess.AUTHENTICATED),
            (ADMIN, RequiredAccess.COMPANY),
            (ADMIN, RequiredAccess.ADMIN),
        ],
    )
    def test_allowed(self, session, required_access):
        decision = authorize(session, required_access)
        assert decision.allowed
        assert decision.denial is None

    def test_guest_needs_login(self):
        decision = authorize(None, RequiredAccess.AUTHENTICATED)

        assert not decision.allowed
        assert decision.denial is DENIALS[RequiredAccess.AUTHENTICATED]
        assert decision.denial.remedy == Remedies.LOGIN
        assert decision.denial.remedy.href == "/login"

    def test_guest_denied_company_with_company_remedy(self):
        decision = authorize(GUEST_SESSION, RequiredAccess.COMPANY)

        assert not decision.allowed
        assert decision.denial.title == "Company Verification Required"
        assert decision.denial.remedy.href == "/register?type=company"

    def test_general_denied_company(self):
        decision = authorize(GENERAL, RequiredAccess.COMPANY)

        assert not decision.allowed
        assert decision.denial.required_access == RequiredAccess.COMPANY

    def test_company_denied_admin_without_remedy(self):
        decision = authorize(COMPANY, RequiredAccess.ADMIN)

        assert not decision.allowed
        assert decision.denial.title == "Admin Access Required"
        assert decision.denial.remedy is None

    def test_denial_details(self):
        details = DENIALS[RequiredAccess.AUTHENTICATED].as_details()

        assert details == {
            "required_access": "authenticated",
            "title": "Login Required",
            "description": "Please login to use this feature.",
            "remedy": {"action": "login", "label": "Login", "href": "/login"},
        }
        assert DENIALS[RequiredAccess.ADMIN].as_details()["remedy"] is None
