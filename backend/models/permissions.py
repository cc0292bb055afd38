"""
Permission tiers and the access gate.

A member's tier is derived from their session on every request; nothing here
is cached or stored. ``classify`` maps a session snapshot to a tier plus the
capability flags the UI and routers consult, and ``authorize`` turns a
required access level into an allow/deny decision with a suggested remedy.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple

from repositories.db_models import UserRole


class PermissionTier(str, Enum):
    GUEST = "guest"
    GENERAL = "general"
    COMPANY = "company"
    ADMIN = "admin"


class RequiredAccess(str, Enum):
    AUTHENTICATED = "authenticated"
    COMPANY = "company"
    ADMIN = "admin"


class Remedy(NamedTuple):
    """Corrective action suggested alongside a denial."""

    action: str
    label: str
    href: str


class Remedies:
    LOGIN = Remedy("login", "Login", "/login")
    COMPANY_VERIFICATION = Remedy(
        "company_verification", "Verify Company", "/register?type=company"
    )


@dataclass(frozen=True)
class CompanyInfo:
    id: int
    slug: str
    name: str


@dataclass(frozen=True)
class SessionSnapshot:
    """What the classifier needs to know about the caller."""

    is_authenticated: bool = False
    role: UserRole = UserRole.USER
    company_verified: bool = False
    company: CompanyInfo | None = None


GUEST_SESSION = SessionSnapshot()


@dataclass(frozen=True)
class Permissions:
    tier: PermissionTier
    can_access_company_hall: bool
    can_access_company_boards: bool
    can_access_public_servant: bool
    can_access_interests: bool
    can_access_free_talk: bool
    can_create_post: bool
    can_request_community: bool
    can_access_admin: bool
    company_slug: str | None = None
    company_name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.tier == PermissionTier.ADMIN

    @property
    def is_company_user(self) -> bool:
        return self.tier == PermissionTier.COMPANY

    @property
    def is_general_user(self) -> bool:
        return self.tier == PermissionTier.GENERAL

    @property
    def is_guest(self) -> bool:
        return self.tier == PermissionTier.GUEST

    @property
    def label(self) -> str:
        return TIER_LABELS[self.tier]

    def as_dict(self) -> dict[str, Any]:
        return {
            "tier": self.tier.value,
            "label": self.label,
            "is_admin": self.is_admin,
            "is_company_user": self.is_company_user,
            "is_general_user": self.is_general_user,
            "is_guest": self.is_guest,
            "can_access_company_hall": self.can_access_company_hall,
            "can_access_company_boards": self.can_access_company_boards,
            "can_access_public_servant": self.can_access_public_servant,
            "can_access_interests": self.can_access_interests,
            "can_access_free_talk": self.can_access_free_talk,
            "can_create_post": self.can_create_post,
            "can_request_community": self.can_request_community,
            "can_access_admin": self.can_access_admin,
            "company_slug": self.company_slug,
            "company_name": self.company_name,
        }


TIER_LABELS: dict[PermissionTier, str] = {
    PermissionTier.ADMIN: "Admin",
    PermissionTier.COMPANY: "Company Verified",
    PermissionTier.GENERAL: "Member",
    PermissionTier.GUEST: "Guest",
}

TIER_BADGE_STYLES: dict[PermissionTier, str] = {
    PermissionTier.ADMIN: "bg-red-100 text-red-700",
    PermissionTier.COMPANY: "bg-blue-100 text-blue-700",
    PermissionTier.GENERAL: "bg-green-100 text-green-700",
    PermissionTier.GUEST: "bg-gray-100 text-gray-700",
}

# Tiers that satisfy each required access level
ACCESS_TIERS: dict[RequiredAccess, frozenset[PermissionTier]] = {
    RequiredAccess.AUTHENTICATED: frozenset(
        {PermissionTier.GENERAL, PermissionTier.COMPANY, PermissionTier.ADMIN}
    ),
    RequiredAccess.COMPANY: frozenset({PermissionTier.COMPANY, PermissionTier.ADMIN}),
    RequiredAccess.ADMIN: frozenset({PermissionTier.ADMIN}),
}


@dataclass(frozen=True)
class AccessDenial:
    required_access: RequiredAccess
    title: str
    description: str
    remedy: Remedy | None

    def as_details(self) -> dict[str, Any]:
        return {
            "required_access": self.required_access.value,
            "title": self.title,
            "description": self.description,
            "remedy": self.remedy._asdict() if self.remedy else None,
        }


DENIALS: dict[RequiredAccess, AccessDenial] = {
    RequiredAccess.AUTHENTICATED: AccessDenial(
        RequiredAccess.AUTHENTICATED,
        "Login Required",
        "Please login to use this feature.",
        Remedies.LOGIN,
    ),
    RequiredAccess.COMPANY: AccessDenial(
        RequiredAccess.COMPANY,
        "Company Verification Required",
        "Only users verified with a company email can access this.",
        Remedies.COMPANY_VERIFICATION,
    ),
    RequiredAccess.ADMIN: AccessDenial(
        RequiredAccess.ADMIN,
        "Admin Access Required",
        "Only administrators can access this page.",
        None,
    ),
}


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    denial: AccessDenial | None = None


ALLOW = AccessDecision(allowed=True)


def classify_tier(session: Any) -> PermissionTier:
    """
    Derive the tier for a session. First matching rule wins.

    Anything that is not a SessionSnapshot is treated as unauthenticated.
    """
    if not isinstance(session, SessionSnapshot) or not session.is_authenticated:
        return PermissionTier.GUEST
    if session.role == UserRole.ADMIN:
        return PermissionTier.ADMIN
    if session.company_verified and session.company is not None:
        return PermissionTier.COMPANY
    return PermissionTier.GENERAL


def classify(session: Any) -> Permissions:
    """
    Map a session snapshot to its tier and capability flags.

    Args:
        session: SessionSnapshot of the caller (or None for anonymous)

    Returns:
        Permissions for the session
    """
    tier = classify_tier(session)
    member = tier != PermissionTier.GUEST
    company = session.company if tier != PermissionTier.GUEST else None

    return Permissions(
        tier=tier,
        can_access_company_hall=member,
        can_access_company_boards=tier in ACCESS_TIERS[RequiredAccess.COMPANY],
        can_access_public_servant=member,
        can_access_interests=member,
        can_access_free_talk=member,
        can_create_post=member,
        can_request_community=member,
        can_access_admin=tier == PermissionTier.ADMIN,
        company_slug=company.slug if company else None,
        company_name=company.name if company else None,
    )


def authorize(session: Any, required_access: RequiredAccess) -> AccessDecision:
    """
    Decide whether a session satisfies a required access level.

    The decision is pure; callers enforce it.

    Args:
        session: SessionSnapshot of the caller
        required_access: Access level the operation needs

    Returns:
        ALLOW, or a denial carrying title, description and remedy
    """
    tier = classify_tier(session)
    if tier in ACCESS_TIERS[required_access]:
        return ALLOW
    return AccessDecision(allowed=False, denial=DENIALS[required_access])
