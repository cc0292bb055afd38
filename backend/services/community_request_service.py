"""
Service for the community request workflow.

PENDING -> APPROVED | REJECTED (admin review) or CANCELLED (requester).
Approval creates the backing community in the same transaction as the status
change; a failure anywhere leaves the request PENDING and no community.
"""

import re
from datetime import datetime, timezone
from typing import NamedTuple

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
from models.exceptions import (
    CommunityRequestAlreadyProcessedException,
    CommunityRequestNotFoundException,
    CommunitySlugTakenException,
    DomainException,
    DuplicateCommunityRequestException,
    InvalidCommunityTargetException,
    NotRequestOwnerException,
    ValidationException,
)
from repositories.base import BaseRepository
from repositories.community_repository import (
    CommunityRepository,
    CompanyRepository,
    InterestCategoryRepository,
    PublicServantCategoryRepository,
)
from repositories.community_request_repository import CommunityRequestRepository
from repositories.db_models import (
    Community,
    CommunityRequest,
    CommunityRequestStatus,
    CommunityType,
    NotificationType,
)
from services.admin_alert_service import AdminAlertService
from services.notification_service import NotificationService

# Lower-case ASCII letters, digits and Hangul syllables survive in slugs
SLUG_INVALID_CHARS = re.compile(r"[^a-z0-9가-힣]+")


class TargetRule(NamedTuple):
    """Reference field a target type requires and where it resolves."""

    field: str
    alias: str
    repository: type[BaseRepository]
    label: str


TARGET_RULES: dict[CommunityType, TargetRule | None] = {
    CommunityType.COMPANY: TargetRule(
        "company_id", "companyId", CompanyRepository, "Company"
    ),
    CommunityType.PUBLIC_SERVANT: TargetRule(
        "public_servant_category_id",
        "publicServantCategoryId",
        PublicServantCategoryRepository,
        "Public servant category",
    ),
    CommunityType.INTEREST: TargetRule(
        "interest_category_id",
        "interestCategoryId",
        InterestCategoryRepository,
        "Interest category",
    ),
    CommunityType.GENERAL: None,
}

REFERENCE_FIELDS = (
    "company_id",
    "public_servant_category_id",
    "interest_category_id",
)


def build_slug(name: str, fallback_id: int) -> str:
    """
    Derive a community slug from a requested name.

    Runs of characters other than a-z, 0-9 and Hangul collapse to a single
    hyphen; leading and trailing hyphens are trimmed. Names with nothing
    left fall back to ``community-<id>``.
    """
    slug = SLUG_INVALID_CHARS.sub("-", name.lower()).strip("-")
    return slug or f"community-{fallback_id}"


class CommunityRequestService:
    """Service for community request business logic."""

    @staticmethod
    def create(
        db: Session, user_id: int, request_data: schemas.CommunityRequestCreate
    ) -> CommunityRequest:
        """
        Submit a request for a new community.

        References that do not belong to the target type are dropped.

        Args:
            db: Database session
            user_id: ID of the requester
            request_data: Validated request payload

        Returns:
            Created request in PENDING

        Raises:
            InvalidCommunityTargetException: If the target type needs a
                reference that is missing or does not resolve
            DuplicateCommunityRequestException: If the user already has a
                pending request with the same name
        """
        references = CommunityRequestService._resolve_references(db, request_data)

        request_repo = CommunityRequestRepository(db)
        if request_repo.get_pending_by_user_and_name(user_id, request_data.name):
            raise DuplicateCommunityRequestException()

        request = request_repo.create(
            CommunityRequest(
                user_id=user_id,
                name=request_data.name,
                description=request_data.description,
                target_type=request_data.target_type,
                status=CommunityRequestStatus.PENDING,
                **references,
            )
        )
        logger.info(
            f"Community request {request.id} ({request.target_type.value}) "
            f"submitted by user {user_id}"
        )

        AdminAlertService.notify_community_request(
            request.id, request.name, request.target_type.value
        )
        return request

    @staticmethod
    def get_request(db: Session, request_id: int) -> CommunityRequest:
        request = CommunityRequestRepository(db).get_by_id(request_id)
        if not request:
            raise CommunityRequestNotFoundException(request_id)
        return request

    @staticmethod
    def cancel(db: Session, request_id: int, user_id: int) -> CommunityRequest:
        """
        Cancel a pending request. Only the requester may cancel.

        Raises:
            CommunityRequestNotFoundException: If request not found
            NotRequestOwnerException: If the user is not the requester
            CommunityRequestAlreadyProcessedException: If no longer pending
        """
        request = CommunityRequestService.get_request(db, request_id)
        if request.user_id != user_id:
            raise NotRequestOwnerException()

        not_pending = "Only pending requests can be cancelled."
        if request.status != CommunityRequestStatus.PENDING:
            raise CommunityRequestAlreadyProcessedException(request_id, not_pending)

        request_repo = CommunityRequestRepository(db)
        updated = request_repo.transition(
            request_id,
            (CommunityRequestStatus.PENDING,),
            {"status": CommunityRequestStatus.CANCELLED},
        )
        if updated == 0:
            request_repo.rollback()
            raise CommunityRequestAlreadyProcessedException(request_id, not_pending)

        request_repo.commit()
        request_repo.refresh(request)
        logger.info(f"Community request {request_id} cancelled by user {user_id}")
        return request

    @staticmethod
    def review(
        db: Session,
        request_id: int,
        admin_id: int,
        status: CommunityRequestStatus,
        admin_note: str | None = None,
    ) -> CommunityRequest:
        """
        Approve or reject a pending request.

        On approval the community is created and linked; the status change,
        the community and the requester's notification commit together.

        Args:
            db: Database session
            request_id: ID of the request
            admin_id: ID of the reviewing admin
            status: APPROVED or REJECTED
            admin_note: Optional note shown to the requester

        Returns:
            Reviewed request

        Raises:
            CommunityRequestNotFoundException: If request not found
            CommunityRequestAlreadyProcessedException: If no longer pending
            CommunitySlugTakenException: If the derived slug is already used
            ValidationException: If status is not APPROVED or REJECTED
        """
        if status not in (
            CommunityRequestStatus.APPROVED,
            CommunityRequestStatus.REJECTED,
        ):
            raise ValidationException(
                "Status must be APPROVED or REJECTED",
                details={"status": ["Status must be APPROVED or REJECTED"]},
            )

        request = CommunityRequestService.get_request(db, request_id)
        if request.status != CommunityRequestStatus.PENDING:
            raise CommunityRequestAlreadyProcessedException(request_id)

        request_repo = CommunityRequestRepository(db)
        slug: str | None = None
        try:
            updated = request_repo.transition(
                request_id,
                (CommunityRequestStatus.PENDING,),
                {
                    "status": status,
                    "admin_note": admin_note,
                    "reviewed_by": admin_id,
                    "reviewed_at": datetime.now(timezone.utc),
                },
            )
            if updated == 0:
                raise CommunityRequestAlreadyProcessedException(request_id)

            if status == CommunityRequestStatus.APPROVED:
                slug = build_slug(request.name, request.id)
                community = CommunityRequestService._create_community(
                    db, request, slug
                )
                request.created_community_id = community.id

            NotificationService.stage_notification(
                db,
                user_id=request.user_id,
                notification_type=NotificationType.SYSTEM,
                **CommunityRequestService._review_message(
                    request, status, slug, admin_note
                ),
            )
            request_repo.commit()
        except IntegrityError:
            request_repo.rollback()
            logger.warning(f"Slug {slug} for request {request_id} taken concurrently")
            raise CommunitySlugTakenException(slug or "")
        except DomainException:
            request_repo.rollback()
            raise

        request_repo.refresh(request)
        logger.info(
            f"Community request {request_id} {status.value.lower()} by admin {admin_id}"
        )
        return request

    @staticmethod
    def list_user_requests(
        db: Session, user_id: int, page: int = 1, limit: int = 20
    ) -> tuple[list[CommunityRequest], int]:
        return CommunityRequestRepository(db).list_by_user(user_id, page, limit)

    @staticmethod
    def list_admin_requests(
        db: Session,
        status: CommunityRequestStatus | None = None,
        target_type: CommunityType | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[CommunityRequest], int]:
        return CommunityRequestRepository(db).list_filtered(
            status=status, target_type=target_type, page=page, limit=limit
        )

    # =========================================================================
    # Internal helpers
    # =========================================================================

    @staticmethod
    def _resolve_references(
        db: Session, request_data: schemas.CommunityRequestCreate
    ) -> dict[str, int | None]:
        """
        Keep only the reference the target type uses, after checking it resolves.

        Returns:
            Column values for all three reference fields
        """
        references: dict[str, int | None] = dict.fromkeys(REFERENCE_FIELDS)
        rule = TARGET_RULES[request_data.target_type]
        if rule is None:
            return references

        reference_id = getattr(request_data, rule.field)
        if reference_id is None:
            raise InvalidCommunityTargetException(
                rule.alias, f"{rule.label} is required for this community type."
            )
        if rule.repository(db).get_by_id(reference_id) is None:  # type: ignore[call-arg]
            raise InvalidCommunityTargetException(
                rule.alias, f"{rule.label} not found."
            )

        references[rule.field] = reference_id
        return references

    @staticmethod
    def _create_community(
        db: Session, request: CommunityRequest, slug: str
    ) -> Community:
        community_repo = CommunityRepository(db)
        if community_repo.slug_exists(slug):
            raise CommunitySlugTakenException(slug)

        community = Community(
            name=request.name,
            slug=slug,
            description=request.description,
            type=request.target_type,
            company_id=request.company_id,
            public_servant_category_id=request.public_servant_category_id,
            interest_category_id=request.interest_category_id,
        )
        community_repo.add(community)
        community_repo.flush()
        return community

    @staticmethod
    def _review_message(
        request: CommunityRequest,
        status: CommunityRequestStatus,
        slug: str | None,
        admin_note: str | None,
    ) -> dict:
        if status == CommunityRequestStatus.APPROVED:
            return {
                "title": "Community request approved",
                "body": f"Your request for '{request.name}' was approved.",
                "data": {"communityRequestId": request.id, "communitySlug": slug},
            }
        body = f"Your request for '{request.name}' was rejected."
        if admin_note:
            body = f"{body} Note: {admin_note}"
        return {
            "title": "Community request rejected",
            "body": body,
            "data": {"communityRequestId": request.id},
        }
