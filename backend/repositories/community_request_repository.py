"""
Repository for community request operations.
"""

from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from repositories.db_models import (
    CommunityRequest,
    CommunityRequestStatus,
    CommunityType,
)


class CommunityRequestRepository(BaseRepository[CommunityRequest]):
    """Repository for community request data access."""

    def __init__(self, db: Session):
        super().__init__(CommunityRequest, db)

    def get_pending_by_user_and_name(
        self, user_id: int, name: str
    ) -> CommunityRequest | None:
        """
        Find a PENDING request by this user whose name matches case-insensitively.

        Args:
            user_id: ID of the requester
            name: Requested community name

        Returns:
            Matching pending request, or None
        """
        return (
            self.db.query(CommunityRequest)
            .filter(
                CommunityRequest.user_id == user_id,
                CommunityRequest.status == CommunityRequestStatus.PENDING,
                func.lower(CommunityRequest.name) == name.strip().lower(),
            )
            .first()
        )

    def list_by_user(
        self, user_id: int, page: int = 1, limit: int = 20
    ) -> tuple[list[CommunityRequest], int]:
        query = (
            self.db.query(CommunityRequest)
            .filter(CommunityRequest.user_id == user_id)
            .order_by(CommunityRequest.created_at.desc(), CommunityRequest.id.desc())
        )
        return self.paginate(query, page, limit)

    def list_filtered(
        self,
        status: CommunityRequestStatus | None = None,
        target_type: CommunityType | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[CommunityRequest], int]:
        """
        Get requests for the admin review queue, newest first.

        Args:
            status: Filter by status
            target_type: Filter by target type
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (requests, total_count)
        """
        query = self.db.query(CommunityRequest)
        if status:
            query = query.filter(CommunityRequest.status == status)
        if target_type:
            query = query.filter(CommunityRequest.target_type == target_type)

        query = query.order_by(
            CommunityRequest.created_at.desc(), CommunityRequest.id.desc()
        )
        return self.paginate(query, page, limit)
