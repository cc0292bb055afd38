"""
Repository for report operations.
"""

from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from repositories.db_models import (
    OPEN_REPORT_STATUSES,
    Report,
    ReportReason,
    ReportStatus,
)


class ReportRepository(BaseRepository[Report]):
    """Repository for report data access."""

    def __init__(self, db: Session):
        """
        Initialize report repository.

        Args:
            db: Database session
        """
        super().__init__(Report, db)

    def get_open_by_reporter_and_target(
        self,
        reporter_id: int,
        post_id: int | None = None,
        comment_id: int | None = None,
        reported_user_id: int | None = None,
    ) -> Report | None:
        """
        Find an open (PENDING or REVIEWING) report by this reporter on a target.

        Post and comment targets are matched when given; a report naming
        only a user is matched on the reported user.

        Args:
            reporter_id: ID of the reporting user
            post_id: ID of the reported post
            comment_id: ID of the reported comment
            reported_user_id: ID of the reported user

        Returns:
            Existing open report if found, None otherwise
        """
        query = self.db.query(Report).filter(
            Report.reporter_id == reporter_id,
            Report.status.in_(OPEN_REPORT_STATUSES),
        )
        if post_id is not None:
            query = query.filter(Report.post_id == post_id)
        if comment_id is not None:
            query = query.filter(Report.comment_id == comment_id)
        if post_id is None and comment_id is None:
            query = query.filter(
                Report.post_id.is_(None),
                Report.comment_id.is_(None),
                Report.reported_user_id == reported_user_id,
            )
        return query.first()

    def list_filtered(
        self,
        status: ReportStatus | None = None,
        reason: ReportReason | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Report], int]:
        """
        Get reports for the admin queue, newest first.

        Args:
            status: Filter by status
            reason: Filter by reason
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (reports, total_count)
        """
        query = self.db.query(Report)
        if status:
            query = query.filter(Report.status == status)
        if reason:
            query = query.filter(Report.reason == reason)

        query = query.order_by(Report.created_at.desc(), Report.id.desc())
        return self.paginate(query, page, limit)

    def count_by_status(self) -> dict[ReportStatus, int]:
        """
        Count reports grouped by status.

        Returns:
            Mapping of every ReportStatus to its count (0 when absent)
        """
        rows = (
            self.db.query(Report.status, func.count(Report.id))
            .group_by(Report.status)
            .all()
        )
        counts = {status: 0 for status in ReportStatus}
        for status, count in rows:
            counts[status] = count
        return counts
