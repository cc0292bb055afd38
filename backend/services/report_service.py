"""
Service for the report / moderation workflow.

A report moves PENDING (or the reserved REVIEWING) -> RESOLVED | DISMISSED
exactly once. Every transition is a single conditional UPDATE, so when two
moderators act on the same report one of them wins and the other gets
ReportAlreadyProcessedException with nothing changed.
"""

from datetime import datetime, timezone

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
from models.exceptions import (
    CannotReportOwnContentException,
    CommentNotFoundException,
    DuplicateReportException,
    PostNotFoundException,
    ReportAlreadyProcessedException,
    ReportNotFoundException,
    ReportTargetRequiredException,
    UserNotFoundException,
    ValidationException,
)
from repositories.content_repository import CommentRepository, PostRepository
from repositories.db_models import (
    OPEN_REPORT_STATUSES,
    TERMINAL_REPORT_STATUSES,
    ContentStatus,
    Report,
    ReportReason,
    ReportStatus,
)
from repositories.report_repository import ReportRepository
from repositories.user_repository import UserRepository
from services.admin_alert_service import AdminAlertService

MAX_DESCRIPTION_LENGTH = 1000

CONTENT_HIDDEN = "Content hidden"
CONTENT_DELETED = "Content deleted"


class ReportService:
    """Service for report business logic."""

    @staticmethod
    def submit(
        db: Session, reporter_id: int, report_data: schemas.ReportCreate
    ) -> Report:
        """
        Create a report on a post, comment or user.

        The reported user is taken from the post or comment author when
        content is reported.

        Args:
            db: Database session
            reporter_id: ID of the reporting user
            report_data: Validated report payload

        Returns:
            Created report in PENDING

        Raises:
            ReportTargetRequiredException: If no target is given
            ValidationException: If the description is too long
            PostNotFoundException: If the post is missing or deleted
            CommentNotFoundException: If the comment is missing or deleted
            UserNotFoundException: If the reported user does not exist
            CannotReportOwnContentException: If the target belongs to the reporter
            DuplicateReportException: If the reporter has an open report on it
        """
        post_id = report_data.post_id
        comment_id = report_data.comment_id
        reported_user_id = report_data.reported_user_id
        if post_id is None and comment_id is None and reported_user_id is None:
            raise ReportTargetRequiredException()

        description = report_data.description
        if description and len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationException(
                "Description cannot exceed 1,000 characters",
                details={
                    "description": ["Description cannot exceed 1,000 characters"]
                },
            )

        target_user_id: int | None = None

        if post_id is not None:
            post = PostRepository(db).get_visible(post_id)
            if not post:
                raise PostNotFoundException(post_id)
            target_user_id = post.author_id

        if comment_id is not None:
            comment = CommentRepository(db).get_visible(comment_id)
            if not comment:
                raise CommentNotFoundException(comment_id)
            target_user_id = comment.author_id

        if reported_user_id is not None:
            if not UserRepository(db).get_by_id(reported_user_id):
                raise UserNotFoundException(reported_user_id)
            target_user_id = reported_user_id

        if target_user_id == reporter_id:
            raise CannotReportOwnContentException()

        report_repo = ReportRepository(db)
        existing = report_repo.get_open_by_reporter_and_target(
            reporter_id,
            post_id=post_id,
            comment_id=comment_id,
            reported_user_id=target_user_id,
        )
        if existing:
            raise DuplicateReportException()

        report = report_repo.create(
            Report(
                reporter_id=reporter_id,
                post_id=post_id,
                comment_id=comment_id,
                reported_user_id=target_user_id,
                reason=report_data.reason,
                description=description,
                status=ReportStatus.PENDING,
            )
        )
        logger.info(
            f"Report {report.id} submitted by user {reporter_id} "
            f"({report.reason.value})"
        )

        AdminAlertService.notify_new_report(
            report.id, report.reason.value, ReportService._describe_target(report)
        )
        return report

    @staticmethod
    def get_report(db: Session, report_id: int) -> Report:
        """
        Get a report by ID.

        Raises:
            ReportNotFoundException: If report not found
        """
        report = ReportRepository(db).get_by_id(report_id)
        if not report:
            raise ReportNotFoundException(report_id)
        return report

    @staticmethod
    def list_reports(
        db: Session,
        status: ReportStatus | None = None,
        reason: ReportReason | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Report], int]:
        """
        Get the moderation queue.

        Returns:
            Tuple of (reports, total_count)
        """
        return ReportRepository(db).list_filtered(
            status=status, reason=reason, page=page, limit=limit
        )

    @staticmethod
    def get_stats(db: Session) -> schemas.ReportStats:
        counts = ReportRepository(db).count_by_status()
        return schemas.ReportStats(
            pending=counts[ReportStatus.PENDING],
            reviewing=counts[ReportStatus.REVIEWING],
            resolved=counts[ReportStatus.RESOLVED],
            dismissed=counts[ReportStatus.DISMISSED],
            total=sum(counts.values()),
        )

    @staticmethod
    def resolve(
        db: Session,
        report_id: int,
        admin_id: int,
        status: ReportStatus,
        resolution: str | None = None,
    ) -> Report:
        """
        Resolve or dismiss a report.

        Args:
            db: Database session
            report_id: ID of the report
            admin_id: ID of the acting admin
            status: RESOLVED or DISMISSED
            resolution: Optional note kept with the report

        Returns:
            Updated report

        Raises:
            ReportNotFoundException: If report not found
            ValidationException: If status is not a terminal status
            ReportAlreadyProcessedException: If the report is already terminal
        """
        if status not in TERMINAL_REPORT_STATUSES:
            raise ValidationException(
                "Status must be RESOLVED or DISMISSED",
                details={"status": ["Status must be RESOLVED or DISMISSED"]},
            )

        report = ReportService._get_open_report(db, report_id)
        ReportService._close(db, report, admin_id, status, resolution)

        logger.info(
            f"Report {report_id} {status.value.lower()} by admin {admin_id}"
        )
        return report

    @staticmethod
    def hide_content(db: Session, report_id: int, admin_id: int) -> Report:
        """
        Hide the reported post or comment and resolve the report.

        Raises:
            ReportNotFoundException: If report not found
            ReportAlreadyProcessedException: If the report is already terminal
            ValidationException: If the report names no post or comment
        """
        return ReportService._moderate_content(
            db, report_id, admin_id, ContentStatus.HIDDEN, CONTENT_HIDDEN
        )

    @staticmethod
    def delete_content(db: Session, report_id: int, admin_id: int) -> Report:
        """
        Soft-delete the reported post or comment and resolve the report.

        Raises:
            ReportNotFoundException: If report not found
            ReportAlreadyProcessedException: If the report is already terminal
            ValidationException: If the report names no post or comment
        """
        return ReportService._moderate_content(
            db, report_id, admin_id, ContentStatus.DELETED, CONTENT_DELETED
        )

    # =========================================================================
    # Internal helpers
    # =========================================================================

    @staticmethod
    def _get_open_report(db: Session, report_id: int) -> Report:
        report = ReportService.get_report(db, report_id)
        if report.status not in OPEN_REPORT_STATUSES:
            raise ReportAlreadyProcessedException(report_id)
        return report

    @staticmethod
    def _moderate_content(
        db: Session,
        report_id: int,
        admin_id: int,
        content_status: ContentStatus,
        resolution: str,
    ) -> Report:
        report = ReportService._get_open_report(db, report_id)
        if report.post_id is None and report.comment_id is None:
            raise ValidationException("This report does not target a post or comment")

        if report.post_id is not None:
            PostRepository(db).set_status(report.post_id, content_status)
        if report.comment_id is not None:
            CommentRepository(db).set_status(report.comment_id, content_status)

        # Content change and report transition commit together
        ReportService._close(db, report, admin_id, ReportStatus.RESOLVED, resolution)

        logger.info(
            f"Report {report_id}: {ReportService._describe_target(report)} set to "
            f"{content_status.value} by admin {admin_id}"
        )
        return report

    @staticmethod
    def _close(
        db: Session,
        report: Report,
        admin_id: int,
        status: ReportStatus,
        resolution: str | None,
    ) -> None:
        """
        Apply the guarded terminal transition and commit.

        Rolls back everything staged in the session when another admin
        closed the report first.
        """
        report_repo = ReportRepository(db)
        updated = report_repo.transition(
            report.id,
            OPEN_REPORT_STATUSES,
            {
                "status": status,
                "resolution": resolution,
                "resolved_by": admin_id,
                "resolved_at": datetime.now(timezone.utc),
            },
        )
        if updated == 0:
            report_repo.rollback()
            logger.warning(f"Report {report.id} was closed concurrently")
            raise ReportAlreadyProcessedException(report.id)

        report_repo.commit()
        report_repo.refresh(report)

    @staticmethod
    def _describe_target(report: Report) -> str:
        if report.comment_id is not None:
            return f"comment {report.comment_id}"
        if report.post_id is not None:
            return f"post {report.post_id}"
        return f"user {report.reported_user_id}"
