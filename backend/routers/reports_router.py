"""
Router for report endpoints.

Members submit reports; the moderation queue and every transition are
admin-only.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PaginationLimit, PaginationPage, build_pagination_meta
from helpers.responses import envelope
from repositories.database import get_db
from services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.ReportResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_report(
    report_data: schemas.ReportCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> dict:
    """
    Report a post, comment or user.

    One open report per reporter and target. Domain exceptions are caught
    by centralized exception handlers.
    """
    report = ReportService.submit(db, current_user.id, report_data)
    return envelope(report)


@router.get("", response_model=schemas.ApiResponse[list[schemas.ReportResponse]])
def list_reports(
    status_filter: Optional[db_models.ReportStatus] = Query(None, alias="status"),
    reason: Optional[db_models.ReportReason] = None,
    page: PaginationPage = 1,
    limit: PaginationLimit = 20,
    db: Session = Depends(get_db),
    _: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    """Get the moderation queue, newest first."""
    reports, total = ReportService.list_reports(
        db, status=status_filter, reason=reason, page=page, limit=limit
    )
    return envelope(reports, build_pagination_meta(page, limit, total))


@router.get("/stats", response_model=schemas.ApiResponse[schemas.ReportStats])
def get_report_stats(
    db: Session = Depends(get_db),
    _: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    """Get report counts by status."""
    return envelope(ReportService.get_stats(db))


@router.get("/{report_id}", response_model=schemas.ApiResponse[schemas.ReportResponse])
def get_report(
    report_id: int,
    db: Session = Depends(get_db),
    _: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    return envelope(ReportService.get_report(db, report_id))


@router.patch(
    "/{report_id}/resolve",
    response_model=schemas.ApiResponse[schemas.ReportResponse],
)
def resolve_report(
    report_id: int,
    resolve_data: schemas.ReportResolve,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    """
    Resolve or dismiss a report.

    A report can be closed once; the second attempt gets 409.
    """
    report = ReportService.resolve(
        db,
        report_id=report_id,
        admin_id=current_user.id,
        status=resolve_data.status,
        resolution=resolve_data.resolution,
    )
    return envelope(report)


@router.post(
    "/{report_id}/hide",
    response_model=schemas.ApiResponse[schemas.ReportResponse],
)
def hide_reported_content(
    report_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    """Hide the reported post or comment and resolve the report."""
    return envelope(ReportService.hide_content(db, report_id, current_user.id))


@router.post(
    "/{report_id}/delete",
    response_model=schemas.ApiResponse[schemas.ReportResponse],
)
def delete_reported_content(
    report_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    """Soft-delete the reported post or comment and resolve the report."""
    return envelope(ReportService.delete_content(db, report_id, current_user.id))
