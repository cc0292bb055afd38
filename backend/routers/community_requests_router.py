"""
Router for community request endpoints.
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
from services.community_request_service import CommunityRequestService

router = APIRouter(prefix="/community-requests", tags=["community-requests"])


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.CommunityRequestResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_community_request(
    request_data: schemas.CommunityRequestCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> dict:
    """
    Request a new community.

    Company, public servant and interest requests must name an existing
    company or category.
    """
    request = CommunityRequestService.create(db, current_user.id, request_data)
    return envelope(request)


@router.get(
    "/my",
    response_model=schemas.ApiResponse[list[schemas.CommunityRequestResponse]],
)
def get_my_community_requests(
    page: PaginationPage = 1,
    limit: PaginationLimit = 20,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> dict:
    """Get requests submitted by the current user, newest first."""
    requests, total = CommunityRequestService.list_user_requests(
        db, current_user.id, page=page, limit=limit
    )
    return envelope(requests, build_pagination_meta(page, limit, total))


@router.get(
    "/admin",
    response_model=schemas.ApiResponse[list[schemas.CommunityRequestResponse]],
)
def get_community_requests_for_review(
    status_filter: Optional[db_models.CommunityRequestStatus] = Query(
        None, alias="status"
    ),
    target_type: Optional[db_models.CommunityType] = Query(None, alias="targetType"),
    page: PaginationPage = 1,
    limit: PaginationLimit = 20,
    db: Session = Depends(get_db),
    _: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    """Get the review queue, optionally filtered by status and target type."""
    requests, total = CommunityRequestService.list_admin_requests(
        db,
        status=status_filter,
        target_type=target_type,
        page=page,
        limit=limit,
    )
    return envelope(requests, build_pagination_meta(page, limit, total))


@router.delete(
    "/{request_id}",
    response_model=schemas.ApiResponse[schemas.CommunityRequestResponse],
)
def cancel_community_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> dict:
    """Cancel one of the current user's pending requests."""
    request = CommunityRequestService.cancel(db, request_id, current_user.id)
    return envelope(request)


@router.post(
    "/{request_id}/review",
    response_model=schemas.ApiResponse[schemas.CommunityRequestResponse],
)
def review_community_request(
    request_id: int,
    review_data: schemas.CommunityRequestReview,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> dict:
    """
    Approve or reject a pending request.

    Approval creates the community and links it to the request.
    """
    request = CommunityRequestService.review(
        db,
        request_id=request_id,
        admin_id=current_user.id,
        status=review_data.status,
        admin_note=review_data.admin_note,
    )
    return envelope(request)
