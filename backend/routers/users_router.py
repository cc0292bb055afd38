"""
Router for the current user's tier and capabilities.
"""

from typing import Optional

from fastapi import APIRouter, Depends

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.responses import envelope
from models.permissions import TIER_BADGE_STYLES, classify

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/me/permissions",
    response_model=schemas.ApiResponse[schemas.PermissionsResponse],
)
async def get_my_permissions(
    current_user: Optional[db_models.User] = Depends(auth.get_current_user_optional),
) -> dict:
    """
    Get the caller's tier and capability flags.

    Anonymous callers and callers with an unusable token get the guest tier.
    """
    permissions = classify(auth.build_session_snapshot(current_user))
    return envelope(
        {
            **permissions.as_dict(),
            "badge_style": TIER_BADGE_STYLES[permissions.tier],
        }
    )


@router.get(
    "/me/company",
    response_model=schemas.ApiResponse[schemas.CompanySummary],
)
async def get_my_company(
    current_user: db_models.User = Depends(auth.get_company_user),
) -> dict:
    """
    Get the verified company behind the caller's company boards.

    Admins without a company get ``data: null``.
    """
    return envelope(current_user.company)
