"""
Standardized page/limit parameters and pagination metadata.
"""

import math
from typing import Annotated

from fastapi import Query

from models.config import settings
from models.schemas import PaginationMeta

PaginationPage = Annotated[int, Query(ge=1, description="1-based page number")]
PaginationLimit = Annotated[
    int,
    Query(
        ge=1,
        le=settings.MAX_PAGE_LIMIT,
        description="Maximum number of records to return",
    ),
]


def build_pagination_meta(
    page: int,
    limit: int,
    total: int,
    unread_count: int | None = None,
) -> PaginationMeta:
    """
    Build the ``meta`` block of a paginated response.

    Args:
        page: 1-based page number that was served
        limit: Page size that was served
        total: Total matching records
        unread_count: Optional unread counter for notification lists

    Returns:
        PaginationMeta with total pages and next/prev flags
    """
    total_pages = math.ceil(total / limit) if limit else 0
    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
        unread_count=unread_count,
    )
