"""
ReviewShare Backend — Review Route Handlers
============================================

What:  Listing, paginated browsing, search, per-author lists, creation,
       likes and deletion of reviews.
Who:   Called by the frontend feed, review detail and editor pages.

Route order matters: the fixed paths (/page, /search, /author/...) are
declared before /{review_id}.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from reviewshare.auth import CurrentUser, get_current_user
from reviewshare.config import settings
from reviewshare.exceptions import ValidationError
from reviewshare.schemas.common import MAX_ID, ActionResponse, ErrorResponse, LikeResponse
from reviewshare.schemas.review import Review, ReviewCreate, ReviewPage
from reviewshare.services.review_service import review_service
from reviewshare.store import DynamoStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get("", response_model=List[Review])
async def list_reviews(store: DynamoStore = Depends(get_store)) -> List[Review]:
    """Every review in the table (full scan, no pagination)."""
    return await review_service.get_all_reviews(store)


@router.get(
    "/page",
    response_model=ReviewPage,
    responses={400: {"description": "Malformed cursor", "model": ErrorResponse}},
    summary="Browse reviews page by page",
)
async def list_reviews_page(
    limit: Optional[int] = Query(default=None, ge=1, description="Items per page"),
    cursor: Optional[str] = Query(
        default=None,
        description="Opaque cursor from the previous page's response. Omit for the first page.",
    ),
    store: DynamoStore = Depends(get_store),
) -> ReviewPage:
    """
    Example client usage:
        Page 1: GET /reviews/page?limit=10
        Page 2: GET /reviews/page?limit=10&cursor=eyJpZCI6MTB9
        (cursor comes from the previous response; null means no more pages)
    """
    page_size = min(limit or settings.page_size_default, settings.page_size_max)
    return await review_service.fetch_reviews_with_pagination(store, page_size, cursor)


@router.get(
    "/search",
    response_model=List[Review],
    responses={400: {"description": "Empty query", "model": ErrorResponse}},
)
async def search_reviews(
    q: str = Query(default="", max_length=200, description="Substring to look for"),
    store: DynamoStore = Depends(get_store),
) -> List[Review]:
    if not q.strip():
        raise ValidationError(message="Search query must not be empty", field="q")
    return await review_service.search_reviews(store, q)


@router.get("/author/{author}", response_model=List[Review])
async def reviews_by_author(
    author: str,
    exclude: Optional[int] = Query(default=None, le=MAX_ID, description="Review id to leave out"),
    store: DynamoStore = Depends(get_store),
) -> List[Review]:
    return await review_service.get_reviews_by_author(store, author, exclude)


@router.get(
    "/{review_id}",
    response_model=Review,
    responses={404: {"description": "Review not found", "model": ErrorResponse}},
)
async def get_review(
    review_id: int = Path(le=MAX_ID), store: DynamoStore = Depends(get_store)
) -> Review:
    return await review_service.get_review_by_id(store, review_id)


@router.post("", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    payload: ReviewCreate,
    store: DynamoStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
) -> ActionResponse:
    return await review_service.add_review(store, current_user.user_id, payload)


@router.post(
    "/{review_id}/like",
    response_model=LikeResponse,
    responses={404: {"description": "Review not found", "model": ErrorResponse}},
)
async def like_review(
    review_id: int = Path(le=MAX_ID),
    store: DynamoStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
) -> LikeResponse:
    return await review_service.like_review(store, review_id)


@router.delete(
    "/{review_id}",
    response_model=ActionResponse,
    responses={
        403: {"description": "Not the author", "model": ErrorResponse},
        404: {"description": "Review not found", "model": ErrorResponse},
    },
)
async def delete_review(
    review_id: int = Path(le=MAX_ID),
    store: DynamoStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
) -> ActionResponse:
    return await review_service.delete_review(store, review_id, author=current_user.user_id)
