"""
ReviewShare Backend — Comment Route Handlers
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from reviewshare.auth import CurrentUser, get_current_user
from reviewshare.schemas.comment import Comment, CommentCreate
from reviewshare.schemas.common import MAX_ID, ActionResponse, ErrorResponse, LikeResponse
from reviewshare.services.comment_service import comment_service
from reviewshare.store import DynamoStore, get_store

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("", response_model=List[Comment])
async def list_comments(store: DynamoStore = Depends(get_store)) -> List[Comment]:
    return await comment_service.get_all_comments(store)


@router.get("/review/{review_id}", response_model=List[Comment])
async def comments_for_review(
    review_id: int = Path(le=MAX_ID), store: DynamoStore = Depends(get_store)
) -> List[Comment]:
    return await comment_service.get_comments_by_review_id(store, review_id)


@router.post("", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: CommentCreate,
    store: DynamoStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
) -> ActionResponse:
    return await comment_service.add_comment(store, current_user.user_id, payload)


@router.post(
    "/{comment_id}/like",
    response_model=LikeResponse,
    responses={404: {"description": "Comment not found", "model": ErrorResponse}},
)
async def like_comment(
    comment_id: int = Path(le=MAX_ID),
    store: DynamoStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
) -> LikeResponse:
    return await comment_service.like_comment(store, comment_id)
