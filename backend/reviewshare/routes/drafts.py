"""
ReviewShare Backend — Draft Route Handlers
===========================================

What:  Save an unfinished review, list your drafts, publish one.
Who:   Called by the frontend review editor. All routes require a token;
       drafts are private to their author.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from reviewshare.auth import CurrentUser, get_current_user
from reviewshare.schemas.common import MAX_ID, ActionResponse, ErrorResponse
from reviewshare.schemas.draft import Draft, DraftCreate
from reviewshare.services.draft_service import draft_service
from reviewshare.store import DynamoStore, get_store

router = APIRouter(prefix="/drafts", tags=["Drafts"])


@router.post("", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def create_draft(
    payload: DraftCreate,
    store: DynamoStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
) -> ActionResponse:
    return await draft_service.store_draft(store, current_user.user_id, payload)


@router.get("/mine", response_model=List[Draft])
async def my_drafts(
    store: DynamoStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[Draft]:
    return await draft_service.get_drafts_by_author(store, current_user.user_id)


@router.post(
    "/{draft_id}/publish",
    response_model=ActionResponse,
    responses={
        403: {"description": "Not the author", "model": ErrorResponse},
        404: {"description": "Draft not found", "model": ErrorResponse},
    },
    summary="Publish a draft as a review",
)
async def publish_draft(
    draft_id: int = Path(le=MAX_ID),
    store: DynamoStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
) -> ActionResponse:
    """
    Creates a review from the draft and deletes the draft in one transaction.
    The response `id` is the new review's id.
    """
    return await draft_service.publish_draft(store, draft_id, author=current_user.user_id)
