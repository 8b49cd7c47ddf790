"""
ReviewShare Backend — User Route Handlers
==========================================

What:  Registration, confirmation, login and the saved-review list.
How:   Thin handlers around UserService. The saved-list endpoints require a
       bearer token whose subject matches the `username` in the body.
Who:   Called by the frontend's auth pages and the bookmark buttons.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from reviewshare.auth import CurrentUser, ensure_same_user, get_current_user
from reviewshare.schemas.common import ActionResponse, ErrorResponse
from reviewshare.schemas.user import (
    ConfirmRequest,
    LoginRequest,
    LoginResponse,
    ProtectedResponse,
    RegisterRequest,
    ResendRequest,
    SavedListResponse,
    SavedRequest,
    SaveReviewRequest,
    UserSummary,
)
from reviewshare.services.code_sender import ConfirmationCodeSender, get_code_sender
from reviewshare.services.user_service import user_service
from reviewshare.store import DynamoStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

_AUTH_ERRORS = {
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    403: {"description": "Token does not belong to this user", "model": ErrorResponse},
}


@router.get("", response_model=List[UserSummary])
async def list_users(store: DynamoStore = Depends(get_store)) -> List[UserSummary]:
    return await user_service.get_all_users(store)


@router.post(
    "/register",
    response_model=ActionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "User already exists", "model": ErrorResponse}},
    summary="Register a new user",
)
async def register(
    payload: RegisterRequest,
    store: DynamoStore = Depends(get_store),
    code_sender: ConfirmationCodeSender = Depends(get_code_sender),
) -> ActionResponse:
    return await user_service.register_user(store, payload.user_id, payload.password, code_sender)


@router.post(
    "/registerconfirm",
    response_model=ActionResponse,
    responses={
        400: {"description": "Wrong or expired code", "model": ErrorResponse},
        404: {"description": "Unknown user", "model": ErrorResponse},
    },
    summary="Confirm a registration with the emailed code",
)
async def register_confirm(
    payload: ConfirmRequest,
    store: DynamoStore = Depends(get_store),
) -> ActionResponse:
    return await user_service.confirm_registration(store, payload.user_id, payload.code)


@router.post(
    "/resendconfirm",
    response_model=ActionResponse,
    responses={
        400: {"description": "User already confirmed", "model": ErrorResponse},
        404: {"description": "Unknown user", "model": ErrorResponse},
    },
    summary="Issue a new confirmation code",
)
async def resend_confirm(
    payload: ResendRequest,
    store: DynamoStore = Depends(get_store),
    code_sender: ConfirmationCodeSender = Depends(get_code_sender),
) -> ActionResponse:
    return await user_service.resend_confirmation_code(store, payload.user_id, code_sender)


@router.post(
    "/login",
    response_model=LoginResponse,
    response_model_exclude_none=True,
    responses={401: {"description": "Invalid credentials or unconfirmed user", "model": LoginResponse}},
    summary="Log in and receive a bearer token",
)
async def login(
    payload: LoginRequest,
    response: Response,
    store: DynamoStore = Depends(get_store),
) -> LoginResponse:
    """
    Returns `{success, message}`; on success also `access_token` and
    `token_type`. A failed login answers 401 with the same envelope.
    """
    result = await user_service.login_user(store, payload.user_id, payload.password)
    if not result.success:
        response.status_code = status.HTTP_401_UNAUTHORIZED
        logger.info("Failed login for %s: %s", payload.user_id, result.message)
    return result


@router.post("/save", response_model=SavedListResponse, responses=_AUTH_ERRORS)
async def save_review(
    payload: SaveReviewRequest,
    store: DynamoStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
) -> SavedListResponse:
    ensure_same_user(current_user, payload.username)
    saved = await user_service.save_review(store, payload.username, payload.review_id)
    return SavedListResponse(saved=saved)


@router.post(
    "/unsave",
    response_model=ActionResponse,
    responses={**_AUTH_ERRORS, 404: {"description": "Review not in saved list", "model": ErrorResponse}},
)
async def unsave_review(
    payload: SaveReviewRequest,
    store: DynamoStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
) -> ActionResponse:
    ensure_same_user(current_user, payload.username)
    return await user_service.unsave_review(store, payload.username, payload.review_id)


@router.post(
    "/saved",
    response_model=SavedListResponse,
    responses={**_AUTH_ERRORS, 404: {"description": "Profile not found", "model": ErrorResponse}},
)
async def saved_reviews(
    payload: SavedRequest,
    store: DynamoStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
) -> SavedListResponse:
    ensure_same_user(current_user, payload.username)
    saved = await user_service.get_user_saved_reviews(store, payload.username)
    return SavedListResponse(saved=saved)


@router.get("/protected", response_model=ProtectedResponse, responses=_AUTH_ERRORS)
async def protected(current_user: CurrentUser = Depends(get_current_user)) -> ProtectedResponse:
    return ProtectedResponse(message="Protected data", user=current_user.user_id)
