"""
ReviewShare Backend — User and Profile Schemas
===============================================

What:  Request/response models for /users.
How:   Wire names follow the frontend's casing (`UserId`, `Password`,
       `reviewId`); Python attributes are snake_case via aliases.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from reviewshare.schemas.common import MAX_ID

_ALIASED = {"populate_by_name": True}

MAX_PASSWORD_BYTES = 72


class RegisterRequest(BaseModel):
    user_id: str = Field(alias="UserId", min_length=1, max_length=128)
    password: str = Field(alias="Password", min_length=8, max_length=128)

    model_config = _ALIASED

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v: str) -> str:
        # bcrypt only accepts 72 bytes of input
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    user_id: str = Field(alias="UserId", min_length=1, max_length=128)
    password: str = Field(alias="Password", min_length=1, max_length=128)

    model_config = _ALIASED


class ConfirmRequest(BaseModel):
    user_id: str = Field(alias="UserId", min_length=1, max_length=128)
    code: str = Field(min_length=1, max_length=32)

    model_config = _ALIASED


class ResendRequest(BaseModel):
    user_id: str = Field(alias="UserId", min_length=1, max_length=128)

    model_config = _ALIASED


class LoginResponse(BaseModel):
    """
    What:  Result of POST /users/login.

    On success `access_token` carries the bearer token for protected routes.
    On failure only `success` and `message` are set.
    """
    success: bool
    message: str
    access_token: Optional[str] = None
    token_type: Optional[str] = None


class UserSummary(BaseModel):
    """Public view of a Users item; credentials are never included."""
    user_id: str = Field(alias="UserId")
    confirmed: bool = Field(default=True, alias="Confirmed")
    created_at: Optional[str] = Field(default=None, alias="CreatedAt")

    model_config = _ALIASED


class SaveReviewRequest(BaseModel):
    username: str = Field(min_length=1, max_length=128)
    review_id: int = Field(alias="reviewId", ge=1, le=MAX_ID)

    model_config = _ALIASED


class SavedRequest(BaseModel):
    username: str = Field(min_length=1, max_length=128)


class SavedListResponse(BaseModel):
    """The profile's saved list, in append order, duplicates kept."""
    success: bool = True
    saved: List[int] = Field(default_factory=list)


class ProtectedResponse(BaseModel):
    message: str
    user: str
