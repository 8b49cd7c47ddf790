"""
ReviewShare Backend — Comment Schemas
"""

from pydantic import BaseModel, Field, field_validator

from reviewshare.schemas.common import MAX_ID


class CommentCreate(BaseModel):
    """Body of POST /comments. The author is taken from the bearer token."""
    content: str = Field(min_length=1, max_length=5000)
    review_id: int = Field(alias="reviewId", ge=1, le=MAX_ID)

    model_config = {"populate_by_name": True}

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class Comment(BaseModel):
    id: int
    author: str
    content: str
    review_id: int = Field(alias="reviewId")
    like: int = 0

    model_config = {"populate_by_name": True}
