"""
ReviewShare Backend — Review Schemas
=====================================

What:  Pydantic models for Reviews items and the /reviews endpoints.
How:   Field aliases match the stored attribute names (`imageUrl`), so a
       DynamoDB item validates straight into `Review`.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ReviewCreate(BaseModel):
    """
    What:  Body of POST /reviews. The author is taken from the bearer token.
    """
    image_url: str = Field(default="", alias="imageUrl", max_length=2048)
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=20000)
    rate: float = Field(ge=0, le=5, description="Star rating, 0 to 5")

    model_config = {"populate_by_name": True}

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class Review(BaseModel):
    id: int
    image_url: str = Field(default="", alias="imageUrl")
    author: str
    title: str
    content: str
    rate: Optional[float] = None
    like: int = 0

    model_config = {"populate_by_name": True}


class ReviewPage(BaseModel):
    """
    What:  One page of GET /reviews/page.

    `cursor` is an opaque token to pass back for the next page; null when the
    table is exhausted. Order across pages is the store's scan order.
    """
    reviews: List[Review]
    cursor: Optional[str] = None
