"""
ReviewShare Backend — Draft Schemas
====================================

What:  A Draft is an unpublished review. Unlike a Review its rating may be
       missing until the author publishes it.
"""

from typing import Optional

from pydantic import BaseModel, Field


class DraftCreate(BaseModel):
    image_url: str = Field(default="", alias="imageUrl", max_length=2048)
    title: str = Field(default="", max_length=200)
    content: str = Field(default="", max_length=20000)
    rate: Optional[float] = Field(default=None, ge=0, le=5)

    model_config = {"populate_by_name": True}


class Draft(BaseModel):
    id: int
    image_url: str = Field(default="", alias="imageUrl")
    author: str
    title: str = ""
    content: str = ""
    rate: Optional[float] = None

    model_config = {"populate_by_name": True}
