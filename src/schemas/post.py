"""Post schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Create a new post."""

    user_id: int
    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)


class PostUpdate(BaseModel):
    """Update a post. Omitted fields are left untouched."""

    title: str | None = Field(None, min_length=1, max_length=255)
    body: str | None = Field(None, min_length=1)


class PostResponse(BaseModel):
    """Post response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    body: str
    created_at: datetime
    updated_at: datetime


class PostMessageResponse(BaseModel):
    """Post together with an acknowledgement."""

    message: str
    post: PostResponse


class PostListResponse(BaseModel):
    """Posts matching a search."""

    posts: list[PostResponse]
