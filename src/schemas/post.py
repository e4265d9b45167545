"""Post schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import PostStatus


class PostCreate(BaseModel):
    """Schema for creating a post."""

    idempotency_key: str | None = Field(default=None, max_length=255)
    title: str | None = Field(default=None, max_length=255)
    content: str | None = None


class PostUpdate(BaseModel):
    """Schema for editing a post."""

    title: str | None = Field(default=None, max_length=255)
    content: str | None = None


class PostStatusUpdate(BaseModel):
    """Schema for publishing or unpublishing a post."""

    status: str | None = PostStatus.PUBLISHED.value


class PostImageResponse(BaseModel):
    """Post image response with a time-limited download URL."""

    id: str
    post_id: str
    url: str
    content_type: str | None
    created_at: datetime


class PostResponse(BaseModel):
    """Post response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    author_id: str
    title: str
    content: str
    status: str
    created_at: datetime
    updated_at: datetime
    images: list[PostImageResponse] = []
