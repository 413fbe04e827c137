"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    community_id: int
    author_id: int
    title: str
    body: str
    post_type: str
    is_pinned: bool
    is_locked: bool
    is_deleted: bool
    upvotes: int
    downvotes: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostListItem(BaseModel):
    """Post entry in a community listing with the caller's vote."""

    post: PostResponse
    score: int
    viewer_vote: Literal["up", "down"] | None = None
    comment_count: int = 0


class PostFlagUpdate(BaseModel):
    """Explicit flag value; omit ``value`` to toggle."""

    value: bool | None = Field(None, description="New flag state; null toggles")
