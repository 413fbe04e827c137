"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from medforum.services.types import CommentNode, CommentThread


class CommentCreate(BaseModel):
    """Schema for creating a comment or a reply."""

    post_id: int
    content: str = Field(..., min_length=1, max_length=5000)
    parent_id: int | None = Field(None, description="Comment being replied to")


class CommentUpdate(BaseModel):
    """Schema for editing a comment."""

    content: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(BaseModel):
    """Schema for a single comment row."""

    id: int
    post_id: int
    author_id: int
    parent_id: int | None
    content: str
    is_deleted: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentNodeResponse(BaseModel):
    """One node of a comment tree; ``replies`` nest down to the render depth."""

    id: int
    post_id: int
    author_id: int
    parent_id: int | None
    content: str
    is_deleted: bool
    created_at: datetime
    upvotes: int
    downvotes: int
    score: int
    viewer_vote: Literal["up", "down"] | None = None
    reply_count: int = Field(0, description="Number of direct replies")
    has_more_replies: bool = Field(
        False,
        description="Replies exist below the rendered depth; fetch them via GET /comments/{id}",
    )
    replies: list[CommentNodeResponse] = Field(default_factory=list)

    @classmethod
    def from_node(cls, root: CommentNode, max_depth: int | None = None) -> CommentNodeResponse:
        """Convert a node and its descendants without recursing in Python.

        Nodes at ``max_depth`` (the root is depth 1) are emitted without their
        replies and flagged with ``has_more_replies``.
        """
        ordered: list[tuple[CommentNode, int]] = []
        stack = [(root, 1)]
        while stack:
            node, depth = stack.pop()
            ordered.append((node, depth))
            if max_depth is None or depth < max_depth:
                stack.extend((reply, depth + 1) for reply in node.replies)

        converted: dict[int, CommentNodeResponse] = {}
        for node, depth in reversed(ordered):
            comment = node.comment
            truncated = max_depth is not None and depth >= max_depth
            converted[comment.id] = cls(
                id=comment.id,
                post_id=comment.post_id,
                author_id=comment.author_id,
                parent_id=comment.parent_id,
                content=node.content,
                is_deleted=comment.is_deleted,
                created_at=comment.created_at,
                upvotes=node.score.upvotes,
                downvotes=node.score.downvotes,
                score=node.score.score,
                viewer_vote=node.viewer_vote.value if node.viewer_vote else None,
                reply_count=len(node.replies),
                has_more_replies=truncated and bool(node.replies),
                replies=(
                    [] if truncated else [converted[reply.comment.id] for reply in node.replies]
                ),
            )
        return converted[root.comment.id]


class CommentThreadResponse(BaseModel):
    """A comment with its replies; ``parent`` is the comment it answers, without its replies."""

    parent: CommentNodeResponse | None = None
    comment: CommentNodeResponse

    @classmethod
    def from_thread(cls, thread: CommentThread, max_depth: int | None = None) -> CommentThreadResponse:
        return cls(
            parent=CommentNodeResponse.from_node(thread.parent, max_depth=1) if thread.parent else None,
            comment=CommentNodeResponse.from_node(thread.node, max_depth=max_depth),
        )
