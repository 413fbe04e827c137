"""Data access helpers for threaded comments."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from medforum.models import Comment

__all__ = ["CommentRepository"]


class CommentRepository:
    """Thin wrapper around database access for comment entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, comment_id: int) -> Comment | None:
        """Return a comment by identifier, deleted or not."""
        return self.session.get(Comment, comment_id)

    def list_for_post(self, post_id: int) -> list[Comment]:
        """Return every comment of a post, deleted ones included, in insertion order."""
        return list(
            self.session.scalars(
                select(Comment).where(Comment.post_id == post_id).order_by(Comment.id)
            )
        )

    def list_ids_by_author(self, author_id: int) -> list[int]:
        """Return the ids of the author's non-deleted comments."""
        return list(
            self.session.scalars(
                select(Comment.id)
                .where(Comment.author_id == author_id, Comment.is_deleted.is_(False))
                .order_by(Comment.id)
            )
        )

    def count_visible(self, post_id: int) -> int:
        """Return the number of non-deleted comments on a post."""
        return self.session.scalar(
            select(func.count(Comment.id)).where(
                Comment.post_id == post_id,
                Comment.is_deleted.is_(False),
            )
        ) or 0

    def count_visible_many(self, post_ids: Iterable[int]) -> dict[int, int]:
        """Return non-deleted comment counts per post in one grouped query.

        Every requested post gets an entry, zero included.
        """
        ids = sorted(set(post_ids))
        if not ids:
            return {}
        counts = dict.fromkeys(ids, 0)
        rows = self.session.execute(
            select(Comment.post_id, func.count(Comment.id))
            .where(Comment.post_id.in_(ids), Comment.is_deleted.is_(False))
            .group_by(Comment.post_id)
        )
        for post_id, total in rows:
            counts[post_id] = int(total)
        return counts

    def create(
        self,
        *,
        post_id: int,
        author_id: int,
        content: str,
        parent_id: int | None = None,
    ) -> Comment:
        """Insert a new comment and return the persisted ORM instance."""
        comment = Comment(
            post_id=post_id,
            author_id=author_id,
            content=content,
            parent_id=parent_id,
        )
        self.session.add(comment)
        self.session.flush()
        return comment
