"""Data access helpers for working with posts."""
from __future__ import annotations

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from medforum.models import Post

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get(self, post_id: int) -> Post | None:
        """Return a post by identifier, deleted or not."""
        return self.session.get(Post, post_id)

    def get_visible(self, post_id: int) -> Post | None:
        """Return a post unless it is missing or soft-deleted."""
        return self.session.scalars(
            select(Post).where(Post.id == post_id, Post.is_deleted.is_(False))
        ).first()

    def list_ids_by_author(self, author_id: int) -> list[int]:
        """Return the ids of the author's non-deleted posts."""
        return list(
            self.session.scalars(
                select(Post.id)
                .where(Post.author_id == author_id, Post.is_deleted.is_(False))
                .order_by(Post.id)
            )
        )

    def list_for_community(
        self,
        community_id: int,
        sort: str = "newest",
        limit: int = 50,
        offset: int = 0,
    ) -> list[Post]:
        """Return non-deleted posts of a community, pinned posts first.

        Ordering uses the denormalized counters so the listing stays a single
        indexed query.
        """
        stmt: Select[tuple[Post]] = select(Post).where(
            Post.community_id == community_id,
            Post.is_deleted.is_(False),
        )
        score = Post.upvotes - Post.downvotes
        order = [Post.is_pinned.desc()]
        if sort == "oldest":
            order += [Post.created_at.asc(), Post.id.asc()]
        elif sort == "top":
            order += [score.desc(), Post.created_at.desc(), Post.id.desc()]
        elif sort == "controversial":
            total = Post.upvotes + Post.downvotes
            order += [
                (total == 0).asc(),
                func.abs(score).asc(),
                total.desc(),
                Post.id.desc(),
            ]
        else:
            order += [Post.created_at.desc(), Post.id.desc()]
        stmt = stmt.order_by(*order).limit(limit).offset(offset)
        return list(self.session.scalars(stmt))
