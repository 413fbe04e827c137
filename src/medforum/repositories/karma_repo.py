"""Data access helpers for per-user karma rows."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from medforum.models import UserKarma

__all__ = ["KarmaRepository"]


class KarmaRepository:
    """Thin wrapper around database access for karma rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> UserKarma | None:
        """Return the karma row for a user if it exists."""
        return self.session.get(UserKarma, user_id)

    def get_or_create(self, user_id: int) -> UserKarma:
        """Return the karma row for a user, inserting a zero row when absent."""
        karma = self.get(user_id)
        if karma is None:
            karma = UserKarma(
                user_id=user_id,
                post_karma=0,
                comment_karma=0,
                award_karma=0,
                total_karma=0,
            )
            self.session.add(karma)
            self.session.flush()
        return karma

    def top(self, limit: int) -> list[UserKarma]:
        """Return karma rows ordered by total karma, highest first, with their users loaded."""
        return list(
            self.session.scalars(
                select(UserKarma)
                .options(joinedload(UserKarma.user))
                .order_by(UserKarma.total_karma.desc(), UserKarma.user_id.asc())
                .limit(limit)
            )
        )
