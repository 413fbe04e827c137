"""Data access helpers for the vote ledger."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import case, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from medforum.models import Vote
from medforum.models.vote import TARGET_COMMENT, TARGET_POST

__all__ = ["VoteRepository", "VoteTally"]


@dataclass(frozen=True)
class VoteTally:
    """Raw per-target counts read from the ledger."""

    upvotes: int = 0
    downvotes: int = 0
    viewer_value: int | None = None


def _target_column(target_type: str) -> InstrumentedAttribute[int | None]:
    if target_type == TARGET_POST:
        return Vote.post_id
    if target_type == TARGET_COMMENT:
        return Vote.comment_id
    raise ValueError(f"Unknown vote target type: {target_type!r}")


class VoteRepository:
    """Thin wrapper around database access for vote rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(
        self,
        user_id: int,
        target_type: str,
        target_id: int,
        *,
        for_update: bool = False,
    ) -> Vote | None:
        """Return the user's vote on a target.

        With ``for_update`` the row is locked until the surrounding
        transaction ends (a no-op on SQLite, which serializes writers anyway).
        """
        stmt = select(Vote).where(
            Vote.user_id == user_id,
            Vote.target_type == target_type,
            _target_column(target_type) == target_id,
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.scalars(stmt).first()

    def create(self, user_id: int, target_type: str, target_id: int, value: int) -> Vote:
        """Insert a vote row; raises ``IntegrityError`` on a duplicate (user, target)."""
        vote = Vote(user_id=user_id, target_type=target_type, value=value)
        if target_type == TARGET_POST:
            vote.post_id = target_id
        else:
            vote.comment_id = target_id
        self.session.add(vote)
        self.session.flush()
        return vote

    def delete(self, vote: Vote) -> None:
        """Remove a vote row."""
        self.session.delete(vote)
        self.session.flush()

    def count(self, user_id: int, target_type: str, target_id: int) -> int:
        """Return how many rows exist for one (user, target) pair."""
        return self.session.scalar(
            select(func.count(Vote.id)).where(
                Vote.user_id == user_id,
                Vote.target_type == target_type,
                _target_column(target_type) == target_id,
            )
        ) or 0

    def tally(
        self,
        target_type: str,
        target_ids: Iterable[int],
        viewer_id: int | None = None,
    ) -> dict[int, VoteTally]:
        """Count votes for many targets of one type in a single grouped query.

        Targets without votes are absent from the result.
        """
        ids = sorted(set(target_ids))
        if not ids:
            return {}
        column = _target_column(target_type)
        columns = [
            column,
            func.coalesce(func.sum(case((Vote.value > 0, 1), else_=0)), 0),
            func.coalesce(func.sum(case((Vote.value < 0, 1), else_=0)), 0),
        ]
        if viewer_id is not None:
            columns.append(func.max(case((Vote.user_id == viewer_id, Vote.value), else_=None)))
        stmt = (
            select(*columns)
            .where(Vote.target_type == target_type, column.in_(ids))
            .group_by(column)
        )
        tallies: dict[int, VoteTally] = {}
        for row in self.session.execute(stmt):
            viewer = row[3] if viewer_id is not None else None
            tallies[row[0]] = VoteTally(
                upvotes=int(row[1]),
                downvotes=int(row[2]),
                viewer_value=int(viewer) if viewer is not None else None,
            )
        return tallies
