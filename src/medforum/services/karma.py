"""Karma aggregation across a user's posts and comments."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from medforum.core.errors import NotFoundError
from medforum.models import UserKarma
from medforum.repositories import ForumStore

from .scores import ScoreAggregator
from .types import KarmaSnapshot, LeaderboardRow, TargetType

logger = logging.getLogger(__name__)


@dataclass
class KarmaBatchResult:
    """Outcome of a recompute pass over many users."""

    snapshots: dict[int, KarmaSnapshot] = field(default_factory=dict)
    failures: dict[int, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def _snapshot(row: UserKarma) -> KarmaSnapshot:
    return KarmaSnapshot(
        user_id=row.user_id,
        post_karma=row.post_karma,
        comment_karma=row.comment_karma,
        award_karma=row.award_karma,
    )


class KarmaAggregator:
    """Maintain per-user karma from the scores of their posts and comments.

    ``recompute_karma`` is the authoritative full pass; ``apply_delta`` is the
    per-vote incremental path and must always agree with it.
    """

    def __init__(self, store: ForumStore, scores: ScoreAggregator) -> None:
        self.store = store
        self.scores = scores

    def recompute_karma(self, user_id: int) -> KarmaSnapshot:
        """Recompute a user's post and comment karma from the vote ledger.

        Award karma is preserved. The upsert happens in one transaction, so an
        interrupted recompute leaves the previous row untouched.

        Raises:
            NotFoundError: If the user does not exist.
        """
        with self.store.transaction():
            if self.store.users.get(user_id) is None:
                raise NotFoundError(f"User {user_id} not found")
            post_ids = self.store.posts.list_ids_by_author(user_id)
            comment_ids = self.store.comments.list_ids_by_author(user_id)
            post_karma = sum(
                score.score for score in self.scores.get_scores(TargetType.POST, post_ids).values()
            )
            comment_karma = sum(
                score.score
                for score in self.scores.get_scores(TargetType.COMMENT, comment_ids).values()
            )
            row = self.store.karma.get_or_create(user_id)
            row.post_karma = post_karma
            row.comment_karma = comment_karma
            row.total_karma = post_karma + comment_karma + row.award_karma
            self.store.session.flush()
            snapshot = _snapshot(row)
        logger.debug(
            "Recomputed karma for user %s: post=%s comment=%s total=%s",
            user_id,
            snapshot.post_karma,
            snapshot.comment_karma,
            snapshot.total_karma,
        )
        return snapshot

    def recompute_all(self, user_ids: Iterable[int] | None = None) -> KarmaBatchResult:
        """Recompute karma for every user, or only ``user_ids``, isolating failures.

        Each user is recomputed in its own transaction; a failure is logged,
        recorded in the result and the batch continues. Every user ends up
        with an explicit karma row, zero included.
        """
        result = KarmaBatchResult()
        targets = self.store.users.list_ids() if user_ids is None else list(user_ids)
        for user_id in targets:
            try:
                result.snapshots[user_id] = self.recompute_karma(user_id)
            except Exception as exc:  # noqa: BLE001 - one user must not abort the batch
                self.store.session.rollback()
                logger.error("Karma recompute failed for user %s: %s", user_id, exc, exc_info=True)
                result.failures[user_id] = str(exc)
        logger.info(
            "Karma recompute finished: %d users updated, %d failed",
            len(result.snapshots),
            len(result.failures),
        )
        return result

    def get_karma(self, user_id: int) -> KarmaSnapshot:
        """Return the stored karma for a user, computing it on first access."""
        row = self.store.karma.get(user_id)
        if row is None:
            return self.recompute_karma(user_id)
        return _snapshot(row)

    def apply_delta(self, user_id: int, target_type: TargetType | str, delta: int) -> KarmaSnapshot:
        """Shift a user's post or comment karma by ``delta`` points.

        A user without a karma row gets a full recompute instead, which already
        reflects the change being applied.
        """
        kind = TargetType(target_type)
        with self.store.transaction():
            row = self.store.karma.get(user_id)
            if row is None:
                return self.recompute_karma(user_id)
            if kind is TargetType.POST:
                row.post_karma += delta
            else:
                row.comment_karma += delta
            row.total_karma = row.post_karma + row.comment_karma + row.award_karma
            self.store.session.flush()
            return _snapshot(row)

    def add_award_karma(self, user_id: int, amount: int) -> KarmaSnapshot:
        """Add externally sourced award points to a user's karma."""
        with self.store.transaction():
            if self.store.users.get(user_id) is None:
                raise NotFoundError(f"User {user_id} not found")
            if self.store.karma.get(user_id) is None:
                self.recompute_karma(user_id)
            row = self.store.karma.get_or_create(user_id)
            row.award_karma += amount
            row.total_karma = row.post_karma + row.comment_karma + row.award_karma
            self.store.session.flush()
            return _snapshot(row)

    def leaderboard(self, limit: int = 10) -> list[LeaderboardRow]:
        """Return the users with the highest total karma, best first."""
        return [
            LeaderboardRow(
                rank=rank,
                username=row.user.username,
                specialty=row.user.specialty,
                karma=_snapshot(row),
            )
            for rank, row in enumerate(self.store.karma.top(limit), start=1)
        ]
