"""Vote ledger: at most one vote per (user, target), toggled or flipped in place."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from medforum.core.errors import ConflictError
from medforum.repositories import ForumStore

from .karma import KarmaAggregator
from .lifecycle import LifecycleService
from .scores import ScoreAggregator, adjust_counters
from .types import TargetType, VoteDirection, VoteOutcome, VoteResult

logger = logging.getLogger(__name__)


class VoteLedger:
    """Apply vote actions to the ledger and keep counters and karma in step."""

    def __init__(
        self,
        store: ForumStore,
        lifecycle: LifecycleService,
        scores: ScoreAggregator,
        karma: KarmaAggregator,
    ) -> None:
        self.store = store
        self.lifecycle = lifecycle
        self.scores = scores
        self.karma = karma

    def cast_vote(
        self,
        user_id: int,
        target_type: TargetType | str,
        target_id: int,
        direction: VoteDirection | str,
    ) -> VoteResult:
        """Record a vote action and return the resulting state.

        No existing vote creates one; the same direction again removes it; the
        opposite direction flips it in place. The read-check-write runs in one
        transaction with the existing row locked, and the store's unique
        constraint catches concurrent first votes from the same user.

        Raises:
            NotFoundError: The voter or the target does not exist, or the
                target is deleted.
            ForbiddenError: The voter is banned, or the post is locked and the
                voter is not a moderator.
            ConflictError: The uniqueness constraint still fails after one
                retry with fresh state.
        """
        kind = TargetType(target_type)
        wanted = VoteDirection(direction)
        try:
            return self._cast_once(user_id, kind, target_id, wanted)
        except IntegrityError:
            logger.warning(
                "Vote by user %s on %s %s hit the uniqueness constraint; retrying",
                user_id,
                kind.value,
                target_id,
            )
        try:
            return self._cast_once(user_id, kind, target_id, wanted)
        except IntegrityError as exc:
            logger.error(
                "Vote by user %s on %s %s conflicted twice",
                user_id,
                kind.value,
                target_id,
            )
            raise ConflictError("Concurrent vote on the same target") from exc

    def _cast_once(
        self,
        user_id: int,
        kind: TargetType,
        target_id: int,
        wanted: VoteDirection,
    ) -> VoteResult:
        value = wanted.value_sign
        with self.store.transaction():
            voter = self.lifecycle.get_user(user_id)
            post, target = self.lifecycle.resolve_target(kind, target_id)
            self.lifecycle.ensure_can_write(voter, post)

            existing = self.store.votes.get(user_id, kind.value, target_id, for_update=True)
            if existing is None:
                self.store.votes.create(user_id, kind.value, target_id, value)
                adjust_counters(target, added=value)
                outcome, delta, current = VoteOutcome.CREATED, value, wanted
            elif existing.value == value:
                self.store.votes.delete(existing)
                adjust_counters(target, removed=value)
                outcome, delta, current = VoteOutcome.REMOVED, -value, None
            else:
                previous = existing.value
                existing.value = value
                adjust_counters(target, removed=previous, added=value)
                outcome, delta, current = VoteOutcome.CHANGED, value - previous, wanted
            self.store.session.flush()

            self.karma.apply_delta(target.author_id, kind, delta)
            score = self.scores.get_score(kind, target_id, viewer_id=user_id)

        logger.debug(
            "Vote %s by user %s on %s %s (score now %s)",
            outcome.value,
            user_id,
            kind.value,
            target_id,
            score.score,
        )
        return VoteResult(outcome=outcome, direction=current, score=score)

    def get_vote(
        self,
        user_id: int,
        target_type: TargetType | str,
        target_id: int,
    ) -> VoteDirection | None:
        """Return the user's current direction on a target, or None."""
        kind = TargetType(target_type)
        vote = self.store.votes.get(user_id, kind.value, target_id)
        if vote is None:
            return None
        return VoteDirection.from_value(vote.value)
