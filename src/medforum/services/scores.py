"""Vote-derived scores for posts and comments."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from medforum.core.errors import NotFoundError
from medforum.models import Comment, Post
from medforum.repositories import ForumStore

from .types import Score, TargetType, VoteDirection

logger = logging.getLogger(__name__)


def adjust_counters(
    target: Post | Comment,
    *,
    removed: int | None = None,
    added: int | None = None,
) -> None:
    """Move a target's denormalized counters by one vote removed and/or added.

    The counters are assigned SQL expressions so concurrent voters on the same
    target increment in the database rather than overwrite each other.
    """
    model = type(target)
    up_delta = 0
    down_delta = 0
    for value, sign in ((removed, -1), (added, 1)):
        if value is None:
            continue
        if value > 0:
            up_delta += sign
        else:
            down_delta += sign
    if up_delta:
        target.upvotes = model.upvotes + up_delta
    if down_delta:
        target.downvotes = model.downvotes + down_delta


class ScoreAggregator:
    """Read-through scoring over the vote ledger.

    Scores are always computed from the ledger at call time; the counters on
    ``Post``/``Comment`` are a listing aid that :meth:`reconcile` can rebuild.
    """

    def __init__(self, store: ForumStore) -> None:
        self.store = store

    def get_score(
        self,
        target_type: TargetType | str,
        target_id: int,
        viewer_id: int | None = None,
    ) -> Score:
        """Return the tally for one target and the viewer's own vote, if any."""
        return self.get_scores(target_type, [target_id], viewer_id)[target_id]

    def get_scores(
        self,
        target_type: TargetType | str,
        target_ids: Iterable[int],
        viewer_id: int | None = None,
    ) -> dict[int, Score]:
        """Return a score for every requested id using one grouped query.

        Ids without votes map to an empty score, so the result always has an
        entry per requested id regardless of ordering or duplicates.
        """
        kind = TargetType(target_type)
        ids = list(dict.fromkeys(target_ids))
        tallies = self.store.votes.tally(kind.value, ids, viewer_id)
        scores: dict[int, Score] = {}
        for target_id in ids:
            tally = tallies.get(target_id)
            if tally is None:
                scores[target_id] = Score()
                continue
            scores[target_id] = Score(
                upvotes=tally.upvotes,
                downvotes=tally.downvotes,
                viewer_vote=(
                    VoteDirection.from_value(tally.viewer_value)
                    if tally.viewer_value is not None
                    else None
                ),
            )
        return scores

    def counter_score(self, target_type: TargetType | str, target_id: int) -> Score:
        """Return the score held in the target's denormalized counters."""
        target = self._get_target(TargetType(target_type), target_id)
        return Score(upvotes=target.upvotes, downvotes=target.downvotes)

    def reconcile(self, target_type: TargetType | str, target_id: int) -> bool:
        """Rebuild the target's counters from the ledger.

        Returns:
            True if the counters had drifted and were rewritten.
        """
        kind = TargetType(target_type)
        with self.store.transaction():
            target = self._get_target(kind, target_id)
            actual = self.get_score(kind, target_id)
            drifted = (target.upvotes, target.downvotes) != (actual.upvotes, actual.downvotes)
            if drifted:
                logger.warning(
                    "Counter drift on %s %s: stored %s/%s, ledger %s/%s",
                    kind.value,
                    target_id,
                    target.upvotes,
                    target.downvotes,
                    actual.upvotes,
                    actual.downvotes,
                )
                target.upvotes = actual.upvotes
                target.downvotes = actual.downvotes
        return drifted

    def _get_target(self, kind: TargetType, target_id: int) -> Post | Comment:
        target: Post | Comment | None
        if kind is TargetType.POST:
            target = self.store.posts.get(target_id)
        else:
            target = self.store.comments.get(target_id)
        if target is None:
            raise NotFoundError(f"{kind.value.capitalize()} {target_id} not found")
        return target
