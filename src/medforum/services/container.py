"""Wire the forum services around one store."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from medforum.core.settings import Settings
from medforum.repositories import ForumStore

from .comment_tree import CommentTreeBuilder
from .karma import KarmaAggregator
from .lifecycle import LifecycleService
from .scores import ScoreAggregator
from .votes import VoteLedger


@dataclass
class ForumServices:
    """The five core components sharing one unit of work."""

    store: ForumStore
    scores: ScoreAggregator
    karma: KarmaAggregator
    lifecycle: LifecycleService
    votes: VoteLedger
    threads: CommentTreeBuilder

    @classmethod
    def from_session(cls, session: Session, config: Settings) -> ForumServices:
        store = ForumStore(session)
        scores = ScoreAggregator(store)
        karma = KarmaAggregator(store, scores)
        lifecycle = LifecycleService(
            store,
            scores,
            karma,
            comment_max_length=config.comment_max_length,
        )
        return cls(
            store=store,
            scores=scores,
            karma=karma,
            lifecycle=lifecycle,
            votes=VoteLedger(store, lifecycle, scores, karma),
            threads=CommentTreeBuilder(
                store,
                scores,
                removed_marker=config.comment_removed_marker,
                controversial_min_votes=config.controversial_min_votes,
            ),
        )
