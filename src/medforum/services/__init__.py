"""Forum core services: vote ledger, scores, comment trees, karma and lifecycle."""

from .comment_tree import CommentTreeBuilder
from .container import ForumServices
from .karma import KarmaAggregator, KarmaBatchResult
from .lifecycle import LifecycleService
from .scores import ScoreAggregator
from .types import (
    CommentNode,
    CommentThread,
    KarmaSnapshot,
    LeaderboardRow,
    Score,
    SortOrder,
    TargetType,
    VoteDirection,
    VoteOutcome,
    VoteResult,
)
from .votes import VoteLedger

__all__ = [
    "CommentNode",
    "CommentThread",
    "CommentTreeBuilder",
    "ForumServices",
    "KarmaAggregator",
    "KarmaBatchResult",
    "KarmaSnapshot",
    "LeaderboardRow",
    "LifecycleService",
    "Score",
    "ScoreAggregator",
    "SortOrder",
    "TargetType",
    "VoteDirection",
    "VoteLedger",
    "VoteOutcome",
    "VoteResult",
]
