"""Value types returned by the forum services.

These are plain dataclasses so that callers never hold on to live ORM rows
after the unit of work that produced them has ended.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from medforum.models import Comment


class TargetType(str, Enum):
    """Kind of entity a vote applies to."""

    POST = "post"
    COMMENT = "comment"


class VoteDirection(str, Enum):
    """Direction requested by a voter."""

    UP = "up"
    DOWN = "down"

    @property
    def value_sign(self) -> int:
        """Return the stored vote value for this direction."""
        return 1 if self is VoteDirection.UP else -1

    @classmethod
    def from_value(cls, value: int) -> VoteDirection:
        """Map a stored vote value back to its direction."""
        return cls.UP if value > 0 else cls.DOWN


class VoteOutcome(str, Enum):
    """What ``VoteLedger.cast_vote`` did to the ledger."""

    CREATED = "created"
    REMOVED = "removed"
    CHANGED = "changed"


class SortOrder(str, Enum):
    """Sibling ordering applied at every level of a comment tree."""

    NEWEST = "newest"
    OLDEST = "oldest"
    TOP = "top"
    BEST = "best"
    CONTROVERSIAL = "controversial"


@dataclass(frozen=True)
class Score:
    """Vote tally for a single target as seen by one viewer."""

    upvotes: int = 0
    downvotes: int = 0
    viewer_vote: VoteDirection | None = None

    @property
    def score(self) -> int:
        return self.upvotes - self.downvotes

    @property
    def total_votes(self) -> int:
        return self.upvotes + self.downvotes


@dataclass(frozen=True)
class VoteResult:
    """Authoritative state after a vote mutation."""

    outcome: VoteOutcome
    direction: VoteDirection | None
    score: Score


@dataclass
class CommentNode:
    """One comment with its score and its direct replies, already sorted."""

    comment: Comment
    content: str
    score: Score
    replies: list[CommentNode] = field(default_factory=list)

    @property
    def viewer_vote(self) -> VoteDirection | None:
        return self.score.viewer_vote

    def walk(self):
        """Yield this node and every descendant, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.replies))


@dataclass
class CommentThread:
    """A comment subtree together with the comment it replies to, if any."""

    node: CommentNode
    parent: CommentNode | None = None


@dataclass(frozen=True)
class KarmaSnapshot:
    """Karma totals for one user at a point in time."""

    user_id: int
    post_karma: int = 0
    comment_karma: int = 0
    award_karma: int = 0

    @property
    def total_karma(self) -> int:
        return self.post_karma + self.comment_karma + self.award_karma


@dataclass(frozen=True)
class LeaderboardRow:
    """One leaderboard position with the user's public name."""

    rank: int
    username: str
    specialty: str | None
    karma: KarmaSnapshot
