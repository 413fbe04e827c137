"""Vote-related Pydantic schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from medforum.services.types import Score, VoteResult


class VoteCreate(BaseModel):
    """Schema for casting a vote on a post or comment."""

    target_type: Literal["post", "comment"]
    target_id: int
    direction: Literal["up", "down"] = Field(..., description="Repeat the same direction to remove the vote")


class ScoreResponse(BaseModel):
    """Vote tally for one target as seen by the caller."""

    target_id: int
    upvotes: int
    downvotes: int
    score: int
    viewer_vote: Literal["up", "down"] | None = None

    @classmethod
    def from_score(cls, target_id: int, score: Score) -> ScoreResponse:
        return cls(
            target_id=target_id,
            upvotes=score.upvotes,
            downvotes=score.downvotes,
            score=score.score,
            viewer_vote=score.viewer_vote.value if score.viewer_vote else None,
        )


class VoteResponse(BaseModel):
    """Authoritative state after a vote action."""

    outcome: Literal["created", "removed", "changed"]
    direction: Literal["up", "down"] | None
    score: ScoreResponse

    @classmethod
    def from_result(cls, target_id: int, result: VoteResult) -> VoteResponse:
        return cls(
            outcome=result.outcome.value,
            direction=result.direction.value if result.direction else None,
            score=ScoreResponse.from_score(target_id, result.score),
        )


class ScoreBatchRequest(BaseModel):
    """Schema for fetching many scores of one target type at once."""

    target_type: Literal["post", "comment"]
    target_ids: list[int] = Field(..., max_length=500)
