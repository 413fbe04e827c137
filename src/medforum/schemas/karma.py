"""Karma-related Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel

from medforum.services.types import KarmaSnapshot, LeaderboardRow


class KarmaResponse(BaseModel):
    """Karma totals for one user."""

    user_id: int
    post_karma: int
    comment_karma: int
    award_karma: int
    total_karma: int

    @classmethod
    def from_snapshot(cls, snapshot: KarmaSnapshot) -> KarmaResponse:
        return cls(
            user_id=snapshot.user_id,
            post_karma=snapshot.post_karma,
            comment_karma=snapshot.comment_karma,
            award_karma=snapshot.award_karma,
            total_karma=snapshot.total_karma,
        )


class LeaderboardEntry(BaseModel):
    """Leaderboard row with the user's public name."""

    rank: int
    username: str
    specialty: str | None = None
    karma: KarmaResponse

    @classmethod
    def from_row(cls, row: LeaderboardRow) -> LeaderboardEntry:
        return cls(
            rank=row.rank,
            username=row.username,
            specialty=row.specialty,
            karma=KarmaResponse.from_snapshot(row.karma),
        )
