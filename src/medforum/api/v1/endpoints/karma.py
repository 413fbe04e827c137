"""Karma endpoints: profile totals, leaderboard and admin recompute."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from medforum.core.settings import settings
from medforum.schemas.karma import KarmaResponse, LeaderboardEntry

from ..dependencies import CurrentUserDep, ServicesDep

router = APIRouter(prefix="/karma", tags=["karma"])


@router.get("/user/{user_id}", response_model=KarmaResponse)
async def get_user_karma(user_id: int, services: ServicesDep) -> KarmaResponse:
    """Return a user's karma totals."""
    return KarmaResponse.from_snapshot(services.karma.get_karma(user_id))


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def leaderboard(
    services: ServicesDep,
    limit: Annotated[int, Query(ge=1)] = 10,
) -> list[LeaderboardEntry]:
    """Return the users with the highest total karma."""
    rows = services.karma.leaderboard(min(limit, settings.karma_leaderboard_max))
    return [LeaderboardEntry.from_row(row) for row in rows]


@router.post("/recalculate/{user_id}", response_model=KarmaResponse)
async def recalculate_karma(
    user_id: int,
    current_user: CurrentUserDep,
    services: ServicesDep,
) -> KarmaResponse:
    """Recompute a user's karma from the vote ledger (admins only)."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return KarmaResponse.from_snapshot(services.karma.recompute_karma(user_id))
