"""Vote-related endpoints for the forum API."""

from typing import Literal

from fastapi import APIRouter, status

from medforum.schemas.vote import ScoreBatchRequest, ScoreResponse, VoteCreate, VoteResponse

from ..dependencies import CurrentUserDep, ServicesDep, ViewerDep

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/", response_model=VoteResponse, status_code=status.HTTP_200_OK)
async def cast_vote(
    vote_data: VoteCreate,
    current_user: CurrentUserDep,
    services: ServicesDep,
) -> VoteResponse:
    """Cast, flip or withdraw a vote on a post or comment."""
    result = services.votes.cast_vote(
        current_user.id,
        vote_data.target_type,
        vote_data.target_id,
        vote_data.direction,
    )
    return VoteResponse.from_result(vote_data.target_id, result)


@router.get("/{target_type}/{target_id}", response_model=ScoreResponse)
async def get_score(
    target_type: Literal["post", "comment"],
    target_id: int,
    viewer: ViewerDep,
    services: ServicesDep,
) -> ScoreResponse:
    """Return the score of a live post or comment and the caller's vote on it."""
    services.lifecycle.resolve_target(target_type, target_id)
    score = services.scores.get_score(
        target_type,
        target_id,
        viewer_id=viewer.id if viewer else None,
    )
    return ScoreResponse.from_score(target_id, score)


@router.post("/scores", response_model=list[ScoreResponse])
async def get_scores(
    request: ScoreBatchRequest,
    viewer: ViewerDep,
    services: ServicesDep,
) -> list[ScoreResponse]:
    """Return scores for many targets of one type in request order."""
    scores = services.scores.get_scores(
        request.target_type,
        request.target_ids,
        viewer_id=viewer.id if viewer else None,
    )
    return [ScoreResponse.from_score(target_id, score) for target_id, score in scores.items()]
