"""Community-related endpoints for the forum API."""

from typing import Annotated, Literal

from fastapi import APIRouter, Query

from medforum.schemas.post import PostListItem, PostResponse

from ..dependencies import ServicesDep, ViewerDep

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("/{community_id}/posts", response_model=list[PostListItem])
async def list_community_posts(
    community_id: int,
    viewer: ViewerDep,
    services: ServicesDep,
    sort: Literal["newest", "oldest", "top", "controversial"] = "newest",
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[PostListItem]:
    """List a community's posts, pinned first, excluding deleted ones."""
    rows = services.lifecycle.list_posts(
        community_id,
        sort=sort,
        viewer_id=viewer.id if viewer else None,
        limit=limit,
        offset=offset,
    )
    comment_counts = services.threads.count_comments_many([post.id for post, _ in rows])
    return [
        PostListItem(
            post=PostResponse.model_validate(post),
            score=score.score,
            viewer_vote=score.viewer_vote.value if score.viewer_vote else None,
            comment_count=comment_counts.get(post.id, 0),
        )
        for post, score in rows
    ]
