"""Post-related endpoints: comment threads and moderation flags."""

from typing import Annotated

from fastapi import APIRouter, Query

from medforum.core.settings import settings
from medforum.models import Post
from medforum.schemas.comment import CommentNodeResponse
from medforum.schemas.post import PostFlagUpdate, PostResponse
from medforum.services import SortOrder

from ..dependencies import CurrentUserDep, ServicesDep, ViewerDep

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/{post_id}/comments", response_model=list[CommentNodeResponse])
async def get_comment_tree(
    post_id: int,
    viewer: ViewerDep,
    services: ServicesDep,
    sort: SortOrder = SortOrder.NEWEST,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[CommentNodeResponse]:
    """Return the reply tree of a post, paged over its top-level comments.

    Threads deeper than the render depth end in nodes flagged
    ``has_more_replies``; continue them with ``GET /comments/{id}``.
    """
    nodes = services.threads.build_tree(
        post_id,
        viewer_id=viewer.id if viewer else None,
        sort=sort,
        limit=limit,
        offset=offset,
    )
    return [
        CommentNodeResponse.from_node(node, max_depth=settings.comment_max_render_depth)
        for node in nodes
    ]


@router.post("/{post_id}/lock", response_model=PostResponse)
async def lock_post(
    post_id: int,
    flag: PostFlagUpdate,
    current_user: CurrentUserDep,
    services: ServicesDep,
) -> Post:
    """Lock or unlock a post (moderators only)."""
    return services.lifecycle.set_locked(current_user.id, post_id, flag.value)


@router.post("/{post_id}/pin", response_model=PostResponse)
async def pin_post(
    post_id: int,
    flag: PostFlagUpdate,
    current_user: CurrentUserDep,
    services: ServicesDep,
) -> Post:
    """Pin or unpin a post (moderators only)."""
    return services.lifecycle.set_pinned(current_user.id, post_id, flag.value)


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    current_user: CurrentUserDep,
    services: ServicesDep,
) -> dict[str, str]:
    """Soft-delete a post (author or moderator)."""
    services.lifecycle.delete_post(current_user.id, post_id)
    return {"status": "deleted"}
