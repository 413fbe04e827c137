"""Comment-related endpoints for the forum API."""

from fastapi import APIRouter, HTTPException, status

from medforum.core.settings import settings
from medforum.models import Comment
from medforum.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentThreadResponse,
    CommentUpdate,
)
from medforum.services import SortOrder

from ..dependencies import CurrentUserDep, ServicesDep, ViewerDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    current_user: CurrentUserDep,
    services: ServicesDep,
) -> Comment:
    """Comment on a post or reply to another comment."""
    try:
        return services.lifecycle.create_comment(
            current_user.id,
            comment_data.post_id,
            comment_data.content,
            parent_id=comment_data.parent_id,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    comment_data: CommentUpdate,
    current_user: CurrentUserDep,
    services: ServicesDep,
) -> Comment:
    """Edit the caller's own comment."""
    try:
        return services.lifecycle.edit_comment(current_user.id, comment_id, comment_data.content)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    services: ServicesDep,
) -> dict[str, str]:
    """Soft-delete a comment; replies stay in the thread."""
    services.lifecycle.delete_comment(current_user.id, comment_id)
    return {"status": "deleted"}


@router.get("/{comment_id}", response_model=CommentThreadResponse)
async def get_comment_thread(
    comment_id: int,
    viewer: ViewerDep,
    services: ServicesDep,
    sort: SortOrder = SortOrder.NEWEST,
) -> CommentThreadResponse:
    """Return one comment with its parent and its replies."""
    thread = services.threads.build_subtree(
        comment_id,
        viewer_id=viewer.id if viewer else None,
        sort=sort,
    )
    return CommentThreadResponse.from_thread(thread, max_depth=settings.comment_max_render_depth)
