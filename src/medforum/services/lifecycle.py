"""Lifecycle policy for posts and comments: delete, lock and pin.

Other services consult this one instead of checking the flags themselves.
Deletion is one-directional; lock and pin toggle.
"""

from __future__ import annotations

import logging

from medforum.core.errors import ForbiddenError, InvalidParentError, NotFoundError
from medforum.models import Comment, Post, User
from medforum.repositories import ForumStore

from .karma import KarmaAggregator
from .scores import ScoreAggregator
from .types import Score, TargetType

logger = logging.getLogger(__name__)


class LifecycleService:
    """Owns the delete/lock/pin state machine and the write-permission check."""

    def __init__(
        self,
        store: ForumStore,
        scores: ScoreAggregator,
        karma: KarmaAggregator,
        *,
        comment_max_length: int = 5000,
    ) -> None:
        self.store = store
        self.scores = scores
        self.karma = karma
        self.comment_max_length = comment_max_length

    # -- permission checks -------------------------------------------------

    def is_moderator(self, user: User, community_id: int) -> bool:
        """Return True for admins, the community owner and listed moderators."""
        if user.is_admin:
            return True
        community = self.store.communities.get(community_id)
        if community is None:
            return False
        if community.owner_id == user.id:
            return True
        return self.store.communities.get_moderator(community_id, user.id) is not None

    def ensure_active(self, user: User) -> None:
        """Reject banned users."""
        if user.is_banned:
            raise ForbiddenError("User is banned")

    def may_write(self, user: User, post: Post) -> bool:
        """Return whether ``user`` may comment or vote on ``post`` and its comments."""
        if user.is_banned:
            return False
        if post.is_locked and not self.is_moderator(user, post.community_id):
            return False
        return True

    def ensure_can_write(self, user: User, post: Post) -> None:
        """Raise ``ForbiddenError`` unless ``user`` may write to ``post``."""
        self.ensure_active(user)
        if post.is_locked and not self.is_moderator(user, post.community_id):
            raise ForbiddenError(f"Post {post.id} is locked")

    def _ensure_can_moderate(self, user: User, post: Post) -> None:
        self.ensure_active(user)
        if not self.is_moderator(user, post.community_id):
            raise ForbiddenError("Community moderator privileges required")

    # -- lookups -------------------------------------------------------------

    def get_user(self, user_id: int) -> User:
        user = self.store.users.get(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def get_post(self, post_id: int) -> Post:
        """Return a non-deleted post or raise ``NotFoundError``."""
        post = self.store.posts.get_visible(post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")
        return post

    def get_comment(self, comment_id: int) -> Comment:
        """Return a non-deleted comment or raise ``NotFoundError``."""
        comment = self.store.comments.get(comment_id)
        if comment is None or comment.is_deleted:
            raise NotFoundError(f"Comment {comment_id} not found")
        return comment

    def resolve_target(
        self,
        target_type: TargetType | str,
        target_id: int,
    ) -> tuple[Post, Post | Comment]:
        """Return ``(owning post, target)`` for a live vote target.

        A comment counts as live only while its post is live too.
        """
        kind = TargetType(target_type)
        if kind is TargetType.POST:
            post = self.get_post(target_id)
            return post, post
        comment = self.get_comment(target_id)
        return self.get_post(comment.post_id), comment

    # -- comments ------------------------------------------------------------

    def _clean_content(self, content: str) -> str:
        content = content.strip()
        if not content:
            raise ValueError("Comment content must not be empty")
        if len(content) > self.comment_max_length:
            raise ValueError(f"Comment content exceeds {self.comment_max_length} characters")
        return content

    def create_comment(
        self,
        user_id: int,
        post_id: int,
        content: str,
        parent_id: int | None = None,
    ) -> Comment:
        """Add a comment or reply to a post.

        Raises:
            NotFoundError: The post or the parent comment does not exist.
            InvalidParentError: The parent belongs to a different post.
            ForbiddenError: The user is banned or the post is locked.
        """
        content = self._clean_content(content)
        with self.store.transaction():
            user = self.get_user(user_id)
            post = self.get_post(post_id)
            self.ensure_can_write(user, post)
            if parent_id is not None:
                parent = self.get_comment(parent_id)
                if parent.post_id != post.id:
                    raise InvalidParentError(
                        f"Comment {parent_id} does not belong to post {post.id}"
                    )
            comment = self.store.comments.create(
                post_id=post.id,
                author_id=user.id,
                content=content,
                parent_id=parent_id,
            )
        logger.info("User %s commented %s on post %s", user_id, comment.id, post_id)
        return comment

    def edit_comment(self, user_id: int, comment_id: int, content: str) -> Comment:
        """Replace a comment's content; only its author may do this."""
        content = self._clean_content(content)
        with self.store.transaction():
            user = self.get_user(user_id)
            comment = self.get_comment(comment_id)
            if comment.author_id != user.id:
                raise ForbiddenError("Not authorized to edit this comment")
            self.ensure_can_write(user, self.get_post(comment.post_id))
            comment.content = content
            self.store.session.flush()
        return comment

    def delete_comment(self, user_id: int, comment_id: int) -> Comment:
        """Soft-delete a comment; the author or a moderator may do this.

        The comment keeps its place in the thread and its votes, but its score
        stops counting toward the author's karma.
        """
        with self.store.transaction():
            user = self.get_user(user_id)
            comment = self.get_comment(comment_id)
            post = self.store.posts.get(comment.post_id)
            if comment.author_id != user.id and (
                post is None or not self.is_moderator(user, post.community_id)
            ):
                raise ForbiddenError("Not authorized to delete this comment")
            score = self.scores.get_score(TargetType.COMMENT, comment.id)
            comment.is_deleted = True
            self.store.session.flush()
            if score.score:
                self.karma.apply_delta(comment.author_id, TargetType.COMMENT, -score.score)
        logger.info("User %s deleted comment %s", user_id, comment_id)
        return comment

    # -- posts -----------------------------------------------------------------

    def delete_post(self, user_id: int, post_id: int) -> Post:
        """Soft-delete a post; the author or a moderator may do this."""
        with self.store.transaction():
            user = self.get_user(user_id)
            post = self.get_post(post_id)
            if post.author_id != user.id:
                self._ensure_can_moderate(user, post)
            score = self.scores.get_score(TargetType.POST, post.id)
            post.is_deleted = True
            self.store.session.flush()
            if score.score:
                self.karma.apply_delta(post.author_id, TargetType.POST, -score.score)
        logger.info("User %s deleted post %s", user_id, post_id)
        return post

    def set_locked(self, user_id: int, post_id: int, locked: bool | None = None) -> Post:
        """Lock or unlock a post; ``None`` toggles the current state."""
        with self.store.transaction():
            user = self.get_user(user_id)
            post = self.get_post(post_id)
            self._ensure_can_moderate(user, post)
            post.is_locked = (not post.is_locked) if locked is None else locked
            self.store.session.flush()
        logger.info("Post %s locked=%s by user %s", post_id, post.is_locked, user_id)
        return post

    def set_pinned(self, user_id: int, post_id: int, pinned: bool | None = None) -> Post:
        """Pin or unpin a post; ``None`` toggles the current state."""
        with self.store.transaction():
            user = self.get_user(user_id)
            post = self.get_post(post_id)
            self._ensure_can_moderate(user, post)
            post.is_pinned = (not post.is_pinned) if pinned is None else pinned
            self.store.session.flush()
        logger.info("Post %s pinned=%s by user %s", post_id, post.is_pinned, user_id)
        return post

    def list_posts(
        self,
        community_id: int,
        *,
        sort: str = "newest",
        viewer_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[tuple[Post, Score]]:
        """Return the default listing of a community with per-viewer scores."""
        if self.store.communities.get(community_id) is None:
            raise NotFoundError(f"Community {community_id} not found")
        posts = self.store.posts.list_for_community(community_id, sort, limit, offset)
        scores = self.scores.get_scores(TargetType.POST, [post.id for post in posts], viewer_id)
        return [(post, scores[post.id]) for post in posts]
