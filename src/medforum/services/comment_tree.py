"""Rebuild nested reply trees from the flat comment rows of a post."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable

from medforum.core.errors import DataIntegrityError, NotFoundError
from medforum.db.time import as_utc
from medforum.models import Comment
from medforum.repositories import ForumStore

from .scores import ScoreAggregator
from .types import CommentNode, CommentThread, Score, SortOrder, TargetType

logger = logging.getLogger(__name__)


def _recency(node: CommentNode) -> tuple[float, int]:
    return as_utc(node.comment.created_at).timestamp(), node.comment.id


def _sort_siblings(nodes: list[CommentNode], order: SortOrder, min_votes: int) -> None:
    if order is SortOrder.OLDEST:
        nodes.sort(key=_recency)
    elif order in (SortOrder.TOP, SortOrder.BEST):
        nodes.sort(key=lambda node: (node.score.score, *_recency(node)), reverse=True)
    elif order is SortOrder.CONTROVERSIAL:
        floor = max(min_votes, 1)

        def contested(node: CommentNode) -> tuple:
            created, comment_id = _recency(node)
            total = node.score.total_votes
            if total < floor:
                # Below the floor: after every contested comment, newest first.
                return (1, 0, 0, -created, -comment_id)
            return (0, abs(node.score.score), -total, -created, -comment_id)

        nodes.sort(key=contested)
    else:
        nodes.sort(key=_recency, reverse=True)


class CommentTreeBuilder:
    """Assemble the reply tree of one post in a single fetch and linear passes.

    Deleted comments stay in the tree with their content replaced by a marker
    so their replies stay reachable.
    """

    def __init__(
        self,
        store: ForumStore,
        scores: ScoreAggregator,
        *,
        removed_marker: str = "[removed]",
        controversial_min_votes: int = 1,
    ) -> None:
        self.store = store
        self.scores = scores
        self.removed_marker = removed_marker
        self.controversial_min_votes = controversial_min_votes

    def build_tree(
        self,
        post_id: int,
        viewer_id: int | None = None,
        sort: SortOrder | str = SortOrder.NEWEST,
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[CommentNode]:
        """Return the top-level comment nodes of a post, each with its replies.

        Every sibling list is sorted independently by ``sort``. ``limit`` and
        ``offset`` page over the sorted top-level list only; replies always
        come with their parent. The whole post is still assembled so that
        corrupted parent chains are detected on every page.

        Raises:
            NotFoundError: The post does not exist or is deleted.
            DataIntegrityError: The parent references contain a cycle.
        """
        order = SortOrder(sort)
        if self.store.posts.get_visible(post_id) is None:
            raise NotFoundError(f"Post {post_id} not found")

        by_id, children, scores = self._load(post_id, viewer_id)
        roots = [comment for comment in by_id.values() if comment.parent_id is None]
        visited: set[int] = set()
        top_level = self._expand(post_id, roots, children, scores, order, visited)

        if len(visited) != len(by_id):
            self._check_unreachable(post_id, by_id, visited)
        if limit is None:
            return top_level[offset:]
        return top_level[offset:offset + limit]

    def build_subtree(
        self,
        comment_id: int,
        viewer_id: int | None = None,
        sort: SortOrder | str = SortOrder.NEWEST,
    ) -> CommentThread:
        """Return one comment with all of its replies and its direct parent.

        Used to continue a thread below the depth the tree endpoint renders.
        A deleted comment is still returned, with its content masked.

        Raises:
            NotFoundError: The comment does not exist or its post is deleted.
            DataIntegrityError: The replies below the comment contain a cycle.
        """
        order = SortOrder(sort)
        comment = self.store.comments.get(comment_id)
        if comment is None or self.store.posts.get_visible(comment.post_id) is None:
            raise NotFoundError(f"Comment {comment_id} not found")

        by_id, children, scores = self._load(comment.post_id, viewer_id)
        root = by_id[comment.id]
        (node,) = self._expand(comment.post_id, [root], children, scores, order, set())
        parent = by_id.get(root.parent_id) if root.parent_id is not None else None
        return CommentThread(
            node=node,
            parent=self._node(parent, scores) if parent is not None else None,
        )

    def count_comments(self, post_id: int) -> int:
        """Return the number of non-deleted comments on a post."""
        return self.store.comments.count_visible(post_id)

    def count_comments_many(self, post_ids: Iterable[int]) -> dict[int, int]:
        """Return non-deleted comment counts for many posts in one query."""
        return self.store.comments.count_visible_many(post_ids)

    def _load(
        self,
        post_id: int,
        viewer_id: int | None,
    ) -> tuple[dict[int, Comment], dict[int, list[Comment]], dict[int, Score]]:
        comments = self.store.comments.list_for_post(post_id)
        scores = self.scores.get_scores(
            TargetType.COMMENT,
            [comment.id for comment in comments],
            viewer_id,
        )
        by_id = {comment.id: comment for comment in comments}
        children: dict[int, list[Comment]] = defaultdict(list)
        for comment in comments:
            if comment.parent_id is not None and comment.parent_id in by_id:
                children[comment.parent_id].append(comment)
        return by_id, children, scores

    def _expand(
        self,
        post_id: int,
        roots: list[Comment],
        children: dict[int, list[Comment]],
        scores: dict[int, Score],
        order: SortOrder,
        visited: set[int],
    ) -> list[CommentNode]:
        top_level = [self._node(comment, scores) for comment in roots]
        stack = list(top_level)
        while stack:
            node = stack.pop()
            if node.comment.id in visited:
                logger.error(
                    "Comment %s reached twice while building post %s",
                    node.comment.id,
                    post_id,
                )
                raise DataIntegrityError(
                    f"Comment {node.comment.id} reached twice while building post {post_id}"
                )
            visited.add(node.comment.id)
            node.replies = [self._node(child, scores) for child in children.get(node.comment.id, [])]
            _sort_siblings(node.replies, order, self.controversial_min_votes)
            stack.extend(node.replies)
        _sort_siblings(top_level, order, self.controversial_min_votes)
        return top_level

    def _node(self, comment: Comment, scores: dict[int, Score]) -> CommentNode:
        content = self.removed_marker if comment.is_deleted else comment.content
        return CommentNode(comment=comment, content=content, score=scores.get(comment.id, Score()))

    def _check_unreachable(
        self,
        post_id: int,
        by_id: dict[int, Comment],
        visited: set[int],
    ) -> None:
        """Classify comments the walk from the roots never reached.

        A chain that leaves the post is an orphan and is dropped with a warning;
        a chain that comes back on itself is a cycle.
        """
        settled: set[int] = set(visited)
        dropped: set[int] = set()
        for comment_id in by_id:
            if comment_id in settled:
                continue
            chain: list[int] = []
            seen: set[int] = set()
            current: int | None = comment_id
            while current is not None and current in by_id and current not in settled:
                if current in seen:
                    logger.error(
                        "Parent cycle in post %s through comments %s",
                        post_id,
                        sorted(seen),
                    )
                    raise DataIntegrityError(
                        f"Comment parent cycle detected in post {post_id}"
                    )
                seen.add(current)
                chain.append(current)
                current = by_id[current].parent_id
            if current in dropped:
                logger.warning(
                    "Dropping comments %s from post %s (they reply to orphaned comment %s)",
                    chain,
                    post_id,
                    current,
                )
            else:
                logger.warning(
                    "Dropping orphaned comments %s from post %s (parent %s is not in the post)",
                    chain,
                    post_id,
                    current,
                )
            settled.update(chain)
            dropped.update(chain)
