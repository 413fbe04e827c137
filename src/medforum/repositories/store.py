"""Store-access object injected into every forum service."""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from .comment_repo import CommentRepository
from .community_repo import CommunityRepository
from .karma_repo import KarmaRepository
from .post_repo import PostRepository
from .user_repo import UserRepository
from .vote_repo import VoteRepository

__all__ = ["ForumStore"]


class ForumStore:
    """Bundle of repositories sharing one session and one unit of work.

    Services receive a ``ForumStore`` in their constructor instead of reaching
    for a module-level session, so tests can hand them an in-memory database.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.communities = CommunityRepository(session)
        self.posts = PostRepository(session)
        self.comments = CommentRepository(session)
        self.votes = VoteRepository(session)
        self.karma = KarmaRepository(session)
        self._depth = 0

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Run a block atomically and commit it.

        The block runs inside a savepoint; an exception rolls the savepoint
        back and propagates, so nothing from the block is left half-written.
        Nested calls share the outermost commit.
        """
        outermost = self._depth == 0
        self._depth += 1
        try:
            with self.session.begin_nested():
                yield self.session
        finally:
            self._depth -= 1
        if outermost:
            self.session.commit()

