"""Data access helpers over a SQLAlchemy session."""

from .comment_repo import CommentRepository
from .community_repo import CommunityRepository
from .karma_repo import KarmaRepository
from .post_repo import PostRepository
from .store import ForumStore
from .user_repo import UserRepository
from .vote_repo import VoteRepository, VoteTally

__all__ = [
    "CommentRepository",
    "CommunityRepository",
    "ForumStore",
    "KarmaRepository",
    "PostRepository",
    "UserRepository",
    "VoteRepository",
    "VoteTally",
]
