"""SQLAlchemy models for the medforum application."""

from .comment import Comment
from .community import Community, CommunityModerator
from .post import Post
from .user import User, UserKarma
from .vote import Vote

__all__ = [
    "Comment",
    "Community", "CommunityModerator",
    "Post",
    "User", "UserKarma",
    "Vote",
]
