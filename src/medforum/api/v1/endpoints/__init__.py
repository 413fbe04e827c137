"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .communities import router as communities_router
from .karma import router as karma_router
from .posts import router as posts_router
from .votes import router as votes_router

__all__ = [
    "comments_router",
    "communities_router",
    "karma_router",
    "posts_router",
    "votes_router",
]
