"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import (
    CommentCreate,
    CommentNodeResponse,
    CommentResponse,
    CommentThreadResponse,
    CommentUpdate,
)
from .karma import KarmaResponse, LeaderboardEntry
from .post import PostFlagUpdate, PostListItem, PostResponse
from .vote import ScoreBatchRequest, ScoreResponse, VoteCreate, VoteResponse

__all__ = [
    "CommentCreate", "CommentNodeResponse", "CommentResponse", "CommentThreadResponse", "CommentUpdate",
    "KarmaResponse", "LeaderboardEntry",
    "PostFlagUpdate", "PostListItem", "PostResponse",
    "ScoreBatchRequest", "ScoreResponse", "VoteCreate", "VoteResponse",
]
