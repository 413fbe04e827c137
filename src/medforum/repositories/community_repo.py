"""Data access helpers for communities and their moderators."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from medforum.models import Community, CommunityModerator

__all__ = ["CommunityRepository"]


class CommunityRepository:
    """Thin wrapper around database access for community entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, community_id: int) -> Community | None:
        """Return a community by identifier."""
        return self.session.get(Community, community_id)

    def get_moderator(self, community_id: int, user_id: int) -> CommunityModerator | None:
        """Return the moderator grant of ``user_id`` in ``community_id`` if any."""
        return self.session.scalars(
            select(CommunityModerator).where(
                CommunityModerator.community_id == community_id,
                CommunityModerator.user_id == user_id,
            )
        ).first()
