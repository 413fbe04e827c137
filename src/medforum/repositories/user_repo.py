"""Data access helpers for users."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from medforum.models import User

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        """Return a user by identifier."""
        return self.session.get(User, user_id)

    def list_ids(self) -> list[int]:
        """Return every user id in ascending order."""
        return list(self.session.scalars(select(User.id).order_by(User.id)))
