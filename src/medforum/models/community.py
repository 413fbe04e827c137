"""SQLAlchemy models for communities and their moderators."""

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from medforum.db.session import Base

MODERATOR_ROLE_MODERATOR = "moderator"
MODERATOR_ROLE_ADMIN = "admin"


class Community(Base):
    """Specialty community that aggregates posts.

    Name and slug are fixed once the community is created.
    """

    __tablename__ = "community"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id"),
        nullable=False,
    )


class CommunityModerator(Base):
    """Join table granting a user moderation rights in a community."""

    __tablename__ = "community_moderator"

    community_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("community.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role: Mapped[str] = mapped_column(Text, nullable=False, default=MODERATOR_ROLE_MODERATOR)
