"""SQLAlchemy models for user identities and their karma."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medforum.db.session import Base
from medforum.db.time import utcnow


class User(Base):
    """Registered medical professional.

    Profile attributes are opaque to the scoring core. Users are never
    deleted; a ban is expressed through ``is_banned``.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    specialty: Mapped[str | None] = mapped_column(Text, nullable=True)
    institution: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    karma: Mapped[UserKarma | None] = relationship(
        "UserKarma",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )


class UserKarma(Base):
    """Per-user karma totals, mutated only by full or incremental recompute."""

    __tablename__ = "user_karma"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    post_karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Externally sourced; recompute never derives it from votes.
    award_karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    user: Mapped[User] = relationship("User", back_populates="karma")
