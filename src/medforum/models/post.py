"""SQLAlchemy models for posts."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from medforum.db.session import Base
from medforum.db.time import utcnow

POST_TYPES = ("discussion", "case_study", "tool_review", "question")


class Post(Base):
    """Discussion, case study, tool review or question posted to a community."""

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint(
            "post_type IN ('discussion', 'case_study', 'tool_review', 'question')",
            name="ck_post_type",
        ),
        Index("ix_post_community_id", "community_id"),
        Index("ix_post_author_id", "author_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("community.id"),
        nullable=False,
    )
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    post_type: Mapped[str] = mapped_column(Text, nullable=False, default="discussion")
    # Opaque attachment descriptors handled by the upload service.
    attachments: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)

    is_pinned: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_locked: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(default=False, nullable=False)

    # Denormalized from the vote ledger; ScoreAggregator.reconcile rebuilds them.
    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
