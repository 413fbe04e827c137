"""Models capturing votes on posts and comments."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from medforum.core.errors import DataIntegrityError
from medforum.db.session import Base
from medforum.db.time import utcnow

TARGET_POST = "post"
TARGET_COMMENT = "comment"


class Vote(Base):
    """One user's vote on exactly one post or comment.

    The unique constraints keep at most one row per (user, target); the
    vote ledger upserts against them inside a transaction.
    """

    __tablename__ = "vote"
    __table_args__ = (
        CheckConstraint("value IN (1, -1)", name="ck_vote_value"),
        CheckConstraint(
            "(target_type = 'post' AND post_id IS NOT NULL AND comment_id IS NULL) OR "
            "(target_type = 'comment' AND comment_id IS NOT NULL AND post_id IS NULL)",
            name="ck_vote_single_target",
        ),
        UniqueConstraint("user_id", "target_type", "post_id", name="uq_vote_user_post"),
        UniqueConstraint("user_id", "target_type", "comment_id", name="uq_vote_user_comment"),
        Index("ix_vote_post_id", "post_id"),
        Index("ix_vote_comment_id", "comment_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id"),
        nullable=False,
    )
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=True,
    )
    comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comment.id", ondelete="CASCADE"),
        nullable=True,
    )
    # 1 = upvote, -1 = downvote.
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    @property
    def target_id(self) -> int:
        """Return the id of the voted post or comment.

        Raises:
            DataIntegrityError: If the row references both targets, neither, or
                a target that disagrees with ``target_type``.
        """
        if (self.post_id is None) == (self.comment_id is None):
            raise DataIntegrityError(f"Vote {self.id} has an ambiguous target")
        if self.target_type == TARGET_POST and self.post_id is not None:
            return self.post_id
        if self.target_type == TARGET_COMMENT and self.comment_id is not None:
            return self.comment_id
        raise DataIntegrityError(
            f"Vote {self.id} target_type {self.target_type!r} does not match its reference"
        )
