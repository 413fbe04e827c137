"""Tests for the karma recompute command."""

from __future__ import annotations

from contextlib import contextmanager

import pytest
from sqlalchemy.orm import Session

from medforum.models import Post, User
from medforum.scripts import recompute_karma
from medforum.services import ForumServices


@pytest.fixture()
def patched_session(db_session: Session, monkeypatch: pytest.MonkeyPatch) -> Session:
    @contextmanager
    def _session_local():
        yield db_session

    monkeypatch.setattr(recompute_karma, "SessionLocal", _session_local)
    return db_session


def test_recompute_selected_users(
    patched_session: Session,
    services: ForumServices,
    post: Post,
    author: User,
    voter: User,
) -> None:
    services.votes.cast_vote(voter.id, "post", post.id, "up")

    result = recompute_karma.recompute([author.id, 987654], top=3)

    assert result.snapshots[author.id].post_karma == 1
    assert set(result.failures) == {987654}
    assert not result.ok


def test_main_exits_non_zero_on_failure(
    patched_session: Session,
    author: User,
) -> None:
    patched_session.commit()

    with pytest.raises(SystemExit) as excinfo:
        recompute_karma.main(["--user", "987654"])
    assert excinfo.value.code == 1


def test_main_succeeds_for_all_users(
    patched_session: Session,
    author: User,
    voter: User,
) -> None:
    patched_session.commit()

    recompute_karma.main(["--top", "2"])

    assert patched_session.get(User, author.id).karma is not None
