# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from medforum.core.security import create_access_token
from medforum.core.settings import Settings, settings
from medforum.db.session import Base
from medforum.db.session import get_db as app_get_session
from medforum.main import app as fastapi_app
from medforum.models import Comment, Community, CommunityModerator, Post, User
from medforum.services import ForumServices

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

_USER_COUNTER = count(1)
_COMMUNITY_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite needs these hooks for SAVEPOINT to behave.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _record) -> None:  # pragma: no cover - driver hook
        dbapi_connection.isolation_level = None
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:  # pragma: no cover - driver hook
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        join_transaction_mode="create_savepoint",
        autoflush=False,
        expire_on_commit=False,
    )
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide the runtime settings instance."""
    return settings


@pytest.fixture()
def services(db_session: Session, test_settings: Settings) -> ForumServices:
    return ForumServices.from_session(db_session, test_settings)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def select_statements(engine: Engine) -> Iterator[list[str]]:
    """Record every SELECT the engine runs while the test is active."""
    statements: list[str] = []

    def _record(_conn, _cursor, statement, _parameters, _context, _executemany) -> None:
        if statement.lstrip().upper().startswith("SELECT"):
            statements.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    try:
        yield statements
    finally:
        event.remove(engine, "before_cursor_execute", _record)


# -- factories -----------------------------------------------------------------


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    def _make_user(**overrides: Any) -> User:
        number = next(_USER_COUNTER)
        fields: dict[str, Any] = {
            "username": f"doctor{number}",
            "display_name": f"Dr. Test {number}",
            "specialty": "cardiology",
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.flush()
        return user

    return _make_user


@pytest.fixture()
def make_community(db_session: Session) -> Callable[..., Community]:
    def _make_community(owner: User, *, moderators: tuple[User, ...] = ()) -> Community:
        number = next(_COMMUNITY_COUNTER)
        community = Community(slug=f"specialty-{number}", name=f"Specialty {number}", owner_id=owner.id)
        db_session.add(community)
        db_session.flush()
        for moderator in moderators:
            db_session.add(CommunityModerator(community_id=community.id, user_id=moderator.id))
        db_session.flush()
        return community

    return _make_community


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    def _make_post(community: Community, author: User, **overrides: Any) -> Post:
        fields: dict[str, Any] = {
            "community_id": community.id,
            "author_id": author.id,
            "title": "Atypical presentation of pericarditis",
            "body": "Looking for second opinions on this case.",
            "post_type": "case_study",
        }
        fields.update(overrides)
        post = Post(**fields)
        db_session.add(post)
        db_session.flush()
        return post

    return _make_post


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    def _make_comment(
        post: Post,
        author: User,
        *,
        parent: Comment | None = None,
        minutes: int = 0,
        **overrides: Any,
    ) -> Comment:
        fields: dict[str, Any] = {
            "post_id": post.id,
            "author_id": author.id,
            "parent_id": parent.id if parent else None,
            "content": f"Comment at minute {minutes}",
            "created_at": BASE_TIME + timedelta(minutes=minutes),
        }
        fields.update(overrides)
        comment = Comment(**fields)
        db_session.add(comment)
        db_session.flush()
        return comment

    return _make_comment


# -- common actors -----------------------------------------------------------------


@pytest.fixture()
def owner(make_user: Callable[..., User]) -> User:
    return make_user(username="community_owner")


@pytest.fixture()
def moderator(make_user: Callable[..., User]) -> User:
    return make_user(username="community_mod")


@pytest.fixture()
def author(make_user: Callable[..., User]) -> User:
    return make_user(username="post_author")


@pytest.fixture()
def voter(make_user: Callable[..., User]) -> User:
    return make_user(username="voter")


@pytest.fixture()
def community(
    make_community: Callable[..., Community],
    owner: User,
    moderator: User,
) -> Community:
    return make_community(owner, moderators=(moderator,))


@pytest.fixture()
def post(make_post: Callable[..., Post], community: Community, author: User) -> Post:
    return make_post(community, author)


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Return a helper that builds bearer headers for a user."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers
