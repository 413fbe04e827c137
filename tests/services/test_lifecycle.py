"""Tests for the post and comment lifecycle: delete, lock, pin and write permission."""

from __future__ import annotations

import pytest

from medforum.core.errors import ForbiddenError, NotFoundError
from medforum.models import Post, User
from medforum.services import ForumServices


def test_lock_toggles_and_accepts_explicit_value(
    services: ForumServices,
    post: Post,
    moderator: User,
) -> None:
    assert services.lifecycle.set_locked(moderator.id, post.id).is_locked is True
    assert services.lifecycle.set_locked(moderator.id, post.id).is_locked is False
    assert services.lifecycle.set_locked(moderator.id, post.id, True).is_locked is True
    assert services.lifecycle.set_locked(moderator.id, post.id, True).is_locked is True


def test_pin_toggles(services: ForumServices, post: Post, owner: User) -> None:
    assert services.lifecycle.set_pinned(owner.id, post.id).is_pinned is True
    assert services.lifecycle.set_pinned(owner.id, post.id).is_pinned is False


def test_admin_may_moderate_any_community(
    services: ForumServices,
    post: Post,
    make_user,
) -> None:
    admin = make_user(is_admin=True)

    assert services.lifecycle.set_pinned(admin.id, post.id, True).is_pinned is True


def test_regular_user_cannot_lock_or_pin(
    services: ForumServices,
    post: Post,
    author: User,
    voter: User,
) -> None:
    with pytest.raises(ForbiddenError):
        services.lifecycle.set_locked(voter.id, post.id)
    with pytest.raises(ForbiddenError):
        services.lifecycle.set_pinned(author.id, post.id)
    assert post.is_locked is False
    assert post.is_pinned is False


def test_banned_moderator_cannot_moderate(
    services: ForumServices,
    post: Post,
    moderator: User,
) -> None:
    moderator.is_banned = True
    services.store.session.flush()

    with pytest.raises(ForbiddenError):
        services.lifecycle.set_locked(moderator.id, post.id)


def test_deleted_post_cannot_be_locked(
    services: ForumServices,
    post: Post,
    author: User,
    moderator: User,
) -> None:
    services.lifecycle.delete_post(author.id, post.id)

    with pytest.raises(NotFoundError):
        services.lifecycle.set_locked(moderator.id, post.id)
    with pytest.raises(NotFoundError):
        services.lifecycle.delete_post(author.id, post.id)


def test_delete_post_requires_author_or_moderator(
    services: ForumServices,
    community,
    author: User,
    voter: User,
    moderator: User,
    make_post,
) -> None:
    first = make_post(community, author)
    second = make_post(community, author)

    with pytest.raises(ForbiddenError):
        services.lifecycle.delete_post(voter.id, first.id)
    assert services.lifecycle.delete_post(author.id, first.id).is_deleted is True
    assert services.lifecycle.delete_post(moderator.id, second.id).is_deleted is True


def test_create_comment_and_reply(
    services: ForumServices,
    post: Post,
    voter: User,
) -> None:
    parent = services.lifecycle.create_comment(voter.id, post.id, "  First impression  ")
    reply = services.lifecycle.create_comment(voter.id, post.id, "Follow-up", parent_id=parent.id)

    assert parent.content == "First impression"
    assert parent.parent_id is None
    assert reply.parent_id == parent.id
    assert reply.post_id == post.id


def test_comment_content_is_validated(
    services: ForumServices,
    post: Post,
    voter: User,
    test_settings,
) -> None:
    with pytest.raises(ValueError):
        services.lifecycle.create_comment(voter.id, post.id, "   ")
    with pytest.raises(ValueError):
        services.lifecycle.create_comment(
            voter.id,
            post.id,
            "x" * (test_settings.comment_max_length + 1),
        )


def test_comment_on_locked_post(
    services: ForumServices,
    post: Post,
    voter: User,
    moderator: User,
) -> None:
    services.lifecycle.set_locked(moderator.id, post.id, True)

    with pytest.raises(ForbiddenError):
        services.lifecycle.create_comment(voter.id, post.id, "Too late")
    assert services.lifecycle.create_comment(moderator.id, post.id, "Closing note").id


def test_reply_to_deleted_or_missing_parent(
    services: ForumServices,
    post: Post,
    author: User,
    voter: User,
    make_comment,
) -> None:
    deleted = make_comment(post, author, is_deleted=True)

    with pytest.raises(NotFoundError):
        services.lifecycle.create_comment(voter.id, post.id, "Reply", parent_id=deleted.id)
    with pytest.raises(NotFoundError):
        services.lifecycle.create_comment(voter.id, post.id, "Reply", parent_id=987654)


def test_comment_on_deleted_post(
    services: ForumServices,
    post: Post,
    author: User,
    voter: User,
) -> None:
    services.lifecycle.delete_post(author.id, post.id)

    with pytest.raises(NotFoundError):
        services.lifecycle.create_comment(voter.id, post.id, "Anyone?")


def test_only_author_edits_comment(
    services: ForumServices,
    post: Post,
    author: User,
    moderator: User,
    make_comment,
) -> None:
    comment = make_comment(post, author)

    with pytest.raises(ForbiddenError):
        services.lifecycle.edit_comment(moderator.id, comment.id, "Rewritten")
    edited = services.lifecycle.edit_comment(author.id, comment.id, "Corrected dosage")
    assert edited.content == "Corrected dosage"


def test_delete_comment_permissions(
    services: ForumServices,
    post: Post,
    author: User,
    voter: User,
    moderator: User,
    make_comment,
) -> None:
    own = make_comment(post, author)
    other = make_comment(post, author, minutes=1)

    with pytest.raises(ForbiddenError):
        services.lifecycle.delete_comment(voter.id, own.id)
    assert services.lifecycle.delete_comment(author.id, own.id).is_deleted is True
    assert services.lifecycle.delete_comment(moderator.id, other.id).is_deleted is True
    with pytest.raises(NotFoundError):
        services.lifecycle.delete_comment(author.id, own.id)


def test_may_write(
    services: ForumServices,
    post: Post,
    voter: User,
    moderator: User,
    make_user,
) -> None:
    banned = make_user(is_banned=True)

    assert services.lifecycle.may_write(voter, post) is True
    assert services.lifecycle.may_write(banned, post) is False

    post.is_locked = True
    assert services.lifecycle.may_write(voter, post) is False
    assert services.lifecycle.may_write(moderator, post) is True


def test_list_posts_puts_pinned_first_and_hides_deleted(
    services: ForumServices,
    community,
    author: User,
    moderator: User,
    voter: User,
    make_post,
) -> None:
    older = make_post(community, author, title="Older")
    pinned = make_post(community, author, title="Announcement")
    removed = make_post(community, author, title="Removed")
    services.lifecycle.set_pinned(moderator.id, pinned.id, True)
    services.lifecycle.delete_post(author.id, removed.id)
    services.votes.cast_vote(voter.id, "post", older.id, "up")

    rows = services.lifecycle.list_posts(community.id, sort="top", viewer_id=voter.id)

    assert [post.id for post, _ in rows] == [pinned.id, older.id]
    assert rows[1][1].score == 1
    assert rows[1][1].viewer_vote is not None


def test_list_posts_of_missing_community(services: ForumServices) -> None:
    with pytest.raises(NotFoundError):
        services.lifecycle.list_posts(987654)
