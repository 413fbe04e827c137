"""Tests for post listing and moderation endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from medforum.models import Post, User


def test_list_posts_pinned_first(
    client: TestClient,
    community,
    author: User,
    moderator: User,
    voter: User,
    make_post,
    auth_headers,
) -> None:
    regular = make_post(community, author, title="Regular")
    pinned = make_post(community, author, title="Pinned")
    assert client.post(
        f"/api/v1/posts/{pinned.id}/pin",
        json={"value": True},
        headers=auth_headers(moderator),
    ).status_code == 200
    client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": regular.id, "direction": "up"},
        headers=auth_headers(voter),
    )

    response = client.get(
        f"/api/v1/communities/{community.id}/posts?sort=top",
        headers=auth_headers(voter),
    )

    assert response.status_code == 200
    items = response.json()
    assert [item["post"]["id"] for item in items] == [pinned.id, regular.id]
    assert items[0]["post"]["is_pinned"] is True
    assert items[1]["score"] == 1
    assert items[1]["viewer_vote"] == "up"


def test_list_posts_unknown_community_is_404(client: TestClient) -> None:
    assert client.get("/api/v1/communities/987654/posts").status_code == 404


def test_lock_requires_moderator(client: TestClient, post: Post, voter: User, auth_headers) -> None:
    response = client.post(f"/api/v1/posts/{post.id}/lock", json={}, headers=auth_headers(voter))
    assert response.status_code == 403


def test_lock_toggle(client: TestClient, post: Post, moderator: User, auth_headers) -> None:
    headers = auth_headers(moderator)

    first = client.post(f"/api/v1/posts/{post.id}/lock", json={}, headers=headers)
    second = client.post(f"/api/v1/posts/{post.id}/lock", json={"value": None}, headers=headers)

    assert first.json()["is_locked"] is True
    assert second.json()["is_locked"] is False


def test_delete_post(client: TestClient, post: Post, author: User, voter: User, auth_headers) -> None:
    assert client.delete(f"/api/v1/posts/{post.id}", headers=auth_headers(voter)).status_code == 403
    assert client.delete(f"/api/v1/posts/{post.id}", headers=auth_headers(author)).status_code == 200
    assert client.get(f"/api/v1/votes/post/{post.id}").status_code == 404


def test_listing_query_count_does_not_grow_with_posts(
    client: TestClient,
    community,
    post: Post,
    author: User,
    make_post,
    make_comment,
    select_statements: list[str],
) -> None:
    make_comment(post, author)
    url = f"/api/v1/communities/{community.id}/posts"

    select_statements.clear()
    assert client.get(url).status_code == 200
    baseline = len(select_statements)

    for index in range(5):
        extra = make_post(community, author, title=f"Follow-up {index}")
        make_comment(extra, author)
    select_statements.clear()
    response = client.get(url)

    assert response.status_code == 200
    assert len(response.json()) == 6
    assert all(item["comment_count"] == 1 for item in response.json())
    assert len(select_statements) == baseline
