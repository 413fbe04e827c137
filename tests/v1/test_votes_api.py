"""Tests for the vote endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from medforum.models import Post, User


def test_cast_vote_requires_auth(client: TestClient, post: Post) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": post.id, "direction": "up"},
    )
    assert response.status_code in (401, 403)


def test_cast_vote_with_bad_token(client: TestClient, post: Post) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": post.id, "direction": "up"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401


def test_cast_toggle_and_flip(client: TestClient, post: Post, voter: User, auth_headers) -> None:
    headers = auth_headers(voter)
    payload = {"target_type": "post", "target_id": post.id, "direction": "up"}

    created = client.post("/api/v1/votes/", json=payload, headers=headers)
    assert created.status_code == 200
    assert created.json()["outcome"] == "created"
    assert created.json()["score"]["score"] == 1
    assert created.json()["score"]["viewer_vote"] == "up"

    flipped = client.post(
        "/api/v1/votes/",
        json={**payload, "direction": "down"},
        headers=headers,
    )
    assert flipped.json()["outcome"] == "changed"
    assert flipped.json()["score"]["score"] == -1

    removed = client.post(
        "/api/v1/votes/",
        json={**payload, "direction": "down"},
        headers=headers,
    )
    assert removed.json()["outcome"] == "removed"
    assert removed.json()["direction"] is None
    assert removed.json()["score"]["score"] == 0


def test_invalid_direction_is_unprocessable(
    client: TestClient,
    post: Post,
    voter: User,
    auth_headers,
) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": post.id, "direction": "sideways"},
        headers=auth_headers(voter),
    )
    assert response.status_code == 422


def test_vote_on_missing_post_is_404(client: TestClient, voter: User, auth_headers) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": 987654, "direction": "up"},
        headers=auth_headers(voter),
    )
    assert response.status_code == 404


def test_vote_on_locked_post_is_403(
    client: TestClient,
    post: Post,
    voter: User,
    moderator: User,
    auth_headers,
) -> None:
    lock = client.post(f"/api/v1/posts/{post.id}/lock", json={"value": True}, headers=auth_headers(moderator))
    assert lock.status_code == 200

    response = client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": post.id, "direction": "up"},
        headers=auth_headers(voter),
    )
    assert response.status_code == 403


def test_get_score_anonymous_and_as_voter(
    client: TestClient,
    post: Post,
    voter: User,
    auth_headers,
) -> None:
    client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": post.id, "direction": "up"},
        headers=auth_headers(voter),
    )

    anonymous = client.get(f"/api/v1/votes/post/{post.id}")
    assert anonymous.status_code == 200
    assert anonymous.json()["score"] == 1
    assert anonymous.json()["viewer_vote"] is None

    mine = client.get(f"/api/v1/votes/post/{post.id}", headers=auth_headers(voter))
    assert mine.json()["viewer_vote"] == "up"


def test_get_score_of_missing_comment_is_404(client: TestClient) -> None:
    assert client.get("/api/v1/votes/comment/987654").status_code == 404


def test_batch_scores_follow_request_order(
    client: TestClient,
    community,
    author: User,
    voter: User,
    make_post,
    auth_headers,
) -> None:
    first = make_post(community, author)
    second = make_post(community, author)
    client.post(
        "/api/v1/votes/",
        json={"target_type": "post", "target_id": second.id, "direction": "down"},
        headers=auth_headers(voter),
    )

    response = client.post(
        "/api/v1/votes/scores",
        json={"target_type": "post", "target_ids": [second.id, first.id]},
    )

    assert response.status_code == 200
    body = response.json()
    assert [entry["target_id"] for entry in body] == [second.id, first.id]
    assert [entry["score"] for entry in body] == [-1, 0]
