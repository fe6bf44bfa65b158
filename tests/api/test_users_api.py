from __future__ import annotations

import re
from http import HTTPStatus
from typing import Any, Dict

import pytest

pytestmark = pytest.mark.asyncio


async def _complete_quest(api_client: Any, post_quest, creator_headers, worker_headers) -> Dict[str, Any]:
    quest = await post_quest(creator_headers)
    await api_client.post(f"/quests/{quest['id']}/accept", headers=worker_headers)
    inbox = await api_client.get("/user/notifications", headers=creator_headers)
    key = re.search(r"Completion key: (\w+)", inbox.json()[-1]["message"]).group(1)
    done = await api_client.post(
        f"/quests/{quest['id']}/complete", json={"key": key}, headers=worker_headers
    )
    assert done.status_code == HTTPStatus.OK, done.text
    return done.json()


async def test_notifications_can_be_marked_read(api_client: Any, signup, post_quest) -> None:
    _, alice_headers = await signup("Alice")
    _, bob_headers = await signup("Bob")
    quest = await post_quest(alice_headers)
    await api_client.post(f"/quests/{quest['id']}/accept", headers=bob_headers)

    inbox = await api_client.get("/user/notifications", headers=alice_headers)
    assert inbox.status_code == HTTPStatus.OK
    [notification] = inbox.json()
    assert notification["read"] is False

    marked = await api_client.post(
        f"/user/notifications/{notification['id']}/read", headers=alice_headers
    )
    assert marked.status_code == HTTPStatus.OK
    assert marked.json()["read"] is True

    missing = await api_client.post("/user/notifications/99/read", headers=alice_headers)
    assert missing.status_code == HTTPStatus.NOT_FOUND


async def test_profile_update(api_client: Any, signup) -> None:
    _, headers = await signup("Jean")
    await signup("Alice")

    updated = await api_client.post(
        "/user/profile",
        data={"bio": "Handyman", "phone": "0611"},
        files={"avatar": ("me.png", b"png-bytes", "image/png")},
        headers=headers,
    )
    assert updated.status_code == HTTPStatus.OK, updated.text
    assert updated.json()["bio"] == "Handyman"
    assert updated.json()["avatar"].startswith("/uploads/")

    taken = await api_client.post("/user/profile", data={"name": "Alice"}, headers=headers)
    assert taken.status_code == HTTPStatus.CONFLICT


async def test_reviews_feed_public_profile(api_client: Any, signup, post_quest) -> None:
    alice, alice_headers = await signup("Alice")
    bob, bob_headers = await signup("Bob")
    quest = await _complete_quest(api_client, post_quest, alice_headers, bob_headers)

    bad = await api_client.post(
        "/reviews",
        json={"questId": quest["id"], "targetUserId": bob["id"], "rating": 6},
        headers=alice_headers,
    )
    assert bad.status_code == HTTPStatus.BAD_REQUEST

    review = await api_client.post(
        "/reviews",
        json={"questId": quest["id"], "targetUserId": bob["id"], "rating": 4, "comment": "Quick"},
        headers=alice_headers,
    )
    assert review.status_code == HTTPStatus.CREATED, review.text
    assert review.json()["fromUserName"] == "Alice"

    twice = await api_client.post(
        "/reviews",
        json={"questId": quest["id"], "targetUserId": bob["id"], "rating": 5},
        headers=alice_headers,
    )
    assert twice.status_code == HTTPStatus.CONFLICT

    profile = await api_client.get(f"/users/{bob['id']}")
    assert profile.status_code == HTTPStatus.OK
    body = profile.json()
    assert body["avgRating"] == 4
    assert body["reviewCount"] == 1
    assert body["reviews"][0]["fromUserName"] == "Alice"
    assert "email" not in body


async def test_review_of_wrong_target_is_forbidden(api_client: Any, signup, post_quest) -> None:
    _, alice_headers = await signup("Alice")
    _, bob_headers = await signup("Bob")
    carol, _ = await signup("Carol")
    quest = await _complete_quest(api_client, post_quest, alice_headers, bob_headers)

    response = await api_client.post(
        "/reviews",
        json={"questId": quest["id"], "targetUserId": carol["id"], "rating": 5},
        headers=alice_headers,
    )
    assert response.status_code == HTTPStatus.FORBIDDEN


async def test_unknown_public_profile(api_client: Any) -> None:
    response = await api_client.get("/users/404")
    assert response.status_code == HTTPStatus.NOT_FOUND
