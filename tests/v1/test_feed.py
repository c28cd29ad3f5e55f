"""Tests for the merged, cursor-paginated home feed."""

from __future__ import annotations

from datetime import datetime, timedelta

from fastapi import status

BASE_TIME = datetime(2025, 3, 1, 12, 0, 0)


def _collect_pages(client, limit: int, headers=None) -> list[list[dict]]:
    pages = []
    cursor = None
    while True:
        params = {"limit": limit}
        if cursor:
            params["cursor"] = cursor
        response = client.get("/api/v1/feed/", params=params, headers=headers)
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        pages.append(body["items"])
        cursor = body["next_cursor"]
        if cursor is None:
            return pages


def _key(item: dict) -> tuple[str, int]:
    entity = item["post"] if item["kind"] == "post" else item["event"]
    return item["kind"], entity["id"]


def test_feed_merges_posts_and_events_newest_first(
    client, member, volunteer, make_post, make_event
) -> None:
    old_post = make_post(member, content="old", created_at=BASE_TIME)
    event = make_event(volunteer, created_at=BASE_TIME + timedelta(minutes=1))
    new_post = make_post(member, content="new", created_at=BASE_TIME + timedelta(minutes=2))

    response = client.get("/api/v1/feed/")
    assert response.status_code == status.HTTP_200_OK
    items = response.json()["items"]
    assert [_key(item) for item in items] == [
        ("post", new_post.id),
        ("event", event.id),
        ("post", old_post.id),
    ]
    assert response.json()["next_cursor"] is None
    assert items[1]["event"]["creator"]["id"] == volunteer.id


def test_feed_ties_put_posts_before_events(client, member, volunteer, make_post, make_event) -> None:
    event = make_event(volunteer, created_at=BASE_TIME)
    first = make_post(member, content="a", created_at=BASE_TIME)
    second = make_post(member, content="b", created_at=BASE_TIME)

    items = client.get("/api/v1/feed/").json()["items"]
    assert [_key(item) for item in items] == [
        ("post", second.id),
        ("post", first.id),
        ("event", event.id),
    ]


def test_feed_pages_never_repeat_items(client, member, volunteer, make_post, make_event) -> None:
    expected = set()
    for index in range(7):
        # Pairs share a timestamp so page boundaries fall on ties.
        moment = BASE_TIME + timedelta(minutes=index // 2)
        expected.add(("post", make_post(member, content=f"p{index}", created_at=moment).id))
        if index % 3 == 0:
            expected.add(("event", make_event(volunteer, created_at=moment).id))

    pages = _collect_pages(client, limit=3)
    seen = [_key(item) for page in pages for item in page]

    assert len(seen) == len(set(seen))
    assert set(seen) == expected
    assert all(len(page) <= 3 for page in pages)


def test_feed_limit_and_cursor(client, member, make_post) -> None:
    posts = [
        make_post(member, content=str(index), created_at=BASE_TIME + timedelta(minutes=index))
        for index in range(3)
    ]
    first = client.get("/api/v1/feed/", params={"limit": 2}).json()
    assert [item["post"]["id"] for item in first["items"]] == [posts[2].id, posts[1].id]
    assert first["next_cursor"]

    second = client.get(
        "/api/v1/feed/",
        params={"limit": 2, "cursor": first["next_cursor"]},
    ).json()
    assert [item["post"]["id"] for item in second["items"]] == [posts[0].id]
    assert second["next_cursor"] is None


def test_feed_rejects_bad_cursor(client) -> None:
    response = client.get("/api/v1/feed/", params={"cursor": "not-a-cursor"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_feed_reports_viewer_likes(client, test_post, member_headers) -> None:
    client.post(f"/api/v1/posts/{test_post.id}/like", headers=member_headers)
    items = client.get("/api/v1/feed/", headers=member_headers).json()["items"]
    assert items[0]["post"]["liked_by_me"] is True
    assert items[0]["post"]["like_count"] == 1


def test_pinned_feed_orders_by_pin_time(client, member, make_post) -> None:
    earlier = make_post(member, admin_pinned=True, admin_pinned_at=BASE_TIME)
    later = make_post(member, admin_pinned=True, admin_pinned_at=BASE_TIME + timedelta(hours=1))
    make_post(member)

    response = client.get("/api/v1/feed/pinned")
    assert [post["id"] for post in response.json()] == [later.id, earlier.id]
