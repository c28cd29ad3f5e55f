"""Tests for the external content review queue."""

from __future__ import annotations

import pytest
from fastapi import status

from hindu_unity.core.settings import settings
from hindu_unity.models import PendingPost, Post

INGEST_KEY = "ingest-test-key"


@pytest.fixture()
def ingest_key(monkeypatch) -> dict[str, str]:
    monkeypatch.setattr(settings, "ingest_api_key", INGEST_KEY)
    return {"X-Ingest-Key": INGEST_KEY}


@pytest.fixture()
def pending_post(db_session, member) -> PendingPost:
    pending = PendingPost(
        external_id="ig-123",
        user_id=member.id,
        external_username="meera_ig",
        content="Diwali celebrations",
        post_type="image",
        media_url="https://cdn.example.com/diwali.jpg",
        source="instagram",
    )
    db_session.add(pending)
    db_session.flush()
    db_session.refresh(pending)
    return pending


def _payload(member_id: int, **overrides) -> dict:
    payload = {
        "external_id": "ig-456",
        "user_id": member_id,
        "content": "Temple festival",
        "source": "instagram",
    }
    payload.update(overrides)
    return payload


def test_ingest_queues_post(client, member, ingest_key) -> None:
    response = client.post("/api/v1/moderation/pending-posts", headers=ingest_key, json=_payload(member.id))
    assert response.status_code == status.HTTP_202_ACCEPTED
    assert response.json()["status"] == "pending"


def test_ingest_is_idempotent_on_external_id(client, db_session, member, ingest_key) -> None:
    url = "/api/v1/moderation/pending-posts"
    first = client.post(url, headers=ingest_key, json=_payload(member.id))
    second = client.post(url, headers=ingest_key, json=_payload(member.id, content="Edited"))

    assert first.json()["id"] == second.json()["id"]
    assert second.json()["content"] == "Edited"
    assert db_session.query(PendingPost).count() == 1


def test_ingest_requires_key(client, member, ingest_key) -> None:
    url = "/api/v1/moderation/pending-posts"
    assert client.post(url, json=_payload(member.id)).status_code == status.HTTP_401_UNAUTHORIZED
    wrong = client.post(url, headers={"X-Ingest-Key": "nope"}, json=_payload(member.id))
    assert wrong.status_code == status.HTTP_401_UNAUTHORIZED


def test_ingest_disabled_without_key(client, member, monkeypatch) -> None:
    monkeypatch.setattr(settings, "ingest_api_key", None)
    response = client.post(
        "/api/v1/moderation/pending-posts",
        headers={"X-Ingest-Key": "anything"},
        json=_payload(member.id),
    )
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


def test_ingest_unknown_profile(client, ingest_key) -> None:
    response = client.post("/api/v1/moderation/pending-posts", headers=ingest_key, json=_payload(9999))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_queue_requires_super_admin(client, executive_headers) -> None:
    response = client.get("/api/v1/moderation/pending-posts", headers=executive_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_accept_publishes_post(client, db_session, pending_post, admin_headers) -> None:
    listed = client.get("/api/v1/moderation/pending-posts", headers=admin_headers).json()
    assert [item["id"] for item in listed] == [pending_post.id]

    response = client.post(
        f"/api/v1/moderation/pending-posts/{pending_post.id}/accept",
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    post = db_session.get(Post, response.json()["post_id"])
    assert post.user_id == pending_post.user_id
    assert post.source == "instagram"
    assert post.media_urls == ["https://cdn.example.com/diwali.jpg"]

    assert client.get("/api/v1/moderation/pending-posts", headers=admin_headers).json() == []
    again = client.post(
        f"/api/v1/moderation/pending-posts/{pending_post.id}/reject",
        headers=admin_headers,
    )
    assert again.status_code == status.HTTP_409_CONFLICT


def test_reject_keeps_post_out_of_feed(client, pending_post, admin_headers) -> None:
    response = client.post(
        f"/api/v1/moderation/pending-posts/{pending_post.id}/reject",
        headers=admin_headers,
    )
    assert response.json()["status"] == "rejected"
    assert client.get("/api/v1/feed/").json()["items"] == []


def test_resending_accepted_post_is_refused(client, db_session, member, ingest_key, admin_headers) -> None:
    url = "/api/v1/moderation/pending-posts"
    queued = client.post(url, headers=ingest_key, json=_payload(member.id, external_id="tw-1")).json()
    accepted = client.post(f"{url}/{queued['id']}/accept", headers=admin_headers)
    assert accepted.status_code == status.HTTP_200_OK

    resent = client.post(url, headers=ingest_key, json=_payload(member.id, external_id="tw-1"))
    assert resent.status_code == status.HTTP_409_CONFLICT
    assert db_session.get(PendingPost, queued["id"]).status == "accepted"
    assert client.get(url, headers=admin_headers).json() == []
    assert db_session.query(Post).filter(Post.external_id == "tw-1").count() == 1


def test_resending_rejected_post_is_refused(client, member, ingest_key, admin_headers) -> None:
    url = "/api/v1/moderation/pending-posts"
    queued = client.post(url, headers=ingest_key, json=_payload(member.id, external_id="tw-2")).json()
    client.post(f"{url}/{queued['id']}/reject", headers=admin_headers)

    resent = client.post(url, headers=ingest_key, json=_payload(member.id, external_id="tw-2"))
    assert resent.status_code == status.HTTP_409_CONFLICT


def test_accept_refuses_already_published_external_id(
    client, member, make_post, pending_post, admin_headers
) -> None:
    make_post(member, content="Already here", external_id=pending_post.external_id)

    response = client.post(
        f"/api/v1/moderation/pending-posts/{pending_post.id}/accept",
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT
