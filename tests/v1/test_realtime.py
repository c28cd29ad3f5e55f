"""Tests for the realtime websocket."""

from __future__ import annotations

import pytest
from fastapi import WebSocketDisconnect, status
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool

from hindu_unity.api.v1.dependencies import get_session_factory
from hindu_unity.core.security import create_access_token, hash_password
from hindu_unity.db.session import Base, get_db
from hindu_unity.models import Profile


def test_rejects_missing_token(client) -> None:
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/api/v1/realtime"):
            pass
    assert exc_info.value.code == status.WS_1008_POLICY_VIOLATION


def test_rejects_bad_token(client) -> None:
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/api/v1/realtime?token=garbage"):
            pass
    assert exc_info.value.code == status.WS_1008_POLICY_VIOLATION


def test_streams_post_changes(client, member, member_headers) -> None:
    token = create_access_token(member.id)
    with client.websocket_connect(f"/api/v1/realtime?token={token}&tables=posts,unknown") as ws:
        assert ws.receive_json() == {"type": "subscribed", "tables": ["posts"]}

        created = client.post("/api/v1/posts/", headers=member_headers, json={"content": "Live update"})
        assert created.status_code == status.HTTP_201_CREATED

        message = ws.receive_json()
        assert message["type"] == "change"
        assert message["table"] == "posts"
        assert message["event"] == "INSERT"
        assert message["id"] == created.json()["id"]


def test_unsubscribes_on_disconnect(client, member, change_feed) -> None:
    token = create_access_token(member.id)
    with client.websocket_connect(f"/api/v1/realtime?token={token}&tables=events") as ws:
        ws.receive_json()
        assert change_feed.subscriber_count == 1
    # The handler notices the close asynchronously.
    for _ in range(50):
        if change_feed.subscriber_count == 0:
            break
        client.get("/health")
    assert change_feed.subscriber_count == 0


@pytest.fixture()
def single_connection_pool(app, tmp_path):
    """Serve requests from a file database whose pool holds one connection."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'realtime.db'}",
        connect_args={"check_same_thread": False},
        poolclass=QueuePool,
        pool_size=1,
        max_overflow=0,
        pool_timeout=1,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False)

    def _get_db():
        db = factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_factory] = lambda: factory
    try:
        yield factory
    finally:
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_session_factory, None)
        engine.dispose()


def test_open_socket_leaves_pool_free(client, single_connection_pool) -> None:
    with single_connection_pool() as db:
        profile = Profile(
            email="listener@example.com",
            password_hash=hash_password("secret-pass"),
            full_name="Long Listener",
        )
        db.add(profile)
        db.commit()
        profile_id = profile.id
    token = create_access_token(profile_id)

    # Records last_seen_at, so the socket's authentication has nothing to commit.
    session = client.get("/api/v1/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert session.status_code == status.HTTP_200_OK

    with client.websocket_connect(f"/api/v1/realtime?token={token}") as ws:
        assert ws.receive_json()["type"] == "subscribed"
        assert client.get("/api/v1/feed/").status_code == status.HTTP_200_OK
