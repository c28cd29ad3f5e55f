"""Tests for pre-signed upload URL requests."""

from __future__ import annotations

import json

import httpx
import pytest
from fastapi import status

from hindu_unity.api.v1.dependencies import get_media_client_dep
from hindu_unity.services.media import MediaClient, MediaConfig

UPLOAD_URL = "https://storage.example.com/upload?sig=abc"
PUBLIC_URL = "https://cdn.example.com/media/1.jpg"


@pytest.fixture()
def media_requests(app) -> list[httpx.Request]:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"upload_url": UPLOAD_URL, "public_url": PUBLIC_URL})

    client = MediaClient(
        config=MediaConfig(base_url="https://media.test", timeout_seconds=5, avatar_max_bytes=5 * 1024 * 1024),
        transport=httpx.MockTransport(handler),
    )
    app.dependency_overrides[get_media_client_dep] = lambda: client
    yield seen
    app.dependency_overrides.pop(get_media_client_dep, None)


def test_post_upload_url(client, member, member_headers, media_requests) -> None:
    response = client.post(
        "/api/v1/media/upload-url",
        headers=member_headers,
        json={"file_type": "video", "file_name": "clip.mp4", "content_type": "video/mp4"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"upload_url": UPLOAD_URL, "public_url": PUBLIC_URL}

    (request,) = media_requests
    assert request.url.path == "/api/get-upload-url"
    assert json.loads(request.content)["user_id"] == member.id


def test_avatar_upload_url(client, member_headers, media_requests) -> None:
    response = client.post(
        "/api/v1/media/upload-url",
        headers=member_headers,
        json={"kind": "avatar", "file_name": "me.png", "content_type": "image/png", "size": 1024},
    )
    assert response.status_code == status.HTTP_200_OK
    assert media_requests[0].url.path == "/api/get-avatar-upload-url"


def test_avatar_too_large(client, member_headers, media_requests) -> None:
    response = client.post(
        "/api/v1/media/upload-url",
        headers=member_headers,
        json={
            "kind": "avatar",
            "file_name": "me.png",
            "content_type": "image/png",
            "size": 6 * 1024 * 1024,
        },
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Image must be smaller than 5MB"
    assert media_requests == []


def test_rejects_non_media_files(client, member_headers, media_requests) -> None:
    response = client.post(
        "/api/v1/media/upload-url",
        headers=member_headers,
        json={"file_name": "notes.pdf", "content_type": "application/pdf"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_upstream_failure(client, app, member_headers) -> None:
    failing = MediaClient(
        config=MediaConfig(base_url="https://media.test", timeout_seconds=5, avatar_max_bytes=1024),
        transport=httpx.MockTransport(lambda request: httpx.Response(500)),
    )
    app.dependency_overrides[get_media_client_dep] = lambda: failing
    try:
        response = client.post(
            "/api/v1/media/upload-url",
            headers=member_headers,
            json={"file_name": "a.jpg", "content_type": "image/jpeg"},
        )
    finally:
        app.dependency_overrides.pop(get_media_client_dep, None)
    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    assert response.json()["detail"] == "Failed to get upload URL"


def test_uploads_disabled(client, app, member_headers) -> None:
    disabled = MediaClient(config=MediaConfig(base_url=None, timeout_seconds=5, avatar_max_bytes=1024))
    app.dependency_overrides[get_media_client_dep] = lambda: disabled
    try:
        response = client.post(
            "/api/v1/media/upload-url",
            headers=member_headers,
            json={"file_name": "a.jpg", "content_type": "image/jpeg"},
        )
    finally:
        app.dependency_overrides.pop(get_media_client_dep, None)
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
