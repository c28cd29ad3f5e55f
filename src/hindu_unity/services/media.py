"""Client for the media companion API that issues pre-signed upload URLs.

The companion service owns the storage bucket; this module only asks it for
upload URLs and for deletions, and validates what clients may upload.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from hindu_unity.core.settings import settings

logger = logging.getLogger(__name__)

UPLOAD_URL_PATH = "/api/get-upload-url"
AVATAR_UPLOAD_URL_PATH = "/api/get-avatar-upload-url"
DELETE_MEDIA_PATH = "/delete-media"


class MediaServiceError(RuntimeError):
    """Raised when the media companion API fails or returns an unusable reply."""


class MediaDisabledError(MediaServiceError):
    """Raised when no media companion API is configured."""


class MediaValidationError(ValueError):
    """Raised when a requested upload is not allowed."""


@dataclass
class MediaConfig:
    base_url: str | None
    timeout_seconds: float
    avatar_max_bytes: int


def load_media_config() -> MediaConfig:
    """Build configuration object from global settings."""
    return MediaConfig(
        base_url=settings.media_api_base_url,
        timeout_seconds=float(settings.media_api_timeout_seconds),
        avatar_max_bytes=settings.avatar_max_bytes,
    )


def validate_upload(
    kind: str,
    content_type: str,
    size: int | None,
    avatar_max_bytes: int,
) -> None:
    """Check that the file may be uploaded as `kind`.

    Avatars must be images no larger than `avatar_max_bytes`; post media may
    be an image or a video.

    Raises:
        MediaValidationError: If the type or size is not accepted.
    """
    if kind == "avatar":
        if not content_type.startswith("image/"):
            raise MediaValidationError("Please upload an image file")
        if size is not None and size > avatar_max_bytes:
            raise MediaValidationError("Image must be smaller than 5MB")
        return
    if not content_type.startswith(("image/", "video/")):
        raise MediaValidationError("Only image and video files can be attached")


class MediaClient:
    """HTTP client wrapper for the media companion API."""

    def __init__(
        self,
        config: MediaConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_media_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.config.base_url)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.enabled:
            raise MediaDisabledError("Media uploads are not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url or "",
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    async def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        client = await self._ensure_client()
        try:
            response = await client.post(path, json=payload)
        except httpx.HTTPError as exc:
            raise MediaServiceError(f"Media API request failed: {exc}") from exc
        if response.is_error:
            raise MediaServiceError(f"Media API responded with {response.status_code}")
        return response

    async def request_upload_url(
        self,
        *,
        user_id: int,
        kind: str,
        file_type: str,
        file_name: str,
        content_type: str,
    ) -> tuple[str, str]:
        """Ask the companion API for a pre-signed upload URL.

        Returns:
            The `(upload_url, public_url)` pair.

        Raises:
            MediaServiceError: If the request fails or the reply is malformed.
        """
        path = AVATAR_UPLOAD_URL_PATH if kind == "avatar" else UPLOAD_URL_PATH
        response = await self._post(
            path,
            {
                "user_id": user_id,
                "file_type": file_type,
                "file_name": file_name,
                "content_type": content_type,
            },
        )
        try:
            body = response.json()
            return str(body["upload_url"]), str(body["public_url"])
        except (ValueError, KeyError, TypeError) as exc:
            raise MediaServiceError("Media API returned an invalid upload URL response") from exc

    async def delete_media(self, url: str) -> None:
        """Delete a previously uploaded object by its public URL."""
        await self._post(DELETE_MEDIA_PATH, {"url": url})

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


async def delete_post_media(client: MediaClient, urls: list[str]) -> None:
    """Best-effort removal of media attached to a deleted post."""
    if not client.enabled:
        return
    for url in urls:
        try:
            await client.delete_media(url)
        except MediaServiceError as exc:
            logger.warning("Failed to delete media %s: %s", url, exc)


class _MediaClientSingleton:
    _instance: MediaClient | None = None

    @classmethod
    def get_instance(cls) -> MediaClient:
        if cls._instance is None:
            cls._instance = MediaClient()
        return cls._instance


def get_media_client() -> MediaClient:
    """Return a singleton media client instance."""
    return _MediaClientSingleton.get_instance()
