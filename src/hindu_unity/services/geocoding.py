"""Places API client for reverse geocoding and address autocomplete."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from hindu_unity.core.settings import settings

logger = logging.getLogger(__name__)

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="

_OK = "OK"
_ZERO_RESULTS = "ZERO_RESULTS"


class GeocodingError(RuntimeError):
    """Raised when the places API fails."""


class GeocodingDisabledError(GeocodingError):
    """Raised when no places API key is configured."""


def maps_link(address: str | None = None, lat: float | None = None, lng: float | None = None) -> str:
    """Return a map search link, preferring coordinates over the address."""
    if lat is not None and lng is not None:
        return f"{MAPS_SEARCH_URL}{lat},{lng}"
    return f"{MAPS_SEARCH_URL}{quote(address or '', safe='')}"


@dataclass
class GeocodingConfig:
    api_key: str | None
    base_url: str
    region: str
    language: str
    timeout_seconds: float


def load_geocoding_config() -> GeocodingConfig:
    return GeocodingConfig(
        api_key=settings.maps_api_key,
        base_url=settings.maps_api_base_url,
        region=settings.maps_region,
        language=settings.maps_language,
        timeout_seconds=float(settings.maps_timeout_seconds),
    )


class GeocodingClient:
    """HTTP client wrapper for the places API."""

    def __init__(
        self,
        config: GeocodingConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_geocoding_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.config.api_key)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.enabled:
            raise GeocodingDisabledError("Location services are not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    async def _get(self, path: str, params: dict[str, str]) -> dict[str, Any]:
        client = await self._ensure_client()
        query = {
            **params,
            "key": self.config.api_key or "",
            "language": self.config.language,
        }
        try:
            response = await client.get(path, params=query)
            response.raise_for_status()
            body: dict[str, Any] = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise GeocodingError(f"Places API request failed: {exc}") from exc

        api_status = body.get("status")
        if api_status not in (_OK, _ZERO_RESULTS):
            logger.warning("Places API returned status %s for %s", api_status, path)
            raise GeocodingError(f"Places API returned status {api_status}")
        return body

    async def reverse_geocode(self, lat: float, lng: float) -> str | None:
        """Return the formatted address closest to the coordinates, if any."""
        body = await self._get(
            "/geocode/json",
            {"latlng": f"{lat},{lng}", "region": self.config.region.lower()},
        )
        results = body.get("results") or []
        if not results:
            return None
        return results[0].get("formatted_address")

    async def autocomplete(self, text: str) -> list[dict[str, str | None]]:
        """Return place suggestions for partially typed input."""
        body = await self._get(
            "/place/autocomplete/json",
            {
                "input": text,
                "components": f"country:{self.config.region.lower()}",
            },
        )
        return [
            {"description": prediction.get("description", ""), "place_id": prediction.get("place_id")}
            for prediction in body.get("predictions") or []
        ]

    async def close(self) -> None:
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _GeocodingClientSingleton:
    _instance: GeocodingClient | None = None

    @classmethod
    def get_instance(cls) -> GeocodingClient:
        if cls._instance is None:
            cls._instance = GeocodingClient()
        return cls._instance


def get_geocoding_client() -> GeocodingClient:
    """Return a singleton places API client."""
    return _GeocodingClientSingleton.get_instance()
