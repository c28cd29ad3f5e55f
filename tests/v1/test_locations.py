"""Tests for location lookup endpoints."""

from __future__ import annotations

import httpx
import pytest
from fastapi import status

from hindu_unity.api.v1.dependencies import get_geocoding_client_dep
from hindu_unity.services.geocoding import GeocodingClient, GeocodingConfig


def _config(api_key: str | None = "maps-key") -> GeocodingConfig:
    return GeocodingConfig(
        api_key=api_key,
        base_url="https://maps.test/maps/api",
        region="IN",
        language="en",
        timeout_seconds=5,
    )


@pytest.fixture()
def use_geocoder(app):
    def _install(handler=None, api_key: str | None = "maps-key") -> None:
        transport = httpx.MockTransport(handler) if handler else None
        client = GeocodingClient(config=_config(api_key), transport=transport)
        app.dependency_overrides[get_geocoding_client_dep] = lambda: client

    yield _install
    app.dependency_overrides.pop(get_geocoding_client_dep, None)


def test_reverse_geocode(client, member_headers, use_geocoder) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["latlng"] == "12.97,77.59"
        assert request.url.params["region"] == "in"
        return httpx.Response(
            200,
            json={"status": "OK", "results": [{"formatted_address": "MG Road, Bengaluru"}]},
        )

    use_geocoder(handler)
    response = client.get(
        "/api/v1/locations/reverse",
        headers=member_headers,
        params={"lat": 12.97, "lng": 77.59},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "address": "MG Road, Bengaluru",
        "maps_link": "https://www.google.com/maps/search/?api=1&query=12.97,77.59",
    }


def test_reverse_geocode_no_results(client, member_headers, use_geocoder) -> None:
    use_geocoder(lambda request: httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []}))
    response = client.get(
        "/api/v1/locations/reverse",
        headers=member_headers,
        params={"lat": 0, "lng": 0},
    )
    assert response.json()["address"] is None


def test_autocomplete(client, member_headers, use_geocoder) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["components"] == "country:in"
        return httpx.Response(
            200,
            json={
                "status": "OK",
                "predictions": [{"description": "Connaught Place, New Delhi", "place_id": "abc"}],
            },
        )

    use_geocoder(handler)
    response = client.get("/api/v1/locations/autocomplete", headers=member_headers, params={"q": "Conn"})
    assert response.json() == {
        "suggestions": [{"description": "Connaught Place, New Delhi", "place_id": "abc"}]
    }


def test_places_api_error(client, member_headers, use_geocoder) -> None:
    use_geocoder(lambda request: httpx.Response(200, json={"status": "REQUEST_DENIED"}))
    response = client.get("/api/v1/locations/autocomplete", headers=member_headers, params={"q": "x"})
    assert response.status_code == status.HTTP_502_BAD_GATEWAY


def test_locations_disabled(client, member_headers, use_geocoder) -> None:
    use_geocoder(api_key=None)
    response = client.get("/api/v1/locations/autocomplete", headers=member_headers, params={"q": "x"})
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


def test_locations_require_auth(client) -> None:
    response = client.get("/api/v1/locations/autocomplete", params={"q": "x"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
