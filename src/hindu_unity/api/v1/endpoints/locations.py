"""Location lookup endpoints backed by the places API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from hindu_unity.api.v1.dependencies import CurrentUserDep, GeocodingClientDep
from hindu_unity.schemas.location import (
    AutocompleteResponse,
    PlaceSuggestion,
    ReverseGeocodeResponse,
)
from hindu_unity.services.geocoding import GeocodingDisabledError, GeocodingError, maps_link

router = APIRouter(prefix="/locations", tags=["locations"])


def _translate(err: GeocodingError) -> HTTPException:
    if isinstance(err, GeocodingDisabledError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(err))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Location lookup failed")


@router.get("/reverse", response_model=ReverseGeocodeResponse)
async def reverse_geocode(
    current_user: CurrentUserDep,
    geocoder: GeocodingClientDep,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
) -> ReverseGeocodeResponse:
    """Resolve coordinates picked on a map to a street address."""
    try:
        address = await geocoder.reverse_geocode(lat, lng)
    except GeocodingError as err:
        raise _translate(err) from err
    return ReverseGeocodeResponse(address=address, maps_link=maps_link(address, lat, lng))


@router.get("/autocomplete", response_model=AutocompleteResponse)
async def autocomplete(
    current_user: CurrentUserDep,
    geocoder: GeocodingClientDep,
    q: str = Query(..., min_length=1, max_length=200, description="Partial address"),
) -> AutocompleteResponse:
    try:
        suggestions = await geocoder.autocomplete(q)
    except GeocodingError as err:
        raise _translate(err) from err
    return AutocompleteResponse(
        suggestions=[PlaceSuggestion.model_validate(item) for item in suggestions],
    )
