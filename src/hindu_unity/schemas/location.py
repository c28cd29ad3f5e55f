"""Geolocation schemas."""
from __future__ import annotations

from pydantic import BaseModel


class ReverseGeocodeResponse(BaseModel):
    address: str | None = None
    maps_link: str


class PlaceSuggestion(BaseModel):
    description: str
    place_id: str | None = None


class AutocompleteResponse(BaseModel):
    suggestions: list[PlaceSuggestion]
