"""Geocoding and places search integration (OpenStreetMap services)."""

from taskquest.integrations.geo.client import GeoClient, GeoServiceError, build_places_query
from taskquest.integrations.geo.models import GeocodeResult, Place, PlaceElement

__all__ = ["GeoClient", "GeoServiceError", "build_places_query", "GeocodeResult", "Place", "PlaceElement"]
