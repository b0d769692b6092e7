"""HTTP client for geocoding (Nominatim) and places search (Overpass).

Both services are OpenStreetMap based:
- Nominatim: address string -> list of {lat, lon, display_name}
- Overpass: query language, returns tagged elements around a point
"""

import logging

import httpx

from taskquest.core.config import settings
from taskquest.integrations.geo.models import GeocodeResult, PlaceElement

logger = logging.getLogger(__name__)

# Points of interest for the reward lookup
PLACE_FILTERS: tuple[tuple[str, str], ...] = (
    ("amenity", "ice_cream"),
    ("shop", "ice_cream"),
)


class GeoServiceError(Exception):
    """External geo service failed or returned unusable data."""


def build_places_query(latitude: float, longitude: float, radius_meters: int) -> str:
    """Build an Overpass QL query for places around a point.

    Args:
        latitude: Center latitude
        longitude: Center longitude
        radius_meters: Search radius

    Returns:
        Overpass QL query text
    """
    selectors = "\n".join(
        f'  node["{key}"="{value}"](around:{radius_meters},{latitude},{longitude});'
        for key, value in PLACE_FILTERS
    )
    return f"[out:json][timeout:25];\n(\n{selectors}\n);\nout geom;"


class GeoClient:
    """Async client for the geocoder and the places search.

    The underlying httpx.AsyncClient is owned by the caller (the FastAPI
    lifespan in production, a MockTransport-backed client in tests).
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        geocoder_url: str | None = None,
        places_url: str | None = None,
        user_agent: str | None = None,
    ):
        """Initialize the client.

        Args:
            http_client: Shared httpx client
            geocoder_url: Nominatim search endpoint (defaults to settings)
            places_url: Overpass interpreter endpoint (defaults to settings)
            user_agent: User-Agent header required by Nominatim
        """
        self.http_client = http_client
        self.geocoder_url = geocoder_url or settings.GEOCODER_URL
        self.places_url = places_url or settings.PLACES_URL
        self.user_agent = user_agent or settings.HTTP_USER_AGENT

    async def geocode(self, address: str) -> list[GeocodeResult]:
        """Resolve an address to coordinates.

        Args:
            address: Free-form address

        Returns:
            Geocoder hits (at most one, empty if the address is unknown)

        Raises:
            GeoServiceError: Non-2xx response, network error or bad payload
        """
        try:
            response = await self.http_client.get(
                self.geocoder_url,
                params={"format": "json", "q": address, "limit": 1},
                headers={"User-Agent": self.user_agent},
            )
        except httpx.RequestError as e:
            logger.warning("Geocoder request failed", extra={"error": str(e)})
            raise GeoServiceError(f"Geocoder request failed: {e}") from e

        if not response.is_success:
            logger.warning("Geocoder returned error", extra={"status": response.status_code})
            raise GeoServiceError(f"Geocoder returned HTTP {response.status_code}")

        try:
            payload = response.json()
            return [
                GeocodeResult(
                    latitude=float(item["lat"]),
                    longitude=float(item["lon"]),
                    display_name=item.get("display_name", ""),
                )
                for item in payload
            ]
        except (ValueError, TypeError, KeyError) as e:
            raise GeoServiceError(f"Geocoder returned unusable data: {e}") from e

    async def search_places(
        self, latitude: float, longitude: float, radius_meters: int
    ) -> list[PlaceElement]:
        """Find places of interest around a point.

        Raises:
            GeoServiceError: Non-2xx response, network error or bad payload
        """
        query = build_places_query(latitude, longitude, radius_meters)

        try:
            response = await self.http_client.post(
                self.places_url,
                data={"data": query},
                headers={"User-Agent": self.user_agent},
            )
        except httpx.RequestError as e:
            logger.warning("Places search request failed", extra={"error": str(e)})
            raise GeoServiceError(f"Places search request failed: {e}") from e

        if not response.is_success:
            logger.warning("Places search returned error", extra={"status": response.status_code})
            raise GeoServiceError(f"Places search returned HTTP {response.status_code}")

        try:
            elements = response.json().get("elements", [])
            return [
                PlaceElement(
                    id=int(element.get("id", 0)),
                    type=element.get("type", "node"),
                    lat=element.get("lat"),
                    lon=element.get("lon"),
                    tags=dict(element.get("tags") or {}),
                )
                for element in elements
            ]
        except (ValueError, TypeError, AttributeError) as e:
            raise GeoServiceError(f"Places search returned unusable data: {e}") from e
