"""Data structures returned by the geocoding and places services."""

from dataclasses import dataclass, field

ADDRESS_FALLBACK = "Address not available"
COORDINATES_FALLBACK = "Coordinates not available"


@dataclass
class GeocodeResult:
    """One geocoder hit (Nominatim /search)."""

    latitude: float
    longitude: float
    display_name: str = ""


@dataclass
class PlaceElement:
    """Raw element from the places search (Overpass node)."""

    id: int
    type: str = "node"
    lat: float | None = None
    lon: float | None = None
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str | None:
        return self.tags.get("name")


@dataclass
class Place:
    """Place ready for display."""

    name: str
    address: str
    coordinates: str

    @classmethod
    def from_element(cls, element: PlaceElement) -> "Place":
        """Build a display record from a tagged element.

        Address is assembled from house number, street and city fragments,
        whatever is present.
        """
        fragments = [
            element.tags.get("addr:housenumber"),
            element.tags.get("addr:street"),
            element.tags.get("addr:city"),
        ]
        address = " ".join(part for part in fragments if part) or ADDRESS_FALLBACK

        if element.lat is not None and element.lon is not None:
            coordinates = f"{element.lat}, {element.lon}"
        else:
            coordinates = COORDINATES_FALLBACK

        return cls(name=element.name or "Unknown", address=address, coordinates=coordinates)
