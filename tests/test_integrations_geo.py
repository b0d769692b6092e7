"""
Тесты для geo интеграции (геокодер + поиск мест).

Сеть не используется: запросы уходят в httpx.MockTransport.
"""

from urllib.parse import parse_qs

import httpx
import pytest

from taskquest.integrations.geo import (
    GeoClient,
    GeoServiceError,
    Place,
    PlaceElement,
    build_places_query,
)

# ============================================================================
# QUERY BUILDER
# ============================================================================


def test_build_places_query():
    """Test: Overpass запрос ищет amenity и shop в радиусе."""
    query = build_places_query(52.52, 13.405, 2000)

    assert query.startswith("[out:json][timeout:25];")
    assert 'node["amenity"="ice_cream"](around:2000,52.52,13.405);' in query
    assert 'node["shop"="ice_cream"](around:2000,52.52,13.405);' in query
    assert query.endswith("out geom;")


# ============================================================================
# PLACE FORMATTING
# ============================================================================


def test_place_from_element_full_address():
    """Test: адрес собирается из дома, улицы и города."""
    element = PlaceElement(
        id=1,
        lat=48.8566,
        lon=2.3522,
        tags={
            "name": "Berthillon",
            "addr:housenumber": "29-31",
            "addr:street": "Rue Saint-Louis en l'Île",
            "addr:city": "Paris",
        },
    )

    place = Place.from_element(element)

    assert place.name == "Berthillon"
    assert place.address == "29-31 Rue Saint-Louis en l'Île Paris"
    assert place.coordinates == "48.8566, 2.3522"


def test_place_from_element_partial_and_missing():
    """Test: частичный адрес и отсутствующие координаты."""
    partial = Place.from_element(PlaceElement(id=1, tags={"name": "A", "addr:city": "Rome"}))
    bare = Place.from_element(PlaceElement(id=2, tags={"name": "B"}))

    assert partial.address == "Rome"
    assert partial.coordinates == "Coordinates not available"
    assert bare.address == "Address not available"


def test_place_element_name():
    """Test: имя берётся из тега name."""
    assert PlaceElement(id=1, tags={"name": "X"}).name == "X"
    assert PlaceElement(id=2).name is None


# ============================================================================
# GEOCODE
# ============================================================================


@pytest.mark.asyncio
async def test_geocode_request_and_parse(geo_client, fake_geo):
    """Test: GET с format=json, q, limit=1 и User-Agent."""
    results = await geo_client.geocode("Alexanderplatz, Berlin")

    request = fake_geo.requests[0]
    assert request.method == "GET"
    assert request.url.params["format"] == "json"
    assert request.url.params["q"] == "Alexanderplatz, Berlin"
    assert request.url.params["limit"] == "1"
    assert request.headers["User-Agent"] == geo_client.user_agent

    assert len(results) == 1
    assert results[0].latitude == pytest.approx(52.52)
    assert results[0].longitude == pytest.approx(13.405)
    assert results[0].display_name == "Berlin, Germany"


@pytest.mark.asyncio
async def test_geocode_no_results(geo_client, fake_geo):
    """Test: пустой ответ - пустой список."""
    fake_geo.geocode_results = []

    assert await geo_client.geocode("Nowhere") == []


@pytest.mark.asyncio
async def test_geocode_http_error(geo_client, fake_geo):
    """Test: не-2xx ответ - GeoServiceError."""
    fake_geo.geocode_status = 429

    with pytest.raises(GeoServiceError, match="HTTP 429"):
        await geo_client.geocode("Berlin")


@pytest.mark.asyncio
async def test_geocode_network_error(geo_client, fake_geo):
    """Test: сетевая ошибка - GeoServiceError."""
    fake_geo.geocode_error = httpx.ConnectTimeout("timed out")

    with pytest.raises(GeoServiceError, match="request failed"):
        await geo_client.geocode("Berlin")


@pytest.mark.asyncio
async def test_geocode_bad_payload():
    """Test: не-JSON ответ - GeoServiceError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>maintenance</html>")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = GeoClient(http_client, geocoder_url="https://geocoder.test/search")

        with pytest.raises(GeoServiceError, match="unusable data"):
            await client.geocode("Berlin")


# ============================================================================
# PLACES SEARCH
# ============================================================================


@pytest.mark.asyncio
async def test_search_places_request_and_parse(geo_client, fake_geo):
    """Test: POST form data=<query>, элементы разобраны."""
    elements = await geo_client.search_places(52.52, 13.405, 1500)

    request = fake_geo.requests[0]
    assert request.method == "POST"
    form = parse_qs(request.content.decode())
    assert form["data"] == [build_places_query(52.52, 13.405, 1500)]

    assert [element.id for element in elements] == [1, 2, 3]
    assert elements[0].name == "Gelato Mio"
    assert elements[0].lat == 52.521
    assert elements[2].name is None


@pytest.mark.asyncio
async def test_search_places_http_error(geo_client, fake_geo):
    """Test: не-2xx ответ поиска мест - GeoServiceError."""
    fake_geo.places_status = 504

    with pytest.raises(GeoServiceError, match="HTTP 504"):
        await geo_client.search_places(0.0, 0.0, 100)
