"""
Pytest fixtures для тестов.

Предоставляет:
- test_db: изолированная SQLite in-memory БД для каждого теста
- fake_geo / geo_client: поддельные геокодер и поиск мест (httpx.MockTransport)
- tool_ctx: контекст вызова инструмента поверх test_db
- test_client: HTTP клиент для тестирования API endpoints (с X-API-Key)
"""

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from taskquest.api.dependencies import get_db, get_geo_client
from taskquest.core.config import settings
from taskquest.core.database import enable_sqlite_foreign_keys
from taskquest.integrations.geo import GeoClient
from taskquest.main import app
from taskquest.models import Base
from taskquest.tools import ToolContext

# Test database URL (SQLite in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

GEOCODER_URL = "https://geocoder.test/search"
PLACES_URL = "https://places.test/api/interpreter"


@pytest_asyncio.fixture
async def test_engine():
    """
    Создаёт async engine для тестовой БД (SQLite in-memory).

    StaticPool - одно соединение на всю БД (иначе in-memory данные теряются).
    PRAGMA foreign_keys=ON - чтобы работал ON DELETE CASCADE.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine):
    """
    Предоставляет async session для работы с тестовой БД.

    Каждый тест получает чистую БД.
    """
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


# ============================================================================
# FAKE GEO SERVICES
# ============================================================================


class FakeGeoServices:
    """
    Поддельные геокодер и поиск мест.

    Тест меняет атрибуты перед вызовом:
        fake_geo.geocode_results = []          # адрес не найден
        fake_geo.places_status = 500           # поиск мест упал
        fake_geo.geocode_error = httpx.ConnectError("down")
    """

    def __init__(self):
        self.geocode_results = [
            {"lat": "52.5200", "lon": "13.4050", "display_name": "Berlin, Germany"}
        ]
        self.elements = [
            {
                "type": "node",
                "id": 1,
                "lat": 52.521,
                "lon": 13.406,
                "tags": {
                    "amenity": "ice_cream",
                    "name": "Gelato Mio",
                    "addr:housenumber": "12",
                    "addr:street": "Torstraße",
                    "addr:city": "Berlin",
                },
            },
            {
                "type": "node",
                "id": 2,
                "lat": 52.519,
                "lon": 13.401,
                "tags": {"shop": "ice_cream", "name": "Eis Cafe"},
            },
            {
                "type": "node",
                "id": 3,
                "lat": 52.518,
                "lon": 13.400,
                "tags": {"amenity": "ice_cream"},
            },
        ]
        self.geocode_status = 200
        self.places_status = 200
        self.geocode_error: Exception | None = None
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.host == "geocoder.test":
            if self.geocode_error is not None:
                raise self.geocode_error
            return httpx.Response(self.geocode_status, json=self.geocode_results)

        if request.url.host == "places.test":
            return httpx.Response(self.places_status, json={"elements": self.elements})

        return httpx.Response(404)

    def calls_to(self, host: str) -> int:
        return sum(1 for request in self.requests if request.url.host == host)


@pytest.fixture
def fake_geo():
    return FakeGeoServices()


@pytest_asyncio.fixture
async def geo_client(fake_geo):
    """GeoClient, который ходит в FakeGeoServices вместо сети."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_geo.handler)) as http_client:
        yield GeoClient(http_client, geocoder_url=GEOCODER_URL, places_url=PLACES_URL)


@pytest.fixture
def tool_ctx(test_db, geo_client):
    """Контекст вызова инструмента поверх тестовой сессии."""
    return ToolContext(db=test_db, geo_client=geo_client)


# ============================================================================
# HTTP CLIENT
# ============================================================================


@pytest_asyncio.fixture
async def test_client(test_engine, geo_client):
    """
    Предоставляет HTTP клиент для тестирования API endpoints.

    Использует тестовую БД и поддельные geo-сервисы.
    Заголовок X-API-Key уже проставлен.
    """
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def override_get_geo_client():
        return geo_client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_geo_client] = override_get_geo_client

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-API-Key": settings.API_KEY},
    ) as client:
        yield client

    app.dependency_overrides.clear()


# Pytest configuration
@pytest.fixture(scope="session")
def anyio_backend():
    """Используем asyncio для всех async тестов."""
    return "asyncio"
