"""Reward service: points-gated nearby places lookup."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.errors import AuthorizationError, NotFoundError, UpstreamError
from ..core.logging import get_logger
from ..integrations.geo import GeoClient, GeoServiceError, Place
from .score import ScoreService

logger = get_logger(__name__)


class RewardService:
    """
    Сервис награды: поиск мест рядом с адресом.

    Функция заблокирована, пока не набрано REWARD_UNLOCK_POINTS очков.
    Пайплайн: проверка очков → геокодинг адреса → поиск мест → форматирование.
    Повторов и кэширования нет: ошибка внешнего сервиса сразу завершает операцию.
    """

    def __init__(
        self,
        db: AsyncSession,
        geo_client: GeoClient | None,
        unlock_points: int | None = None,
        radius_meters: int | None = None,
        max_results: int | None = None,
    ):
        """Инициализация сервиса."""
        self.db = db
        self.geo_client = geo_client
        self.score_service = ScoreService(db)
        self.unlock_points = (
            unlock_points if unlock_points is not None else settings.REWARD_UNLOCK_POINTS
        )
        self.radius_meters = radius_meters or settings.REWARD_SEARCH_RADIUS_METERS
        self.max_results = max_results or settings.REWARD_MAX_RESULTS

    async def find_nearby(self, address: str) -> list[Place]:
        """
        Найти места рядом с адресом.

        Args:
            address: Адрес в свободной форме

        Returns:
            До max_results мест с именем (пустой список - не ошибка)

        Raises:
            AuthorizationError: Очков меньше порога (внешних вызовов нет)
            NotFoundError: Геокодер не нашёл адрес
            UpstreamError: Внешний сервис недоступен или вернул мусор
        """
        # 1. АВТОРИЗАЦИЯ: хватает ли очков
        total = await self.score_service.get_score()
        if total < self.unlock_points:
            raise AuthorizationError(
                f"Reward finder is locked! You need {self.unlock_points} points "
                f"to unlock this feature. Current points: {total}"
            )

        if self.geo_client is None:
            raise UpstreamError("Geocoding service is not configured")

        # 2. ГЕОКОДИНГ
        try:
            results = await self.geo_client.geocode(address)
        except GeoServiceError as e:
            raise UpstreamError(f"Failed to geocode address ({e})") from e

        if not results:
            raise NotFoundError("Address not found")

        origin = results[0]

        # 3. ПОИСК МЕСТ
        try:
            elements = await self.geo_client.search_places(
                origin.latitude, origin.longitude, self.radius_meters
            )
        except GeoServiceError as e:
            raise UpstreamError(f"Failed to search for ice cream shops ({e})") from e

        # 4. ФОРМАТИРОВАНИЕ: только элементы с именем
        places = [Place.from_element(element) for element in elements if element.name]
        places = places[: self.max_results]

        logger.info(
            "Reward lookup completed",
            extra={"found": len(places), "latitude": origin.latitude, "longitude": origin.longitude},
        )
        return places
