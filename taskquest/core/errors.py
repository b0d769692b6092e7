"""
Domain errors raised by the service layer.

Сервисы выбрасывают эти исключения при нарушении бизнес-правил.
Реестр инструментов (tools.registry) перехватывает их на границе операции
и превращает в конверт с is_error=True, поэтому наружу они не уходят.
"""


class DomainError(Exception):
    """
    Базовый класс для всех ошибок бизнес-логики.

    Атрибуты:
        kind: Короткое имя вида ошибки ("validation", "not_found", ...)
        code: Машиночитаемый код (VALIDATION_ERROR, NOT_FOUND, ...)
        message: Человекочитаемое сообщение
    """

    kind = "domain"
    code = "DOMAIN_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Некорректный ввод: дата, цвет, limit вне диапазона."""

    kind = "validation"
    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Задача, тег или адрес не найдены."""

    kind = "not_found"
    code = "NOT_FOUND"


class ConflictError(DomainError):
    """Тег с таким именем уже существует."""

    kind = "conflict"
    code = "ALREADY_EXISTS"


class AuthorizationError(DomainError):
    """Недостаточно очков для заблокированной функции."""

    kind = "authorization"
    code = "LOCKED"


class UpstreamError(DomainError):
    """Внешний сервис вернул ошибку или непригодные данные."""

    kind = "upstream"
    code = "UPSTREAM_ERROR"
