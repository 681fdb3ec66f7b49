"""Иерархия исключений SDK Bitrix24."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type


class Bitrix24Error(Exception):
    """Базовое исключение SDK: сообщение и необязательный код ошибки."""

    retryable = False

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigurationError(Bitrix24Error):
    """Некорректные или отсутствующие настройки подключения."""


class TransportError(Bitrix24Error):
    """Сетевая или HTTP-ошибка: соединение, таймаут, неожиданный статус."""

    retryable = True

    def __init__(
        self,
        message: str,
        *,
        http_status: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.http_status = http_status
        self.cause = cause


class ParseError(Bitrix24Error):
    """Ответ не является корректным JSON или не содержит ключ result."""


class ApiError(Bitrix24Error):
    """Бизнес-ошибка, о которой сообщил Bitrix24 (error / error_description).

    Код и описание сохраняются без изменений, чтобы вызывающий код мог
    различать ошибки так же, как их различает сам портал.
    """

    def __init__(
        self,
        code: Optional[str],
        description: str = "",
        *,
        http_status: Optional[int] = None,
    ) -> None:
        if code and description:
            message = f"{code}: {description}"
        else:
            message = description or code or "Неизвестная ошибка Bitrix24"
        super().__init__(message, code=code)
        self.description = description
        self.http_status = http_status


class InvalidArgumentError(ApiError):
    """Неверное значение аргумента или поля."""


class MethodNotFoundError(ApiError):
    """Метод REST не существует или недоступен на портале."""


class QueryLimitExceededError(ApiError):
    """Превышен лимит интенсивности запросов."""

    retryable = True


class OperationTimeLimitExceededError(ApiError):
    """Исчерпан лимит времени выполнения метода."""

    retryable = True


class AuthForbiddenError(ApiError):
    """Токен просрочен, недействителен или не хватает прав."""


class ItemNotFoundError(ApiError):
    """Запрошенный элемент не найден."""


class PaymentRequiredError(ApiError):
    """Тариф портала не позволяет вызвать метод."""


class WrongAuthTypeError(ApiError):
    """Метод недоступен для текущего типа авторизации (вебхук / OAuth)."""


class MethodConfirmWaitingError(ApiError):
    """Вызов метода ожидает подтверждения администратором портала."""


class UndefinedFieldError(Bitrix24Error, AttributeError):
    """Поле отсутствует в записи ответа."""

    def __init__(self, item_type: str, field: str) -> None:
        super().__init__(f"Поле {field!r} не определено в {item_type}", code=None)
        self.item_type = item_type
        self.field = field


class FieldTypeError(Bitrix24Error, TypeError):
    """Значение поля не приводится к запрошенному типу."""


class ImmutableItemError(Bitrix24Error, AttributeError):
    """Попытка изменить запись, полученную из ответа."""


_ERROR_CLASSES: Dict[str, Type[ApiError]] = {
    "ERROR_ARGUMENT": InvalidArgumentError,
    "INVALID_ARG_VALUE": InvalidArgumentError,
    "INVALID_REQUEST": InvalidArgumentError,
    "ERROR_REQUIRED_PARAMETERS_MISSING": InvalidArgumentError,
    "ERROR_METHOD_NOT_FOUND": MethodNotFoundError,
    "QUERY_LIMIT_EXCEEDED": QueryLimitExceededError,
    "OPERATION_TIME_LIMIT": OperationTimeLimitExceededError,
    "EXPIRED_TOKEN": AuthForbiddenError,
    "INVALID_TOKEN": AuthForbiddenError,
    "INVALID_CREDENTIALS": AuthForbiddenError,
    "NO_AUTH_FOUND": AuthForbiddenError,
    "INSUFFICIENT_SCOPE": AuthForbiddenError,
    "ACCESS_DENIED": AuthForbiddenError,
    "AUTHORIZATION_ERROR": AuthForbiddenError,
    "ERROR_NOT_FOUND": ItemNotFoundError,
    "NOT_FOUND": ItemNotFoundError,
    "PAYMENT_REQUIRED": PaymentRequiredError,
    "WRONG_AUTH_TYPE": WrongAuthTypeError,
    "METHOD_CONFIRM_WAITING": MethodConfirmWaitingError,
}


def error_from_payload(payload: Mapping[str, Any], *, http_status: Optional[int] = None) -> ApiError:
    """Построить типизированную ошибку по полям error / error_description.

    Класс выбирается по коду ошибки; неизвестные коды дают `ApiError`.
    Исключение возвращается, а не выбрасывается: пакетные ответы хранят его
    как значение.
    """

    code = str(payload.get("error", ""))
    description = payload.get("error_description") or ""
    error_cls = _ERROR_CLASSES.get(code.upper(), ApiError)
    return error_cls(code, str(description), http_status=http_status)
