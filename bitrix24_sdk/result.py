"""Типизированные результаты вызовов REST-методов.

Правило успешности у методов Bitrix24 не единое: один метод возвращает
true, другой список с флагом в первом элементе, третий ID созданной записи.
Поэтому каждый результат явно получает своё правило, а общего «умного»
правила нет.
"""

from __future__ import annotations

import abc
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar, Union

from .core import Response
from .exceptions import FieldTypeError, ParseError
from .item import AbstractItem, Item
from .response import Pagination, ResponseData

SuccessRule = Callable[[Any], bool]
ItemT = TypeVar("ItemT", bound=AbstractItem)
KeyPath = Union[str, Sequence[str]]


# --- Правила успешности ---
def truthy_scalar(result: Any) -> bool:
    """Успех, если result истинен: `true`, ненулевой ID, непустая строка."""

    return bool(result)


def first_element_truthy(result: Any) -> bool:
    """Успех, если истинен первый элемент result (`[true]`).

    Скалярный result считается списком из одного элемента: методы оплаты
    отвечают и `[true]`, и просто `true`.
    """

    if isinstance(result, Mapping):
        result = list(result.values())
    elif not isinstance(result, (list, tuple)):
        result = [result]
    return bool(result) and bool(result[0])


def non_empty_list(result: Any) -> bool:
    """Успех, если result является непустым списком."""

    return isinstance(result, (list, tuple)) and len(result) > 0


def truthy_mapping_key(key: str) -> SuccessRule:
    """Успех, если в объекте result истинно значение по ключу `key`."""

    def rule(result: Any) -> bool:
        return isinstance(result, Mapping) and bool(result.get(key))

    rule.__name__ = f"truthy_mapping_key({key!r})"
    return rule


class AbstractResult(abc.ABC):
    """База всех результатов: владеет ответом ядра и его ResponseData."""

    def __init__(self, core_response: Response) -> None:
        self._core_response = core_response

    @property
    def core_response(self) -> Response:
        return self._core_response

    @property
    def response_data(self) -> ResponseData:
        return self._core_response.response_data

    @property
    def pagination(self) -> Pagination:
        return self.response_data.pagination

    @property
    def total(self) -> Optional[int]:
        return self.response_data.pagination.total

    @abc.abstractmethod
    def is_success(self) -> bool:
        """Признак успешного выполнения по правилу конкретного метода."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(api_method={self._core_response.api_method!r})"


class Result(AbstractResult):
    """Результат, настроенный правилом успешности вместо наследования."""

    def __init__(self, core_response: Response, *, success: SuccessRule = truthy_scalar) -> None:
        super().__init__(core_response)
        self._success = success

    def is_success(self) -> bool:
        return self._success(self.response_data.result)

    def item(self, item_type: Type[ItemT] = Item, *, key: Optional[KeyPath] = None) -> ItemT:  # type: ignore[assignment]
        """Обернуть объект из result (или по ключу внутри него) в запись."""

        record = _dig(self.response_data.result, key)
        if not isinstance(record, Mapping):
            raise ParseError(f"Ожидался объект, получено {type(record).__name__}")
        return item_type(record)

    def items(self, item_type: Type[ItemT] = Item, *, key: Optional[KeyPath] = None) -> List[ItemT]:  # type: ignore[assignment]
        """Обернуть список объектов из result (или по ключу внутри него)."""

        records = _dig(self.response_data.result, key)
        if isinstance(records, Mapping):
            records = list(records.values())
        if not isinstance(records, (list, tuple)):
            raise ParseError(f"Ожидался список, получено {type(records).__name__}")
        return [item_type(record) for record in records]


class AddedItemResult(AbstractResult):
    """Результат метода *.add: извлекает идентификатор созданной записи.

    По умолчанию result может быть числом (`42`), строкой (`"42"`),
    списком с первым элементом-ID или объектом с ключом `ID`/`id`.
    Для вложенных ответов задаётся `id_key`, например `("numerator", "id")`.
    """

    def __init__(self, core_response: Response, *, id_key: Optional[KeyPath] = None) -> None:
        super().__init__(core_response)
        self._id_key = id_key

    @property
    def id(self) -> int:
        return extract_id(self.response_data.result, self._id_key)

    def is_success(self) -> bool:
        try:
            return self.id > 0
        except (ParseError, FieldTypeError):
            return False


class UpdatedItemResult(AbstractResult):
    """Результат метода *.update: result равен true."""

    def is_success(self) -> bool:
        return truthy_scalar(self.response_data.result)


class DeletedItemResult(AbstractResult):
    """Результат метода *.delete: result равен true."""

    def is_success(self) -> bool:
        return truthy_scalar(self.response_data.result)


def extract_id(result: Any, id_key: Optional[KeyPath] = None) -> int:
    """Извлечь целочисленный ID из результата метода добавления."""

    value = _dig(result, id_key)
    if isinstance(value, (list, tuple)):
        if not value:
            raise ParseError("Пустой список вместо идентификатора")
        value = value[0]
    if isinstance(value, Mapping):
        for candidate in ("ID", "id"):
            if candidate in value:
                value = value[candidate]
                break
        else:
            raise ParseError(f"В объекте нет идентификатора: {sorted(value)}")
    if isinstance(value, bool):
        raise FieldTypeError(f"Идентификатор не может быть логическим значением: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise FieldTypeError(f"Идентификатор не является целым числом: {value!r}") from exc


def _dig(value: Any, key: Optional[KeyPath]) -> Any:
    if key is None:
        return value
    path: Iterable[str] = (key,) if isinstance(key, str) else key
    for part in path:
        if not isinstance(value, Mapping) or part not in value:
            raise ParseError(f"В result нет ключа {part!r}")
        value = value[part]
    return value
