"""Записи из ответа Bitrix24 со строгим доступом к полям."""

from __future__ import annotations

import datetime as dt
import enum
from types import MappingProxyType
from typing import Any, ClassVar, Iterator, List, Mapping, Tuple

from .exceptions import FieldTypeError, ImmutableItemError, UndefinedFieldError

_TRUE_FLAGS = {"Y", "y", "1", "true", "TRUE", "True"}
_FALSE_FLAGS = {"N", "n", "0", "false", "FALSE", "False", ""}


class JsonKind(enum.Enum):
    """Тип JSON-значения поля."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def json_kind(value: Any) -> JsonKind:
    """Определить JSON-тип значения, полученного из json.loads."""

    if value is None:
        return JsonKind.NULL
    # bool проверяется раньше int: True является экземпляром int.
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    if isinstance(value, Mapping):
        return JsonKind.OBJECT
    raise FieldTypeError(f"Значение типа {type(value).__name__} не является JSON-значением")


class AbstractItem:
    """Запись ответа с доступом только на чтение.

    Любое поле доступно через `get`, `item["FIELD"]` и `item.FIELD`.
    Отсутствующее поле всегда приводит к `UndefinedFieldError`, а не к None:
    так расхождения с API портала видны сразу.

    Атрибут `fields` перечисляет известные поля для документации и проверки
    дрейфа, но не ограничивает доступ к остальным полям записи.

    Доступ через атрибут срабатывает, только если у класса нет одноимённого
    атрибута. Поля с именами методов записи (`get`, `has`, `kind`, `fields`,
    `to_dict`, `missing_fields` и т. п.) читаются через `item["..."]` или `get()`.
    """

    fields: ClassVar[Tuple[str, ...]] = ()

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any]) -> None:
        if not isinstance(data, Mapping):
            raise FieldTypeError(
                f"{type(self).__name__} ожидает JSON-объект, получено {type(data).__name__}"
            )
        object.__setattr__(self, "_data", MappingProxyType(dict(data)))

    # --- Строгий доступ ---
    def get(self, name: str) -> Any:
        try:
            return self._data[name]
        except KeyError:
            raise UndefinedFieldError(type(self).__name__, name) from None

    def kind(self, name: str) -> JsonKind:
        return json_kind(self.get(name))

    def has(self, name: str) -> bool:
        return name in self._data

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise ImmutableItemError(f"{type(self).__name__} доступен только для чтения")

    def __delattr__(self, name: str) -> None:
        raise ImmutableItemError(f"{type(self).__name__} доступен только для чтения")

    # --- Типизированные аксессоры ---
    def get_int(self, name: str) -> int:
        value = self.get(name)
        kind = json_kind(value)
        if kind is JsonKind.NUMBER and float(value).is_integer():
            return int(value)
        if kind is JsonKind.STRING:
            try:
                return int(value.strip())
            except ValueError:
                pass
        raise self._type_error(name, value, "int")

    def get_float(self, name: str) -> float:
        value = self.get(name)
        kind = json_kind(value)
        if kind is JsonKind.NUMBER:
            return float(value)
        if kind is JsonKind.STRING:
            try:
                return float(value.strip())
            except ValueError:
                pass
        raise self._type_error(name, value, "float")

    def get_str(self, name: str) -> str:
        value = self.get(name)
        kind = json_kind(value)
        if kind is JsonKind.STRING:
            return value
        if kind is JsonKind.NUMBER:
            return str(value)
        raise self._type_error(name, value, "str")

    def get_bool(self, name: str) -> bool:
        """Логическое поле: JSON-булево либо флаг Bitrix24 вида Y/N."""

        value = self.get(name)
        kind = json_kind(value)
        if kind is JsonKind.BOOL:
            return value
        if kind is JsonKind.STRING:
            if value in _TRUE_FLAGS:
                return True
            if value in _FALSE_FLAGS:
                return False
        if kind is JsonKind.NUMBER and value in (0, 1):
            return bool(value)
        raise self._type_error(name, value, "bool")

    def get_list(self, name: str) -> List[Any]:
        value = self.get(name)
        if json_kind(value) is JsonKind.ARRAY:
            return list(value)
        raise self._type_error(name, value, "list")

    def get_mapping(self, name: str) -> Mapping[str, Any]:
        value = self.get(name)
        if json_kind(value) is JsonKind.OBJECT:
            return MappingProxyType(dict(value))
        raise self._type_error(name, value, "mapping")

    def get_datetime(self, name: str) -> dt.datetime:
        value = self.get(name)
        if json_kind(value) is JsonKind.STRING:
            try:
                return dt.datetime.fromisoformat(value)
            except ValueError:
                pass
        raise self._type_error(name, value, "datetime")

    def _type_error(self, name: str, value: Any, expected: str) -> FieldTypeError:
        return FieldTypeError(
            f"Поле {name!r} в {type(self).__name__} нельзя привести к {expected}: {value!r}"
        )

    # --- Проверка дрейфа схемы ---
    def missing_fields(self) -> Tuple[str, ...]:
        """Объявленные поля, которых нет в записи."""

        return tuple(name for name in self.fields if name not in self._data)

    def undeclared_fields(self) -> Tuple[str, ...]:
        """Поля записи, которые не объявлены в `fields`."""

        return tuple(name for name in self._data if name not in self.fields)

    # --- Протокол контейнера ---
    def to_dict(self) -> dict:
        return dict(self._data)

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbstractItem):
            return NotImplemented
        return dict(self._data) == dict(other._data)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._data)!r})"

    def __getstate__(self) -> dict:
        return dict(self._data)

    def __setstate__(self, state: Mapping[str, Any]) -> None:
        object.__setattr__(self, "_data", MappingProxyType(dict(state)))


class Item(AbstractItem):
    """Запись без объявленной схемы."""

    __slots__ = ()
