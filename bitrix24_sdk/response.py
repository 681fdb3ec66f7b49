"""Разбор сырого ответа Bitrix24 в ResponseData."""

from __future__ import annotations

import datetime as dt
import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from .exceptions import ParseError, error_from_payload

RawPayload = Union[str, bytes, bytearray, Mapping[str, Any]]


@dataclass(frozen=True)
class Time:
    """Служебные тайминги запроса из блока time.

    Значения переносятся как есть и нужны только для наблюдаемости.
    """

    start: Optional[float] = None
    finish: Optional[float] = None
    duration: Optional[float] = None
    processing: Optional[float] = None
    date_start: Optional[str] = None
    date_finish: Optional[str] = None
    operating: Optional[float] = None
    operating_reset_at: Optional[int] = None
    raw: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "Time":
        if not isinstance(data, Mapping):
            return cls()
        return cls(
            start=data.get("start"),
            finish=data.get("finish"),
            duration=data.get("duration"),
            processing=data.get("processing"),
            date_start=data.get("date_start"),
            date_finish=data.get("date_finish"),
            operating=data.get("operating"),
            operating_reset_at=data.get("operating_reset_at"),
            raw=dict(data),
        )

    @property
    def started_at(self) -> Optional[dt.datetime]:
        if not self.date_start:
            return None
        return dt.datetime.fromisoformat(self.date_start)


@dataclass(frozen=True)
class Pagination:
    """Курсор постраничной выборки.

    `next is None` означает, что страниц больше нет.
    """

    next: Optional[int] = None
    total: Optional[int] = None

    @property
    def has_next_page(self) -> bool:
        return self.next is not None


NO_MORE_PAGES = Pagination()


@dataclass(frozen=True)
class ResponseData:
    """Нормализованный ответ метода: result, pagination и time."""

    result: Any
    pagination: Pagination = NO_MORE_PAGES
    time: Time = field(default_factory=Time)

    @classmethod
    def parse(cls, raw: RawPayload, *, http_status: Optional[int] = None) -> "ResponseData":
        """Разобрать сырой ответ.

        Ответ с ключом error превращается в типизированную `ApiError`.
        Некорректный JSON или отсутствие ключа result дают `ParseError`.
        """

        payload = decode_payload(raw)
        if "error" in payload:
            raise error_from_payload(payload, http_status=http_status)
        if "result" not in payload:
            raise ParseError(f"В ответе нет ключа result: {sorted(payload)}")
        return cls(
            result=payload["result"],
            pagination=Pagination(
                next=_optional_int(payload.get("next"), "next"),
                total=_optional_int(payload.get("total"), "total"),
            ),
            time=Time.from_mapping(payload.get("time")),
        )


def decode_payload(raw: RawPayload) -> Mapping[str, Any]:
    """Декодировать тело ответа в словарь верхнего уровня."""

    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError("Ответ Bitrix24 не в кодировке UTF-8") from exc
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Ожидался JSON, получено: {str(raw)[:200]}") from exc
    if not isinstance(payload, Mapping):
        raise ParseError(f"Ожидался JSON-объект, получено: {type(payload).__name__}")
    return payload


def _optional_int(value: Any, name: str) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Поле {name} должно быть целым числом, получено {value!r}") from exc
