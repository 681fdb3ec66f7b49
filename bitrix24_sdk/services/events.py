"""Полезная нагрузка входящих событий Bitrix24."""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping

from ..exceptions import ParseError
from ..item import AbstractItem

_DATA_KEY = re.compile(r"^data\[([^\]]+)\]$")


class OnCalendarSectionAddPayload(AbstractItem):
    """Событие ONCALENDARSECTIONADD: создан раздел календаря."""

    fields = ("id",)
    __slots__ = ()

    @classmethod
    def from_event_data(cls, form: Mapping[str, Any]) -> "OnCalendarSectionAddPayload":
        """Построить запись из тела обработчика события.

        Принимает как уже разобранную структуру {"data": {...}}, так и
        плоскую форму вида {"data[id]": "5"}.
        """

        return cls(event_data(form))


def event_data(form: Mapping[str, Any]) -> Dict[str, Any]:
    """Достать блок data из тела события."""

    nested = form.get("data")
    if isinstance(nested, Mapping):
        return dict(nested)
    flat: Dict[str, Any] = {}
    for key, value in form.items():
        match = _DATA_KEY.match(str(key))
        if match:
            flat[match.group(1)] = value
    if not flat:
        raise ParseError("В теле события нет блока data")
    return flat
