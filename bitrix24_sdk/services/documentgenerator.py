"""Нумераторы генератора документов CRM (crm.documentgenerator.numerator.*)."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..batch import AddedItemBatchResult, DeletedItemBatchResult, UpdatedItemBatchResult
from ..item import AbstractItem
from ..result import AddedItemResult, DeletedItemResult, Result, truthy_mapping_key
from .base import AbstractService

_ID_KEY = ("numerator", "id")
numerator_present = truthy_mapping_key("numerator")


class NumeratorItem(AbstractItem):
    """Нумератор: шаблон номера и настройки."""

    fields = ("id", "name", "template", "settings")
    __slots__ = ()


class NumeratorService(AbstractService):
    """Методы нумераторов.

    Ответы этих методов вложены в ключ numerator (одна запись) или
    numerators (список), поэтому ID и записи извлекаются по ключу.
    """

    def add(self, fields: Mapping[str, Any]) -> AddedItemResult:
        response = self.core.call("crm.documentgenerator.numerator.add", {"fields": dict(fields)})
        return AddedItemResult(response, id_key=_ID_KEY)

    def get(self, numerator_id: int) -> NumeratorItem:
        response = self.core.call("crm.documentgenerator.numerator.get", {"id": int(numerator_id)})
        return Result(response, success=numerator_present).item(NumeratorItem, key="numerator")

    def list(self, *, start: Optional[int] = None) -> Result:
        params = {"start": start} if start is not None else {}
        return Result(self.core.call("crm.documentgenerator.numerator.list", params), success=truthy_mapping_key("numerators"))

    def iter_all(self) -> Iterator[NumeratorItem]:
        """Обойти нумераторы на всех страницах."""

        for response in self.core.call_all("crm.documentgenerator.numerator.list"):
            yield from Result(response).items(NumeratorItem, key="numerators")

    def update(self, numerator_id: int, fields: Mapping[str, Any]) -> Result:
        """Обновить нумератор; успех, если в ответе есть обновлённая запись."""

        params = {"id": int(numerator_id), "fields": dict(fields)}
        return Result(self.core.call("crm.documentgenerator.numerator.update", params), success=numerator_present)

    def delete(self, numerator_id: int) -> DeletedItemResult:
        response = self.core.call("crm.documentgenerator.numerator.delete", {"id": int(numerator_id)})
        return DeletedItemResult(response)

    # --- Пакетные операции ---
    def add_batch(self, items: Iterable[Mapping[str, Any]]) -> AddedItemBatchResult:
        commands = [("crm.documentgenerator.numerator.add", {"fields": dict(fields)}) for fields in items]
        return AddedItemBatchResult(self.core.call_batch(commands), id_key=_ID_KEY)

    def update_batch(self, items: Iterable[Tuple[int, Mapping[str, Any]]]) -> UpdatedItemBatchResult:
        commands = [
            ("crm.documentgenerator.numerator.update", {"id": int(numerator_id), "fields": dict(fields)})
            for numerator_id, fields in items
        ]
        return UpdatedItemBatchResult(self.core.call_batch(commands), success=numerator_present)

    def delete_batch(self, numerator_ids: Iterable[int]) -> DeletedItemBatchResult:
        commands: List[Tuple[str, Mapping[str, Any]]] = [
            ("crm.documentgenerator.numerator.delete", {"id": int(numerator_id)}) for numerator_id in numerator_ids
        ]
        return DeletedItemBatchResult(self.core.call_batch(commands))
