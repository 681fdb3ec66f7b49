"""Результаты пакетных вызовов добавления, обновления и удаления."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .core import BatchItemResponse, BatchResponse, Response
from .exceptions import ApiError, Bitrix24Error
from .response import ResponseData
from .result import KeyPath, SuccessRule, extract_id, truthy_scalar


@dataclass(frozen=True)
class BatchItemOutcome:
    """Итог одной команды пакета, сопоставленный с индексом отправки."""

    index: int
    success: bool
    id: Optional[int] = None
    error: Optional[ApiError] = None
    response_data: Optional[ResponseData] = None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error is not None else None

    @property
    def error_description(self) -> Optional[str]:
        return self.error.description if self.error is not None else None


class ItemBatchResult:
    """Упорядоченная последовательность итогов пакета.

    Итерация ленивая и может повторяться: каждый обход заново строит
    итоги из ответа. Неудачные команды не отбрасываются, поэтому число
    итогов всегда равно числу отправленных команд.
    """

    def __init__(self, batch: BatchResponse, *, success: SuccessRule = truthy_scalar) -> None:
        self._batch = batch
        self._success = success

    @property
    def core_response(self) -> Response:
        return self._batch.response

    @property
    def response_data(self) -> ResponseData:
        return self._batch.response.response_data

    def __iter__(self) -> Iterator[BatchItemOutcome]:
        for item in self._batch:
            yield self._outcome(item)

    def __len__(self) -> int:
        return len(self._batch)

    def iter_indexed(self) -> Iterator[Tuple[int, BatchItemOutcome]]:
        for outcome in self:
            yield outcome.index, outcome

    def _outcome(self, item: BatchItemResponse) -> BatchItemOutcome:
        if item.is_error:
            return BatchItemOutcome(index=item.index, success=False, error=item.error)
        return BatchItemOutcome(
            index=item.index,
            success=self._success(item.response_data.result),
            response_data=item.response_data,
        )

    def successes(self) -> List[BatchItemOutcome]:
        return [outcome for outcome in self if outcome.success]

    def failures(self) -> List[BatchItemOutcome]:
        return [outcome for outcome in self if not outcome.success]

    def is_success(self) -> bool:
        """Все команды пакета выполнены успешно."""

        return all(outcome.success for outcome in self)


class AddedItemBatchResult(ItemBatchResult):
    """Пакет добавлений: успешный итог несёт ID созданной записи."""

    def __init__(self, batch: BatchResponse, *, id_key: Optional[KeyPath] = None) -> None:
        super().__init__(batch)
        self._id_key = id_key

    def _outcome(self, item: BatchItemResponse) -> BatchItemOutcome:
        if item.is_error:
            return BatchItemOutcome(index=item.index, success=False, error=item.error)
        try:
            created_id = extract_id(item.response_data.result, self._id_key)
        except Bitrix24Error:
            created_id = None
        return BatchItemOutcome(
            index=item.index,
            success=created_id is not None and created_id > 0,
            id=created_id,
            response_data=item.response_data,
        )

    def ids(self) -> List[Optional[int]]:
        """ID по порядку отправки; None на месте неудачных команд."""

        return [outcome.id for outcome in self]


class UpdatedItemBatchResult(ItemBatchResult):
    """Пакет обновлений: итог содержит только флаг успеха."""


class DeletedItemBatchResult(ItemBatchResult):
    """Пакет удалений: итог содержит только флаг успеха (result == true)."""
