"""Ядро SDK: вызов методов через транспорт и разбор ответов."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .config import BitrixConfig
from .exceptions import ApiError, error_from_payload
from .response import Pagination, ResponseData, Time, decode_payload
from .transport import RawReply, RequestsTransport, Transport, build_query

logger = logging.getLogger(__name__)

MAX_BATCH_COMMANDS = 50
NOT_EXECUTED_DESCRIPTION = "Команда не выполнена: пакет остановлен до неё"

Command = Tuple[str, Optional[Mapping[str, Any]]]


@dataclass(frozen=True)
class Response:
    """Ответ одного вызова: метод, параметры и единственный ResponseData."""

    api_method: str
    parameters: Mapping[str, Any]
    response_data: ResponseData
    raw: Mapping[str, Any] = field(repr=False, default_factory=dict)


@dataclass(frozen=True)
class BatchItemResponse:
    """Результат одной команды пакета.

    Для успешной команды заполнен `response_data`, для неудачной `error`.
    """

    index: int
    alias: str
    api_method: str
    response_data: Optional[ResponseData] = None
    error: Optional[ApiError] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class BatchResponse:
    """Ответ метода batch с сохранённым порядком отправленных команд."""

    response: Response
    aliases: Tuple[str, ...]
    methods: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.aliases)

    def __iter__(self) -> Iterator[BatchItemResponse]:
        body = self.response.response_data.result
        if not isinstance(body, Mapping):
            body = {}
        results = _by_alias(body.get("result"), self.aliases)
        errors = _by_alias(body.get("result_error"), self.aliases)
        totals = _by_alias(body.get("result_total"), self.aliases)
        nexts = _by_alias(body.get("result_next"), self.aliases)
        times = _by_alias(body.get("result_time"), self.aliases)

        for index, (alias, method) in enumerate(zip(self.aliases, self.methods)):
            if alias in errors:
                error = _sub_error(errors[alias])
                yield BatchItemResponse(index, alias, method, error=error)
            elif alias in results:
                data = ResponseData(
                    result=results[alias],
                    pagination=Pagination(next=_as_int(nexts.get(alias)), total=_as_int(totals.get(alias))),
                    time=Time.from_mapping(times.get(alias)),
                )
                yield BatchItemResponse(index, alias, method, response_data=data)
            else:
                error = ApiError(None, NOT_EXECUTED_DESCRIPTION)
                yield BatchItemResponse(index, alias, method, error=error)


def _by_alias(section: Any, aliases: Sequence[str]) -> Dict[str, Any]:
    """Привести секцию пакетного ответа к словарю alias -> значение.

    Пустые массивы PHP приходят как JSON-списки, а последовательные ключи
    тоже могут сериализоваться списком.
    """

    if isinstance(section, Mapping):
        return {str(key): value for key, value in section.items()}
    if isinstance(section, list):
        return {aliases[index]: value for index, value in enumerate(section) if index < len(aliases)}
    return {}


def _sub_error(value: Any) -> ApiError:
    if isinstance(value, Mapping):
        return error_from_payload(value)
    return ApiError(str(value))


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class Core:
    """Вызывает методы REST через транспорт и возвращает типизированные ответы."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    @classmethod
    def from_config(cls, config: BitrixConfig) -> "Core":
        return cls(RequestsTransport(config))

    def call(self, api_method: str, parameters: Optional[Mapping[str, Any]] = None) -> Response:
        """Вызвать метод и разобрать ответ.

        `TransportError` от транспорта пробрасывается без обёртки; ответ с
        ключом error превращается в `ApiError` нужного подкласса.
        """

        params = dict(parameters or {})
        logger.debug("Вызов метода %s", api_method)
        raw = self.transport.send(api_method, params)
        http_status = None
        if isinstance(raw, RawReply):
            raw, http_status = raw.body, raw.http_status
        payload = decode_payload(raw)
        response_data = ResponseData.parse(payload, http_status=http_status)
        if response_data.time.duration is not None:
            logger.debug("Метод %s выполнен за %.3f с", api_method, response_data.time.duration)
        return Response(api_method=api_method, parameters=params, response_data=response_data, raw=payload)

    def call_batch(self, commands: Sequence[Command], *, halt: bool = False) -> BatchResponse:
        """Выполнить пакет команд одним вызовом batch.

        Команды получают псевдонимы cmd_0..cmd_N по порядку отправки, по ним
        результаты сопоставляются с исходными командами.
        """

        if not commands:
            raise ValueError("Пакет не может быть пустым")
        if len(commands) > MAX_BATCH_COMMANDS:
            raise ValueError(f"Batch поддерживает не более {MAX_BATCH_COMMANDS} команд")

        aliases: List[str] = []
        methods: List[str] = []
        cmd: Dict[str, str] = {}
        for index, (api_method, parameters) in enumerate(commands):
            alias = f"cmd_{index}"
            query = build_query(parameters or {})
            cmd[alias] = f"{api_method}?{query}" if query else api_method
            aliases.append(alias)
            methods.append(api_method)

        logger.info("Пакет из %d команд", len(cmd))
        response = self.call("batch", {"halt": 1 if halt else 0, "cmd": cmd})
        batch = BatchResponse(response=response, aliases=tuple(aliases), methods=tuple(methods))
        for item in batch:
            if item.is_error:
                logger.warning("Команда %s (%s) завершилась ошибкой: %s", item.alias, item.api_method, item.error)
        return batch

    def call_all(self, api_method: str, parameters: Optional[Mapping[str, Any]] = None) -> Iterator[Response]:
        """Последовательно обойти все страницы списочного метода."""

        params = dict(parameters or {})
        while True:
            response = self.call(api_method, params)
            yield response
            pagination = response.response_data.pagination
            if not pagination.has_next_page:
                return
            params = {**params, "start": pagination.next}
