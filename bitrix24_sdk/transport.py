"""HTTP-транспорт для вызова REST-методов Bitrix24."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Set, Tuple, Union
from urllib.parse import quote, urlencode, urlsplit

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import BitrixConfig
from .exceptions import TransportError

logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 500, 502, 503, 504)
SENSITIVE_PARAM_KEYS = ("token", "secret", "password", "auth", "key")
REDACTED_VALUE = "***redacted***"
MAX_STRING_LENGTH = 256


@dataclass(frozen=True)
class RawReply:
    """Сырое тело ответа вместе с HTTP-статусом, если он известен."""

    body: Union[str, bytes, Mapping[str, Any]]
    http_status: Optional[int] = None


SendResult = Union[str, bytes, Mapping[str, Any], RawReply]


class Transport(Protocol):
    """Аутентифицированный транспорт: отправляет вызов и возвращает сырое тело ответа."""

    def send(self, api_method: str, parameters: Mapping[str, Any]) -> SendResult:
        ...


class RequestsTransport:
    """Транспорт на requests с ретраями urllib3 для 429 и 5xx.

    Ошибки сети и HTTP без тела Bitrix24 поднимаются как `TransportError`.
    Ответы с телом {"error": ...} возвращаются как есть независимо от
    статуса: их разбирает ядро, а статус попадает в `ApiError.http_status`.
    """

    def __init__(self, config: BitrixConfig, *, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.session = session or self._build_session()

    def send(self, api_method: str, parameters: Mapping[str, Any]) -> RawReply:
        url = f"{self.config.base_url}{api_method.lstrip('/')}.json"
        query: Dict[str, Any] = {}
        if self.config.oauth_token:
            query["auth"] = self.config.oauth_token
        target = sanitize_url(url)
        logger.info("Вызов %s", target)
        logger.debug("Параметры %s: %s", target, sanitize_for_logging(dict(parameters)))

        try:
            response = self.session.post(
                url,
                params=query or None,
                json=dict(parameters),
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise TransportError(f"Сетевая ошибка при вызове {target}: {exc}", http_status=status, cause=exc) from exc

        text = response.text
        logger.debug("Ответ %s (%s): %s", target, response.status_code, text[:MAX_STRING_LENGTH])
        if response.status_code >= 400 and not _is_api_error_body(text):
            raise TransportError(
                f"Bitrix24 вернул статус {response.status_code} для {target}",
                http_status=response.status_code,
            )
        return RawReply(body=text, http_status=response.status_code)

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        retry = Retry(
            total=self.config.max_retries,
            connect=self.config.max_retries,
            read=self.config.max_retries,
            redirect=0,
            backoff_factor=self.config.retry_backoff_factor,
            status_forcelist=RETRY_STATUSES,
            allowed_methods=frozenset({"POST"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session


def _is_api_error_body(text: str) -> bool:
    try:
        payload = json.loads(text)
    except ValueError:
        return False
    return isinstance(payload, dict) and "error" in payload


def build_query(parameters: Mapping[str, Any]) -> str:
    """Закодировать параметры в query-строку в формате http_build_query.

    Вложенные словари и списки раскрываются в ключи вида
    `fields[NAME]` и `select[0]`; значения None пропускаются.
    """

    pairs: List[Tuple[str, str]] = []
    for key, value in parameters.items():
        _flatten(str(key), value, pairs)
    return urlencode(pairs, quote_via=quote, safe="")


def _flatten(prefix: str, value: Any, pairs: List[Tuple[str, str]]) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, nested in value.items():
            _flatten(f"{prefix}[{key}]", nested, pairs)
    elif isinstance(value, (list, tuple)):
        for index, nested in enumerate(value):
            _flatten(f"{prefix}[{index}]", nested, pairs)
    elif isinstance(value, bool):
        pairs.append((prefix, "1" if value else "0"))
    else:
        pairs.append((prefix, str(value)))


def sanitize_url(url: str) -> str:
    """Скрыть секретные сегменты URL вебхука."""

    parsed = urlsplit(url)
    path = parsed.path
    if "/rest/" in path:
        tail = path.split("/rest/", 1)[1]
        parts = [part for part in tail.split("/") if part]
        method = parts[-1] if parts else "unknown"
        return f"{parsed.netloc}/rest/.../{method}"
    return f"{parsed.netloc}{parsed.path}"


def sanitize_for_logging(payload: Any, *, _depth: int = 0, _visited: Optional[Set[int]] = None) -> Any:
    """Удалить чувствительные данные и ограничить длину строк для логов."""

    max_depth = 5
    if _depth > max_depth:
        return "<truncated>"

    if _visited is None:
        _visited = set()

    if isinstance(payload, (dict, list, tuple)):
        if id(payload) in _visited:
            return "<recursion>"
        _visited.add(id(payload))

    if isinstance(payload, dict):
        sanitized: Dict[str, Any] = {}
        for key, value in payload.items():
            key_str = str(key)
            if any(token in key_str.lower() for token in SENSITIVE_PARAM_KEYS):
                sanitized[key_str] = REDACTED_VALUE
            else:
                sanitized[key_str] = sanitize_for_logging(value, _depth=_depth + 1, _visited=_visited)
        return sanitized

    if isinstance(payload, (list, tuple)):
        return [sanitize_for_logging(item, _depth=_depth + 1, _visited=_visited) for item in payload]

    if isinstance(payload, bytes):
        return f"<bytes:{len(payload)}>"

    if isinstance(payload, str) and len(payload) > MAX_STRING_LENGTH:
        return f"{payload[:MAX_STRING_LENGTH]}…"

    return payload
