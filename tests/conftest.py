"""Общие фикстуры тестов: транспорт-заглушка и сборка ответов."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Tuple

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from bitrix24_sdk.core import Core, Response  # noqa: E402
from bitrix24_sdk.response import ResponseData  # noqa: E402


class FakeTransport:
    """Транспорт-заглушка: отдаёт заранее заданные ответы и запоминает вызовы."""

    def __init__(self, replies: List[Any]) -> None:
        self.replies = list(replies)
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def send(self, api_method: str, parameters: Mapping[str, Any]) -> Any:
        self.calls.append((api_method, dict(parameters)))
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, Mapping):
            return json.dumps(reply)
        return reply


@pytest.fixture
def make_core() -> Callable[..., Tuple[Core, FakeTransport]]:
    """Фабрика ядра с транспортом-заглушкой."""

    def factory(*replies: Any) -> Tuple[Core, FakeTransport]:
        transport = FakeTransport(list(replies))
        return Core(transport), transport

    return factory


@pytest.fixture
def make_response() -> Callable[..., Response]:
    """Собрать ответ ядра из словаря, как будто он пришёл от портала."""

    def factory(payload: Mapping[str, Any], api_method: str = "test.method") -> Response:
        return Response(
            api_method=api_method,
            parameters={},
            response_data=ResponseData.parse(payload),
            raw=payload,
        )

    return factory


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Убрать переменные SDK из окружения, чтобы тесты не зависели от машины."""

    for key in ("BITRIX24_WEBHOOK_URL", "BITRIX24_OAUTH_TOKEN", "BITRIX24_TIMEOUT", "BITRIX24_MAX_RETRIES"):
        monkeypatch.delenv(key, raising=False)
