"""Тесты HTTP-транспорта на requests."""

from __future__ import annotations

import json
from typing import Any, Dict, List

import pytest
import requests

from bitrix24_sdk.config import BitrixConfig
from bitrix24_sdk.exceptions import TransportError
from bitrix24_sdk.transport import (
    REDACTED_VALUE,
    RequestsTransport,
    build_query,
    sanitize_for_logging,
    sanitize_url,
)

WEBHOOK = "https://portal.example.com/rest/1/s3cr3tc0de/"


class FakeResponse:
    """Заглушка ответа requests."""

    def __init__(self, status_code: int, body: Any) -> None:
        self.status_code = status_code
        self.text = body if isinstance(body, str) else json.dumps(body)


class FakeSession:
    """Сессия-заглушка: запоминает запросы и возвращает заданный ответ."""

    def __init__(self, reply: Any) -> None:
        self.reply = reply
        self.requests: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append({"url": url, **kwargs})
        if isinstance(self.reply, BaseException):
            raise self.reply
        return self.reply


def test_send_posts_json_to_method_url() -> None:
    """Метод вызывается POST-запросом с JSON-телом и таймаутом из настроек."""

    session = FakeSession(FakeResponse(200, {"result": True}))
    transport = RequestsTransport(BitrixConfig(base_url=WEBHOOK, timeout=5), session=session)  # type: ignore[arg-type]

    reply = transport.send("crm.deal.update", {"id": 1, "fields": {"TITLE": "x"}})

    assert json.loads(reply.body) == {"result": True}
    assert reply.http_status == 200
    sent = session.requests[0]
    assert sent["url"] == WEBHOOK + "crm.deal.update.json"
    assert sent["json"] == {"id": 1, "fields": {"TITLE": "x"}}
    assert sent["timeout"] == 5
    assert sent["params"] is None


def test_send_adds_oauth_token() -> None:
    """OAuth-токен передаётся параметром auth."""

    session = FakeSession(FakeResponse(200, {"result": True}))
    config = BitrixConfig(base_url="https://portal.example.com/rest", oauth_token="tok")
    transport = RequestsTransport(config, session=session)  # type: ignore[arg-type]

    transport.send("user.current", {})

    assert session.requests[0]["url"] == "https://portal.example.com/rest/user.current.json"
    assert session.requests[0]["params"] == {"auth": "tok"}


def test_network_failure_becomes_transport_error() -> None:
    """Сетевой сбой превращается в TransportError с исходной причиной."""

    failure = requests.ConnectionError("connection refused")
    transport = RequestsTransport(BitrixConfig(base_url=WEBHOOK), session=FakeSession(failure))  # type: ignore[arg-type]

    with pytest.raises(TransportError) as exc_info:
        transport.send("user.current", {})

    assert exc_info.value.cause is failure
    assert exc_info.value.__cause__ is failure
    assert exc_info.value.http_status is None


def test_http_error_without_api_body_is_transport_error() -> None:
    """HTTP-ошибка без тела Bitrix24 считается транспортной."""

    session = FakeSession(FakeResponse(502, "<html>Bad Gateway</html>"))
    transport = RequestsTransport(BitrixConfig(base_url=WEBHOOK), session=session)  # type: ignore[arg-type]

    with pytest.raises(TransportError) as exc_info:
        transport.send("user.current", {})

    assert exc_info.value.http_status == 502
    assert "s3cr3tc0de" not in str(exc_info.value)


def test_http_error_with_api_body_is_returned() -> None:
    """Тело с error возвращается для разбора ядром даже при статусе 4xx."""

    payload = {"error": "expired_token", "error_description": "The access token provided has expired."}
    session = FakeSession(FakeResponse(401, payload))
    transport = RequestsTransport(BitrixConfig(base_url=WEBHOOK), session=session)  # type: ignore[arg-type]

    reply = transport.send("user.current", {})

    assert json.loads(reply.body) == payload
    assert reply.http_status == 401


def test_default_session_mounts_retry_adapter() -> None:
    """Сессия по умолчанию повторяет 429 и 5xx средствами urllib3."""

    transport = RequestsTransport(BitrixConfig(base_url=WEBHOOK, max_retries=4))

    retry = transport.session.get_adapter("https://portal.example.com").max_retries
    assert retry.total == 4
    assert 429 in retry.status_forcelist
    assert 503 in retry.status_forcelist
    assert "POST" in retry.allowed_methods


def test_logs_hide_webhook_secret(caplog: pytest.LogCaptureFixture) -> None:
    """В логах нет секретной части URL вебхука и токенов."""

    session = FakeSession(FakeResponse(200, {"result": True}))
    transport = RequestsTransport(BitrixConfig(base_url=WEBHOOK), session=session)  # type: ignore[arg-type]

    with caplog.at_level("DEBUG"):
        transport.send("crm.deal.get", {"id": 1, "auth_token": "hidden"})

    messages = [record.getMessage() for record in caplog.records]
    assert any("crm.deal.get" in message for message in messages)
    assert all("s3cr3tc0de" not in message for message in messages)
    assert all("hidden" not in message for message in messages)


def test_build_query_flattens_nested_parameters() -> None:
    """Вложенные параметры раскрываются в формат http_build_query."""

    query = build_query(
        {
            "filter": {">ID": 5, "ACTIVE": True},
            "select": ["ID", "NAME"],
            "skip": None,
        }
    )

    assert query == (
        "filter%5B%3EID%5D=5&filter%5BACTIVE%5D=1&select%5B0%5D=ID&select%5B1%5D=NAME"
    )


def test_sanitize_helpers() -> None:
    """Санитайзеры скрывают секреты и ограничивают длину строк."""

    assert sanitize_url(WEBHOOK + "crm.deal.get.json") == "portal.example.com/rest/.../crm.deal.get.json"
    cleaned = sanitize_for_logging({"password": "x", "nested": {"text": "y" * 500}})
    assert cleaned["password"] == REDACTED_VALUE
    assert cleaned["nested"]["text"].endswith("…")
    looped: Dict[str, Any] = {}
    looped["self"] = looped
    assert sanitize_for_logging(looped)["self"] == "<recursion>"
