"""Настройки доступа к Bitrix24."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

DEFAULT_DOTENV_PATH = Path.cwd() / ".env"


@dataclass(frozen=True)
class BitrixConfig:
    """Конфигурация подключения к REST API портала.

    Attributes:
        base_url: URL вебхука (`https://<portal>/rest/<user>/<code>/`)
            или REST-точка портала для OAuth (`https://<portal>/rest/`).
        oauth_token: Токен OAuth; передаётся в query как auth=<token>.
        timeout: Таймаут HTTP-запроса в секундах.
        max_retries: Число повторов транспорта для 429 и 5xx.
        retry_backoff_factor: Множитель экспоненциальной паузы между повторами.
    """

    base_url: str
    oauth_token: Optional[str] = None
    timeout: float = 30.0
    max_retries: int = 3
    retry_backoff_factor: float = 0.5

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ConfigurationError("Не задан URL Bitrix24")
        if not self.base_url.endswith("/"):
            object.__setattr__(self, "base_url", self.base_url + "/")

    @classmethod
    def from_env(cls) -> "BitrixConfig":
        """Создать конфигурацию из переменных окружения и файла .env."""

        load_dotenv()
        if DEFAULT_DOTENV_PATH.exists():
            load_dotenv(DEFAULT_DOTENV_PATH)

        base_url = os.getenv("BITRIX24_WEBHOOK_URL")
        if not base_url:
            raise ConfigurationError(
                "Не задана переменная окружения BITRIX24_WEBHOOK_URL. "
                "Укажите её в файле окружения или переменных системы."
            )
        return cls(
            base_url=base_url,
            oauth_token=os.getenv("BITRIX24_OAUTH_TOKEN") or None,
            timeout=_env_number("BITRIX24_TIMEOUT", 30.0, float),
            max_retries=_env_number("BITRIX24_MAX_RETRIES", 3, int),
        )


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"Переменная {name} должна быть числом, получено {raw!r}") from exc
