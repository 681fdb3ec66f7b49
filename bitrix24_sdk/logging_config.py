"""Настройка логирования для приложений, использующих SDK."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

DEFAULT_LOG_FILENAME = "bitrix24_sdk.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    *,
    level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    filename: str = DEFAULT_LOG_FILENAME,
) -> Optional[Path]:
    """Направить логи в консоль и, если задан `log_dir`, в файл.

    Повторный вызов перенастраивает существующие обработчики, а не добавляет
    новые. Возвращает путь к файлу лога либо None.

    Консольный обработчик ищется по точному типу `StreamHandler`:
    `FileHandler` и обработчики pytest тоже наследуют его, и проверка через
    isinstance перенастроила бы их вместо консоли.
    """

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    _ensure_console_handler(root_logger, level=level, formatter=formatter)
    if log_dir is None:
        return None

    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / filename
    _ensure_file_handler(root_logger, log_path=log_path, level=level, formatter=formatter)
    return log_path


def _ensure_console_handler(logger: logging.Logger, *, level: int, formatter: logging.Formatter) -> None:
    for handler in logger.handlers:
        if type(handler) is logging.StreamHandler:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            return

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)


def _ensure_file_handler(
    logger: logging.Logger,
    *,
    log_path: Path,
    level: int,
    formatter: logging.Formatter,
) -> None:
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_path.absolute():
            handler.setLevel(level)
            handler.setFormatter(formatter)
            return

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
