"""База сервисов, объединяющих методы одной сущности Bitrix24."""

from __future__ import annotations

import logging

from ..core import Core


class AbstractService:
    """Сервис держит ядро и собственный логгер; состояния между вызовами нет."""

    def __init__(self, core: Core) -> None:
        self.core = core
        self.log = logging.getLogger(self.__class__.__name__)
