"""Точка входа SDK: ядро и сервисы поверх одного транспорта."""

from __future__ import annotations

from typing import Optional

from .config import BitrixConfig
from .core import Core
from .services import DeliveryExtraService, DeliveryRequestService, NumeratorService, PaysystemService


class Bitrix24:
    """Фабрика сервисов Bitrix24."""

    def __init__(self, core: Core) -> None:
        self.core = core

    @classmethod
    def from_config(cls, config: BitrixConfig) -> "Bitrix24":
        return cls(Core.from_config(config))

    @classmethod
    def from_env(cls, *, config: Optional[BitrixConfig] = None) -> "Bitrix24":
        """Создать клиента по переменным окружения (BITRIX24_WEBHOOK_URL и др.)."""

        return cls.from_config(config or BitrixConfig.from_env())

    # --- Раздел sale ---
    def delivery_extra_service(self) -> DeliveryExtraService:
        return DeliveryExtraService(self.core)

    def delivery_request(self) -> DeliveryRequestService:
        return DeliveryRequestService(self.core)

    def paysystem(self) -> PaysystemService:
        return PaysystemService(self.core)

    # --- Раздел CRM ---
    def documentgenerator_numerator(self) -> NumeratorService:
        return NumeratorService(self.core)
