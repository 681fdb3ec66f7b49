"""Сервисы отдельных разделов REST API."""

from .base import AbstractService
from .documentgenerator import NumeratorItem, NumeratorService
from .events import OnCalendarSectionAddPayload
from .paysystem import PaymentResult, PaysystemService
from .sale import DeliveryExtraServiceItem, DeliveryExtraService, DeliveryRequestService

__all__ = [
    "AbstractService",
    "DeliveryExtraService",
    "DeliveryExtraServiceItem",
    "DeliveryRequestService",
    "NumeratorItem",
    "NumeratorService",
    "OnCalendarSectionAddPayload",
    "PaymentResult",
    "PaysystemService",
]
