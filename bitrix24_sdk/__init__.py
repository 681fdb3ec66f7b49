"""Клиентский SDK для REST API Bitrix24."""

from .batch import (
    AddedItemBatchResult,
    BatchItemOutcome,
    DeletedItemBatchResult,
    ItemBatchResult,
    UpdatedItemBatchResult,
)
from .client import Bitrix24
from .config import BitrixConfig
from .core import BatchResponse, Core, Response
from .exceptions import (
    ApiError,
    Bitrix24Error,
    ConfigurationError,
    ParseError,
    TransportError,
    UndefinedFieldError,
)
from .item import AbstractItem, Item, JsonKind
from .logging_config import setup_logging
from .response import Pagination, ResponseData, Time
from .result import AbstractResult, AddedItemResult, DeletedItemResult, Result, UpdatedItemResult
from .transport import RawReply, RequestsTransport, Transport

__all__ = [
    "AbstractItem",
    "AbstractResult",
    "AddedItemBatchResult",
    "AddedItemResult",
    "ApiError",
    "BatchItemOutcome",
    "BatchResponse",
    "Bitrix24",
    "Bitrix24Error",
    "BitrixConfig",
    "ConfigurationError",
    "Core",
    "DeletedItemBatchResult",
    "DeletedItemResult",
    "Item",
    "ItemBatchResult",
    "JsonKind",
    "Pagination",
    "ParseError",
    "RawReply",
    "RequestsTransport",
    "Response",
    "ResponseData",
    "Result",
    "Time",
    "Transport",
    "TransportError",
    "UndefinedFieldError",
    "UpdatedItemBatchResult",
    "UpdatedItemResult",
    "setup_logging",
]
