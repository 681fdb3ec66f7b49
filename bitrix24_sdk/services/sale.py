"""Сервисы раздела sale: дополнительные услуги доставки и заявки на доставку."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..item import AbstractItem
from ..result import AddedItemResult, DeletedItemResult, Result, UpdatedItemResult, non_empty_list, truthy_scalar
from .base import AbstractService


class DeliveryExtraServiceItem(AbstractItem):
    """Дополнительная услуга службы доставки."""

    fields = ("ID", "CODE", "NAME", "DESCRIPTION", "CLASS_NAME", "ACTIVE", "SORT", "TYPE", "PRICE", "ITEMS")
    __slots__ = ()


class DeliveryExtraService(AbstractService):
    """Методы sale.delivery.extra.service.*."""

    def add(self, fields: Mapping[str, Any]) -> AddedItemResult:
        """Добавить услугу; result содержит ID новой услуги."""

        response = self.core.call("sale.delivery.extra.service.add", dict(fields))
        return AddedItemResult(response)

    def update(self, service_id: int, fields: Mapping[str, Any]) -> UpdatedItemResult:
        params: Dict[str, Any] = {"ID": int(service_id), **dict(fields)}
        return UpdatedItemResult(self.core.call("sale.delivery.extra.service.update", params))

    def get(self, delivery_id: int) -> Result:
        """Получить услуги доставки; успех, если список не пуст."""

        response = self.core.call("sale.delivery.extra.service.get", {"DELIVERY_ID": int(delivery_id)})
        return Result(response, success=non_empty_list)

    def get_items(self, delivery_id: int) -> List[DeliveryExtraServiceItem]:
        return self.get(delivery_id).items(DeliveryExtraServiceItem)

    def delete(self, service_id: int) -> DeletedItemResult:
        return DeletedItemResult(self.core.call("sale.delivery.extra.service.delete", {"ID": int(service_id)}))


class DeliveryRequestService(AbstractService):
    """Методы sale.delivery.request.*."""

    def send_message(
        self,
        delivery_id: int,
        request_id: str,
        *,
        subject: str,
        body: str,
        addressee: str = "MANAGER",
        status: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        """Отправить уведомление по заявке; result равен true при успехе."""

        message: Dict[str, Any] = {"SUBJECT": subject, "BODY": body}
        if status:
            message["STATUS"] = dict(status)
        params = {
            "DELIVERY_ID": int(delivery_id),
            "REQUEST_ID": request_id,
            "ADDRESSEE": addressee,
            "MESSAGE": message,
        }
        return Result(self.core.call("sale.delivery.request.sendmessage", params), success=truthy_scalar)
