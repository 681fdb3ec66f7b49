"""Оплата через платёжные системы (sale.paysystem.pay.*)."""

from __future__ import annotations

from ..result import AbstractResult, first_element_truthy
from .base import AbstractService


class PaymentResult(AbstractResult):
    """Результат оплаты: признак успеха лежит в первом элементе result."""

    def is_success(self) -> bool:
        return first_element_truthy(self.response_data.result)


class PaysystemService(AbstractService):
    """Проведение оплаты и счёта через платёжную систему."""

    def pay_payment(self, payment_id: int, pay_system_id: int) -> PaymentResult:
        params = {"PAYMENT_ID": int(payment_id), "PAY_SYSTEM_ID": int(pay_system_id)}
        return PaymentResult(self.core.call("sale.paysystem.pay.payment", params))

    def pay_invoice(self, invoice_id: int, pay_system_id: int) -> PaymentResult:
        params = {"INVOICE_ID": int(invoice_id), "PAY_SYSTEM_ID": int(pay_system_id)}
        return PaymentResult(self.core.call("sale.paysystem.pay.invoice", params))
