"""
Order record and status enumeration.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class OrderStatus(str, Enum):
    NEW = "NEW"
    PAID = "PAID"
    FULFILLED = "FULFILLED"
    CANCELLED = "CANCELLED"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    OrderStatus.NEW: "Novo",
    OrderStatus.PAID: "Pago",
    OrderStatus.FULFILLED: "Entregue",
    OrderStatus.CANCELLED: "Cancelado",
}


@dataclass
class Order:
    customer_name: str
    total: Decimal
    order_date: date
    status: OrderStatus = OrderStatus.NEW
    id: int | None = None  # assigned by OrderStore.save

    @property
    def is_free(self) -> bool:
        return self.total <= 0
