"""
Order lifecycle: create, apply coupon, pay, fulfill, list, get.
Each mutation is a single-record transaction through OrderStore.update:
read, validate transition / compute discount, write. Errors propagate to the caller.
"""
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from order_service import metrics
from order_service.discounts import apply_discount, discount_for, parse_coupon
from order_service.errors import (
    InvalidCouponError,
    InvalidOrderError,
    InvalidTransitionError,
    OrderNotFoundError,
)
from order_service.formatting import format_money
from order_service.models import Order, OrderStatus
from order_service.order_state import is_valid_transition
from order_service.store import OrderStore

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d-%m-%Y"  # dd-MM-yyyy
_DATE_SHAPE = re.compile(r"^\d{2}-\d{2}-\d{4}$", re.ASCII)


@dataclass(frozen=True)
class FulfillmentResult:
    order: Order
    message: str  # "<formatted total> | <status description>"


def parse_order_date(value: str | date | None) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise InvalidOrderError("order date is required (dd-MM-yyyy)")
    text = value.strip()
    if not _DATE_SHAPE.match(text):
        raise InvalidOrderError(f"invalid order date {value!r}, expected dd-MM-yyyy")
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidOrderError(f"invalid order date {value!r}, expected dd-MM-yyyy") from e


def parse_total(value) -> Decimal:
    if value is None or isinstance(value, bool):
        raise InvalidOrderError("total is required")
    try:
        total = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as e:
        raise InvalidOrderError(f"total {value!r} is not a number") from e
    if not total.is_finite() or total <= 0:
        raise InvalidOrderError(f"total must be positive, got {value}")
    return total


class OrderService:
    def __init__(
        self,
        store: OrderStore,
        currency_locale: str | None = None,
        currency_code: str | None = None,
    ) -> None:
        self.store = store
        self.currency_locale = currency_locale
        self.currency_code = currency_code

    def create_order(self, customer_name: str, total, order_date) -> Order:
        if not isinstance(customer_name, str) or not customer_name.strip():
            raise InvalidOrderError("customer name is required")
        order = Order(
            customer_name=customer_name.strip(),
            total=parse_total(total),
            order_date=parse_order_date(order_date),
        )
        saved = self.store.save(order)
        metrics.orders_created_total.inc()
        logger.info("Created order id=%s customer=%s total=%s", saved.id, saved.customer_name, saved.total)
        return saved

    def list_orders(self) -> list[Order]:
        return self.store.find_all()

    def get_order(self, order_id: int) -> Order | None:
        return self.store.find_by_id(order_id)

    def apply_coupon(self, order_id: int, coupon: str | None) -> Decimal:
        """Apply coupon to the order's current total (cumulative). Returns the new total."""
        if not self.store.exists_by_id(order_id):
            raise OrderNotFoundError(order_id)
        try:
            parsed = parse_coupon(coupon)
        except InvalidCouponError as e:
            metrics.coupons_rejected_total.inc()
            logger.warning("Rejected coupon %r for order id=%s: %s", e.coupon, order_id, e.reason)
            raise

        def mutate(order: Order) -> None:
            order.total = apply_discount(order.total, discount_for(order.total, parsed))

        updated = self.store.update(order_id, mutate)
        if updated is None:
            raise OrderNotFoundError(order_id)
        metrics.coupons_applied_total.labels(coupon_type=parsed.type).inc()
        logger.info("Applied coupon %r to order id=%s, new total=%s", parsed.code, order_id, updated.total)
        return updated.total

    def pay_order(self, order_id: int) -> Order:
        def mutate(order: Order) -> None:
            self._transition(order, OrderStatus.PAID)

        updated = self.store.update(order_id, mutate)
        if updated is None:
            raise OrderNotFoundError(order_id)
        metrics.orders_paid_total.inc()
        logger.info("Order id=%s paid", order_id)
        return updated

    def fulfill_order(self, order_id: int) -> FulfillmentResult:
        """
        Free orders (total <= 0) are fulfilled from any status; otherwise the order must be PAID.
        """
        def mutate(order: Order) -> None:
            if order.is_free:
                order.status = OrderStatus.FULFILLED
            else:
                self._transition(order, OrderStatus.FULFILLED)

        updated = self.store.update(order_id, mutate)
        if updated is None:
            raise OrderNotFoundError(order_id)
        metrics.orders_fulfilled_total.labels(free=str(updated.is_free).lower()).inc()
        logger.info("Order id=%s fulfilled (total=%s)", order_id, updated.total)
        amount = format_money(updated.total, self.currency_locale, self.currency_code)
        message = f"{amount} | {updated.status.description}"
        return FulfillmentResult(order=updated, message=message)

    def reset(self) -> int:
        return self.store.clear()

    def _transition(self, order: Order, target: OrderStatus) -> None:
        if not is_valid_transition(order.status, target):
            metrics.orders_rejected_invalid_transition_total.labels(
                current_state=order.status.value,
                attempted_state=target.value,
            ).inc()
            logger.warning("Rejected transition %s -> %s for order id=%s", order.status.value, target.value, order.id)
            raise InvalidTransitionError(order.status, target)
        order.status = target
