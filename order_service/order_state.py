"""
Order lifecycle state machine. Valid transitions enforce business rules.
"""
from order_service.models import OrderStatus

# Current status -> allowed next status
VALID_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.NEW: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.FULFILLED, OrderStatus.CANCELLED}),
    OrderStatus.FULFILLED: frozenset(),  # terminal
    OrderStatus.CANCELLED: frozenset(),  # terminal
}


def is_valid_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """True if target is allowed after current."""
    return target in VALID_TRANSITIONS.get(current, frozenset())


def is_terminal(status: OrderStatus) -> bool:
    return not VALID_TRANSITIONS.get(status)
