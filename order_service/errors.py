"""
Client-facing error kinds raised by the order core. The HTTP layer maps each
kind to a status code; anything else is an internal error.
"""


class OrderError(Exception):
    kind = "order_error"


class InvalidOrderError(OrderError):
    """Malformed input to create_order (blank name, non-positive total, bad date)."""
    kind = "validation_error"


class OrderNotFoundError(OrderError):
    kind = "not_found"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"order {order_id} not found")


class InvalidCouponError(OrderError):
    kind = "invalid_coupon"

    def __init__(self, coupon: str, reason: str = "unrecognized coupon"):
        self.coupon = coupon
        self.reason = reason
        super().__init__(f"invalid coupon {coupon!r}: {reason}")


class InvalidTransitionError(OrderError):
    """Raised when an order status transition is not allowed."""
    kind = "invalid_state"

    def __init__(self, current_state, attempted_state=None):
        self.current_state = current_state
        self.attempted_state = attempted_state
        current = getattr(current_state, "value", current_state)
        if attempted_state is None:
            msg = f"order in status {current} cannot transition"
        else:
            attempted = getattr(attempted_state, "value", attempted_state)
            msg = f"order in status {current} cannot move to {attempted}"
        super().__init__(msg)
