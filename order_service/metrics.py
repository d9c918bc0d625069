"""
Prometheus metrics: orders created/paid/fulfilled, coupon outcomes, rejected transitions, store size.
"""
from prometheus_client import Counter, Gauge, generate_latest

orders_created_total = Counter(
    "orders_created_total",
    "Total orders created",
)
orders_paid_total = Counter(
    "orders_paid_total",
    "Total orders moved to PAID",
)
orders_fulfilled_total = Counter(
    "orders_fulfilled_total",
    "Total orders moved to FULFILLED",
    ["free"],
)

# Coupons: accepted by type, rejected as invalid
coupons_applied_total = Counter(
    "coupons_applied_total",
    "Total coupons applied to orders",
    ["coupon_type"],
)
coupons_rejected_total = Counter(
    "coupons_rejected_total",
    "Total coupons rejected as invalid",
)
orders_rejected_invalid_transition_total = Counter(
    "orders_rejected_invalid_transition_total",
    "Total requests rejected due to invalid order lifecycle transition",
    ["current_state", "attempted_state"],
)

orders_in_store = Gauge(
    "orders_in_store",
    "Number of orders currently held in the in-memory store",
)


def get_metrics_content_type():
    return "text/plain; charset=utf-8; version=0.0.4"


def get_metrics_bytes():
    return generate_latest()
