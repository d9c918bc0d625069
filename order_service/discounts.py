"""
Discount engine: parse a coupon token and compute the amount to subtract from a total.
Pure functions, no store access. Caller clamps total - discount at zero.

Coupon families:
- OFF<N>        percent off, N integer in [0, 100]
- VALOR<amount> fixed amount off, capped at the current total
"""
import decimal
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Literal

from order_service.errors import InvalidCouponError

CouponType = Literal["none", "percent", "fixed"]

PERCENT_PREFIX = "OFF"
FIXED_PREFIX = "VALOR"

_PERCENT_RE = re.compile(r"^OFF(\d+)$", re.ASCII)
_FIXED_RE = re.compile(r"^VALOR(\d+(?:\.\d+)?)$", re.ASCII)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Coupon:
    code: str
    type: CouponType
    value: Decimal


NO_COUPON = Coupon(code="", type="none", value=ZERO)


def parse_coupon(coupon: str | None) -> Coupon:
    if coupon is None:
        return NO_COUPON
    code = coupon.strip()
    if not code:
        return NO_COUPON

    m = _PERCENT_RE.match(code)
    if m:
        digits = m.group(1).lstrip("0") or "0"
        # anything past three digits is above 100; skip int() on huge suffixes
        if len(digits) > 3 or int(digits) > 100:
            raise InvalidCouponError(code, "percentage must be between 0 and 100")
        return Coupon(code=code, type="percent", value=Decimal(digits))

    m = _FIXED_RE.match(code)
    if m:
        try:
            amount = Decimal(m.group(1))
        except InvalidOperation:
            raise InvalidCouponError(code, "amount is not a number")
        return Coupon(code=code, type="fixed", value=amount)

    if code.startswith(PERCENT_PREFIX) or code.startswith(FIXED_PREFIX):
        raise InvalidCouponError(code, "suffix is not a valid number")
    raise InvalidCouponError(code)


def _exact_context(*operands: Decimal) -> decimal.Context:
    """
    Context wide enough that +, - and * of operands (and division by 100) never round.
    Inexact is trapped so a miscount fails loudly instead of rounding.
    """
    finite = [d for d in operands if d.is_finite()]
    digits = sum(len(d.as_tuple().digits) for d in finite)
    span = max(d.adjusted() for d in finite) - min(d.as_tuple().exponent for d in finite) if finite else 0
    ctx = decimal.Context(prec=max(digits + span + 2, decimal.getcontext().prec))
    ctx.traps[decimal.Inexact] = True
    return ctx


def discount_for(total: Decimal, coupon: Coupon) -> Decimal:
    if coupon.type == "percent":
        with decimal.localcontext(_exact_context(total, coupon.value, HUNDRED)):
            return total * coupon.value / HUNDRED
    if coupon.type == "fixed":
        return min(coupon.value, max(total, ZERO))
    return ZERO


def compute_discount(total: Decimal, coupon: str | None) -> Decimal:
    """Discount amount for coupon against total. Raises InvalidCouponError on a bad token."""
    return discount_for(total, parse_coupon(coupon))


def apply_discount(total: Decimal, discount: Decimal) -> Decimal:
    """New total after discount, never below zero."""
    with decimal.localcontext(_exact_context(total, discount)):
        return max(ZERO, total - discount)
