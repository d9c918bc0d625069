"""
Currency formatting for presentation strings. Stateless wrapper around Babel.
"""
from decimal import Decimal

from babel.numbers import format_currency

from order_service.config import settings


def format_money(
    amount: Decimal | None,
    locale: str | None = None,
    currency: str | None = None,
) -> str:
    """Format amount as a locale currency string. None formats as zero (e.g. "R$ 0,00")."""
    if amount is None:
        amount = Decimal("0")
    return format_currency(
        amount,
        currency or settings.currency_code,
        locale=locale or settings.currency_locale,
    )
