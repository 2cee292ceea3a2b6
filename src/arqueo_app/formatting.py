from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def format_currency(value: Any, *, decimals: int = 2) -> str:
    """es-AR peso format: ``$ 1.234,56``."""
    amount = to_decimal(value)
    quantum = Decimal(1).scaleb(-decimals)
    rounded = amount.quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    grouped = f"{abs(rounded):,.{decimals}f}"
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}$ {localized}"


def format_plain(value: Any) -> str:
    """Thousands-separated integer part, used in bill breakdowns (``$20.000``)."""
    amount = to_decimal(value)
    if amount == amount.to_integral_value():
        return f"${int(amount):,}".replace(",", ".")
    return format_currency(amount).replace("$ ", "$")
