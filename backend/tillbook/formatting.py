# Overview: Locale formatting for money and dates (en-NG, Naira).

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

DEFAULT_CURRENCY_SYMBOL = "₦"


def _to_decimal(value) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip().replace(",", ""))
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def format_number(value=0, decimals: int | None = None) -> str:
    """
    Group thousands with commas. Non-numeric input renders as "0".

    decimals=None keeps up to three fractional digits, trimming trailing zeros.
    """
    number = _to_decimal(value)
    if number is None:
        return "0"
    if decimals is None:
        text = f"{number.quantize(Decimal('0.001')):,.3f}".rstrip("0").rstrip(".")
        return "0" if text in {"-0", ""} else text
    return f"{number:,.{decimals}f}"


def format_currency(value_cents=0, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Minor units -> "₦1,234.50". Negative amounts get a leading minus."""
    cents = _to_decimal(value_cents)
    if cents is None:
        return f"{symbol}0.00"
    amount = (cents / 100).quantize(Decimal("0.01"))
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_date(value: date | datetime | None) -> str:
    if value is None:
        return ""
    return f"{value.day} {value.strftime('%b %Y')}"


def format_datetime(value: datetime | None) -> str:
    if value is None:
        return ""
    return f"{format_date(value)}, {value.strftime('%H:%M')}"
