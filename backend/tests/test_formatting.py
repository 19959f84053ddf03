from datetime import datetime

from tillbook.formatting import format_currency, format_date, format_datetime, format_number


def test_format_currency_groups_thousands_with_two_decimals():
    assert format_currency(123450) == "₦1,234.50"
    assert format_currency(0) == "₦0.00"
    assert format_currency(5) == "₦0.05"


def test_format_currency_negative_and_invalid():
    assert format_currency(-2500) == "-₦25.00"
    assert format_currency("abc") == "₦0.00"
    assert format_currency(None) == "₦0.00"


def test_format_currency_custom_symbol():
    assert format_currency(100000, symbol="$") == "$1,000.00"


def test_format_number():
    assert format_number(1234567) == "1,234,567"
    assert format_number("1234.5") == "1,234.5"
    assert format_number(1234.5, decimals=2) == "1,234.50"
    assert format_number("nope") == "0"


def test_format_date_and_datetime():
    moment = datetime(2026, 10, 18, 14, 5)
    assert format_date(moment) == "18 Oct 2026"
    assert format_datetime(moment) == "18 Oct 2026, 14:05"
    assert format_date(None) == ""
