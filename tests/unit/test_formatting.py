"""Unit tests for currency formatting"""

import re
from rent_assist.utils.formatting import CURRENCY_SYMBOL, format_currency


def test_format_currency_two_decimals():
    """Test symbol, separators and padding to two decimals"""
    formatted = format_currency(1234.5)

    assert formatted == "GH₵1,234.50"
    assert CURRENCY_SYMBOL in formatted
    assert re.sub(r"[^\d.]", "", formatted) == "1234.50"
    assert float(re.sub(r"[^\d.]", "", formatted)) == 1234.5


def test_format_currency_rounds():
    assert format_currency(65) == "GH₵65.00"
    assert format_currency(1000000) == "GH₵1,000,000.00"
    assert format_currency(0.456) == "GH₵0.46"


def test_format_currency_negative():
    assert format_currency(-50) == "-GH₵50.00"
