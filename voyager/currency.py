"""
Helpers for the display-string prices stored on catalog items and bookings.

Prices are kept exactly as entered ("$3,200", "€450/night"). Anything that
needs a number pulls the first numeric run out of the string, so "1.234,56"
style input is read incorrectly. No currency conversion happens here.
"""

import re
from typing import Optional

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "CHF": "CHF",
    "AED": "AED",
    "JPY": "¥",
}

# Currencies Stripe charges without a minor unit
ZERO_DECIMAL_CURRENCIES = {"JPY", "KRW", "VND", "CLP"}

_NUMERIC_PATTERN = re.compile(r"[\d.,]+")


def get_currency_symbol(currency: str) -> str:
    return CURRENCY_SYMBOLS.get(currency.upper(), currency)


def parse_amount(price: str) -> Optional[float]:
    """Extract the numeric value of a display price, or None if there is none."""
    if price is None:
        return None
    match = _NUMERIC_PATTERN.search(str(price))
    if not match:
        return None
    try:
        return float(match.group(0).replace(",", ""))
    except ValueError:
        return None


def to_minor_units(price: str, currency: str = "usd") -> int:
    """
    Convert a display price into the integer amount Stripe expects.

    Raises ValueError when the price has no usable positive amount.
    """
    value = parse_amount(price)
    if value is None or value <= 0:
        raise ValueError(f"Invalid amount: {price!r}")
    if currency.upper() in ZERO_DECIMAL_CURRENCIES:
        return int(round(value))
    return int(round(value * 100))


def format_amount(value: float, currency: str = "EUR") -> str:
    symbol = get_currency_symbol(currency)
    if currency.upper() == "JPY":
        return f"{symbol}{round(value):,}"
    return f"{symbol}{value:,.2f}"
