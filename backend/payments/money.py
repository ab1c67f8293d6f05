"""
Money helpers for talking to payment providers.

Providers take amounts as integers in the currency's smallest unit
(paise for INR, cents for USD). Totals are stored as Decimal, so every
amount is quantized to the currency's precision before it is converted.
Floats are never used for money.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Union

# Decimal places per ISO 4217 code; anything not listed uses 2
CURRENCY_EXPONENT = {
    "INR": 2,
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "AED": 2,
    "SGD": 2,
    "JPY": 0,
    "KRW": 0,
    "VND": 0,
    "KWD": 3,
    "BHD": 3,
    "OMR": 3,
}

Amount = Union[Decimal, str, int, float]


def currency_exponent(currency: str) -> int:
    """
    Number of decimal places used by a currency.

    Examples:
        >>> currency_exponent("INR")
        2
        >>> currency_exponent("jpy")
        0
    """
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def quantize_decimal(currency: str) -> Decimal:
    """Smallest representable unit for a currency, e.g. Decimal('0.01')."""
    return Decimal(10) ** -currency_exponent(currency)


def quantize(currency: str, amount: Amount) -> Decimal:
    """
    Rounds an amount to the currency's precision with banker's rounding.

    Floats are converted through str() so 0.1 stays 0.1.

    Examples:
        >>> quantize("INR", "450")
        Decimal('450.00')
        >>> quantize("INR", "10.125")
        Decimal('10.12')
    """
    if isinstance(amount, float):
        amount = str(amount)
    return Decimal(amount).quantize(quantize_decimal(currency), rounding=ROUND_HALF_EVEN)


def to_minor(currency: str, amount: Amount) -> int:
    """
    Converts an amount to integer minor units, quantizing first.

    Examples:
        >>> to_minor("INR", "450.00")
        45000
        >>> to_minor("JPY", "1234.56")
        1235
    """
    quantized = quantize(currency, amount)
    return int((quantized * (10 ** currency_exponent(currency))).to_integral_value())


def from_minor(currency: str, minor: int) -> Decimal:
    """
    Converts integer minor units back to a Decimal amount.

    Examples:
        >>> from_minor("INR", 45000)
        Decimal('450.00')
    """
    exponent = currency_exponent(currency)
    return quantize(currency, Decimal(int(minor)) / (Decimal(10) ** exponent))


def amounts_match(currency: str, expected: Amount, candidate) -> bool:
    """
    True when `candidate` equals `expected` once both are quantized.

    Unparseable candidates (client input) simply do not match.
    """
    try:
        return quantize(currency, candidate) == quantize(currency, expected)
    except (InvalidOperation, TypeError, ValueError):
        return False
