"""
Currency Conversion for the DOH-DIV Report

Converts broker amounts into EUR using the Bank of Slovenia rate table.

Rules:
- EUR amounts pass through untouched apart from the decimal comma
- GBX (pence) amounts are converted with the GBP rate after scaling by 100
- Rates are looked up for the exact payment date only (no fallback)
- Results are rounded to cents and written with a decimal comma

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import re
from decimal import Decimal, InvalidOperation, Overflow, ROUND_HALF_UP

from core.config import BASE_CURRENCY
from core.models import RateTable
from dividends.utils.logging_config import setup_logger

logger = setup_logger(__name__)

CENT = Decimal("0.01")
PENCE_PER_POUND = Decimal(100)

_DATE_TIME_SEPARATOR = re.compile(r"[ T]")


class ConversionError(ValueError):
    """Raised when an amount cannot be converted to EUR."""
    pass


class AmountParseError(ConversionError):
    """Raised when the amount is not a number."""
    pass


class RateDateMissingError(ConversionError):
    """Raised when the rate table has no entry for the payment date."""
    pass


class RateCurrencyMissingError(ConversionError):
    """Raised when the rate table has the date but not the currency."""
    pass


def date_portion(value: str) -> str:
    """
    Return the date part of a broker timestamp.

    Truncates at the first space or 'T', so '2023-05-09 10:00:00' and
    '2023-05-09T10:00:00Z' both give '2023-05-09'.
    """
    return _DATE_TIME_SEPARATOR.split(value, maxsplit=1)[0]


def to_decimal_comma(value: str) -> str:
    """Swap the first decimal point for a comma."""
    return value.replace('.', ',', 1)


def parse_amount(amount: str) -> Decimal:
    """Parse a broker amount, raising AmountParseError for anything non-numeric."""
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise AmountParseError(f"Not a number: '{amount}'")

    if not value.is_finite():
        raise AmountParseError(f"Not a finite number: '{amount}'")

    return value


def convert_value(date: str, amount: str, currency: str, rates: RateTable) -> str:
    """
    Convert an amount to EUR for the report.

    Args:
        date: Payment date or timestamp (time part is ignored)
        amount: Amount as exported by the broker, decimal point
        currency: ISO currency code of the amount (GBX for pence)
        rates: Rate table, date -> currency -> units per EUR

    Returns:
        EUR amount with exactly two decimals and a decimal comma

    Raises:
        AmountParseError: amount is not numeric, or too large to convert
        RateDateMissingError: no rates for the payment date
        RateCurrencyMissingError: no rate for the currency on that date

    Example:
        >>> convert_value("2023-01-02", "10.00", "USD", {"2023-01-02": {"USD": Decimal("1.05")}})
        '10,50'
    """
    if currency == BASE_CURRENCY:
        return to_decimal_comma(amount)

    value = parse_amount(amount)

    # GBX rates are published per pound
    scale = Decimal(1)
    if currency == "GBX":
        currency = "GBP"
        scale = PENCE_PER_POUND

    day = date_portion(date)
    day_rates = rates.get(day)
    if day_rates is None:
        logger.debug(f"No rate table entry for {day}")
        raise RateDateMissingError(f"No exchange rates for {day}")

    rate = day_rates.get(currency)
    if rate is None:
        raise RateCurrencyMissingError(f"No {currency} exchange rate for {day}")

    try:
        converted = (value * scale * rate).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, Overflow):
        raise AmountParseError(f"Amount out of range: '{amount}'")
    return to_decimal_comma(format(converted, 'f'))
