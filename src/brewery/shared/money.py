"""Decimal arithmetic for money and rates.

Amounts are persisted as floats but every calculation goes through
``Decimal`` with half-up rounding so that ``100.00 * 0.045 == 4.50``.
"""

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")
RATE_PRECISION = Decimal("0.0001")


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> float:
    return float(to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


def round_rate(value) -> float:
    return float(to_decimal(value).quantize(RATE_PRECISION, rounding=ROUND_HALF_UP))


def multiply_money(amount, factor) -> float:
    return round_money(to_decimal(amount) * to_decimal(factor))


def sum_money(values) -> float:
    return round_money(sum((to_decimal(v) for v in values), Decimal("0")))


def percentage_to_rate(percentage) -> float:
    """12.5 (%) -> 0.125"""
    return round_rate(to_decimal(percentage) / Decimal("100"))


def rate_to_percentage(rate) -> float:
    """0.125 -> 12.5 (%)"""
    return round_money(to_decimal(rate) * Decimal("100"))
