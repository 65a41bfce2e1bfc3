"""Conversions between integer cents (storage) and decimal currency units.

Storage and ledger lines always carry int cents; the decimal "dollars" form
is produced and consumed only here, through a DecimalEngine, so every
conversion rounds the same way.
"""

from decimal import Decimal

from src.pa_common.errors import InvalidNumericInputError
from src.pa_money.decimal_engine import DecimalEngine, DecimalValue, Numeric, default_engine

CENTS_PER_UNIT = 100


def cents_to_decimal(cents: int | Decimal, engine: DecimalEngine | None = None) -> DecimalValue:
    """12345 -> DecimalValue('123.45'). Equivalent to divide(cents, 100, 2)."""
    eng = engine or default_engine()
    if isinstance(cents, bool) or not isinstance(cents, (int, Decimal)):
        raise InvalidNumericInputError(cents)
    if isinstance(cents, Decimal) and (not cents.is_finite() or cents.as_integer_ratio()[1] != 1):
        raise InvalidNumericInputError(cents)
    return eng.divide(eng.value(cents, exact=True), CENTS_PER_UNIT, 2)


def decimal_to_cents(value: Numeric, engine: DecimalEngine | None = None) -> int:
    """Multiply by 100 first, then round to a whole cent (ties to even).

    '123.455' -> 12346, '123.445' -> 12344
    """
    eng = engine or default_engine()
    return eng.round(eng.multiply(value, CENTS_PER_UNIT, exact=True), 0).to_int()
