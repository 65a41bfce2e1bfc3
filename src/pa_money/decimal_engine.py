"""Fixed-point decimal engine, the base of every monetary calculation.

Each DecimalEngine owns a private decimal.Context built from an immutable
DecimalConfig. The thread-local decimal.getcontext() is never read or
modified, so engines with different configs can serve concurrent requests.

Arithmetic results are re-rounded to the working precision (>= 20
significant digits) with the configured rounding mode, banker's rounding by
default. round() and divide() to a fixed number of places are the exception:
they keep every integer digit and only cut fractional ones. Arithmetic
failures raise AppError subclasses; nothing ever degrades to float.
"""

import decimal
import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache, reduce

from config.settings import settings
from src.pa_common.errors import (
    DivisionByZeroError,
    InvalidNumericInputError,
    PrecisionExceededError,
)

logger = logging.getLogger(__name__)

MIN_PRECISION = 20

_ROUNDING_MODES: frozenset[str] = frozenset({
    decimal.ROUND_HALF_EVEN,
    decimal.ROUND_HALF_UP,
    decimal.ROUND_HALF_DOWN,
    decimal.ROUND_UP,
    decimal.ROUND_DOWN,
    decimal.ROUND_CEILING,
    decimal.ROUND_FLOOR,
    decimal.ROUND_05UP,
})

_TRAPS = [decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow]


@dataclass(frozen=True)
class DecimalConfig:
    precision: int = MIN_PRECISION     # significant digits
    rounding: str = decimal.ROUND_HALF_EVEN

    def __post_init__(self) -> None:
        if self.precision < MIN_PRECISION:
            raise ValueError(
                f"precision must be at least {MIN_PRECISION} significant digits, got {self.precision}"
            )
        if self.rounding not in _ROUNDING_MODES:
            raise ValueError(f"Unknown rounding mode: {self.rounding}")


@dataclass(frozen=True, order=True)
class DecimalValue:
    """Immutable finite base-10 value. Build through DecimalEngine.value()."""

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal) or not self.amount.is_finite():
            raise InvalidNumericInputError(self.amount)

    @classmethod
    def of(cls, value: "Numeric", engine: "DecimalEngine | None" = None) -> "DecimalValue":
        return (engine or default_engine()).value(value)

    @property
    def is_zero(self) -> bool:
        return self.amount.is_zero()

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def to_decimal(self) -> Decimal:
        return self.amount

    def to_int(self) -> int:
        """Exact integer conversion; raises for values with a fractional part."""
        if self.amount.as_integer_ratio()[1] != 1:
            raise InvalidNumericInputError(str(self))
        return int(self.amount)

    def __str__(self) -> str:
        return format(self.amount, "f")

    def __repr__(self) -> str:
        return f"DecimalValue('{self}')"


Numeric = int | float | str | Decimal | DecimalValue


class DecimalEngine:
    """Arithmetic over DecimalValue at a fixed working precision.

    All methods accept any Numeric and coerce it through value() first,
    so invalid input is rejected before any arithmetic happens.
    """

    def __init__(self, config: DecimalConfig | None = None) -> None:
        self._config = config or DecimalConfig()
        self._context = decimal.Context(
            prec=self._config.precision,
            rounding=self._config.rounding,
            traps=list(_TRAPS),
        )
        # Integer-cent accumulation: wide enough that an add is never rounded
        self._exact = decimal.Context(
            prec=decimal.MAX_PREC,
            rounding=self._config.rounding,
            Emax=decimal.MAX_EMAX,
            Emin=decimal.MIN_EMIN,
            traps=[*_TRAPS, decimal.Inexact],
        )

    @property
    def config(self) -> DecimalConfig:
        return self._config

    @property
    def precision(self) -> int:
        return self._config.precision

    # --- construction ---

    def value(self, value: Numeric, exact: bool = False) -> DecimalValue:
        """Build a DecimalValue from int, float, numeric str, Decimal or DecimalValue.

        ``exact`` keeps every digit of the input instead of rounding it to
        working precision.
        """
        if isinstance(value, DecimalValue):
            return value
        return DecimalValue(self._parse(value, exact))

    def zero(self) -> DecimalValue:
        return DecimalValue(Decimal(0))

    def _parse(self, value: object, exact: bool = False) -> Decimal:
        if isinstance(value, bool) or value is None:
            raise InvalidNumericInputError(value)
        if isinstance(value, float):
            raw: object = repr(value)  # shortest round-trip text, never the binary expansion
        elif isinstance(value, str):
            raw = value.strip()
        elif isinstance(value, (int, Decimal)):
            raw = value
        else:
            raise InvalidNumericInputError(value)
        try:
            parsed = (self._exact if exact else self._context).create_decimal(raw)
        except (decimal.DecimalException, ValueError, TypeError) as exc:
            raise InvalidNumericInputError(value) from exc
        if not parsed.is_finite():
            raise InvalidNumericInputError(value)
        return parsed

    def _operand(self, value: Numeric, exact: bool = False) -> Decimal:
        return self.value(value, exact).amount

    @contextmanager
    def _guard(self, op: str, *operands: Decimal) -> Iterator[None]:
        try:
            yield
        except decimal.DecimalException as exc:
            detail = f"{op}({', '.join(format(o, 'f') for o in operands)})"
            logger.error("Decimal operation failed: %s: %r", detail, exc)
            raise PrecisionExceededError(detail) from exc

    # --- arithmetic ---

    def add(self, a: Numeric, b: Numeric, exact: bool = False) -> DecimalValue:
        x, y = self._operand(a, exact), self._operand(b, exact)
        ctx = self._exact if exact else self._context
        with self._guard("add", x, y):
            return DecimalValue(ctx.add(x, y))

    def subtract(self, a: Numeric, b: Numeric, exact: bool = False) -> DecimalValue:
        x, y = self._operand(a, exact), self._operand(b, exact)
        ctx = self._exact if exact else self._context
        with self._guard("subtract", x, y):
            return DecimalValue(ctx.subtract(x, y))

    def multiply(self, a: Numeric, b: Numeric, exact: bool = False) -> DecimalValue:
        x, y = self._operand(a, exact), self._operand(b, exact)
        ctx = self._exact if exact else self._context
        with self._guard("multiply", x, y):
            return DecimalValue(ctx.multiply(x, y))

    def divide(self, a: Numeric, b: Numeric, precision: int | None = None) -> DecimalValue:
        """Divide a by b.

        With ``precision`` the quotient is rounded once, directly to that many
        fractional digits; without it the quotient keeps working precision.
        Raises DivisionByZeroError when b == 0, whatever a is.
        """
        x, y = self._operand(a), self._operand(b)
        if y.is_zero():
            raise DivisionByZeroError(format(x, "f"))
        with self._guard("divide", x, y):
            quotient = self._context.divide(x, y)
            if precision is None:
                return DecimalValue(quotient)
            _check_places(precision)
            # ROUND_05UP keeps a sticky last digit so the final quantize sees
            # the true side of a tie: a single correct rounding, no double rounding.
            digits = max(2, quotient.adjusted() + precision + 3)
            probe = decimal.Context(prec=digits, rounding=decimal.ROUND_05UP, traps=list(_TRAPS))
            return DecimalValue(self._quantize(probe.divide(x, y), precision))

    def round(self, value: Numeric, decimal_places: int = 2) -> DecimalValue:
        """Round to ``decimal_places`` fractional digits (banker's rounding by default).

        2.345 -> 2.34, 2.355 -> 2.36, 0.005 -> 0.00

        The operand is taken at full width and the result keeps every integer
        digit, so rounding never fails on a finite value, however large.
        """
        _check_places(decimal_places)
        return DecimalValue(self._quantize(self._operand(value, exact=True), decimal_places))

    def _quantize(self, x: Decimal, places: int) -> Decimal:
        # Room for all integer digits, the requested places and a rounding carry.
        digits = max(self._config.precision, x.adjusted() + places + 2)
        ctx = decimal.Context(prec=digits, rounding=self._config.rounding, traps=list(_TRAPS))
        return x.quantize(_quantum(places), context=ctx)

    def compare(self, a: Numeric, b: Numeric) -> int:
        """Total ordering: -1 if a < b, 0 if equal, 1 if a > b."""
        return int(self._operand(a).compare(self._operand(b)))

    def abs(self, value: Numeric) -> DecimalValue:
        return DecimalValue(self._context.abs(self._operand(value)))

    def negate(self, value: Numeric) -> DecimalValue:
        return DecimalValue(self._context.minus(self._operand(value)))

    def sum(self, values: Iterable[Numeric], exact: bool = False) -> DecimalValue:
        return reduce(lambda acc, v: self.add(acc, v, exact=exact), values, self.zero())

    def amounts_equal(self, a: Numeric, b: Numeric, tolerance: Numeric = "0.000001") -> bool:
        """True when |a - b| is strictly below ``tolerance``."""
        diff = self.abs(self.subtract(a, b))
        return self.compare(diff, tolerance) < 0


def _quantum(places: int) -> Decimal:
    return Decimal((0, (1,), -places))


def _check_places(places: int) -> None:
    if isinstance(places, bool) or not isinstance(places, int) or places < 0:
        raise ValueError(f"decimal places must be a non-negative int, got {places!r}")


@lru_cache(maxsize=1)
def default_engine() -> DecimalEngine:
    """Engine built from Settings; immutable, so safe to share process-wide."""
    return DecimalEngine(
        DecimalConfig(precision=settings.DECIMAL_PRECISION, rounding=settings.DECIMAL_ROUNDING)
    )
