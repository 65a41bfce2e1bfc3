"""Currency display formatting and lenient parsing.

Presentation code calls these with whatever it has at hand, so none of them
raise: formatting returns INVALID_AMOUNT and parsing returns None for input
it cannot handle.

Display rounding is fixed-point (2 fractional digits by default) through the
DecimalEngine, so a formatted value and a stored cents value always agree.
"""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal

from config.settings import settings
from src.pa_common.errors import AppError
from src.pa_money.cents import cents_to_decimal
from src.pa_money.decimal_engine import DecimalEngine, Numeric, default_engine

logger = logging.getLogger(__name__)

INVALID_AMOUNT = "Invalid Amount"

_NBSP = "\u00a0"
_NARROW_NBSP = "\u202f"
_SPACES = (" ", _NBSP, _NARROW_NBSP)

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "CA$",
    "AUD": "A$",
    "INR": "₹",
}

_SYMBOL_CHARS = "$€£¥₹"


@dataclass(frozen=True)
class LocaleFormat:
    group: str           # thousands separator
    decimal: str         # fractional separator
    symbol_first: bool   # "$1.00" vs "1,00 €"


LOCALES: dict[str, LocaleFormat] = {
    "en-US": LocaleFormat(group=",", decimal=".", symbol_first=True),
    "en-GB": LocaleFormat(group=",", decimal=".", symbol_first=True),
    "en-CA": LocaleFormat(group=",", decimal=".", symbol_first=True),
    "ja-JP": LocaleFormat(group=",", decimal=".", symbol_first=True),
    "de-DE": LocaleFormat(group=".", decimal=",", symbol_first=False),
    "fr-FR": LocaleFormat(group=_NARROW_NBSP, decimal=",", symbol_first=False),
}

_FALLBACK_LOCALE = "en-US"

# Leading "CA$" / "$" / "EUR", trailing "€" / "EUR"
_PREFIX = re.compile(r"^(?:[A-Z]{0,3}[" + _SYMBOL_CHARS + r"]|[A-Z]{3}(?![A-Za-z]))\s*")
_SUFFIX = re.compile(r"\s*(?:[" + _SYMBOL_CHARS + r"]|[A-Z]{3})$")


def _locale_format(locale: str | None) -> LocaleFormat:
    name = locale or settings.DEFAULT_LOCALE
    fmt = LOCALES.get(name)
    if fmt is None:
        logger.warning("Unsupported locale %r, falling back to %s", name, _FALLBACK_LOCALE)
        return LOCALES[_FALLBACK_LOCALE]
    return fmt


def currency_symbol(currency: str) -> str:
    """Display symbol for an ISO 4217 code; unknown codes display as the code itself."""
    code = currency.strip().upper()
    return CURRENCY_SYMBOLS.get(code, code)


def format_currency(
    value: Numeric,
    currency: str | None = None,
    locale: str | None = None,
    decimal_places: int = 2,
    engine: DecimalEngine | None = None,
) -> str:
    """Format a decimal currency-unit amount, e.g. Decimal('-1234.5') -> '-$1,234.50'."""
    eng = engine or default_engine()
    try:
        rounded = eng.round(value, decimal_places).to_decimal()
    except (AppError, ValueError):
        logger.warning("format_currency received an invalid amount: %r", value)
        return INVALID_AMOUNT

    fmt = _locale_format(locale)
    symbol = currency_symbol(currency or settings.DEFAULT_CURRENCY)
    negative = rounded < 0 and not rounded.is_zero()

    int_part, _, frac_part = format(rounded.copy_abs(), f",.{decimal_places}f").partition(".")
    number = int_part.replace(",", fmt.group)
    if frac_part:
        number = f"{number}{fmt.decimal}{frac_part}"

    if fmt.symbol_first:
        # Alphabetic symbols (CHF, unknown codes) need a gap: "CHF 12.00"
        gap = _NBSP if symbol[-1].isalpha() else ""
        body = f"{symbol}{gap}{number}"
    else:
        body = f"{number}{_NBSP}{symbol}"
    return f"-{body}" if negative else body


def format_cents_as_currency(
    cents: int,
    currency: str | None = None,
    locale: str | None = None,
    engine: DecimalEngine | None = None,
) -> str:
    """12345 -> '$123.45'."""
    try:
        dollars = cents_to_decimal(cents, engine)
    except AppError:
        logger.warning("format_cents_as_currency received non-integer cents: %r", cents)
        return INVALID_AMOUNT
    return format_currency(dollars, currency, locale, engine=engine)


def _number_pattern(fmt: LocaleFormat) -> re.Pattern[str]:
    groups = _SPACES if fmt.group in _SPACES else (fmt.group,)
    g = "[" + "".join(re.escape(c) for c in groups) + "]"
    d = re.escape(fmt.decimal)
    return re.compile(rf"^(?:\d{{1,3}}(?:{g}\d{{3}})+|\d+)?(?:{d}\d+)?$")


def _strip_currency(text: str) -> str:
    return _SUFFIX.sub("", _PREFIX.sub("", text.strip())).strip()


def parse_currency(
    text: str,
    locale: str | None = None,
    engine: DecimalEngine | None = None,
) -> Decimal | None:
    """Parse a display string back to a Decimal, or None if it is not an amount.

    Accepts currency symbols / ISO codes on either side, thousands separators,
    a leading '-' and accounting negatives: '(12.34)' -> Decimal('-12.34').
    """
    if not isinstance(text, str):
        return None
    body = text.strip()
    negative = False
    if body.startswith("(") and body.endswith(")"):
        negative = True
        body = body[1:-1]

    # The sign may sit on either side of the symbol: "-$12.34" / "$-12.34"
    body = _strip_currency(body)
    if body.startswith("-"):
        negative = True
        body = _strip_currency(body[1:])

    fmt = _locale_format(locale)
    if not body or not any(c.isdigit() for c in body) or not _number_pattern(fmt).match(body):
        return None

    plain = body.translate({ord(c): None for c in (*_SPACES, fmt.group)}).replace(fmt.decimal, ".")
    try:
        amount = (engine or default_engine()).value(plain).to_decimal()
    except AppError:
        return None
    return amount.copy_negate() if negative else amount


def normalize_amount_string(text: str | int | float | None) -> str:
    """Loosely clean an imported amount: '$1,234.50' -> '1234.50', '' -> '0'.

    Only currency symbols, whitespace and ',' are removed; the result is not
    validated, callers still pass it through the engine.
    """
    if isinstance(text, bool):
        return "0"
    if isinstance(text, (int, float)):
        return str(text)
    if not isinstance(text, str) or not text.strip():
        return "0"
    cleaned = re.sub(r"[\s" + _SYMBOL_CHARS + r",]", "", text)
    sign = "-" if cleaned.startswith("-") else ""
    cleaned = sign + cleaned.replace("-", "")
    return cleaned or "0"
