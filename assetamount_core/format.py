"""
Number formatting for display.

``format_number`` renders en-US style strings (``,`` grouping, ``.``
decimal point) with optional compact K/M/B/T notation and adaptive
decimals for small values:

    format_number(1_500_000, compact=True)          -> "1.5M"
    format_number(1234.5, fraction_digits=3)        -> "1,234.500"
    format_number(0.00001, adaptive_decimals=True)  -> "0.00001"

Display rounding is half away from zero on the decimal value.  Floats are
taken at their shortest round-trip representation, ints and Decimals
exactly.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from typing import Union

from assetamount_core.precision import get_context, to_decimal

COMPACT_AUTO_THRESHOLD = Decimal(100_000)
DEFAULT_FRACTION_DIGITS = 2
DEFAULT_COMPACT_FRACTION_DIGITS = 1
MAX_ADAPTIVE_FRACTION_DIGITS = 20

# Largest tier first.
COMPACT_TIERS: tuple[tuple[int, str], ...] = (
    (12, "T"),
    (9, "B"),
    (6, "M"),
    (3, "K"),
)

STYLES = ("decimal", "currency")
CURRENCY_SYMBOL = "$"

Number = Union[int, float, Decimal, str]


def _wide_context(value: Decimal, places: int) -> decimal.Context:
    """Library context widened so quantizing *value* to *places* is exact."""
    ctx = get_context().copy()
    ctx.prec = max(ctx.prec, len(value.as_tuple().digits), value.adjusted() + places + 2)
    return ctx


def _quantize(value: Decimal, places: int) -> Decimal:
    return value.quantize(
        Decimal(1).scaleb(-places),
        rounding=decimal.ROUND_HALF_UP,
        context=_wide_context(value, places),
    )


def _parse(value: Number) -> Union[int, float, Decimal]:
    if isinstance(value, bool):
        raise TypeError("Cannot format a bool as a number")
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError as exc:
            raise ValueError(f"Cannot format non-numeric string {value!r}") from exc
    if isinstance(value, (int, float, Decimal)):
        return value
    raise TypeError(f"Cannot format {type(value).__name__} as a number")


def _render(value: Decimal, min_digits: int, max_digits: int, style: str) -> str:
    text = f"{_quantize(value, max_digits):,f}"
    if max_digits > min_digits and "." in text:
        whole, frac = text.split(".")
        frac = frac.rstrip("0").ljust(min_digits, "0")
        text = f"{whole}.{frac}" if frac else whole
    if style == "currency":
        if text.startswith("-"):
            return f"-{CURRENCY_SYMBOL}{text[1:]}"
        return f"{CURRENCY_SYMBOL}{text}"
    return text


def round_to_first_non_zero_decimal(num: Union[int, float, Decimal]) -> Union[float, Decimal]:
    """Round *num* to as many places as the exponent of its scientific notation.

    Decimals come back as Decimals, everything else as a float.

    >>> round_to_first_non_zero_decimal(0.0005678)
    0.0006
    >>> round_to_first_non_zero_decimal(123.456)
    123.46
    """
    as_decimal = isinstance(num, Decimal)
    shortest = to_decimal(num, "num")
    if shortest.is_zero():
        return Decimal(0) if as_decimal else 0.0

    places = abs(shortest.adjusted())
    # Floats round on their exact binary value, as toFixed-style rounding does.
    exact = Decimal(num) if isinstance(num, float) else shortest
    rounded = _quantize(exact, places)
    return rounded if as_decimal else float(rounded)


def format_number(
    value: Number,
    *,
    style: str = "decimal",
    compact: Union[bool, str] = False,
    fraction_digits: int | None = None,
    adaptive_decimals: bool = False,
) -> str:
    """
    Render *value* for display.

    Parameters
    ----------
    value : int | float | Decimal | str
        Strings are parsed as floats.
    style : str
        ``"decimal"`` or ``"currency"`` (USD, ``$`` prefix).
    compact : bool | "auto"
        ``True`` always abbreviates with K/M/B/T; ``"auto"`` only from
        100,000 upward.
    fraction_digits : int, optional
        Fixed number of decimals.  Defaults to 2, or 1 for compact output.
    adaptive_decimals : bool
        Widen the precision for non-zero values that would otherwise
        render as all zeros.
    """
    if style not in STYLES:
        raise ValueError(f"Unknown style {style!r}; expected one of {STYLES}")
    if compact is not True and compact is not False and compact != "auto":
        raise ValueError(f"compact must be True, False or 'auto', got {compact!r}")
    if fraction_digits is not None and (
        isinstance(fraction_digits, bool)
        or not isinstance(fraction_digits, int)
        or fraction_digits < 0
    ):
        raise ValueError(f"fraction_digits must be a non-negative int, got {fraction_digits!r}")

    number = _parse(value)
    dec = to_decimal(number)
    magnitude = dec.copy_abs()

    use_compact = magnitude >= COMPACT_AUTO_THRESHOLD if compact == "auto" else compact

    if use_compact:
        for exponent, suffix in COMPACT_TIERS:
            if magnitude >= Decimal(1).scaleb(exponent):
                digits = (
                    DEFAULT_COMPACT_FRACTION_DIGITS if fraction_digits is None else fraction_digits
                )
                scaled = dec.scaleb(-exponent, context=_wide_context(dec, 0))
                return _render(scaled, digits, digits, style) + suffix

    digits = DEFAULT_FRACTION_DIGITS if fraction_digits is None else fraction_digits
    use_rounding = (
        adaptive_decimals
        and not dec.is_zero()
        and magnitude < Decimal(1).scaleb(-digits)
    )
    if use_rounding:
        rounded = to_decimal(round_to_first_non_zero_decimal(number))
        return _render(rounded, 0, MAX_ADAPTIVE_FRACTION_DIGITS, style)
    return _render(dec, digits, digits, style)
