"""
Precision constants and helpers for AssetAmount.

Every amount is backed by :class:`decimal.Decimal`.  Arithmetic runs in a
library-owned :class:`decimal.Context` rather than the thread's ambient
context, so a caller's ``localcontext()`` never changes our results:

    1 standard unit = 10 ** decimals microunits

Floats are converted through their shortest round-trip ``repr`` so that a
literal such as ``5.512345`` means exactly what it reads as.
"""

from __future__ import annotations

import decimal
import logging
import math
from decimal import Decimal
from enum import Enum
from typing import Union

log = logging.getLogger("assetamount.precision")

# Significant digits kept by inexact results (currency conversion,
# percentages).  Exact microunit arithmetic widens past it as needed.
DEFAULT_DECIMAL_PRECISION: int = 100

# Below this a currency conversion cannot resolve a uint64 count at 18 decimals.
MIN_DECIMAL_PRECISION: int = 28

Numeric = Union[Decimal, int, float, str]


def _make_context(prec: int) -> decimal.Context:
    return decimal.Context(
        prec=prec,
        rounding=decimal.ROUND_HALF_EVEN,
        traps=[decimal.InvalidOperation, decimal.Overflow, decimal.DivisionByZero],
    )


_context: decimal.Context = _make_context(DEFAULT_DECIMAL_PRECISION)


def get_context() -> decimal.Context:
    """Return the decimal context used for all amount arithmetic."""
    return _context


def exact_context(*operands: Decimal) -> decimal.Context:
    """Library context widened so ``+ - * //`` and ``scaleb`` on *operands* never round."""
    ctx = get_context().copy()
    width = 0
    for value in operands:
        _, digits, exponent = value.as_tuple()
        width += len(digits) + abs(exponent)
    ctx.prec = max(ctx.prec, width + 2)
    return ctx


def set_decimal_precision(prec: int) -> None:
    """Replace the library context with one carrying *prec* digits."""
    global _context
    if isinstance(prec, bool) or not isinstance(prec, int):
        raise TypeError(f"Decimal precision must be an int, got {type(prec).__name__}")
    if prec < MIN_DECIMAL_PRECISION:
        raise ValueError(
            f"Decimal precision must be at least {MIN_DECIMAL_PRECISION}, got {prec}"
        )
    if prec != _context.prec:
        log.info(
            "Decimal precision changed from %d to %d digits", _context.prec, prec,
            extra={"fields": {"old_precision": _context.prec, "new_precision": prec}},
        )
    _context = _make_context(prec)


class RoundingMode(str, Enum):
    """Closed set of rounding modes accepted by :meth:`AssetAmount.round`."""

    HALF_UP = "half_up"      # ties away from zero
    DOWN = "down"            # toward zero
    UP = "up"                # away from zero
    CEILING = "ceiling"      # toward +infinity
    FLOOR = "floor"          # toward -infinity

    @property
    def decimal_rounding(self) -> str:
        return _DECIMAL_ROUNDING[self]


_DECIMAL_ROUNDING = {
    RoundingMode.HALF_UP: decimal.ROUND_HALF_UP,
    RoundingMode.DOWN: decimal.ROUND_DOWN,
    RoundingMode.UP: decimal.ROUND_UP,
    RoundingMode.CEILING: decimal.ROUND_CEILING,
    RoundingMode.FLOOR: decimal.ROUND_FLOOR,
}


def to_decimal(value: Numeric, what: str = "value") -> Decimal:
    """Convert *value* to a finite :class:`Decimal` without going through binary float.

    >>> to_decimal(5.512345)
    Decimal('5.512345')
    >>> to_decimal("1e3")
    Decimal('1E+3')
    """
    if isinstance(value, bool):
        raise TypeError(f"{what} must be numeric, got bool")
    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, int):
        dec = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{what} must be finite, got {value!r}")
        dec = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            dec = Decimal(value.strip().replace("_", ""))
        except decimal.InvalidOperation as exc:
            raise ValueError(f"Invalid {what}: {value!r}") from exc
    else:
        raise TypeError(
            f"{what} must be int, float, str or Decimal, got {type(value).__name__}"
        )
    if not dec.is_finite():
        raise ValueError(f"{what} must be finite, got {value!r}")
    return dec


def truncate(value: Decimal) -> Decimal:
    """Drop the fractional part of *value*, rounding toward zero."""
    return value.to_integral_value(rounding=decimal.ROUND_DOWN)


def plain(value: Decimal) -> str:
    """Render *value* in positional notation (never ``1E+6``)."""
    if value.is_zero():
        return "0"
    return format(value, "f")


def strip_zeros(value: Decimal) -> Decimal:
    """Remove trailing fractional zeros while keeping positional notation.

    >>> strip_zeros(Decimal("5.500000"))
    Decimal('5.5')
    >>> strip_zeros(Decimal("1E+1"))
    Decimal('10')
    """
    if value.is_zero():
        return Decimal(0)
    ctx = exact_context(value)
    normalized = value.normalize(ctx)
    if normalized.as_tuple().exponent > 0:
        return normalized.quantize(Decimal(1), context=ctx)
    return normalized
