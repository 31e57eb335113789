"""
Tests for assetamount_core.precision: the decimal context and conversions.

Amount arithmetic runs in a library-owned context:

    default precision = 100 significant digits, minimum 28

Tests cover input conversion, the rounding-mode enum, precision changes,
and the positional rendering helpers.
"""

import decimal
import logging
from decimal import Decimal

import pytest

from assetamount_core import precision
from assetamount_core.amount import AssetAmount
from assetamount_core.precision import (
    DEFAULT_DECIMAL_PRECISION,
    MIN_DECIMAL_PRECISION,
    RoundingMode,
    exact_context,
    get_context,
    plain,
    set_decimal_precision,
    strip_zeros,
    to_decimal,
    truncate,
)


# ═══════════════════════════════════════════════════════════════════════
#  to_decimal
# ═══════════════════════════════════════════════════════════════════════


class TestToDecimal:
    """Input conversion never goes through the binary float expansion."""

    def test_decimal_passthrough(self):
        d = Decimal("1.25")
        assert to_decimal(d) is d

    def test_int_exact(self):
        assert to_decimal(2 ** 80) == Decimal(2 ** 80)

    def test_float_uses_shortest_repr(self):
        assert to_decimal(5.512345) == Decimal("5.512345")
        assert to_decimal(0.1) == Decimal("0.1")

    def test_string(self):
        assert to_decimal(" 1_000.50 ") == Decimal("1000.50")
        assert to_decimal("1e3") == Decimal("1000")

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "-Infinity", float("nan"), float("-inf")])
    def test_rejects_unparsable_and_non_finite(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)

    def test_decimal_nan_rejected(self):
        with pytest.raises(ValueError):
            to_decimal(Decimal("NaN"))

    @pytest.mark.parametrize("value", [True, False, None, [1], 1j])
    def test_rejects_other_types(self, value):
        with pytest.raises(TypeError):
            to_decimal(value)

    def test_error_names_the_argument(self):
        with pytest.raises(ValueError, match="unit_price"):
            to_decimal("x", "unit_price")


# ═══════════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════════


class TestHelpers:

    @pytest.mark.parametrize("value,expected", [
        ("5.9", "5"),
        ("-5.9", "-5"),
        ("0.999", "0"),
        ("1E+3", "1E+3"),
    ])
    def test_truncate(self, value, expected):
        assert truncate(Decimal(value)) == Decimal(expected)

    def test_plain_never_uses_exponent(self):
        assert plain(Decimal("5.5E+6")) == "5500000"
        assert plain(Decimal("1E-7")) == "0.0000001"

    def test_plain_zero(self):
        assert plain(Decimal("0E+5")) == "0"
        assert plain(Decimal("-0")) == "0"

    def test_strip_zeros(self):
        assert str(strip_zeros(Decimal("5.500000"))) == "5.5"
        assert str(strip_zeros(Decimal("1E+1"))) == "10"
        assert str(strip_zeros(Decimal("0.000"))) == "0"
        assert str(strip_zeros(Decimal("-120.0"))) == "-120"


# ═══════════════════════════════════════════════════════════════════════
#  RoundingMode
# ═══════════════════════════════════════════════════════════════════════


class TestRoundingMode:

    def test_members(self):
        assert {m.value for m in RoundingMode} == {"half_up", "down", "up", "ceiling", "floor"}

    def test_decimal_mapping(self):
        assert RoundingMode.HALF_UP.decimal_rounding == decimal.ROUND_HALF_UP
        assert RoundingMode.DOWN.decimal_rounding == decimal.ROUND_DOWN
        assert RoundingMode.UP.decimal_rounding == decimal.ROUND_UP
        assert RoundingMode.CEILING.decimal_rounding == decimal.ROUND_CEILING
        assert RoundingMode.FLOOR.decimal_rounding == decimal.ROUND_FLOOR

    def test_lookup_by_value(self):
        assert RoundingMode("ceiling") is RoundingMode.CEILING

    def test_unknown(self):
        with pytest.raises(ValueError):
            RoundingMode("half_even")


# ═══════════════════════════════════════════════════════════════════════
#  Decimal precision
# ═══════════════════════════════════════════════════════════════════════


class TestDecimalPrecision:

    def test_default(self):
        assert get_context().prec == DEFAULT_DECIMAL_PRECISION

    def test_traps(self):
        ctx = get_context()
        assert ctx.traps[decimal.InvalidOperation]
        assert ctx.traps[decimal.Overflow]
        assert ctx.traps[decimal.DivisionByZero]

    def test_set(self):
        set_decimal_precision(150)
        assert get_context().prec == 150

    def test_minimum_accepted(self):
        set_decimal_precision(MIN_DECIMAL_PRECISION)
        assert get_context().prec == MIN_DECIMAL_PRECISION

    def test_below_minimum(self):
        with pytest.raises(ValueError):
            set_decimal_precision(MIN_DECIMAL_PRECISION - 1)

    @pytest.mark.parametrize("value", [50.0, "50", True])
    def test_non_int(self, value):
        with pytest.raises(TypeError):
            set_decimal_precision(value)

    def test_change_is_logged(self, caplog):
        logger = logging.getLogger("assetamount")
        propagate = logger.propagate
        logger.propagate = True
        try:
            with caplog.at_level(logging.INFO, logger="assetamount.precision"):
                set_decimal_precision(120)
        finally:
            logger.propagate = propagate
        assert "Decimal precision changed" in caplog.text

    def test_ambient_context_ignored(self):
        info = {"id": 1, "decimals": 6}
        with decimal.localcontext() as ctx:
            ctx.prec = 3
            ctx.rounding = decimal.ROUND_FLOOR
            amount = AssetAmount.from_micro_units(info, 123_456_789).multiply("1.000001")
        assert amount.micro_units == 123_456_912

    def test_precision_applies_to_arithmetic(self):
        info = {"id": 1, "decimals": 30}
        assert AssetAmount.from_currency(info, 1, 3).micro_units == int("3" * 30)

        set_decimal_precision(MIN_DECIMAL_PRECISION)
        assert precision.get_context().prec == MIN_DECIMAL_PRECISION
        # 28 significant digits, the last two places are lost
        assert AssetAmount.from_currency(info, 1, 3).micro_units == int("3" * 28 + "00")

    def test_exact_context_keeps_configured_precision_for_small_operands(self):
        ctx = exact_context(Decimal("5500000"), Decimal("3"))
        assert ctx.prec == DEFAULT_DECIMAL_PRECISION
        assert ctx is not get_context()

    def test_exact_context_widens_for_long_operands(self):
        set_decimal_precision(MIN_DECIMAL_PRECISION)
        wide = Decimal("1" + "0" * 40 + ".5")
        ctx = exact_context(wide, Decimal(7))
        assert ctx.prec > MIN_DECIMAL_PRECISION
        assert ctx.traps[decimal.InvalidOperation]
        assert get_context().prec == MIN_DECIMAL_PRECISION
        assert ctx.multiply(wide, Decimal(7)) == Decimal("7" + "0" * 39 + "3.5")

    def test_strip_zeros_beyond_precision(self):
        set_decimal_precision(MIN_DECIMAL_PRECISION)
        value = Decimal("1" + "0" * 40 + ".000001000")
        assert strip_zeros(value) == Decimal("1" + "0" * 40 + ".000001")
        assert plain(strip_zeros(Decimal("1E+40"))) == "1" + "0" * 40
