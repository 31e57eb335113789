"""
Exact, asset-tagged amounts.

An :class:`AssetAmount` holds a quantity of one asset in microunits (base
units) as a :class:`decimal.Decimal`, together with the :class:`AssetInfo`
it belongs to:

    1 standard unit = 10 ** asset.decimals microunits

The raw value may carry fractional microunits produced by division or
currency conversion; nothing is discarded until :attr:`micro_units` is
read, which truncates toward zero.

Amounts of different assets never mix.  ``add``, ``subtract``,
``percentage_of`` and the ordering comparisons raise
:class:`AssetIdentityMismatch` or :class:`DecimalsMismatch` when the
``(id, decimals)`` pairs differ, while ``equals`` simply answers ``False``.

Usage:
    from assetamount_core import AssetAmount, AssetInfo
    usdc = AssetInfo(id=31566704, decimals=6, unit_name="USDC")
    amt = AssetAmount.from_standard_units(usdc, "5.5")
    amt.micro_units            # 5500000
    str(amt.add(amt))          # '11 USDC (11,000,000 microunits)'
"""

from __future__ import annotations

import decimal
import json
import re
from decimal import Decimal
from typing import Any, ContextManager, Mapping, Optional, Union

from assetamount_core.asset import AssetInfo
from assetamount_core.errors import (
    AssetIdentityMismatch,
    DecimalsMismatch,
    DivisionByZero,
    ZeroPercentageBase,
    ZeroPrice,
)
from assetamount_core.format import format_number
from assetamount_core.precision import (
    Numeric,
    RoundingMode,
    exact_context,
    get_context,
    plain,
    strip_zeros,
    to_decimal,
    truncate,
)

AssetLike = Union[AssetInfo, Mapping[str, Any]]

_TRAILING_ZEROS = re.compile(r"\.?0+$")


def _arith(*operands: Decimal) -> ContextManager[decimal.Context]:
    """Per-call library context; exact when *operands* are given."""
    if operands:
        return decimal.localcontext(exact_context(*operands))
    return decimal.localcontext(get_context())


class AssetAmount:
    """Immutable quantity of a single asset, exact to the microunit."""

    __slots__ = ("_asset", "_micro")

    def __init__(
        self,
        asset_info: AssetLike,
        *,
        standard_units: Optional[Numeric] = None,
        micro_units: Optional[Numeric] = None,
    ):
        if (standard_units is None) == (micro_units is None):
            raise ValueError("Specify exactly one of standard_units or micro_units")
        asset = AssetInfo.coerce(asset_info)
        if standard_units is not None:
            value = to_decimal(standard_units, "standard_units")
            with _arith(value):
                micro = truncate(value.scaleb(asset.decimals))
        else:
            micro = to_decimal(micro_units, "micro_units")
        object.__setattr__(self, "_asset", asset)
        object.__setattr__(self, "_micro", micro)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # Copies share the instance; pickles rebuild through from_micro_units.

    def __copy__(self) -> "AssetAmount":
        return self

    def __deepcopy__(self, memo: dict) -> "AssetAmount":
        return self

    def __reduce__(self) -> tuple:
        return (type(self).from_micro_units, (self._asset, self._micro))

    def _with_micro(self, micro: Decimal) -> "AssetAmount":
        obj = object.__new__(type(self))
        object.__setattr__(obj, "_asset", self._asset)
        object.__setattr__(obj, "_micro", micro)
        return obj

    # ── Named constructors ─────────────────────────────────────────

    @classmethod
    def from_standard_units(cls, asset_info: AssetLike, value: Numeric) -> "AssetAmount":
        """Amount of *value* standard units; sub-microunit precision is dropped."""
        return cls(asset_info, standard_units=value)

    @classmethod
    def from_micro_units(cls, asset_info: AssetLike, value: Numeric) -> "AssetAmount":
        """Amount of *value* microunits, stored exactly as given."""
        return cls(asset_info, micro_units=value)

    @classmethod
    def zero(cls, asset_info: AssetLike) -> "AssetAmount":
        return cls(asset_info, micro_units=0)

    @classmethod
    def from_currency(
        cls,
        asset_info: AssetLike,
        currency_amount: Numeric,
        unit_price: Numeric,
    ) -> "AssetAmount":
        """How much of the asset *currency_amount* buys at *unit_price* per standard unit.

        >>> AssetAmount.from_currency({"id": 1, "decimals": 6}, 100, 10).standard_units
        10.0
        """
        currency = to_decimal(currency_amount, "currency_amount")
        price = to_decimal(unit_price, "unit_price")
        if price.is_zero():
            raise ZeroPrice()
        with _arith():
            standard = currency / price
        return cls.from_standard_units(asset_info, standard)

    # ── Accessors ──────────────────────────────────────────────────

    @property
    def asset_info(self) -> AssetInfo:
        return self._asset

    @property
    def asset_id(self) -> int:
        return self._asset.id

    @property
    def decimals(self) -> int:
        return self._asset.decimals

    @property
    def micro_units(self) -> int:
        """Integer microunits, truncated toward zero."""
        return int(self._micro)

    @property
    def micro_decimal(self) -> Decimal:
        """Raw microunits at full precision."""
        return self._micro

    @property
    def standard_units(self) -> float:
        """Standard units as a float.

        Lossy once the magnitude exceeds float precision; use
        :attr:`standard_decimal` where exactness matters.
        """
        return self.micro_units / 10 ** self.decimals

    @property
    def standard_decimal(self) -> Decimal:
        """Standard units at full precision."""
        with _arith(self._micro):
            return self._micro.scaleb(-self.decimals)

    # ── Arithmetic ─────────────────────────────────────────────────

    def _check_same_asset(self, other: "AssetAmount", action: str) -> None:
        if not isinstance(other, AssetAmount):
            raise TypeError(f"Cannot {action} AssetAmount and {type(other).__name__}")
        if self.asset_id != other.asset_id:
            raise AssetIdentityMismatch(action, self.asset_id, other.asset_id)
        if self.decimals != other.decimals:
            raise DecimalsMismatch(action, self.decimals, other.decimals)

    def add(self, other: "AssetAmount") -> "AssetAmount":
        self._check_same_asset(other, "add")
        with _arith(self._micro, other._micro):
            return self._with_micro(self._micro + other._micro)

    def subtract(self, other: "AssetAmount") -> "AssetAmount":
        self._check_same_asset(other, "subtract")
        with _arith(self._micro, other._micro):
            return self._with_micro(self._micro - other._micro)

    def multiply(self, scalar: Numeric) -> "AssetAmount":
        """Scale by a dimensionless factor, truncating to whole microunits."""
        factor = to_decimal(scalar, "scalar")
        with _arith(self._micro, factor):
            return self._with_micro(truncate(self._micro * factor))

    def divide(self, scalar: Numeric) -> "AssetAmount":
        """Divide by a dimensionless factor, truncating to whole microunits."""
        divisor = to_decimal(scalar, "scalar")
        if divisor.is_zero():
            raise DivisionByZero()
        with _arith(self._micro, divisor):
            # Decimal floor division truncates toward zero and is exact.
            return self._with_micro(self._micro // divisor)

    def round(
        self,
        decimal_places: int = 0,
        rounding: Union[RoundingMode, str] = RoundingMode.HALF_UP,
    ) -> "AssetAmount":
        """
        Round to *decimal_places* standard-unit decimals.

        Works on the integer microunit view.  Asking for at least as many
        places as the asset has is a no-op: the asset scale already bounds
        the precision.
        """
        if isinstance(decimal_places, bool) or not isinstance(decimal_places, int):
            raise TypeError("decimal_places must be an int")
        if decimal_places < 0:
            raise ValueError(f"decimal_places must be non-negative, got {decimal_places}")
        mode = RoundingMode(rounding)
        if decimal_places >= self.decimals:
            return self

        digits_to_remove = self.decimals - decimal_places
        micro = Decimal(self.micro_units)
        with _arith(micro):
            quotient = micro.scaleb(-digits_to_remove)
            rounded = quotient.to_integral_value(rounding=mode.decimal_rounding)
            return self._with_micro(rounded.scaleb(digits_to_remove))

    def percentage_of(self, other: "AssetAmount") -> float:
        """This amount as a percentage of *other* (25 means 25%)."""
        self._check_same_asset(other, "compare")
        if other.is_zero():
            raise ZeroPercentageBase()
        with _arith():
            return float(self._micro / other._micro * 100)

    # ── Comparisons ────────────────────────────────────────────────

    def is_zero(self) -> bool:
        return self._micro.is_zero()

    def is_positive(self) -> bool:
        """True unless negative; zero counts as positive."""
        return not self.is_negative()

    def is_negative(self) -> bool:
        return self._micro < 0

    def is_greater_than(self, other: "AssetAmount") -> bool:
        self._check_same_asset(other, "compare")
        return self._micro > other._micro

    def is_less_than(self, other: "AssetAmount") -> bool:
        self._check_same_asset(other, "compare")
        return self._micro < other._micro

    def is_greater_or_equal(self, other: "AssetAmount") -> bool:
        self._check_same_asset(other, "compare")
        return self._micro >= other._micro

    def is_less_or_equal(self, other: "AssetAmount") -> bool:
        self._check_same_asset(other, "compare")
        return self._micro <= other._micro

    def equals(self, other: "AssetAmount") -> bool:
        """Exact equality; amounts of different assets are simply unequal."""
        return (
            isinstance(other, AssetAmount)
            and self._asset.key == other._asset.key
            and self._micro == other._micro
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AssetAmount):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self.asset_id, self.decimals, self._micro))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AssetAmount):
            return NotImplemented
        return self.is_less_than(other)

    def __le__(self, other: object) -> bool:
        if not isinstance(other, AssetAmount):
            return NotImplemented
        return self.is_less_or_equal(other)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, AssetAmount):
            return NotImplemented
        return self.is_greater_than(other)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, AssetAmount):
            return NotImplemented
        return self.is_greater_or_equal(other)

    def __add__(self, other: object) -> "AssetAmount":
        if not isinstance(other, AssetAmount):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> "AssetAmount":
        if not isinstance(other, AssetAmount):
            return NotImplemented
        return self.subtract(other)

    # ── Display ────────────────────────────────────────────────────

    def format(
        self,
        *,
        show_symbol: bool = False,
        symbol: Optional[str] = None,
        decimal_places: Optional[int] = None,
        show_micro_units: bool = False,
        trim_zeroes: bool = True,
    ) -> str:
        """
        Human-readable standard units.

        >>> amt = AssetAmount.from_micro_units({"id": 1, "decimals": 6, "unitName": "XYZ"}, 5500000)
        >>> amt.format()
        '5.5'
        >>> amt.format(show_symbol=True, trim_zeroes=False)
        '5.500000 XYZ'
        >>> amt.format(show_micro_units=True)
        '5.5 (5,500,000 microunits)'
        """
        places = self.decimals if decimal_places is None else decimal_places
        formatted = format_number(
            self.standard_decimal,
            fraction_digits=places,
            adaptive_decimals=trim_zeroes,
        )
        if trim_zeroes and "." in formatted:
            formatted = _TRAILING_ZEROS.sub("", formatted)

        result = formatted
        if show_symbol:
            label = symbol or self._asset.unit_name or ""
            if label:
                result = f"{result} {label}"
        if show_micro_units:
            micro = format_number(self.micro_units, fraction_digits=0, adaptive_decimals=True)
            result += f" ({micro} microunits)"
        return result

    def to_string(self) -> str:
        standard = f"{strip_zeros(self.standard_decimal):,f}"
        unit = f" {self._asset.unit_name}" if self._asset.unit_name else ""
        return f"{standard}{unit} ({self.micro_units:,} microunits)"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return (
            f"AssetAmount(id={self.asset_id}, decimals={self.decimals}, "
            f"micro_units='{plain(self._micro)}')"
        )

    def to_float(self) -> float:
        """Integer microunits as a float.

        Loses precision above 2**53 microunits.  Only meant for hosts that
        need a plain number; prefer :attr:`micro_units` or
        :attr:`micro_decimal`.
        """
        return float(self.micro_units)

    # ── Serialization ──────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "identity": self._asset.to_dict(),
            "microUnits": plain(self._micro),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AssetAmount":
        identity = data.get("identity", data.get("assetInfo"))
        if identity is None or "microUnits" not in data:
            raise ValueError("Serialized amount requires 'identity' and 'microUnits'")
        micro = data["microUnits"]
        if isinstance(micro, float):
            raise ValueError("microUnits must be a decimal string, not a float")
        return cls.from_micro_units(identity, micro)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "AssetAmount":
        return cls.from_dict(json.loads(text))
