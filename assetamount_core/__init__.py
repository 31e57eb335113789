"""
AssetAmount - exact, asset-tagged token amounts with display formatting.

Key features:
- Decimal-backed amounts at microunit (base-unit) resolution
- Explicit standard-unit / microunit conversion
- Asset identity checks on every combining operation
- Explicit rounding modes (half-up, down, up, ceiling, floor)
- Compact (K/M/B/T) and adaptive-decimal number formatting
- Lossless JSON serialization
"""

from assetamount_core.amount import AssetAmount
from assetamount_core.asset import AssetInfo
from assetamount_core.errors import (
    AssetAmountError,
    AssetIdentityMismatch,
    DecimalsMismatch,
    DivisionByZero,
    ZeroPercentageBase,
    ZeroPrice,
)
from assetamount_core.format import format_number, round_to_first_non_zero_decimal
from assetamount_core.precision import RoundingMode

__version__ = "1.0.0"
__all__ = [
    "AssetAmount",
    "AssetInfo",
    "RoundingMode",
    "format_number",
    "round_to_first_non_zero_decimal",
    "AssetAmountError",
    "AssetIdentityMismatch",
    "DecimalsMismatch",
    "DivisionByZero",
    "ZeroPrice",
    "ZeroPercentageBase",
]
