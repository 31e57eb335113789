"""
Exceptions raised by AssetAmount operations.

All of them are synchronous validation failures raised at the offending
call; nothing is retried, defaulted or logged.  Identity mismatches are
contract violations (two different assets were combined).  The zero-valued
divisor cases are ordinary data errors and additionally subclass
``ZeroDivisionError``.
"""

from __future__ import annotations


class AssetAmountError(ValueError):
    """Base class for every AssetAmount failure."""


class AssetIdentityMismatch(AssetAmountError):
    """Two amounts with different asset IDs were combined or ordered."""

    def __init__(self, action: str, left_id: int, right_id: int):
        self.action = action
        self.left_id = left_id
        self.right_id = right_id
        super().__init__(
            f"Cannot {action} AssetAmounts with different asset IDs "
            f"({left_id} and {right_id})"
        )


class DecimalsMismatch(AssetAmountError):
    """Same asset ID but a different decimal scale."""

    def __init__(self, action: str, left_decimals: int, right_decimals: int):
        self.action = action
        self.left_decimals = left_decimals
        self.right_decimals = right_decimals
        super().__init__(
            f"Cannot {action} AssetAmounts with different decimals "
            f"({left_decimals} and {right_decimals})"
        )


class DivisionByZero(AssetAmountError, ZeroDivisionError):
    """``AssetAmount.divide`` was given a zero scalar."""

    def __init__(self, message: str = "Division by zero"):
        super().__init__(message)


class ZeroPrice(AssetAmountError, ZeroDivisionError):
    """``AssetAmount.from_currency`` was given a zero unit price."""

    def __init__(self, message: str = "Asset price cannot be zero"):
        super().__init__(message)


class ZeroPercentageBase(AssetAmountError, ZeroDivisionError):
    """``AssetAmount.percentage_of`` was asked for a percentage of zero."""

    def __init__(self, message: str = "Cannot calculate percentage of zero"):
        super().__init__(message)
