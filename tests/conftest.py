"""
Shared pytest fixtures for the AssetAmount test suite.
"""

import pytest

from assetamount_core import precision
from assetamount_core.amount import AssetAmount
from assetamount_core.asset import AssetInfo


@pytest.fixture(autouse=True)
def _restore_decimal_precision():
    """Undo any precision change a test makes to the library context."""
    before = precision.get_context().prec
    yield
    precision.set_decimal_precision(before)


@pytest.fixture
def asset_info():
    """6-decimal asset with a unit name."""
    return AssetInfo(id=123, decimals=6, unit_name="XYZ")


@pytest.fixture
def other_asset():
    """Different asset id, same scale."""
    return AssetInfo(id=456, decimals=6, unit_name="ABC")


@pytest.fixture
def rescaled_asset():
    """Same asset id as ``asset_info`` but 8 decimals."""
    return AssetInfo(id=123, decimals=8, unit_name="XYZ")


@pytest.fixture
def five_and_a_half(asset_info):
    """5.5 XYZ."""
    return AssetAmount.from_standard_units(asset_info, 5.5)
