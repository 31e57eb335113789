"""
Asset identity records.

An :class:`AssetInfo` names an asset by ``(id, decimals)``; the optional
unit and display names are cosmetic and never take part in identity
checks.  Instances are frozen, so an amount holding one can never see it
change underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

# Largest integer a JavaScript consumer can read back without loss.
MAX_SAFE_JSON_INT: int = 2 ** 53 - 1


def _parse_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    raise ValueError(f"{field_name} must be a non-negative integer, got {value!r}")


@dataclass(frozen=True)
class AssetInfo:
    """Identity of a fungible asset."""
    id: int
    decimals: int
    unit_name: Optional[str] = None
    display_name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _parse_int(self.id, "Asset id"))
        object.__setattr__(self, "decimals", _parse_int(self.decimals, "Asset decimals"))
        if self.id < 0:
            raise ValueError(f"Asset id must be non-negative, got {self.id}")
        if self.decimals < 0:
            raise ValueError(f"Asset decimals must be non-negative, got {self.decimals}")

    @property
    def key(self) -> tuple[int, int]:
        """The ``(id, decimals)`` pair two amounts must share."""
        return (self.id, self.decimals)

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "id": self.id if self.id <= MAX_SAFE_JSON_INT else str(self.id),
            "decimals": self.decimals,
        }
        if self.unit_name is not None:
            d["unitName"] = self.unit_name
        if self.display_name is not None:
            d["displayName"] = self.display_name
        return d

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AssetInfo":
        if "id" not in data or "decimals" not in data:
            raise ValueError("Asset info requires 'id' and 'decimals'")
        return cls(
            id=data["id"],
            decimals=data["decimals"],
            unit_name=data.get("unitName", data.get("unit_name")),
            display_name=data.get(
                "displayName", data.get("display_name", data.get("name"))
            ),
        )

    @classmethod
    def coerce(cls, value: "AssetInfo | Mapping[str, Any]") -> "AssetInfo":
        """Return *value* as an ``AssetInfo``, copying it out of a mapping if needed."""
        if isinstance(value, AssetInfo):
            return value
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        raise TypeError(f"Expected AssetInfo or mapping, got {type(value).__name__}")
