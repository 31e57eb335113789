"""
TOML-based configuration for hosts embedding AssetAmount.

Loads settings from a TOML file and/or environment variables.
Environment variables take precedence over file values.  Nothing here runs
on import; a host calls ``apply_config`` once at start-up.

Usage:
    from assetamount_core.config import apply_config, load_config
    apply_config(load_config("assetamount.toml"))

Example file:

    [precision]
    decimal_precision = 120

    [logging]
    level = "DEBUG"
    format = "json"
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib  # type: ignore[import]
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[import,no-redef]

from assetamount_core.logging_config import setup_logging
from assetamount_core.precision import DEFAULT_DECIMAL_PRECISION, set_decimal_precision

log = logging.getLogger("assetamount.config")


@dataclass
class PrecisionConfig:
    """Decimal arithmetic settings."""
    decimal_precision: int = DEFAULT_DECIMAL_PRECISION   # significant digits


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass
class AssetAmountConfig:
    """Top-level configuration container."""
    precision: PrecisionConfig = field(default_factory=PrecisionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _merge(dc: Any, raw: dict[str, Any]) -> None:
    """Merge a raw dict into a dataclass instance (in-place)."""
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if hasattr(dc, key_under):
            setattr(dc, key_under, value)
        else:
            log.warning("Ignoring unknown config key %r in [%s]", key, type(dc).__name__)


def load_config(path: str | None = None) -> AssetAmountConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    A missing file yields the defaults.

    Env-var mapping:
        ASSETAMOUNT_DECIMAL_PRECISION -> precision.decimal_precision
        ASSETAMOUNT_LOG_LEVEL         -> logging.level
        ASSETAMOUNT_LOG_FMT           -> logging.format
        ASSETAMOUNT_LOG_FILE          -> logging.file
    """
    cfg = AssetAmountConfig()

    # ── TOML file ────────────────────────────────────────────────
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            for section_name, section_dc in [
                ("precision", cfg.precision),
                ("logging", cfg.logging),
            ]:
                if section_name in data:
                    _merge(section_dc, data[section_name])
            log.debug("Loaded configuration from %s", p, extra={"fields": {"path": str(p)}})
        else:
            log.debug(
                "Config file %s not found, using defaults", p,
                extra={"fields": {"path": str(p)}},
            )

    # ── Environment variable overrides ───────────────────────────
    if v := os.environ.get("ASSETAMOUNT_DECIMAL_PRECISION"):
        try:
            cfg.precision.decimal_precision = int(v)
        except ValueError as exc:
            raise ValueError(f"ASSETAMOUNT_DECIMAL_PRECISION must be an int, got {v!r}") from exc
    if v := os.environ.get("ASSETAMOUNT_LOG_LEVEL"):
        cfg.logging.level = v.upper()
    if v := os.environ.get("ASSETAMOUNT_LOG_FMT"):
        cfg.logging.format = v
    if v := os.environ.get("ASSETAMOUNT_LOG_FILE"):
        cfg.logging.file = v

    return cfg


def apply_config(cfg: AssetAmountConfig) -> None:
    """Install *cfg*: configure logging, then the decimal context."""
    setup_logging(
        level=cfg.logging.level,
        fmt=cfg.logging.format,
        log_file=cfg.logging.file,
    )
    set_decimal_precision(cfg.precision.decimal_precision)
