"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import decimal
import logging
import os
import re
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FeesConfig:
    oazo_fee: Decimal = Decimal("0.002")
    flash_loan_fee: Decimal = Decimal("0")
    slippage: Decimal = Decimal("0.005")


@dataclass(frozen=True)
class AppConfig:
    fees: FeesConfig = field(default_factory=FeesConfig)
    precision: int = 28
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _decimal(raw: dict[str, Any], key: str, default: Decimal) -> Decimal:
    """Read a rate from YAML; an unset env var leaves the default in place."""
    value = raw.get(key)
    if value is None or value == "":
        return default
    try:
        # YAML hands back floats; go through their repr, never the binary value.
        return Decimal(str(value))
    except decimal.InvalidOperation as e:
        raise ValueError(f"'{key}' is not a number: {value!r}") from e


def _build_fees(raw: dict[str, Any]) -> FeesConfig:
    return FeesConfig(
        oazo_fee=_decimal(raw, "oazo_fee", FeesConfig.oazo_fee),
        flash_loan_fee=_decimal(raw, "flash_loan_fee", FeesConfig.flash_loan_fee),
        slippage=_decimal(raw, "slippage", FeesConfig.slippage),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        fees=_build_fees(raw.get("fees") or {}),
        precision=int(raw.get("precision") or 28),
        log_level=str(raw.get("log_level") or "INFO").upper(),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    for name in ("oazo_fee", "flash_loan_fee", "slippage"):
        if getattr(cfg.fees, name) < 0:
            raise ValueError(f"Fee '{name}' must not be negative")
    if cfg.fees.slippage >= 1:
        raise ValueError("Slippage must be below 1")
    if cfg.precision < 1:
        raise ValueError("Decimal precision must be at least 1")
    if cfg.log_level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{cfg.log_level}'")


def apply_precision(cfg: AppConfig) -> None:
    """Set the process-wide decimal precision from *cfg*."""
    decimal.getcontext().prec = cfg.precision
