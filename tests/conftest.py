"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from decimal import Decimal
from pathlib import Path
from typing import Callable

import pytest

from multiply.config import AppConfig, FeesConfig
from multiply.models import DesiredCDPState, MarketParams, VaultInfo


# ---------------------------------------------------------------------------
# Market fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def ff_only_market() -> MarketParams:
    """No oazo fee, no slippage, no price divergence, 50% flash-loan fee."""
    return MarketParams(
        oracle_price=3000,
        market_price=3000,
        oazo_fee=0,
        flash_loan_fee="0.5",
        slippage=0,
    )


@pytest.fixture()
def realistic_market() -> MarketParams:
    return MarketParams(
        oracle_price=3000,
        market_price="3010",
        oazo_fee="0.002",
        flash_loan_fee="0.0009",
        slippage="0.01",
    )


# ---------------------------------------------------------------------------
# Vault fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def vault() -> VaultInfo:
    """10 collateral at 3000 against 10000 debt: ratio 3, liquidation at 1.5."""
    return VaultInfo(current_collateral=10, current_debt=10000, min_coll_ratio="1.5")


@pytest.fixture()
def debt_free_vault() -> VaultInfo:
    return VaultInfo(current_collateral=10, current_debt=0, min_coll_ratio="1.5")


@pytest.fixture()
def rebalance_to() -> Callable[[str | int], DesiredCDPState]:
    """Factory for a pure ratio rebalance."""

    def _make(ratio: str | int) -> DesiredCDPState:
        return DesiredCDPState(required_coll_ratio=ratio)

    return _make


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_app_config() -> AppConfig:
    return AppConfig(
        fees=FeesConfig(
            oazo_fee=Decimal("0.002"),
            flash_loan_fee=Decimal("0.0009"),
            slippage=Decimal("0.01"),
        ),
        precision=40,
        log_level="DEBUG",
    )


SAMPLE_YAML = textwrap.dedent("""\
    fees:
      oazo_fee: 0.002
      flash_loan_fee: "0.0009"
      slippage: 0.01
    precision: 40
    log_level: debug
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
