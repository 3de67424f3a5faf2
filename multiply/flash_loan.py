"""Flash-loan skip heuristic.

Solve once with the real flash-loan fee. If the vault would already sit above
its minimum ratio without the flash loan, the fee is wasted: solve again with
the fee set to zero and report ``skip_fl``. Two solves at most, no iteration.
"""
from __future__ import annotations

import logging

from .models import DesiredCDPState, MarketParams, VaultInfo
from .numeric import ZERO, coll_ratio
from .solver import DeltaSolution, solve_decrease, solve_increase

logger = logging.getLogger(__name__)


def _solve_increase(
    market: MarketParams, vault: VaultInfo, desired: DesiredCDPState
) -> DeltaSolution:
    return solve_increase(
        market.oracle_price,
        market.market_price,
        market.oazo_fee,
        market.flash_loan_fee,
        vault.current_collateral + desired.provided_collateral,
        vault.current_debt - desired.provided_dai,
        desired.required_coll_ratio,
        market.slippage,
        desired.provided_dai,
    )


def _solve_decrease(
    market: MarketParams, vault: VaultInfo, desired: DesiredCDPState
) -> DeltaSolution:
    return solve_decrease(
        market.oracle_price,
        market.market_price,
        market.oazo_fee,
        market.flash_loan_fee,
        vault.current_collateral - desired.withdraw_coll,
        vault.current_debt + desired.withdraw_dai,
        desired.required_coll_ratio,
        market.slippage,
        desired.provided_dai,
    )


def calculate_increase(
    market: MarketParams, vault: VaultInfo, desired: DesiredCDPState
) -> tuple[DeltaSolution, bool]:
    """Increase leverage, skipping the flash loan when existing collateral suffices."""
    candidate = _solve_increase(market, vault, desired)

    # Pre-trade collateral against post-trade debt.
    ratio = coll_ratio(
        vault.current_collateral,
        market.oracle_price,
        vault.current_debt + candidate.debt_delta,
    )
    if ratio > vault.min_coll_ratio:
        logger.debug(
            "Skipping flash loan on increase: ratio %s above minimum %s",
            ratio, vault.min_coll_ratio,
        )
        return _solve_increase(market.with_flash_loan_fee(ZERO), vault, desired), True
    return candidate, False


def calculate_decrease(
    market: MarketParams, vault: VaultInfo, desired: DesiredCDPState
) -> tuple[DeltaSolution, bool]:
    """Decrease leverage, skipping the flash loan when the remaining collateral suffices."""
    candidate = _solve_decrease(market, vault, desired)

    # Approximate, and more restrictive than needed: debt is left unreduced.
    ratio = coll_ratio(
        vault.current_collateral - candidate.collateral_delta,
        market.oracle_price,
        vault.current_debt,
    )
    if ratio > vault.min_coll_ratio:
        logger.debug(
            "Skipping flash loan on decrease: ratio %s above minimum %s",
            ratio, vault.min_coll_ratio,
        )
        return _solve_decrease(market.with_flash_loan_fee(ZERO), vault, desired), True
    return candidate, False
