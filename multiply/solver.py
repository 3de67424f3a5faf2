"""Delta solver — closed-form deltas for increasing or decreasing leverage.

Both directions solve one linear equation that lands the position exactly on
the target collateralization ratio once the swap fee, the flash-loan fee and
slippage are accounted for.

Increase: borrow ``X`` of the debt asset, swap ``X·(1-OF)`` into collateral at
``market·(1+slippage)``::

    (collateral + bought) · oracle = target · (debt + X + FF·X)

Decrease: repay ``D`` of debt, sell ``Z`` of collateral at
``market·(1-slippage)``; the proceeds cover ``D`` plus both fees on ``D``::

    Z · market · (1-slippage) = D · (1 + OF + FF)
    (collateral - Z) · oracle = target · (debt - D)

The returned quantities are magnitudes; the dispatcher applies the sign.
Callers net any deposit or withdrawal into ``collateral``/``debt`` first.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from .numeric import ONE, ZERO, safe_div

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeltaSolution:
    """Unsigned solver output."""

    debt_delta: Decimal
    collateral_delta: Decimal
    oazo_fee: Decimal
    loan_fee: Decimal

    @property
    def is_feasible(self) -> bool:
        return self.debt_delta >= ZERO and self.collateral_delta >= ZERO


def solve_increase(
    oracle_price: Decimal,
    market_price: Decimal,
    oazo_fee: Decimal,
    flash_loan_fee: Decimal,
    collateral: Decimal,
    debt: Decimal,
    target_ratio: Decimal,
    slippage: Decimal,
    provided_debt_asset: Decimal = ZERO,
) -> DeltaSolution:
    """Debt to borrow and collateral to buy to bring the ratio down to *target_ratio*."""
    buy_price = market_price * (ONE + slippage)
    received_per_unit = safe_div((ONE - oazo_fee) * oracle_price, buy_price, "increase buy price")
    denominator = received_per_unit - target_ratio * (ONE + flash_loan_fee)

    borrowed = safe_div(
        target_ratio * debt - collateral * oracle_price,
        denominator,
        "increase debt delta",
    )
    bought = borrowed * (ONE - oazo_fee) / buy_price

    logger.debug(
        "increase: collateral=%s debt=%s provided=%s target=%s -> borrow=%s buy=%s",
        collateral, debt, provided_debt_asset, target_ratio, borrowed, bought,
    )
    return DeltaSolution(
        debt_delta=borrowed,
        collateral_delta=bought,
        oazo_fee=borrowed * oazo_fee,
        loan_fee=borrowed * flash_loan_fee,
    )


def solve_decrease(
    oracle_price: Decimal,
    market_price: Decimal,
    oazo_fee: Decimal,
    flash_loan_fee: Decimal,
    collateral: Decimal,
    debt: Decimal,
    target_ratio: Decimal,
    slippage: Decimal,
    provided_debt_asset: Decimal = ZERO,
) -> DeltaSolution:
    """Debt to repay and collateral to sell to bring the ratio up to *target_ratio*."""
    sell_price = market_price * (ONE - slippage)
    fee_multiplier = ONE + oazo_fee + flash_loan_fee
    sold_per_repaid = safe_div(fee_multiplier * oracle_price, sell_price, "decrease sell price")
    denominator = sold_per_repaid - target_ratio

    repaid = safe_div(
        collateral * oracle_price - target_ratio * debt,
        denominator,
        "decrease debt delta",
    )
    sold = repaid * fee_multiplier / sell_price

    logger.debug(
        "decrease: collateral=%s debt=%s provided=%s target=%s -> repay=%s sell=%s",
        collateral, debt, provided_debt_asset, target_ratio, repaid, sold,
    )
    return DeltaSolution(
        debt_delta=repaid,
        collateral_delta=sold,
        oazo_fee=repaid * oazo_fee,
        loan_fee=repaid * flash_loan_fee,
    )
