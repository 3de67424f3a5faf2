"""Position closer — one-shot sizing for a full exit.

Neither calculator goes through the dispatcher. Closing to the debt asset is
a straight sale of all collateral; closing to collateral sells just enough
collateral to cover the outstanding debt and keeps the rest.
"""
from __future__ import annotations

import logging
from typing import Callable

from .exceptions import OperationNotImplemented
from .models import CloseParams, MarketParams, VaultInfo
from .numeric import ONE, STALE_PRICE_BUFFER, ZERO, safe_div

logger = logging.getLogger(__name__)


def get_close_to_dai_params(market: MarketParams, vault: VaultInfo) -> CloseParams:
    """Sell all collateral for the debt asset.

    No borrowing takes place, so there is no flash-loan fee. The oazo fee is
    deducted from the sale proceeds.
    """
    gross = vault.current_collateral * market.market_price
    to_amount = gross * (ONE - market.oazo_fee)

    return CloseParams(
        from_token_amount=vault.current_collateral,
        to_token_amount=to_amount,
        min_to_token_amount=to_amount * (ONE - market.slippage),
        borrow_collateral=vault.current_collateral,
        required_debt=ZERO,
        withdraw_collateral=ZERO,
        oazo_fee=gross * market.oazo_fee,
        loan_fee=ZERO,
        skip_fl=False,
    )


def get_close_to_collateral_params(market: MarketParams, vault: VaultInfo) -> CloseParams:
    """Sell only the collateral whose proceeds repay the debt; withdraw the rest.

    The flash loan is skipped when the vault's collateral, taken at its
    minimum ratio, already covers the collateral to be sold.
    """
    buffered_debt = vault.current_debt * STALE_PRICE_BUFFER
    required = buffered_debt * (ONE + market.oazo_fee)
    max_coll_needed = safe_div(
        required,
        market.market_price * (ONE + market.slippage),
        "collateral needed to close",
    )

    skip_fl = vault.current_collateral / vault.min_coll_ratio > max_coll_needed
    required_debt = ZERO if skip_fl else required
    logger.debug(
        "close to collateral: sell %s of %s, skip flash loan %s",
        max_coll_needed, vault.current_collateral, skip_fl,
    )

    return CloseParams(
        from_token_amount=max_coll_needed,
        to_token_amount=safe_div(required, ONE - market.slippage, "close proceeds"),
        min_to_token_amount=required,
        borrow_collateral=ZERO,
        required_debt=required_debt,
        withdraw_collateral=vault.current_collateral - max_coll_needed,
        oazo_fee=buffered_debt * market.oazo_fee,
        loan_fee=required_debt * market.flash_loan_fee,
        skip_fl=skip_fl,
    )


# Registry of close calculators keyed by the asset the position exits into.
_CLOSE_TARGETS: dict[str, Callable[[MarketParams, VaultInfo], CloseParams]] = {
    "dai": get_close_to_dai_params,
    "debt": get_close_to_dai_params,
    "collateral": get_close_to_collateral_params,
}


def close_position(market: MarketParams, vault: VaultInfo, to: str) -> CloseParams:
    """Close the position into *to* (``"dai"``/``"debt"`` or ``"collateral"``)."""
    calculator = _CLOSE_TARGETS.get(to.lower())
    if calculator is None:
        raise OperationNotImplemented(f"close to {to}")
    return calculator(market, vault)
