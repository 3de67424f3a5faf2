"""Position adjustment dispatcher: picks the direction and applies signs."""
from __future__ import annotations

import enum
import logging
from typing import Callable

from .exceptions import InfeasibleSolution
from .flash_loan import calculate_decrease, calculate_increase
from .models import DesiredCDPState, MarketParams, MultiplyResult, VaultInfo
from .solver import DeltaSolution

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    """Leverage direction and the sign its deltas carry in the result."""

    INCREASE = 1
    DECREASE = -1


_CALCULATORS: dict[
    Direction,
    Callable[[MarketParams, VaultInfo, DesiredCDPState], tuple[DeltaSolution, bool]],
] = {
    Direction.INCREASE: calculate_increase,
    Direction.DECREASE: calculate_decrease,
}


def choose_direction(
    market: MarketParams, vault: VaultInfo, desired: DesiredCDPState
) -> Direction:
    """Withdrawal, then deposit, then compare the current ratio to the target."""
    if desired.is_withdrawal:
        return Direction.DECREASE
    if desired.is_deposit:
        return Direction.INCREASE
    if vault.coll_ratio(market.oracle_price) < desired.required_coll_ratio:
        return Direction.DECREASE
    return Direction.INCREASE


def _adjust(
    direction: Direction,
    market: MarketParams,
    vault: VaultInfo,
    desired: DesiredCDPState,
) -> MultiplyResult:
    solution, skip_fl = _CALCULATORS[direction](market, vault, desired)
    if not solution.is_feasible:
        raise InfeasibleSolution(solution.debt_delta, solution.collateral_delta)

    sign = direction.value
    return MultiplyResult(
        debt_delta=solution.debt_delta * sign,
        collateral_delta=solution.collateral_delta * sign,
        oazo_fee=solution.oazo_fee,
        loan_fee=solution.loan_fee,
        skip_fl=skip_fl,
    )


def get_multiply_params(
    market: MarketParams, vault: VaultInfo, desired: DesiredCDPState
) -> MultiplyResult:
    """Size the debt and collateral movements that reach the desired state.

    Args:
        market: Prices and fee rates.
        vault: Current collateral, debt and liquidation ratio.
        desired: Target ratio plus any deposit or withdrawal.

    Raises:
        InfeasibleSolution: The inputs admit no forward adjustment.
        DivisionBySingularity: A ratio or solver denominator was zero.
    """
    direction = choose_direction(market, vault, desired)
    logger.debug("Adjusting position: %s", direction.name.lower())
    result = _adjust(direction, market, vault, desired)
    logger.info(
        "%s: debt %s, collateral %s, oazo fee %s, loan fee %s, skip flash loan %s",
        direction.name.capitalize(),
        result.debt_delta,
        result.collateral_delta,
        result.oazo_fee,
        result.loan_fee,
        result.skip_fl,
    )
    return result
