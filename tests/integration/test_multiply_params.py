"""Integration tests for get_multiply_params: direction choice, signs, fees."""
from __future__ import annotations

from decimal import Decimal
from typing import Callable

import pytest

from multiply import (
    DesiredCDPState,
    DivisionBySingularity,
    InfeasibleSolution,
    MarketParams,
    VaultInfo,
    get_multiply_params,
)
from multiply.dispatcher import Direction, choose_direction
from tests.helpers import assert_close

Rebalance = Callable[[str | int], DesiredCDPState]


class TestFlashLoanFeeOnly:
    """No oazo fee or slippage, oracle == market, 50% flash-loan fee."""

    def test_pays_flash_loan_fee_going_from_3_to_1_5(
        self, ff_only_market: MarketParams, vault: VaultInfo, rebalance_to: Rebalance
    ) -> None:
        result = get_multiply_params(ff_only_market, vault, rebalance_to("1.5"))
        assert result.oazo_fee == 0
        assert result.loan_fee == 6000
        assert result.skip_fl is False
        assert result.debt_delta == 12000
        assert result.collateral_delta == 4

    def test_skips_flash_loan_going_from_3_to_2_5(
        self, ff_only_market: MarketParams, vault: VaultInfo, rebalance_to: Rebalance
    ) -> None:
        result = get_multiply_params(ff_only_market, vault, rebalance_to("2.5"))
        assert result.oazo_fee == 0
        assert result.loan_fee == 0
        assert result.skip_fl is True

    def test_decrease_selected_going_from_3_to_5(
        self, ff_only_market: MarketParams, vault: VaultInfo, rebalance_to: Rebalance
    ) -> None:
        desired = rebalance_to(5)
        assert choose_direction(ff_only_market, vault, desired) is Direction.DECREASE

        result = get_multiply_params(ff_only_market, vault, desired)
        assert result.debt_delta <= 0
        assert result.collateral_delta <= 0
        assert result.oazo_fee == 0
        assert result.loan_fee != 2500

        final_debt = vault.current_debt + result.debt_delta
        final_coll_value = (vault.current_collateral + result.collateral_delta) * 3000
        assert_close(final_coll_value / final_debt, Decimal(5))

    def test_zero_debt_raises(
        self, ff_only_market: MarketParams, debt_free_vault: VaultInfo, rebalance_to: Rebalance
    ) -> None:
        with pytest.raises(DivisionBySingularity):
            get_multiply_params(ff_only_market, debt_free_vault, rebalance_to(2))


class TestModes:
    def test_withdrawal_negates_deltas(
        self, ff_only_market: MarketParams, vault: VaultInfo
    ) -> None:
        desired = DesiredCDPState(required_coll_ratio=3, withdraw_coll=1)
        result = get_multiply_params(ff_only_market, vault, desired)
        assert result.debt_delta == -1500
        assert result.collateral_delta == Decimal("-0.5")
        assert result.skip_fl is True

    def test_withdrawal_takes_precedence_over_deposit(
        self, ff_only_market: MarketParams, vault: VaultInfo
    ) -> None:
        desired = DesiredCDPState(required_coll_ratio=3, withdraw_coll=1, provided_dai=100)
        assert choose_direction(ff_only_market, vault, desired) is Direction.DECREASE
        assert get_multiply_params(ff_only_market, vault, desired).debt_delta == -1500

    def test_deposit_increases_position(
        self, ff_only_market: MarketParams, vault: VaultInfo
    ) -> None:
        desired = DesiredCDPState(required_coll_ratio=2, provided_collateral=2)
        result = get_multiply_params(ff_only_market, vault, desired)
        assert result.debt_delta == 16000
        assert result.skip_fl is True
        final_value = (12 + result.collateral_delta) * 3000
        assert_close(final_value / (vault.current_debt + result.debt_delta), Decimal(2))

    def test_deposit_beats_ratio_comparison(
        self, ff_only_market: MarketParams, vault: VaultInfo
    ) -> None:
        # Target above the current ratio would normally mean decrease.
        desired = DesiredCDPState(required_coll_ratio=4, provided_collateral=10)
        assert choose_direction(ff_only_market, vault, desired) is Direction.INCREASE

    def test_target_equal_to_current_ratio_is_increase(
        self, ff_only_market: MarketParams, vault: VaultInfo, rebalance_to: Rebalance
    ) -> None:
        assert choose_direction(ff_only_market, vault, rebalance_to(3)) is Direction.INCREASE
        result = get_multiply_params(ff_only_market, vault, rebalance_to(3))
        assert result.debt_delta == 0
        assert result.collateral_delta == 0

    def test_infeasible_withdrawal_raises(
        self, ff_only_market: MarketParams, vault: VaultInfo
    ) -> None:
        desired = DesiredCDPState(required_coll_ratio=2, withdraw_coll=1)
        with pytest.raises(InfeasibleSolution) as exc_info:
            get_multiply_params(ff_only_market, vault, desired)
        assert exc_info.value.debt_delta < 0


class TestProperties:
    TARGETS = [Decimal("1.5") + Decimal("0.25") * k for k in range(15)]

    @pytest.mark.parametrize("target", TARGETS)
    def test_fees_non_negative_and_no_loan_fee_when_skipped(
        self, target: Decimal, realistic_market: MarketParams, vault: VaultInfo
    ) -> None:
        result = get_multiply_params(
            realistic_market, vault, DesiredCDPState(required_coll_ratio=target)
        )
        assert result.oazo_fee >= 0
        assert result.loan_fee >= 0
        if result.skip_fl:
            assert result.loan_fee == 0

    @pytest.mark.parametrize("target", ["1.6", "2", "2.4", "2.9"])
    def test_increase_lands_on_target(
        self, target: str, realistic_market: MarketParams, vault: VaultInfo
    ) -> None:
        ratio = Decimal(target)
        result = get_multiply_params(
            realistic_market, vault, DesiredCDPState(required_coll_ratio=ratio)
        )
        assert result.debt_delta >= 0
        final_value = (vault.current_collateral + result.collateral_delta) * 3000
        final_debt = vault.current_debt + result.debt_delta + result.loan_fee
        assert_close(final_value / final_debt, ratio)

    def test_skip_flag_flips_once_as_target_rises(
        self, ff_only_market: MarketParams, vault: VaultInfo
    ) -> None:
        targets = [Decimal("1.5") + Decimal("0.1") * k for k in range(15)]
        flags = [
            get_multiply_params(
                ff_only_market, vault, DesiredCDPState(required_coll_ratio=t)
            ).skip_fl
            for t in targets
        ]
        assert flags == sorted(flags)
        assert flags[0] is False
        assert flags[-1] is True

    def test_idempotent(self, realistic_market: MarketParams, vault: VaultInfo) -> None:
        desired = DesiredCDPState(required_coll_ratio="1.8", provided_dai=500)
        assert get_multiply_params(realistic_market, vault, desired) == get_multiply_params(
            realistic_market, vault, desired
        )
