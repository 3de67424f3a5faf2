"""Data models — all frozen (immutable), all amounts ``Decimal``."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from decimal import Decimal
from typing import Any

from .numeric import ZERO, Number, coll_ratio, to_decimal


def _coerce_fields(obj: Any) -> None:
    """Replace every non-bool field of a frozen dataclass with its Decimal."""
    for f in fields(obj):
        value = getattr(obj, f.name)
        if f.type in ("bool", bool):
            continue
        object.__setattr__(obj, f.name, to_decimal(value, f.name))


def _require_positive(obj: Any, *names: str) -> None:
    for name in names:
        if getattr(obj, name) <= ZERO:
            raise ValueError(f"{name} must be positive, got {getattr(obj, name)}")


def _require_non_negative(obj: Any, *names: str) -> None:
    for name in names:
        if getattr(obj, name) < ZERO:
            raise ValueError(f"{name} must not be negative, got {getattr(obj, name)}")


def _render(record: Any) -> dict[str, Any]:
    return {
        k: (format(v, "f") if isinstance(v, Decimal) else v) for k, v in asdict(record).items()
    }


@dataclass(frozen=True)
class MarketParams:
    """Prices and fee rates for one calculation.

    ``oazo_fee`` is charged on the swap notional, ``flash_loan_fee`` on the
    flash-borrowed notional. Both are fractions, as is ``slippage``.
    """

    oracle_price: Decimal
    market_price: Decimal
    oazo_fee: Decimal = ZERO
    flash_loan_fee: Decimal = ZERO
    slippage: Decimal = ZERO

    def __post_init__(self) -> None:
        _coerce_fields(self)
        _require_positive(self, "oracle_price", "market_price")
        _require_non_negative(self, "oazo_fee", "flash_loan_fee", "slippage")

    def with_flash_loan_fee(self, fee: Number) -> MarketParams:
        return replace(self, flash_loan_fee=fee)


@dataclass(frozen=True)
class VaultInfo:
    """Snapshot of the position before the adjustment."""

    current_collateral: Decimal
    current_debt: Decimal
    min_coll_ratio: Decimal

    def __post_init__(self) -> None:
        _coerce_fields(self)
        _require_non_negative(self, "current_collateral", "current_debt")
        _require_positive(self, "min_coll_ratio")

    def collateral_value(self, price: Decimal) -> Decimal:
        return self.current_collateral * price

    def coll_ratio(self, price: Decimal) -> Decimal:
        """Current collateralization ratio; raises on a debt-free vault."""
        return coll_ratio(self.current_collateral, price, self.current_debt)


@dataclass(frozen=True)
class DesiredCDPState:
    """What the caller wants the position to look like afterwards.

    The mode is inferred: any withdrawal wins over any deposit, and with
    neither the call is a pure ratio rebalance.
    """

    required_coll_ratio: Decimal
    provided_collateral: Decimal = ZERO
    provided_dai: Decimal = ZERO
    withdraw_coll: Decimal = ZERO
    withdraw_dai: Decimal = ZERO

    def __post_init__(self) -> None:
        _coerce_fields(self)
        _require_positive(self, "required_coll_ratio")
        _require_non_negative(
            self, "provided_collateral", "provided_dai", "withdraw_coll", "withdraw_dai"
        )

    @property
    def is_withdrawal(self) -> bool:
        return self.withdraw_coll > ZERO or self.withdraw_dai > ZERO

    @property
    def is_deposit(self) -> bool:
        return self.provided_dai > ZERO or self.provided_collateral > ZERO


@dataclass(frozen=True)
class MultiplyResult:
    """Signed deltas (positive = increases) plus fees in debt-asset units."""

    debt_delta: Decimal
    collateral_delta: Decimal
    oazo_fee: Decimal
    loan_fee: Decimal
    skip_fl: bool = False

    def __post_init__(self) -> None:
        _coerce_fields(self)
        _require_non_negative(self, "oazo_fee", "loan_fee")

    def to_dict(self) -> dict[str, Any]:
        return _render(self)


@dataclass(frozen=True)
class CloseParams:
    """Amounts for a full exit of the position."""

    from_token_amount: Decimal
    to_token_amount: Decimal
    min_to_token_amount: Decimal
    borrow_collateral: Decimal
    required_debt: Decimal
    withdraw_collateral: Decimal
    oazo_fee: Decimal = ZERO
    loan_fee: Decimal = ZERO
    skip_fl: bool = False

    def __post_init__(self) -> None:
        _coerce_fields(self)
        _require_non_negative(self, "oazo_fee", "loan_fee")

    def to_dict(self) -> dict[str, Any]:
        return _render(self)
