"""Calculation errors raised by the multiply core."""
from __future__ import annotations

from decimal import Decimal


class MultiplyError(Exception):
    """Base class for every error raised while sizing an adjustment."""


class InfeasibleSolution(MultiplyError):
    """The solver returned a negative delta magnitude.

    No forward-direction adjustment exists for the given prices, fees and
    target ratio. Retrying with the same inputs gives the same result.
    """

    def __init__(self, debt_delta: Decimal, collateral_delta: Decimal) -> None:
        self.debt_delta = debt_delta
        self.collateral_delta = collateral_delta
        super().__init__(
            f"No feasible adjustment: debt delta {debt_delta}, "
            f"collateral delta {collateral_delta}"
        )


class DivisionBySingularity(MultiplyError, ZeroDivisionError):
    """A denominator evaluated to zero (degenerate price/fee/ratio input)."""

    def __init__(self, what: str) -> None:
        self.what = what
        super().__init__(f"Zero denominator while computing {what}")


class OperationNotImplemented(MultiplyError, NotImplementedError):
    """A named operation exists but has no computation behind it."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Operation '{operation}' is not implemented")
