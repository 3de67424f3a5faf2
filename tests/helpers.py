"""Assertion helpers for Decimal results."""
from __future__ import annotations

from decimal import Decimal

TOLERANCE = Decimal("1e-18")


def assert_close(actual: Decimal, expected: Decimal, tolerance: Decimal = TOLERANCE) -> None:
    """Relative comparison, absolute below 1."""
    assert abs(actual - expected) <= tolerance * max(abs(expected), Decimal(1)), (
        f"{actual} != {expected}"
    )
