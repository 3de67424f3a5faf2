"""Decimal helpers shared by the solver, the dispatcher and the closer."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from .exceptions import DivisionBySingularity

Number = Union[Decimal, int, str]

ZERO = Decimal(0)
ONE = Decimal(1)

# Oracle/market values can lag the chain by a block or two.
STALE_PRICE_BUFFER = Decimal("1.00001")


def to_decimal(value: Number, name: str = "value") -> Decimal:
    """Coerce *value* to ``Decimal``.

    Floats are refused: token amounts must never pass through binary floating
    point on their way in.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (bool, float)):
        raise TypeError(f"{name} must be a Decimal, int or str, got {type(value).__name__}")
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation as e:
            raise ValueError(f"{name} is not a number: {value!r}") from e
    else:
        raise TypeError(f"{name} must be a Decimal, int or str, got {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"{name} must be finite, got {result}")
    return result


def safe_div(numerator: Decimal, denominator: Decimal, what: str) -> Decimal:
    """Divide, raising DivisionBySingularity instead of producing Infinity/NaN."""
    if denominator == ZERO:
        raise DivisionBySingularity(what)
    return numerator / denominator


def coll_ratio(collateral: Decimal, price: Decimal, debt: Decimal) -> Decimal:
    """Collateralization ratio: collateral value in debt units over debt."""
    return safe_div(collateral * price, debt, "collateralization ratio")
