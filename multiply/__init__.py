"""Sizing of leverage adjustments and closes for multiply (leveraged CDP) positions."""
from .close import close_position, get_close_to_collateral_params, get_close_to_dai_params
from .dispatcher import get_multiply_params
from .exceptions import (
    DivisionBySingularity,
    InfeasibleSolution,
    MultiplyError,
    OperationNotImplemented,
)
from .models import CloseParams, DesiredCDPState, MarketParams, MultiplyResult, VaultInfo

__all__ = [
    "get_multiply_params",
    "get_close_to_dai_params",
    "get_close_to_collateral_params",
    "close_position",
    "MarketParams",
    "VaultInfo",
    "DesiredCDPState",
    "MultiplyResult",
    "CloseParams",
    "MultiplyError",
    "InfeasibleSolution",
    "DivisionBySingularity",
    "OperationNotImplemented",
]
