"""Command-line interface for the multiply calculator."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import Decimal, InvalidOperation

from .close import close_position
from .config import LOG_LEVELS, AppConfig, apply_precision, load_config
from .dispatcher import get_multiply_params
from .exceptions import MultiplyError
from .logging_setup import configure_logging
from .models import DesiredCDPState, MarketParams, VaultInfo

logger = logging.getLogger(__name__)


def _decimal_arg(value: str) -> Decimal:
    try:
        result = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if not result.is_finite():
        raise argparse.ArgumentTypeError(f"not a finite number: {value!r}")
    return result


def _position_parser() -> argparse.ArgumentParser:
    """Flags shared by every subcommand: vault snapshot, prices, fee overrides."""
    parent = argparse.ArgumentParser(add_help=False)
    vault = parent.add_argument_group("vault")
    vault.add_argument("--collateral", type=_decimal_arg, required=True,
                       help="Current collateral amount")
    vault.add_argument("--debt", type=_decimal_arg, required=True,
                       help="Current debt amount")
    vault.add_argument("--min-coll-ratio", type=_decimal_arg, required=True,
                       help="Liquidation collateralization ratio, e.g. 1.5")

    market = parent.add_argument_group("market")
    market.add_argument("--oracle-price", type=_decimal_arg, required=True,
                        help="Oracle price of collateral in debt-asset units")
    market.add_argument("--market-price", type=_decimal_arg, default=None,
                        help="Executable swap price (default: oracle price)")
    market.add_argument("--oazo-fee", type=_decimal_arg, default=None,
                        help="Swap fee rate (overrides config)")
    market.add_argument("--flash-loan-fee", type=_decimal_arg, default=None,
                        help="Flash-loan fee rate (overrides config)")
    market.add_argument("--slippage", type=_decimal_arg, default=None,
                        help="Slippage tolerance (overrides config)")
    return parent


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="vault-multiply",
        description="Size leverage adjustments and closes for multiply positions",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: built-in fee defaults)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=list(LOG_LEVELS),
        help="Logging level (default: from config, INFO)",
    )

    sub = parser.add_subparsers(dest="command")
    parent = _position_parser()

    adjust = sub.add_parser("adjust", parents=[parent],
                            help="Move the position to a target collateralization ratio")
    adjust.add_argument("--target-ratio", type=_decimal_arg, required=True,
                        help="Required collateralization ratio after the adjustment")
    adjust.add_argument("--deposit-collateral", type=_decimal_arg, default=Decimal(0))
    adjust.add_argument("--deposit-dai", type=_decimal_arg, default=Decimal(0))
    adjust.add_argument("--withdraw-collateral", type=_decimal_arg, default=Decimal(0))
    adjust.add_argument("--withdraw-dai", type=_decimal_arg, default=Decimal(0))

    close = sub.add_parser("close", parents=[parent], help="Size a full exit of the position")
    close.add_argument("--to", default="dai", choices=["dai", "collateral"],
                       help="Asset to exit into (default: dai)")

    return parser


def _market_params(args: argparse.Namespace, config: AppConfig) -> MarketParams:
    fees = config.fees
    return MarketParams(
        oracle_price=args.oracle_price,
        market_price=args.market_price if args.market_price is not None else args.oracle_price,
        oazo_fee=args.oazo_fee if args.oazo_fee is not None else fees.oazo_fee,
        flash_loan_fee=(
            args.flash_loan_fee if args.flash_loan_fee is not None else fees.flash_loan_fee
        ),
        slippage=args.slippage if args.slippage is not None else fees.slippage,
    )


def _run(args: argparse.Namespace) -> dict:
    """Execute the selected command and return the result record."""
    config = load_config(args.config) if args.config else AppConfig()
    if args.log_level is None:
        configure_logging(config.log_level)
    apply_precision(config)

    market = _market_params(args, config)
    vault = VaultInfo(
        current_collateral=args.collateral,
        current_debt=args.debt,
        min_coll_ratio=args.min_coll_ratio,
    )

    if args.command == "adjust":
        desired = DesiredCDPState(
            required_coll_ratio=args.target_ratio,
            provided_collateral=args.deposit_collateral,
            provided_dai=args.deposit_dai,
            withdraw_coll=args.withdraw_collateral,
            withdraw_dai=args.withdraw_dai,
        )
        return get_multiply_params(market, vault, desired).to_dict()
    return close_position(market, vault, args.to).to_dict()


def main(argv: list[str] | None = None) -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level or "INFO")
    try:
        result = _run(args)
    except (MultiplyError, ValueError, FileNotFoundError) as e:
        logger.error("Calculation failed: %s", e)
        sys.exit(2)

    print(json.dumps(result, indent=2))
