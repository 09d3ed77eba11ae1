"""Resolve one strategy request from the command line and print the JSON envelope.

    python -m carbon_strategy.app.resolve_cli overlapping --base 0xA.. --quote 0xB.. --buy-budget 100
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from .main import build_resolver
from ..core.config import ResolverConfig
from ..core.log import setup_logging
from ..core.result import Failure
from ..core.types import StrategyRequest, StrategyVariant, TokenPair


def _range_arg(values: Optional[List[str]]):
    if not values:
        return None
    return values[0] if len(values) == 1 else values


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve Carbon strategy parameters")
    parser.add_argument("type", choices=[v.value for v in StrategyVariant])
    parser.add_argument("--base", required=True, help="base token address")
    parser.add_argument("--quote", required=True, help="quote token address")
    parser.add_argument(
        "--buy-range",
        nargs="+",
        help="buy price or [min max]; buy low bound for overlapping",
    )
    parser.add_argument(
        "--sell-range",
        nargs="+",
        help="sell price or [min max]; sell high bound for overlapping",
    )
    parser.add_argument("--buy-budget")
    parser.add_argument("--sell-budget")
    parser.add_argument("--fee", help="overlapping spread in percent")
    parser.add_argument("--curve-backend", choices=["remote", "reference"])
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--log-json", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, "json" if args.log_json else "plain")

    config = ResolverConfig.from_env()
    if args.curve_backend:
        config = config.with_overrides(curve_backend=args.curve_backend)
    resolver = build_resolver(config)

    request = StrategyRequest(
        pair=TokenPair(base=args.base, quote=args.quote),
        variant=StrategyVariant(args.type),
        buy_range=_range_arg(args.buy_range),
        sell_range=_range_arg(args.sell_range),
        buy_budget=args.buy_budget,
        sell_budget=args.sell_budget,
        fee_pct=args.fee,
    )
    result = resolver.resolve_sync(request)
    if isinstance(result, Failure):
        print(json.dumps(result.to_wire()))
        return 1
    print(json.dumps({"status": "success", "params": result.value.to_wire()}))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
