"""Buy-low / sell-high bounds for the overlapping variant.

Missing bounds are derived from the market price:

* both given: market price is the midpoint approximation (sell_high - buy_low) / 2
* neither given: market price +/- ``default_range_pct``
* one given: the other mirrors it around the market price (2 * market - given)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from ..core.config import ResolverConfig
from ..core.result import Failure, Ok, Result, invalid_range
from ..core.types import RangeInput, TokenPair
from ..core.utils import mul, percent_factor, safe_div, sub, to_decimal
from ..oracle.base import PriceOracle, fetch_market_price
from .range import is_given

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlappingBounds:
    buy_low: Decimal
    sell_high: Decimal
    market_price: Decimal


def parse_bound(value: RangeInput, label: str) -> Result[Optional[Decimal]]:
    if not is_given(value):
        return Ok(None)
    if isinstance(value, (list, tuple)):
        return invalid_range(f"{label} must be a single price, got {value!r}")
    try:
        return Ok(to_decimal(value))
    except ValueError as err:
        return invalid_range(f"{label} is not a valid price: {err}")


class OverlappingBoundResolver:
    def __init__(self, oracle: PriceOracle, config: ResolverConfig):
        self.oracle = oracle
        self.config = config

    def effective_spread(self, fee_pct: Any) -> Result[Decimal]:
        """The caller's fee, or the configured default when it is unset or zero."""
        if fee_pct is None or fee_pct == "":
            return Ok(self.config.default_fee_pct)
        try:
            fee = to_decimal(fee_pct)
        except ValueError as err:
            return invalid_range(f"fee is not a valid percentage: {err}")
        return Ok(fee if fee != 0 else self.config.default_fee_pct)

    async def resolve(
        self, pair: TokenPair, buy_price_low: RangeInput, sell_price_high: RangeInput
    ) -> Result[OverlappingBounds]:
        low_r = parse_bound(buy_price_low, "buyPriceLow")
        if isinstance(low_r, Failure):
            return low_r
        high_r = parse_bound(sell_price_high, "sellPriceHigh")
        if isinstance(high_r, Failure):
            return high_r
        buy_low, sell_high = low_r.value, high_r.value

        if buy_low is not None and sell_high is not None:
            midpoint = safe_div(sub(sell_high, buy_low), Decimal(2))
            logger.debug("explicit bounds %s..%s, midpoint market price %s", buy_low, sell_high, midpoint)
            return Ok(OverlappingBounds(buy_low, sell_high, midpoint))

        market = await fetch_market_price(self.oracle, pair)
        if isinstance(market, Failure):
            return market
        mp = market.value

        if buy_low is None and sell_high is None:
            pct = self.config.default_range_pct
            logger.debug("no bounds given; +/-%s%% around market price %s", pct, mp)
            return Ok(
                OverlappingBounds(
                    buy_low=mul(mp, percent_factor(pct, -1)),
                    sell_high=mul(mp, percent_factor(pct)),
                    market_price=mp,
                )
            )

        given = buy_low if buy_low is not None else sell_high
        mirrored = sub(mul(mp, Decimal(2)), given)
        if mirrored < 0:
            return invalid_range(
                f"bound {given} is too far from market price {mp} to mirror into a non-negative price"
            )
        logger.debug("mirrored bound %s around market price %s into %s", given, mp, mirrored)
        if buy_low is None:
            return Ok(OverlappingBounds(mirrored, sell_high, mp))
        return Ok(OverlappingBounds(buy_low, mirrored, mp))
