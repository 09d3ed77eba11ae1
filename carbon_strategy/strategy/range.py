"""Price ranges for the independent (disposable / recurring) variants."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from ..core.config import ResolverConfig
from ..core.result import Failure, Ok, Result, invalid_range
from ..core.types import PriceSet, RangeInput, TokenPair
from ..core.utils import mul, sort_pair, to_decimal
from ..oracle.base import PriceOracle, fetch_market_price

logger = logging.getLogger(__name__)


def is_given(value: RangeInput) -> bool:
    """None, an empty string and an empty list all mean "not supplied"."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return True


def parse_range(value: RangeInput, side: str) -> Result[Tuple[Decimal, Decimal]]:
    """Parse a single value or a [min, max] pair into a sorted (low, high)."""
    if isinstance(value, (list, tuple)):
        if len(value) not in (1, 2):
            return invalid_range(f"{side} range must be one value or a pair of values, got {value!r}")
        raw = [value[0], value[-1]]
    else:
        raw = [value, value]
    try:
        low, high = sort_pair(to_decimal(raw[0]), to_decimal(raw[1]))
    except ValueError as err:
        return invalid_range(f"{side} range is not a valid price: {err}")
    return Ok((low, high))


@dataclass(frozen=True)
class ResolvedRange:
    prices: PriceSet
    market_price: Optional[Decimal] = None


class RangeResolver:
    def __init__(self, oracle: PriceOracle, config: ResolverConfig):
        self.oracle = oracle
        self.config = config

    @staticmethod
    def explicit_prices(buy: Tuple[Decimal, Decimal], sell: Tuple[Decimal, Decimal]) -> PriceSet:
        # a buy order's best price is its top, a sell order's its bottom
        return PriceSet(
            buy_low=buy[0],
            buy_marginal=buy[1],
            buy_high=buy[1],
            sell_low=sell[0],
            sell_marginal=sell[0],
            sell_high=sell[1],
        )

    def default_prices(self, market_price: Decimal) -> PriceSet:
        inner, outer = self.config.spread_inner, self.config.spread_outer
        buy_high = mul(market_price, 1 - inner)
        sell_low = mul(market_price, 1 + inner)
        return PriceSet(
            buy_low=mul(market_price, 1 - outer),
            buy_marginal=buy_high,
            buy_high=buy_high,
            sell_low=sell_low,
            sell_marginal=sell_low,
            sell_high=mul(market_price, 1 + outer),
        )

    async def resolve(
        self, pair: TokenPair, buy_range: RangeInput, sell_range: RangeInput
    ) -> Result[ResolvedRange]:
        buy_given, sell_given = is_given(buy_range), is_given(sell_range)
        if buy_given and sell_given:
            buy = parse_range(buy_range, "buy")
            if isinstance(buy, Failure):
                return buy
            sell = parse_range(sell_range, "sell")
            if isinstance(sell, Failure):
                return sell
            logger.debug("explicit ranges buy=%s sell=%s", buy.value, sell.value)
            return Ok(ResolvedRange(self.explicit_prices(buy.value, sell.value)))
        if buy_given or sell_given:
            return invalid_range("buy and sell ranges must both be given or both be omitted")

        market = await fetch_market_price(self.oracle, pair)
        if isinstance(market, Failure):
            return market
        logger.debug(
            "no ranges given; spreading %s-%s around market price %s",
            self.config.spread_inner,
            self.config.spread_outer,
            market.value,
        )
        return Ok(ResolvedRange(self.default_prices(market.value), market.value))
