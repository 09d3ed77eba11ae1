"""Buy/sell budget resolution for overlapping strategies.

When both budgets are supplied, each one implies the other through the
curve. The side whose stated value is the tighter constraint wins and the
other side is replaced by its implied value, so neither side ever holds more
than the caller allowed.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable, Optional

from ..core.result import Failure, Ok, Result, curve_failed, insufficient, invalid_range
from ..core.types import BudgetPair, PriceSet
from ..core.utils import to_decimal
from ..pricing.base import CurveComputationError, CurvePricing

logger = logging.getLogger(__name__)


def budget_given(value: Any) -> bool:
    return value is not None and value != ""


def parse_budget(value: Any, side: str) -> Result[Optional[Decimal]]:
    if not budget_given(value):
        return Ok(None)
    try:
        return Ok(to_decimal(value))
    except ValueError as err:
        return invalid_range(f"{side} budget is not a valid amount: {err}")


class BudgetBalancer:
    def __init__(self, curve: CurvePricing):
        self.curve = curve

    def _convert(self, fn: Callable[..., Decimal], *args: Decimal) -> Result[Decimal]:
        try:
            return Ok(fn(*args))
        except CurveComputationError as err:
            return curve_failed(f"budget conversion failed: {err}")

    def balance(
        self,
        prices: PriceSet,
        market_price: Decimal,
        spread_pct: Decimal,
        buy_budget: Any = None,
        sell_budget: Any = None,
    ) -> Result[BudgetPair]:
        buy_r = parse_budget(buy_budget, "buy")
        if isinstance(buy_r, Failure):
            return buy_r
        sell_r = parse_budget(sell_budget, "sell")
        if isinstance(sell_r, Failure):
            return sell_r
        buy, sell = buy_r.value, sell_r.value
        if buy is None and sell is None:
            return insufficient("Overlapping strategy requires at least one budget to be defined")

        curve_args = (prices.buy_low, prices.sell_high, market_price, spread_pct)

        implied_buy: Optional[Decimal] = None
        if sell is not None:
            r = self._convert(self.curve.buy_budget_from_sell, *curve_args, sell)
            if isinstance(r, Failure):
                return r
            implied_buy = r.value
            if buy is None:
                return Ok(BudgetPair(buy=implied_buy, sell=sell))

        r = self._convert(self.curve.sell_budget_from_buy, *curve_args, buy)
        if isinstance(r, Failure):
            return r
        implied_sell = r.value
        if sell is None:
            return Ok(BudgetPair(buy=buy, sell=implied_sell))

        if implied_sell < sell:
            logger.warning(
                "buy budget %s is the tighter constraint; sell budget lowered from %s to %s",
                buy,
                sell,
                implied_sell,
            )
            return Ok(BudgetPair(buy=buy, sell=implied_sell))
        if implied_buy != buy:
            logger.warning(
                "sell budget %s is the tighter constraint; buy budget changed from %s to %s",
                sell,
                buy,
                implied_buy,
            )
        return Ok(BudgetPair(buy=implied_buy, sell=sell))
