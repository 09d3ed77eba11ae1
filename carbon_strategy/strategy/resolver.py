"""Strategy parameter resolver.

Dispatches a :class:`StrategyRequest` by variant, fills in whatever the
caller left out from live market data and the curve, and returns a complete
:class:`ResolvedStrategyParams` or the first :class:`Failure` encountered.
The resolver keeps no state between calls; concurrent resolutions need no
coordination.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any, Optional, Union

from ..core.config import ResolverConfig
from ..core.result import (
    Failure,
    Ok,
    Result,
    curve_failed,
    insufficient,
    invalid_range,
)
from ..core.types import (
    BudgetPair,
    RangeInput,
    ResolvedStrategyParams,
    StrategyRequest,
    StrategyVariant,
    TokenPair,
)
from ..oracle.base import PriceOracle
from ..pricing.base import CurveComputationError, CurvePricing
from .budget import BudgetBalancer, budget_given, parse_budget
from .overlapping import OverlappingBoundResolver
from .range import RangeResolver, is_given

logger = logging.getLogger(__name__)


class StrategyParameterResolver:
    def __init__(
        self,
        oracle: PriceOracle,
        curve: Optional[CurvePricing] = None,
        config: Optional[ResolverConfig] = None,
    ):
        self.config = config or ResolverConfig()
        self.oracle = oracle
        self.curve = curve
        self.ranges = RangeResolver(oracle, self.config)
        self.bounds = OverlappingBoundResolver(oracle, self.config)
        self.balancer = BudgetBalancer(curve) if curve is not None else None

    async def resolve(self, request: StrategyRequest) -> Result[ResolvedStrategyParams]:
        pair = request.pair
        if not pair.base or not pair.quote:
            return insufficient("both base and quote token addresses are required")
        try:
            variant = StrategyVariant(request.variant)
        except ValueError:
            return invalid_range(f"unsupported strategy type {request.variant!r}")

        if variant is StrategyVariant.OVERLAPPING:
            result = await self._resolve_overlapping(request)
        else:
            result = await self._resolve_independent(request, variant)
        if isinstance(result, Ok):
            logger.info(
                "resolved %s strategy %s/%s: %s",
                variant.value,
                pair.base,
                pair.quote,
                result.value.to_wire(),
            )
        else:
            logger.info("%s strategy %s/%s not resolved: %s", variant.value, pair.base, pair.quote, result.message)
        return result

    async def resolve_params(
        self,
        pair: TokenPair,
        variant: Union[StrategyVariant, str],
        buy_range: RangeInput = None,
        sell_range: RangeInput = None,
        buy_budget: Optional[str] = None,
        sell_budget: Optional[str] = None,
        fee_pct: Any = None,
    ) -> Result[ResolvedStrategyParams]:
        return await self.resolve(
            StrategyRequest(
                pair=pair,
                variant=variant,
                buy_range=buy_range,
                sell_range=sell_range,
                buy_budget=buy_budget,
                sell_budget=sell_budget,
                fee_pct=fee_pct,
            )
        )

    def resolve_sync(self, request: StrategyRequest) -> Result[ResolvedStrategyParams]:
        return asyncio.run(self.resolve(request))

    async def _resolve_independent(
        self, request: StrategyRequest, variant: StrategyVariant
    ) -> Result[ResolvedStrategyParams]:
        buy_range, sell_range = request.buy_range, request.sell_range
        if variant is StrategyVariant.DISPOSABLE:
            # a disposable strategy is a single one-sided order
            has_buy, has_sell = budget_given(request.buy_budget), budget_given(request.sell_budget)
            if has_buy and has_sell:
                return invalid_range(
                    "Disposable strategy can only have one of buyBudget or sellBudget defined"
                )
            if not has_buy and not has_sell:
                return insufficient(
                    "Disposable strategy must have either buyBudget or sellBudget defined"
                )
            if is_given(buy_range) or is_given(sell_range):
                buy_range = buy_range if is_given(buy_range) else "0"
                sell_range = sell_range if is_given(sell_range) else "0"
        elif not is_given(buy_range) or not is_given(sell_range):
            return insufficient("Recurring strategy requires both buyRange and sellRange to be defined")

        budgets = self._fixed_budgets(request)
        if isinstance(budgets, Failure):
            return budgets
        ranges = await self.ranges.resolve(request.pair, buy_range, sell_range)
        if isinstance(ranges, Failure):
            return ranges
        return Ok(
            ResolvedStrategyParams(
                pair=request.pair,
                variant=variant,
                prices=ranges.value.prices,
                budgets=budgets.value,
                market_price=ranges.value.market_price,
            )
        )

    @staticmethod
    def _fixed_budgets(request: StrategyRequest) -> Result[BudgetPair]:
        buy = parse_budget(request.buy_budget, "buy")
        if isinstance(buy, Failure):
            return buy
        sell = parse_budget(request.sell_budget, "sell")
        if isinstance(sell, Failure):
            return sell
        zero = Decimal(0)
        return Ok(
            BudgetPair(
                buy=buy.value if buy.value is not None else zero,
                sell=sell.value if sell.value is not None else zero,
            )
        )

    async def _resolve_overlapping(self, request: StrategyRequest) -> Result[ResolvedStrategyParams]:
        # checked up front so a doomed request never hits the price feed
        if not budget_given(request.buy_budget) and not budget_given(request.sell_budget):
            return insufficient("Overlapping strategy requires at least one budget to be defined")
        if self.curve is None or self.balancer is None:
            return curve_failed("no curve pricing backend configured")

        spread = self.bounds.effective_spread(request.fee_pct)
        if isinstance(spread, Failure):
            return spread
        bounds = await self.bounds.resolve(request.pair, request.buy_range, request.sell_range)
        if isinstance(bounds, Failure):
            return bounds
        b = bounds.value

        try:
            curve = self.curve.overlapping_prices(b.buy_low, b.sell_high, b.market_price, spread.value)
        except CurveComputationError as err:
            return curve_failed(f"overlapping price computation failed: {err}")
        prices = curve.prices
        if not prices.is_ordered():
            return curve_failed(f"curve returned unordered prices: {prices}")
        if not prices.buy_high_below_sell_low():
            logger.debug("buy high %s is above sell low %s", prices.buy_high, prices.sell_low)

        # prices use the fee spread, budget conversions the configured range spread
        budgets = self.balancer.balance(
            prices,
            curve.market_price,
            self.config.conversion_spread_pct,
            request.buy_budget,
            request.sell_budget,
        )
        if isinstance(budgets, Failure):
            return budgets
        return Ok(
            ResolvedStrategyParams(
                pair=request.pair,
                variant=StrategyVariant.OVERLAPPING,
                prices=prices,
                budgets=budgets.value,
                spread_pct=spread.value,
                market_price=curve.market_price,
            )
        )
