"""Reference overlapping-curve model in Decimal arithmetic.

An overlapping strategy is one concentrated-liquidity position over
[buy_low, sell_high] split into a buy order and a sell order separated by
the spread factor f = 1 + spread/100:

    buy_high  = sell_high / f
    sell_low  = buy_low * f
    buy_marginal  = clamp(market / sqrt(f), buy_low, buy_high)
    sell_marginal = clamp(market * sqrt(f), sell_low, sell_high)

Both orders share one liquidity constant L, so budgets convert through it:

    buy_budget  = L * (sqrt(buy_marginal) - sqrt(buy_low))          (quote)
    sell_budget = L * (1/sqrt(sell_marginal) - 1/sqrt(sell_high))   (base)

This model is for offline simulation and tests. It is not claimed to be
bit-compatible with the deployed protocol's encoded-order rounding; live
resolutions should go through :mod:`carbon_strategy.pricing.remote`.
"""

from __future__ import annotations

from decimal import Decimal, localcontext

from .base import CurveComputationError, CurvePricing, OverlappingPrices
from ..core.types import PriceSet
from ..core.utils import PRECISION, quantize


def _clamp(x: Decimal, lo: Decimal, hi: Decimal) -> Decimal:
    return max(lo, min(hi, x))


class ReferenceOverlappingCurve(CurvePricing):
    def __init__(self, max_spread_pct: Decimal = Decimal("100")):
        self.max_spread_pct = max_spread_pct

    def _validate(self, buy_low: Decimal, sell_high: Decimal, market_price: Decimal, spread_pct: Decimal):
        if buy_low <= 0:
            raise CurveComputationError(f"buy low price must be positive, got {buy_low}")
        if sell_high <= buy_low:
            raise CurveComputationError(
                f"sell high price {sell_high} must be above buy low price {buy_low}"
            )
        if market_price <= 0:
            raise CurveComputationError(f"market price must be positive, got {market_price}")
        if not Decimal(0) < spread_pct < self.max_spread_pct:
            raise CurveComputationError(
                f"spread must be between 0 and {self.max_spread_pct}%, got {spread_pct}"
            )

    def _ranges(self, buy_low: Decimal, sell_high: Decimal, market_price: Decimal, spread_pct: Decimal):
        """Unrounded price set and clamped market price."""
        self._validate(buy_low, sell_high, market_price, spread_pct)
        with localcontext() as ctx:
            ctx.prec = PRECISION
            factor = Decimal(1) + spread_pct / Decimal(100)
            buy_high = sell_high / factor
            sell_low = buy_low * factor
            if buy_high < buy_low:
                raise CurveComputationError(
                    f"range {buy_low}..{sell_high} is narrower than the {spread_pct}% spread"
                )
            market = _clamp(market_price, buy_low, sell_high)
            root = factor.sqrt()
            buy_marginal = _clamp(market / root, buy_low, buy_high)
            sell_marginal = _clamp(market * root, sell_low, sell_high)
        return PriceSet(buy_low, buy_marginal, buy_high, sell_low, sell_marginal, sell_high), market

    def overlapping_prices(
        self,
        buy_low: Decimal,
        sell_high: Decimal,
        market_price: Decimal,
        spread_pct: Decimal,
    ) -> OverlappingPrices:
        p, market = self._ranges(buy_low, sell_high, market_price, spread_pct)
        # truncation is monotone, so the ordering survives rounding
        prices = PriceSet(
            buy_low=quantize(p.buy_low),
            buy_marginal=quantize(p.buy_marginal),
            buy_high=quantize(p.buy_high),
            sell_low=quantize(p.sell_low),
            sell_marginal=quantize(p.sell_marginal),
            sell_high=quantize(p.sell_high),
        )
        return OverlappingPrices(prices=prices, market_price=quantize(market))

    @staticmethod
    def _quote_per_liquidity(p: PriceSet) -> Decimal:
        return p.buy_marginal.sqrt() - p.buy_low.sqrt()

    @staticmethod
    def _base_per_liquidity(p: PriceSet) -> Decimal:
        return 1 / p.sell_marginal.sqrt() - 1 / p.sell_high.sqrt()

    def buy_budget_from_sell(
        self,
        buy_low: Decimal,
        sell_high: Decimal,
        market_price: Decimal,
        spread_pct: Decimal,
        sell_budget: Decimal,
    ) -> Decimal:
        p, _ = self._ranges(buy_low, sell_high, market_price, spread_pct)
        if sell_budget == 0:
            return Decimal(0)
        with localcontext() as ctx:
            ctx.prec = PRECISION
            per_l = self._base_per_liquidity(p)
            if per_l == 0:
                raise CurveComputationError(
                    "market price is at or above the sell range; sell budget must be zero"
                )
            liquidity = sell_budget / per_l
            return quantize(liquidity * self._quote_per_liquidity(p))

    def sell_budget_from_buy(
        self,
        buy_low: Decimal,
        sell_high: Decimal,
        market_price: Decimal,
        spread_pct: Decimal,
        buy_budget: Decimal,
    ) -> Decimal:
        p, _ = self._ranges(buy_low, sell_high, market_price, spread_pct)
        if buy_budget == 0:
            return Decimal(0)
        with localcontext() as ctx:
            ctx.prec = PRECISION
            per_l = self._quote_per_liquidity(p)
            if per_l == 0:
                raise CurveComputationError(
                    "market price is at or below the buy range; buy budget must be zero"
                )
            liquidity = buy_budget / per_l
            return quantize(liquidity * self._base_per_liquidity(p))
