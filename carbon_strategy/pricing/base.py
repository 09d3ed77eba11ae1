"""Overlapping-curve pricing abstraction.

Implementations must agree with the deployed protocol's own recomputation;
transaction building rejects parameter sets that do not.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from ..core.types import PriceSet


class CurveComputationError(ValueError):
    """The curve rejected its inputs (e.g. non-monotonic bounds)."""


@dataclass(frozen=True)
class OverlappingPrices:
    prices: PriceSet
    market_price: Decimal


class CurvePricing(ABC):
    @abstractmethod
    def overlapping_prices(
        self,
        buy_low: Decimal,
        sell_high: Decimal,
        market_price: Decimal,
        spread_pct: Decimal,
    ) -> OverlappingPrices:
        """Full six-price set plus the recomputed market price."""
        ...

    @abstractmethod
    def buy_budget_from_sell(
        self,
        buy_low: Decimal,
        sell_high: Decimal,
        market_price: Decimal,
        spread_pct: Decimal,
        sell_budget: Decimal,
    ) -> Decimal: ...

    @abstractmethod
    def sell_budget_from_buy(
        self,
        buy_low: Decimal,
        sell_high: Decimal,
        market_price: Decimal,
        spread_pct: Decimal,
        buy_budget: Decimal,
    ) -> Decimal: ...
