"""Core type definitions for strategy parameter resolution.

A resolution turns a partially specified :class:`StrategyRequest` into a
:class:`ResolvedStrategyParams` bundle. Everything here is immutable and
created fresh per call.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Sequence, Union

from .utils import format_decimal

RangeInput = Union[str, Decimal, Sequence[str], None]


class StrategyVariant(str, Enum):
    DISPOSABLE = "disposable"
    RECURRING = "recurring"
    OVERLAPPING = "overlapping"


@dataclass(frozen=True)
class TokenPair:
    base: str
    quote: str


@dataclass(frozen=True)
class PriceSet:
    buy_low: Decimal
    buy_marginal: Decimal
    buy_high: Decimal
    sell_low: Decimal
    sell_marginal: Decimal
    sell_high: Decimal

    def is_ordered(self) -> bool:
        return (
            self.buy_low <= self.buy_marginal <= self.buy_high
            and self.sell_low <= self.sell_marginal <= self.sell_high
        )

    def buy_high_below_sell_low(self) -> bool:
        """Overlapping strategies are expected (not required) to satisfy this."""
        return self.buy_high <= self.sell_low


@dataclass(frozen=True)
class BudgetPair:
    buy: Decimal
    sell: Decimal


@dataclass(frozen=True)
class StrategyRequest:
    """Raw request as received from the caller.

    For the overlapping variant ``buy_range`` carries the buy low bound and
    ``sell_range`` the sell high bound.
    """

    pair: TokenPair
    variant: StrategyVariant
    buy_range: RangeInput = None
    sell_range: RangeInput = None
    buy_budget: Optional[str] = None
    sell_budget: Optional[str] = None
    fee_pct: Optional[Union[str, int, Decimal]] = None


@dataclass(frozen=True)
class ResolvedStrategyParams:
    pair: TokenPair
    variant: StrategyVariant
    prices: PriceSet
    budgets: BudgetPair
    spread_pct: Optional[Decimal] = None
    market_price: Optional[Decimal] = None

    def to_wire(self) -> Dict[str, Optional[str]]:
        p = self.prices
        wire: Dict[str, Optional[str]] = {
            "baseToken": self.pair.base,
            "quoteToken": self.pair.quote,
            "type": self.variant.value,
            "buyPriceLow": format_decimal(p.buy_low),
            "buyPriceMarginal": format_decimal(p.buy_marginal),
            "buyPriceHigh": format_decimal(p.buy_high),
            "buyBudget": format_decimal(self.budgets.buy),
            "sellPriceLow": format_decimal(p.sell_low),
            "sellPriceMarginal": format_decimal(p.sell_marginal),
            "sellPriceHigh": format_decimal(p.sell_high),
            "sellBudget": format_decimal(self.budgets.sell),
        }
        if self.spread_pct is not None:
            wire["spreadPercentage"] = format_decimal(self.spread_pct)
        if self.market_price is not None:
            wire["marketPrice"] = format_decimal(self.market_price)
        return wire
