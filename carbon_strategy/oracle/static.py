"""Static price oracle for offline runs and tests.

Serves fixed USD prices from an in-memory table; tokens can be marked as
failing to exercise the unavailable-price path.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional, Set

from .base import PriceOracle, PriceUnavailableError
from ..core.utils import to_decimal


class StaticPriceOracle(PriceOracle):
    def __init__(
        self,
        prices: Optional[Mapping[str, object]] = None,
        failing: Iterable[str] = (),
        name: str = "static",
    ):
        super().__init__(name)
        self._prices: Dict[str, Decimal] = {}
        self._failing: Set[str] = set(failing)
        self.calls: list = []
        for token, price in (prices or {}).items():
            self.set_price(token, price)

    def set_price(self, token: str, price: object):
        self._prices[token] = to_decimal(price)

    def fail(self, token: str):
        self._failing.add(token)

    def fetch_usd_price(self, token: str) -> Decimal:
        self.calls.append(token)
        if token in self._failing:
            raise PriceUnavailableError(f"{self.name}: feed failure for {token}")
        try:
            return self._prices[token]
        except KeyError:
            raise PriceUnavailableError(f"{self.name}: no price for {token}") from None
