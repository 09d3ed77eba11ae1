"""Client for a protocol-compatible overlapping-curve pricing service.

The service wraps the protocol's own SDK so prices and budgets match the
on-chain recomputation exactly. All numbers travel as decimal strings:

    POST /overlapping/prices       {buyPriceLow, sellPriceHigh, marketPrice, spreadPercentage}
        -> {buyPriceLow, buyPriceMarginal, buyPriceHigh,
            sellPriceLow, sellPriceMarginal, sellPriceHigh, marketPrice}
    POST /overlapping/buy-budget   {..., sellBudget} -> {buyBudget}
    POST /overlapping/sell-budget  {..., buyBudget}  -> {sellBudget}

A non-2xx answer means the inputs were rejected.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

import requests

from .base import CurveComputationError, CurvePricing, OverlappingPrices
from ..core.types import PriceSet
from ..core.utils import format_decimal, to_decimal

logger = logging.getLogger(__name__)


class RemoteCurvePricing(CurvePricing):
    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise ValueError("curve service URL is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session

    def _post(self, path: str, body: Dict[str, str]) -> Dict[str, Any]:
        poster = self._session.post if self._session is not None else requests.post
        url = self.base_url + path
        logger.debug("curve request %s %s", path, body)
        try:
            resp = poster(
                url,
                json=body,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as err:
            raise CurveComputationError(f"curve service unreachable: {err}") from err
        if not (200 <= resp.status_code < 300):
            raise CurveComputationError(
                f"curve service rejected {path}: {resp.status_code} {resp.text}"
            )
        try:
            data = resp.json()
        except ValueError as err:
            raise CurveComputationError(f"curve service returned non-JSON for {path}") from err
        if not isinstance(data, dict):
            raise CurveComputationError(f"curve service returned {type(data).__name__} for {path}")
        return data

    @staticmethod
    def _field(data: Dict[str, Any], key: str) -> Decimal:
        raw = data.get(key)
        # numbers must come back as strings; JSON floats would lose precision
        if not isinstance(raw, str):
            raise CurveComputationError(f"curve service response lacks string field {key!r}")
        try:
            return to_decimal(raw)
        except ValueError as err:
            raise CurveComputationError(f"bad {key!r} from curve service: {err}") from err

    @staticmethod
    def _inputs(buy_low, sell_high, market_price, spread_pct) -> Dict[str, str]:
        return {
            "buyPriceLow": format_decimal(buy_low),
            "sellPriceHigh": format_decimal(sell_high),
            "marketPrice": format_decimal(market_price),
            "spreadPercentage": format_decimal(spread_pct),
        }

    def overlapping_prices(
        self,
        buy_low: Decimal,
        sell_high: Decimal,
        market_price: Decimal,
        spread_pct: Decimal,
    ) -> OverlappingPrices:
        data = self._post(
            "/overlapping/prices", self._inputs(buy_low, sell_high, market_price, spread_pct)
        )
        prices = PriceSet(
            buy_low=self._field(data, "buyPriceLow"),
            buy_marginal=self._field(data, "buyPriceMarginal"),
            buy_high=self._field(data, "buyPriceHigh"),
            sell_low=self._field(data, "sellPriceLow"),
            sell_marginal=self._field(data, "sellPriceMarginal"),
            sell_high=self._field(data, "sellPriceHigh"),
        )
        return OverlappingPrices(prices=prices, market_price=self._field(data, "marketPrice"))

    def buy_budget_from_sell(
        self,
        buy_low: Decimal,
        sell_high: Decimal,
        market_price: Decimal,
        spread_pct: Decimal,
        sell_budget: Decimal,
    ) -> Decimal:
        body = self._inputs(buy_low, sell_high, market_price, spread_pct)
        body["sellBudget"] = format_decimal(sell_budget)
        return self._field(self._post("/overlapping/buy-budget", body), "buyBudget")

    def sell_budget_from_buy(
        self,
        buy_low: Decimal,
        sell_high: Decimal,
        market_price: Decimal,
        spread_pct: Decimal,
        buy_budget: Decimal,
    ) -> Decimal:
        body = self._inputs(buy_low, sell_high, market_price, spread_pct)
        body["buyBudget"] = format_decimal(buy_budget)
        return self._field(self._post("/overlapping/sell-budget", body), "sellBudget")
