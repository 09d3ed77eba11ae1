"""Carbon DeFi market-rate API adapter.

``GET {price_feed_url}?address=<token>&convert=usd`` answers with a JSON
object whose ``USD`` member is the token's USD price. Every call is a fresh
request: no retry and no caching.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Optional

import requests

from .base import PriceOracle, PriceUnavailableError
from ..core.config import ResolverConfig
from ..core.utils import to_decimal

logger = logging.getLogger(__name__)


class CarbonApiOracle(PriceOracle):
    def __init__(
        self,
        base_url: str = ResolverConfig.price_feed_url,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        name: str = "carbon-api",
    ):
        super().__init__(name)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session

    @classmethod
    def from_config(cls, config: ResolverConfig) -> "CarbonApiOracle":
        return cls(base_url=config.price_feed_url, timeout=config.feed_timeout)

    def _headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def _get(self, params: Dict[str, str]) -> requests.Response:
        getter = self._session.get if self._session is not None else requests.get
        return getter(
            self.base_url, params=params, headers=self._headers(), timeout=self.timeout
        )

    def fetch_usd_price(self, token: str) -> Decimal:
        try:
            resp = self._get({"address": token, "convert": "usd"})
        except requests.RequestException as err:
            raise PriceUnavailableError(f"transport error: {err}") from err
        if not (200 <= resp.status_code < 300):
            raise PriceUnavailableError(f"HTTP error! status: {resp.status_code}")
        try:
            data = resp.json(parse_float=Decimal)
        except ValueError as err:
            raise PriceUnavailableError("response body is not JSON") from err
        price = data.get("USD") if isinstance(data, dict) else None
        # bool is an int subclass; JSON true/false is not a price
        if isinstance(price, bool) or not isinstance(price, (int, Decimal)):
            raise PriceUnavailableError("Invalid price data received from API")
        try:
            usd = to_decimal(price)
        except ValueError as err:
            raise PriceUnavailableError(f"Invalid price data received from API: {err}") from err
        logger.debug("%s USD price for %s: %s", self.name, token, usd)
        return usd
