"""Market price oracle abstraction."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from decimal import Decimal

from ..core.result import Ok, Result, price_unavailable
from ..core.types import TokenPair
from ..core.utils import safe_div

logger = logging.getLogger(__name__)


class PriceUnavailableError(Exception):
    """The feed could not produce a usable USD price for a token."""


class PriceOracle(ABC):
    name: str

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def fetch_usd_price(self, token: str) -> Decimal:
        """Return the USD price of ``token``; raise PriceUnavailableError otherwise."""
        ...


async def fetch_market_price(oracle: PriceOracle, pair: TokenPair) -> Result[Decimal]:
    """Quote-per-base market price from two concurrent USD lookups."""
    results = await asyncio.gather(
        asyncio.to_thread(oracle.fetch_usd_price, pair.base),
        asyncio.to_thread(oracle.fetch_usd_price, pair.quote),
        return_exceptions=True,
    )
    for token, res in zip((pair.base, pair.quote), results):
        if isinstance(res, PriceUnavailableError):
            logger.warning("price feed %s failed for %s: %s", oracle.name, token, res)
            return price_unavailable(f"Failed to fetch price for token {token}: {res}")
        if isinstance(res, BaseException):
            raise res
    base_usd, quote_usd = results
    market_price = safe_div(base_usd, quote_usd)
    if market_price is None:
        return price_unavailable(f"Quote token {pair.quote} has a zero USD price")
    logger.debug(
        "market price %s/%s = %s (base %s USD, quote %s USD)",
        pair.base,
        pair.quote,
        market_price,
        base_usd,
        quote_usd,
    )
    return Ok(market_price)
