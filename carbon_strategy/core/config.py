"""Immutable resolver configuration.

Default spreads, fee and range percentages plus the external endpoints are
held in one frozen value that is passed into every resolver, so tests can
override any default without touching module state.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Optional

from dotenv import find_dotenv, load_dotenv

from .utils import to_decimal

CURVE_BACKENDS = ("remote", "reference")


@dataclass(frozen=True)
class ResolverConfig:
    # disposable/recurring defaults, as fractions of the market price
    spread_inner: Decimal = Decimal("0.01")
    spread_outer: Decimal = Decimal("0.05")
    # overlapping defaults, in percent
    default_fee_pct: Decimal = Decimal("1")
    default_range_pct: Decimal = Decimal("10")
    # spread handed to budget conversions; None means default_range_pct
    budget_spread_pct: Optional[Decimal] = None

    price_feed_url: str = "https://api.carbondefi.xyz/v1/sei/market-rate"
    feed_timeout: Optional[float] = None
    curve_service_url: Optional[str] = None
    curve_backend: str = "remote"

    def __post_init__(self):
        if self.spread_inner > self.spread_outer:
            raise ValueError("spread_inner must not exceed spread_outer")
        if self.spread_outer >= 1:
            raise ValueError("spread_outer must be below 1")
        if not Decimal(0) < self.default_range_pct < Decimal(100):
            raise ValueError("default_range_pct must be between 0 and 100")
        if self.budget_spread_pct is not None and not Decimal(0) < self.budget_spread_pct < Decimal(100):
            raise ValueError("budget_spread_pct must be between 0 and 100")
        if self.curve_backend not in CURVE_BACKENDS:
            raise ValueError(f"curve_backend must be one of {CURVE_BACKENDS}")

    @property
    def conversion_spread_pct(self) -> Decimal:
        if self.budget_spread_pct is not None:
            return self.budget_spread_pct
        return self.default_range_pct

    def with_overrides(self, **changes: Any) -> "ResolverConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(cls) -> "ResolverConfig":
        """Build a config from ``CARBON_*`` environment variables (and .env)."""
        load_dotenv(find_dotenv(usecwd=True))
        kwargs: dict = {}
        for field_name, env in (
            ("spread_inner", "CARBON_SPREAD_INNER"),
            ("spread_outer", "CARBON_SPREAD_OUTER"),
            ("default_fee_pct", "CARBON_DEFAULT_FEE_PCT"),
            ("default_range_pct", "CARBON_DEFAULT_RANGE_PCT"),
            ("budget_spread_pct", "CARBON_BUDGET_SPREAD_PCT"),
        ):
            raw = os.getenv(env)
            if raw:
                kwargs[field_name] = to_decimal(raw)
        feed_url = os.getenv("CARBON_PRICE_FEED_URL")
        if feed_url:
            kwargs["price_feed_url"] = feed_url
        timeout = os.getenv("CARBON_FEED_TIMEOUT")
        if timeout:
            kwargs["feed_timeout"] = float(timeout)
        curve_url = os.getenv("CARBON_CURVE_SERVICE_URL")
        if curve_url:
            kwargs["curve_service_url"] = curve_url
        backend = os.getenv("CARBON_CURVE_BACKEND")
        if backend:
            kwargs["curve_backend"] = backend.strip().lower()
        return cls(**kwargs)
