"""App bootstrap: wire oracle, curve backend and config into a resolver."""

from __future__ import annotations

import logging
from typing import Optional

from ..core.config import ResolverConfig
from ..oracle.carbon_api import CarbonApiOracle
from ..pricing.base import CurvePricing
from ..pricing.overlapping import ReferenceOverlappingCurve
from ..pricing.remote import RemoteCurvePricing
from ..strategy.resolver import StrategyParameterResolver

logger = logging.getLogger(__name__)


def build_curve(config: ResolverConfig) -> Optional[CurvePricing]:
    if config.curve_backend == "reference":
        logger.warning("using the reference overlapping curve; results are not protocol-verified")
        return ReferenceOverlappingCurve()
    if not config.curve_service_url:
        logger.warning("CARBON_CURVE_SERVICE_URL is not set; overlapping strategies cannot be resolved")
        return None
    return RemoteCurvePricing(config.curve_service_url, timeout=config.feed_timeout)


def build_resolver(config: Optional[ResolverConfig] = None) -> StrategyParameterResolver:
    config = config or ResolverConfig.from_env()
    return StrategyParameterResolver(
        oracle=CarbonApiOracle.from_config(config),
        curve=build_curve(config),
        config=config,
    )
