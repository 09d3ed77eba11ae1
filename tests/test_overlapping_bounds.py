import asyncio
from decimal import Decimal

from carbon_strategy.core.config import ResolverConfig
from carbon_strategy.core.result import FailureKind
from carbon_strategy.core.types import TokenPair
from carbon_strategy.oracle.static import StaticPriceOracle
from carbon_strategy.strategy.overlapping import OverlappingBoundResolver

PAIR = TokenPair(base="0xBASE", quote="0xQUOTE")


def _resolver(oracle=None, config=None):
    oracle = oracle or StaticPriceOracle({"0xBASE": "200", "0xQUOTE": "2"})
    return OverlappingBoundResolver(oracle, config or ResolverConfig())


def test_default_range_around_market_price():
    r = asyncio.run(_resolver().resolve(PAIR, None, None))
    assert r.value.buy_low == Decimal(90)
    assert r.value.sell_high == Decimal(110)
    assert r.value.market_price == Decimal(100)


def test_default_range_from_config():
    config = ResolverConfig(default_range_pct=Decimal(25))
    r = asyncio.run(_resolver(config=config).resolve(PAIR, None, None))
    assert (r.value.buy_low, r.value.sell_high) == (Decimal(75), Decimal(125))


def test_both_bounds_use_midpoint_formula_without_oracle():
    oracle = StaticPriceOracle()
    r = asyncio.run(_resolver(oracle).resolve(PAIR, "90", "110"))
    assert r.value.market_price == Decimal(10)
    assert (r.value.buy_low, r.value.sell_high) == (Decimal(90), Decimal(110))
    assert oracle.calls == []


def test_missing_sell_high_mirrors_buy_low():
    r = asyncio.run(_resolver().resolve(PAIR, "80", None))
    assert r.value.sell_high == Decimal(120)
    assert r.value.buy_low == Decimal(80)


def test_missing_buy_low_mirrors_sell_high():
    r = asyncio.run(_resolver().resolve(PAIR, None, "130"))
    assert r.value.buy_low == Decimal(70)


def test_mirrored_bound_cannot_go_negative():
    r = asyncio.run(_resolver().resolve(PAIR, None, "250"))
    assert r.kind is FailureKind.INVALID_RANGE_SPEC


def test_bound_must_be_single_value():
    r = asyncio.run(_resolver().resolve(PAIR, ["1", "2"], None))
    assert r.kind is FailureKind.INVALID_RANGE_SPEC


def test_effective_spread_defaults_when_zero_or_unset():
    res = _resolver()
    assert res.effective_spread(None).value == Decimal(1)
    assert res.effective_spread(0).value == Decimal(1)
    assert res.effective_spread("0").value == Decimal(1)
    assert res.effective_spread("2.5").value == Decimal("2.5")
    assert res.effective_spread("-1").kind is FailureKind.INVALID_RANGE_SPEC


def test_quote_price_zero_is_unavailable():
    oracle = StaticPriceOracle({"0xBASE": "200", "0xQUOTE": "0"})
    r = asyncio.run(_resolver(oracle).resolve(PAIR, None, None))
    assert r.kind is FailureKind.PRICE_UNAVAILABLE


def test_huge_bounds_mirror_and_midpoint():
    oracle = StaticPriceOracle({"0xBASE": "1e45", "0xQUOTE": "1"})
    r = asyncio.run(_resolver(oracle).resolve(PAIR, "9e44", None))
    assert r.value.sell_high == Decimal("1.1e45")
    r = asyncio.run(_resolver(oracle).resolve(PAIR, None, None))
    assert (r.value.buy_low, r.value.sell_high) == (Decimal("9e44"), Decimal("1.1e45"))
    r = asyncio.run(_resolver(oracle).resolve(PAIR, "1e60", "3e60"))
    assert r.value.market_price == Decimal("1e60")
