import asyncio
from decimal import Decimal

from carbon_strategy.core.config import ResolverConfig
from carbon_strategy.core.result import Failure, FailureKind
from carbon_strategy.core.types import TokenPair
from carbon_strategy.oracle.static import StaticPriceOracle
from carbon_strategy.strategy.range import RangeResolver, is_given, parse_range

PAIR = TokenPair(base="0xBASE", quote="0xQUOTE")


def _resolver(oracle=None, config=None):
    oracle = oracle or StaticPriceOracle({"0xBASE": "200", "0xQUOTE": "2"})
    return RangeResolver(oracle, config or ResolverConfig())


def test_explicit_buy_range_is_sorted_and_marginal_is_high():
    for a, b in [("1", "2"), ("2", "1"), ("0.5", "0.5")]:
        r = asyncio.run(_resolver().resolve(PAIR, [a, b], "3"))
        prices = r.value.prices
        assert prices.buy_low == min(Decimal(a), Decimal(b))
        assert prices.buy_high == prices.buy_marginal == max(Decimal(a), Decimal(b))


def test_explicit_sell_range_marginal_is_low():
    r = asyncio.run(_resolver().resolve(PAIR, "1", ["7", "5"]))
    prices = r.value.prices
    assert (prices.sell_low, prices.sell_marginal, prices.sell_high) == (
        Decimal(5),
        Decimal(5),
        Decimal(7),
    )
    assert r.value.market_price is None


def test_large_values_sort_exactly():
    big = "123456789012345678901234567890.000000000000000001"
    bigger = "123456789012345678901234567890.000000000000000002"
    r = asyncio.run(_resolver().resolve(PAIR, [bigger, big], [big, bigger]))
    assert r.value.prices.buy_low == Decimal(big)
    assert r.value.prices.buy_high == Decimal(bigger)


def test_explicit_ranges_skip_the_oracle():
    oracle = StaticPriceOracle()
    r = asyncio.run(_resolver(oracle).resolve(PAIR, "1", "2"))
    assert r.ok
    assert oracle.calls == []


def test_default_spreads_around_market_price():
    r = asyncio.run(_resolver().resolve(PAIR, None, None))
    p = r.value.prices
    assert r.value.market_price == Decimal(100)
    assert p.buy_low == Decimal(95)
    assert p.buy_high == p.buy_marginal == Decimal(99)
    assert p.sell_low == p.sell_marginal == Decimal(101)
    assert p.sell_high == Decimal(105)
    assert p.is_ordered()


def test_default_spreads_come_from_config():
    config = ResolverConfig(spread_inner=Decimal("0.02"), spread_outer=Decimal("0.1"))
    r = asyncio.run(_resolver(config=config).resolve(PAIR, None, None))
    assert r.value.prices.buy_low == Decimal(90)
    assert r.value.prices.sell_low == Decimal(102)


def test_mixed_ranges_are_invalid():
    r = asyncio.run(_resolver().resolve(PAIR, "1", None))
    assert isinstance(r, Failure)
    assert r.kind is FailureKind.INVALID_RANGE_SPEC


def test_bad_range_values():
    assert parse_range(["1", "2", "3"], "buy").kind is FailureKind.INVALID_RANGE_SPEC
    assert parse_range("abc", "buy").kind is FailureKind.INVALID_RANGE_SPEC
    assert parse_range("-1", "buy").kind is FailureKind.INVALID_RANGE_SPEC
    assert parse_range(["4"], "buy").value == (Decimal(4), Decimal(4))


def test_is_given():
    assert not is_given(None)
    assert not is_given("")
    assert not is_given([])
    assert is_given("0")
    assert is_given(["1", "2"])


def test_oracle_failure_surfaces():
    oracle = StaticPriceOracle({"0xBASE": "200"})
    r = asyncio.run(_resolver(oracle).resolve(PAIR, None, None))
    assert r.kind is FailureKind.PRICE_UNAVAILABLE
