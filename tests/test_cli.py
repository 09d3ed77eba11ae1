import json

from carbon_strategy.app import resolve_cli
from carbon_strategy.oracle.static import StaticPriceOracle
from carbon_strategy.pricing.overlapping import ReferenceOverlappingCurve
from carbon_strategy.strategy.resolver import StrategyParameterResolver


def _patch(monkeypatch):
    oracle = StaticPriceOracle({"0xBASE": "200", "0xQUOTE": "2"})

    def fake_build(config):
        return StrategyParameterResolver(oracle, ReferenceOverlappingCurve(), config)

    monkeypatch.setattr(resolve_cli, "build_resolver", fake_build)
    monkeypatch.setattr(resolve_cli, "setup_logging", lambda *a, **k: None)
    monkeypatch.chdir("/")
    return oracle


def test_recurring_success_envelope(monkeypatch, capsys):
    _patch(monkeypatch)
    code = resolve_cli.main(
        [
            "recurring",
            "--base", "0xBASE",
            "--quote", "0xQUOTE",
            "--buy-range", "2", "1",
            "--sell-range", "3",
            "--buy-budget", "10",
        ]
    )
    out = json.loads(capsys.readouterr().out)
    assert code == 0
    assert out["status"] == "success"
    params = out["params"]
    assert params["buyPriceLow"] == "1"
    assert params["buyPriceMarginal"] == "2"
    assert params["sellPriceHigh"] == "3"
    assert params["buyBudget"] == "10"
    assert params["sellBudget"] == "0"


def test_overlapping_defaults(monkeypatch, capsys):
    _patch(monkeypatch)
    code = resolve_cli.main(["overlapping", "--base", "0xBASE", "--quote", "0xQUOTE", "--sell-budget", "1"])
    params = json.loads(capsys.readouterr().out)["params"]
    assert code == 0
    assert params["buyPriceLow"] == "90"
    assert params["sellPriceHigh"] == "110"
    assert params["marketPrice"] == "100"


def test_failure_envelope(monkeypatch, capsys):
    _patch(monkeypatch)
    code = resolve_cli.main(
        ["disposable", "--base", "0xBASE", "--quote", "0xQUOTE", "--buy-budget", "1", "--sell-budget", "1"]
    )
    out = json.loads(capsys.readouterr().out)
    assert code == 1
    assert out["status"] == "error"
    assert out["code"] == "InvalidRangeSpec"
