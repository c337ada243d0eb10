"""Unit tests for the scoring engine's native/Python dispatch"""

import sys
import types

import pytest
from prometheus_client import REGISTRY

from homeu_scores.domain.exceptions import DoubleFailureError, InvalidInputError
from homeu_scores.domain.market import calculate_deal_score
from homeu_scores.domain.models import DealScoreInput
from homeu_scores.infrastructure.dispatch import (
    CALCULATORS,
    ENGINE_VERSION,
    Calculator,
    ScoringEngine,
    load_native_backend,
)

PARITY = DealScoreInput(current_rent=2000.0, market_rent=2000.0, occupancy_rate=95.0)


def sample(name: str, labels: dict) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def native_module(**functions) -> types.ModuleType:
    module = types.ModuleType("fake_native")
    module.__version__ = "9.9.9"
    for name, fn in functions.items():
        setattr(module, name, fn)
    return module


def test_python_engine_runs_canonical_implementation(engine):
    """Without a native backend the Python implementation runs"""
    assert engine.run("deal_score", PARITY) == calculate_deal_score(PARITY)
    assert engine.backend == "python"
    assert engine.version == ENGINE_VERSION


def test_native_result_is_used_when_available():
    """A native function with the matching name takes precedence"""
    sentinel = object()
    engine = ScoringEngine(native=native_module(calculate_deal_score=lambda data: sentinel))

    assert engine.run("deal_score", PARITY) is sentinel
    assert engine.backend == "native"
    assert engine.version == "9.9.9"


def test_missing_native_function_uses_python():
    """Calculators the backend does not export run in Python"""
    engine = ScoringEngine(native=native_module())
    assert engine.run("deal_score", PARITY) == calculate_deal_score(PARITY)


def test_native_failure_falls_back_once():
    """A native failure counts a fallback and runs Python exactly once"""
    calls = []

    def broken(data):
        calls.append(data)
        raise RuntimeError("segfault-ish")

    engine = ScoringEngine(native=native_module(calculate_deal_score=broken))
    before = sample("homeu_calculation_fallback_total", {"calculator": "deal_score"})

    result = engine.run("deal_score", PARITY)

    assert result == calculate_deal_score(PARITY)
    assert len(calls) == 1
    assert sample("homeu_calculation_fallback_total", {"calculator": "deal_score"}) == before + 1


def test_invalid_input_propagates_after_native_failure():
    """Invalid input from the Python path is never wrapped"""
    def broken(data):
        raise ValueError("bad input")

    engine = ScoringEngine(native=native_module(calculate_deal_score=broken))
    with pytest.raises(InvalidInputError):
        engine.run("deal_score", DealScoreInput(current_rent=-5.0, market_rent=2000.0, occupancy_rate=95.0))


def test_python_failure_is_double_failure(monkeypatch, engine):
    """An unexpected Python error surfaces as DoubleFailureError"""
    def boom(data):
        raise ZeroDivisionError("unexpected")

    monkeypatch.setitem(CALCULATORS, "deal_score", Calculator("deal_score", boom))
    before = sample("homeu_calculation_total", {"calculator": "deal_score", "outcome": "failed"})

    with pytest.raises(DoubleFailureError):
        engine.run("deal_score", PARITY)
    assert sample("homeu_calculation_total", {"calculator": "deal_score", "outcome": "failed"}) == before + 1


def test_success_is_counted(engine):
    """Successful calculations increment the outcome counter"""
    before = sample("homeu_calculation_total", {"calculator": "deal_score", "outcome": "success"})
    engine.run("deal_score", PARITY)
    assert sample("homeu_calculation_total", {"calculator": "deal_score", "outcome": "success"}) == before + 1


def test_workers_only_above_threshold():
    """Batches at or below the threshold are scored inline"""
    engine = ScoringEngine(max_workers=8, parallel_threshold=32)
    assert engine.workers_for(32) == 1
    assert engine.workers_for(33) == 8


def test_batch_calculators_receive_worker_count(monkeypatch):
    """Batch calculators get max_workers sized from their input"""
    seen = {}

    def fake_batch(tenants, max_workers=1):
        seen["max_workers"] = max_workers
        return []

    monkeypatch.setitem(CALCULATORS, "tenant_risk_batch", Calculator("tenant_risk_batch", fake_batch, len))
    ScoringEngine(max_workers=4, parallel_threshold=2).run("tenant_risk_batch", [object()] * 3)
    assert seen["max_workers"] == 4


def test_every_calculator_is_registered():
    """Every calculator is reachable by name"""
    assert set(CALCULATORS) == {
        "desirability",
        "negotiation",
        "renter_score",
        "deal_score",
        "leverage_score",
        "renewal_strategy",
        "tenant_risk",
        "tenant_risk_batch",
        "creditworthiness",
        "creditworthiness_batch",
        "collection_forecast",
        "portfolio_risk",
        "portfolio_summary",
    }


def test_load_native_backend_unset_or_missing():
    """No configured or importable backend means Python only"""
    assert load_native_backend(None) is None
    assert load_native_backend("homeu_scores_no_such_backend") is None


def test_load_native_backend_health_check(monkeypatch):
    """A backend failing its health check is skipped"""
    healthy = native_module(health_check=lambda: True)
    unhealthy = native_module(health_check=lambda: False)
    monkeypatch.setitem(sys.modules, "fake_native_ok", healthy)
    monkeypatch.setitem(sys.modules, "fake_native_down", unhealthy)

    assert load_native_backend("fake_native_ok") is healthy
    assert load_native_backend("fake_native_down") is None


def test_engine_health_report():
    """Health reports backend, version and status"""
    engine = ScoringEngine(native=native_module(health_check=lambda: True))
    assert engine.health() == {"backend": "native", "version": "9.9.9", "healthy": True}
    assert ScoringEngine().health() == {"backend": "python", "version": ENGINE_VERSION, "healthy": True}
