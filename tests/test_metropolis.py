"""Tests for the Metropolis acceptance test and step tuning."""

import numpy as np
import pytest
from mcmaths.metropolis import EXPONENT_GUARD, metropolis, AcceptanceCounter, adjust_step


def _state(rng):
    return rng.bit_generator.state


def test_downhill_always_accepted_without_draw():
    rng = np.random.default_rng(1)
    before = _state(rng)
    for delta in (-1e-12, -0.5, -1e6):
        assert metropolis(delta, rng) is True
    assert _state(rng) == before


def test_guard_rejects_without_draw():
    rng = np.random.default_rng(2)
    before = _state(rng)
    for delta in (EXPONENT_GUARD + 1e-9, 100.0, 1e300, np.inf):
        assert metropolis(delta, rng) is False
    assert _state(rng) == before


def test_custom_guard():
    rng = np.random.default_rng(3)
    before = _state(rng)
    assert metropolis(10.0, rng, exponent_guard=5.0) is False
    assert _state(rng) == before


def test_zero_delta_always_accepted():
    """exp(0) = 1 exceeds every zeta in [0, 1)."""
    rng = np.random.default_rng(4)
    assert all(metropolis(0.0, rng) for _ in range(1000))


def test_uphill_consumes_one_draw():
    """0 <= delta <= guard draws exactly one uniform and compares against it."""
    rng = np.random.default_rng(5)
    twin = np.random.default_rng(5)
    delta = 0.7
    for _ in range(100):
        zeta = twin.random()
        assert metropolis(delta, rng) == (np.exp(-delta) > zeta)
    assert _state(rng) == _state(twin)


def test_acceptance_rate_matches_exp():
    rng = np.random.default_rng(6)
    n_trials = 50_000
    for delta in (0.25, 1.0, 3.0):
        rate = np.mean([metropolis(delta, rng) for _ in range(n_trials)])
        p = np.exp(-delta)
        tolerance = 5.0 * np.sqrt(p * (1 - p) / n_trials)
        assert abs(rate - p) < tolerance, f"delta={delta}: rate {rate} vs {p}"


def test_acceptance_counter():
    counter = AcceptanceCounter()
    assert counter.acceptance == 0.0
    for accepted in (True, False, True, True):
        assert counter.record(accepted) is accepted
    assert counter.attempts == 4
    assert counter.accepts == 3
    assert counter.acceptance == pytest.approx(0.75)
    counter.reset()
    assert (counter.attempts, counter.accepts) == (0, 0)


def test_adjust_step():
    assert adjust_step(0.1, 0.8) == pytest.approx(0.105)
    assert adjust_step(0.1, 0.2) == pytest.approx(0.1 / 1.05)
    assert adjust_step(0.1, 0.52) == 0.1
    assert adjust_step(3.1, 0.9, step_max=np.pi) == np.pi
    with pytest.raises(ValueError):
        adjust_step(0.1, 0.5, factor=0.9)
