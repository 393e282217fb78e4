"""Pytest configuration and fixtures."""

import numpy as np
import pytest
from mcmaths.backend import NUMBA_AVAILABLE


def pytest_addoption(parser):
    """Add command-line options for pytest."""
    parser.addoption(
        "--runslow",
        action="store_true",
        default=False,
        help="run slow tests"
    )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --runslow is given."""
    if config.getoption("--runslow"):
        return

    skip_slow = pytest.mark.skip(reason="need --runslow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(scope="session", autouse=True)
def warmup_numba_jit():
    """Compile the order-parameter kernels once per session.

    Keeps JIT compilation time out of the individual test timings.
    """
    if not NUMBA_AVAILABLE:
        return

    try:
        from mcmaths.order_numba import (
            density_fourier_component_numba,
            p2_sum_numba,
            order_tensor_numba,
        )
        from mcmaths.utils import FCC_DIRECTIONS

        e = np.ascontiguousarray(FCC_DIRECTIONS, dtype=np.float64)
        _ = density_fourier_component_numba(e, np.array([1.0, 2.0, 3.0]))
        _ = p2_sum_numba(e, FCC_DIRECTIONS)
        _ = order_tensor_numba(e)

    except (ImportError, AttributeError):
        # numba present but unusable; the consistency tests report it
        pass


@pytest.fixture
def rng():
    """Deterministic generator for tests that do not care about the seed."""
    return np.random.default_rng(20240601)
