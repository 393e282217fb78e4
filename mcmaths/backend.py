"""Choice between the numpy reference and the numba kernels.

Only the ensemble reductions in order.py have compiled versions. Every one
of them takes ``backend="python"`` or ``backend="numba"``; use_numba turns
that string into the decision, so a missing numba is reported the same way
everywhere.
"""

import os

try:
    from numba import njit
    NUMBA_AVAILABLE = True
except ImportError:
    NUMBA_AVAILABLE = False
    njit = None

BACKENDS = ("python", "numba")


def python_fallback_allowed():
    """True if MCMATHS_ALLOW_PYTHON permits running numba paths in Python."""
    return os.getenv("MCMATHS_ALLOW_PYTHON", "0").lower() in ("1", "true", "yes")


def require_numba(feature: str):
    """Raise ImportError for a numba-only feature unless numba or the fallback is available.

    Args:
        feature: What needs numba, for the message (e.g. "order tensor kernel")
    """
    if NUMBA_AVAILABLE or python_fallback_allowed():
        return
    raise ImportError(
        f"Numba is required for {feature}. "
        f"Install with: pip install numba\n"
        f"(To fall back to the numpy reference instead, set MCMATHS_ALLOW_PYTHON=1)"
    )


def use_numba(backend: str, feature: str) -> bool:
    """Whether a reduction asked for with ``backend`` should run its numba kernel.

    Returns False for "python", and for "numba" when numba is missing but
    MCMATHS_ALLOW_PYTHON is set.

    Raises:
        ValueError: Unknown backend name
        ImportError: "numba" requested without numba or the fallback
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend {backend!r}; choose from {list(BACKENDS)}")
    if backend == "python":
        return False
    require_numba(feature)
    return NUMBA_AVAILABLE


__all__ = ["NUMBA_AVAILABLE", "BACKENDS", "njit", "python_fallback_allowed",
           "require_numba", "use_numba"]
