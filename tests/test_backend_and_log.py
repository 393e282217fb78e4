"""Tests for backend selection and logger setup."""

import logging
import numpy as np
import pytest
from mcmaths import backend
from mcmaths.log import get_logger
from mcmaths.order import nematic_order


def test_require_numba_without_numba(monkeypatch):
    """Missing numba raises, unless the Python escape hatch is set."""
    monkeypatch.setattr(backend, "NUMBA_AVAILABLE", False)
    monkeypatch.delenv("MCMATHS_ALLOW_PYTHON", raising=False)
    with pytest.raises(ImportError, match="MCMATHS_ALLOW_PYTHON"):
        backend.require_numba("test feature")

    monkeypatch.setenv("MCMATHS_ALLOW_PYTHON", "1")
    backend.require_numba("test feature")


def test_numba_backend_falls_back_when_allowed(monkeypatch):
    """With the escape hatch, backend='numba' runs the numpy reference."""
    monkeypatch.setattr(backend, "NUMBA_AVAILABLE", False)
    monkeypatch.setenv("MCMATHS_ALLOW_PYTHON", "true")
    e = np.tile([0.0, 1.0, 0.0], (3, 1))
    assert nematic_order(e, backend="numba") == pytest.approx(1.0)


def test_get_logger_idempotent():
    name = "mcmaths.tests.logger"
    logger = get_logger(name, level=logging.DEBUG)
    again = get_logger(name, level=logging.DEBUG)
    assert logger is again
    assert logger.level == logging.DEBUG
    flagged = [h for h in logger.handlers if getattr(h, "_mcmaths_handler", False)]
    assert len(flagged) == 1


def test_use_numba_backend_names(monkeypatch):
    assert backend.use_numba("python", "test feature") is False

    monkeypatch.setattr(backend, "NUMBA_AVAILABLE", True)
    assert backend.use_numba("numba", "test feature") is True

    with pytest.raises(ValueError, match="Unknown backend"):
        backend.use_numba("cuda", "test feature")


def test_unknown_backend_rejected_by_order_routines():
    e = np.tile([0.0, 0.0, 1.0], (4, 1))
    with pytest.raises(ValueError, match="Unknown backend"):
        nematic_order(e, backend="fortran")
