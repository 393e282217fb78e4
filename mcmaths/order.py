"""Order parameters of whole configurations: translational, orientational, nematic.

Positions and orientations are arrays of shape (n, 3), one row per particle.
The translational and orientational parameters measure "melting" of a
starting alpha-fcc crystal of n = 4*nc**3 molecules; the nematic parameter
makes no lattice assumption.

Each function takes ``backend="python"`` (numpy reference, default) or
``backend="numba"`` (compiled kernels in order_numba.py).
"""

import logging
import numpy as np
from .backend import use_numba
from .errors import PreconditionViolation
from .order_numba import density_fourier_component_numba, p2_sum_numba, order_tensor_numba
from .utils import FCC_DIRECTIONS, fcc_cells
from .vectors import DEFAULT_TOL

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * np.pi

# Below this h every eigenvalue of Q is smaller than ~1e-12 and is taken as 0
_H_FLOOR = 1e-24


def _as_ensemble(a, name):
    """Return a as a contiguous float64 (n, 3) array with n >= 1."""
    a = np.ascontiguousarray(a, dtype=np.float64)
    if a.ndim != 2 or a.shape[1] != 3:
        raise PreconditionViolation(f"{name} must have shape (n, 3), got {a.shape}")
    if a.shape[0] == 0:
        raise PreconditionViolation(f"{name} is empty")
    return a


def _check_unit_rows(e, name, tol):
    norms = np.sum(e * e, axis=1)
    bad = np.flatnonzero(~(np.abs(norms - 1.0) <= tol))  # NaN rows count as bad
    if bad.size:
        i = int(bad[0])
        raise PreconditionViolation(
            f"{name}: orientation {i} is not a unit vector (squared length {norms[i]})"
        )


def default_reciprocal_vector(n):
    """Reciprocal lattice vector (-nc, nc, -nc) of an fcc lattice of n = 4*nc**3 sites."""
    nc = fcc_cells(n)
    return np.array([-nc, nc, -nc])


def density_fourier_component(r, k):
    """Fourier component rho(k) = (1/n) sum_j exp(2*pi*i k.r_j) of the density.

    Args:
        r: Positions in box=1 units, shape (n, 3)
        k: Integer reciprocal vector, shape (3,)

    Returns:
        Complex amplitude
    """
    r = _as_ensemble(r, "positions")
    kr = TWO_PI * (r @ np.asarray(k, dtype=np.float64))
    return complex(np.mean(np.exp(1j * kr)))


def translational_order(r, k=None, backend="python"):
    """Translational order parameter |rho(k)|^2.

    Positions and k are in box=1 units; k must be commensurate with the
    box, i.e. three integers. If k is omitted the lattice is assumed to be
    fcc with n = 4*nc**3 sites and k = (-nc, nc, -nc) is used.

    The result is 1 when every particle sits on a lattice site and decays
    to roughly 1/n for a disordered configuration.

    Args:
        r: Positions, shape (n, 3)
        k: Optional integer reciprocal vector, shape (3,)
        backend: "python" or "numba"

    Raises:
        PreconditionViolation: Wrong shapes, non-integer k, or n not fcc when k is omitted
    """
    r = _as_ensemble(r, "positions")
    if k is None:
        k = default_reciprocal_vector(r.shape[0])
    else:
        k = np.asarray(k)
        if k.shape != (3,):
            raise PreconditionViolation(f"reciprocal vector must have shape (3,), got {k.shape}")
        if not np.all(np.equal(np.mod(k, 1), 0)):
            raise PreconditionViolation(f"reciprocal vector must be integer, got {k}")

    if use_numba(backend, "translational order kernel"):
        k_real = TWO_PI * k.astype(np.float64)
        re, im = density_fourier_component_numba(r, k_real)
        return float(re * re + im * im)

    rho = density_fourier_component(r, k)
    return float(rho.real**2 + rho.imag**2)


def orientational_order(e, tol=DEFAULT_TOL, backend="python"):
    """Crystal orientational order parameter <P2(cos theta)>.

    theta is the angle between each molecule and its direction in the
    starting alpha-fcc crystal: four molecules per cell, each along a body
    diagonal, molecule i (0-based) assigned FCC_DIRECTIONS[(i + 1) % 4].
    This is 1 for the perfect crystal and decays to 0 as orientations
    randomize. Not the same thing as the nematic order parameter.

    Args:
        e: Unit orientation vectors, shape (n, 3), n = 4*nc**3
        tol: Tolerance for the unit-length checks
        backend: "python" or "numba"

    Raises:
        PreconditionViolation: Wrong shapes, non-unit vectors, or n not fcc
    """
    e = _as_ensemble(e, "orientations")
    _check_unit_rows(e, "orientational_order", tol)
    n = e.shape[0]
    fcc_cells(n)

    if use_numba(backend, "orientational order kernel"):
        return float(p2_sum_numba(e, FCC_DIRECTIONS) / n)

    ref = FCC_DIRECTIONS[(np.arange(n) + 1) % 4]
    c = np.sum(e * ref, axis=1)
    return float(np.mean(1.5 * c * c - 0.5))


def order_tensor(e, tol=DEFAULT_TOL, backend="python"):
    """Symmetric traceless order tensor Q = (3/2n) sum_i e_i e_i^T - I/2.

    Args:
        e: Unit orientation vectors, shape (n, 3)

    Returns:
        Q, shape (3, 3)
    """
    e = _as_ensemble(e, "orientations")
    _check_unit_rows(e, "order_tensor", tol)

    if use_numba(backend, "order tensor kernel"):
        return order_tensor_numba(e)

    q = 1.5 * (e.T @ e) / e.shape[0]
    q[np.diag_indices(3)] -= 0.5
    return q


def traceless_eigenvalues(q):
    """Eigenvalues of a symmetric traceless 3x3 matrix, largest first.

    Closed-form trigonometric solution of the characteristic cubic
    lambda**3 - 3*h*lambda - g = 0 with h = -(sum of principal 2x2 minors)/3
    and g = det(q): lambda_k = 2*sqrt(h)*cos((psi + 2*pi*k)/3) where
    cos(psi) = g / (2*h**1.5).

    Roundoff can make h slightly negative for a nearly isotropic tensor, so
    h is clamped at zero, and below _H_FLOOR all three roots are returned as 0.
    """
    h = (q[0, 0]*q[1, 1] - q[0, 1]*q[1, 0]
         + q[1, 1]*q[2, 2] - q[1, 2]*q[2, 1]
         + q[2, 2]*q[0, 0] - q[2, 0]*q[0, 2])
    h = max(-h / 3.0, 0.0)

    g = (q[0, 0]*q[1, 1]*q[2, 2] - q[0, 0]*q[1, 2]*q[2, 1]
         + q[0, 1]*q[1, 2]*q[2, 0] - q[1, 1]*q[2, 0]*q[0, 2]
         + q[1, 0]*q[2, 1]*q[0, 2] - q[2, 2]*q[0, 1]*q[1, 0])

    if h < _H_FLOOR:
        logger.debug("order tensor is isotropic to roundoff (h=%g), eigenvalues set to 0", h)
        return np.zeros(3)

    sqrt_h = np.sqrt(h)
    psi = np.arccos(np.clip(0.5 * g / (h * sqrt_h), -1.0, 1.0))
    lam = 2.0 * sqrt_h * np.cos((psi + TWO_PI * np.arange(3)) / 3.0)
    return np.sort(lam)[::-1]


def nematic_order(e, tol=DEFAULT_TOL, backend="python"):
    """Nematic order parameter: largest eigenvalue of the order tensor.

    This is <P2(cos theta)> with theta measured from the director, the
    direction that maximizes it. 1 for perfect alignment, about 0 for an
    isotropic sample (positive, of order 1/sqrt(n), for finite n).

    Args:
        e: Unit orientation vectors, shape (n, 3); any n
        tol: Tolerance for the unit-length checks
        backend: "python" or "numba"
    """
    q = order_tensor(e, tol=tol, backend=backend)
    return float(traceless_eigenvalues(q)[0])


def nematic_director(e, tol=DEFAULT_TOL):
    """Director: unit eigenvector of the order tensor with the largest eigenvalue.

    The sign is fixed so that the largest-magnitude component is positive.
    """
    q = order_tensor(e, tol=tol)
    _, vecs = np.linalg.eigh(q)
    d = vecs[:, -1]
    if d[np.argmax(np.abs(d))] < 0:
        d = -d
    return d
