"""Random-stream helpers and reference-lattice construction."""

import numpy as np
from .errors import PreconditionViolation

# Body diagonals of the cubic cell, one per molecule of the alpha-fcc basis
FCC_DIRECTIONS = np.sqrt(1.0 / 3.0) * np.array([
    [1.0, 1.0, 1.0],
    [1.0, -1.0, -1.0],
    [-1.0, 1.0, -1.0],
    [-1.0, -1.0, 1.0],
])

# Positions of the four fcc basis sites in a unit cell of side 1
FCC_BASIS = np.array([
    [0.0, 0.0, 0.0],
    [0.5, 0.5, 0.0],
    [0.5, 0.0, 0.5],
    [0.0, 0.5, 0.5],
])


def make_rng(seed=None):
    """Return a numpy Generator; seed=None draws fresh OS entropy."""
    return np.random.default_rng(seed)


def spawn_streams(rng, n):
    """Split off n independent child generators, one per concurrent context.

    Args:
        rng: Parent generator (numpy.random.Generator)
        n: Number of child streams

    Returns:
        List of n numpy.random.Generator instances
    """
    if n < 1:
        raise PreconditionViolation(f"Number of streams must be >= 1, got {n}")
    return rng.spawn(n)


def random_integer(k1, k2, rng):
    """Uniformly distributed integer in the inclusive range between k1 and k2.

    The bounds may be given in either order.
    """
    k_min, k_max = min(k1, k2), max(k1, k2)
    return int(rng.integers(k_min, k_max, endpoint=True))


def random_normals(mean, std, shape, rng):
    """Normally distributed deviates, e.g. Maxwell-Boltzmann velocities.

    Args:
        mean: Mean of the distribution
        std: Standard deviation, >= 0
        shape: Output shape; None returns a single float
        rng: Random number generator (numpy.random.Generator)

    Returns:
        float, or array of the given shape
    """
    if not std >= 0:
        raise PreconditionViolation(f"Standard deviation must be >= 0, got {std}")
    if shape is None:
        return float(rng.normal(mean, std))
    return rng.normal(mean, std, size=shape)


def pick(weights, rng):
    """Pick an option with probability proportional to its weight.

    Args:
        weights: Non-negative weights, integer or real, shape (m,)
        rng: Random number generator (numpy.random.Generator)

    Returns:
        Index of the chosen option in [0, m)

    Raises:
        PreconditionViolation: If weights are empty, negative, or sum to zero
    """
    w = np.asarray(weights, dtype=np.float64)
    if w.ndim != 1 or w.size == 0:
        raise PreconditionViolation(f"weights must be a non-empty 1-D array, got shape {w.shape}")
    if np.any(w < 0):
        raise PreconditionViolation("weights must be non-negative")
    total = np.sum(w)
    if not total > 0:
        raise PreconditionViolation("weights sum to zero")

    cumw = np.cumsum(w)
    zeta = rng.random() * total
    idx = int(np.searchsorted(cumw, zeta, side="right"))
    # zeta < total, but cumsum roundoff can leave cumw[-1] slightly below it
    return min(idx, w.size - 1)


def fcc_cells(n):
    """Number of fcc unit cells per box edge for n = 4*nc**3 particles.

    Raises:
        PreconditionViolation: If n is not of the form 4*nc**3
    """
    nc = int(round((n / 4.0) ** (1.0 / 3.0)))
    if n < 1 or 4 * nc**3 != n:
        raise PreconditionViolation(
            f"Particle count {n} is not an fcc lattice (nearest 4*nc**3 = {4 * nc**3})"
        )
    return nc


def fcc_lattice(nc):
    """Positions of a perfect fcc lattice of nc**3 cells in box=1 units.

    Particle ordering is cell by cell, four basis sites per cell, so the
    particle index modulo 4 identifies the basis site.

    Args:
        nc: Number of unit cells along each edge

    Returns:
        Array of particle positions, shape (4*nc**3, 3), in [0, 1)
    """
    if nc < 1:
        raise PreconditionViolation(f"nc must be >= 1, got {nc}")
    grid = np.arange(nc, dtype=np.float64)
    cells = np.array(np.meshgrid(grid, grid, grid, indexing="ij")).reshape(3, -1).T
    r = (cells[:, None, :] + FCC_BASIS[None, :, :]).reshape(-1, 3)
    return r / nc


def fcc_orientations(n):
    """Reference orientations of the alpha-fcc crystal for n molecules.

    Molecule i (0-based) points along FCC_DIRECTIONS[(i + 1) % 4], which is
    the assignment orientational_order compares against.
    """
    idx = (np.arange(n) + 1) % 4
    return FCC_DIRECTIONS[idx].copy()
