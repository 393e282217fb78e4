"""Uniform random orientations: unit vectors on the sphere and unit quaternions.

Three interchangeable unit-vector samplers are provided. All of them are
exact, so every direction is equally likely:

- ``cube``: rejection from the cube (-1, 1)^3 into the unit ball, then
  normalization (acceptance probability pi/6, about 52%)
- ``polar``: cos(theta) and phi sampled directly, no rejection
- ``disk``: Marsaglia (1972), a point uniform in the unit disk mapped onto
  the sphere (acceptance probability pi/4)

Rejection loops run until acceptance unless ``max_attempts`` is given, in
which case SamplingExhausted is raised after that many failed candidates.
"""

import itertools
import logging
import numpy as np
from .errors import PreconditionViolation, SamplingExhausted
from .vectors import DEFAULT_TOL

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * np.pi


def attempt_range(max_attempts):
    """Iterator over attempt numbers: unbounded when max_attempts is None."""
    if max_attempts is None:
        return itertools.count()
    return range(int(max_attempts))


def raise_exhausted(routine, max_attempts):
    """Log and raise SamplingExhausted for a rejection loop that ran out of attempts."""
    logger.warning("%s: rejection loop exhausted after %d attempts", routine, max_attempts)
    raise SamplingExhausted(routine, max_attempts)


def _random_disk_point(rng, routine, max_attempts, exclude_origin=False):
    """Point uniform in the unit disk, and its squared length."""
    lower = 0.0 if exclude_origin else -1.0
    for _ in attempt_range(max_attempts):
        zeta = 2.0 * rng.random(2) - 1.0  # within the square (-1, 1)^2
        norm = float(np.dot(zeta, zeta))
        if lower < norm < 1.0:
            return zeta, norm
    raise_exhausted(routine, max_attempts)


def random_vector_cube(rng, max_attempts=None):
    """Uniform random unit vector by rejection from the enclosing cube.

    Args:
        rng: Random number generator (numpy.random.Generator)
        max_attempts: Optional bound on the number of candidates

    Returns:
        Unit vector, shape (3,)
    """
    for _ in attempt_range(max_attempts):
        e = 2.0 * rng.random(3) - 1.0  # within the containing cube
        norm = float(np.dot(e, e))
        # norm > 0 excludes the (measure zero) origin, which has no direction
        if 0.0 < norm < 1.0:
            return e / np.sqrt(norm)
    raise_exhausted("random_vector_cube", max_attempts)


def random_vector_polar(rng, max_attempts=None):
    """Uniform random unit vector from uniformly sampled cos(theta) and phi.

    max_attempts is accepted for a common signature; there is no rejection.
    """
    zeta = rng.random(2)
    c = 2.0 * zeta[0] - 1.0  # cos(theta), uniform in (-1, 1)

    if c >= 1.0:
        # Roundoff guard
        s = 0.0
    else:
        s = np.sqrt(1.0 - c * c)

    phi = TWO_PI * zeta[1]
    return np.array([s * np.cos(phi), s * np.sin(phi), c])


def random_vector_disk(rng, max_attempts=None):
    """Uniform random unit vector by Marsaglia's disk projection.

    Ref: Marsaglia, Ann Math Stat 43, 645 (1972)
    """
    zeta, norm = _random_disk_point(rng, "random_vector_disk", max_attempts)
    f = 2.0 * np.sqrt(1.0 - norm)
    return np.array([zeta[0] * f, zeta[1] * f, 1.0 - 2.0 * norm])


VECTOR_ALGORITHMS = {
    "cube": random_vector_cube,
    "polar": random_vector_polar,
    "disk": random_vector_disk,
}


def get_vector_algorithm(name):
    """Look up a unit-vector sampler by name."""
    try:
        return VECTOR_ALGORITHMS[name]
    except KeyError:
        raise ValueError(
            f"Unknown vector algorithm {name!r}; choose from {sorted(VECTOR_ALGORITHMS)}"
        ) from None


def random_vector(rng, algorithm="cube", max_attempts=None):
    """Uniform random unit vector using the named algorithm."""
    return get_vector_algorithm(algorithm)(rng, max_attempts=max_attempts)


def random_perpendicular_vector(old, rng, tol=DEFAULT_TOL, algorithm="cube", max_attempts=None):
    """Uniform random unit vector perpendicular to a reference vector.

    The reference need not be unit length, but its squared length must be
    at least tol. A random unit vector is drawn and its component along the
    reference removed; the draw is repeated in the rare case that the
    remainder is too short to normalize reliably.

    Args:
        old: Reference vector, shape (3,)
        rng: Random number generator (numpy.random.Generator)
        tol: Squared-length tolerance for the reference and the remainder
        algorithm: Name of the unit-vector sampler
        max_attempts: Optional bound on the number of draws

    Returns:
        Unit vector perpendicular to old, shape (3,)

    Raises:
        PreconditionViolation: If old has (nearly) zero length
    """
    old = np.asarray(old, dtype=np.float64)
    if old.shape != (3,):
        raise PreconditionViolation(f"reference vector must have shape (3,), got {old.shape}")
    norm = float(np.dot(old, old))
    # Negated so that a NaN reference is rejected instead of looping forever
    if not norm >= tol:
        raise PreconditionViolation(
            f"random_perpendicular_vector: reference vector too short (squared length {norm})"
        )
    n = old / np.sqrt(norm)
    sample = get_vector_algorithm(algorithm)

    for _ in attempt_range(max_attempts):
        e = sample(rng, max_attempts=max_attempts)
        e = e - np.dot(e, n) * n
        norm = float(np.dot(e, e))
        if norm > tol:
            return e / np.sqrt(norm)
    raise_exhausted("random_perpendicular_vector", max_attempts)


def random_quaternion(rng, max_attempts=None):
    """Uniform random unit quaternion (uniform rotation in SO(3)).

    Two independent points uniform in the unit disk fill (q0, q1) and, after
    scaling by sqrt((1 - norm1) / norm2), (q2, q3).

    Returns:
        Unit quaternion (w, x, y, z), shape (4,)
    """
    zeta1, norm1 = _random_disk_point(rng, "random_quaternion", max_attempts)
    # norm2 is a divisor, so the origin is rejected as well
    zeta2, norm2 = _random_disk_point(rng, "random_quaternion", max_attempts, exclude_origin=True)
    f = np.sqrt((1.0 - norm1) / norm2)
    return np.array([zeta1[0], zeta1[1], zeta2[0] * f, zeta2[1] * f])
