"""Random perturbations of orientations and positions for trial moves.

Four interchangeable unit-vector rotation algorithms:

- ``small_step``: add a short random vector and renormalize. angle_max is only
  approximately the largest rotation and only for angle_max << 1; the
  rotation magnitude is not uniformly distributed. Cheapest.
- ``perpendicular``: rotate in the plane of old and a random perpendicular
  vector by an angle uniform in [-angle_max, angle_max].
- ``cartesian``: rotate about a randomly chosen Cartesian axis by an angle
  uniform in [-angle_max, angle_max] (Barker and Watts, Chem Phys Lett 3,
  144 (1969)).
- ``cap``: rejection of fully random vectors until one lies within the cone
  of half-angle angle_max about old (Marsaglia). Exact, but the acceptance
  probability (1 - cos(angle_max))/2 falls off quickly for small angle_max.

Every rotation routine requires old to be a unit vector (or unit quaternion).
"""

import numpy as np
from .orientation import (
    attempt_range,
    raise_exhausted,
    get_vector_algorithm,
    random_perpendicular_vector,
)
from .utils import random_integer
from .vectors import (
    DEFAULT_TOL,
    check_unit_vector,
    check_unit_quaternion,
    rotate_vector,
    rotate_quaternion,
)


def _uniform_angle(angle_max, rng):
    """Angle uniform in [-angle_max, angle_max] from one fresh uniform deviate."""
    zeta = rng.random()
    return (2.0 * zeta - 1.0) * angle_max


def random_rotate_vector_small_step(angle_max, old, rng, tol=DEFAULT_TOL,
                                    vector_algorithm="cube", max_attempts=None):
    """Perturb a unit vector by adding a random vector of length angle_max.

    Args:
        angle_max: Approximate maximum rotation angle in radians (<< 1)
        old: Unit vector, shape (3,)
        rng: Random number generator (numpy.random.Generator)
        tol: Tolerance for the unit-length check on old
        vector_algorithm: Name of the unit-vector sampler
        max_attempts: Optional bound for the unit-vector sampler

    Returns:
        New unit vector, shape (3,)
    """
    old = check_unit_vector(old, "random_rotate_vector_small_step old", tol)
    sample = get_vector_algorithm(vector_algorithm)

    for _ in attempt_range(max_attempts):
        e = old + angle_max * sample(rng, max_attempts=max_attempts)
        norm = float(np.dot(e, e))
        # Redraw if the step nearly cancels old (angle_max close to 1)
        if norm > tol:
            return e / np.sqrt(norm)
    raise_exhausted("random_rotate_vector_small_step", max_attempts)


def random_rotate_vector_perpendicular(angle_max, old, rng, tol=DEFAULT_TOL,
                                       vector_algorithm="cube", max_attempts=None):
    """Rotate a unit vector by a uniform angle about a random perpendicular axis."""
    old = check_unit_vector(old, "random_rotate_vector_perpendicular old", tol)

    perp = random_perpendicular_vector(
        old, rng, tol=tol, algorithm=vector_algorithm, max_attempts=max_attempts
    )
    angle = _uniform_angle(angle_max, rng)

    e = old * np.cos(angle) + perp * np.sin(angle)
    return e / np.sqrt(np.dot(e, e))  # only removes roundoff


def random_rotate_vector_cartesian(angle_max, old, rng, tol=DEFAULT_TOL,
                                   vector_algorithm="cube", max_attempts=None):
    """Rotate a unit vector by a uniform angle about a random Cartesian axis.

    vector_algorithm and max_attempts are accepted for a common signature.
    """
    old = check_unit_vector(old, "random_rotate_vector_cartesian old", tol)

    axis = np.zeros(3)
    axis[random_integer(0, 2, rng)] = 1.0
    angle = _uniform_angle(angle_max, rng)

    return rotate_vector(angle, axis, old, tol=tol)


def random_rotate_vector_cap(angle_max, old, rng, tol=DEFAULT_TOL,
                             vector_algorithm="cube", max_attempts=None):
    """Uniform random unit vector within the cone of half-angle angle_max about old.

    Ref: Marsaglia, Ann Math Stat 43, 645 (1972)
    """
    old = check_unit_vector(old, "random_rotate_vector_cap old", tol)
    sample = get_vector_algorithm(vector_algorithm)
    cos_min = np.cos(angle_max)

    for _ in attempt_range(max_attempts):
        e = sample(rng, max_attempts=max_attempts)
        if np.dot(e, old) > cos_min:
            return e
    raise_exhausted("random_rotate_vector_cap", max_attempts)


ROTATE_ALGORITHMS = {
    "small_step": random_rotate_vector_small_step,
    "perpendicular": random_rotate_vector_perpendicular,
    "cartesian": random_rotate_vector_cartesian,
    "cap": random_rotate_vector_cap,
}


def get_rotate_algorithm(name):
    """Look up a unit-vector rotation algorithm by name."""
    try:
        return ROTATE_ALGORITHMS[name]
    except KeyError:
        raise ValueError(
            f"Unknown rotate algorithm {name!r}; choose from {sorted(ROTATE_ALGORITHMS)}"
        ) from None


def random_rotate_vector(angle_max, old, rng, algorithm="small_step", **kwargs):
    """Randomly rotate a unit vector using the named algorithm."""
    return get_rotate_algorithm(algorithm)(angle_max, old, rng, **kwargs)


def random_rotate_quaternion(angle_max, old, rng, tol=DEFAULT_TOL,
                             vector_algorithm="cube", max_attempts=None):
    """Rotate a unit quaternion by a uniform angle about a random space-fixed axis.

    Args:
        angle_max: Maximum rotation angle in radians
        old: Unit quaternion (w, x, y, z), shape (4,)
        rng: Random number generator (numpy.random.Generator)
        tol: Tolerance for the unit-length check on old
        vector_algorithm: Name of the unit-vector sampler for the axis
        max_attempts: Optional bound for the axis sampler

    Returns:
        Rotated unit quaternion, shape (4,)
    """
    old = check_unit_quaternion(old, "random_rotate_quaternion old", tol)

    axis = get_vector_algorithm(vector_algorithm)(rng, max_attempts=max_attempts)
    angle = _uniform_angle(angle_max, rng)

    return rotate_quaternion(angle, axis, old, tol=tol)


def random_translate_vector(dr_max, old, rng):
    """Displace a position by a random amount in [-dr_max, dr_max] per component.

    Args:
        dr_max: Maximum displacement along each axis
        old: Position, shape (3,)
        rng: Random number generator (numpy.random.Generator)

    Returns:
        New position, shape (3,)
    """
    zeta = 2.0 * rng.random(3) - 1.0  # now in range (-1, +1)
    return np.asarray(old, dtype=np.float64) + zeta * dr_max
