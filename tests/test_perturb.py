"""Tests for random rotations and translations used as trial moves."""

import numpy as np
import pytest
from mcmaths.errors import PreconditionViolation, SamplingExhausted
from mcmaths.orientation import VECTOR_ALGORITHMS, random_vector_cube, random_quaternion
from mcmaths.perturb import (
    ROTATE_ALGORITHMS,
    random_rotate_vector,
    random_rotate_vector_cap,
    random_rotate_vector_cartesian,
    random_rotate_vector_perpendicular,
    random_rotate_vector_small_step,
    random_rotate_quaternion,
    random_translate_vector,
)


def _angles(algorithm, angle_max, n_samples, seed):
    """Rotation angles between random unit vectors and their perturbed versions."""
    rng = np.random.default_rng(seed)
    rotate = ROTATE_ALGORITHMS[algorithm]
    angles = np.empty(n_samples)
    for i in range(n_samples):
        old = random_vector_cube(rng)
        e = rotate(angle_max, old, rng)
        np.testing.assert_allclose(np.dot(e, e), 1.0, atol=1e-12)
        angles[i] = np.arccos(np.clip(np.dot(e, old), -1.0, 1.0))
    return angles


@pytest.mark.parametrize("algorithm", ["perpendicular", "cartesian", "cap"])
def test_rotation_angle_bounded(algorithm):
    """Exact variants never rotate by more than angle_max."""
    angle_max = 0.3
    angles = _angles(algorithm, angle_max, 2000, seed=11)
    assert np.max(angles) <= angle_max + 1e-9


def test_small_step_angle_approximately_bounded():
    """Adding a vector of length a turns old by at most arcsin(a)."""
    angle_max = 0.05
    angles = _angles("small_step", angle_max, 2000, seed=12)
    assert np.max(angles) <= np.arcsin(angle_max) + 1e-9


def test_perpendicular_angle_is_uniform():
    """|angle| is uniform on [0, angle_max], so its mean is angle_max/2."""
    angle_max = 0.5
    n_samples = 20_000
    angles = _angles("perpendicular", angle_max, n_samples, seed=13)
    tolerance = 5.0 * angle_max / np.sqrt(12.0 * n_samples)
    np.testing.assert_allclose(np.mean(angles), 0.5 * angle_max, atol=tolerance)


def test_cap_is_uniform_within_cap():
    """Uniform on the cap means cos(angle) uniform on (cos(angle_max), 1)."""
    angle_max = 1.0
    n_samples = 20_000
    rng = np.random.default_rng(14)
    old = np.array([0.0, 0.0, 1.0])
    e = np.array([random_rotate_vector_cap(angle_max, old, rng) for _ in range(n_samples)])

    cos_min = np.cos(angle_max)
    assert np.all(e[:, 2] > cos_min)
    width = 1.0 - cos_min
    tolerance = 5.0 * width / np.sqrt(12.0 * n_samples)
    np.testing.assert_allclose(np.mean(e[:, 2]), 0.5 * (1.0 + cos_min), atol=tolerance)
    # Isotropic about the axis
    np.testing.assert_allclose(np.mean(e[:, :2], axis=0), 0.0, atol=5.0 / np.sqrt(n_samples))


def test_cartesian_rotates_about_a_coordinate_axis():
    """Exactly one component of old is unchanged: the one along the chosen axis."""
    rng = np.random.default_rng(15)
    old = np.array([0.48, 0.6, 0.64])
    for _ in range(100):
        e = random_rotate_vector_cartesian(0.4, old, rng)
        unchanged = np.isclose(e, old, rtol=0, atol=1e-12)
        assert np.count_nonzero(unchanged) >= 1


def test_cap_exhausts_for_vanishing_angle():
    """With angle_max ~ 0 the cap is never hit; max_attempts turns this into an error."""
    rng = np.random.default_rng(16)
    with pytest.raises(SamplingExhausted, match="random_rotate_vector_cap"):
        random_rotate_vector_cap(1e-6, np.array([1.0, 0.0, 0.0]), rng, max_attempts=100)


@pytest.mark.parametrize("algorithm", sorted(ROTATE_ALGORITHMS))
def test_rotation_requires_unit_old(algorithm):
    rng = np.random.default_rng(0)
    with pytest.raises(PreconditionViolation, match="not a unit vector"):
        random_rotate_vector(0.1, np.array([1.0, 1.0, 0.0]), rng, algorithm=algorithm)


def test_rotate_vector_dispatch():
    """Dispatch by name draws exactly what the direct call draws."""
    old = np.array([0.0, 1.0, 0.0])
    a = random_rotate_vector(0.2, old, np.random.default_rng(3), algorithm="perpendicular")
    b = random_rotate_vector_perpendicular(0.2, old, np.random.default_rng(3))
    np.testing.assert_array_equal(a, b)

    with pytest.raises(ValueError, match="Unknown rotate algorithm"):
        random_rotate_vector(0.2, old, np.random.default_rng(3), algorithm="tumble")


def test_random_rotate_quaternion_bounded_and_unit():
    """q_new = rot * q_old with rot_w = cos(angle/2) = <q_new, q_old>."""
    rng = np.random.default_rng(21)
    angle_max = 0.4
    n_samples = 20_000
    half_angles = np.empty(n_samples)
    for i in range(n_samples):
        q_old = random_quaternion(rng)
        q_new = random_rotate_quaternion(angle_max, q_old, rng)
        np.testing.assert_allclose(np.dot(q_new, q_new), 1.0, atol=1e-12)
        half_angles[i] = np.arccos(np.clip(np.dot(q_new, q_old), -1.0, 1.0))

    angles = 2.0 * half_angles
    assert np.max(angles) <= angle_max + 1e-9
    # A fresh uniform deviate per call: |angle| uniform on [0, angle_max]
    tolerance = 5.0 * angle_max / np.sqrt(12.0 * n_samples)
    np.testing.assert_allclose(np.mean(angles), 0.5 * angle_max, atol=tolerance)


def test_random_rotate_quaternion_requires_unit_old():
    with pytest.raises(PreconditionViolation, match="not a unit quaternion"):
        random_rotate_quaternion(0.1, np.array([1.0, 1.0, 0.0, 0.0]), np.random.default_rng(0))


def test_translate_vector_bounded():
    """Each component moves by at most dr_max; no renormalization."""
    rng = np.random.default_rng(22)
    old = np.array([5.0, -2.0, 0.5])
    dr_max = 0.15
    moves = np.array([random_translate_vector(dr_max, old, rng) for _ in range(5000)]) - old

    assert np.all(np.abs(moves) <= dr_max)
    np.testing.assert_allclose(np.mean(moves, axis=0), 0.0, atol=5.0 * dr_max / np.sqrt(3 * 5000))
    # Uniform on [-dr_max, dr_max] has variance dr_max^2 / 3
    np.testing.assert_allclose(np.var(moves, axis=0), dr_max**2 / 3.0, rtol=0.1)


@pytest.mark.parametrize("algorithm", sorted(ROTATE_ALGORITHMS))
def test_rotation_rejects_nan_old(algorithm):
    """NaN input fails the unit check before any rejection loop starts."""
    rng = np.random.default_rng(0)
    with pytest.raises(PreconditionViolation, match="not a unit vector"):
        random_rotate_vector(0.3, np.array([np.nan, 0.0, 0.0]), rng, algorithm=algorithm)
    with pytest.raises(PreconditionViolation, match="not a unit quaternion"):
        random_rotate_quaternion(0.3, np.array([np.nan, 0.0, 0.0, 0.0]), rng)


def _scripted_sampler(vectors):
    """Unit-vector sampler that returns the given vectors in turn."""
    it = iter(vectors)

    def sample(rng, max_attempts=None):
        return np.array(next(it), dtype=np.float64)

    return sample


def test_small_step_redraws_when_step_cancels_old(monkeypatch):
    old = np.array([1.0, 0.0, 0.0])
    monkeypatch.setitem(
        VECTOR_ALGORITHMS, "cube", _scripted_sampler([[-1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    )
    e = random_rotate_vector_small_step(1.0, old, np.random.default_rng(0))
    np.testing.assert_allclose(e, np.array([1.0, 1.0, 0.0]) / np.sqrt(2.0), atol=1e-12)


def test_small_step_cancelling_steps_exhaust(monkeypatch):
    old = np.array([0.0, 0.0, 1.0])
    monkeypatch.setitem(VECTOR_ALGORITHMS, "cube", _scripted_sampler([[0.0, 0.0, -1.0]] * 3))
    with pytest.raises(SamplingExhausted, match="random_rotate_vector_small_step"):
        random_rotate_vector_small_step(1.0, old, np.random.default_rng(0), max_attempts=3)
