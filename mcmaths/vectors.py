"""Vector and quaternion algebra: cross/outer products, rotations, rotation matrices.

Quaternions are stored as shape (4,) arrays ordered (w, x, y, z).
Nothing in this module draws random numbers.
"""

import numpy as np
from .errors import PreconditionViolation

# Tolerance on squared length for unit vectors and quaternions
DEFAULT_TOL = 1e-6


def check_unit_vector(v, name="vector", tol=DEFAULT_TOL):
    """Return v as a float64 (3,) array, raising if it is not unit length.

    Args:
        v: Vector, shape (3,)
        name: Label used in the error message
        tol: Allowed deviation of the squared length from 1

    Raises:
        PreconditionViolation: wrong shape, or |v|^2 differs from 1 by more than tol
    """
    v = np.asarray(v, dtype=np.float64)
    if v.shape != (3,):
        raise PreconditionViolation(f"{name} must have shape (3,), got {v.shape}")
    norm = float(np.dot(v, v))
    # Negated so that a NaN length fails the check
    if not abs(norm - 1.0) <= tol:
        raise PreconditionViolation(f"{name} is not a unit vector: squared length {norm}")
    return v


def check_unit_quaternion(q, name="quaternion", tol=DEFAULT_TOL):
    """Return q as a float64 (4,) array, raising if it is not unit length."""
    q = np.asarray(q, dtype=np.float64)
    if q.shape != (4,):
        raise PreconditionViolation(f"{name} must have shape (4,), got {q.shape}")
    norm = float(np.dot(q, q))
    if not abs(norm - 1.0) <= tol:
        raise PreconditionViolation(f"{name} is not a unit quaternion: squared length {norm}")
    return q


def check_vector3(v, name="vector"):
    """Return v as a float64 (3,) array, raising if it has another shape."""
    v = np.asarray(v, dtype=np.float64)
    if v.shape != (3,):
        raise PreconditionViolation(f"{name} must have shape (3,), got {v.shape}")
    return v


def cross_product(a, b):
    """Right-handed cross product of two 3-vectors."""
    a = check_vector3(a, "cross_product a")
    b = check_vector3(b, "cross_product b")
    return np.array([
        a[1]*b[2] - a[2]*b[1],
        a[2]*b[0] - a[0]*b[2],
        a[0]*b[1] - a[1]*b[0],
    ])


def outer_product(a, b, c=None):
    """Outer product of two vectors (rank 2) or three vectors (rank 3).

    Args:
        a, b: Vectors, shapes (m,) and (n,)
        c: Optional third vector, shape (p,)

    Returns:
        Array of shape (m, n) with d[i, j] = a[i]*b[j], or (m, n, p) with
        d[i, j, k] = a[i]*b[j]*c[k] when c is given
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.ndim != 1 or b.ndim != 1:
        raise PreconditionViolation("outer_product expects 1-D vectors")
    if c is None:
        return a[:, None] * b[None, :]
    c = np.asarray(c, dtype=np.float64)
    if c.ndim != 1:
        raise PreconditionViolation("outer_product expects 1-D vectors")
    return a[:, None, None] * b[None, :, None] * c[None, None, :]


def quaternion_normalize(q):
    """Normalize a quaternion to unit length.

    Args:
        q: Quaternion, shape (4,)

    Returns:
        Normalized quaternion, shape (4,)
    """
    norm = np.linalg.norm(q)
    if norm < 1e-10:
        raise PreconditionViolation("Quaternion norm is too small")
    return q / norm


def quaternion_multiply(q1, q2):
    """Multiply two quaternions: q1 * q2 (Hamilton product, non-commutative).

    Args:
        q1: First quaternion, shape (4,)
        q2: Second quaternion, shape (4,)

    Returns:
        Product quaternion, shape (4,)
    """
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2

    w = w1*w2 - x1*x2 - y1*y2 - z1*z2
    x = w1*x2 + x1*w2 + y1*z2 - z1*y2
    y = w1*y2 - x1*z2 + y1*w2 + z1*x2
    z = w1*z2 + x1*y2 - y1*x2 + z1*w2

    return np.array([w, x, y, z])


def quaternion_conjugate(q):
    """Conjugate of a quaternion: (w, x, y, z) -> (w, -x, -y, -z)."""
    return np.array([q[0], -q[1], -q[2], -q[3]])


def quaternion_rotate_vector(q, v):
    """Rotate a vector by a unit quaternion: v' = q * v * q*.

    This is the active rotation in the space-fixed frame, so it agrees with
    ``quaternion_to_rotation_matrix(q).T @ v``.
    """
    v_quat = np.array([0.0, v[0], v[1], v[2]])
    temp = quaternion_multiply(q, v_quat)
    result_quat = quaternion_multiply(temp, quaternion_conjugate(q))
    return result_quat[1:4]


def rotate_vector(angle, axis, old, tol=DEFAULT_TOL):
    """Rotate a vector by a given angle about a given axis.

    Uses the Rodrigues (Goldstein) formula
    e = cos(angle)*old + (1 - cos(angle))*(axis.old)*axis + sin(angle)*(axis x old).

    Args:
        angle: Rotation angle in radians
        axis: Unit rotation axis, shape (3,)
        old: Vector to rotate, shape (3,); need not be unit length
        tol: Tolerance for the unit-length check on axis

    Returns:
        Rotated vector, shape (3,); it is not renormalized

    Raises:
        PreconditionViolation: If axis is not a unit vector or old is not a 3-vector
    """
    axis = check_unit_vector(axis, "rotate_vector axis", tol)
    old = check_vector3(old, "rotate_vector old")

    c = np.cos(angle)
    s = np.sin(angle)
    proj = np.dot(axis, old)  # old and axis need not be perpendicular

    return c * old + (1.0 - c) * proj * axis + s * cross_product(axis, old)


def rotate_quaternion(angle, axis, old, tol=DEFAULT_TOL):
    """Rotate a quaternion by a given angle about a space-fixed axis.

    The rotation quaternion rot = (cos(angle/2), sin(angle/2)*axis) is applied
    by left-multiplication: result = rot * old.

    Args:
        angle: Rotation angle in radians
        axis: Unit rotation axis, shape (3,)
        old: Quaternion, shape (4,); not checked for unit length
        tol: Tolerance for the unit-length check on axis

    Returns:
        Rotated quaternion, shape (4,)
    """
    axis = check_unit_vector(axis, "rotate_quaternion axis", tol)

    half_angle = 0.5 * angle
    s = np.sin(half_angle)
    rot = np.array([np.cos(half_angle), s * axis[0], s * axis[1], s * axis[2]])

    old = np.asarray(old, dtype=np.float64)
    if old.shape != (4,):
        raise PreconditionViolation(f"rotate_quaternion old must have shape (4,), got {old.shape}")

    return quaternion_multiply(rot, old)


def quaternion_to_rotation_matrix(q, tol=DEFAULT_TOL):
    """Rotation matrix from a unit quaternion.

    The rows of the matrix are the body-fixed unit vectors expressed in the
    space-fixed frame; the third row is the symmetry axis of a uniaxial
    molecule. ``A @ v_space`` gives body-fixed components and
    ``A.T @ v_body`` gives space-fixed components.

    Args:
        q: Unit quaternion, shape (4,)
        tol: Tolerance for the unit-length check

    Returns:
        Rotation matrix, shape (3, 3)

    Raises:
        PreconditionViolation: If q is not a unit quaternion
    """
    q = check_unit_quaternion(q, "quaternion_to_rotation_matrix q", tol)
    w, x, y, z = q

    return np.array([
        [w*w + x*x - y*y - z*z, 2*(x*y + w*z),         2*(x*z - w*y)],
        [2*(x*y - w*z),         w*w - x*x + y*y - z*z, 2*(y*z + w*x)],
        [2*(x*z + w*y),         2*(y*z - w*x),         w*w - x*x - y*y + z*z],
    ])
