"""mcmaths: random orientations, trial moves and order parameters for particle Monte Carlo."""

from .backend import NUMBA_AVAILABLE, require_numba
from .errors import PreconditionViolation, SamplingExhausted
from .log import get_logger
from .utils import (
    make_rng,
    spawn_streams,
    random_integer,
    random_normals,
    pick,
    fcc_cells,
    fcc_lattice,
    fcc_orientations,
)
from .vectors import (
    DEFAULT_TOL,
    check_unit_vector,
    check_unit_quaternion,
    cross_product,
    outer_product,
    quaternion_normalize,
    quaternion_multiply,
    quaternion_conjugate,
    quaternion_rotate_vector,
    rotate_vector,
    rotate_quaternion,
    quaternion_to_rotation_matrix,
)
from .orientation import (
    random_vector,
    random_vector_cube,
    random_vector_polar,
    random_vector_disk,
    random_perpendicular_vector,
    random_quaternion,
)
from .perturb import (
    random_rotate_vector,
    random_rotate_vector_small_step,
    random_rotate_vector_perpendicular,
    random_rotate_vector_cartesian,
    random_rotate_vector_cap,
    random_rotate_quaternion,
    random_translate_vector,
)
from .metropolis import EXPONENT_GUARD, metropolis, AcceptanceCounter, adjust_step
from .order import (
    translational_order,
    orientational_order,
    order_tensor,
    traceless_eigenvalues,
    nematic_order,
    nematic_director,
)
from .config import SamplerConfig
from .sampler import OrientationSampler

__all__ = [
    "NUMBA_AVAILABLE",
    "require_numba",
    "PreconditionViolation",
    "SamplingExhausted",
    "get_logger",
    "make_rng",
    "spawn_streams",
    "random_integer",
    "random_normals",
    "pick",
    "fcc_cells",
    "fcc_lattice",
    "fcc_orientations",
    "DEFAULT_TOL",
    "check_unit_vector",
    "check_unit_quaternion",
    "cross_product",
    "outer_product",
    "quaternion_normalize",
    "quaternion_multiply",
    "quaternion_conjugate",
    "quaternion_rotate_vector",
    "rotate_vector",
    "rotate_quaternion",
    "quaternion_to_rotation_matrix",
    "random_vector",
    "random_vector_cube",
    "random_vector_polar",
    "random_vector_disk",
    "random_perpendicular_vector",
    "random_quaternion",
    "random_rotate_vector",
    "random_rotate_vector_small_step",
    "random_rotate_vector_perpendicular",
    "random_rotate_vector_cartesian",
    "random_rotate_vector_cap",
    "random_rotate_quaternion",
    "random_translate_vector",
    "EXPONENT_GUARD",
    "metropolis",
    "AcceptanceCounter",
    "adjust_step",
    "translational_order",
    "orientational_order",
    "order_tensor",
    "traceless_eigenvalues",
    "nematic_order",
    "nematic_director",
    "SamplerConfig",
    "OrientationSampler",
]
