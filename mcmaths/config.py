"""Sampler configuration: algorithm choices, tolerances and loop bounds."""

from dataclasses import dataclass
import os
from typing import Optional, Tuple

from .metropolis import EXPONENT_GUARD
from .orientation import VECTOR_ALGORITHMS
from .perturb import ROTATE_ALGORITHMS
from .vectors import DEFAULT_TOL

# Alternative spellings accepted for the algorithm names
VECTOR_ALIASES = {
    "cube_rejection": "cube",
    "rejection": "cube",
    "polar_angle": "polar",
    "disk_projection": "disk",
    "marsaglia": "disk",
}

ROTATE_ALIASES = {
    "small_addition": "small_step",
    "addition": "small_step",
    "perpendicular_plane": "perpendicular",
    "random_axis": "cartesian",
    "barker_watts": "cartesian",
    "cap_rejection": "cap",
    "marsaglia": "cap",
}


def _canonical(name, aliases, known, kind):
    key = str(name).strip().lower().replace("-", "_")
    key = aliases.get(key, key)
    if key not in known:
        raise ValueError(f"Unknown {kind} algorithm {name!r}; choose from {sorted(known)}")
    return key


@dataclass(frozen=True)
class SamplerConfig:
    """Configuration for OrientationSampler.

    Args:
        vector_algorithm: Unit-vector sampler: "cube", "polar" or "disk"
        rotate_algorithm: Unit-vector rotation: "small_step", "perpendicular",
            "cartesian" or "cap"
        tol: Tolerance on squared length for unit-length and degeneracy checks
        exponent_guard: Metropolis delta above which moves are rejected outright
        max_attempts: Bound on rejection-loop candidates, or None for no bound
        reciprocal_vector: Integer k for translational order, or None for the fcc default
    """
    vector_algorithm: str = "cube"
    rotate_algorithm: str = "small_step"
    tol: float = DEFAULT_TOL
    exponent_guard: float = EXPONENT_GUARD
    max_attempts: Optional[int] = None
    reciprocal_vector: Optional[Tuple[int, int, int]] = None

    def __post_init__(self):
        # Frozen dataclass: normalize fields through object.__setattr__
        object.__setattr__(self, "vector_algorithm", _canonical(
            self.vector_algorithm, VECTOR_ALIASES, VECTOR_ALGORITHMS, "vector"))
        object.__setattr__(self, "rotate_algorithm", _canonical(
            self.rotate_algorithm, ROTATE_ALIASES, ROTATE_ALGORITHMS, "rotate"))

        if not self.tol > 0:
            raise ValueError(f"tol must be > 0, got {self.tol}")
        if self.max_attempts is not None and int(self.max_attempts) < 1:
            raise ValueError(f"max_attempts must be >= 1 or None, got {self.max_attempts}")
        if self.reciprocal_vector is not None:
            k = tuple(int(x) for x in self.reciprocal_vector)
            if len(k) != 3 or any(a != b for a, b in zip(k, self.reciprocal_vector)):
                raise ValueError(
                    f"reciprocal_vector must be three integers, got {self.reciprocal_vector}"
                )
            object.__setattr__(self, "reciprocal_vector", k)

    @classmethod
    def from_env(cls, **overrides):
        """Build a config from MCMATHS_* environment variables.

        Recognized: MCMATHS_VECTOR_ALGORITHM, MCMATHS_ROTATE_ALGORITHM,
        MCMATHS_TOL, MCMATHS_EXPONENT_GUARD, MCMATHS_MAX_ATTEMPTS.
        Keyword overrides take precedence over the environment.
        """
        kwargs = {}
        env = os.environ
        if "MCMATHS_VECTOR_ALGORITHM" in env:
            kwargs["vector_algorithm"] = env["MCMATHS_VECTOR_ALGORITHM"]
        if "MCMATHS_ROTATE_ALGORITHM" in env:
            kwargs["rotate_algorithm"] = env["MCMATHS_ROTATE_ALGORITHM"]
        if "MCMATHS_TOL" in env:
            kwargs["tol"] = float(env["MCMATHS_TOL"])
        if "MCMATHS_EXPONENT_GUARD" in env:
            kwargs["exponent_guard"] = float(env["MCMATHS_EXPONENT_GUARD"])
        if env.get("MCMATHS_MAX_ATTEMPTS", "").strip():
            kwargs["max_attempts"] = int(env["MCMATHS_MAX_ATTEMPTS"])
        kwargs.update(overrides)
        return cls(**kwargs)
