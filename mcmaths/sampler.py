"""OrientationSampler: the configured samplers bound to one random stream.

A driver builds one sampler per independent random stream. The algorithm
variants are looked up once, when the sampler is created, and every call
draws from the sampler's own generator.
"""

import logging
import numpy as np

from .config import SamplerConfig
from .metropolis import metropolis
from .order import translational_order
from .orientation import get_vector_algorithm, random_perpendicular_vector, random_quaternion
from .perturb import get_rotate_algorithm, random_rotate_quaternion, random_translate_vector
from .utils import spawn_streams

logger = logging.getLogger(__name__)


class OrientationSampler:
    """Random orientations, trial moves and acceptance tests for one stream.

    Args:
        config: SamplerConfig, or None for the defaults
        rng: numpy.random.Generator, or None for a freshly seeded one
    """

    def __init__(self, config=None, rng=None):
        self.config = config if config is not None else SamplerConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self._vector = get_vector_algorithm(self.config.vector_algorithm)
        self._rotate = get_rotate_algorithm(self.config.rotate_algorithm)
        logger.debug(
            "OrientationSampler: vector=%s rotate=%s tol=%g max_attempts=%s",
            self.config.vector_algorithm,
            self.config.rotate_algorithm,
            self.config.tol,
            self.config.max_attempts,
        )

    def spawn(self, n):
        """Return n samplers with the same config on independent child streams."""
        return [OrientationSampler(self.config, rng) for rng in spawn_streams(self.rng, n)]

    def random_vector(self):
        return self._vector(self.rng, max_attempts=self.config.max_attempts)

    def random_perpendicular_vector(self, old):
        return random_perpendicular_vector(
            old, self.rng,
            tol=self.config.tol,
            algorithm=self.config.vector_algorithm,
            max_attempts=self.config.max_attempts,
        )

    def random_quaternion(self):
        return random_quaternion(self.rng, max_attempts=self.config.max_attempts)

    def random_rotate_vector(self, angle_max, old):
        return self._rotate(
            angle_max, old, self.rng,
            tol=self.config.tol,
            vector_algorithm=self.config.vector_algorithm,
            max_attempts=self.config.max_attempts,
        )

    def random_rotate_quaternion(self, angle_max, old):
        return random_rotate_quaternion(
            angle_max, old, self.rng,
            tol=self.config.tol,
            vector_algorithm=self.config.vector_algorithm,
            max_attempts=self.config.max_attempts,
        )

    def random_translate_vector(self, dr_max, old):
        return random_translate_vector(dr_max, old, self.rng)

    def metropolis(self, delta):
        return metropolis(delta, self.rng, exponent_guard=self.config.exponent_guard)

    def translational_order(self, r, backend="python"):
        """Translational order with the configured reciprocal vector (fcc default if None)."""
        return translational_order(r, k=self.config.reciprocal_vector, backend=backend)
