"""Metropolis acceptance test and acceptance-ratio bookkeeping."""

from dataclasses import dataclass
import numpy as np

# exp(-75) ~ 3e-33: moves this unlikely are rejected without evaluating exp
EXPONENT_GUARD = 75.0


def metropolis(delta, rng, exponent_guard=EXPONENT_GUARD):
    """Metropolis test: accept with probability min(1, exp(-delta)).

    Args:
        delta: Negative log of the acceptance ratio, e.g. beta * dU
        rng: Random number generator (numpy.random.Generator)
        exponent_guard: Above this delta the move is rejected outright

    Returns:
        True if the move is accepted

    Uphill moves beyond the guard and all downhill moves are decided
    without drawing a random number, so they leave the generator untouched.
    """
    if delta > exponent_guard:
        return False
    if delta < 0.0:
        return True
    zeta = rng.random()
    return bool(np.exp(-delta) > zeta)


@dataclass
class AcceptanceCounter:
    """Running count of attempted and accepted trial moves.

    Attributes:
        attempts: Number of trial moves tested
        accepts: Number of those accepted
    """
    attempts: int = 0
    accepts: int = 0

    def record(self, accepted):
        """Count one trial move and return the decision unchanged."""
        self.attempts += 1
        if accepted:
            self.accepts += 1
        return accepted

    @property
    def acceptance(self):
        return self.accepts / max(self.attempts, 1)

    def reset(self):
        self.attempts = 0
        self.accepts = 0


def adjust_step(step, acceptance, target=0.5, factor=1.05, window=0.05, step_max=None):
    """Rescale a maximum displacement or angle toward a target acceptance ratio.

    The step grows by ``factor`` when the acceptance ratio is above
    ``target + window`` and shrinks by it when below ``target - window``.

    Args:
        step: Current maximum displacement (or angle)
        acceptance: Measured acceptance ratio in [0, 1]
        target: Desired acceptance ratio
        factor: Multiplicative change per adjustment (> 1)
        window: Half-width of the dead band around target
        step_max: Optional upper bound, e.g. pi for rotation angles

    Returns:
        New step
    """
    if factor <= 1.0:
        raise ValueError(f"factor must be > 1, got {factor}")
    if acceptance > target + window:
        step = step * factor
    elif acceptance < target - window:
        step = step / factor
    if step_max is not None:
        step = min(step, step_max)
    return step
