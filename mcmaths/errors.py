"""Exception types raised by the sampling and order-parameter routines."""


class PreconditionViolation(ValueError):
    """A caller supplied input that breaks a routine's contract.

    Raised for non-unit orientations, zero-length reference vectors,
    particle counts that do not fit the assumed lattice, wrong array shapes
    and invalid weights. It signals corrupted simulation state upstream, so
    drivers are expected to stop the run rather than retry.
    """


class SamplingExhausted(RuntimeError):
    """A rejection loop hit its configured ``max_attempts`` without accepting."""

    def __init__(self, routine, attempts):
        self.routine = routine
        self.attempts = attempts
        super().__init__(f"{routine}: no candidate accepted after {attempts} attempts")
