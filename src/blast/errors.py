"""Error kinds raised inside the core and outcomes reported for dropped taps."""
from enum import Enum, auto


class BlastError(Exception):
    """Base class for errors raised by the blast core."""


class ConfigError(BlastError, ValueError):
    """Level parameters outside the supported ranges."""


class InvariantViolation(BlastError):
    """Board left in a state the pipeline cannot recover from."""


class TapOutcome(Enum):
    """Result of a tap handed to the controller."""
    ACCEPTED = auto()
    INPUT_LOCKED = auto()
    OUT_OF_BOUNDS = auto()
    NOT_ENOUGH_MATCHES = auto()
    NO_MOVES_LEFT = auto()
