"""Exception types raised by level generation.

Out-of-bounds access is not an error here: reads return CellCode.ERROR and
writes through a sector are ignored.
"""


class LevelGenError(Exception):
    """Base class for level generation errors."""


class InvalidConfiguration(LevelGenError, ValueError):
    """Generation parameters were rejected before the pipeline started."""


class StructuralInvariantViolation(LevelGenError, RuntimeError):
    """A generation step broke the sector tree or connector graph."""


__all__ = ["LevelGenError", "InvalidConfiguration", "StructuralInvariantViolation"]
