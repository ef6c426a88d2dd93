"""Agent-based 2D dungeon and cave level generation."""

from levelgen.exceptions import InvalidConfiguration, LevelGenError, StructuralInvariantViolation
from levelgen.level import GenerationParameters, Level, LevelGenerator, LevelType

__version__ = "0.1.0"

__all__ = [
    "GenerationParameters",
    "InvalidConfiguration",
    "Level",
    "LevelGenError",
    "LevelGenerator",
    "LevelType",
    "StructuralInvariantViolation",
]
