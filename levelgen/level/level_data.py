"""
Level generation parameters.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

import pygame

from levelgen.exceptions import InvalidConfiguration


class LevelType(Enum):
    DUNGEON = "dungeon"
    CAVE = "cave"
    TEST = "test"


@dataclass
class GenerationParameters:
    """
    Configuration for one level generation run.

    Attributes:
        level_type: Which primary algorithm builds the layout
        level_size: Grid width and height in cells
        prop_chance: Share of hall cells that receive props (0-1)
        enemy_chance: Share of the remaining hall cells that receive enemies (0-1)
        preloaded_level: Bitmap layout (path or Surface) to load instead of generating one
        seed: World seed; None picks a random one
    """
    level_type: LevelType = LevelType.DUNGEON
    level_size: Tuple[int, int] = (50, 50)
    prop_chance: float = 0.65
    enemy_chance: float = 0.65
    preloaded_level: Optional[Union[str, os.PathLike, pygame.Surface]] = None
    seed: Optional[int] = None
    # Carried for host engines that build geometry; the generator ignores it
    generate_mesh: bool = field(default=False, repr=False)

    def __post_init__(self):
        if isinstance(self.level_type, str):
            try:
                self.level_type = LevelType(self.level_type.lower())
            except ValueError:
                raise InvalidConfiguration(f"Unknown level type: {self.level_type!r}") from None
        if isinstance(self.level_size, list):
            self.level_size = tuple(self.level_size)

    def validate(self) -> None:
        """
        Check every field before any generation step runs.

        Raises:
            InvalidConfiguration: On a bad level type, size, chance or seed
        """
        if not isinstance(self.level_type, LevelType):
            raise InvalidConfiguration(f"Unknown level type: {self.level_type!r}")

        if (not isinstance(self.level_size, tuple) or len(self.level_size) != 2
                or not all(isinstance(v, int) and not isinstance(v, bool) for v in self.level_size)):
            raise InvalidConfiguration(f"level_size must be two integers, got {self.level_size!r}")
        if self.level_size[0] <= 0 or self.level_size[1] <= 0:
            raise InvalidConfiguration(f"level_size must be positive, got {self.level_size}")

        for name in ("prop_chance", "enemy_chance"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
                raise InvalidConfiguration(f"{name} must be within [0, 1], got {value!r}")

        if (self.preloaded_level is not None
                and not isinstance(self.preloaded_level, (str, os.PathLike, pygame.Surface))):
            raise InvalidConfiguration(f"preloaded_level must be a path or Surface, got {self.preloaded_level!r}")

        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise InvalidConfiguration(f"seed must be an integer, got {self.seed!r}")
