"""
Direction Utilities
Facings used by walkers and connectors, plus the bitmask produced by
neighbor queries. The level uses a y-up convention: UP is +y.
"""

from enum import Enum, IntFlag
from typing import Dict, List, Tuple


class Direction(Enum):
    """The four facings. Value order is relied upon for rotation."""

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    def rotated(self, steps: int) -> "Direction":
        """Rotate clockwise by `steps` quarter turns (negative = counter-clockwise)."""
        return Direction((self.value + steps) % 4)

    def to_vector(self) -> Tuple[int, int]:
        return _DIRECTION_VECTORS[self]

    def to_mask(self) -> "DirectionMask":
        return _DIRECTION_TO_MASK[self]


class DirectionMask(IntFlag):
    NONE = 0
    UP = 1 << 1
    RIGHT = 1 << 2
    DOWN = 1 << 3
    LEFT = 1 << 4

    @classmethod
    def values(cls) -> List["DirectionMask"]:
        """Single-direction flags, in declaration order."""
        return [cls.UP, cls.RIGHT, cls.DOWN, cls.LEFT]

    def is_set(self, flag: "DirectionMask") -> bool:
        return (self & flag) != 0


_DIRECTION_VECTORS: Dict[Direction, Tuple[int, int]] = {
    Direction.UP: (0, 1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (-1, 0),
}

_DIRECTION_TO_MASK: Dict[Direction, DirectionMask] = {
    Direction.UP: DirectionMask.UP,
    Direction.RIGHT: DirectionMask.RIGHT,
    Direction.DOWN: DirectionMask.DOWN,
    Direction.LEFT: DirectionMask.LEFT,
}

_MASK_TO_ANGLE: Dict[DirectionMask, float] = {
    DirectionMask.UP: 180.0,
    DirectionMask.RIGHT: -90.0,
    DirectionMask.DOWN: 0.0,
    DirectionMask.LEFT: 90.0,
}


def to_offset(direction: DirectionMask) -> Tuple[int, int]:
    """Convert a single-direction flag into a grid offset."""
    for facing, flag in _DIRECTION_TO_MASK.items():
        if flag == direction:
            return _DIRECTION_VECTORS[facing]
    raise KeyError(direction)


def to_angle(direction: DirectionMask) -> float:
    """Yaw in degrees for geometry that faces `direction`."""
    return _MASK_TO_ANGLE[direction]


def mask_to_string(mask: DirectionMask) -> str:
    """Render a mask as four 0/1 digits in UP, RIGHT, DOWN, LEFT order."""
    return "".join("1" if mask.is_set(flag) else "0" for flag in DirectionMask.values())


def add(p: Tuple[int, int], offset: Tuple[int, int]) -> Tuple[int, int]:
    return (p[0] + offset[0], p[1] + offset[1])
