from levelgen.utils.directions import Direction, DirectionMask, mask_to_string, to_angle, to_offset
from levelgen.utils.shuffle_bag import ShuffleBag

__all__ = [
    "Direction",
    "DirectionMask",
    "ShuffleBag",
    "mask_to_string",
    "to_angle",
    "to_offset",
]
