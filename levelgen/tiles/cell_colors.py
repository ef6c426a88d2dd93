"""
Color table shared by the bitmap loader and any external visualizer.

Colors are stored as normalized RGB floats so that decoding can use the same
distance threshold regardless of the image's channel depth.
"""

import math
from typing import Dict, Sequence, Tuple

from .cell_codes import CellCode

# Normalized distance under which a pixel is considered to match a color
COLOR_DISTANCE_THRESHOLD = 0.05

CODE_COLORS: Dict[CellCode, Tuple[float, float, float]] = {
    CellCode.HALL: (0.5, 0.5, 0.5),
    CellCode.EMPTY: (0.0, 0.0, 0.0),
    CellCode.ROOM: (1.0, 1.0, 1.0),
    CellCode.BOSS_ROOM: (0.25, 0.0, 0.0),
    CellCode.SPAWNER: (0.0, 0.0, 0.25),
    CellCode.PLAYER_SPAWN: (0.0, 0.25, 0.0),
    CellCode.PROP: (0.25, 0.125, 0.05),
    CellCode.ROOM_ITEM: (0.933, 0.890, 0.286),
    CellCode.ROOM_PRISON: (0.4, 0.4, 0.8),
    CellCode.ROOM_ENEMIES: (0.933, 0.301, 0.286),
    CellCode.ROOM_DICE: (0.921, 0.286, 0.933),
    CellCode.ROOM_BLOOD_OATH: (0.8, 0.141, 0.501),
    CellCode.ROOM_CHASE: (0.141, 0.8, 0.733),
    CellCode.ROOM_KILL_CHALLENGE: (0.8, 0.360, 0.141),
    CellCode.ENEMY: (0.55, 0.25, 0.25),
    CellCode.DOOR: (1.0, 0.0, 1.0),
}


def code_to_color(code: CellCode) -> Tuple[int, int, int]:
    """Get the 8-bit RGB color for a cell code (black when unknown)."""
    r, g, b = CODE_COLORS.get(CellCode(code), (0.0, 0.0, 0.0))
    return (round(r * 255), round(g * 255), round(b * 255))


def color_to_code(color: Sequence[int]) -> CellCode:
    """
    Decode an 8-bit color into a cell code.

    Args:
        color: RGB or RGBA sequence (a pygame.Color works too)

    Returns:
        The first code whose color lies within COLOR_DISTANCE_THRESHOLD,
        EMPTY when nothing matches
    """
    r, g, b = (color[0] / 255.0, color[1] / 255.0, color[2] / 255.0)
    for code, (cr, cg, cb) in CODE_COLORS.items():
        if math.sqrt((r - cr) ** 2 + (g - cg) ** 2 + (b - cb) ** 2) < COLOR_DISTANCE_THRESHOLD:
            return code
    return CellCode.EMPTY
