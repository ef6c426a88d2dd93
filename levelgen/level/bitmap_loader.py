"""
Bitmap Loader - builds a Level from a color-coded image

Each pixel is one cell, decoded through the shared color table. Image row 0
is the top of the picture, so rows are flipped into the level's y-up space.
Runs of room-colored pixels that are not yet inside a sector become new
top-level sectors.
"""

import logging
from pathlib import Path
from typing import Union

import pygame

from levelgen.exceptions import StructuralInvariantViolation
from levelgen.level.level import Level
from levelgen.level.room import Room
from levelgen.level.sector import Sector
from levelgen.tiles.cell_codes import CellCode
from levelgen.tiles.cell_colors import color_to_code

logger = logging.getLogger(__name__)


def load_level_bitmap(source: Union[str, Path, pygame.Surface]) -> Level:
    """
    Load a precomputed layout.

    Args:
        source: Image path or an already loaded pygame.Surface

    Returns:
        A new Level with sectors, rooms and cells taken from the image
    """
    surface = source if isinstance(source, pygame.Surface) else pygame.image.load(str(source))
    width, height = surface.get_size()
    level = Level((width, height))

    def code_at(x: int, y: int) -> CellCode:
        return color_to_code(surface.get_at((x, height - 1 - y)))

    last_cell = CellCode.ERROR
    for x in range(width):
        for y in range(height):
            cell = code_at(x, y)
            if cell != CellCode.EMPTY:
                level.set_cell((x, y), cell)
            if cell == CellCode.PLAYER_SPAWN:
                level.spawn_point = (x, y)

            if cell.is_room and cell != last_cell and level.get_sector_at((x, y)).is_root:
                _create_sector_from_run(level, code_at, (x, y), cell)

            last_cell = cell

    logger.info("Loaded %dx%d level with %d sectors", width, height, len(level.root.child_ids))
    return level


def _create_sector_from_run(level: Level, code_at, start, cell: CellCode) -> None:
    x, y = start

    run_height = 0
    while y + run_height < level.height and code_at(x, y + run_height) == cell:
        run_height += 1

    run_width = 0
    while x + run_width < level.width and code_at(x + run_width, y) == cell:
        run_width += 1

    try:
        sector = Sector(level, (x, y), (run_width, run_height), cell)
    except StructuralInvariantViolation:
        logger.warning("Skipping %s run at %s: overlaps an existing sector", cell.name, start)
        return
    level.add_room(Room(sector))
