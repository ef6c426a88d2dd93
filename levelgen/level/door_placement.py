"""
Door placement.

Walks the border of every top-level sector looking for cells that touch
something solid outside the sector, then places one door pair per
(neighbour sector, side) and links both sectors with a connector.
"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from levelgen.level.generation_algorithms import LevelGenAlgorithm, StepStatus
from levelgen.level.level import Level
from levelgen.level.sector import Sector
from levelgen.level.sector_iterator import NeighborComparison, SectorCellIteration, check_neighbors, iterate_sector
from levelgen.tiles.cell_codes import CellCode, Layer
from levelgen.utils.directions import DirectionMask

logger = logging.getLogger(__name__)


@dataclass
class DoorCandidate:
    """A possible door pair, both positions absolute."""
    from_position: Tuple[int, int]
    to_position: Tuple[int, int]
    from_id: int
    to_id: int


# target sector id -> side -> candidates
SectorDoors = Dict[int, Dict[DirectionMask, List[DoorCandidate]]]


class DoorPlacement(LevelGenAlgorithm):
    """
    Places doors between touching sectors, one sector per step.

    Args:
        repeat_connections_on_different_sides: Allow more than one door to the
            same neighbour when the candidates sit on different sides
        connect_corridors: Also link sectors to the hall network (the root)
            where their border touches a corridor
    """

    name = "doors"
    search_layers = Layer.ROOMS | Layer.HALL

    def __init__(self, repeat_connections_on_different_sides: bool = True,
                 connect_corridors: bool = False):
        super().__init__()
        self.repeat_connections = repeat_connections_on_different_sides
        self.connect_corridors = connect_corridors
        self._sectors: List[Sector] = []
        self._index = 0
        self._connections: Set[Tuple[int, int]] = set()
        self._candidates: SectorDoors = {}
        self.doors_placed = 0

    def start(self, level: Level, rng: Optional[random.Random] = None) -> None:
        super().start(level, rng)
        self._sectors = list(level.root.children)
        self._index = 0
        self._connections = set()
        self._candidates = {}
        self.doors_placed = 0

    def step(self) -> StepStatus:
        if self._index >= len(self._sectors):
            return StepStatus.DONE

        sector = self._sectors[self._index]
        self._index += 1

        self._candidates = {}
        iterate_sector(sector, self._search_border_cells)
        self._add_doors(sector)

        if self._index < len(self._sectors):
            return StepStatus.RUNNING

        logger.debug("Placed %d door pairs across %d sectors", self.doors_placed, len(self._sectors))
        return StepStatus.DONE

    def has_connection(self, a: int, b: int) -> bool:
        return (a, b) in self._connections or (b, a) in self._connections

    def _search_border_cells(self, iteration: SectorCellIteration) -> None:
        x, y = iteration.cell_position
        width, height = iteration.sector.size
        if x not in (0, width - 1) and y not in (0, height - 1):
            return

        check_neighbors(iteration.sector, iteration.cell_position,
                        self._search_outside_cells, self.search_layers)

    def _search_outside_cells(self, comparison: NeighborComparison) -> bool:
        sector = comparison.sector
        if sector.is_in(comparison.neighbor_position):
            return False

        cell = comparison.neighbor_cell
        if cell <= CellCode.EMPTY:
            return False

        absolute = sector.get_absolute_position(comparison.neighbor_position)
        target = self.level.get_sector_at(absolute)
        if target.is_root:
            if not (self.connect_corridors and cell == CellCode.HALL):
                return False
        elif cell == CellCode.HALL:
            return False

        if self.has_connection(sector.id, target.id):
            return False

        candidate = DoorCandidate(
            from_position=sector.get_absolute_position(comparison.original_position),
            to_position=absolute,
            from_id=sector.id,
            to_id=target.id,
        )
        sides = self._candidates.setdefault(target.id, {})
        sides.setdefault(comparison.direction, []).append(candidate)
        return True

    def _add_doors(self, sector: Sector) -> None:
        for target_id, sides in self._candidates.items():
            for direction, candidates in sides.items():
                door = self.rng.choice(candidates)

                if not self.repeat_connections and self.has_connection(door.from_id, door.to_id):
                    continue

                self._connections.add((door.from_id, door.to_id))
                self.level.set_cell(door.from_position, CellCode.DOOR)
                self.level.set_cell(door.to_position, CellCode.DOOR)

                target = self.level.sectors[target_id]
                self.level.connect(sector, target, door.from_position, door.to_position)
                for room in self.level.rooms_for_sector(sector) + self.level.rooms_for_sector(target):
                    room.number_of_doors += 1

                self.doors_placed += 1
                logger.debug("Door %s between sector %d and %d at %s",
                             direction.name, door.from_id, door.to_id, door.from_position)
