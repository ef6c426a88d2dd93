"""
Level aggregate: grid storage, sector arena and room list for one generation run.
"""

import logging
import math
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from levelgen.exceptions import StructuralInvariantViolation
from levelgen.level.connector import Connector
from levelgen.level.layered_grid import LayeredGrid
from levelgen.level.room import Room
from levelgen.level.sector import Sector
from levelgen.tiles.cell_codes import CellCode, Layer
from levelgen.utils.directions import Direction

logger = logging.getLogger(__name__)


class Level:
    """
    Single source of truth for a generated map.

    Attributes:
        grid: Layered cell storage
        sectors: Arena of every live sector keyed by id
        root: Sector spanning the whole grid
        rooms: Rooms in creation order
        spawn_point: Player start, set by the pipeline
        spawn_sector: Sector containing the player start
    """

    def __init__(self, size: Tuple[int, int]):
        self.grid = LayeredGrid(size[0], size[1])
        self.sectors: Dict[int, Sector] = {}
        self._sector_count = 0
        self.rooms: List[Room] = []
        self.spawn_point: Optional[Tuple[int, int]] = None
        self.spawn_sector: Optional[Sector] = None
        self.root: Optional[Sector] = None
        self.root = Sector(self, (0, 0), size, CellCode.EMPTY)

    @property
    def size(self) -> Tuple[int, int]:
        return self.grid.size

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    # ----- cells -----

    def is_valid_position(self, p: Tuple[int, int]) -> bool:
        return self.grid.is_in_bounds(p[0], p[1])

    def set_cell(self, p: Tuple[int, int], value: CellCode, layer: Layer = Layer.ALL,
                 overwrite: bool = False) -> None:
        """Write in absolute coordinates; positions outside the grid are ignored."""
        if not self.is_valid_position(p):
            return
        self.grid.set_cell(p[0], p[1], value, layer, overwrite)

    def get_cell(self, p: Tuple[int, int], layer: Layer = Layer.ALL) -> CellCode:
        return self.grid.get_cell(p[0], p[1], layer)

    def positions(self) -> Iterator[Tuple[int, int]]:
        for x in range(self.width):
            for y in range(self.height):
                yield (x, y)

    def count_cells(self, code: CellCode, layer: Layer = Layer.ALL) -> int:
        return sum(1 for p in self.positions() if self.get_cell(p, layer) == code)

    # ----- sectors -----

    def register_sector(self, sector: Sector) -> int:
        self._sector_count += 1
        self.sectors[self._sector_count] = sector
        return self._sector_count

    def unregister_sector(self, sector: Sector) -> None:
        self.sectors.pop(sector.id, None)
        if self.spawn_sector is sector:
            self.spawn_sector = None

    def get_sector_at(self, position: Tuple[int, int]) -> Sector:
        """Top-level sector containing `position`, or the root when none does."""
        sector = self.root.get_sector_at(position)
        return sector if sector is not None else self.root

    def connect(self, from_sector: Sector, to_sector: Sector,
                start: Optional[Tuple[int, int]] = None,
                end: Optional[Tuple[int, int]] = None,
                path: Optional[Sequence[Direction]] = None) -> Connector:
        """Create a connector between two live sectors."""
        connector = Connector(
            start_position=start if start is not None else from_sector.get_absolute_position(),
            end_position=end if end is not None else to_sector.get_absolute_position(),
            from_id=from_sector.id,
            to_id=to_sector.id,
            path=list(path or []),
        )
        return self.register_connector(connector)

    def register_connector(self, connector: Connector) -> Connector:
        """Attach an existing connector to both of its endpoints."""
        for sector_id in (connector.from_id, connector.to_id):
            if sector_id not in self.sectors:
                raise StructuralInvariantViolation(
                    f"Connector references sector {sector_id} which is not in the level"
                )
        for sector_id in {connector.from_id, connector.to_id}:
            self.sectors[sector_id].connectors.append(connector)
        return connector

    def connectors(self) -> List[Connector]:
        """Every connector in the level, each listed once."""
        seen: Dict[int, Connector] = {}
        for sector in self.sectors.values():
            for connector in sector.connectors:
                seen[id(connector)] = connector
        return list(seen.values())

    # ----- rooms -----

    def add_room(self, room: Room) -> None:
        self.rooms.append(room)

    def remove_room(self, room: Room) -> None:
        if room in self.rooms:
            self.rooms.remove(room)

    def rooms_for_sector(self, sector: Sector) -> List[Room]:
        return [room for room in self.rooms if room.sector is sector]

    # ----- misc -----

    def world_position_to_level_position(self, position: Sequence[float],
                                         cell_size: Sequence[float]) -> Tuple[int, int]:
        """Map a 3D world position (x, y, z) onto the grid; z becomes the level y."""
        return (math.ceil(position[0] / cell_size[0]), math.floor(position[2] / cell_size[2]))

    def dump(self, layer: Layer = Layer.ALL) -> str:
        """ASCII snapshot, top row first."""
        rows = []
        for y in reversed(range(self.height)):
            rows.append("".join(self.get_cell((x, y), layer).symbol for x in range(self.width)))
        return "\n".join(rows)
