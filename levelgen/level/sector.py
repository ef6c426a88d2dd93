"""
Sector tree.

A sector is a rectangular view over the level grid expressed in its parent's
coordinate space. Sectors never hold cell data of their own: every read and
write walks up the parent chain until it reaches the level grid. Parent and
child links are ids into the level's sector arena.
"""

import logging
import math
from typing import List, Optional, Set, Tuple, TYPE_CHECKING

import pygame

from levelgen.exceptions import StructuralInvariantViolation
from levelgen.level.connector import Connector
from levelgen.tiles.cell_codes import CellCode, Layer

if TYPE_CHECKING:
    from levelgen.level.level import Level

logger = logging.getLogger(__name__)


def boxes_overlap(pos_a: Tuple[int, int], size_a: Tuple[int, int],
                  pos_b: Tuple[int, int], size_b: Tuple[int, int]) -> bool:
    """Strict AABB test; rectangles sharing only an edge do not overlap."""
    return pygame.Rect(pos_a, size_a).colliderect(pygame.Rect(pos_b, size_b))


class Sector:
    """Rectangular region of the level with its own local coordinates."""

    def __init__(self, level: "Level", pos: Tuple[int, int], size: Tuple[int, int],
                 code: CellCode, parent: Optional["Sector"] = None):
        """
        Create a sector and stamp its footprint with `code`.

        Args:
            level: Owning level
            pos: Position in the parent's coordinate space
            size: Width and height, both positive
            code: Cell code stamped over the whole footprint
            parent: Parent sector; defaults to the level root

        Raises:
            StructuralInvariantViolation: On a non-positive size or when the
                rectangle overlaps an existing sibling
        """
        if size[0] <= 0 or size[1] <= 0:
            raise StructuralInvariantViolation(f"Sector size must be positive, got {size}")

        self.level = level
        self.pos = (int(pos[0]), int(pos[1]))
        self.size = (int(size[0]), int(size[1]))
        self.code = CellCode(code)
        self.parent_id: Optional[int] = None
        self.child_ids: List[int] = []
        self.connectors: List[Connector] = []

        if parent is None:
            parent = level.root

        if parent is not None:
            overlapping = parent.find_overlapping_child(self.pos, self.size)
            if overlapping is not None:
                raise StructuralInvariantViolation(
                    f"Sector at {self.pos} size {self.size} overlaps sibling {overlapping.id}"
                )

        self.id = level.register_sector(self)
        if parent is not None:
            self._attach(parent)

        self.fill(self.code)

    def __repr__(self) -> str:
        return f"Sector(id={self.id}, pos={self.pos}, size={self.size}, code={self.code.name})"

    # ----- tree -----

    @property
    def parent(self) -> Optional["Sector"]:
        if self.parent_id is None:
            return None
        return self.level.sectors.get(self.parent_id)

    @property
    def children(self) -> List["Sector"]:
        return [self.level.sectors[i] for i in self.child_ids]

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def _attach(self, parent: "Sector") -> None:
        self.parent_id = parent.id
        parent.child_ids.append(self.id)

    def _detach(self) -> None:
        parent = self.parent
        if parent is not None and self.id in parent.child_ids:
            parent.child_ids.remove(self.id)
        self.parent_id = None

    def find_overlapping_child(self, pos: Tuple[int, int], size: Tuple[int, int]) -> Optional["Sector"]:
        """First child whose box overlaps the given local rectangle."""
        for child in self.children:
            if boxes_overlap(pos, size, child.pos, child.size):
                return child
        return None

    # ----- coordinates -----

    def get_absolute_position(self, p: Tuple[int, int] = (0, 0)) -> Tuple[int, int]:
        """Convert a local position into level coordinates."""
        local = (self.pos[0] + p[0], self.pos[1] + p[1])
        parent = self.parent
        if parent is None:
            return local
        return parent.get_absolute_position(local)

    def is_in(self, p: Tuple[int, int]) -> bool:
        """Checks if a local space point is inside the sector."""
        return 0 <= p[0] < self.size[0] and 0 <= p[1] < self.size[1]

    def is_in_from_global(self, p: Tuple[int, int]) -> bool:
        """Checks a point expressed in the parent's coordinate space."""
        return self.is_in((p[0] - self.pos[0], p[1] - self.pos[1]))

    def get_sector_at(self, p: Tuple[int, int]) -> Optional["Sector"]:
        """Child sector containing the local point `p`."""
        for child in self.children:
            if child.is_in_from_global(p):
                return child
        return None

    # ----- cells -----

    def get_cell(self, p: Tuple[int, int], layer: Layer = Layer.ALL) -> CellCode:
        if not self.is_in(p):
            return CellCode.ERROR

        parent_p = (self.pos[0] + p[0], self.pos[1] + p[1])
        parent = self.parent
        if parent is None:
            return self.level.grid.get_cell(parent_p[0], parent_p[1], layer)
        return parent.get_cell(parent_p, layer)

    def set_cell(self, p: Tuple[int, int], code: CellCode, layer: Layer = Layer.ALL,
                 overwrite: bool = False) -> None:
        """
        Sets a point in local space to the desired value.
        If overwrite is False the stronger of the two codes is kept.
        """
        if not self.is_in(p):
            return

        parent_p = (self.pos[0] + p[0], self.pos[1] + p[1])
        parent = self.parent
        if parent is None:
            self.level.grid.set_cell(parent_p[0], parent_p[1], code, layer, overwrite)
        else:
            parent.set_cell(parent_p, code, layer, overwrite)

    def fill(self, code: CellCode = CellCode.ROOM, layer: Layer = Layer.ALL) -> None:
        """Overwrite every local cell with `code`."""
        for x in range(self.size[0]):
            for y in range(self.size[1]):
                self.set_cell((x, y), code, layer, True)
        self.code = CellCode(code)

    def clear(self) -> None:
        """Reset the footprint to EMPTY on every layer."""
        for layer in Layer.concrete():
            self.fill(CellCode.EMPTY, layer)

    def cells(self):
        """Yield every local position, x-major."""
        for x in range(self.size[0]):
            for y in range(self.size[1]):
                yield (x, y)

    # ----- lifecycle -----

    def destroy(self) -> None:
        """
        Remove the sector from the level.

        Children are destroyed first, the footprint is cleared, the sector is
        detached from its parent and every connector touching it is torn down.
        """
        if self.is_root:
            raise StructuralInvariantViolation("The root sector cannot be destroyed")

        for child in self.children:
            child.destroy()

        self.clear()
        self._detach()
        for connector in list(self.connectors):
            self.destroy_connector(connector)

        for room in self.level.rooms_for_sector(self):
            self.level.remove_room(room)
        self.level.unregister_sector(self)
        logger.debug("Destroyed sector %d", self.id)

    def destroy_connector(self, connector: Connector) -> None:
        """Unlink a connector from both endpoints and revert the hall cells it carved."""
        if connector not in self.connectors:
            return

        for sector_id in (connector.from_id, connector.to_id):
            sector = self.level.sectors.get(sector_id)
            if sector is not None and connector in sector.connectors:
                sector.connectors.remove(connector)
        if connector in self.connectors:
            self.connectors.remove(connector)

        for p in connector.path_positions():
            if self.level.get_cell(p) == CellCode.HALL:
                self.level.set_cell(p, CellCode.EMPTY, Layer.HALL, overwrite=True)

    # ----- neighbourhood -----

    def get_siblings(self) -> Optional[List["Sector"]]:
        """Parent's children ordered by distance to this sector, self first."""
        parent = self.parent
        if parent is None or len(parent.child_ids) == 1:
            return None
        return sorted(parent.children, key=lambda s: math.dist(self.pos, s.pos))

    def get_closest_sibling_sector(self) -> Optional["Sector"]:
        siblings = self.get_siblings()
        if siblings is None:
            return None
        return siblings[1]

    def list_connected_sectors(self) -> Set["Sector"]:
        """Every sector reachable through connectors, this one included."""
        visited: Set[int] = set()
        stack = [self.id]
        while stack:
            sector_id = stack.pop()
            if sector_id in visited:
                continue
            visited.add(sector_id)

            sector = self.level.sectors.get(sector_id)
            if sector is None:
                raise StructuralInvariantViolation(f"Connector references missing sector {sector_id}")
            for connector in sector.connectors:
                other = connector.other(sector_id)
                if other is not None and other not in visited:
                    stack.append(other)
        return {self.level.sectors[i] for i in visited}

    def get_number_of_connected_sectors(self) -> int:
        return len(self.list_connected_sectors())
