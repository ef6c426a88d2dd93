"""
Gameplay-facing room records wrapping a sector.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, TYPE_CHECKING

from levelgen.tiles.cell_codes import CellCode

if TYPE_CHECKING:
    from levelgen.level.sector import Sector


class RoomRequirement:
    """Base class for conditions gating entry into a room."""


@dataclass(eq=False)
class Room:
    """
    A sector promoted to a gameplay room.

    Attributes:
        sector: The sector the room lives in; the room dies with it
        props: Prop handles placed by the host game
        characters: Character handles placed by the host game
        requirement_to_enter: Optional entry condition
        number_of_doors: Doors placed on the room's border
    """
    sector: "Sector"
    props: List[Any] = field(default_factory=list)
    characters: List[Any] = field(default_factory=list)
    requirement_to_enter: Optional[RoomRequirement] = None
    number_of_doors: int = 0

    @property
    def position(self) -> Tuple[int, int]:
        return self.sector.pos

    @property
    def size(self) -> Tuple[int, int]:
        return self.sector.size

    @property
    def room_type(self) -> CellCode:
        return self.sector.code
