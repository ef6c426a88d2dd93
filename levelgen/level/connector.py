"""
Connector records linking two sectors.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from levelgen.utils.directions import Direction, add


@dataclass(eq=False)
class Connector:
    """
    An undirected edge of the sector connectivity graph.

    Attributes:
        start_position: Absolute position of the `from` endpoint
        end_position: Absolute position of the `to` endpoint
        from_id: Id of the sector the link was created from
        to_id: Id of the sector it leads to
        path: Relative steps carved from start_position (empty for doors)
    """
    start_position: Tuple[int, int]
    end_position: Tuple[int, int]
    from_id: Optional[int] = None
    to_id: Optional[int] = None
    path: List[Direction] = field(default_factory=list)

    def other(self, sector_id: int) -> Optional[int]:
        """Id of the endpoint opposite `sector_id`."""
        if self.from_id == sector_id:
            return self.to_id
        if self.to_id == sector_id:
            return self.from_id
        return None

    def links(self, a: int, b: int) -> bool:
        return {self.from_id, self.to_id} == {a, b}

    def path_positions(self) -> List[Tuple[int, int]]:
        """Absolute cells covered by the connector, starting cell included."""
        p = self.start_position
        positions = [p]
        for step in self.path:
            p = add(p, step.to_vector())
            positions.append(p)
        return positions
