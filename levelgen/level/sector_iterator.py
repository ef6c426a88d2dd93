"""
Sector Iterator - generic traversal of a sector's cells and 4-neighbour queries
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Tuple, Union

from levelgen.level.sector import Sector
from levelgen.tiles.cell_codes import CellCode, Layer
from levelgen.utils.directions import DirectionMask


@dataclass
class SectorCellIteration:
    """Record handed to every iteration function."""
    index: int
    cell: CellCode
    cell_position: Tuple[int, int]
    sector: Sector
    layer: Layer


@dataclass
class NeighborComparison:
    """Record handed to a neighbour comparer. Positions are local to `sector`."""
    sector: Sector
    layer: Layer
    original_cell: CellCode
    neighbor_cell: CellCode
    original_position: Tuple[int, int]
    neighbor_position: Tuple[int, int]
    direction: DirectionMask


IterationFunction = Callable[[SectorCellIteration], None]
NeighborComparer = Callable[[NeighborComparison], bool]


def iterate_sector(sector: Sector,
                   functions: Union[IterationFunction, Iterable[IterationFunction]],
                   layer: Layer = Layer.ALL) -> None:
    """
    Iterate over every cell in `sector` and run `functions` with it.

    Args:
        sector: Sector to traverse, x-major then y
        functions: One callable or a sequence of callables
        layer: Layer mask used to read each cell
    """
    if callable(functions):
        functions = [functions]
    functions = list(functions)

    for index, cell_position in enumerate(sector.cells()):
        record = SectorCellIteration(
            index=index,
            cell=sector.get_cell(cell_position, layer),
            cell_position=cell_position,
            sector=sector,
            layer=layer,
        )
        for function in functions:
            function(record)


def neighbor_offsets(p: Tuple[int, int]):
    """Neighbour positions paired with their direction, in fixed order."""
    x, y = p
    return [
        ((x, y - 1), DirectionMask.DOWN),
        ((x, y + 1), DirectionMask.UP),
        ((x - 1, y), DirectionMask.LEFT),
        ((x + 1, y), DirectionMask.RIGHT),
    ]


def check_neighbors(sector: Sector,
                    p: Tuple[int, int],
                    comparer: NeighborComparer,
                    layer: Layer = Layer.ALL) -> DirectionMask:
    """
    Compare the cell at local position `p` with its four neighbours.

    Neighbour cells are read from the level grid at their absolute position,
    so cells outside the sector are visible (and read as ERROR off-grid).

    Returns:
        Bitmask of the directions for which `comparer` returned True
    """
    directions = DirectionMask.NONE
    original_cell = sector.get_cell(p, layer)

    for neighbor_position, direction in neighbor_offsets(p):
        neighbor_cell = sector.level.get_cell(sector.get_absolute_position(neighbor_position), layer)
        comparison = NeighborComparison(
            sector=sector,
            layer=layer,
            original_cell=original_cell,
            neighbor_cell=neighbor_cell,
            original_position=p,
            neighbor_position=neighbor_position,
            direction=direction,
        )
        if comparer(comparison):
            directions |= direction

    return directions


def check_neighbors_global(sector: Sector,
                           p: Tuple[int, int],
                           comparer: NeighborComparer,
                           layer: Layer = Layer.ALL) -> DirectionMask:
    """Same as check_neighbors, re-based on the root at the absolute position of `p`."""
    return check_neighbors(sector.level.root, sector.get_absolute_position(p), comparer, layer)
