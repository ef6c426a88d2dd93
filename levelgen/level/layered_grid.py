"""
Layered grid storage.

One 2D array of cell codes per concrete layer. Reads composite the layers by
rank, writes either keep the stronger code or overwrite unconditionally.
"""

from typing import Dict, List, Tuple

from levelgen.tiles.cell_codes import CellCode, Layer, get_layer_from_value


class LayeredGrid:
    """Fixed-size multi-layer array of cell codes indexed by (x, y)."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._layers: Dict[Layer, List[List[CellCode]]] = {
            layer: [[CellCode.EMPTY for _ in range(width)] for _ in range(height)]
            for layer in Layer.concrete()
        }

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def is_in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_cell(self, x: int, y: int, value: CellCode, layer: Layer = Layer.ALL,
                 overwrite: bool = False) -> None:
        """
        Store a value. Coordinates are not bounds-checked here.

        Args:
            x, y: Grid coordinates
            value: Cell code to write
            layer: Target layer; ALL resolves to the value's own layer
            overwrite: Replace unconditionally instead of keeping the max rank
        """
        if layer == Layer.ALL:
            layer = get_layer_from_value(value)

        row = self._layers[layer][y]
        if overwrite:
            row[x] = CellCode(value)
        else:
            row[x] = max(row[x], CellCode(value))

    def get_cell(self, x: int, y: int, layer_mask: Layer = Layer.ALL) -> CellCode:
        """Strongest non-empty value among the layers in `layer_mask`."""
        if not self.is_in_bounds(x, y):
            return CellCode.ERROR

        for layer in reversed(Layer.concrete()):
            if not layer_mask & layer:
                continue
            cell = self._layers[layer][y][x]
            if cell > CellCode.EMPTY:
                return cell
        return CellCode.EMPTY
