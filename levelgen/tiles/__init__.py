from .cell_codes import CellCode, Layer, ROOM_CODES, get_layer_from_value
from .cell_colors import CODE_COLORS, code_to_color, color_to_code

__all__ = [
    'CellCode',
    'Layer',
    'ROOM_CODES',
    'get_layer_from_value',
    'CODE_COLORS',
    'code_to_color',
    'color_to_code'
]
