from enum import IntEnum, IntFlag
from typing import Dict, List


class CellCode(IntEnum):
    """Enumeration of every value a level cell can hold.

    The numeric value is the cell's rank: a higher rank wins non-destructive
    writes and layer composition. ERROR is only ever returned by reads.
    """

    ERROR = -1
    EMPTY = 0
    HALL = 1
    ROOM = 2
    BOSS_ROOM = 3
    SPAWNER = 4
    PLAYER_SPAWN = 5
    PROP = 6
    ROOM_ITEM = 7
    ROOM_PRISON = 8
    ROOM_ENEMIES = 9
    ROOM_DICE = 10
    ROOM_BLOOD_OATH = 11
    ROOM_KILL_CHALLENGE = 12
    ROOM_CHASE = 13
    ENEMY = 14
    DOOR = 15

    @property
    def is_room(self) -> bool:
        """Return True for every room variant."""
        return self in ROOM_CODES

    @property
    def layer(self) -> "Layer":
        return CELL_TO_LAYER[self]

    @property
    def symbol(self) -> str:
        """Single character used by ASCII dumps."""
        return _SYMBOLS.get(self, "?")


class Layer(IntFlag):
    """Independent planes of the grid. ALL is a composite, never stored."""

    HALL = 1
    ROOMS = 1 << 1
    DOORS = 1 << 2
    PROPS = 1 << 3
    ENEMIES = 1 << 4

    ALL = HALL | ROOMS | DOORS | PROPS | ENEMIES

    @classmethod
    def concrete(cls) -> List["Layer"]:
        """Concrete layers in ascending order."""
        return [cls.HALL, cls.ROOMS, cls.DOORS, cls.PROPS, cls.ENEMIES]


ROOM_CODES = frozenset({
    CellCode.ROOM,
    CellCode.BOSS_ROOM,
    CellCode.ROOM_ITEM,
    CellCode.ROOM_PRISON,
    CellCode.ROOM_ENEMIES,
    CellCode.ROOM_DICE,
    CellCode.ROOM_BLOOD_OATH,
    CellCode.ROOM_KILL_CHALLENGE,
    CellCode.ROOM_CHASE,
})


CELL_TO_LAYER: Dict[CellCode, Layer] = {
    CellCode.ERROR: Layer.HALL,
    CellCode.EMPTY: Layer.HALL,
    CellCode.HALL: Layer.HALL,
    CellCode.ROOM: Layer.ROOMS,
    CellCode.BOSS_ROOM: Layer.ROOMS,
    CellCode.SPAWNER: Layer.ENEMIES,
    CellCode.PLAYER_SPAWN: Layer.HALL,
    CellCode.PROP: Layer.PROPS,
    CellCode.ROOM_ITEM: Layer.ROOMS,
    CellCode.ROOM_PRISON: Layer.ROOMS,
    CellCode.ROOM_ENEMIES: Layer.ROOMS,
    CellCode.ROOM_DICE: Layer.ROOMS,
    CellCode.ROOM_BLOOD_OATH: Layer.ROOMS,
    CellCode.ROOM_KILL_CHALLENGE: Layer.ROOMS,
    CellCode.ROOM_CHASE: Layer.ROOMS,
    CellCode.ENEMY: Layer.ENEMIES,
    CellCode.DOOR: Layer.DOORS,
}


_SYMBOLS = {
    CellCode.ERROR: "!",
    CellCode.EMPTY: " ",
    CellCode.HALL: ".",
    CellCode.ROOM: "r",
    CellCode.BOSS_ROOM: "B",
    CellCode.SPAWNER: "s",
    CellCode.PLAYER_SPAWN: "@",
    CellCode.PROP: "p",
    CellCode.ROOM_ITEM: "i",
    CellCode.ROOM_PRISON: "j",
    CellCode.ROOM_ENEMIES: "e",
    CellCode.ROOM_DICE: "d",
    CellCode.ROOM_BLOOD_OATH: "o",
    CellCode.ROOM_KILL_CHALLENGE: "k",
    CellCode.ROOM_CHASE: "c",
    CellCode.ENEMY: "E",
    CellCode.DOOR: "D",
}


def get_layer_from_value(value: CellCode) -> Layer:
    """Return the concrete layer a cell code is stored on."""
    return CELL_TO_LAYER[CellCode(value)]
