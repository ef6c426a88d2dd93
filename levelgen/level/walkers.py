"""
Walker agents.

Walkers are small stochastic state machines that carve HALL cells one step at
a time. Instead of firing callbacks, `walk()` returns a WalkResult so the
driving loop decides when to drop a walker and when to materialize the room
it asked for.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from levelgen.level.connector import Connector
from levelgen.level.room import Room
from levelgen.level.sector import Sector
from levelgen.tiles.cell_codes import CellCode
from levelgen.utils.directions import Direction

logger = logging.getLogger(__name__)


class WalkerKind(Enum):
    KAMIKAZE = "kamikaze"
    TARGETED = "targeted"
    INVERSE_KAMIKAZE_TARGETED = "inverse_kamikaze_targeted"


@dataclass
class SectorSpawn:
    """Request for a new child sector emitted by a terminating walker."""
    parent: Sector
    position: Tuple[int, int]
    size: Tuple[int, int]
    code: CellCode


@dataclass
class WalkResult:
    terminated: bool = False
    spawn: Optional[SectorSpawn] = None
    connector: Optional[Connector] = None



def spawn_room(spawn: SectorSpawn) -> Room:
    """Create the requested sector and register a Room for it."""
    level = spawn.parent.level
    sector = Sector(level, spawn.position, spawn.size, spawn.code, spawn.parent)
    room = Room(sector)
    level.add_room(room)
    logger.debug("Spawned %s room at %s size %s", spawn.code.name, spawn.position, spawn.size)
    return room


class BaseWalker:
    """Common walker state: position and facing, both local to `sector`."""

    kind: WalkerKind

    def __init__(self, sector: Sector, pos: Tuple[int, int], rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.sector = sector
        self.position = (int(pos[0]), int(pos[1]))
        self.direction = Direction(self.rng.randrange(4))

    def walk(self) -> WalkResult:
        """
        Advance one step.

        Paints the current cell as HALL, then moves if the next position is
        still inside the sector and lets the variant decide whether to stop.
        """
        self.sector.set_cell(self.position, CellCode.HALL)
        new_position = self.next_position()

        if self.sector.is_in(new_position):
            self.position = new_position
            if self.on_moved():
                return self.terminate()

        return WalkResult()

    def next_position(self) -> Tuple[int, int]:
        raise NotImplementedError

    def on_moved(self) -> bool:
        raise NotImplementedError

    def terminate(self) -> WalkResult:
        return WalkResult(terminated=True)

    def change_direction(self) -> None:
        """Rotate a quarter turn either way."""
        self.direction = self.direction.rotated(1 if self.rng.random() >= 0.5 else -1)


class KamikazeWalker(BaseWalker):
    """
    Walks randomly until its life runs out, then explodes into a room.

    A walker that has gone `patience` moves without touching fresh ground
    gives up instead: it terminates right away and only keeps its room when
    the room still fits. `patience` defaults to four times the sector's
    half perimeter.
    """

    kind = WalkerKind.KAMIKAZE

    def __init__(self,
                 sector: Sector,
                 pos: Tuple[int, int],
                 life: int,
                 turn_chance: float,
                 room_size: Tuple[int, int],
                 room_code: CellCode = CellCode.ROOM,
                 rng: Optional[random.Random] = None,
                 patience: Optional[int] = None):
        super().__init__(sector, pos, rng)
        self.life = life
        self.turn_chance = turn_chance
        self.room_size = (int(room_size[0]), int(room_size[1]))
        self.room_code = CellCode(room_code)
        self.patience = patience if patience is not None else 4 * (sector.size[0] + sector.size[1])
        self.stale_moves = 0
        self.gave_up = False

    def next_position(self) -> Tuple[int, int]:
        # Rotate until the step stays inside the sector
        for _ in range(4):
            dx, dy = self.direction.to_vector()
            new_position = (self.position[0] + dx, self.position[1] + dy)
            if self.sector.is_in(new_position):
                return new_position
            self.direction = self.direction.rotated(1)
        return self.position

    def on_moved(self) -> bool:
        if self.rng.random() < self.turn_chance:
            self.change_direction()

        # Only fresh ground wears the walker out
        if self.sector.get_cell(self.position) == CellCode.EMPTY:
            self.life -= 1
            self.stale_moves = 0
        else:
            self.stale_moves += 1

        if self.stale_moves >= self.patience:
            self.gave_up = True
            return True

        if self.life > 0:
            return False

        return self.room_fits()

    def room_fits(self) -> bool:
        return self.sector.find_overlapping_child(self.position, self.room_size) is None

    def terminate(self) -> WalkResult:
        if self.gave_up and not self.room_fits():
            logger.debug("Walker at %s gave up without room for %s", self.position, self.room_code.name)
            return WalkResult(terminated=True)

        return WalkResult(
            terminated=True,
            spawn=SectorSpawn(self.sector, self.position, self.room_size, self.room_code),
        )


class TargetedWalker(BaseWalker):
    """Walks from a position towards another position leaving a corridor."""

    kind = WalkerKind.TARGETED

    def __init__(self,
                 sector: Sector,
                 pos: Tuple[int, int],
                 target: Tuple[int, int],
                 rng: Optional[random.Random] = None,
                 from_sector: Optional[Sector] = None,
                 to_sector: Optional[Sector] = None):
        super().__init__(sector, pos, rng)
        self.target = (int(target[0]), int(target[1]))
        self.connector = Connector(
            start_position=sector.get_absolute_position(self.position),
            end_position=sector.get_absolute_position(self.target),
            from_id=from_sector.id if from_sector is not None else None,
            to_id=to_sector.id if to_sector is not None else None,
        )

    @property
    def path(self):
        return self.connector.path

    def next_position(self) -> Tuple[int, int]:
        dx = self.target[0] - self.position[0]
        dy = self.target[1] - self.position[1]
        if dx == 0 and dy == 0:
            return self.position

        if dx != 0 and dy != 0:
            move_x = self.rng.random() > 0.5
        else:
            move_x = dx != 0

        if move_x:
            direction = Direction.RIGHT if dx > 0 else Direction.LEFT
        else:
            direction = Direction.UP if dy > 0 else Direction.DOWN

        self.direction = direction
        vx, vy = direction.to_vector()
        return (self.position[0] + vx, self.position[1] + vy)

    def on_moved(self) -> bool:
        # Only accepted moves become part of the corridor
        self.connector.path.append(self.direction)
        return self.position == self.target

    def terminate(self) -> WalkResult:
        return WalkResult(terminated=True, connector=self.connector)


class InverseKamikazeTargetedWalker(TargetedWalker):
    """Spawns a room where it was created, then walks towards `target`."""

    kind = WalkerKind.INVERSE_KAMIKAZE_TARGETED

    def __init__(self,
                 sector: Sector,
                 pos: Tuple[int, int],
                 target: Tuple[int, int],
                 room_size: Tuple[int, int],
                 room_code: CellCode = CellCode.ROOM,
                 rng: Optional[random.Random] = None,
                 to_sector: Optional[Sector] = None):
        super().__init__(sector, pos, target, rng, to_sector=to_sector)
        self.room_size = (int(room_size[0]), int(room_size[1]))
        self.room_code = CellCode(room_code)

        self.spawned_room = spawn_room(SectorSpawn(sector, self.position, self.room_size, self.room_code))
        self.connector.from_id = self.spawned_room.sector.id
