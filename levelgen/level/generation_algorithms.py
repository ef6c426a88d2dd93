"""
Generation Algorithms - stepwise walkers, Perlin cave carving and Perlin decoration

Every algorithm follows the same protocol: `start(level, rng)` prepares its
state and each call to `step()` performs one unit of work, reporting whether
more remain. The pipeline drives the steps and fires callbacks in between.
"""

import logging
import math
import random
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from levelgen.level.level import Level
from levelgen.level.perlin_noise import PerlinNoise
from levelgen.level.room import Room
from levelgen.level.sector import Sector
from levelgen.level.walkers import BaseWalker, KamikazeWalker, spawn_room
from levelgen.tiles.cell_codes import CellCode, Layer
from levelgen.utils.shuffle_bag import ShuffleBag

logger = logging.getLogger(__name__)


class StepStatus(Enum):
    RUNNING = "running"
    DONE = "done"


class LevelGenAlgorithm:
    """Base class for stepwise generation algorithms"""

    name = "base"

    def __init__(self):
        self.level: Optional[Level] = None
        self.rng: Optional[random.Random] = None

    def start(self, level: Level, rng: Optional[random.Random] = None) -> None:
        self.level = level
        self.rng = rng or random.Random()

    def step(self) -> StepStatus:
        raise NotImplementedError

    def run(self, level: Level, rng: Optional[random.Random] = None) -> None:
        """Start and step until done."""
        self.start(level, rng)
        while self.step() is StepStatus.RUNNING:
            pass


class EmptyAlgorithm(LevelGenAlgorithm):
    """Does nothing; stands in for the primary step when a layout was preloaded."""

    name = "empty"

    def step(self) -> StepStatus:
        return StepStatus.DONE


# Room types handed out to the kamikaze walkers
ROOM_WEIGHTS: List[Tuple[CellCode, int]] = [
    (CellCode.ROOM_ENEMIES, 50),
    (CellCode.ROOM_ITEM, 10),
    (CellCode.ROOM_KILL_CHALLENGE, 10),
    (CellCode.ROOM_BLOOD_OATH, 5),
    (CellCode.ROOM_DICE, 5),
    (CellCode.ROOM_CHASE, 5),
]


class WalkersAlgorithm(LevelGenAlgorithm):
    """
    Generates rooms through randomly walking agents that explode after a
    random number of steps.

    One step is one tick: every live walker walks once. Terminated walkers
    are dropped and their room requests are materialized right away, so a
    later walker in the same tick already sees the new sector.
    """

    name = "walkers"

    def __init__(self):
        super().__init__()
        self.walkers: List[BaseWalker] = []
        self.ticks = 0

    def start(self, level: Level, rng: Optional[random.Random] = None) -> None:
        super().start(level, rng)
        self.walkers = self._generate_walkers()
        self.ticks = 0
        logger.debug("Walkers algorithm started with %d walkers", len(self.walkers))

    def _generate_walkers(self) -> List[BaseWalker]:
        width, height = self.level.size
        hip = max(width, height)

        n_walkers = max(1, round(hip / 2.5))
        walker_life = n_walkers
        turn_chance = max(0.15, 0.25 / max(1, hip // 25))
        room_size = ((width * 2) // n_walkers, (height * 2) // n_walkers)

        bag: ShuffleBag[CellCode] = ShuffleBag(self.rng)
        for code, weight in ROOM_WEIGHTS:
            bag.add(code, weight)
        room_codes = bag.next(n_walkers)

        walkers: List[BaseWalker] = []
        for i in range(n_walkers - 1):
            walkers.append(self._create_walker(walker_life, turn_chance, room_size, room_codes[i]))
        walkers.append(self._create_walker(walker_life, turn_chance, room_size, CellCode.BOSS_ROOM))
        return walkers

    def _create_walker(self, life: int, turn_chance: float, room_size: Tuple[int, int],
                       room_code: CellCode) -> KamikazeWalker:
        width, height = self.level.size
        x = self.rng.randrange(int(width * 0.3), max(int(width * 0.3) + 1, int(width * 0.7)))
        y = self.rng.randrange(int(height * 0.3), max(int(height * 0.3) + 1, int(height * 0.7)))

        min_life = max(2, life // 2)
        size = tuple(
            self.rng.randint(max(1, s // 2), max(1, s - 1)) for s in room_size
        )
        return KamikazeWalker(
            self.level.root,
            (x, y),
            life=self.rng.randint(min_life, max(min_life, life)),
            turn_chance=turn_chance + self.rng.uniform(-0.05, 0.1),
            room_size=size,
            room_code=room_code,
            rng=self.rng,
        )

    def step(self) -> StepStatus:
        if not self.walkers:
            return StepStatus.DONE

        for walker in list(self.walkers):
            result = walker.walk()
            if not result.terminated:
                continue

            self.walkers.remove(walker)
            if result.spawn is not None:
                spawn_room(result.spawn)
            if result.connector is not None and None not in (result.connector.from_id,
                                                             result.connector.to_id):
                self.level.register_connector(result.connector)

        self.ticks += 1
        if self.walkers:
            return StepStatus.RUNNING

        logger.debug("Walkers finished after %d ticks, %d rooms", self.ticks, len(self.level.rooms))
        return StepStatus.DONE


class PerlinCave(LevelGenAlgorithm):
    """Carves a roughly circular cave out of thresholded Perlin noise, one cell per step"""

    name = "perlin_cave"

    def __init__(self, threshold: float = 0.35, scale: float = 0.15):
        super().__init__()
        self.threshold = threshold
        self.scale = scale
        self.center = (0, 0)
        self.offset = (0.0, 0.0)
        self.noise: Optional[PerlinNoise] = None
        self._cells: Optional[Iterator[Tuple[int, int]]] = None

    def start(self, level: Level, rng: Optional[random.Random] = None) -> None:
        super().start(level, rng)
        self.center = (level.width // 2, level.height // 2)
        self.offset = (self.rng.uniform(-100.0, 100.0), self.rng.uniform(-100.0, 100.0))
        self.noise = PerlinNoise(self.rng)
        self._cells = level.positions()

    def is_outside_mask(self, p: Tuple[int, int]) -> bool:
        """True for cells beyond the wobbly circle around the level center."""
        dx = p[0] - self.center[0]
        dy = p[1] - self.center[1]
        distance = math.hypot(dx, dy)

        # Unsigned angle between +y and the offset, in degrees
        angle = 0.0
        if distance > 0:
            angle = math.degrees(math.acos(max(-1.0, min(1.0, dy / distance))))

        radius = math.hypot(*self.center) / 2.0 + math.sin(angle * 0.15) * 2.0
        return distance > radius

    def step(self) -> StepStatus:
        for p in self._cells:
            if self.is_outside_mask(p):
                continue

            value = self.noise.noise(self.offset[0] + p[0] * self.scale,
                                     self.offset[1] + p[1] * self.scale)
            if value > self.threshold:
                self.level.root.set_cell(p, CellCode.HALL)
            return StepStatus.RUNNING

        return StepStatus.DONE


class PerlinMaskAdd(LevelGenAlgorithm):
    """
    Sprinkles `dest` over cells that currently read as `source`.

    Cells are read through `layer` and written non-destructively, so `dest`
    lands on its own layer and never downgrades a stronger code. One step
    handles one matching cell.
    """

    name = "perlin_mask_add"

    def __init__(self, source: CellCode, dest: CellCode, threshold: float = 0.35,
                 scale_x: float = 0.15, scale_y: float = 0.15, layer: Layer = Layer.ALL):
        super().__init__()
        self.source = CellCode(source)
        self.dest = CellCode(dest)
        self.threshold = threshold
        self.scale = (scale_x, scale_y)
        self.layer = layer
        self.offset = (0.0, 0.0)
        self.noise: Optional[PerlinNoise] = None
        self._cells: Optional[Iterator[Tuple[int, int]]] = None
        self.cells_written = 0

    def start(self, level: Level, rng: Optional[random.Random] = None) -> None:
        super().start(level, rng)
        self.offset = (self.rng.uniform(-100.0, 100.0), self.rng.uniform(-100.0, 100.0))
        self.noise = PerlinNoise(self.rng)
        self._cells = level.positions()
        self.cells_written = 0

    def step(self) -> StepStatus:
        for p in self._cells:
            if self.level.get_cell(p, self.layer) != self.source:
                continue

            value = self.noise.noise(self.offset[0] + p[0] * self.scale[0],
                                     self.offset[1] + p[1] * self.scale[1])
            if value > self.threshold:
                self.level.set_cell(p, self.dest)
                self.cells_written += 1
            return StepStatus.RUNNING

        logger.debug("Mask %s -> %s wrote %d cells", self.source.name, self.dest.name, self.cells_written)
        return StepStatus.DONE


class TestLayoutAlgorithm(LevelGenAlgorithm):
    """Fixed three-room layout joined by hall strips, for debugging the later steps"""

    name = "test_layout"
    __test__ = False

    def step(self) -> StepStatus:
        level = self.level
        rooms = [Sector(level, (10, 10), (10, 10), CellCode.ROOM)]

        for x in range(11, 20):
            level.set_cell((x, 20), CellCode.HALL)
        for y in range(20, 24):
            level.set_cell((15, y), CellCode.HALL)

        rooms.append(Sector(level, (20, 15), (10, 10), CellCode.ROOM_CHASE))
        rooms.append(Sector(level, (13, 24), (5, 5), CellCode.ROOM_DICE))

        for sector in rooms:
            level.add_room(Room(sector))
        return StepStatus.DONE
