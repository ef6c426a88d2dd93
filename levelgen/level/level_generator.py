"""
Level Generator - Main orchestrator for procedural level generation
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from levelgen.level.bitmap_loader import load_level_bitmap
from levelgen.level.door_placement import DoorPlacement
from levelgen.level.generation_algorithms import (
    EmptyAlgorithm,
    LevelGenAlgorithm,
    PerlinCave,
    PerlinMaskAdd,
    StepStatus,
    TestLayoutAlgorithm,
    WalkersAlgorithm,
)
from levelgen.level.level import Level
from levelgen.level.level_data import GenerationParameters, LevelType
from levelgen.level.seed_manager import SeedManager
from levelgen.tiles.cell_codes import CellCode, Layer

logger = logging.getLogger(__name__)

VisualizeCallback = Callable[[Level], None]
CompletedCallback = Callable[[Level, GenerationParameters], None]

# Noise scale used when sprinkling props and enemies over the halls
DECORATION_SCALE = 0.5


@dataclass
class GenerationProgress:
    """Snapshot yielded by LevelGenerator.iter_steps after each unit of work."""
    stage: str
    stage_index: int
    stage_count: int
    steps: int
    done: bool
    level: Level


def select_player_start_position(level: Level) -> Tuple[int, int]:
    """
    Pick where the player starts.

    The level center wins when it holds anything; otherwise square rings of
    growing radius around it are scanned and the first non-empty cell is
    taken. Falls back to the center.
    """
    cx, cy = level.width // 2, level.height // 2
    if level.get_cell((cx, cy)) > CellCode.EMPTY:
        return (cx, cy)

    for radius in range(1, min(level.width, level.height) // 2):
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                if max(abs(dx), abs(dy)) != radius:
                    continue
                position = (cx + dx, cy + dy)
                if level.get_cell(position) > CellCode.EMPTY:
                    return position

    return (cx, cy)


class LevelGenerator:
    """
    Runs the generation pipeline for one set of parameters.

    Stages, in order: the primary layout algorithm, prop sprinkling, enemy
    sprinkling and door placement, followed by player start selection.
    Callbacks are only ever invoked from here.
    """

    def __init__(self, params: Optional[GenerationParameters] = None,
                 on_visualize: Optional[VisualizeCallback] = None,
                 on_completed: Optional[CompletedCallback] = None):
        self.params = params or GenerationParameters()
        self.on_visualize = on_visualize
        self.on_completed = on_completed
        self.level: Optional[Level] = None
        self.seed_manager: Optional[SeedManager] = None

    def primary_algorithm(self) -> LevelGenAlgorithm:
        if self.params.preloaded_level is not None:
            return EmptyAlgorithm()

        if self.params.level_type is LevelType.CAVE:
            return PerlinCave()
        if self.params.level_type is LevelType.TEST:
            return TestLayoutAlgorithm()
        return WalkersAlgorithm()

    def build_pipeline(self) -> List[Tuple[str, LevelGenAlgorithm]]:
        """Ordered (seed component, algorithm) pairs."""
        p = self.params
        return [
            ("structure", self.primary_algorithm()),
            ("props", PerlinMaskAdd(CellCode.HALL, CellCode.PROP, 1.0 - p.prop_chance,
                                    DECORATION_SCALE, DECORATION_SCALE, Layer.ALL)),
            ("enemies", PerlinMaskAdd(CellCode.HALL, CellCode.ENEMY, 1.0 - p.enemy_chance,
                                      DECORATION_SCALE, DECORATION_SCALE, Layer.ALL)),
            ("doors", DoorPlacement(connect_corridors=True)),
        ]

    def create_level(self) -> Level:
        if self.params.preloaded_level is not None:
            return load_level_bitmap(self.params.preloaded_level)
        return Level(self.params.level_size)

    def iter_steps(self) -> Iterator[GenerationProgress]:
        """
        Generate the level lazily.

        Yields a GenerationProgress after every unit of work: one walker
        tick, one noise cell or one sector's doors. The caller decides how
        fast to pull; the level is complete once the iterator is exhausted.

        Raises:
            InvalidConfiguration: Before any work when the parameters are bad
        """
        self.params.validate()
        self.seed_manager = SeedManager(self.params.seed)
        logger.info("Level generation started (type=%s, size=%s, seed=%d)",
                    self.params.level_type.value, self.params.level_size, self.seed_manager.world_seed)

        level = self.create_level()
        self.level = level
        self._visualize()

        pipeline = self.build_pipeline()
        for index, (component, algorithm) in enumerate(pipeline):
            algorithm.start(level, self.seed_manager.get_random(component))
            steps = 0
            while True:
                status = algorithm.step()
                steps += 1
                self._visualize()
                done = status is StepStatus.DONE
                yield GenerationProgress(algorithm.name, index, len(pipeline), steps, done, level)
                if done:
                    break
            logger.debug("Stage %s finished after %d steps", algorithm.name, steps)

        if level.spawn_point is None:
            level.spawn_point = select_player_start_position(level)
        level.spawn_sector = level.get_sector_at(level.spawn_point)
        self._visualize()

        # Completion is reported before the final record
        if self.on_completed is not None:
            self.on_completed(level, self.params)
        yield GenerationProgress("player_start", len(pipeline), len(pipeline), 1, True, level)

        logger.info("Level generation ended: %d sectors, %d rooms, %d connectors",
                    len(level.sectors), len(level.rooms), len(level.connectors()))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Final layout:\n%s", level.dump())

    def generate(self) -> Level:
        """Run the whole pipeline and return the finished level."""
        for _ in self.iter_steps():
            pass
        return self.level

    def _visualize(self) -> None:
        if self.on_visualize is not None:
            self.on_visualize(self.level)
