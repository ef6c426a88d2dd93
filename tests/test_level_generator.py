"""
End-to-end tests for the generation pipeline.
"""

import pygame
import pytest

from levelgen.exceptions import InvalidConfiguration
from levelgen.level.level import Level
from levelgen.level.level_data import GenerationParameters, LevelType
from levelgen.level.level_generator import LevelGenerator, select_player_start_position
from levelgen.tiles.cell_codes import CellCode, Layer
from levelgen.tiles.cell_colors import code_to_color


@pytest.fixture
def dungeon_params() -> GenerationParameters:
    return GenerationParameters(
        level_type=LevelType.DUNGEON,
        level_size=(50, 50),
        prop_chance=0.65,
        enemy_chance=0.65,
        seed=1234,
    )


class TestDungeonPipeline:

    @pytest.fixture
    def run(self, dungeon_params):
        visualized = []
        completed = []
        generator = LevelGenerator(
            dungeon_params,
            on_visualize=visualized.append,
            on_completed=lambda level, params: completed.append((level, params)),
        )
        level = generator.generate()
        return level, visualized, completed

    def test_has_halls_rooms_and_doors(self, run):
        level, _, _ = run
        assert level.count_cells(CellCode.HALL, Layer.HALL) > 0
        assert any(sector.code.is_room for sector in level.root.children)
        assert level.count_cells(CellCode.DOOR, Layer.DOORS) > 0

    def test_callbacks(self, run, dungeon_params):
        level, visualized, completed = run
        assert len(visualized) > 1
        assert all(v is level for v in visualized)
        assert completed == [(level, dungeon_params)]

    def test_player_start_is_set(self, run):
        level, _, _ = run
        assert level.spawn_point is not None
        assert level.is_valid_position(level.spawn_point)
        assert level.spawn_sector is level.get_sector_at(level.spawn_point)

    def test_connectors_reference_live_sectors(self, run):
        level, _, _ = run
        for connector in level.connectors():
            assert connector.from_id in level.sectors
            assert connector.to_id in level.sectors

    def test_same_seed_same_level(self, dungeon_params, run):
        level, _, _ = run
        again = LevelGenerator(dungeon_params).generate()
        assert again.dump() == level.dump()


class TestPipelineStages:

    def test_progress_reports_every_stage(self, dungeon_params):
        dungeon_params.level_size = (30, 30)
        stages = []
        for progress in LevelGenerator(dungeon_params).iter_steps():
            if progress.done:
                stages.append(progress.stage)
        assert stages == ["walkers", "perlin_mask_add", "perlin_mask_add", "doors", "player_start"]

    def test_cave_level(self):
        params = GenerationParameters(level_type=LevelType.CAVE, level_size=(30, 30), seed=5)
        level = LevelGenerator(params).generate()
        assert level.count_cells(CellCode.HALL, Layer.HALL) > 0
        assert level.root.children == []

    def test_test_layout_rooms_all_get_doors(self):
        params = GenerationParameters(level_type=LevelType.TEST, seed=11)
        level = LevelGenerator(params).generate()

        assert len(level.root.children) == 3
        for sector in level.root.children:
            assert sector.connectors
        assert all(room.number_of_doors >= 1 for room in level.rooms)

    def test_invalid_parameters_fail_before_any_step(self):
        visualized = []
        params = GenerationParameters(prop_chance=1.5)
        with pytest.raises(InvalidConfiguration):
            LevelGenerator(params, on_visualize=visualized.append).generate()
        assert visualized == []

    def test_preloaded_level_skips_primary_algorithm(self, tmp_path):
        surface = pygame.Surface((12, 10))
        surface.fill((0, 0, 0))
        surface.fill(code_to_color(CellCode.ROOM), pygame.Rect(2, 2, 4, 4))
        surface.fill(code_to_color(CellCode.HALL), pygame.Rect(6, 3, 5, 1))
        path = tmp_path / "layout.bmp"
        pygame.image.save(surface, str(path))

        params = GenerationParameters(preloaded_level=str(path), seed=3, prop_chance=0.0, enemy_chance=0.0)
        generator = LevelGenerator(params)
        first = next(generator.iter_steps())
        assert first.stage == "empty"

        level = generator.generate()
        assert level.size == (12, 10)
        assert len(level.root.children) == 1
        assert level.count_cells(CellCode.DOOR, Layer.DOORS) == 2

    def test_completion_reported_before_final_record(self):
        completed = []
        generator = LevelGenerator(
            GenerationParameters(level_type=LevelType.TEST, seed=2),
            on_completed=lambda level, params: completed.append((level, params)),
        )
        for progress in generator.iter_steps():
            if progress.stage == "player_start" and progress.done:
                break
        assert completed == [(generator.level, generator.params)]

    @pytest.mark.parametrize("size, seed", [
        ((1, 1), 7),
        ((1, 2), 7),
        ((1, 50), 7),
        ((4, 60), 7),
        ((5, 5), 4),
        ((3, 3), 1),
        ((2, 9), 5),
    ])
    def test_small_dungeons_finish(self, size, seed):
        params = GenerationParameters(level_size=size, seed=seed)
        units = 0
        for progress in LevelGenerator(params).iter_steps():
            units += 1
            assert units < 200000, f"stuck in {progress.stage}"
        assert progress.stage == "player_start"
        assert progress.level.size == size

    def test_preloaded_surface_and_path(self, tmp_path):
        surface = pygame.Surface((8, 6))
        surface.fill((0, 0, 0))
        surface.fill(code_to_color(CellCode.ROOM), pygame.Rect(1, 1, 3, 3))
        path = tmp_path / "layout.bmp"
        pygame.image.save(surface, str(path))

        for source in (surface, path):
            params = GenerationParameters(preloaded_level=source, seed=1)
            level = LevelGenerator(params).generate()
            assert level.size == (8, 6)
            assert len(level.root.children) == 1


class TestPlayerStart:

    def test_center_when_occupied(self):
        level = Level((10, 10))
        level.set_cell((5, 5), CellCode.HALL)
        assert select_player_start_position(level) == (5, 5)

    def test_nearest_ring(self):
        level = Level((20, 20))
        level.set_cell((12, 9), CellCode.HALL)
        level.set_cell((17, 10), CellCode.HALL)
        assert select_player_start_position(level) == (12, 9)

    def test_falls_back_to_center(self):
        assert select_player_start_position(Level((9, 9))) == (4, 4)
