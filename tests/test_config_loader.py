"""
Tests for generation parameters and JSON loading.
"""

import json

import pygame
import pytest

from levelgen.exceptions import InvalidConfiguration, LevelGenError
from levelgen.level.config_loader import load_generation_parameters, parameters_from_dict
from levelgen.level.level_data import GenerationParameters, LevelType
from levelgen.level.level_generator import LevelGenerator
from levelgen.level.seed_manager import SeedManager


def write_json(tmp_path, data, name="params.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestGenerationParameters:

    def test_defaults(self):
        params = GenerationParameters()
        params.validate()
        assert params.level_type is LevelType.DUNGEON
        assert params.level_size == (50, 50)
        assert params.prop_chance == 0.65
        assert params.enemy_chance == 0.65
        assert params.preloaded_level is None

    @pytest.mark.parametrize("overrides", [
        {"level_size": (0, 10)},
        {"level_size": (10,)},
        {"prop_chance": 1.5},
        {"enemy_chance": -0.1},
        {"seed": "abc"},
    ])
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(InvalidConfiguration):
            GenerationParameters(**overrides).validate()

    def test_preloaded_level_accepts_paths_and_surfaces(self, tmp_path):
        GenerationParameters(preloaded_level=tmp_path / "layout.bmp").validate()
        GenerationParameters(preloaded_level=str(tmp_path / "layout.bmp")).validate()
        GenerationParameters(preloaded_level=pygame.Surface((4, 4))).validate()
        with pytest.raises(InvalidConfiguration):
            GenerationParameters(preloaded_level=42).validate()

    def test_unknown_level_type_rejected(self):
        with pytest.raises(InvalidConfiguration):
            GenerationParameters(level_type="maze")

    def test_error_hierarchy(self):
        assert issubclass(InvalidConfiguration, LevelGenError)
        assert issubclass(InvalidConfiguration, ValueError)


class TestConfigLoader:

    def test_loads_json(self, tmp_path):
        path = write_json(tmp_path, {
            "level_type": "cave",
            "level_size": [30, 40],
            "prop_chance": 0.2,
            "seed": 7,
        })
        params = load_generation_parameters(path)

        assert params.level_type is LevelType.CAVE
        assert params.level_size == (30, 40)
        assert params.prop_chance == 0.2
        assert params.enemy_chance == 0.65
        assert params.seed == 7

    def test_unknown_keys_rejected(self, tmp_path):
        path = write_json(tmp_path, {"level_type": "dungeon", "rooms": 4})
        with pytest.raises(InvalidConfiguration, match="rooms"):
            load_generation_parameters(path)

    def test_malformed_json_rejected(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidConfiguration):
            load_generation_parameters(path)

    def test_missing_file_rejected(self, tmp_path):
        with pytest.raises(InvalidConfiguration):
            load_generation_parameters(tmp_path / "missing.json")

    def test_non_object_rejected(self):
        with pytest.raises(InvalidConfiguration):
            parameters_from_dict([1, 2, 3])

    def test_bad_values_rejected(self, tmp_path):
        path = write_json(tmp_path, {"enemy_chance": 2})
        with pytest.raises(InvalidConfiguration):
            load_generation_parameters(path)


class TestSeedManager:

    def test_components_are_deterministic(self):
        a = SeedManager(99)
        b = SeedManager(99)
        assert a.sub_seeds == b.sub_seeds
        assert a.get_random("props").random() == b.get_random("props").random()

    def test_components_are_independent(self):
        seeds = SeedManager(99).sub_seeds
        assert len(set(seeds.values())) == len(seeds)

    def test_unknown_component_derived_on_demand(self):
        manager = SeedManager(1)
        rng = manager.get_random("extra")
        assert "extra" in manager.sub_seeds
        assert manager.get_random("extra") is rng

    def test_one_component_per_pipeline_stage(self):
        stages = [component for component, _ in LevelGenerator().build_pipeline()]
        assert sorted(SeedManager(5).sub_seeds) == sorted(stages)
