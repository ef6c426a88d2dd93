from levelgen.level.bitmap_loader import load_level_bitmap
from levelgen.level.config_loader import load_generation_parameters
from levelgen.level.connector import Connector
from levelgen.level.door_placement import DoorPlacement
from levelgen.level.generation_algorithms import (
    EmptyAlgorithm,
    PerlinCave,
    PerlinMaskAdd,
    StepStatus,
    TestLayoutAlgorithm,
    WalkersAlgorithm,
)
from levelgen.level.layered_grid import LayeredGrid
from levelgen.level.level import Level
from levelgen.level.level_data import GenerationParameters, LevelType
from levelgen.level.level_generator import GenerationProgress, LevelGenerator, select_player_start_position
from levelgen.level.room import Room
from levelgen.level.sector import Sector

__all__ = [
    'Connector',
    'DoorPlacement',
    'EmptyAlgorithm',
    'GenerationParameters',
    'GenerationProgress',
    'LayeredGrid',
    'Level',
    'LevelGenerator',
    'LevelType',
    'PerlinCave',
    'PerlinMaskAdd',
    'Room',
    'Sector',
    'StepStatus',
    'TestLayoutAlgorithm',
    'WalkersAlgorithm',
    'load_generation_parameters',
    'load_level_bitmap',
    'select_player_start_position',
]
