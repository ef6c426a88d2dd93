"""
Config Loader - reads GenerationParameters from JSON files
"""

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Union

from levelgen.exceptions import InvalidConfiguration
from levelgen.level.level_data import GenerationParameters

logger = logging.getLogger(__name__)


def parameters_from_dict(data: Dict[str, Any]) -> GenerationParameters:
    """Build and validate parameters from a plain dictionary; unknown keys are rejected."""
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"Expected a JSON object, got {type(data).__name__}")

    known = {f.name for f in fields(GenerationParameters)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidConfiguration(f"Unknown parameter(s): {', '.join(unknown)}")

    params = GenerationParameters(**data)
    params.validate()
    return params


def load_generation_parameters(path: Union[str, Path]) -> GenerationParameters:
    """Load generation parameters from a JSON file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise InvalidConfiguration(f"Could not read parameters from {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"Malformed JSON in {path}: {e}") from e

    params = parameters_from_dict(data)
    logger.info("Loaded generation parameters from %s", path)
    return params
