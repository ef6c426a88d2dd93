"""
Seed Manager - Handles deterministic seed management for level generation
"""

import hashlib
import random
from typing import Dict, Optional

# One independent stream per pipeline stage
COMPONENTS = ("structure", "props", "enemies", "doors")


def derive_seed(base: int, component: str) -> int:
    """Stable 32-bit seed for `component` derived from `base`."""
    seed_hash = hashlib.md5(f"{base}_{component}".encode()).hexdigest()
    return int(seed_hash[:8], 16)


class SeedManager:
    """Manages deterministic seeds for procedural level generation"""

    def __init__(self, world_seed: Optional[int] = None):
        """
        Initialize seed manager with optional world seed

        Args:
            world_seed: Master seed for the run. If None, generates random seed.
        """
        self.world_seed = world_seed if world_seed is not None else random.randint(0, 2**31 - 1)
        self.sub_seeds: Dict[str, int] = {
            component: derive_seed(self.world_seed, component) for component in COMPONENTS
        }
        self._rng_instances: Dict[str, random.Random] = {}

    def get_random(self, component: str) -> random.Random:
        """
        Get deterministic random instance for specific component

        Args:
            component: Component name ('structure', 'props', 'enemies', ...)

        Returns:
            Random instance seeded for this component
        """
        if component not in self._rng_instances:
            if component not in self.sub_seeds:
                self.sub_seeds[component] = derive_seed(self.world_seed, component)
            self._rng_instances[component] = random.Random(self.sub_seeds[component])

        return self._rng_instances[component]
