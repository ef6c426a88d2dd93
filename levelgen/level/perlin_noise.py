"""
Perlin Noise - seeded 2D gradient noise sampled in the [0, 1] range
"""

import math
import random
from typing import List, Optional

# Unit gradients at 45 degree steps
_GRADIENTS = [
    (1.0, 0.0), (-1.0, 0.0), (0.0, 1.0), (0.0, -1.0),
    (0.7071, 0.7071), (-0.7071, 0.7071), (0.7071, -0.7071), (-0.7071, -0.7071),
]


class PerlinNoise:
    """Perlin noise implementation for organic carving and decoration"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.permutation = self._generate_permutation()

    def _generate_permutation(self) -> List[int]:
        """Generate permutation table for Perlin noise"""
        permutation = list(range(256))
        self.rng.shuffle(permutation)

        # Duplicate for overflow
        return permutation + permutation

    def noise(self, x: float, y: float) -> float:
        """
        Sample the noise field.

        Returns:
            Value in [0, 1]; lattice points sample exactly 0.5
        """
        x0 = math.floor(x)
        y0 = math.floor(y)
        xf = x - x0
        yf = y - y0
        xi = x0 & 255
        yi = y0 & 255

        n00 = self._gradient(xi, yi, xf, yf)
        n10 = self._gradient(xi + 1, yi, xf - 1, yf)
        n01 = self._gradient(xi, yi + 1, xf, yf - 1)
        n11 = self._gradient(xi + 1, yi + 1, xf - 1, yf - 1)

        u = self._fade(xf)
        v = self._fade(yf)
        value = self._interpolate(self._interpolate(n00, n10, u), self._interpolate(n01, n11, u), v)

        # Raw 2D gradient noise stays within +-sqrt(0.5)
        value = value / math.sqrt(2.0) + 0.5
        return min(1.0, max(0.0, value))

    def _gradient(self, xi: int, yi: int, dx: float, dy: float) -> float:
        h = self.permutation[self.permutation[xi] + yi] & 7
        gx, gy = _GRADIENTS[h]
        return gx * dx + gy * dy

    @staticmethod
    def _fade(t: float) -> float:
        return t * t * t * (t * (t * 6 - 15) + 10)

    @staticmethod
    def _interpolate(a: float, b: float, x: float) -> float:
        """Linear interpolation between a and b"""
        return a * (1 - x) + b * x
