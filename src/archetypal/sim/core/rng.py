from __future__ import annotations

import math
import random

from pygame.math import Vector2


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    def next_range(self, low: float, high: float) -> float:
        lower = min(low, high)
        return self._random.random() * abs(high - low) + lower

    def next_unit_circle(self) -> Vector2:
        angle = self._random.uniform(0, 2 * math.pi)
        vector = Vector2()
        vector.from_polar((1, math.degrees(angle)))
        return vector

    def next_polar(self, max_radius: float) -> Vector2:
        """Uniform radius in ``[0, max_radius)`` along a uniform direction."""
        radius = self.next_range(0.0, max_radius)
        return self.next_unit_circle() * radius
