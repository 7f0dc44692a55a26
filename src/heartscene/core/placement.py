"""Random placement of instances on a sphere.

``phi`` is drawn uniformly over [0, pi] rather than with an arc-cosine
correction, so samples bunch up near the poles. That skew is the intended
look of the heart field and is kept as-is.
"""

from __future__ import annotations

import math
import random
from typing import Optional, Tuple

from pygame.math import Vector3

from heartscene.config import HEART_RADIUS, SPREAD_RANGE

SCALE_MIN = 0.5
SCALE_SPAN = 2.0


class RandomPlacementGenerator:
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def sample(
        self,
        radius: float = HEART_RADIUS,
        vertical_offset: float = SPREAD_RANGE / 20,
    ) -> Tuple[Vector3, Vector3]:
        """Return (position, scale) for one instance."""
        theta = self.rng.random() * math.pi * 2
        phi = self.rng.random() * math.pi
        position = Vector3(
            radius * math.sin(phi) * math.cos(theta),
            radius * math.sin(phi) * math.sin(theta),
            radius * math.cos(phi) - vertical_offset,
        )
        scale = Vector3(
            self.rng.random() * SCALE_SPAN + SCALE_MIN,
            self.rng.random() * SCALE_SPAN + SCALE_MIN,
            self.rng.random() * SCALE_SPAN + SCALE_MIN,
        )
        return position, scale


__all__ = ["RandomPlacementGenerator"]
