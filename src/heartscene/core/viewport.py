from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from heartscene.config import HEIGHT, MAX_PIXEL_RATIO, WIDTH

logger = logging.getLogger(__name__)

ResizeListener = Callable[["Viewport"], None]


@dataclass
class Viewport:
    """Logical canvas size plus device pixel ratio (clamped)."""

    width: int = WIDTH
    height: int = HEIGHT
    pixel_ratio: float = 1.0
    camera: Optional[object] = None
    controls: Optional[object] = None
    listeners: List[ResizeListener] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.pixel_ratio = min(float(self.pixel_ratio), MAX_PIXEL_RATIO)
        self._apply()

    @property
    def aspect(self) -> float:
        return self.width / self.height if self.height else 1.0

    @property
    def drawable_size(self) -> Tuple[int, int]:
        """Framebuffer size in device pixels."""
        return (
            int(round(self.width * self.pixel_ratio)),
            int(round(self.height * self.pixel_ratio)),
        )

    def resize(self, width: int, height: int, pixel_ratio: Optional[float] = None) -> None:
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        if pixel_ratio is not None:
            self.pixel_ratio = min(float(pixel_ratio), MAX_PIXEL_RATIO)
        self._apply()
        logger.debug(
            "Viewport resized to %dx%d (ratio %.2f)", self.width, self.height, self.pixel_ratio
        )

    def _apply(self) -> None:
        if self.camera is not None:
            self.camera.set_aspect(self.width, self.height)
        if self.controls is not None:
            self.controls.viewport_height = self.height
        for listener in self.listeners:
            listener(self)
