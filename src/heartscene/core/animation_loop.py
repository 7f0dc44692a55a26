"""Per-frame update loop.

The loop is a two-state machine: ``PENDING`` until the first ``start()`` or
``tick()``, then ``RUNNING`` for good. It never ends on its own; the host
stops calling ``tick()`` (or sets the stop event passed to ``run()``) when
the window goes away.

Each tick, in order:

0. deliver finished asset loads into the scene graph
1. advance the clock (elapsed, delta)
2. spin every heart around Y
3. drift and grow the flower/text group, if it has been attached
4. update the camera controls
5. render the graph from the camera
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from heartscene.config import DRIFT_SPEED, GROWTH_RATE, HEART_SPIN_SPEED
from heartscene.core.clock import AnimationClock
from heartscene.core.scene_graph import SceneGraph

logger = logging.getLogger(__name__)

HEART_TAG = "heart"
FLOWER_TEXT_GROUP = "flower_text_group"


class LoopState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"


class AnimationLoop:
    def __init__(
        self,
        graph: SceneGraph,
        *,
        scheduler=None,
        camera=None,
        controls=None,
        renderer=None,
        clock: Optional[AnimationClock] = None,
        spin_speed: float = HEART_SPIN_SPEED,
        growth_rate: float = GROWTH_RATE,
        drift_speed: float = DRIFT_SPEED,
    ) -> None:
        self.graph = graph
        self.scheduler = scheduler
        self.camera = camera
        self.controls = controls
        self.renderer = renderer
        self.clock = clock or AnimationClock()
        self.spin_speed = spin_speed
        self.growth_rate = growth_rate
        self.drift_speed = drift_speed
        self.state = LoopState.PENDING
        self.ticks = 0

    def start(self) -> None:
        if self.state is LoopState.RUNNING:
            return
        self.clock.start()
        self.state = LoopState.RUNNING
        logger.info("Animation loop running")

    def tick(self) -> float:
        """Run one update-and-render step; returns the frame delta in seconds."""
        if self.state is LoopState.PENDING:
            self.start()

        if self.scheduler is not None:
            self.scheduler.dispatch_completed()

        delta = self.clock.advance()
        elapsed = self.clock.elapsed

        with self.graph.locked():
            self._spin_hearts(delta)
            self._animate_flower_group(delta, elapsed)

        if self.controls is not None:
            self.controls.update()
        if self.renderer is not None:
            self.renderer.render(self.graph, self.camera)

        self.ticks += 1
        return delta

    def run(self, stop: threading.Event, frame: Optional[Callable[[], None]] = None) -> None:
        """Tick until ``stop`` is set; ``frame`` is the host's present/pace hook."""
        self.start()
        while not stop.is_set():
            self.tick()
            if frame is not None:
                frame()

    # ------------------------------------------------------------------
    def _spin_hearts(self, delta: float) -> None:
        # Whatever has loaded so far; pending hearts join on a later tick
        for heart in self.graph.tagged(HEART_TAG):
            heart.rotation.y += delta * self.spin_speed

    def _animate_flower_group(self, delta: float, elapsed: float) -> None:
        group = self.graph.find(FLOWER_TEXT_GROUP)
        if group is None:
            return
        group.position.y += delta * self.drift_speed
        group.position.z -= delta * self.drift_speed
        group.set_uniform_scale(1 + elapsed * self.growth_rate)


__all__ = ["AnimationLoop", "LoopState", "HEART_TAG", "FLOWER_TEXT_GROUP"]
