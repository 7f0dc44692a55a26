"""Window host: pygame/OpenGL window, event pump and frame pacing.

The engine owns nothing scene-specific. It builds the ``ValentineScene``,
wires its camera and controls to a ``Viewport`` and a ``SceneRenderer``,
kicks off the asset loads and hands control to ``AnimationLoop.run``. Each
frame it flips the buffer, waits for the next frame slot and pumps events.
"""

from __future__ import annotations

import logging
import threading

import pygame

from heartscene.config import FPS, FULLSCREEN, HEIGHT, RESIZABLE, VSYNC, WIDTH
from heartscene.core.animation_loop import AnimationLoop
from heartscene.core.renderer import SceneRenderer
from heartscene.core.viewport import Viewport
from heartscene.world.valentine_scene import ValentineScene

logger = logging.getLogger(__name__)


def window_pixel_ratio() -> float:  # pragma: no cover - needs a display
    """Drawable pixels per window unit (>1 on high-density displays)."""
    surface = pygame.display.get_surface()
    if surface is None:
        return 1.0
    window_w, _ = pygame.display.get_window_size()
    surface_w, _ = surface.get_size()
    return surface_w / window_w if window_w else 1.0


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
class Engine:
    def __init__(self):  # pragma: no cover - needs a display
        pygame.init()
        pygame.display.gl_set_attribute(pygame.GL_DEPTH_SIZE, 24)
        pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLEBUFFERS, 1)
        pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLESAMPLES, 4)
        pygame.display.set_caption("Heart Scene")
        flags = pygame.DOUBLEBUF | pygame.OPENGL
        if FULLSCREEN:
            flags |= pygame.FULLSCREEN
        elif RESIZABLE:
            flags |= pygame.RESIZABLE
        try:
            pygame.display.set_mode((WIDTH, HEIGHT), flags, vsync=(1 if VSYNC else 0))
        except pygame.error:
            # vsync requested but unavailable on this driver
            logger.warning("VSync unavailable; opening window without it")
            pygame.display.set_mode((WIDTH, HEIGHT), flags)
        self.clock = pygame.time.Clock()
        self.stop = threading.Event()

        self.renderer = SceneRenderer()
        self.renderer.setup()

        self.scene = ValentineScene()
        self.viewport = Viewport(
            WIDTH,
            HEIGHT,
            window_pixel_ratio(),
            camera=self.scene.camera,
            controls=self.scene.controls,
            listeners=[self.renderer.on_resize],
        )
        self.loop = AnimationLoop(
            self.scene.graph,
            scheduler=self.scene.scheduler,
            camera=self.scene.camera,
            controls=self.scene.controls,
            renderer=self.renderer,
        )

    # ------------------------------------------------------------------
    def handle_events(self) -> bool:  # pragma: no cover - needs a display
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
            if event.type == pygame.VIDEORESIZE:
                self.viewport.resize(event.w, event.h, window_pixel_ratio())
                continue
            self.scene.controls.handle_event(event)
        return True

    def next_frame(self) -> None:  # pragma: no cover - visual
        pygame.display.flip()
        if VSYNC:
            self.clock.tick(FPS)
        else:
            self.clock.tick()
        if not self.handle_events():
            self.stop.set()

    # ------------------------------------------------------------------
    def run(self):  # pragma: no cover - visual
        self.scene.load_assets()
        try:
            self.loop.run(self.stop, frame=self.next_frame)
        finally:
            logger.info("Shutting down after %d frames", self.loop.ticks)
            self.scene.shutdown()
            self.renderer.release()
            pygame.quit()


__all__ = ["Engine"]
