"""OrbitControls: drag to orbit the camera around its target, wheel to dolly.

Input only accumulates deltas; ``update()`` (called once per tick by the
animation loop) applies them. With damping enabled only a fraction of the
pending delta is applied each update and the rest decays, so the camera
eases toward where the user pushed it instead of snapping.
"""

from __future__ import annotations

import math

import pygame
from pygame.math import Vector3

from heartscene.config import DAMPING_FACTOR, ENABLE_DAMPING, HEIGHT, ROTATE_SPEED, ZOOM_SPEED

EPS = 1e-6


class OrbitControls:
    def __init__(
        self,
        camera,
        *,
        enable_damping: bool = ENABLE_DAMPING,
        damping_factor: float = DAMPING_FACTOR,
        rotate_speed: float = ROTATE_SPEED,
        zoom_speed: float = ZOOM_SPEED,
        min_distance: float = 0.0,
        max_distance: float = math.inf,
        viewport_height: int = HEIGHT,
    ) -> None:
        self.camera = camera
        self.enable_damping = bool(enable_damping)
        self.damping_factor = float(damping_factor)
        self.rotate_speed = float(rotate_speed)
        self.zoom_speed = float(zoom_speed)
        self.min_distance = float(min_distance)
        self.max_distance = float(max_distance)
        self.viewport_height = int(viewport_height)

        self._delta_theta = 0.0
        self._delta_phi = 0.0
        self._scale = 1.0
        self._rotating = False

    # --------------------------- input ----------------------------------
    def rotate_left(self, angle: float) -> None:
        self._delta_theta -= angle

    def rotate_up(self, angle: float) -> None:
        self._delta_phi -= angle

    def dolly(self, steps: float) -> None:
        """Positive steps move toward the target."""
        factor = 0.95 ** self.zoom_speed
        self._scale *= factor ** steps

    def on_mouse_delta(self, dx: float, dy: float) -> None:
        h = max(1, self.viewport_height)
        self.rotate_left(2 * math.pi * dx / h * self.rotate_speed)
        self.rotate_up(2 * math.pi * dy / h * self.rotate_speed)

    def handle_event(self, event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._rotating = True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._rotating = False
        elif event.type == pygame.MOUSEMOTION and self._rotating:
            dx, dy = event.rel
            self.on_mouse_delta(dx, dy)
        elif event.type == pygame.MOUSEWHEEL:
            self.dolly(event.y)

    # --------------------------- update ---------------------------------
    def update(self) -> bool:
        """Apply pending rotation/dolly; returns True if the camera moved."""
        target = self.camera.target
        offset = self.camera.position - target
        radius = offset.length()
        if radius < EPS:
            return False
        theta = math.atan2(offset.x, offset.z)
        phi = math.acos(max(-1.0, min(1.0, offset.y / radius)))

        if self.enable_damping:
            theta += self._delta_theta * self.damping_factor
            phi += self._delta_phi * self.damping_factor
        else:
            theta += self._delta_theta
            phi += self._delta_phi

        phi = max(EPS, min(math.pi - EPS, phi))
        radius = max(self.min_distance, min(self.max_distance, radius * self._scale))

        sin_phi = math.sin(phi)
        new_position = target + Vector3(
            radius * sin_phi * math.sin(theta),
            radius * math.cos(phi),
            radius * sin_phi * math.cos(theta),
        )
        moved = (new_position - self.camera.position).length_squared() > EPS * EPS
        self.camera.position = new_position

        if self.enable_damping:
            decay = 1.0 - self.damping_factor
            self._delta_theta *= decay
            self._delta_phi *= decay
        else:
            self._delta_theta = 0.0
            self._delta_phi = 0.0
        self._scale = 1.0
        return moved


__all__ = ["OrbitControls"]
