import math

import numpy as np
from pygame.math import Vector3

from heartscene.config import FAR, FOV, HEIGHT, NEAR, STARTING_POS, WIDTH, CAMERA_TARGET


class PerspectiveCamera:
    def __init__(
        self,
        position=None,
        target=None,
        fov=FOV,
        aspect=WIDTH / HEIGHT,
        near=NEAR,
        far=FAR,
    ):
        # keep external API types pygame.Vector3 like the rest of the scene
        self.position = Vector3(position if position is not None else STARTING_POS)
        self.target = Vector3(target if target is not None else CAMERA_TARGET)
        self.up = Vector3(0, 1, 0)
        self.fov = float(fov)  # vertical, degrees
        self.aspect = float(aspect)
        self.near = float(near)
        self.far = float(far)
        self.projection = np.eye(4, dtype=np.float64)
        self.update_projection_matrix()

    def set_aspect(self, width: float, height: float) -> None:
        self.aspect = float(width) / float(height) if height else 1.0
        self.update_projection_matrix()

    def update_projection_matrix(self) -> np.ndarray:
        """Recompute the OpenGL-style projection from fov/aspect/near/far."""
        f = 1.0 / math.tan(math.radians(self.fov) / 2.0)
        n, fa = self.near, self.far
        self.projection = np.array(
            [
                [f / self.aspect, 0.0, 0.0, 0.0],
                [0.0, f, 0.0, 0.0],
                [0.0, 0.0, (fa + n) / (n - fa), (2.0 * fa * n) / (n - fa)],
                [0.0, 0.0, -1.0, 0.0],
            ],
            dtype=np.float64,
        )
        return self.projection

    def view_matrix(self) -> np.ndarray:
        """World -> camera matrix looking from position toward target."""
        eye = np.array(tuple(self.position), dtype=np.float64)
        center = np.array(tuple(self.target), dtype=np.float64)
        up = np.array(tuple(self.up), dtype=np.float64)

        forward = center - eye
        length = np.linalg.norm(forward)
        forward = forward / length if length > 1e-12 else np.array([0.0, 0.0, -1.0])
        side = np.cross(forward, up)
        side_len = np.linalg.norm(side)
        # Looking straight up/down: pick any perpendicular side vector
        side = side / side_len if side_len > 1e-12 else np.array([1.0, 0.0, 0.0])
        true_up = np.cross(side, forward)

        m = np.eye(4, dtype=np.float64)
        m[0, :3] = side
        m[1, :3] = true_up
        m[2, :3] = -forward
        m[:3, 3] = -m[:3, :3] @ eye
        return m
