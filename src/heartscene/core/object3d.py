from __future__ import annotations

import math

import numpy as np
from pygame.math import Vector3


def _as_vector(value, default) -> Vector3:
    if value is None:
        return Vector3(default)
    if isinstance(value, Vector3):
        return value
    return Vector3(*value)


def rotation_matrix(rx: float, ry: float, rz: float) -> np.ndarray:
    """3x3 rotation for Euler angles applied in XYZ order (R = Rx @ Ry @ Rz)."""
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)
    Rx = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]], dtype=np.float64)
    Ry = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]], dtype=np.float64)
    Rz = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]], dtype=np.float64)
    return Rx @ Ry @ Rz


class Object3D:
    """Transform holder: position, Euler rotation (radians) and per-axis scale."""

    def __init__(self, position=None, rotation=None, scale=None):
        self.position = _as_vector(position, (0, 0, 0))
        self.rotation = _as_vector(rotation, (0, 0, 0))
        self.scale = _as_vector(scale, (1, 1, 1))

    def set_uniform_scale(self, value: float) -> None:
        self.scale.update(value, value, value)

    def local_matrix(self) -> np.ndarray:
        """4x4 local transform T @ R @ S (column vectors)."""
        m = np.eye(4, dtype=np.float64)
        r = rotation_matrix(self.rotation.x, self.rotation.y, self.rotation.z)
        m[:3, :3] = r * np.array([self.scale.x, self.scale.y, self.scale.z])
        m[:3, 3] = (self.position.x, self.position.y, self.position.z)
        return m

    def transform_points(self, points) -> np.ndarray:
        """Apply the local transform to an (N, 3) array of points."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        m = self.local_matrix()
        return pts @ m[:3, :3].T + m[:3, 3]

    def transform_snapshot(self) -> tuple:
        """Plain tuple copy of the transform, handy for change detection."""
        return (
            tuple(self.position),
            tuple(self.rotation),
            tuple(self.scale),
        )
