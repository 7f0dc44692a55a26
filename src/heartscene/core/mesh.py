"""Mesh data shared by loaders, text building and the renderer.

``MeshData`` is plain numpy and is safe to build on loader threads. The
renderer turns it into a VBO the first time it is drawn.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

# Vertex format: [x, y, z, nx, ny, nz, u, v]
FLOATS_PER_VERTEX = 8
STRIDE = FLOATS_PER_VERTEX * 4


@dataclass
class MeshData:
    """Flat triangle list: every three rows of ``vertices`` form one triangle."""

    vertices: np.ndarray
    normals: Optional[np.ndarray] = None
    uvs: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=np.float32).reshape(-1, 3)
        if self.normals is None:
            self.normals = face_normals(self.vertices)
        else:
            self.normals = np.asarray(self.normals, dtype=np.float32).reshape(-1, 3)
        if self.uvs is not None:
            self.uvs = np.asarray(self.uvs, dtype=np.float32).reshape(-1, 2)

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        if self.vertex_count == 0:
            zero = np.zeros(3, dtype=np.float32)
            return zero, zero.copy()
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    def center(self) -> "MeshData":
        """Translate in place so the bounding box is centered on the origin."""
        if self.vertex_count:
            lo, hi = self.bounds()
            self.vertices -= (lo + hi) * 0.5
        return self

    def interleaved(self) -> np.ndarray:
        n = self.vertex_count
        out = np.zeros((n, FLOATS_PER_VERTEX), dtype=np.float32)
        out[:, 0:3] = self.vertices
        out[:, 3:6] = self.normals
        if self.uvs is not None:
            out[:, 6:8] = self.uvs
        return out


@dataclass
class MeshInstance:
    """Render payload of a mesh or text node: geometry plus the material to draw it with."""

    data: MeshData
    material: object = None
    label: Optional[str] = None


def face_normals(vertices: np.ndarray) -> np.ndarray:
    """Flat per-face normals for a triangle list, repeated per vertex."""
    tris = np.asarray(vertices, dtype=np.float32).reshape(-1, 3, 3)
    if tris.shape[0] == 0:
        return np.zeros((0, 3), dtype=np.float32)
    n = np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])
    length = np.linalg.norm(n, axis=1, keepdims=True)
    n = n / np.maximum(length, 1e-12)
    return np.repeat(n, 3, axis=0).astype(np.float32)


def plane_mesh(width: float, height: float) -> MeshData:
    """Unit-UV quad in the XY plane facing +Z, centered on the origin."""
    w, h = width / 2.0, height / 2.0
    corners = [(-w, -h, 0.0), (w, -h, 0.0), (w, h, 0.0), (-w, h, 0.0)]
    uv = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
    order = [0, 1, 2, 0, 2, 3]
    vertices = [corners[i] for i in order]
    uvs = [uv[i] for i in order]
    normals = [(0.0, 0.0, 1.0)] * 6
    return MeshData(vertices=vertices, normals=normals, uvs=uvs)

