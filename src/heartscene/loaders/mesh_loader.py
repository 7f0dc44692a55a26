"""Decode binary glTF models into flat triangle lists plus their base material."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pygame
import trimesh
from trimesh.visual.material import PBRMaterial

from heartscene.core.mesh import MeshData

Color = Tuple[float, float, float, float]


@dataclass
class MeshAsset:
    """A decoded model: geometry and the base color/texture it was authored with.

    ``color`` and ``image`` are None when the model carries no material.
    """

    data: MeshData
    color: Optional[Color] = None
    image: Optional[pygame.Surface] = None


def _rgba(value) -> Optional[Color]:
    if value is None:
        return None
    rgba = np.asarray(trimesh.visual.color.to_rgba(value), dtype=np.float64) / 255.0
    return tuple(float(c) for c in rgba)


def _surface(image) -> Optional[pygame.Surface]:
    """PIL image (as trimesh hands it out) to an RGBA pygame surface."""
    if image is None:
        return None
    rgba = image.convert("RGBA")
    return pygame.image.frombytes(rgba.tobytes(), rgba.size, "RGBA")


def model_material(visual) -> Tuple[Optional[Color], Optional[pygame.Surface]]:
    """Base color and texture stored on a trimesh visual, if any."""
    kind = getattr(visual, "kind", None)
    if kind == "texture":
        material = visual.material
        if material is None:
            return None, None
        if isinstance(material, PBRMaterial):
            return _rgba(material.baseColorFactor), _surface(material.baseColorTexture)
        return _rgba(material.main_color), _surface(getattr(material, "image", None))
    if kind in ("vertex", "face"):
        return _rgba(visual.main_color), None
    return None, None


def load_mesh(path: str) -> MeshAsset:
    """Load ``path`` (.glb/.gltf/.obj...) and merge every geometry into one mesh."""
    loaded = trimesh.load(path, force="mesh")
    if isinstance(loaded, trimesh.Scene):
        # force="mesh" normally concatenates already; older trimesh may not
        geoms = [g for g in loaded.geometry.values() if isinstance(g, trimesh.Trimesh)]
        if not geoms:
            raise ValueError(f"no triangle geometry in {path}")
        loaded = trimesh.util.concatenate(geoms)
    if not isinstance(loaded, trimesh.Trimesh) or len(loaded.faces) == 0:
        raise ValueError(f"no triangle geometry in {path}")

    faces = np.asarray(loaded.faces)
    vertices = np.asarray(loaded.vertices, dtype=np.float32)[faces].reshape(-1, 3)
    normals = np.asarray(loaded.vertex_normals, dtype=np.float32)[faces].reshape(-1, 3)
    uvs = None
    uv = getattr(loaded.visual, "uv", None)
    if uv is not None and len(uv) == len(loaded.vertices):
        uvs = np.asarray(uv, dtype=np.float32)[faces].reshape(-1, 2)
    color, image = model_material(loaded.visual)
    return MeshAsset(MeshData(vertices=vertices, normals=normals, uvs=uvs), color, image)
