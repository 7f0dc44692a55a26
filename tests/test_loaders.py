from __future__ import annotations

import numpy as np
import pygame
import pytest
import trimesh

from heartscene.core.mesh import MeshData, face_normals, plane_mesh
from heartscene.loaders import DEFAULT_LOADERS, load_font, load_mesh
from heartscene.loaders.mesh_loader import model_material
from heartscene.core.scheduler import AssetKind
from heartscene.textures.texture_utils import TextureHandle, decode_image


def test_default_loaders_cover_every_kind() -> None:
    assert set(DEFAULT_LOADERS) == set(AssetKind)


def test_load_mesh_from_glb(tmp_path) -> None:
    path = tmp_path / "box.glb"
    trimesh.creation.box(extents=(1, 2, 3)).export(str(path))
    asset = load_mesh(str(path))
    mesh = asset.data
    assert isinstance(mesh, MeshData)
    assert asset.color is None or len(asset.color) == 4
    assert mesh.vertex_count == 12 * 3
    lo, hi = mesh.bounds()
    assert hi - lo == pytest.approx(np.array([1.0, 2.0, 3.0]))
    assert mesh.normals.shape == (36, 3)


def test_load_mesh_missing_file_raises(tmp_path) -> None:
    with pytest.raises(Exception):
        load_mesh(str(tmp_path / "nope.glb"))


def test_decode_image_gives_rgba(tmp_path) -> None:
    src = pygame.Surface((8, 4))
    src.fill((255, 0, 0))
    path = tmp_path / "flower.png"
    pygame.image.save(src, str(path))
    surface = decode_image(str(path))
    assert surface.get_size() == (8, 4)
    assert surface.get_bitsize() == 32
    assert TextureHandle(surface).size == (8, 4)
    assert not TextureHandle(surface).uploaded


def test_decode_image_missing_file_raises(tmp_path) -> None:
    with pytest.raises((FileNotFoundError, pygame.error)):
        decode_image(str(tmp_path / "missing.png"))


def test_load_font_default() -> None:
    font = load_font("")
    assert font.get_height() > 0


def test_plane_mesh_faces_forward() -> None:
    plane = plane_mesh(5, 5)
    assert plane.vertex_count == 6
    lo, hi = plane.bounds()
    assert tuple(lo) == pytest.approx((-2.5, -2.5, 0))
    assert tuple(hi) == pytest.approx((2.5, 2.5, 0))
    assert np.allclose(face_normals(plane.vertices), [0, 0, 1])
    assert plane.interleaved().shape == (6, 8)


def test_center_moves_bounds_to_origin() -> None:
    mesh = MeshData(vertices=[(2, 2, 2), (4, 2, 2), (2, 6, 2)]).center()
    lo, hi = mesh.bounds()
    assert tuple((lo + hi) / 2) == pytest.approx((0, 0, 0))


def test_load_mesh_keeps_vertex_color(tmp_path) -> None:
    box = trimesh.creation.box()
    box.visual.face_colors = [255, 0, 0, 255]
    path = tmp_path / "red.glb"
    box.export(str(path))
    asset = load_mesh(str(path))
    assert asset.color == pytest.approx((1.0, 0.0, 0.0, 1.0))
    assert asset.image is None


def test_pbr_material_color_and_texture() -> None:
    from PIL import Image

    material = trimesh.visual.material.PBRMaterial(
        baseColorFactor=[0, 0, 255, 255],
        baseColorTexture=Image.new("RGB", (2, 3), (10, 20, 30)),
    )
    visual = trimesh.visual.TextureVisuals(material=material)
    color, image = model_material(visual)
    assert color == pytest.approx((0.0, 0.0, 1.0, 1.0))
    assert image.get_size() == (2, 3)
    assert tuple(image.get_at((0, 0))) == (10, 20, 30, 255)


def test_simple_material_uses_diffuse() -> None:
    material = trimesh.visual.material.SimpleMaterial(diffuse=[0, 255, 0, 255])
    color, image = model_material(trimesh.visual.TextureVisuals(material=material))
    assert color == pytest.approx((0.0, 1.0, 0.0, 1.0))
    assert image is None


def test_untextured_mesh_has_no_material() -> None:
    box = trimesh.creation.box()
    assert model_material(box.visual) == (None, None)
