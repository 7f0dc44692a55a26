from __future__ import annotations

import logging
import math
import random

import pygame
import pytest
import trimesh

from heartscene.config import HEART_COLOR, NUM_HEARTS, TEXT_LINES
from heartscene.core.animation_loop import FLOWER_TEXT_GROUP, AnimationLoop
from heartscene.core.clock import AnimationClock
from heartscene.core.materials import BasicMaterial
from heartscene.core.mesh import MeshData
from heartscene.core.scene_graph import NodeKind
from heartscene.core.scheduler import AssetKind, AssetLoadScheduler, LoadState
from heartscene.loaders.mesh_loader import MeshAsset, load_mesh
from heartscene.world.text_layout import TEXT_GROUP_NAME
from heartscene.world.valentine_scene import ValentineScene


def _surface() -> pygame.Surface:
    return pygame.Surface((4, 4), pygame.SRCALPHA, 32)


def _triangle(_source: str) -> MeshAsset:
    return MeshAsset(MeshData(vertices=[(0, 0, 0), (1, 0, 0), (0, 1, 0)]))


def _scene(font, *, flower_ok=True, font_ok=True, mesh_loader=_triangle, **kwargs):
    def texture(source):
        if "flower" in source and not flower_ok:
            raise FileNotFoundError(source)
        return _surface()

    def load_font(source):
        if not font_ok:
            raise OSError("unreadable font")
        return font

    loaders = {AssetKind.MESH: mesh_loader, AssetKind.TEXTURE: texture, AssetKind.FONT: load_font}
    scheduler = AssetLoadScheduler(loaders, max_workers=4)
    return ValentineScene(
        scheduler=scheduler,
        rng=random.Random(5),
        flower_texture="flower.png",
        matcap_texture="matcap.png",
        font_path="font.ttf",
        **kwargs,
    )


def _settle(scene: ValentineScene) -> None:
    assert scene.scheduler.wait(timeout=10)
    scene.scheduler.dispatch_completed()


@pytest.fixture
def scene(font):
    s = _scene(font)
    yield s
    s.scheduler.shutdown()


def test_static_parts_exist_before_loading(scene) -> None:
    lights = scene.graph.of_kind(NodeKind.LIGHT)
    assert [n.name for n in lights] == ["ambient_light", "directional_light"]
    assert tuple(lights[1].position) == (5, 5, 5)
    assert scene.hearts == []
    assert scene.flower_text_group is None


def test_load_assets_returns_without_delivering(scene) -> None:
    requests = scene.load_assets()
    assert len(requests) == NUM_HEARTS + 3
    assert scene.hearts == []
    _settle(scene)
    assert all(r.state is LoadState.SUCCEEDED for r in requests)


def test_every_heart_is_its_own_node(scene) -> None:
    scene.load_assets()
    _settle(scene)
    hearts = scene.hearts
    assert len(hearts) == NUM_HEARTS
    assert len({id(h) for h in hearts}) == NUM_HEARTS
    positions = {tuple(h.position) for h in hearts}
    assert len(positions) == NUM_HEARTS
    for heart in hearts:
        assert heart.parent is scene.graph.root()
        assert heart.payload.material is scene.heart_material
        offset = (heart.position.x, heart.position.y, heart.position.z + scene.vertical_offset)
        assert math.dist(offset, (0, 0, 0)) == pytest.approx(scene.heart_radius)


def test_flower_and_text_group_assembled(scene) -> None:
    scene.load_assets()
    _settle(scene)
    group = scene.graph.find(FLOWER_TEXT_GROUP)
    assert group is scene.flower_text_group
    flower, text = group.children
    assert flower.name == "flower"
    assert tuple(flower.position) == pytest.approx((0, -6.9, 0))
    material = flower.payload.material
    assert isinstance(material, BasicMaterial)
    assert material.transparent and material.double_sided
    assert material.alpha_test == pytest.approx(0.1)
    assert material.map.size == (4, 4)
    assert text.name == TEXT_GROUP_NAME
    assert tuple(text.position) == pytest.approx((0, 5, 0))
    assert [n.payload.label for n in text.children] == TEXT_LINES


def test_matcap_lands_on_text_material(scene) -> None:
    assert scene.text_material.matcap is None
    scene.load_assets()
    _settle(scene)
    assert scene.text_material.matcap is not None
    text = scene.graph.find(TEXT_GROUP_NAME)
    assert all(n.payload.material is scene.text_material for n in text.children)


def test_flower_failure_still_attaches_text(font, caplog) -> None:
    scene = _scene(font, flower_ok=False)
    scene.load_assets()
    with caplog.at_level(logging.ERROR, logger="heartscene"):
        _settle(scene)
    scene.scheduler.shutdown()
    group = scene.flower_text_group
    assert group is not None
    assert [n.name for n in group.children] == [TEXT_GROUP_NAME]
    assert len(scene.hearts) == NUM_HEARTS
    assert "flower.png" in caplog.text


def test_font_failure_leaves_hearts_alone(font) -> None:
    scene = _scene(font, font_ok=False, num_hearts=12)
    scene.load_assets()
    _settle(scene)
    scene.scheduler.shutdown()
    assert scene.flower_text_group is None
    assert len(scene.hearts) == 12


def test_group_waits_for_flower_to_settle(font) -> None:
    scene = _scene(font, num_hearts=0)
    scene._on_font_loaded(font)
    assert scene.flower_text_group is None
    scene._on_flower_loaded(_surface())
    group = scene.flower_text_group
    assert group is not None
    assert [n.name for n in group.children] == ["flower", TEXT_GROUP_NAME]
    # A late duplicate settle does not attach a second group
    scene._on_flower_failed(None)
    assert len([n for n, _ in scene.graph.walk() if n.name == FLOWER_TEXT_GROUP]) == 1
    scene.scheduler.shutdown()


def test_loop_animates_loaded_scene(scene) -> None:
    t = [0.0]
    loop = AnimationLoop(
        scene.graph,
        scheduler=scene.scheduler,
        camera=scene.camera,
        controls=scene.controls,
        clock=AnimationClock(lambda: t[0]),
    )
    scene.load_assets()
    assert scene.scheduler.wait(timeout=10)
    loop.start()
    t[0] = 2.0
    loop.tick()
    assert len(scene.hearts) == NUM_HEARTS
    assert all(h.rotation.y == pytest.approx(1.0) for h in scene.hearts)
    group = scene.flower_text_group
    assert group.position.y == pytest.approx(2.0)
    assert group.scale.x == pytest.approx(1.04)


def test_hearts_share_one_mesh_and_material(scene) -> None:
    scene.load_assets()
    _settle(scene)
    hearts = scene.hearts
    assert len(hearts) == NUM_HEARTS
    assert len({id(h.payload.data) for h in hearts}) == 1
    assert len({id(h.payload.material) for h in hearts}) == 1
    assert hearts[0].payload.data is scene.heart_mesh


def test_model_without_material_falls_back_to_heart_color(scene) -> None:
    scene.load_assets()
    _settle(scene)
    assert scene.heart_material.color == HEART_COLOR
    assert scene.heart_material.map is None


def test_heart_uses_color_stored_in_model(font, tmp_path) -> None:
    box = trimesh.creation.box(extents=(1, 1, 1))
    box.visual.face_colors = [20, 200, 40, 255]
    path = tmp_path / "heart.glb"
    box.export(str(path))

    scene = _scene(font, mesh_loader=load_mesh, num_hearts=3, heart_model=str(path))
    scene.load_assets()
    _settle(scene)
    scene.scheduler.shutdown()
    assert len(scene.hearts) == 3
    material = scene.heart_material
    assert material.color == pytest.approx((20 / 255, 200 / 255, 40 / 255))
    assert all(h.payload.material is material for h in scene.hearts)
