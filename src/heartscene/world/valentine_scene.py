"""Valentine scene: hearts on a sphere, a flower and a stack of 3D text.

The scene owns the graph, the camera rig and the asset scheduler. Building
it only sets up static parts (lights); ``load_assets()`` then submits every
load and returns immediately. Each completion handler builds its visual in
full and inserts it in one step, so the animation loop can start right away
and simply animates whatever has arrived.

The flower plane and the text are independent loads. The group that holds
them is attached once the font has loaded and the flower texture has
settled either way; if the texture fails the group goes in with the text
alone.
"""

from __future__ import annotations

import logging
import random
import time
from typing import List, Optional, Sequence

from heartscene.camera import OrbitControls, PerspectiveCamera
from heartscene.config import (
    FLOWER_ALPHA_TEST,
    FLOWER_OFFSET,
    FLOWER_SIZE,
    HEART_COLOR,
    HEART_RADIUS,
    HEIGHT,
    LINE_HEIGHT,
    NUM_HEARTS,
    SPREAD_RANGE,
    TEXT_GROUP_OFFSET,
    TEXT_LINES,
    WIDTH,
)
from heartscene.core.animation_loop import FLOWER_TEXT_GROUP, HEART_TAG
from heartscene.core.lights import AmbientLight, DirectionalLight
from heartscene.core.materials import BasicMaterial, MatcapMaterial, StandardMaterial
from heartscene.core.mesh import MeshData, MeshInstance, plane_mesh
from heartscene.core.placement import RandomPlacementGenerator
from heartscene.core.scene_graph import NodeKind, SceneGraph, SceneNode
from heartscene.core.scheduler import AssetKind, AssetLoadScheduler, LoadRequest
from heartscene.errors import LoadFailure
from heartscene.loaders.mesh_loader import MeshAsset
from heartscene.loaders.resourcepath import (
    FLOWER_TEXTURE_PATH,
    FONT_PATH,
    HEART_MODEL_PATH,
    MATCAP_TEXTURE_PATH,
)
from heartscene.textures.texture_utils import TextureHandle
from heartscene.world.text_layout import TextLayoutBuilder

logger = logging.getLogger(__name__)


def heart_material(asset: MeshAsset) -> StandardMaterial:
    """Material authored in the model; HEART_COLOR when it has none."""
    color = asset.color[:3] if asset.color is not None else HEART_COLOR
    texture = TextureHandle(asset.image) if asset.image is not None else None
    return StandardMaterial(color=color, map=texture)


class ValentineScene:
    def __init__(
        self,
        camera: Optional[PerspectiveCamera] = None,
        *,
        scheduler: Optional[AssetLoadScheduler] = None,
        rng: Optional[random.Random] = None,
        num_hearts: int = NUM_HEARTS,
        heart_radius: float = HEART_RADIUS,
        vertical_offset: float = SPREAD_RANGE / 20,
        text_lines: Sequence[str] = TEXT_LINES,
        line_height: float = LINE_HEIGHT,
        text_builder: Optional[TextLayoutBuilder] = None,
        heart_model: str = HEART_MODEL_PATH,
        flower_texture: str = FLOWER_TEXTURE_PATH,
        matcap_texture: str = MATCAP_TEXTURE_PATH,
        font_path: str = FONT_PATH,
    ) -> None:
        self.graph = SceneGraph()
        self.camera = camera or PerspectiveCamera(aspect=WIDTH / HEIGHT)
        self.controls = OrbitControls(self.camera)
        self.scheduler = scheduler or AssetLoadScheduler()
        self.placement = RandomPlacementGenerator(rng)
        self.text_builder = text_builder or TextLayoutBuilder()

        self.num_hearts = int(num_hearts)
        self.heart_radius = heart_radius
        self.vertical_offset = vertical_offset
        self.text_lines = list(text_lines)
        self.line_height = line_height
        self.heart_model = heart_model
        self.flower_texture = flower_texture
        self.matcap_texture = matcap_texture
        self.font_path = font_path

        # Every heart shares one mesh and material, taken from the first model load
        self.heart_mesh: Optional[MeshData] = None
        self.heart_material: Optional[StandardMaterial] = None
        self.text_material = MatcapMaterial()

        # Join state for the flower/text group
        self._flower_plane: Optional[SceneNode] = None
        self._flower_settled = False
        self._text_group: Optional[SceneNode] = None
        self._flower_text_group: Optional[SceneNode] = None

        start_time = time.perf_counter()
        self._setup_lights()
        self.log_timing("Setting up lights", start_time, time.perf_counter())

    @staticmethod
    def log_timing(label: str, start: float, end: float) -> None:
        logger.info("%s took %.6f seconds", label, end - start)

    # ------------------------------------------------------------------
    @property
    def hearts(self) -> List[SceneNode]:
        return self.graph.tagged(HEART_TAG)

    @property
    def flower_text_group(self) -> Optional[SceneNode]:
        return self._flower_text_group

    def _setup_lights(self) -> None:
        ambient = AmbientLight()
        directional = DirectionalLight()
        self.graph.insert(None, SceneNode(NodeKind.LIGHT, ambient, name="ambient_light"))
        self.graph.insert(
            None,
            SceneNode(
                NodeKind.LIGHT,
                directional,
                name="directional_light",
                position=directional.position,
            ),
        )

    # ------------------------------------------------------------------
    def load_assets(self) -> List[LoadRequest]:
        """Submit every asset load; returns without waiting for any of them."""
        start_time = time.perf_counter()
        requests = []
        for _ in range(self.num_hearts):
            requests.append(
                self.scheduler.submit(AssetKind.MESH, self.heart_model, self._on_heart_loaded)
            )
        requests.append(
            self.scheduler.submit(
                AssetKind.TEXTURE, self.matcap_texture, self.text_material.set_matcap
            )
        )
        requests.append(
            self.scheduler.submit(
                AssetKind.TEXTURE,
                self.flower_texture,
                self._on_flower_loaded,
                self._on_flower_failed,
            )
        )
        requests.append(
            self.scheduler.submit(AssetKind.FONT, self.font_path, self._on_font_loaded)
        )
        self.log_timing(f"Scheduling {len(requests)} asset loads", start_time, time.perf_counter())
        return requests

    # --------------------------- completions ----------------------------
    def _on_heart_loaded(self, asset: MeshAsset) -> None:
        if self.heart_mesh is None:
            self.heart_mesh = asset.data
            self.heart_material = heart_material(asset)
        position, scale = self.placement.sample(self.heart_radius, self.vertical_offset)
        heart = SceneNode(
            NodeKind.MESH,
            MeshInstance(self.heart_mesh, self.heart_material, label="heart"),
            tags={HEART_TAG},
            position=position,
            scale=scale,
        )
        self.graph.insert(None, heart)

    def _on_flower_loaded(self, surface) -> None:
        material = BasicMaterial(
            map=TextureHandle(surface),
            transparent=True,
            alpha_test=FLOWER_ALPHA_TEST,
            double_sided=True,
        )
        self._flower_plane = SceneNode(
            NodeKind.MESH,
            MeshInstance(plane_mesh(FLOWER_SIZE, FLOWER_SIZE), material, label="flower"),
            name="flower",
            position=FLOWER_OFFSET,
        )
        self._flower_settled = True
        logger.info("Flower plane built")
        self._attach_flower_text_group()

    def _on_flower_failed(self, failure: LoadFailure) -> None:
        logger.error("Error loading flower texture: %s", failure)
        self._flower_settled = True
        self._attach_flower_text_group()

    def _on_font_loaded(self, font) -> None:
        start_time = time.perf_counter()
        text_group = self.text_builder.build(
            self.text_lines, font, self.text_material, self.line_height
        )
        text_group.position.update(*TEXT_GROUP_OFFSET)
        self._text_group = text_group
        self.log_timing("Building text", start_time, time.perf_counter())
        self._attach_flower_text_group()

    def _attach_flower_text_group(self) -> None:
        if self._flower_text_group is not None:
            return
        if self._text_group is None or not self._flower_settled:
            return
        group = SceneNode(NodeKind.GROUP, name=FLOWER_TEXT_GROUP)
        if self._flower_plane is not None:
            group.add(self._flower_plane)
        group.add(self._text_group)
        self.graph.insert(None, group)
        self._flower_text_group = group
        logger.info(
            "Flower and text group added to scene (flower=%s)", self._flower_plane is not None
        )

    def shutdown(self) -> None:
        self.scheduler.shutdown(wait=False)


__all__ = ["ValentineScene", "heart_material"]
