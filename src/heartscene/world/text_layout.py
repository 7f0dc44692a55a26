from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from heartscene.config import LINE_HEIGHT
from heartscene.core.mesh import MeshData, MeshInstance
from heartscene.core.scene_graph import NodeKind, SceneNode
from heartscene.world.text_geometry import build_text_geometry

logger = logging.getLogger(__name__)

TEXT_GROUP_NAME = "text_group"


class TextLayoutBuilder:
    """Stacks one centered, extruded text node per line under a single group.

    The group is assembled detached and returned whole, so it can be inserted
    into the scene graph in one step; no caller ever sees half the lines.
    """

    def __init__(
        self,
        geometry_fn: Callable[..., MeshData] = build_text_geometry,
        **geometry_options,
    ) -> None:
        self.geometry_fn = geometry_fn
        self.geometry_options = geometry_options

    def build(
        self,
        lines: Sequence[str],
        font,
        material,
        line_height: float = LINE_HEIGHT,
        *,
        name: Optional[str] = TEXT_GROUP_NAME,
    ) -> SceneNode:
        group = SceneNode(NodeKind.GROUP, name=name)
        for index, line in enumerate(lines):
            geometry = self.geometry_fn(line, font, **self.geometry_options)
            geometry.center()
            node = SceneNode(
                NodeKind.TEXT,
                MeshInstance(geometry, material, label=line),
                name=f"text_line_{index}",
                tags={"text_line"},
                position=(0.0, -index * line_height, 0.0),
            )
            group.add(node)
        logger.debug("Built text group with %d lines", len(lines))
        return group


__all__ = ["TextLayoutBuilder", "TEXT_GROUP_NAME"]
