from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import pygame

from heartscene.textures.texture_utils import TextureHandle


@dataclass
class StandardMaterial:
    """Lit color, optionally modulating a base color texture."""

    color: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    map: Optional[TextureHandle] = None


@dataclass
class MatcapMaterial:
    """Shading looked up from a matcap image by view-space normal.

    The texture may arrive after the material is in use (its load runs in
    parallel with the font load); until then meshes draw untextured.
    """

    matcap: Optional[TextureHandle] = None

    def set_matcap(self, surface: pygame.Surface) -> None:
        self.matcap = TextureHandle(surface)


@dataclass
class BasicMaterial:
    """Unlit texture map with optional alpha-test cutout."""

    map: Optional[TextureHandle] = None
    transparent: bool = False
    alpha_test: float = 0.0
    double_sided: bool = False
