"""Static scene lights. The animation loop never touches these."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from heartscene.config import (
    AMBIENT_COLOR,
    AMBIENT_INTENSITY,
    DIRECTIONAL_COLOR,
    DIRECTIONAL_INTENSITY,
    DIRECTIONAL_POSITION,
    SHADOW_CAMERA_EXTENT,
    SHADOW_CAMERA_FAR,
    SHADOW_MAP_SIZE,
)


@dataclass(frozen=True)
class ShadowParams:
    map_size: Tuple[int, int] = (SHADOW_MAP_SIZE, SHADOW_MAP_SIZE)
    near: float = 0.5
    far: float = SHADOW_CAMERA_FAR
    left: float = -SHADOW_CAMERA_EXTENT
    right: float = SHADOW_CAMERA_EXTENT
    top: float = SHADOW_CAMERA_EXTENT
    bottom: float = -SHADOW_CAMERA_EXTENT


@dataclass(frozen=True)
class AmbientLight:
    color: Tuple[float, float, float] = AMBIENT_COLOR
    intensity: float = AMBIENT_INTENSITY


@dataclass(frozen=True)
class DirectionalLight:
    color: Tuple[float, float, float] = DIRECTIONAL_COLOR
    intensity: float = DIRECTIONAL_INTENSITY
    position: Tuple[float, float, float] = DIRECTIONAL_POSITION
    cast_shadow: bool = True
    # Carried for renderers with shadow-map support; fixed-function GL ignores it
    shadow: ShadowParams = field(default_factory=ShadowParams)
