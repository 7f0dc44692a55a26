"""World package: the scene composition and its text geometry.

Callers can import public types from `heartscene.world` directly, e.g.:

    from heartscene.world import ValentineScene, TextLayoutBuilder
"""

from .text_geometry import build_text_geometry
from .text_layout import TextLayoutBuilder
from .valentine_scene import ValentineScene

__all__ = [
    "ValentineScene",
    "TextLayoutBuilder",
    "build_text_geometry",
]
