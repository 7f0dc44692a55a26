from __future__ import annotations

import pygame

# Glyphs are rasterized at this pixel size before being scaled into world units
FONT_RASTER_PX = 64


def load_font(path: str, raster_px: int = FONT_RASTER_PX) -> pygame.font.Font:
    """Open a TrueType/OpenType font; an empty path gives pygame's default font."""
    if not pygame.font.get_init():
        pygame.font.init()
    return pygame.font.Font(path or None, raster_px)
