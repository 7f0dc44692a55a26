"""Texture decoding.

Decoding only touches pygame surfaces and can run on a loader thread. The
GL texture is created by the renderer the first time a ``TextureHandle`` is
bound, since that needs the context.
"""

from __future__ import annotations

from typing import Optional

import pygame


def decode_image(filename: str) -> pygame.Surface:
    """Load an image file into an RGBA surface.

    Raises whatever pygame raises for a missing or unreadable file; the
    scheduler turns that into a ``LoadFailure``. No ``convert_alpha()``
    here: that needs a display and this runs off the main thread.
    """
    surface = pygame.image.load(filename)
    if surface.get_bitsize() != 32 or not surface.get_flags() & pygame.SRCALPHA:
        rgba = pygame.Surface(surface.get_size(), pygame.SRCALPHA, 32)
        rgba.blit(surface, (0, 0))
        surface = rgba
    return surface


class TextureHandle:
    """Decoded image plus the GL texture id once the renderer has uploaded it."""

    def __init__(self, surface: pygame.Surface) -> None:
        self.surface = surface
        self.size = surface.get_size()
        self.texture_id: Optional[int] = None

    @property
    def uploaded(self) -> bool:
        return self.texture_id is not None


__all__ = ["decode_image", "TextureHandle"]
