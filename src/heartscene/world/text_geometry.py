"""Extruded 3D text built from a pygame font.

The line is rasterized with the font, the glyph coverage is merged into
axis-aligned rectangles (horizontal runs joined across identical rows), and
every rectangle is extruded into a box. With the bevel enabled each box
grows by ``bevel_size + bevel_offset`` in X/Y and by ``bevel_thickness`` in
front of and behind the extrusion, which matches how a bevelled outline
extends the glyph's bounding volume.
"""

from __future__ import annotations

from typing import List, Tuple

import numpy as np
import pygame

from heartscene.config import (
    TEXT_BEVEL_ENABLED,
    TEXT_BEVEL_OFFSET,
    TEXT_BEVEL_SEGMENTS,
    TEXT_BEVEL_SIZE,
    TEXT_BEVEL_THICKNESS,
    TEXT_CURVE_SEGMENTS,
    TEXT_DEPTH,
    TEXT_SIZE,
)
from heartscene.core.mesh import MeshData

# Unit cube as 12 outward-facing CCW triangles
_CUBE = np.array(
    [
        # +Z
        (0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 0, 1), (1, 1, 1), (0, 1, 1),
        # -Z
        (0, 0, 0), (0, 1, 0), (1, 1, 0), (0, 0, 0), (1, 1, 0), (1, 0, 0),
        # +X
        (1, 0, 0), (1, 1, 0), (1, 1, 1), (1, 0, 0), (1, 1, 1), (1, 0, 1),
        # -X
        (0, 0, 0), (0, 0, 1), (0, 1, 1), (0, 0, 0), (0, 1, 1), (0, 1, 0),
        # +Y
        (0, 1, 0), (0, 1, 1), (1, 1, 1), (0, 1, 0), (1, 1, 1), (1, 1, 0),
        # -Y
        (0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 0), (1, 0, 1), (0, 0, 1),
    ],
    dtype=np.float32,
)
_CUBE_NORMALS = np.repeat(
    np.array(
        [(0, 0, 1), (0, 0, -1), (1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0)],
        dtype=np.float32,
    ),
    6,
    axis=0,
)


def glyph_coverage(
    text: str, font: pygame.font.Font, curve_segments: int
) -> Tuple[np.ndarray, int]:
    """Boolean (rows, cols) coverage grid for ``text`` (row 0 at the top) and
    the number of font pixels each cell spans.

    ``curve_segments`` sets how many cells span the font height (four per
    segment), so higher values keep more of the outline's curvature.
    """
    surf = font.render(text, True, (255, 255, 255))
    alpha = pygame.surfarray.array_alpha(surf).T  # (h, w)
    cells = max(1, int(curve_segments) * 4)
    step = max(1, int(round(font.get_height() / cells)))
    return alpha[::step, ::step] >= 128, step


def coverage_rectangles(grid: np.ndarray) -> List[Tuple[int, int, int, int]]:
    """Merge filled cells into (col0, col1, row0, row1) half-open rectangles."""
    rects: List[Tuple[int, int, int, int]] = []
    active: dict = {}
    rows = grid.shape[0]
    for r in range(rows + 1):
        runs = set()
        if r < rows:
            row = np.concatenate(([False], grid[r], [False])).astype(np.int8)
            edges = np.flatnonzero(np.diff(row))
            runs = {(int(edges[i]), int(edges[i + 1])) for i in range(0, len(edges), 2)}
        for run in list(active):
            if run not in runs:
                start = active.pop(run)
                rects.append((run[0], run[1], start, r))
        for run in runs:
            active.setdefault(run, r)
    return rects


def build_text_geometry(
    text: str,
    font: pygame.font.Font,
    *,
    size: float = TEXT_SIZE,
    depth: float = TEXT_DEPTH,
    curve_segments: int = TEXT_CURVE_SEGMENTS,
    bevel_enabled: bool = TEXT_BEVEL_ENABLED,
    bevel_thickness: float = TEXT_BEVEL_THICKNESS,
    bevel_size: float = TEXT_BEVEL_SIZE,
    bevel_offset: float = TEXT_BEVEL_OFFSET,
    bevel_segments: int = TEXT_BEVEL_SEGMENTS,
) -> MeshData:
    """Extrude ``text`` into a mesh whose glyphs are ``size`` units tall.

    ``bevel_segments`` is accepted for parity with curved-bevel builders; box
    extrusion has a single flat bevel step.
    """
    if not text:
        return MeshData(vertices=np.zeros((0, 3), dtype=np.float32))

    grid, step = glyph_coverage(text, font, curve_segments)
    rects = coverage_rectangles(grid)
    if not rects:
        # Whitespace-only lines have no coverage
        return MeshData(vertices=np.zeros((0, 3), dtype=np.float32))

    cell = step * size / max(1, font.get_height())
    grow = (bevel_size + bevel_offset) if bevel_enabled else 0.0
    thick = bevel_thickness if bevel_enabled else 0.0

    r = np.asarray(rects, dtype=np.float32)
    lo = np.stack(
        [r[:, 0] * cell - grow, -r[:, 3] * cell - grow, np.full(len(r), -thick)], axis=1
    )
    hi = np.stack(
        [r[:, 1] * cell + grow, -r[:, 2] * cell + grow, np.full(len(r), depth + thick)], axis=1
    )
    verts = lo[:, None, :] + _CUBE[None, :, :] * (hi - lo)[:, None, :]
    normals = np.broadcast_to(_CUBE_NORMALS, verts.shape)
    return MeshData(vertices=verts.reshape(-1, 3), normals=normals.reshape(-1, 3))


__all__ = ["build_text_geometry", "glyph_coverage", "coverage_rectangles"]
