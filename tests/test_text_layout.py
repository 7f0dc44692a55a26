from __future__ import annotations

import numpy as np
import pytest

from heartscene.config import LINE_HEIGHT, TEXT_LINES
from heartscene.core.materials import MatcapMaterial
from heartscene.core.mesh import MeshData
from heartscene.core.scene_graph import NodeKind
from heartscene.world.text_geometry import (
    build_text_geometry,
    coverage_rectangles,
    glyph_coverage,
)
from heartscene.world.text_layout import TEXT_GROUP_NAME, TextLayoutBuilder


def test_rectangles_merge_identical_rows() -> None:
    grid = np.array(
        [
            [1, 1, 0, 1],
            [1, 1, 0, 1],
            [0, 1, 1, 0],
        ],
        dtype=bool,
    )
    rects = sorted(coverage_rectangles(grid))
    assert rects == [(0, 2, 0, 2), (1, 3, 2, 3), (3, 4, 0, 2)]
    covered = np.zeros_like(grid)
    for c0, c1, r0, r1 in rects:
        covered[r0:r1, c0:c1] = True
    assert (covered == grid).all()


def test_empty_grid_has_no_rectangles() -> None:
    assert coverage_rectangles(np.zeros((4, 4), dtype=bool)) == []


def test_coverage_finds_ink(font) -> None:
    grid, step = glyph_coverage("H", font, curve_segments=12)
    assert step >= 1
    assert grid.any()


def test_geometry_height_follows_size(font) -> None:
    mesh = build_text_geometry("H", font, size=0.5, bevel_enabled=False)
    lo, hi = mesh.bounds()
    assert mesh.vertex_count > 0
    assert mesh.vertex_count % 36 == 0
    assert 0 < hi[1] - lo[1] <= 0.5 + 1e-6
    assert hi[2] - lo[2] == pytest.approx(0.2)


def test_bevel_grows_the_volume(font) -> None:
    plain = build_text_geometry("Tevi", font, bevel_enabled=False)
    bevelled = build_text_geometry(
        "Tevi", font, bevel_enabled=True, bevel_thickness=0.03, bevel_size=0.02
    )
    (plo, phi), (blo, bhi) = plain.bounds(), bevelled.bounds()
    assert bhi[2] - blo[2] == pytest.approx(0.2 + 2 * 0.03)
    assert (bhi[0] - blo[0]) == pytest.approx((phi[0] - plo[0]) + 2 * 0.02, abs=1e-5)


@pytest.mark.parametrize("text", ["", "   "])
def test_blank_lines_give_empty_geometry(font, text) -> None:
    assert build_text_geometry(text, font).vertex_count == 0


def test_layout_stacks_lines_downward(font) -> None:
    material = MatcapMaterial()
    group = TextLayoutBuilder().build(TEXT_LINES, font, material, LINE_HEIGHT)
    assert group.kind is NodeKind.GROUP
    assert group.name == TEXT_GROUP_NAME
    lines = group.children
    assert len(lines) == 7
    for i, node in enumerate(lines):
        assert node.kind is NodeKind.TEXT
        assert node.payload.label == TEXT_LINES[i]
        assert node.payload.material is material
        assert tuple(node.position) == pytest.approx((0.0, -1.5 * i, 0.0))


def test_each_line_is_centered(font) -> None:
    group = TextLayoutBuilder().build(["Maman", "Valentindiena"], font, None)
    for node in group.children:
        lo, hi = node.payload.data.bounds()
        assert (lo + hi) / 2 == pytest.approx(np.zeros(3), abs=1e-5)


def test_blank_line_keeps_its_slot(font) -> None:
    group = TextLayoutBuilder().build(["a", "", "b"], font, None, 2.0)
    assert [n.position.y for n in group.children] == [0.0, -2.0, -4.0]
    assert group.children[1].payload.data.vertex_count == 0


def test_custom_geometry_function_gets_options() -> None:
    calls = []

    def fake_geometry(text, font, **options):
        calls.append((text, options))
        return MeshData(vertices=[(0, 0, 0), (2, 0, 0), (0, 2, 0)])

    group = TextLayoutBuilder(fake_geometry, size=1.0).build(["x", "y"], object(), None)
    assert calls == [("x", {"size": 1.0}), ("y", {"size": 1.0})]
    lo, hi = group.children[0].payload.data.bounds()
    assert tuple(lo) == pytest.approx((-1, -1, 0))
