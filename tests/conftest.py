from __future__ import annotations

import os

# Headless: nothing here opens a window or a GL context
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame  # noqa: E402
import pytest  # noqa: E402

from heartscene.core.mesh import MeshData  # noqa: E402


@pytest.fixture(scope="session")
def font():
    pygame.font.init()
    yield pygame.font.Font(None, 64)


@pytest.fixture
def triangle_mesh() -> MeshData:
    return MeshData(vertices=[(0, 0, 0), (1, 0, 0), (0, 1, 0)])


class ScriptedTime:
    """Monotonic time source the test advances by hand."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def step(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def scripted_time() -> ScriptedTime:
    return ScriptedTime()
