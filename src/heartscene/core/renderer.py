"""Fixed-function renderer for the scene graph.

Everything that needs the GL context lives here. Geometry is uploaded
lazily: the first time a ``MeshData`` is drawn it gets a ``GpuMesh`` (one
STATIC_DRAW VBO) that is reused by every node sharing the same data, so 180
hearts cost a single upload. Textures are uploaded the first time a
``TextureHandle`` is bound.

Materials map onto legacy GL state:

- ``StandardMaterial``: lit color via GL_COLOR_MATERIAL
- ``MatcapMaterial``: unlit, matcap sampled with GL_SPHERE_MAP texgen
- ``BasicMaterial``: unlit texture with alpha test and blending
"""

from __future__ import annotations

import ctypes
import logging
import math
from typing import Dict

import numpy as np
import pygame
from OpenGL.GL import (
    glAlphaFunc,
    glBindBuffer,
    glBindTexture,
    glBlendFunc,
    glBufferData,
    glClear,
    glClearColor,
    glColor3f,
    glColor4f,
    glColorMaterial,
    glDeleteBuffers,
    glDeleteTextures,
    glDepthFunc,
    glDisable,
    glDisableClientState,
    glDrawArrays,
    glEnable,
    glEnableClientState,
    glGenBuffers,
    glGenTextures,
    glLightfv,
    glLightModelfv,
    glLoadMatrixd,
    glMatrixMode,
    glMultMatrixd,
    glNormalPointer,
    glPopMatrix,
    glPushMatrix,
    glTexCoordPointer,
    glTexGeni,
    glTexImage2D,
    glTexParameteri,
    glVertexPointer,
    glViewport,
    GL_ALPHA_TEST,
    GL_AMBIENT_AND_DIFFUSE,
    GL_ARRAY_BUFFER,
    GL_BLEND,
    GL_CLAMP_TO_EDGE,
    GL_COLOR_BUFFER_BIT,
    GL_COLOR_MATERIAL,
    GL_CULL_FACE,
    GL_DEPTH_BUFFER_BIT,
    GL_DEPTH_TEST,
    GL_DIFFUSE,
    GL_FLOAT,
    GL_FRONT_AND_BACK,
    GL_GREATER,
    GL_LEQUAL,
    GL_LIGHT0,
    GL_LIGHT_MODEL_AMBIENT,
    GL_LIGHTING,
    GL_LINEAR,
    GL_MODELVIEW,
    GL_NORMAL_ARRAY,
    GL_NORMALIZE,
    GL_ONE_MINUS_SRC_ALPHA,
    GL_POSITION,
    GL_PROJECTION,
    GL_RGBA,
    GL_S,
    GL_SPECULAR,
    GL_SPHERE_MAP,
    GL_SRC_ALPHA,
    GL_STATIC_DRAW,
    GL_T,
    GL_TEXTURE_2D,
    GL_TEXTURE_COORD_ARRAY,
    GL_TEXTURE_GEN_MODE,
    GL_TEXTURE_GEN_S,
    GL_TEXTURE_GEN_T,
    GL_TEXTURE_MAG_FILTER,
    GL_TEXTURE_MIN_FILTER,
    GL_TEXTURE_WRAP_S,
    GL_TEXTURE_WRAP_T,
    GL_TRIANGLES,
    GL_UNSIGNED_BYTE,
    GL_VERTEX_ARRAY,
)

from heartscene.config import BACKGROUND
from heartscene.core.lights import AmbientLight, DirectionalLight
from heartscene.core.materials import BasicMaterial, MatcapMaterial, StandardMaterial
from heartscene.core.mesh import STRIDE, MeshData, MeshInstance
from heartscene.core.scene_graph import NodeKind, SceneGraph
from heartscene.textures.texture_utils import TextureHandle

logger = logging.getLogger(__name__)


def light_scale(intensity: float) -> float:
    """Map a physically based intensity onto a clamped GL light term."""
    return min(1.0, intensity / math.pi)


def upload_surface(surface: pygame.Surface) -> int:  # pragma: no cover - needs GL
    """Create a GL texture from an RGBA surface and return its id."""
    texture_data = pygame.image.tostring(surface, "RGBA", True)
    width, height = surface.get_size()

    texture_id = glGenTextures(1)
    glBindTexture(GL_TEXTURE_2D, texture_id)
    glTexImage2D(
        GL_TEXTURE_2D,
        0,
        GL_RGBA,
        width,
        height,
        0,
        GL_RGBA,
        GL_UNSIGNED_BYTE,
        texture_data,
    )
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)
    logger.debug("Uploaded texture %s (%dx%d)", texture_id, width, height)
    return texture_id


def bind_texture(handle: TextureHandle) -> None:  # pragma: no cover - needs GL
    if handle.texture_id is None:
        handle.texture_id = upload_surface(handle.surface)
    glBindTexture(GL_TEXTURE_2D, handle.texture_id)


class GpuMesh:
    """One interleaved VBO drawn with the fixed-function client-state arrays."""

    def __init__(self, data: MeshData) -> None:  # pragma: no cover - needs GL
        self.vertex_count = data.vertex_count
        self.textured = data.uvs is not None
        self.vbo = glGenBuffers(1)
        glBindBuffer(GL_ARRAY_BUFFER, self.vbo)
        payload = data.interleaved()
        glBufferData(GL_ARRAY_BUFFER, payload.nbytes, payload, GL_STATIC_DRAW)
        glBindBuffer(GL_ARRAY_BUFFER, 0)

    def draw(self) -> None:  # pragma: no cover - visual
        if self.vertex_count == 0:
            return
        glBindBuffer(GL_ARRAY_BUFFER, self.vbo)
        glEnableClientState(GL_VERTEX_ARRAY)
        glVertexPointer(3, GL_FLOAT, STRIDE, None)
        glEnableClientState(GL_NORMAL_ARRAY)
        glNormalPointer(GL_FLOAT, STRIDE, ctypes.c_void_p(3 * 4))
        if self.textured:
            glEnableClientState(GL_TEXTURE_COORD_ARRAY)
            glTexCoordPointer(2, GL_FLOAT, STRIDE, ctypes.c_void_p(6 * 4))

        glDrawArrays(GL_TRIANGLES, 0, self.vertex_count)

        if self.textured:
            glDisableClientState(GL_TEXTURE_COORD_ARRAY)
        glDisableClientState(GL_NORMAL_ARRAY)
        glDisableClientState(GL_VERTEX_ARRAY)
        glBindBuffer(GL_ARRAY_BUFFER, 0)

    def release(self) -> None:  # pragma: no cover - needs GL
        if self.vbo:
            glDeleteBuffers(1, [self.vbo])
            self.vbo = 0


class SceneRenderer:
    def __init__(self, background=BACKGROUND) -> None:
        self.background = background
        self._meshes: Dict[int, GpuMesh] = {}
        self._textures: Dict[int, TextureHandle] = {}

    def setup(self) -> None:  # pragma: no cover - needs GL
        glEnable(GL_DEPTH_TEST)
        glDepthFunc(GL_LEQUAL)
        glEnable(GL_NORMALIZE)  # hearts use non-uniform scale
        glColorMaterial(GL_FRONT_AND_BACK, GL_AMBIENT_AND_DIFFUSE)
        glClearColor(*self.background)

    def on_resize(self, viewport) -> None:  # pragma: no cover - needs GL
        width, height = viewport.drawable_size
        glViewport(0, 0, width, height)

    # ------------------------------------------------------------------
    def render(self, graph: SceneGraph, camera) -> None:  # pragma: no cover - visual
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        glMatrixMode(GL_PROJECTION)
        glLoadMatrixd(np.ascontiguousarray(camera.projection.T))
        glMatrixMode(GL_MODELVIEW)
        glLoadMatrixd(np.ascontiguousarray(camera.view_matrix().T))

        with graph.locked():
            nodes = [node for node, _ in graph.walk()]
            self._apply_lights(nodes)
            for node in nodes:
                if node.kind in (NodeKind.MESH, NodeKind.TEXT) and isinstance(
                    node.payload, MeshInstance
                ):
                    self._draw_instance(node.payload, node.world_matrix())

    def _apply_lights(self, nodes) -> None:  # pragma: no cover - needs GL
        glLightModelfv(GL_LIGHT_MODEL_AMBIENT, (0.0, 0.0, 0.0, 1.0))
        glDisable(GL_LIGHT0)
        for node in nodes:
            light = node.payload
            if isinstance(light, AmbientLight):
                k = light_scale(light.intensity)
                glLightModelfv(GL_LIGHT_MODEL_AMBIENT, (*(c * k for c in light.color), 1.0))
            elif isinstance(light, DirectionalLight):
                k = light_scale(light.intensity)
                # w=0: directional, set under the view matrix so it stays fixed in world space
                glLightfv(GL_LIGHT0, GL_POSITION, (*light.position, 0.0))
                glLightfv(GL_LIGHT0, GL_DIFFUSE, (*(c * k for c in light.color), 1.0))
                glLightfv(GL_LIGHT0, GL_SPECULAR, (0.0, 0.0, 0.0, 1.0))
                glEnable(GL_LIGHT0)

    def _gpu_mesh(self, data: MeshData) -> GpuMesh:  # pragma: no cover - needs GL
        gpu = self._meshes.get(id(data))
        if gpu is None:
            gpu = GpuMesh(data)
            self._meshes[id(data)] = gpu
            logger.debug("Uploaded mesh with %d vertices", data.vertex_count)
        return gpu

    def _bind_texture(self, handle: TextureHandle) -> None:  # pragma: no cover - needs GL
        bind_texture(handle)
        self._textures[id(handle)] = handle

    def _draw_instance(self, instance: MeshInstance, matrix) -> None:  # pragma: no cover - visual
        gpu = self._gpu_mesh(instance.data)
        glPushMatrix()
        glMultMatrixd(np.ascontiguousarray(matrix.T))
        self._bind_material(instance.material)
        gpu.draw()
        self._unbind_material(instance.material)
        glPopMatrix()

    def _bind_material(self, material) -> None:  # pragma: no cover - needs GL
        if isinstance(material, StandardMaterial):
            glEnable(GL_LIGHTING)
            glEnable(GL_COLOR_MATERIAL)
            glColor3f(*material.color)
            if material.map is not None:
                glEnable(GL_TEXTURE_2D)
                self._bind_texture(material.map)
        elif isinstance(material, MatcapMaterial):
            if material.matcap is None:
                # Matcap still loading: plain lit grey
                glEnable(GL_LIGHTING)
                glEnable(GL_COLOR_MATERIAL)
                glColor3f(0.8, 0.8, 0.8)
                return
            glDisable(GL_LIGHTING)
            glColor3f(1.0, 1.0, 1.0)
            glEnable(GL_TEXTURE_2D)
            self._bind_texture(material.matcap)
            glTexGeni(GL_S, GL_TEXTURE_GEN_MODE, GL_SPHERE_MAP)
            glTexGeni(GL_T, GL_TEXTURE_GEN_MODE, GL_SPHERE_MAP)
            glEnable(GL_TEXTURE_GEN_S)
            glEnable(GL_TEXTURE_GEN_T)
        elif isinstance(material, BasicMaterial):
            glDisable(GL_LIGHTING)
            glColor4f(1.0, 1.0, 1.0, 1.0)
            if material.map is not None:
                glEnable(GL_TEXTURE_2D)
                self._bind_texture(material.map)
            if material.alpha_test > 0:
                glEnable(GL_ALPHA_TEST)
                glAlphaFunc(GL_GREATER, material.alpha_test)
            if material.transparent:
                glEnable(GL_BLEND)
                glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
            if material.double_sided:
                glDisable(GL_CULL_FACE)
            else:
                glEnable(GL_CULL_FACE)

    def _unbind_material(self, material) -> None:  # pragma: no cover - needs GL
        glDisable(GL_TEXTURE_GEN_S)
        glDisable(GL_TEXTURE_GEN_T)
        glDisable(GL_TEXTURE_2D)
        glDisable(GL_ALPHA_TEST)
        glDisable(GL_BLEND)
        glDisable(GL_CULL_FACE)
        glDisable(GL_COLOR_MATERIAL)

    def release(self) -> None:  # pragma: no cover - needs GL
        for gpu in self._meshes.values():
            gpu.release()
        self._meshes.clear()
        for handle in self._textures.values():
            if handle.texture_id is not None:
                glDeleteTextures([handle.texture_id])
                handle.texture_id = None
        self._textures.clear()


__all__ = ["SceneRenderer", "GpuMesh", "bind_texture", "light_scale", "upload_surface"]
