"""Default decoders used by the asset scheduler, one per asset kind.

All of them run on loader threads and must not touch GL.
"""

from heartscene.core.scheduler import AssetKind
from heartscene.textures.texture_utils import decode_image

from .font_loader import load_font
from .mesh_loader import MeshAsset, load_mesh

DEFAULT_LOADERS = {
    AssetKind.MESH: load_mesh,
    AssetKind.TEXTURE: decode_image,
    AssetKind.FONT: load_font,
}

__all__ = ["DEFAULT_LOADERS", "MeshAsset", "load_font", "load_mesh", "decode_image"]
