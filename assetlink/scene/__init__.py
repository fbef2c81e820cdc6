"""In-memory scene graph built by the object loader."""

from assetlink.scene.material import TEXTURE_MAP_SLOTS, Material
from assetlink.scene.object3d import Mesh, Object3D, Scene, create_object
from assetlink.scene.texture import ImageData, Texture

__all__ = [
    "TEXTURE_MAP_SLOTS",
    "ImageData",
    "Material",
    "Mesh",
    "Object3D",
    "Scene",
    "Texture",
    "create_object",
]
