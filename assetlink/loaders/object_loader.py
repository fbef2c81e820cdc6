# assetlink/loaders/object_loader.py
"""
Scene document deserializer.

Builds an Object3D graph from a JSON scene document:

    {
        "metadata": {...},
        "geometries": [{"uuid", ...}],
        "images":     [{"uuid", "url"}],
        "textures":   [{"uuid", "image", "userData"}],
        "materials":  [{"uuid", "type", "map": <texture uuid>, ...}],
        "object":     {"uuid", "type", "material", "geometry", "children"}
    }

Image URLs are loaded through the image loader it was given and are not
interpreted here. A materials hook, when passed, sees the constructed
materials before any object references them.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

import numpy as np

from assetlink import log
from assetlink.loaders.document import DocumentParseError
from assetlink.loaders.image_loader import ImageLoader, LoadingManager, load_as_future
from assetlink.scene.material import TEXTURE_MAP_SLOTS, Material
from assetlink.scene.object3d import Object3D, create_object
from assetlink.scene.texture import ImageData, Texture

MaterialsHook = Callable[[dict[str, Material]], Optional[dict[str, Material]]]

_MATERIAL_META_KEYS = frozenset(["uuid", "type", "name", "userData"])


class ObjectLoader:
    """Deserializer for scene documents."""

    def __init__(
        self,
        manager: LoadingManager | None = None,
        image_loader=None,
        placeholder_on_error: bool = True,
    ):
        self.manager = manager or LoadingManager()
        self.image_loader = image_loader or ImageLoader(self.manager)
        self.placeholder_on_error = placeholder_on_error

    async def parse_async(
        self,
        document: dict[str, Any],
        materials_hook: MaterialsHook | None = None,
    ) -> Object3D:
        """
        Build the object graph.

        Raises DocumentParseError when the document has no object tree.
        Images that fail to load never fail the whole call.
        """
        root_data = document.get("object")
        if not isinstance(root_data, dict):
            raise DocumentParseError("Scene document has no 'object' tree")

        geometries = self.parse_geometries(document.get("geometries"))
        images = await self.parse_images_async(document.get("images"))
        textures = self.parse_textures(document.get("textures"), images)
        materials = self.parse_materials(document.get("materials"), textures)

        if materials_hook is not None:
            hooked = materials_hook(materials)
            if hooked is not None:
                materials = hooked

        return self.parse_object(root_data, geometries, materials)

    # --- Tables ---

    def parse_geometries(self, data: Any) -> dict[str, dict]:
        geometries: dict[str, dict] = {}
        for item in data or []:
            if isinstance(item, dict) and isinstance(item.get("uuid"), str):
                geometries[item["uuid"]] = item
        return geometries

    async def parse_images_async(self, data: Any) -> dict[str, Any]:
        entries = [
            item for item in data or []
            if isinstance(item, dict) and isinstance(item.get("uuid"), str)
        ]
        loaded = await asyncio.gather(*(self._load_image_entry(item) for item in entries))
        return {item["uuid"]: image for item, image in zip(entries, loaded)}

    async def _load_image_entry(self, item: dict) -> Any:
        url = item.get("url")
        if isinstance(url, list):
            # Cube textures: one url per face
            return list(await asyncio.gather(*(self._load_image(u) for u in url)))
        if not isinstance(url, str) or not url:
            log.warn(f"[ObjectLoader] Image {item['uuid']} has no url")
            return None
        return await self._load_image(url)

    async def _load_image(self, url: str) -> ImageData | None:
        try:
            return await load_as_future(self.image_loader.load, url)
        except Exception as e:
            log.warn(f"[ObjectLoader] Failed to load image {url}: {type(e).__name__}: {e}")
            if self.placeholder_on_error:
                return ImageData.white_1x1(source_url=url, missing=True)
            return None

    def parse_textures(self, data: Any, images: dict[str, Any]) -> dict[str, Texture]:
        textures: dict[str, Texture] = {}
        for item in data or []:
            if not isinstance(item, dict):
                continue
            image_ref = item.get("image")
            image = images.get(image_ref) if isinstance(image_ref, str) else None
            if image is None and image_ref is not None:
                log.warn(f"[ObjectLoader] Undefined image {image_ref!r} for texture {item.get('uuid')}")
            texture = Texture(
                image=image,
                name=item.get("name", ""),
                uuid=item.get("uuid"),
                user_data=item.get("userData"),
            )
            textures[texture.uuid] = texture
        return textures

    def parse_materials(self, data: Any, textures: dict[str, Texture]) -> dict[str, Material]:
        materials: dict[str, Material] = {}
        for item in data or []:
            if not isinstance(item, dict):
                continue
            params = {
                k: v for k, v in item.items()
                if k not in _MATERIAL_META_KEYS and k not in TEXTURE_MAP_SLOTS
            }
            material = Material(
                type=item.get("type", "MeshStandardMaterial"),
                name=item.get("name", ""),
                uuid=item.get("uuid"),
                params=params,
                user_data=item.get("userData"),
            )
            for slot in TEXTURE_MAP_SLOTS:
                ref = item.get(slot)
                if ref is None:
                    continue
                texture = textures.get(ref) if isinstance(ref, str) else None
                if texture is None:
                    log.warn(f"[ObjectLoader] Undefined texture {ref!r} in {slot} of material {material.uuid}")
                    continue
                material.set_map(slot, texture)
            materials[material.uuid] = material
        return materials

    # --- Object tree ---

    def parse_object(
        self,
        data: dict[str, Any],
        geometries: dict[str, dict],
        materials: dict[str, Material],
    ) -> Object3D:
        obj = create_object(
            data.get("type", "Object3D"),
            name=data.get("name", ""),
            uuid=data.get("uuid"),
            user_data=data.get("userData"),
        )

        matrix = data.get("matrix")
        if isinstance(matrix, list) and len(matrix) == 16:
            # Stored column-major
            obj.matrix = np.array(matrix, dtype=np.float64).reshape(4, 4).T

        geometry_ref = data.get("geometry")
        if geometry_ref is not None:
            obj.geometry = geometries.get(geometry_ref)
            if obj.geometry is None:
                log.warn(f"[ObjectLoader] Undefined geometry {geometry_ref!r} on {obj.uuid}")

        material_ref = data.get("material")
        if isinstance(material_ref, list):
            obj.material = [self._material(ref, materials, obj) for ref in material_ref]
        elif material_ref is not None:
            obj.material = self._material(material_ref, materials, obj)

        for child in data.get("children") or []:
            if isinstance(child, dict):
                obj.add(self.parse_object(child, geometries, materials))
        return obj

    def _material(self, ref: Any, materials: dict[str, Material], obj: Object3D) -> Material | None:
        material = materials.get(ref) if isinstance(ref, str) else None
        if material is None:
            log.warn(f"[ObjectLoader] Undefined material {ref!r} on {obj.uuid}")
        return material
