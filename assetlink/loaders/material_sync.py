# assetlink/loaders/material_sync.py
"""
Material asset synchronization.

Materials saved into a scene keep a userData.assetPath pointing at the
material file they came from. After deserialization each such material is
swapped for the shared instance the asset registry holds for that file,
so an edit to the asset reaches every object using it. Materials without
a registry entry stay as they were built.
"""

from __future__ import annotations

from typing import Any

from assetlink import log
from assetlink.assets.asset_registry import AssetRegistry
from assetlink.loaders.asset_paths import canonicalize, strip_leading_slash
from assetlink.loaders.image_repair import asset_path_hint
from assetlink.scene.material import Material
from assetlink.scene.object3d import Object3D


class MaterialAssetSynchronizer:
    """
    Substitutes registry materials into a freshly built scene.

    Used twice per load: resolve_materials() as the object loader's
    materials hook, then synchronize_tree() over the finished graph. The
    registry is only read.
    """

    def __init__(self, registry: AssetRegistry | None, document: dict[str, Any] | None = None):
        self._registry = registry
        self._texture_asset_paths: dict[str, str] = {}
        self._resolved: dict[int, Material] = {}
        self.substituted: list[str] = []
        self.missed: list[str] = []

        for texture in (document or {}).get("textures") or []:
            if isinstance(texture, dict) and isinstance(texture.get("uuid"), str):
                hint = asset_path_hint(texture)
                if hint:
                    self._texture_asset_paths[texture["uuid"]] = hint

    def lookup(self, material: Material) -> Material | None:
        """
        Shared instance for material's asset path, or None.

        Tries the path without its leading '/', then its "assets/" form.
        """
        if self._registry is None:
            return None
        asset_path = material.user_data.get("assetPath") or material.asset_path
        if not isinstance(asset_path, str) or not asset_path:
            return None

        key = strip_leading_slash(asset_path)
        entry = self._registry.get_by_canonical_path(key)
        if entry is None:
            canonical = canonicalize(key)
            if canonical != key:
                entry = self._registry.get_by_canonical_path(canonical)
        if entry is None or entry.resource is None:
            log.debug(f"[MaterialSync] No registry material for {key}, keeping local instance")
            self.missed.append(key)
            return None
        return entry.resource

    def resolve(self, material: Material | None) -> Material | None:
        """Registry instance for material, or material itself."""
        if material is None:
            return None
        cached = self._resolved.get(id(material))
        if cached is not None:
            return cached

        shared = self.lookup(material)
        result = material
        if shared is not None and shared is not material:
            log.debug(f"[MaterialSync] {material.uuid} -> shared {shared.uuid} ({material.user_data.get('assetPath')})")
            self.substituted.append(material.uuid)
            result = shared
        self._resolved[id(material)] = result
        self._resolved[id(result)] = result
        return result

    def resolve_materials(self, materials: dict[str, Material]) -> dict[str, Material]:
        """Materials hook: swap registry instances into the material map."""
        for uuid, material in list(materials.items()):
            materials[uuid] = self.resolve(material)
        return materials

    def synchronize_tree(self, root: Object3D) -> None:
        """
        Walk the graph once: substitute material slots, then annotate
        slot textures with the asset path of their descriptor.
        """
        root.traverse(self._synchronize_node)

    def _synchronize_node(self, node: Object3D) -> None:
        if node.material is None:
            return
        if isinstance(node.material, list):
            node.material = [self.resolve(m) for m in node.material]
        else:
            node.material = self.resolve(node.material)
        for material in node.materials():
            self.annotate_textures(material)

    def annotate_textures(self, material: Material) -> None:
        for _slot, texture in material.textures():
            asset_path = self._texture_asset_paths.get(texture.uuid)
            if asset_path:
                texture.asset_path = asset_path
