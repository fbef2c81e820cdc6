"""Material with texture map slots."""

from __future__ import annotations

from typing import Any, Iterator

from assetlink.core.identifiable import Identifiable
from assetlink.scene.texture import Texture

# Every property name a material may hold a texture under
TEXTURE_MAP_SLOTS: tuple[str, ...] = (
    "map",
    "normalMap",
    "bumpMap",
    "roughnessMap",
    "metalnessMap",
    "aoMap",
    "emissiveMap",
    "displacementMap",
    "alphaMap",
    "envMap",
    "lightMap",
    "clearcoatMap",
    "clearcoatNormalMap",
    "clearcoatRoughnessMap",
    "sheenColorMap",
    "sheenRoughnessMap",
    "specularColorMap",
    "specularIntensityMap",
    "transmissionMap",
    "thicknessMap",
    "iridescenceMap",
    "iridescenceThicknessMap",
)


class Material(Identifiable):
    """
    Deserialized material.

    Texture maps live in `maps` keyed by slot name; plain parameters
    (color, roughness, ...) stay in `params` as they were serialized.
    """

    def __init__(
        self,
        type: str = "MeshStandardMaterial",
        name: str = "",
        uuid: str | None = None,
        params: dict[str, Any] | None = None,
        user_data: dict[str, Any] | None = None,
    ):
        super().__init__(uuid=uuid)
        self.type = type
        self.name = name
        self.params: dict[str, Any] = dict(params or {})
        self.user_data: dict[str, Any] = dict(user_data or {})
        self.maps: dict[str, Texture] = {}
        self.asset_path: str | None = self.user_data.get("assetPath")

    def get_map(self, slot: str) -> Texture | None:
        return self.maps.get(slot)

    def set_map(self, slot: str, texture: Texture | None) -> None:
        if slot not in TEXTURE_MAP_SLOTS:
            raise KeyError(f"Unknown texture slot: {slot}")
        if texture is None:
            self.maps.pop(slot, None)
        else:
            self.maps[slot] = texture

    def textures(self) -> Iterator[tuple[str, Texture]]:
        """Iterate (slot, texture) pairs in slot order."""
        for slot in TEXTURE_MAP_SLOTS:
            texture = self.maps.get(slot)
            if texture is not None:
                yield slot, texture
