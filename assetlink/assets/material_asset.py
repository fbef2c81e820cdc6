"""MaterialAsset - Asset holding the shared Material for a material file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from assetlink.assets.asset import Asset
from assetlink.scene.material import Material


class MaterialAsset(Asset[Material]):
    """
    Asset for a material file (e.g. materials/metal.json).

    Every scene object that references the file through
    userData.assetPath ends up sharing `material`, so an edit made through
    the asset shows up on all of them.
    """

    def __init__(
        self,
        material: Material | None = None,
        name: str = "material",
        source_path: Path | str | None = None,
        uuid: str | None = None,
    ):
        super().__init__(data=material, name=name, source_path=source_path, uuid=uuid)

    @property
    def material(self) -> Material | None:
        return self.resource

    @material.setter
    def material(self, value: Material | None) -> None:
        self.set_resource(value)

    @classmethod
    def from_dict(cls, data: dict[str, Any], asset_path: str) -> "MaterialAsset":
        """
        Build an asset from a serialized material.

        Texture slots are not resolved here; the material keeps only its
        parameters. Slot textures are attached by whoever owns the images.
        """
        user_data = dict(data.get("userData") or {})
        user_data.setdefault("assetPath", asset_path)
        params = {
            k: v for k, v in data.items()
            if k not in ("uuid", "type", "name", "userData")
        }
        material = Material(
            type=data.get("type", "MeshStandardMaterial"),
            name=data.get("name", ""),
            uuid=data.get("uuid"),
            params=params,
            user_data=user_data,
        )
        name = data.get("name") or Path(asset_path).stem
        return cls(material=material, name=name, source_path=asset_path, uuid=material.uuid)

    @classmethod
    def from_file(cls, path: str | Path, asset_path: str) -> "MaterialAsset":
        """Load a JSON material file registered under asset_path."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data, asset_path)
