"""Asset management for assetlink."""

from assetlink.assets.asset import Asset
from assetlink.assets.asset_registry import AssetRegistry, registry_key
from assetlink.assets.material_asset import MaterialAsset

__all__ = [
    "Asset",
    "AssetRegistry",
    "MaterialAsset",
    "registry_key",
]
