"""
AssetRegistry - registry of shared assets keyed by canonical path.

Owned by the asset-editing side of the application. Scene loading only
queries it through get_by_canonical_path().
"""

from __future__ import annotations

import re
from typing import Dict, Generic, Iterator, TypeVar

from assetlink.assets.asset import Asset

AssetT = TypeVar("AssetT", bound=Asset)

_REPEATED_SLASHES = re.compile(r"/+")


def registry_key(path: str) -> str:
    """Normalize a path into a registry key: no leading '/', no '//' runs."""
    return _REPEATED_SLASHES.sub("/", path).lstrip("/")


class AssetRegistry(Generic[AssetT]):
    """
    Registry of assets keyed by canonical path.

    Handles common operations:
    - register(path, asset)
    - get_by_canonical_path(path) -> AssetT
    - get(path) -> resource instance of the asset
    - get_by_uuid(uuid) -> AssetT
    - find_path(resource)
    - unregister(path)
    """

    def __init__(self):
        self._assets: Dict[str, AssetT] = {}
        self._assets_by_uuid: Dict[str, AssetT] = {}

    @property
    def assets(self) -> Dict[str, AssetT]:
        """Direct access to assets dict."""
        return self._assets

    def register(self, path: str, asset: AssetT) -> None:
        """
        Register asset under path.

        A previous asset at the same path is replaced.
        """
        key = registry_key(path)
        previous = self._assets.get(key)
        if previous is not None:
            self._assets_by_uuid.pop(previous.uuid, None)
        if asset.source_path is None:
            asset.source_path = key
        self._assets[key] = asset
        self._assets_by_uuid[asset.uuid] = asset

    def unregister(self, path: str) -> AssetT | None:
        asset = self._assets.pop(registry_key(path), None)
        if asset is not None:
            self._assets_by_uuid.pop(asset.uuid, None)
        return asset

    def get_by_canonical_path(self, path: str) -> AssetT | None:
        """Registry entry for path, or None."""
        if not path:
            return None
        return self._assets.get(registry_key(path))

    def get(self, path: str):
        """Resource instance registered under path, or None."""
        asset = self.get_by_canonical_path(path)
        if asset is None:
            return None
        return asset.resource

    def get_by_uuid(self, uuid: str) -> AssetT | None:
        return self._assets_by_uuid.get(uuid)

    def find_path(self, resource) -> str | None:
        """Path of the asset that holds this exact resource instance."""
        for path, asset in self._assets.items():
            if asset.resource is resource:
                return path
        return None

    def list_paths(self) -> list[str]:
        return sorted(self._assets.keys())

    def clear(self) -> None:
        self._assets.clear()
        self._assets_by_uuid.clear()

    def __contains__(self, path: str) -> bool:
        return registry_key(path) in self._assets

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[AssetT]:
        return iter(self._assets.values())
