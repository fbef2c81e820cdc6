"""
Native bridge - direct access to project files from the host process.

A NativeBridge is whatever the host application provides for reading the
raw bytes of a project asset. LocalAssetBridge is the filesystem one used
when assetlink runs inside the application that owns the project directory.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol, runtime_checkable


class AssetFetchError(Exception):
    """Raw bytes of an asset could not be obtained through the bridge."""

    def __init__(self, message: str, project_root: str = "", relative_path: str = ""):
        super().__init__(message)
        self.project_root = project_root
        self.relative_path = relative_path


class AssetNotFoundError(AssetFetchError):
    """The asset file does not exist."""


@runtime_checkable
class NativeBridge(Protocol):
    """
    Host-provided asset reader.

    Methods:
        read_asset_bytes: raw bytes of <project_root>/assets/<relative_path>.
            Raises AssetFetchError on failure.
    """

    async def read_asset_bytes(self, project_root: str, relative_path: str) -> bytes:
        ...


class LocalAssetBridge:
    """Reads asset files from the local project directory off the event loop."""

    def __init__(self, assets_dir_name: str = "assets"):
        self._assets_dir_name = assets_dir_name

    def asset_file(self, project_root: str, relative_path: str) -> Path:
        return Path(project_root) / self._assets_dir_name / relative_path

    async def read_asset_bytes(self, project_root: str, relative_path: str) -> bytes:
        path = self.asset_file(project_root, relative_path)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            raise AssetNotFoundError("File not found", project_root, relative_path) from e
        except OSError as e:
            raise AssetFetchError(f"Failed to read file: {e}", project_root, relative_path) from e
