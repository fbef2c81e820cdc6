"""
Asset loader settings - project-level configuration of scene asset loading.

Settings are saved to project_settings/asset_loader.json inside the
project directory.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from assetlink import log


@dataclass
class AssetLoaderSettings:
    """
    Project-level settings for scene asset loading.

    server_url: base URL server-relative asset API URLs are joined onto
    page_scheme: transport scheme the scene is served over ("http",
        "https", "file", ...); None when running as a native application
    prune_runtime_nodes: drop runtime-only nodes (particle emitters, ...)
        before deserializing
    placeholder_on_error: substitute a 1x1 white image for textures whose
        image failed to load
    """

    server_url: Optional[str] = None
    page_scheme: Optional[str] = None
    prune_runtime_nodes: bool = True
    placeholder_on_error: bool = True

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "server_url": self.server_url,
            "page_scheme": self.page_scheme,
            "prune_runtime_nodes": self.prune_runtime_nodes,
            "placeholder_on_error": self.placeholder_on_error,
        }

    @staticmethod
    def from_dict(data: dict) -> "AssetLoaderSettings":
        """Deserialize from dictionary."""
        scheme = data.get("page_scheme")
        if isinstance(scheme, str):
            scheme = scheme.rstrip(":").lower() or None
        else:
            scheme = None

        return AssetLoaderSettings(
            server_url=data.get("server_url") or None,
            page_scheme=scheme,
            prune_runtime_nodes=bool(data.get("prune_runtime_nodes", True)),
            placeholder_on_error=bool(data.get("placeholder_on_error", True)),
        )


class AssetLoaderSettingsManager:
    """
    Singleton manager for asset loader settings.

    Handles loading/saving settings from project directory.
    """

    _instance: Optional["AssetLoaderSettingsManager"] = None
    _settings: AssetLoaderSettings
    _project_path: Optional[Path] = None

    def __init__(self) -> None:
        self._settings = AssetLoaderSettings()

    @classmethod
    def instance(cls) -> "AssetLoaderSettingsManager":
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = AssetLoaderSettingsManager()
        return cls._instance

    @property
    def settings(self) -> AssetLoaderSettings:
        """Get current settings."""
        return self._settings

    @property
    def project_path(self) -> Optional[Path]:
        """Get current project path."""
        return self._project_path

    def set_project_path(self, path: Path | str) -> None:
        """Set project path and load settings."""
        self._project_path = Path(path)
        self._load()

    def _get_settings_path(self) -> Optional[Path]:
        """Get path to settings file."""
        if self._project_path is None:
            return None
        return self._project_path / "project_settings" / "asset_loader.json"

    def _load(self) -> None:
        """Load settings from file."""
        path = self._get_settings_path()
        if path is None or not path.exists():
            self._settings = AssetLoaderSettings()
            return

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._settings = AssetLoaderSettings.from_dict(data)
            log.info(f"[AssetLoaderSettings] Loaded from {path}")
        except (OSError, ValueError) as e:
            log.error(e, f"[AssetLoaderSettings] Failed to load settings from {path}")
            self._settings = AssetLoaderSettings()

    def save(self) -> bool:
        """Save settings to file."""
        path = self._get_settings_path()
        if path is None:
            log.warn("[AssetLoaderSettings] Cannot save: no project path")
            return False

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self._settings.to_dict(), f, indent=2)
            return True
        except OSError as e:
            log.error(e, f"[AssetLoaderSettings] Failed to save settings to {path}")
            return False

    def update(self, **changes) -> AssetLoaderSettings:
        """Replace individual fields, e.g. update(server_url="http://...")."""
        data = self._settings.to_dict()
        for key, value in changes.items():
            if key not in data:
                raise KeyError(f"Unknown asset loader setting: {key}")
            data[key] = value
        self._settings = AssetLoaderSettings.from_dict(data)
        return self._settings
