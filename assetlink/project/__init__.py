"""
Project-level configuration and settings.
"""

from assetlink.project.settings import (
    AssetLoaderSettings,
    AssetLoaderSettingsManager,
)

__all__ = [
    "AssetLoaderSettings",
    "AssetLoaderSettingsManager",
]
