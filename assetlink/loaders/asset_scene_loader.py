# assetlink/loaders/asset_scene_loader.py
"""
AssetSceneLoader - scene loading with project asset resolution.

    loader = AssetSceneLoader.for_project("/projects/My Project", registry, bridge)
    scene = await loader.parse_async(document)

Per call:
1. the document is classified (dict, JSON text, editor project wrapper)
2. the backend is chosen from the capabilities given at construction
3. texture/image tables are repaired in the caller's document
4. the image loader is wrapped for the backend (once per loader)
5. the object loader builds the graph, registry materials swapped in
   through its materials hook
6. a final walk over the graph finishes material substitution and copies
   texture asset paths
"""

from __future__ import annotations

import asyncio
import copy
from pathlib import Path
from typing import Any

from assetlink import log
from assetlink.assets.asset_registry import AssetRegistry
from assetlink.loaders.backend import AssetResolver, RuntimeCapabilities
from assetlink.loaders.backend_mode import BackendMode
from assetlink.loaders.bridge import NativeBridge
from assetlink.loaders.document import prune_runtime_nodes, require_document
from assetlink.loaders.ephemeral import EphemeralHandles
from assetlink.loaders.fetch import UrlFetcher
from assetlink.loaders.image_loader import ImageLoader, LoadingManager
from assetlink.loaders.image_repair import RepairReport, repair_image_descriptors
from assetlink.loaders.interceptor import intercept
from assetlink.loaders.material_sync import MaterialAssetSynchronizer
from assetlink.loaders.object_loader import ObjectLoader
from assetlink.project.settings import AssetLoaderSettings, AssetLoaderSettingsManager
from assetlink.scene.object3d import Object3D


class AssetSceneLoader:
    """
    Entry point for loading a scene document of a project.

    project_root: project directory (or bare project name in HTTP
        deployments); None loads paths as they are
    registry: shared asset registry, read only
    capabilities: runtime capabilities deciding the backend
    """

    def __init__(
        self,
        project_root: str | None = None,
        registry: AssetRegistry | None = None,
        capabilities: RuntimeCapabilities | None = None,
        manager: LoadingManager | None = None,
        image_loader=None,
        settings: AssetLoaderSettings | None = None,
        handles: EphemeralHandles | None = None,
    ):
        self.project_root = project_root
        self.registry = registry
        self.settings = settings or AssetLoaderSettings()
        self.capabilities = capabilities or RuntimeCapabilities.from_settings(self.settings)
        self.manager = manager or LoadingManager()
        if image_loader is None:
            fetcher = UrlFetcher(
                base_url=self.settings.server_url,
                base_path=project_root,
                handles=handles,
            )
            image_loader = ImageLoader(self.manager, fetcher)
        self._image_loader = image_loader
        self._handles = handles
        self._mode: BackendMode | None = None
        self.last_report: RepairReport | None = None
        self.last_synchronizer: MaterialAssetSynchronizer | None = None

        self.manager.on_error += self._on_resource_error

    @classmethod
    def for_project(
        cls,
        project_path: str | Path,
        registry: AssetRegistry | None = None,
        native_bridge: NativeBridge | None = None,
        **kwargs: Any,
    ) -> "AssetSceneLoader":
        """Loader configured from the project's asset loader settings."""
        settings_manager = AssetLoaderSettingsManager.instance()
        settings_manager.set_project_path(project_path)
        settings = settings_manager.settings
        capabilities = RuntimeCapabilities.from_settings(settings, native_bridge)
        return cls(
            project_root=str(project_path),
            registry=registry,
            capabilities=capabilities,
            settings=settings,
            **kwargs,
        )

    @property
    def mode(self) -> BackendMode | None:
        """Backend chosen by the most recent load."""
        return self._mode

    @property
    def image_loader(self):
        return self._image_loader

    def _on_resource_error(self, url: str, exc: BaseException) -> None:
        log.warn(f"[AssetSceneLoader] Failed to load resource: {url} ({type(exc).__name__}: {exc})")

    async def parse_async(self, raw: Any) -> Object3D:
        """
        Resolve and deserialize a scene document.

        Raises DocumentParseError for input that is not a scene document;
        individual asset failures only produce diagnostics.
        """
        document = require_document(raw)

        resolver = AssetResolver.detect(self.capabilities, self.project_root)
        self._mode = resolver.mode
        log.debug(f"[AssetSceneLoader] Backend {resolver.mode.name} for project {self.project_root!r}")

        report = repair_image_descriptors(document, resolver.mode)
        self.last_report = report
        if report.added or report.updated:
            log.debug(
                f"[AssetSceneLoader] Image descriptors: {len(report.added)} added, "
                f"{len(report.updated)} updated, {len(report.skipped)} skipped"
            )

        self._image_loader = intercept(self._image_loader, resolver, self._handles)

        build_document = document
        if self.settings.prune_runtime_nodes and isinstance(document.get("object"), dict):
            # The caller's tree keeps its runtime nodes for re-serialization
            build_document = dict(document)
            build_document["object"] = copy.deepcopy(document["object"])
            removed = prune_runtime_nodes(build_document)
            if removed:
                log.info(f"[AssetSceneLoader] Skipped {removed} runtime-only node(s)")

        object_loader = ObjectLoader(
            manager=self.manager,
            image_loader=self._image_loader,
            placeholder_on_error=self.settings.placeholder_on_error,
        )
        synchronizer = MaterialAssetSynchronizer(self.registry, document)
        self.last_synchronizer = synchronizer

        root = await object_loader.parse_async(build_document, synchronizer.resolve_materials)
        await self._image_loader.drain()

        synchronizer.synchronize_tree(root)
        return root

    def parse(self, raw: Any) -> Object3D:
        """Synchronous parse_async() for callers without an event loop."""
        return asyncio.run(self.parse_async(raw))
