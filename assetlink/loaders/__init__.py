"""Scene loading with project asset resolution."""

from assetlink.loaders.asset_paths import canonicalize, extract_asset_path, relative_asset_path
from assetlink.loaders.asset_scene_loader import AssetSceneLoader
from assetlink.loaders.backend import (
    AssetResolver,
    AsyncFetch,
    RuntimeCapabilities,
    SyncUrl,
    Unchanged,
    api_asset_url,
    detect_backend,
    resolve_url,
)
from assetlink.loaders.backend_mode import BackendMode
from assetlink.loaders.bridge import AssetFetchError, AssetNotFoundError, LocalAssetBridge, NativeBridge
from assetlink.loaders.document import (
    DocumentParseError,
    Malformed,
    Ok,
    Unsupported,
    parse_document,
    prune_runtime_nodes,
)
from assetlink.loaders.ephemeral import EphemeralHandles
from assetlink.loaders.fetch import FetchError, UrlFetcher
from assetlink.loaders.image_loader import FileLoader, ImageLoader, LoadingManager
from assetlink.loaders.image_repair import RepairReport, repair_image_descriptors
from assetlink.loaders.interceptor import InterceptingLoader, intercept
from assetlink.loaders.material_sync import MaterialAssetSynchronizer
from assetlink.loaders.object_loader import ObjectLoader

__all__ = [
    "AssetFetchError",
    "AssetNotFoundError",
    "AssetResolver",
    "AssetSceneLoader",
    "AsyncFetch",
    "BackendMode",
    "DocumentParseError",
    "EphemeralHandles",
    "FetchError",
    "FileLoader",
    "ImageLoader",
    "InterceptingLoader",
    "LoadingManager",
    "LocalAssetBridge",
    "Malformed",
    "MaterialAssetSynchronizer",
    "NativeBridge",
    "ObjectLoader",
    "Ok",
    "RepairReport",
    "RuntimeCapabilities",
    "SyncUrl",
    "Unchanged",
    "Unsupported",
    "UrlFetcher",
    "api_asset_url",
    "canonicalize",
    "detect_backend",
    "extract_asset_path",
    "intercept",
    "parse_document",
    "prune_runtime_nodes",
    "relative_asset_path",
    "repair_image_descriptors",
    "resolve_url",
]
