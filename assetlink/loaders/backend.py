# assetlink/loaders/backend.py
"""
Backend detection and URL rewriting.

The backend is decided from explicit runtime capabilities handed to the
loader at construction: is a native bridge available, and over which
scheme is the scene being served. Each scene load evaluates it once.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Union
from urllib.parse import quote, urlparse

from assetlink.loaders.asset_paths import API_PREFIX, relative_asset_path
from assetlink.loaders.backend_mode import BackendMode
from assetlink.loaders.bridge import NativeBridge

if TYPE_CHECKING:
    from assetlink.project.settings import AssetLoaderSettings

HTTP_SCHEMES = frozenset(["http", "https"])

# encodeURIComponent leaves these unescaped besides alphanumerics and "-_."
_URI_COMPONENT_SAFE = "!~*'()"

_PATH_SEPARATORS = re.compile(r"[/\\]")


@dataclass(frozen=True)
class RuntimeCapabilities:
    """
    What the running environment offers.

    native_bridge: host bridge for reading project files, if any
    page_scheme: scheme the scene is served over ("http", "https", "file",
        ...), None when not served at all
    """

    native_bridge: Optional[NativeBridge] = None
    page_scheme: Optional[str] = None

    @property
    def served_over_http(self) -> bool:
        return self.page_scheme in HTTP_SCHEMES

    @classmethod
    def from_settings(
        cls,
        settings: "AssetLoaderSettings | None" = None,
        native_bridge: NativeBridge | None = None,
    ) -> "RuntimeCapabilities":
        """
        Capabilities from loader settings.

        An explicit page_scheme wins; otherwise the scheme of server_url
        is used, so a configured asset server implies HTTP delivery.
        """
        scheme = None
        if settings is not None:
            scheme = settings.page_scheme
            if scheme is None and settings.server_url:
                scheme = urlparse(settings.server_url).scheme.lower() or None
        return cls(native_bridge=native_bridge, page_scheme=scheme)


def detect_backend(capabilities: RuntimeCapabilities, project_root: str | None) -> BackendMode:
    """
    Choose the backend for one scene load.

    - no project root: PASS_THROUGH
    - native bridge present and not served over HTTP(S): NATIVE_IPC
    - otherwise: HTTP_API
    """
    if not project_root:
        return BackendMode.PASS_THROUGH
    if capabilities.native_bridge is not None and not capabilities.served_over_http:
        return BackendMode.NATIVE_IPC
    return BackendMode.HTTP_API


def project_name(project_root: str) -> str:
    """Last component of the project root ("/home/u/My Project" -> "My Project")."""
    parts = [p for p in _PATH_SEPARATORS.split(project_root) if p]
    return parts[-1] if parts else project_root


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def api_asset_url(project_root: str, relative_path: str) -> str:
    """Asset API URL; project name and relative path are encoded independently."""
    name = encode_uri_component(project_name(project_root))
    return f"{API_PREFIX}{name}/assets/{encode_uri_component(relative_path)}"


@dataclass(frozen=True)
class SyncUrl:
    """Load from this URL instead."""

    url: str


@dataclass(frozen=True)
class AsyncFetch:
    """Fetch raw bytes first, then load them through an ephemeral handle."""

    relative_path: str
    fetch: Callable[[], Awaitable[bytes]]


@dataclass(frozen=True)
class Unchanged:
    """Load the URL as it is."""

    url: str


RewriteResult = Union[SyncUrl, AsyncFetch, Unchanged]


def resolve_url(
    canonical_path: str,
    mode: BackendMode,
    project_root: str | None,
    bridge: NativeBridge | None = None,
) -> RewriteResult:
    """Rewrite a canonical asset path for the given backend."""
    if mode is BackendMode.PASS_THROUGH or not project_root:
        return Unchanged(canonical_path)

    relative_path = relative_asset_path(canonical_path)

    if mode is BackendMode.HTTP_API:
        return SyncUrl(api_asset_url(project_root, relative_path))

    if bridge is None:
        raise ValueError("NATIVE_IPC backend requires a native bridge")

    async def fetch() -> bytes:
        return await bridge.read_asset_bytes(project_root, relative_path)

    return AsyncFetch(relative_path=relative_path, fetch=fetch)


@dataclass(frozen=True)
class AssetResolver:
    """Backend decision for one scene load, consulted by the interceptor."""

    mode: BackendMode
    project_root: Optional[str] = None
    bridge: Optional[NativeBridge] = None

    @classmethod
    def detect(cls, capabilities: RuntimeCapabilities, project_root: str | None) -> "AssetResolver":
        mode = detect_backend(capabilities, project_root)
        bridge = capabilities.native_bridge if mode is BackendMode.NATIVE_IPC else None
        return cls(mode=mode, project_root=project_root, bridge=bridge)

    def resolve(self, canonical_path: str) -> RewriteResult:
        return resolve_url(canonical_path, self.mode, self.project_root, self.bridge)

    def resolve_relative(self, relative_path: str) -> RewriteResult:
        return self.resolve("assets/" + relative_path)
