# assetlink/loaders/asset_paths.py
"""
Asset path canonicalization.

Every reference to a project asset is reduced to "assets/<relative-path>",
the key shared by all backends. Embedded data, remote URLs and ephemeral
handles are not project paths and are left as they are.
"""

from __future__ import annotations

import re

from assetlink.loaders.backend_mode import BackendMode

ASSETS_PREFIX = "assets/"
API_PREFIX = "/api/projects/"

# Extensions a bare relative name must carry to be taken for an asset path
IMAGE_EXTENSIONS = frozenset(
    ["jpg", "jpeg", "png", "gif", "webp", "hdr", "exr", "tga", "ktx2"]
)

_REPEATED_SLASHES = re.compile(r"/+")


def is_data_url(url: str) -> bool:
    return url.startswith("data:")


def is_blob_url(url: str) -> bool:
    return url.startswith("blob:")


def is_remote_url(url: str) -> bool:
    return url.startswith("http")


def is_api_url(url: str) -> bool:
    return url.startswith(API_PREFIX)


def is_canonical(url) -> bool:
    """True for strings already in "assets/<relative-path>" form."""
    return isinstance(url, str) and url.startswith(ASSETS_PREFIX)


def strip_leading_slash(path: str) -> str:
    return path[1:] if path.startswith("/") else path


def strip_assets_prefix(path: str) -> str:
    """Remove every leading "assets/" repeat."""
    while path.startswith(ASSETS_PREFIX):
        path = path[len(ASSETS_PREFIX):]
    return path


def relative_asset_path(canonical_path: str) -> str:
    """Path relative to the project's assets directory."""
    return strip_assets_prefix(canonical_path)


def canonicalize(
    raw_path: str | None,
    asset_path_hint: str | None = None,
    mode: BackendMode | None = None,
) -> str | None:
    """
    Map any asset path shape to "assets/<relative-path>".

    - None -> None
    - data: and http... URLs are returned unchanged
    - blob: handles are returned unchanged, except in HTTP_API mode with a
      hint, where the canonical hint replaces them (a handle from another
      process must never end up in the document)
    - anything else: repeated '/' collapsed, leading '/' and every leading
      "assets/" stripped, exactly one "assets/" prefixed

    canonicalize(canonicalize(p)) == canonicalize(p).
    """
    if raw_path is None:
        return None

    if is_data_url(raw_path) or is_remote_url(raw_path):
        return raw_path

    if is_blob_url(raw_path):
        if asset_path_hint and mode is BackendMode.HTTP_API and not is_blob_url(asset_path_hint):
            return canonicalize(asset_path_hint)
        return raw_path

    path = _REPEATED_SLASHES.sub("/", raw_path)
    path = strip_leading_slash(path)
    path = strip_assets_prefix(path)
    return ASSETS_PREFIX + path


def extract_asset_path(url) -> str | None:
    """
    Relative asset path carried by a loader URL, or None.

    Recognized shapes:
    - "assets/<p>"
    - "<anything>/assets/<p>" (not a remote URL)
    - a bare relative file name with an image extension
    """
    if not url or not isinstance(url, str):
        return None

    asset_path = None
    if url.startswith(ASSETS_PREFIX):
        asset_path = url[len(ASSETS_PREFIX):]
    elif "/assets/" in url and not is_remote_url(url) and "://" not in url:
        asset_path = url[url.index("/assets/") + len("/assets/"):]
    elif not is_remote_url(url) and not url.startswith("/") and "://" not in url and ":" not in url.split("/")[0]:
        ext = url.rsplit(".", 1)[-1].lower() if "." in url else ""
        if ext in IMAGE_EXTENSIONS:
            asset_path = url

    if asset_path:
        return strip_assets_prefix(asset_path) or None
    return None
