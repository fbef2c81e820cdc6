"""
Ephemeral handles - process-local "blob:" URLs for in-memory bytes.

Loaders take URLs. When the bytes of an asset arrive through the native
bridge, they are parked here under a fresh blob: URL that the loader can
read, and released as soon as the loader is done with them.
"""

from __future__ import annotations

import threading
from typing import Dict, Optional

from assetlink.core.identifiable import generate_uuid

BLOB_SCHEME = "blob:"


class EphemeralHandles:
    """Store of short-lived blob: URLs."""

    _instance: Optional["EphemeralHandles"] = None

    def __init__(self, origin: str = "assetlink"):
        self._origin = origin
        self._blobs: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    @classmethod
    def instance(cls) -> "EphemeralHandles":
        """Get the process-wide store."""
        if cls._instance is None:
            cls._instance = EphemeralHandles()
        return cls._instance

    def create(self, data: bytes) -> str:
        """Park bytes and return their handle URL."""
        url = f"{BLOB_SCHEME}{self._origin}/{generate_uuid().lower()}"
        with self._lock:
            self._blobs[url] = bytes(data)
        return url

    def read(self, url: str) -> bytes:
        """Bytes behind a handle. KeyError for unknown or released handles."""
        with self._lock:
            try:
                return self._blobs[url]
            except KeyError:
                raise KeyError(f"Unknown or released handle: {url}") from None

    def release(self, url: str) -> bool:
        """Forget a handle. Returns False if it was already released."""
        with self._lock:
            return self._blobs.pop(url, None) is not None

    def __contains__(self, url: str) -> bool:
        return url in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)
