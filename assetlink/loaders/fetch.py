"""Byte fetching for every URL shape a scene document can carry."""

from __future__ import annotations

import base64
import urllib.error
import urllib.request
from pathlib import Path
from urllib.parse import unquote_to_bytes, urljoin

from assetlink.loaders.asset_paths import is_api_url
from assetlink.loaders.ephemeral import EphemeralHandles


class FetchError(Exception):
    """A URL could not be read."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{message}: {url}")
        self.url = url


def decode_data_url(url: str) -> bytes:
    """Payload of a data: URL (base64 or percent-encoded)."""
    header, sep, payload = url.partition(",")
    if not sep:
        raise FetchError(url[:64], "Malformed data URL")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=False)
        except ValueError as e:
            raise FetchError(url[:64], f"Invalid base64 payload ({e})") from e
    return unquote_to_bytes(payload)


class UrlFetcher:
    """
    Reads bytes for a URL.

    - data:       decoded in place
    - blob:       looked up in the ephemeral handle store
    - http(s)://  fetched with urllib
    - /server/... joined onto base_url and fetched with urllib
    - /api/projects/... without base_url: FetchError
    - other       treated as a file path relative to base_path
    """

    TIMEOUT = 30

    def __init__(
        self,
        base_url: str | None = None,
        base_path: str | Path | None = None,
        handles: EphemeralHandles | None = None,
    ):
        self.base_url = base_url
        self.base_path = Path(base_path) if base_path else None
        self._handles = handles

    @property
    def handles(self) -> EphemeralHandles:
        if self._handles is None:
            return EphemeralHandles.instance()
        return self._handles

    def read(self, url: str) -> bytes:
        if url.startswith("data:"):
            return decode_data_url(url)

        if url.startswith("blob:"):
            try:
                return self.handles.read(url)
            except KeyError as e:
                raise FetchError(url, "Ephemeral handle not available") from e

        if url.startswith(("http://", "https://")):
            return self._read_http(url)

        if url.startswith("/") and self.base_url:
            return self._read_http(urljoin(self.base_url, url))

        if is_api_url(url):
            raise FetchError(url, "No server_url configured for server-relative URL")

        return self._read_file(url)

    def _read_http(self, url: str) -> bytes:
        request = urllib.request.Request(url)
        try:
            with urllib.request.urlopen(request, timeout=self.TIMEOUT) as response:
                return response.read()
        except urllib.error.HTTPError as e:
            raise FetchError(url, f"HTTP {e.code}") from e
        except urllib.error.URLError as e:
            raise FetchError(url, f"Connection failed ({e.reason})") from e

    def _read_file(self, url: str) -> bytes:
        path = Path(url)
        if self.base_path is not None and not path.is_absolute():
            path = self.base_path / path
        try:
            return path.read_bytes()
        except OSError as e:
            raise FetchError(url, f"Cannot read file ({e.strerror or e})") from e
