"""Shared helpers for the loader tests."""

import io
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import numpy as np
from PIL import Image

from assetlink.loaders.bridge import AssetNotFoundError
from assetlink.scene.texture import ImageData


def png_bytes(width: int = 2, height: int = 2, color=(255, 0, 0, 255)) -> bytes:
    """Solid-color PNG."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    buffer = io.BytesIO()
    Image.fromarray(pixels, "RGBA").save(buffer, format="PNG")
    return buffer.getvalue()


class RecordingLoader:
    """Loading primitive that records URLs and answers with a 1x1 image."""

    def __init__(self, fail_urls=()):
        self.calls = []
        self.fail_urls = set(fail_urls)
        self.manager = None

    def load(self, url, on_load, on_progress=None, on_error=None):
        self.calls.append(url)
        if url in self.fail_urls:
            error = IOError(f"cannot load {url}")
            if on_error is None:
                raise error
            on_error(error)
            return
        on_load(ImageData.white_1x1(source_url=url))


class FakeBridge:
    """In-memory native bridge keyed by relative path."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.requests = []

    async def read_asset_bytes(self, project_root, relative_path):
        self.requests.append((project_root, relative_path))
        if relative_path not in self.files:
            raise AssetNotFoundError("File not found", project_root, relative_path)
        return self.files[relative_path]


def scene_document(textures=None, images=None, materials=None, children=None):
    """Minimal scene document with a root Scene node."""
    return {
        "metadata": {"version": 4.6, "type": "Object", "generator": "Object3D.toJSON"},
        "geometries": [{"uuid": "GEO-1", "type": "BoxGeometry"}],
        "textures": textures if textures is not None else [],
        "images": images if images is not None else [],
        "materials": materials if materials is not None else [],
        "object": {
            "uuid": "SCENE-1",
            "type": "Scene",
            "name": "Scene",
            "children": children if children is not None else [],
        },
    }


class DelayedAssetServer:
    """Local HTTP server answering every GET with the same PNG after a delay."""

    def __init__(self, delay: float = 0.4, body: bytes | None = None):
        self.delay = delay
        self.body = body if body is not None else png_bytes()
        self.paths = []
        owner = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self):
                owner.paths.append(self.path)
                time.sleep(owner.delay)
                self.send_response(200)
                self.send_header("Content-Type", "image/png")
                self.send_header("Content-Length", str(len(owner.body)))
                self.end_headers()
                self.wfile.write(owner.body)

            def log_message(self, format, *args):
                pass

        self._httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def __enter__(self):
        self._thread.start()
        return self

    def __exit__(self, *exc_info):
        self._httpd.shutdown()
        self._httpd.server_close()
