"""
Tests for URL fetching and the loading primitives.
"""

import asyncio
import base64
import unittest

import pytest

from assetlink.loaders.ephemeral import EphemeralHandles
from assetlink.loaders.fetch import FetchError, UrlFetcher, decode_data_url
from assetlink.loaders.image_loader import FileLoader, ImageLoader, LoadingManager

from scene_test_utils import png_bytes


def test_decode_data_url_base64():
    payload = base64.b64encode(b"hello").decode("ascii")
    assert decode_data_url(f"data:text/plain;base64,{payload}") == b"hello"


def test_decode_data_url_percent_encoded():
    assert decode_data_url("data:text/plain,a%20b") == b"a b"


def test_decode_data_url_without_comma():
    with pytest.raises(FetchError):
        decode_data_url("data:text/plain")


class UrlFetcherTest(unittest.TestCase):
    def test_blob_from_handles(self):
        handles = EphemeralHandles()
        url = handles.create(b"abc")
        fetcher = UrlFetcher(handles=handles)

        self.assertEqual(fetcher.read(url), b"abc")

        handles.release(url)
        with self.assertRaises(FetchError):
            fetcher.read(url)

    def test_api_url_without_base_url(self):
        with self.assertRaises(FetchError) as info:
            UrlFetcher().read("/api/projects/p/assets/a.png")
        self.assertIn("No server_url configured", str(info.exception))

    def test_relative_file(self):
        import tempfile
        from pathlib import Path

        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "a.bin").write_bytes(b"\x01\x02")
            self.assertEqual(UrlFetcher(base_path=tmp).read("a.bin"), b"\x01\x02")
            with self.assertRaises(FetchError):
                UrlFetcher(base_path=tmp).read("missing.bin")


class EphemeralHandlesTest(unittest.TestCase):
    def test_create_read_release(self):
        handles = EphemeralHandles()
        url = handles.create(b"x")

        self.assertTrue(url.startswith("blob:assetlink/"))
        self.assertIn(url, handles)
        self.assertEqual(handles.read(url), b"x")
        self.assertTrue(handles.release(url))
        self.assertFalse(handles.release(url))
        self.assertEqual(len(handles), 0)
        with self.assertRaises(KeyError):
            handles.read(url)


class ImageLoaderTest(unittest.TestCase):
    def setUp(self):
        self.handles = EphemeralHandles()
        self.manager = LoadingManager()
        self.loader = ImageLoader(self.manager, UrlFetcher(handles=self.handles))

    def test_decodes_png_to_rgba(self):
        url = self.handles.create(png_bytes(3, 5, (10, 20, 30, 255)))
        results, progress = [], []

        self.loader.load(url, results.append, lambda loaded, total: progress.append((loaded, total)))

        image = results[0]
        self.assertEqual((image.width, image.height, image.channels), (3, 5, 4))
        self.assertEqual(tuple(image.pixels[0, 0]), (10, 20, 30, 255))
        self.assertEqual(len(progress), 1)
        self.assertEqual(self.manager.items_loaded, 1)

    def test_failure_goes_to_on_error(self):
        errors, seen = [], []
        self.manager.on_error += lambda url, exc: seen.append(url)

        self.loader.load("blob:assetlink/unknown", lambda image: None, None, errors.append)

        self.assertIsInstance(errors[0], FetchError)
        self.assertEqual(seen, ["blob:assetlink/unknown"])
        self.assertEqual(self.manager.pending, 0)

    def test_raising_subscriber_does_not_block_on_error(self):
        errors = []

        def broken(url, exc):
            raise RuntimeError("subscriber failed")

        self.manager.on_error += broken
        self.loader.load("blob:assetlink/unknown", lambda image: None, None, errors.append)

        self.assertEqual(len(errors), 1)
        self.assertEqual(self.manager.failed_urls, ["blob:assetlink/unknown"])

    def test_load_inside_loop_returns_task(self):
        url = self.handles.create(png_bytes(2, 3))
        results = []

        async def main():
            task = self.loader.load(url, results.append)
            self.assertIsInstance(task, asyncio.Task)
            self.assertEqual(results, [])
            await self.loader.drain()

        asyncio.run(main())

        self.assertEqual(results[0].height, 3)
        self.assertEqual(self.manager.pending, 0)

    def test_failure_without_on_error_raises(self):
        with self.assertRaises(FetchError):
            self.loader.load("blob:assetlink/unknown", lambda image: None)

    def test_load_async(self):
        url = self.handles.create(png_bytes(2, 2))
        image = asyncio.run(self.loader.load_async(url))
        self.assertEqual(image.width, 2)


def test_file_loader_returns_bytes():
    handles = EphemeralHandles()
    url = handles.create(b"raw")
    results = []

    FileLoader(fetcher=UrlFetcher(handles=handles)).load(url, results.append)

    assert results == [b"raw"]
