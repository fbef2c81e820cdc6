"""
Tests for the intercepting loader.
"""

import asyncio
import unittest

from assetlink.loaders.backend import AssetResolver
from assetlink.loaders.backend_mode import BackendMode
from assetlink.loaders.bridge import AssetNotFoundError
from assetlink.loaders.ephemeral import EphemeralHandles
from assetlink.loaders.fetch import UrlFetcher
from assetlink.loaders.image_loader import ImageLoader, LoadingManager
from assetlink.loaders.interceptor import InterceptingLoader, intercept

from scene_test_utils import FakeBridge, RecordingLoader, png_bytes


def http_resolver(root="/home/user/My Project"):
    return AssetResolver(BackendMode.HTTP_API, root)


def native_resolver(bridge, root="/project"):
    return AssetResolver(BackendMode.NATIVE_IPC, root, bridge)


def make_image_loader():
    handles = EphemeralHandles()
    manager = LoadingManager()
    return ImageLoader(manager, UrlFetcher(handles=handles)), handles, manager


class InstallTest(unittest.TestCase):
    def test_intercept_twice_reaches_original_once(self):
        inner = RecordingLoader()
        first = intercept(inner, http_resolver("/p"))
        second = intercept(first, http_resolver("/p"))

        self.assertIs(first, second)
        second.load("assets/a.png", lambda image: None)

        self.assertEqual(inner.calls, ["/api/projects/p/assets/a.png"])

    def test_intercept_again_switches_resolver(self):
        inner = RecordingLoader()
        wrapper = intercept(inner, http_resolver("/one"))
        intercept(wrapper, AssetResolver(BackendMode.PASS_THROUGH))

        wrapper.load("assets/a.png", lambda image: None)

        self.assertEqual(inner.calls, ["assets/a.png"])

    def test_attributes_forwarded_to_inner(self):
        inner, _, manager = make_image_loader()
        wrapper = intercept(inner, http_resolver())
        self.assertIs(wrapper.manager, manager)
        self.assertIs(wrapper.inner, inner)

    def test_handles_taken_from_inner_fetcher(self):
        inner, handles, _ = make_image_loader()
        wrapper = InterceptingLoader(inner, http_resolver())
        self.assertIs(wrapper.handles, handles)


class HttpRewriteTest(unittest.TestCase):
    def setUp(self):
        self.inner = RecordingLoader()
        self.wrapper = intercept(self.inner, http_resolver())

    def test_canonical_path_goes_to_api(self):
        self.wrapper.load("assets/textures/wood.png", lambda image: None)
        self.assertEqual(self.inner.calls, ["/api/projects/My%20Project/assets/textures%2Fwood.png"])

    def test_nested_assets_segment(self):
        self.wrapper.load("projects/demo/assets/textures/wood.png", lambda image: None)
        self.assertEqual(self.inner.calls, ["/api/projects/My%20Project/assets/textures%2Fwood.png"])

    def test_bare_image_name(self):
        self.wrapper.load("wood.png", lambda image: None)
        self.assertEqual(self.inner.calls, ["/api/projects/My%20Project/assets/wood.png"])

    def test_other_urls_unchanged(self):
        urls = [
            "data:image/png;base64,iVBORw0KGgo=",
            "https://cdn.example.com/a.png",
            "/api/projects/Other/assets/a.png",
            "blob:http://localhost/abc",
            "model.json",
        ]
        for url in urls:
            self.wrapper.load(url, lambda image: None)
        self.assertEqual(self.inner.calls, urls)


class NativeTest(unittest.TestCase):
    def test_success_loads_through_handle_and_releases_it(self):
        inner, handles, manager = make_image_loader()
        bridge = FakeBridge({"textures/wood.png": png_bytes(3, 2)})
        wrapper = intercept(inner, native_resolver(bridge))
        results = []

        wrapper.load("assets/textures/wood.png", results.append)

        self.assertEqual(bridge.requests, [("/project", "textures/wood.png")])
        self.assertEqual(len(results), 1)
        self.assertEqual((results[0].width, results[0].height), (3, 2))
        self.assertTrue(results[0].source_url.startswith("blob:"))
        self.assertEqual(len(handles), 0)
        self.assertEqual(manager.pending, 0)

    def test_failed_fetch_reports_error_and_skips_inner(self):
        inner = RecordingLoader()
        wrapper = intercept(inner, native_resolver(FakeBridge()), EphemeralHandles())
        loaded, errors = [], []

        wrapper.load("assets/missing.png", loaded.append, None, errors.append)

        self.assertEqual(inner.calls, [])
        self.assertEqual(loaded, [])
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], AssetNotFoundError)

    def test_failed_fetch_reaches_loading_manager(self):
        inner, _, manager = make_image_loader()
        wrapper = intercept(inner, native_resolver(FakeBridge()))
        failures = []
        manager.on_error += lambda url, exc: failures.append(url)

        wrapper.load("assets/missing.png", lambda image: None, None, lambda exc: None)

        self.assertEqual(failures, ["assets/missing.png"])
        self.assertEqual(manager.pending, 0)

    def test_raising_manager_subscriber_still_reaches_on_error(self):
        inner, _, manager = make_image_loader()
        wrapper = intercept(inner, native_resolver(FakeBridge()))
        errors = []

        def broken(url, exc):
            raise RuntimeError("subscriber failed")

        manager.on_error += broken
        wrapper.load("assets/missing.png", lambda image: None, None, errors.append)

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], AssetNotFoundError)
        self.assertEqual(manager.failed_urls, ["assets/missing.png"])

    def test_undecodable_bytes_release_handle(self):
        inner, handles, _ = make_image_loader()
        bridge = FakeBridge({"broken.png": b"not an image"})
        wrapper = intercept(inner, native_resolver(bridge))
        errors = []

        wrapper.load("assets/broken.png", lambda image: None, None, errors.append)

        self.assertEqual(len(errors), 1)
        self.assertEqual(len(handles), 0)

    def test_non_canonical_and_blob_urls_unchanged(self):
        inner = RecordingLoader()
        bridge = FakeBridge()
        wrapper = intercept(inner, native_resolver(bridge), EphemeralHandles())

        wrapper.load("textures/wood.png", lambda image: None)
        wrapper.load("blob:assetlink/1234", lambda image: None)

        self.assertEqual(inner.calls, ["textures/wood.png", "blob:assetlink/1234"])
        self.assertEqual(bridge.requests, [])

    def test_load_async_inside_running_loop(self):
        inner, handles, _ = make_image_loader()
        bridge = FakeBridge({"a.png": png_bytes(1, 4)})
        wrapper = intercept(inner, native_resolver(bridge))

        async def main():
            image = await wrapper.load_async("assets/a.png")
            await wrapper.drain()
            return image

        image = asyncio.run(main())

        self.assertEqual(image.height, 4)
        self.assertEqual(wrapper.pending, 0)
        self.assertEqual(len(handles), 0)


def test_pass_through_delegates_unchanged():
    inner = RecordingLoader()
    bridge = FakeBridge({"tex.png": png_bytes()})
    wrapper = intercept(inner, AssetResolver(BackendMode.PASS_THROUGH), EphemeralHandles())

    wrapper.load("assets/tex.png", lambda image: None)

    assert inner.calls == ["assets/tex.png"]
    assert bridge.requests == []
