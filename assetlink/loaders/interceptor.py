# assetlink/loaders/interceptor.py
"""
Loader interception.

InterceptingLoader wraps a loading primitive (anything with
load(url, on_load, on_progress, on_error)) and redirects project asset
URLs through the active backend. Other URLs reach the wrapped loader
untouched, so code holding the wrapper cannot tell it apart from the
primitive it wraps.

The wrapper is handed to the object loader explicitly; no loader class is
patched. intercept() never stacks a second wrapper on a loader that
already is one.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from assetlink import log
from assetlink.loaders.asset_paths import (
    extract_asset_path,
    is_api_url,
    is_blob_url,
    is_canonical,
    is_data_url,
    is_remote_url,
)
from assetlink.loaders.backend import AssetResolver, AsyncFetch, RewriteResult, SyncUrl, Unchanged
from assetlink.loaders.backend_mode import BackendMode
from assetlink.loaders.ephemeral import EphemeralHandles
from assetlink.loaders.image_loader import OnError, OnLoad, OnProgress, load_as_future


class InterceptingLoader:
    """
    Loading primitive wrapper that resolves project assets through a backend.

    - NATIVE_IPC: "assets/..." URLs are fetched as bytes through the bridge,
      parked in an ephemeral handle and loaded from it. A failed fetch goes
      to on_error and the wrapped loader is not called.
    - HTTP_API: asset URLs are rewritten to the project asset API.
    - PASS_THROUGH: everything is delegated unchanged.
    """

    def __init__(
        self,
        inner: Any,
        resolver: AssetResolver,
        handles: EphemeralHandles | None = None,
    ):
        self._inner = inner
        self.resolver = resolver
        if handles is None:
            fetcher = getattr(inner, "fetcher", None)
            handles = getattr(fetcher, "handles", None)
            if handles is None:
                handles = EphemeralHandles.instance()
        self._handles = handles
        self._pending: set[asyncio.Task] = set()

    @property
    def inner(self) -> Any:
        """The wrapped primitive."""
        return self._inner

    @property
    def handles(self) -> EphemeralHandles:
        return self._handles

    @property
    def pending(self) -> int:
        """Native fetches still in flight."""
        return len(self._pending)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._inner, name)

    def __repr__(self) -> str:
        return f"<InterceptingLoader {self.resolver.mode.name} {self._inner!r}>"

    # --- URL classification ---

    def rewrite(self, url: Any) -> RewriteResult:
        """How url should be loaded under the current resolver."""
        mode = self.resolver.mode
        if not isinstance(url, str) or not url or mode is BackendMode.PASS_THROUGH:
            return Unchanged(url)
        if is_data_url(url) or is_api_url(url) or is_remote_url(url):
            return Unchanged(url)

        if mode is BackendMode.NATIVE_IPC:
            # Handles are readable in this process as they are
            if is_blob_url(url) or not is_canonical(url):
                return Unchanged(url)
            return self.resolver.resolve(url)

        # HTTP_API: a blob: left in the document belongs to another process,
        # only an asset path recovered from the URL can be served
        relative_path = extract_asset_path(url)
        if relative_path is None:
            if is_blob_url(url):
                log.debug(f"[AssetLoader] Unresolvable ephemeral url in HTTP mode: {url}")
            return Unchanged(url)
        return self.resolver.resolve_relative(relative_path)

    # --- Loading ---

    def load(
        self,
        url: str,
        on_load: OnLoad,
        on_progress: OnProgress = None,
        on_error: OnError = None,
    ) -> None:
        """Same contract as the wrapped loader's load()."""
        rewrite = self.rewrite(url)

        if isinstance(rewrite, SyncUrl):
            log.debug(f"[AssetLoader] {url} -> {rewrite.url}")
            return self._inner.load(rewrite.url, on_load, on_progress, on_error)

        if isinstance(rewrite, AsyncFetch):
            self._schedule(self._fetch_and_delegate(rewrite, on_load, on_progress, on_error))
            return None

        return self._inner.load(url, on_load, on_progress, on_error)

    async def load_async(self, url: str) -> Any:
        return await load_as_future(self.load, url)

    async def drain(self) -> None:
        """Wait until every scheduled native fetch, and the wrapped loader, has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        inner_drain = getattr(self._inner, "drain", None)
        if inner_drain is not None:
            await inner_drain()

    def _schedule(self, coro) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Called outside an event loop: finish the fetch before returning
            asyncio.run(coro)
            return
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _fetch_and_delegate(
        self,
        rewrite: AsyncFetch,
        on_load: OnLoad,
        on_progress: OnProgress,
        on_error: OnError,
    ) -> None:
        try:
            content = await rewrite.fetch()
        except Exception as e:
            log.error(e, f"[AssetLoader] Failed to load asset: {rewrite.relative_path}")
            if on_error is not None:
                on_error(e)
            manager = getattr(self._inner, "manager", None)
            if manager is not None:
                url = "assets/" + rewrite.relative_path
                manager.item_start(url)
                manager.item_error(url, e)
            return

        handle = self._handles.create(content)

        def released(callback: Callable | None, failure: bool) -> Callable:
            def finish(*args) -> None:
                # Released before the callback runs, whatever it does
                self._handles.release(handle)
                if callback is not None:
                    callback(*args)
                elif failure and args:
                    log.error(args[0], f"[AssetLoader] Failed to decode asset: {rewrite.relative_path}")
            return finish

        try:
            pending = self._inner.load(handle, released(on_load, False), on_progress, released(on_error, True))
            if asyncio.isfuture(pending):
                await pending
        except Exception as e:
            self._handles.release(handle)
            log.error(e, f"[AssetLoader] Loader failed for asset: {rewrite.relative_path}")
            if on_error is not None:
                on_error(e)


def intercept(
    loader: Any,
    resolver: AssetResolver,
    handles: EphemeralHandles | None = None,
) -> InterceptingLoader:
    """
    Wrap loader for resolver.

    A loader that already is an InterceptingLoader is returned as is, with
    its resolver switched to the new one: requests still reach the original
    primitive exactly once.
    """
    if isinstance(loader, InterceptingLoader):
        loader.resolver = resolver
        return loader
    return InterceptingLoader(loader, resolver, handles)
