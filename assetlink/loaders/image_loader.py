# assetlink/loaders/image_loader.py
"""
Shared loading primitives.

FileLoader and ImageLoader follow the callback contract every caller of
the object loader relies on:

    loader.load(url, on_load, on_progress=None, on_error=None)

and provide `await loader.load_async(url)` on top of it.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from assetlink import log
from assetlink.core.event import Event
from assetlink.loaders.fetch import UrlFetcher
from assetlink.scene.texture import ImageData

OnLoad = Callable[[Any], None]
OnProgress = Optional[Callable[[int, int], None]]
OnError = Optional[Callable[[BaseException], None]]


class LoadingManager:
    """
    Tracks outstanding loads and reports failures.

    Events:
        on_start(url), on_load(url), on_error(url, exc)

    A subscriber that raises is logged; the load it reports on carries on.
    """

    def __init__(self):
        self.on_start = Event()
        self.on_load = Event()
        self.on_error = Event()
        self.items_total = 0
        self.items_loaded = 0
        self.failed_urls: list[str] = []

    def item_start(self, url: str) -> None:
        self.items_total += 1
        self._notify(self.on_start, url)

    def item_end(self, url: str) -> None:
        self.items_loaded += 1
        self._notify(self.on_load, url)

    def item_error(self, url: str, exc: BaseException) -> None:
        self.failed_urls.append(url)
        self._notify(self.on_error, url, exc)

    def _notify(self, event: Event, *args) -> None:
        try:
            event.emit(*args)
        except Exception as e:
            log.error(e, f"[LoadingManager] Subscriber failed for {args[0]}")

    @property
    def pending(self) -> int:
        return self.items_total - self.items_loaded - len(self.failed_urls)


async def load_as_future(load: Callable[..., Any], url: str) -> Any:
    """Run a callback-style load and await its outcome."""
    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()

    def resolve(value: Any) -> None:
        if not future.done():
            future.set_result(value)

    def reject(exc: BaseException) -> None:
        if not future.done():
            future.set_exception(exc)

    load(url, resolve, None, reject)
    return await future


class Loader:
    """
    Fetches a URL through UrlFetcher and parses the bytes.

    Inside a running event loop the fetch and parse run in a worker thread
    and load() returns the task; the callbacks still run on the loop.
    Without a loop, load() completes before returning.
    """

    def __init__(
        self,
        manager: LoadingManager | None = None,
        fetcher: UrlFetcher | None = None,
    ):
        self.manager = manager or LoadingManager()
        self.fetcher = fetcher or UrlFetcher()
        self._pending: set[asyncio.Task] = set()

    def _parse(self, content: bytes, url: str) -> Any:
        return content

    def _read(self, url: str) -> tuple[bytes, Any]:
        content = self.fetcher.read(url)
        return content, self._parse(content, url)

    def load(
        self,
        url: str,
        on_load: OnLoad,
        on_progress: OnProgress = None,
        on_error: OnError = None,
    ) -> Optional[asyncio.Task]:
        """
        Load url and hand the result to on_load.

        Failures go to on_error when given. Otherwise they are raised, or
        logged when the load runs as a task.
        """
        self.manager.item_start(url)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(self._load_in_thread(url, on_load, on_progress, on_error))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            return task

        try:
            content, result = self._read(url)
        except Exception as e:
            self.manager.item_error(url, e)
            if on_error is None:
                raise
            on_error(e)
            return None
        self._finish(url, content, result, on_load, on_progress)
        return None

    async def _load_in_thread(
        self,
        url: str,
        on_load: OnLoad,
        on_progress: OnProgress,
        on_error: OnError,
    ) -> None:
        try:
            content, result = await asyncio.to_thread(self._read, url)
        except Exception as e:
            self.manager.item_error(url, e)
            if on_error is None:
                log.error(e, f"[Loader] Failed to load {url}")
            else:
                on_error(e)
            return
        self._finish(url, content, result, on_load, on_progress)

    def _finish(self, url: str, content: bytes, result: Any, on_load: OnLoad, on_progress: OnProgress) -> None:
        if on_progress is not None:
            on_progress(len(content), len(content))
        self.manager.item_end(url)
        on_load(result)

    async def load_async(self, url: str) -> Any:
        return await load_as_future(self.load, url)

    async def drain(self) -> None:
        """Wait until every load started inside the event loop has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


class FileLoader(Loader):
    """Delivers raw bytes."""


class ImageLoader(Loader):
    """Delivers decoded ImageData (RGBA, via Pillow)."""

    def _parse(self, content: bytes, url: str) -> ImageData:
        return ImageData.from_bytes(content, source_url=url)
