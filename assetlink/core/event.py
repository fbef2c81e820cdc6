"""Observer-style notifications used by the loading manager."""

from __future__ import annotations

from typing import Callable


class Event:
    """
    Multicast notification.

    Usage:
        manager.on_error += handler          # subscribe
        manager.on_error -= handler          # unsubscribe
        manager.on_error.emit(url, exc)      # notify all subscribers

    Handlers receive the positional arguments passed to emit(). A handler
    that raises does not prevent the remaining handlers from running; the
    first exception is re-raised after all of them were called.
    """

    def __init__(self):
        self._handlers: list[Callable[..., None]] = []
        self._once: set[int] = set()

    def __iadd__(self, handler: Callable[..., None]) -> "Event":
        if handler not in self._handlers:
            self._handlers.append(handler)
        return self

    def __isub__(self, handler: Callable[..., None]) -> "Event":
        if handler in self._handlers:
            self._handlers.remove(handler)
            self._once.discard(id(handler))
        return self

    def once(self, handler: Callable[..., None]) -> None:
        """Subscribe handler for the next emission only."""
        self += handler
        self._once.add(id(handler))

    def emit(self, *args) -> None:
        first_error: BaseException | None = None
        for handler in list(self._handlers):
            if id(handler) in self._once:
                self -= handler
            try:
                handler(*args)
            except Exception as e:
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def __len__(self) -> int:
        return len(self._handlers)

    def __bool__(self) -> bool:
        return len(self._handlers) > 0
