"""Identifiable base class for objects with UUID."""

from __future__ import annotations

import uuid as uuid_module


def generate_uuid() -> str:
    """New random UUID string (upper-case, as written by scene exporters)."""
    return str(uuid_module.uuid4()).upper()


class Identifiable:
    """
    Base class for objects that need unique identification.

    Provides:
    - uuid: str - unique identifier for serialization
    - runtime_id: int - 64-bit hash for fast runtime lookup
    """

    def __init__(self, uuid: str | None = None):
        """
        Initialize Identifiable.

        Args:
            uuid: Existing UUID string or None to generate new one
        """
        if uuid is None:
            self._uuid = generate_uuid()
        else:
            self._uuid = uuid

        # 64-bit hash for fast lookup
        self._runtime_id = hash(self._uuid) & 0xFFFFFFFFFFFFFFFF

    @property
    def uuid(self) -> str:
        """Unique identifier (for serialization)."""
        return self._uuid

    @uuid.setter
    def uuid(self, value: str) -> None:
        self._uuid = value
        self._runtime_id = hash(self._uuid) & 0xFFFFFFFFFFFFFFFF

    @property
    def runtime_id(self) -> int:
        """64-bit hash of UUID (for fast runtime lookup)."""
        return self._runtime_id

    def __repr__(self) -> str:
        name = getattr(self, "name", "")
        return f"<{type(self).__name__} {name!r} {self._uuid}>"
