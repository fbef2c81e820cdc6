"""Asset base class for registry-owned resources."""

from __future__ import annotations

from pathlib import Path
from typing import Generic, TypeVar

from assetlink.core.identifiable import Identifiable

T = TypeVar("T")


class Asset(Identifiable, Generic[T]):
    """
    Base class for resources owned by the asset subsystem.

    IMPORTANT: Assets are registered in an AssetRegistry under their
    canonical path. The registry entry outlives any single scene load;
    loaders only read `resource` and never replace it.

    Asset combines:
    - Identifiable (uuid, runtime_id)
    - The shared resource instance
    - Version tracking so editors know when the resource changed
    """

    def __init__(
        self,
        data: T | None = None,
        name: str = "asset",
        source_path: Path | str | None = None,
        uuid: str | None = None,
    ):
        """
        Initialize Asset.

        Args:
            data: Shared resource instance (can be None until loaded)
            name: Human-readable name for the asset
            source_path: Path of the asset file inside the project
            uuid: Existing UUID or None to generate new one
        """
        super().__init__(uuid=uuid)
        self._name = name
        self._source_path: Path | None = Path(source_path) if source_path else None
        self._data: T | None = data
        self._version: int = 0

    @property
    def name(self) -> str:
        """Human-readable name."""
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def source_path(self) -> Path | None:
        """Path to source file."""
        return self._source_path

    @source_path.setter
    def source_path(self, value: Path | str | None) -> None:
        self._source_path = Path(value) if value else None

    @property
    def version(self) -> int:
        """
        Version counter for change tracking.

        Incremented whenever the resource instance is replaced.
        """
        return self._version

    @property
    def resource(self) -> T | None:
        """The canonical shared instance."""
        return self._data

    @property
    def is_loaded(self) -> bool:
        return self._data is not None

    def set_resource(self, data: T | None) -> None:
        """Replace the shared instance and bump version."""
        self._data = data
        self._version += 1
