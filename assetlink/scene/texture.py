"""Image and texture objects produced by the scene deserializer."""

from __future__ import annotations

from typing import Any

import numpy as np

from assetlink.core.identifiable import Identifiable


class ImageData:
    """
    Decoded image pixels.

    Stores an RGBA uint8 array of shape (height, width, 4).
    """

    def __init__(
        self,
        pixels: np.ndarray,
        source_url: str | None = None,
        missing: bool = False,
    ):
        self.pixels = pixels
        self.source_url = source_url
        # True for the placeholder substituted after a failed load
        self.missing = missing

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2]) if self.pixels.ndim == 3 else 1

    @classmethod
    def from_bytes(cls, content: bytes, source_url: str | None = None) -> "ImageData":
        """Decode PNG/JPG/... bytes into RGBA pixels."""
        import io

        from PIL import Image

        with Image.open(io.BytesIO(content)) as image:
            pixels = np.array(image.convert("RGBA"), dtype=np.uint8)
        return cls(pixels, source_url=source_url)

    @classmethod
    def white_1x1(cls, source_url: str | None = None, missing: bool = False) -> "ImageData":
        """1x1 white pixel, used as the missing-texture placeholder."""
        pixels = np.full((1, 1, 4), 255, dtype=np.uint8)
        return cls(pixels, source_url=source_url, missing=missing)

    def __repr__(self) -> str:
        flag = " missing" if self.missing else ""
        return f"<ImageData {self.width}x{self.height}{flag} {self.source_url!r}>"


class Texture(Identifiable):
    """
    Texture referencing a decoded image.

    asset_path is the provenance annotation copied from the texture
    descriptor's userData.assetPath once the scene is resolved.
    """

    is_texture = True

    def __init__(
        self,
        image: ImageData | None = None,
        name: str = "",
        uuid: str | None = None,
        user_data: dict[str, Any] | None = None,
    ):
        super().__init__(uuid=uuid)
        self.image = image
        self.name = name
        self.user_data: dict[str, Any] = dict(user_data or {})
        self.asset_path: str | None = None
