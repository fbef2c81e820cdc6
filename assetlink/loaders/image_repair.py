# assetlink/loaders/image_repair.py
"""
Texture/image table repair.

Before the object loader runs, every texture descriptor is made to point at
an image descriptor (by uuid) whose url is canonical, so image loading and
later re-serialization see one uniform shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from assetlink import log
from assetlink.core.identifiable import generate_uuid
from assetlink.loaders.asset_paths import canonicalize, is_blob_url
from assetlink.loaders.backend_mode import BackendMode


@dataclass
class RepairReport:
    """What repair_image_descriptors() changed, by uuid."""

    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    unresolved_blobs: list[str] = field(default_factory=list)


def asset_path_hint(descriptor: dict[str, Any]) -> str | None:
    """userData.assetPath of a texture/material descriptor, if any."""
    user_data = descriptor.get("userData")
    if isinstance(user_data, dict):
        hint = user_data.get("assetPath")
        if isinstance(hint, str) and hint:
            return hint
    return None


def _ensure_list(document: dict[str, Any], key: str) -> list:
    value = document.get(key)
    if not isinstance(value, list):
        if value is not None:
            log.warn(f"[ImageRepair] Document '{key}' is {type(value).__name__}, replacing with empty list")
        value = []
        document[key] = value
    return value


def _derive_image(
    texture: dict[str, Any],
    hint: str | None,
    images_by_uuid: dict[str, dict],
) -> tuple[str | None, str | None]:
    """(image_uuid, image_path) for a texture, either may be None."""
    image = texture.get("image")

    if isinstance(image, str) and image in images_by_uuid:
        return image, images_by_uuid[image].get("url") or hint

    if isinstance(image, str) and image:
        return generate_uuid(), image

    if isinstance(image, dict):
        image_uuid = image.get("uuid") or generate_uuid()
        url = image.get("url")
        if not url and image_uuid in images_by_uuid:
            url = images_by_uuid[image_uuid].get("url")
        return image_uuid, url or hint

    if not image and hint:
        return generate_uuid(), None

    return None, None


def repair_image_descriptors(
    document: dict[str, Any],
    mode: BackendMode | None = None,
) -> RepairReport:
    """
    Normalize document["textures"] / document["images"] in place.

    For each texture the image path is taken from, in order: a string
    `image` (a path, fresh uuid), an inline image object, or a uuid
    reference into images[]. userData.assetPath wins over the derived path.
    The canonical path is written to the matching images[] entry, or a new
    entry is prepended, and texture["image"] becomes the plain uuid.
    """
    report = RepairReport()
    textures = _ensure_list(document, "textures")
    images = _ensure_list(document, "images")

    images_by_uuid: dict[str, dict] = {
        img["uuid"]: img
        for img in images
        if isinstance(img, dict) and isinstance(img.get("uuid"), str)
    }
    to_prepend: list[dict] = []

    for texture in textures:
        if not isinstance(texture, dict):
            continue

        hint = asset_path_hint(texture)
        image_uuid, image_path = _derive_image(texture, hint, images_by_uuid)
        final_path = hint or image_path

        if not image_uuid or not final_path:
            # Only a pre-existing images[] uuid match can resolve this one
            texture_id = texture.get("uuid", "?")
            log.warn(f"[ImageRepair] No image path for texture {texture_id}, left as is")
            report.skipped.append(texture_id)
            continue

        url = canonicalize(final_path, hint, mode)
        if is_blob_url(url):
            log.warn(
                f"[ImageRepair] Texture {texture.get('uuid', '?')} keeps ephemeral url {url} "
                f"(no non-ephemeral asset path to recover it from)"
            )
            report.unresolved_blobs.append(image_uuid)

        existing = images_by_uuid.get(image_uuid)
        if existing is not None:
            if existing.get("url") != url:
                existing["url"] = url
                report.updated.append(image_uuid)
        else:
            entry = {"uuid": image_uuid, "url": url}
            to_prepend.append(entry)
            images_by_uuid[image_uuid] = entry
            report.added.append(image_uuid)

        texture["image"] = image_uuid

    if to_prepend:
        images[:0] = to_prepend

    return report
