"""
Scene document intake.

parse_document() turns whatever the caller handed over (a dict, JSON text
or bytes, an editor project wrapper) into a scene document, reporting the
outcome as a tagged result instead of raising.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union


class DocumentParseError(Exception):
    """Input is not a scene document the object loader can build."""


@dataclass
class Ok:
    document: dict[str, Any]


@dataclass
class Malformed:
    reason: str


@dataclass
class Unsupported:
    reason: str


ParseResult = Union[Ok, Malformed, Unsupported]

# Node types that only exist while the runtime is playing
RUNTIME_NODE_TYPES = frozenset(["BatchedRenderer", "ParticleEmitter", "VFXBatch"])


def _is_scene_document(value: Any) -> bool:
    return isinstance(value, dict) and ("object" in value or "metadata" in value)


def _from_mapping(value: dict) -> ParseResult:
    if _is_scene_document(value):
        return Ok(value)
    # Editor project file: {"scene": {...}, "camera": {...}, ...}
    wrapped = value.get("scene")
    if _is_scene_document(wrapped):
        return Ok(wrapped)
    return Unsupported("object has neither 'object' nor 'metadata' nor a 'scene' document")


def parse_document(raw: Any) -> ParseResult:
    """
    Classify raw input.

    Order: mapping -> project wrapper -> JSON text -> unsupported.
    """
    if isinstance(raw, dict):
        return _from_mapping(raw)

    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            return Malformed(f"not UTF-8 text: {e}")

    if isinstance(raw, str):
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            return Malformed(f"invalid JSON: {e.msg} at line {e.lineno} column {e.colno}")
        if not isinstance(value, dict):
            return Unsupported(f"top-level JSON value is {type(value).__name__}, expected object")
        return _from_mapping(value)

    return Unsupported(f"cannot read a scene document from {type(raw).__name__}")


def require_document(raw: Any) -> dict[str, Any]:
    """parse_document() or DocumentParseError."""
    result = parse_document(raw)
    if isinstance(result, Ok):
        return result.document
    if isinstance(result, Malformed):
        raise DocumentParseError(f"Malformed scene document: {result.reason}")
    raise DocumentParseError(f"Unsupported scene document: {result.reason}")


def _is_runtime_node(node: Any) -> bool:
    if not isinstance(node, dict):
        return False
    user_data = node.get("userData")
    if isinstance(user_data, dict) and user_data.get("isParticleSystem"):
        return False
    node_type = node.get("type")
    return node_type in RUNTIME_NODE_TYPES or node_type == "ParticleSystem"


def prune_runtime_nodes(document: dict[str, Any]) -> int:
    """
    Remove runtime-only nodes from the object tree in place.

    Particle systems authored in the editor (userData.isParticleSystem) are
    kept. Returns the number of removed nodes.
    """
    root = document.get("object")
    if not isinstance(root, dict):
        return 0

    removed = 0
    stack = [root]
    while stack:
        node = stack.pop()
        children = node.get("children")
        if not isinstance(children, list):
            continue
        kept = []
        for child in children:
            if _is_runtime_node(child):
                removed += 1
                continue
            kept.append(child)
            if isinstance(child, dict):
                stack.append(child)
        node["children"] = kept
    return removed
