"""Core building blocks shared by scene objects and loaders."""

from assetlink.core.event import Event
from assetlink.core.identifiable import Identifiable, generate_uuid

__all__ = [
    "Event",
    "Identifiable",
    "generate_uuid",
]
