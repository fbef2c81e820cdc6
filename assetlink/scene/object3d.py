"""Scene graph nodes."""

from __future__ import annotations

from typing import Any, Callable, Iterator

import numpy as np

from assetlink.core.identifiable import Identifiable
from assetlink.scene.material import Material


class Object3D(Identifiable):
    """
    Node of the deserialized scene graph.

    `material` is None, a single Material, or a list of Materials (one per
    geometry group) depending on what the document stored.
    """

    def __init__(
        self,
        type: str = "Object3D",
        name: str = "",
        uuid: str | None = None,
        user_data: dict[str, Any] | None = None,
    ):
        super().__init__(uuid=uuid)
        self.type = type
        self.name = name
        self.user_data: dict[str, Any] = dict(user_data or {})
        self.parent: Object3D | None = None
        self.children: list[Object3D] = []
        self.material: Material | list[Material] | None = None
        self.geometry: dict[str, Any] | None = None
        # Local transform, 4x4 row-major
        self.matrix: np.ndarray = np.identity(4, dtype=np.float64)

    def add(self, child: "Object3D") -> None:
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)

    def traverse(self, callback: Callable[["Object3D"], None]) -> None:
        """Call callback for this node and every descendant, depth first."""
        for node in self.iter_nodes():
            callback(node)

    def iter_nodes(self) -> Iterator["Object3D"]:
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def materials(self) -> list[Material]:
        """Materials of this node as a list, whatever the slot shape."""
        if self.material is None:
            return []
        if isinstance(self.material, list):
            return [m for m in self.material if m is not None]
        return [self.material]

    def get_object_by_name(self, name: str) -> "Object3D | None":
        for node in self.iter_nodes():
            if node.name == name:
                return node
        return None


class Mesh(Object3D):
    def __init__(self, name: str = "", uuid: str | None = None, user_data=None):
        super().__init__(type="Mesh", name=name, uuid=uuid, user_data=user_data)


class Scene(Object3D):
    def __init__(self, name: str = "", uuid: str | None = None, user_data=None):
        super().__init__(type="Scene", name=name, uuid=uuid, user_data=user_data)


OBJECT_TYPES: dict[str, type[Object3D]] = {
    "Mesh": Mesh,
    "Scene": Scene,
}


def create_object(type_name: str, **kwargs) -> Object3D:
    """Instantiate the node class registered for type_name."""
    cls = OBJECT_TYPES.get(type_name)
    if cls is None:
        return Object3D(type=type_name or "Object3D", **kwargs)
    return cls(**kwargs)
