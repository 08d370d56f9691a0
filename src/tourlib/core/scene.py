"""
Scene Graph

Minimal transform hierarchy the tour attaches its loaded model and POI
anchors to.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional

import numpy as np
from pyrr import Matrix44, Vector3


class SceneNode:
    """
    Node with a local TRS transform and children.

    ``payload`` carries whatever the node represents (a scene fragment for the
    model node, a POI id for anchors).
    """

    def __init__(
        self,
        name: str,
        position: Optional[Vector3] = None,
        payload: Any = None,
    ):
        self.name = name
        self.position = Vector3(position) if position is not None else Vector3([0.0, 0.0, 0.0])
        self.rotation = Vector3([0.0, 0.0, 0.0])  # Euler radians
        self.scale = Vector3([1.0, 1.0, 1.0])
        self.payload = payload
        self.visible = True
        self.parent: Optional[SceneNode] = None
        self.children: List[SceneNode] = []

    def add(self, child: "SceneNode") -> "SceneNode":
        """Attach a child, detaching it from any previous parent."""
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: "SceneNode") -> None:
        if child in self.children:
            self.children.remove(child)
            child.parent = None

    def find(self, name: str) -> Optional["SceneNode"]:
        for node in self.walk():
            if node.name == name:
                return node
        return None

    def walk(self) -> Iterator["SceneNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def get_model_matrix(self) -> Matrix44:
        """Local transform (scale, then rotation, then translation)."""
        matrix = Matrix44.from_scale(self.scale)
        matrix = matrix @ Matrix44.from_eulers(self.rotation)
        return matrix @ Matrix44.from_translation(self.position)

    def get_world_matrix(self) -> Matrix44:
        matrix = self.get_model_matrix()
        node = self.parent
        while node is not None:
            matrix = matrix @ node.get_model_matrix()
            node = node.parent
        return matrix

    def get_world_position(self) -> Vector3:
        return Vector3(np.array(self.get_world_matrix())[3, :3])


class Scene(SceneNode):
    """Root of the externally owned scene graph."""

    def __init__(self, name: str = "Scene"):
        super().__init__(name)

    def attach_model(self, name: str, fragment: Any) -> SceneNode:
        """Attach a loaded model under the root and return its node."""
        return self.add(SceneNode(name, payload=fragment))

    def attach_anchor(self, model_node: SceneNode, anchor_id: str, local_position: Vector3) -> SceneNode:
        """Attach a POI anchor as a child of the model, in model-local space."""
        return model_node.add(SceneNode(anchor_id, position=local_position, payload=anchor_id))

    def clear(self) -> None:
        for child in list(self.children):
            self.remove(child)

    def get_object_count(self) -> int:
        return sum(1 for _ in self.walk()) - 1
