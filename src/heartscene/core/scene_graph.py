"""Scene graph: a lock-guarded, append-only tree of transform-bearing nodes.

Nodes are built detached (``SceneNode.add``) and only become visible to the
render traversal once ``SceneGraph.insert`` attaches the finished subtree in
a single locked step. Every read that crosses the tree returns a list, so
callers never iterate a container another thread may be appending to.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import numpy as np

from heartscene.core.object3d import Object3D
from heartscene.errors import SceneGraphError

logger = logging.getLogger(__name__)


class NodeKind(str, Enum):
    GROUP = "group"
    MESH = "mesh"
    TEXT = "text"
    LIGHT = "light"


class SceneNode(Object3D):
    def __init__(
        self,
        kind: NodeKind = NodeKind.GROUP,
        payload: object = None,
        *,
        name: str | None = None,
        tags=None,
        position=None,
        rotation=None,
        scale=None,
    ) -> None:
        super().__init__(position, rotation, scale)
        self.kind = NodeKind(kind)
        self.payload = payload
        self.name = name
        self.tags = set(tags or ())
        self.parent: Optional[SceneNode] = None
        self._children: List[SceneNode] = []

    def __repr__(self) -> str:
        label = self.name or self.kind.value
        return f"SceneNode({label!r}, children={len(self._children)})"

    @property
    def children(self) -> List["SceneNode"]:
        return list(self._children)

    def is_ancestor_of(self, other: "SceneNode") -> bool:
        node = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def add(self, child: "SceneNode") -> "SceneNode":
        """Attach ``child`` while assembling a detached subtree.

        Takes no lock and does not update any graph's node count, so never
        call it on a node that is already in a graph; hand the finished
        subtree to ``SceneGraph.insert`` instead.
        """
        if child.parent is not None:
            raise SceneGraphError(f"{child!r} already owned by {child.parent!r}")
        if child.is_ancestor_of(self):
            raise SceneGraphError(f"{child!r} cannot own its own ancestor {self!r}")
        child.parent = self
        self._children.append(child)
        return child

    def iter_subtree(self) -> Iterator[Tuple["SceneNode", int]]:
        stack = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            for child in reversed(node._children):
                stack.append((child, depth + 1))

    def world_matrix(self) -> np.ndarray:
        m = self.local_matrix()
        node = self.parent
        while node is not None:
            m = node.local_matrix() @ m
            node = node.parent
        return m


class SceneGraph:
    def __init__(self) -> None:
        self._root = SceneNode(NodeKind.GROUP, name="scene")
        self._lock = threading.RLock()
        self._count = 1

    def root(self) -> SceneNode:
        return self._root

    def __len__(self) -> int:
        with self._lock:
            return self._count

    def __contains__(self, node: SceneNode) -> bool:
        with self._lock:
            return self._root.is_ancestor_of(node)

    @contextmanager
    def locked(self):
        """Hold the graph lock for a batch of transform updates or a full read."""
        with self._lock:
            yield self

    def insert(self, parent: Optional[SceneNode], node: SceneNode) -> SceneNode:
        """Attach a fully built subtree under ``parent`` (root when None)."""
        parent = parent or self._root
        with self._lock:
            if not self._root.is_ancestor_of(parent):
                raise SceneGraphError(f"parent {parent!r} is not part of this scene")
            parent.add(node)
            added = sum(1 for _ in node.iter_subtree())
            self._count += added
        logger.debug("Inserted %r under %r (%d nodes)", node, parent, added)
        return node

    def children(self, node: Optional[SceneNode] = None) -> List[SceneNode]:
        with self._lock:
            return (node or self._root).children

    def walk(self) -> List[Tuple[SceneNode, int]]:
        """Depth-first (node, depth) snapshot of the whole tree, root first."""
        with self._lock:
            return list(self._root.iter_subtree())

    def find(self, name: str) -> Optional[SceneNode]:
        with self._lock:
            for node, _depth in self._root.iter_subtree():
                if node.name == name:
                    return node
        return None

    def tagged(self, tag: str) -> List[SceneNode]:
        with self._lock:
            return [n for n, _d in self._root.iter_subtree() if tag in n.tags]

    def of_kind(self, kind: NodeKind) -> List[SceneNode]:
        kind = NodeKind(kind)
        with self._lock:
            return [n for n, _d in self._root.iter_subtree() if n.kind is kind]


__all__ = ["NodeKind", "SceneNode", "SceneGraph"]
