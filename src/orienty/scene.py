"""In-memory scene graph consumed by the orientation engine.

Nodes are tagged with an explicit ``NodeKind`` and carry local TRS
transforms. World-space queries compose the parent chain on demand, so a
scene can be edited freely between validation passes.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

import numpy as np

from orienty.errors import SceneError
from orienty.math_utils import compose_matrix, normalize, quat_multiply


class NodeKind(Enum):
    NODE = "node"
    MESH = "mesh"
    SKINNED_MESH = "skinned_mesh"
    BONE = "bone"


MESH_KINDS = frozenset({NodeKind.MESH, NodeKind.SKINNED_MESH})


class SceneNode:
    """A node in a scene graph.

    Args:
        name: Node name (bone names are matched case-insensitively).
        kind: Node type tag.
        position: Local translation.
        rotation: Local rotation quaternion ``(x, y, z, w)``.
        scale: Local scale.
        vertices: Local-space vertex positions ``(N, 3)`` for mesh kinds.
    """

    def __init__(
        self,
        name: str = "",
        kind: NodeKind = NodeKind.NODE,
        *,
        position: Sequence[float] | np.ndarray = (0.0, 0.0, 0.0),
        rotation: Sequence[float] | np.ndarray = (0.0, 0.0, 0.0, 1.0),
        scale: Sequence[float] | np.ndarray = (1.0, 1.0, 1.0),
        vertices: Sequence[Sequence[float]] | np.ndarray | None = None,
    ) -> None:
        self.name = name
        self.kind = kind
        self.position = np.asarray(position, dtype=np.float64).copy()
        self.rotation = np.asarray(rotation, dtype=np.float64).copy()
        self.scale = np.asarray(scale, dtype=np.float64).copy()
        self.parent: SceneNode | None = None
        self.children: list[SceneNode] = []
        self.skeleton: list[SceneNode] = []

        if vertices is None:
            self.vertices = np.zeros((0, 3), dtype=np.float64)
        else:
            self.vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)

    def __repr__(self) -> str:
        return f"SceneNode({self.name!r}, {self.kind.value})"

    # -- hierarchy ---------------------------------------------------------

    def add(self, *children: SceneNode) -> SceneNode:
        """Attach children to this node. Returns self for chaining."""
        for child in children:
            if child.parent is not None:
                raise SceneError(
                    f"Node {child.name!r} already has parent {child.parent.name!r}"
                )
            ancestor: SceneNode | None = self
            while ancestor is not None:
                if ancestor is child:
                    raise SceneError(f"Adding {child.name!r} under {self.name!r} creates a cycle")
                ancestor = ancestor.parent
            child.parent = self
            self.children.append(child)
        return self

    def bind_skeleton(self, bones: Sequence[SceneNode]) -> None:
        """Bind an ordered bone list to a skinned mesh."""
        if self.kind is not NodeKind.SKINNED_MESH:
            raise SceneError(f"Only skinned meshes can bind a skeleton, got {self!r}")
        for bone in bones:
            if bone.kind is not NodeKind.BONE:
                raise SceneError(f"Skeleton entry {bone!r} is not a bone")
        self.skeleton = list(bones)

    def traverse(self) -> Iterator[SceneNode]:
        """Yield this node and all descendants, depth-first pre-order."""
        stack: list[SceneNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    # -- transforms --------------------------------------------------------

    def local_matrix(self) -> np.ndarray:
        return compose_matrix(self.position, self.rotation, self.scale)

    def world_matrix(self) -> np.ndarray:
        mat = self.local_matrix()
        node = self.parent
        while node is not None:
            mat = node.local_matrix() @ mat
            node = node.parent
        return mat

    def world_position(self) -> np.ndarray:
        return self.world_matrix()[:3, 3].copy()

    def world_quaternion(self) -> np.ndarray:
        """Accumulated rotation of the parent chain (scale is ignored)."""
        q = self.rotation
        node = self.parent
        while node is not None:
            q = quat_multiply(node.rotation, q)
            node = node.parent
        return normalize(q)

    def world_scale(self) -> np.ndarray:
        s = self.scale.copy()
        node = self.parent
        while node is not None:
            s = s * node.scale
            node = node.parent
        return s


@dataclass(frozen=True)
class BoundingBox:
    min: np.ndarray
    max: np.ndarray

    @property
    def size(self) -> np.ndarray:
        return self.max - self.min

    @property
    def center(self) -> np.ndarray:
        return (self.min + self.max) * 0.5


def compute_bounding_box(root: SceneNode) -> BoundingBox | None:
    """World-space axis-aligned box over every mesh vertex under ``root``.

    Returns None when the subtree holds no geometry.
    """
    chunks: list[np.ndarray] = []
    for node in root.traverse():
        if node.kind not in MESH_KINDS or len(node.vertices) == 0:
            continue
        mat = node.world_matrix()
        chunks.append(node.vertices @ mat[:3, :3].T + mat[:3, 3])

    if not chunks:
        return None
    points = np.concatenate(chunks, axis=0)
    return BoundingBox(min=points.min(axis=0), max=points.max(axis=0))


def box_vertices(
    width: float,
    height: float,
    depth: float,
    center: Sequence[float] = (0.0, 0.0, 0.0),
) -> np.ndarray:
    """The eight corners of an axis-aligned box."""
    half = np.array([width, height, depth], dtype=np.float64) / 2.0
    signs = np.array(
        [[sx, sy, sz] for sx in (-1, 1) for sy in (-1, 1) for sz in (-1, 1)],
        dtype=np.float64,
    )
    return signs * half + np.asarray(center, dtype=np.float64)


def make_bone(
    name: str,
    position: Sequence[float] = (0.0, 0.0, 0.0),
    parent: SceneNode | None = None,
) -> SceneNode:
    """Create a bone at a local position, optionally attaching it to ``parent``."""
    bone = SceneNode(name, NodeKind.BONE, position=position)
    if parent is not None:
        parent.add(bone)
    return bone


def make_box_mesh(
    width: float,
    height: float,
    depth: float,
    *,
    name: str = "box",
    center: Sequence[float] = (0.0, 0.0, 0.0),
) -> SceneNode:
    return SceneNode(
        name, NodeKind.MESH, vertices=box_vertices(width, height, depth, center)
    )
