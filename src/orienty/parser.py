"""YAML loading of scene descriptions and scene-graph construction."""

from __future__ import annotations

import math
from pathlib import Path

import numpy as np
from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from orienty.errors import ParseError
from orienty.math_utils import (
    IDENTITY_QUAT,
    quaternion_from_axis_angle,
    quaternion_from_euler_degrees,
)
from orienty.models import NodeSpec, SceneSpec, TransformSpec
from orienty.scene import NodeKind, SceneNode, box_vertices
from orienty.warning_policy import WarningPolicy, emit_warning

_QUAT_TOLERANCE = 1e-6


def _make_yaml() -> YAML:
    """Create a ruamel.yaml safe loader that errors on duplicate keys."""
    yml = YAML(typ="safe")
    yml.allow_duplicate_keys = False
    return yml


def _read_source_text(source: str | Path) -> str:
    """Read YAML content from a path, or treat the input as raw YAML text."""
    if isinstance(source, Path):
        try:
            return source.read_text(encoding="utf-8")
        except OSError as e:
            raise ParseError(f"Cannot read file: {e}") from e
    return source


def load_yaml_data(source: str | Path) -> dict:
    """Load YAML and run top-level shape checks."""
    text = _read_source_text(source)
    try:
        data = _make_yaml().load(text)
    except YAMLError as e:
        raise ParseError(f"Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("Top-level YAML value must be a mapping")
    if "version" not in data:
        raise ParseError("Missing required field: version")
    data["version"] = str(data["version"])
    return data


def parse_scene_spec(source: str | Path) -> SceneSpec:
    """Parse a scene description into a validated ``SceneSpec``.

    Args:
        source: A ``Path`` to a YAML file, or raw YAML text.

    Raises:
        ParseError: On YAML or schema errors.
    """
    data = load_yaml_data(source)
    try:
        return SceneSpec(**data)
    except PydanticValidationError as e:
        raise ParseError(f"Scene schema validation failed:\n{e}") from e


def build_scene(spec: SceneSpec, *, warning_policy: WarningPolicy | None = None) -> SceneNode:
    """Instantiate the scene graph described by ``spec``.

    Skinned-mesh skeletons are resolved by exact bone name once the whole
    tree exists, so a skeleton may reference bones declared anywhere.
    """
    pending_skeletons: list[tuple[SceneNode, list[str]]] = []
    root = _build_node(spec.root, pending_skeletons, warning_policy)

    bones_by_name: dict[str, SceneNode] = {}
    lowered: dict[str, str] = {}
    for node in root.traverse():
        if node.kind is not NodeKind.BONE:
            continue
        bones_by_name.setdefault(node.name, node)
        previous = lowered.get(node.name.lower())
        if previous is not None and previous != node.name:
            emit_warning(
                "W03",
                f"Bone names {previous!r} and {node.name!r} collide case-insensitively; "
                f"{node.name!r} wins in name lookups",
                node=node.name,
                policy=warning_policy,
            )
        lowered[node.name.lower()] = node.name

    for mesh, names in pending_skeletons:
        bones: list[SceneNode] = []
        for name in names:
            bone = bones_by_name.get(name)
            if bone is None:
                emit_warning(
                    "W01",
                    f"Skinned mesh {mesh.name!r} references unknown bone {name!r}; ignored",
                    node=mesh.name,
                    policy=warning_policy,
                )
                continue
            bones.append(bone)
        mesh.bind_skeleton(bones)

    return root


def _build_node(
    spec: NodeSpec,
    pending_skeletons: list[tuple[SceneNode, list[str]]],
    warning_policy: WarningPolicy | None,
) -> SceneNode:
    position, rotation, scale = _resolve_transform(spec.name, spec.transform, warning_policy)

    vertices = None
    if spec.geometry is not None:
        if spec.geometry.box is not None:
            width, height, depth = spec.geometry.box
            vertices = box_vertices(width, height, depth, spec.geometry.center)
        else:
            vertices = np.asarray(spec.geometry.vertices, dtype=np.float64).reshape(-1, 3)

    node = SceneNode(
        spec.name,
        NodeKind(spec.type),
        position=position,
        rotation=rotation,
        scale=scale,
        vertices=vertices,
    )
    if spec.skeleton is not None:
        pending_skeletons.append((node, spec.skeleton))

    for child_spec in spec.children:
        node.add(_build_node(child_spec, pending_skeletons, warning_policy))
    return node


def _resolve_transform(
    name: str,
    transform: TransformSpec | None,
    warning_policy: WarningPolicy | None,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return (position, rotation quaternion, scale) for a node."""
    position = np.zeros(3, dtype=np.float64)
    rotation = IDENTITY_QUAT.copy()
    scale = np.ones(3, dtype=np.float64)
    if transform is None:
        return position, rotation, scale

    if transform.translation is not None:
        position = np.array(transform.translation, dtype=np.float64)
    if transform.scale is not None:
        scale = np.array(transform.scale, dtype=np.float64)

    if transform.rotation_quat is not None:
        rotation = np.array(transform.rotation_quat, dtype=np.float64)
        length = float(np.linalg.norm(rotation))
        if not math.isclose(length, 1.0, abs_tol=_QUAT_TOLERANCE):
            emit_warning(
                "W02",
                f"Node {name!r} rotation_quat has length {length:.6f}; normalized",
                node=name,
                policy=warning_policy,
            )
            rotation = rotation / length
    elif transform.rotation_degrees is not None:
        rotation = quaternion_from_euler_degrees(*transform.rotation_degrees)
    elif transform.rotation_axis_angle is not None:
        rotation = quaternion_from_axis_angle(
            np.array(transform.rotation_axis_angle.axis, dtype=np.float64),
            transform.rotation_axis_angle.degrees,
        )

    return position, rotation, scale


def parse_scene(
    source: str | Path, *, warning_policy: WarningPolicy | None = None
) -> tuple[SceneSpec, SceneNode]:
    """Parse a scene description and build its scene graph."""
    spec = parse_scene_spec(source)
    return spec, build_scene(spec, warning_policy=warning_policy)
