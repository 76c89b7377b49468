"""Skeleton detection: bone collection, rig classification and standard bones."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Literal

from orienty.scene import NodeKind, SceneNode

RigType = Literal["mixamo", "unity-humanoid", "unreal", "custom", "unknown"]

_UNITY_LIMB_PATTERN = re.compile(r"^(left|right)(upper|lower)?(arm|leg|hand|foot)$", re.IGNORECASE)


def _patterns(*sources: str) -> list[re.Pattern[str]]:
    return [re.compile(src, re.IGNORECASE) for src in sources]


# Order matters: slots are filled first-match-wins, and a mixamo name can
# also satisfy a looser generic pattern further down a list.
BONE_PATTERNS: list[tuple[str, list[re.Pattern[str]]]] = [
    (
        "hips",
        _patterns(
            r"^mixamorig[:.]?hips$",
            r"^hips?$",
            r"^pelvis$",
            r"^root$",
            r"^bip\d*[:.]?pelvis$",
            r"^cog$",
        ),
    ),
    (
        "spine",
        _patterns(
            r"^mixamorig[:.]?spine$",
            r"^spine$",
            r"^bip\d*[:.]?spine$",
            r"^torso$",
        ),
    ),
    (
        "chest",
        _patterns(
            r"^mixamorig[:.]?spine[12]$",
            r"^chest$",
            r"^upper[\s_-]?chest$",
            r"^ribcage$",
        ),
    ),
    (
        "neck",
        _patterns(
            r"^mixamorig[:.]?neck$",
            r"^neck$",
            r"^bip\d*[:.]?neck$",
        ),
    ),
    (
        "head",
        _patterns(
            r"^mixamorig[:.]?head$",
            r"^head$",
            r"^bip\d*[:.]?head$",
            r"^cranium$",
        ),
    ),
    (
        "left_shoulder",
        _patterns(
            r"^mixamorig[:.]?leftshoulder$",
            r"^left[\s_-]?shoulder$",
            r"^shoulder[:.]?l$",
            r"^l[:.]?shoulder$",
            r"^clavicle[:.]?l$",
            r"^l[:.]?clavicle$",
        ),
    ),
    (
        "right_shoulder",
        _patterns(
            r"^mixamorig[:.]?rightshoulder$",
            r"^right[\s_-]?shoulder$",
            r"^shoulder[:.]?r$",
            r"^r[:.]?shoulder$",
            r"^clavicle[:.]?r$",
            r"^r[:.]?clavicle$",
        ),
    ),
    (
        "left_upper_arm",
        _patterns(
            r"^mixamorig[:.]?leftarm$",
            r"^left[\s_-]?upper[\s_-]?arm$",
            r"^arm[:.]?l$",
            r"^l[:.]?arm$",
            r"^upperarm[:.]?l$",
        ),
    ),
    (
        "right_upper_arm",
        _patterns(
            r"^mixamorig[:.]?rightarm$",
            r"^right[\s_-]?upper[\s_-]?arm$",
            r"^arm[:.]?r$",
            r"^r[:.]?arm$",
            r"^upperarm[:.]?r$",
        ),
    ),
]


@dataclass(frozen=True)
class StandardBones:
    hips: SceneNode | None = None
    spine: SceneNode | None = None
    chest: SceneNode | None = None
    neck: SceneNode | None = None
    head: SceneNode | None = None
    left_shoulder: SceneNode | None = None
    right_shoulder: SceneNode | None = None
    left_upper_arm: SceneNode | None = None
    right_upper_arm: SceneNode | None = None

    def found(self) -> list[str]:
        """Names of the slots that resolved to a bone."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]


@dataclass(frozen=True)
class SkeletonAnalysis:
    has_skeleton: bool
    skinned_meshes: list[SceneNode]
    all_bones: list[SceneNode]
    bones_by_name: dict[str, SceneNode]
    root_bone: SceneNode | None
    detected_rig_type: RigType


def analyze_skeleton(root: SceneNode) -> SkeletonAnalysis:
    """Collect skinned meshes and bones under ``root``.

    Bones reachable through a skinned mesh's skeleton and standalone bone
    nodes are merged in traversal order, de-duplicated by identity. The
    name lookup is keyed by lowercased name; on a collision the last bone
    wins.
    """
    skinned_meshes: list[SceneNode] = []
    all_bones: list[SceneNode] = []
    seen: set[int] = set()
    bones_by_name: dict[str, SceneNode] = {}

    def collect(bone: SceneNode) -> None:
        if id(bone) in seen:
            return
        seen.add(id(bone))
        all_bones.append(bone)
        bones_by_name[bone.name.lower()] = bone

    for node in root.traverse():
        match node.kind:
            case NodeKind.SKINNED_MESH:
                skinned_meshes.append(node)
                for bone in node.skeleton:
                    collect(bone)
            case NodeKind.BONE:
                collect(node)
            case NodeKind.MESH | NodeKind.NODE:
                pass

    return SkeletonAnalysis(
        has_skeleton=bool(skinned_meshes) or bool(all_bones),
        skinned_meshes=skinned_meshes,
        all_bones=all_bones,
        bones_by_name=bones_by_name,
        root_bone=_find_root_bone(all_bones),
        detected_rig_type=detect_rig_type(bones_by_name),
    )


def _find_root_bone(bones: list[SceneNode]) -> SceneNode | None:
    """First bone whose parent is not itself a bone."""
    for bone in bones:
        if bone.parent is None or bone.parent.kind is not NodeKind.BONE:
            return bone
    return bones[0] if bones else None


def detect_rig_type(bones_by_name: dict[str, SceneNode]) -> RigType:
    """Classify the rig naming convention. First matching rule wins."""
    names = list(bones_by_name)

    if any(n.startswith("mixamorig") for n in names):
        return "mixamo"
    if any(_UNITY_LIMB_PATTERN.match(n) for n in names):
        return "unity-humanoid"
    if any(n.startswith("bip") for n in names):
        return "unreal"
    if names:
        return "custom"
    return "unknown"


def find_standard_bones(bones_by_name: dict[str, SceneNode]) -> StandardBones:
    """Resolve the nine standard slots from bone names.

    Each slot takes the first bone (in mapping order) that matches any of
    its patterns and is never overwritten afterwards.
    """
    resolved: dict[str, SceneNode] = {}
    for bone_name, bone in bones_by_name.items():
        for slot, patterns in BONE_PATTERNS:
            if slot in resolved:
                continue
            for pattern in patterns:
                if pattern.search(bone_name):
                    resolved[slot] = bone
                    break
    return StandardBones(**resolved)
