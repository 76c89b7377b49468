"""Shared fixtures for Orienty tests."""

from __future__ import annotations

import pytest

from orienty.scene import NodeKind, SceneNode, box_vertices, make_bone


def build_humanoid(
    *,
    rotation=(0.0, 0.0, 0.0, 1.0),
    position=(0.0, 0.0, 0.0),
    scale=(1.0, 1.0, 1.0),
    body=(0.8, 1.8, 0.8),
    names=None,
    with_mesh=True,
) -> SceneNode:
    """T-pose humanoid: hips at y=1, head at y=1.8, shoulders at x=+-0.2.

    The body box sits on the ground plane centered on X and Z.
    """
    names = {
        "hips": "Hips",
        "spine": "Spine",
        "chest": "Chest",
        "neck": "Neck",
        "head": "Head",
        "left_shoulder": "LeftShoulder",
        "right_shoulder": "RightShoulder",
        **(names or {}),
    }
    root = SceneNode("Character", position=position, rotation=rotation, scale=scale)
    armature = SceneNode("Armature")
    root.add(armature)

    hips = make_bone(names["hips"], (0.0, 1.0, 0.0), armature)
    spine = make_bone(names["spine"], (0.0, 0.2, 0.0), hips)
    chest = make_bone(names["chest"], (0.0, 0.2, 0.0), spine)
    neck = make_bone(names["neck"], (0.0, 0.2, 0.0), chest)
    head = make_bone(names["head"], (0.0, 0.2, 0.0), neck)
    left = make_bone(names["left_shoulder"], (-0.2, 0.1, 0.0), chest)
    right = make_bone(names["right_shoulder"], (0.2, 0.1, 0.0), chest)

    if with_mesh:
        width, height, depth = body
        mesh = SceneNode(
            "Body",
            NodeKind.SKINNED_MESH,
            vertices=box_vertices(width, height, depth, (0.0, height / 2.0, 0.0)),
        )
        root.add(mesh)
        mesh.bind_skeleton([hips, spine, chest, neck, head, left, right])
    return root


def build_box_prop(width: float, height: float, depth: float, **transform) -> SceneNode:
    """A single box mesh whose bottom face rests on y=0."""
    root = SceneNode("Prop", **transform)
    root.add(
        SceneNode(
            "Mesh",
            NodeKind.MESH,
            vertices=box_vertices(width, height, depth, (0.0, height / 2.0, 0.0)),
        )
    )
    return root


@pytest.fixture
def make_humanoid():
    return build_humanoid


@pytest.fixture
def make_box_prop():
    return build_box_prop


@pytest.fixture
def humanoid():
    return build_humanoid()


@pytest.fixture
def z_up_mirrored_model():
    """Blender-style Z-up character exported with scale (-2, 2, 2) and offset (1, 0, 1).

    Bones run along +Z with the character facing -Y.
    """
    root = SceneNode("Export", position=(1.0, 0.0, 1.0), scale=(-2.0, 2.0, 2.0))
    hips = make_bone("mixamorig:Hips", (0.0, 0.0, 1.0), root)
    spine = make_bone("mixamorig:Spine", (0.0, 0.0, 0.2), hips)
    chest = make_bone("mixamorig:Spine1", (0.0, 0.0, 0.2), spine)
    neck = make_bone("mixamorig:Neck", (0.0, 0.0, 0.2), chest)
    head = make_bone("mixamorig:Head", (0.0, 0.0, 0.2), neck)
    left = make_bone("mixamorig:LeftShoulder", (-0.2, 0.0, 0.1), chest)
    right = make_bone("mixamorig:RightShoulder", (0.2, 0.0, 0.1), chest)

    mesh = SceneNode(
        "Body",
        NodeKind.SKINNED_MESH,
        vertices=box_vertices(0.5, 0.3, 1.8, (0.0, 0.0, 0.9)),
    )
    root.add(mesh)
    mesh.bind_skeleton([hips, spine, chest, neck, head, left, right])
    return root


@pytest.fixture
def minimal_scene_yaml():
    return """\
version: "0.1"
name: crate
root:
  name: Crate
  children:
    - name: Mesh
      type: mesh
      geometry:
        box: [1.0, 1.0, 1.0]
        center: [0.0, 0.5, 0.0]
"""


@pytest.fixture
def humanoid_scene_yaml():
    return """\
version: "0.1"
name: hero
root:
  name: Character
  children:
    - name: Body
      type: skinned_mesh
      geometry:
        box: [0.8, 1.8, 0.8]
        center: [0.0, 0.9, 0.0]
      skeleton: [Hips, Spine, Chest, Neck, Head, LeftShoulder, RightShoulder]
    - name: Hips
      type: bone
      transform:
        translation: [0.0, 1.0, 0.0]
      children:
        - name: Spine
          type: bone
          transform: {translation: [0.0, 0.2, 0.0]}
          children:
            - name: Chest
              type: bone
              transform: {translation: [0.0, 0.2, 0.0]}
              children:
                - name: Neck
                  type: bone
                  transform: {translation: [0.0, 0.2, 0.0]}
                  children:
                    - name: Head
                      type: bone
                      transform: {translation: [0.0, 0.2, 0.0]}
                - name: LeftShoulder
                  type: bone
                  transform: {translation: [-0.2, 0.1, 0.0]}
                - name: RightShoulder
                  type: bone
                  transform: {translation: [0.2, 0.1, 0.0]}
"""


@pytest.fixture
def z_up_scene_yaml():
    return """\
version: "0.1"
name: blender_export
root:
  name: Export
  transform:
    translation: [1.0, 0.0, 1.0]
    scale: [-2.0, 2.0, 2.0]
  children:
    - name: Body
      type: skinned_mesh
      geometry:
        box: [0.5, 0.3, 1.8]
        center: [0.0, 0.0, 0.9]
      skeleton: [Hips, Spine, Chest, Neck, Head, LeftShoulder, RightShoulder]
    - name: Hips
      type: bone
      transform: {translation: [0.0, 0.0, 1.0]}
      children:
        - name: Spine
          type: bone
          transform: {translation: [0.0, 0.0, 0.2]}
          children:
            - name: Chest
              type: bone
              transform: {translation: [0.0, 0.0, 0.2]}
              children:
                - name: Neck
                  type: bone
                  transform: {translation: [0.0, 0.0, 0.2]}
                  children:
                    - name: Head
                      type: bone
                      transform: {translation: [0.0, 0.0, 0.2]}
                - name: LeftShoulder
                  type: bone
                  transform: {translation: [-0.2, 0.0, 0.1]}
                - name: RightShoulder
                  type: bone
                  transform: {translation: [0.2, 0.0, 0.1]}
"""
