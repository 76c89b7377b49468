"""Pydantic v2 schema models for ``*.scene.yaml`` scene descriptions."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

SUPPORTED_VERSIONS: frozenset[str] = frozenset({"0.1"})

NodeType = Literal["node", "mesh", "skinned_mesh", "bone"]


class RotationAxisAngle(BaseModel):
    model_config = ConfigDict(extra="forbid")

    axis: tuple[float, float, float]
    degrees: float

    @field_validator("axis")
    @classmethod
    def axis_non_zero(cls, v: tuple[float, float, float]) -> tuple[float, float, float]:
        if v == (0.0, 0.0, 0.0):
            raise ValueError("Rotation axis must not be the zero vector")
        return v


class TransformSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    translation: tuple[float, float, float] | None = None
    rotation_quat: tuple[float, float, float, float] | None = None  # (x, y, z, w)
    rotation_degrees: tuple[float, float, float] | None = None  # XYZ Euler
    rotation_axis_angle: RotationAxisAngle | None = None
    scale: tuple[float, float, float] | None = None

    @model_validator(mode="after")
    def _single_rotation_form(self) -> TransformSpec:
        forms = [
            self.rotation_quat is not None,
            self.rotation_degrees is not None,
            self.rotation_axis_angle is not None,
        ]
        if sum(forms) > 1:
            raise ValueError(
                "Transform must set at most one rotation form "
                "(rotation_quat, rotation_degrees, rotation_axis_angle)"
            )
        if self.rotation_quat is not None and all(c == 0 for c in self.rotation_quat):
            raise ValueError("rotation_quat must not be the zero quaternion")
        return self


class GeometrySpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    box: tuple[float, float, float] | None = None  # (width, height, depth)
    center: tuple[float, float, float] = (0.0, 0.0, 0.0)
    vertices: list[tuple[float, float, float]] | None = None

    @field_validator("box")
    @classmethod
    def box_non_negative(
        cls, v: tuple[float, float, float] | None
    ) -> tuple[float, float, float] | None:
        if v is not None and any(d < 0 for d in v):
            raise ValueError(f"Box dimensions must be >= 0, got {v}")
        return v

    @model_validator(mode="after")
    def _box_or_vertices(self) -> GeometrySpec:
        if (self.box is None) == (self.vertices is None):
            raise ValueError("Geometry must set exactly one of 'box' or 'vertices'")
        return self


class NodeSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    type: NodeType = "node"
    transform: TransformSpec | None = None
    geometry: GeometrySpec | None = None
    skeleton: list[str] | None = None
    children: list[NodeSpec] = []

    @model_validator(mode="after")
    def _validate_by_type(self) -> NodeSpec:
        if self.type in ("mesh", "skinned_mesh"):
            if self.geometry is None:
                raise ValueError(f"{self.type} {self.name!r} requires 'geometry'")
        elif self.geometry is not None:
            raise ValueError(f"{self.type} {self.name!r} must not have 'geometry'")

        if self.skeleton is not None and self.type != "skinned_mesh":
            raise ValueError(f"Only skinned_mesh nodes may list a 'skeleton', not {self.type}")
        return self


class SceneSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str
    name: str | None = None
    root: NodeSpec

    @field_validator("version")
    @classmethod
    def version_supported(cls, v: str) -> str:
        if v not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported scene version {v!r} (supported: {sorted(SUPPORTED_VERSIONS)})"
            )
        return v
