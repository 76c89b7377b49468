"""Tests for model statistics and display normalization."""

import pytest
from numpy.testing import assert_allclose

from orienty.inspection import (
    analyze_model,
    calculate_normalization,
    format_display_scale,
    inspect_scene,
    needs_normalization,
    render_text,
)
from orienty.scene import NodeKind, SceneNode, make_box_mesh


class TestAnalyzeModel:
    def test_humanoid(self, humanoid):
        info = analyze_model(humanoid)
        assert info.vertex_count == 8
        assert info.mesh_count == 1
        assert info.bone_count == 7
        assert info.has_skeleton
        assert info.rig_type == "custom"
        assert_allclose(info.dimensions, [0.8, 1.8, 0.8])
        assert_allclose(info.center, [0.0, 0.9, 0.0])

    def test_prop_has_no_rig_type(self, make_box_prop):
        info = analyze_model(make_box_prop(1, 2, 3))
        assert info.bone_count == 0
        assert not info.has_skeleton
        assert info.rig_type is None

    def test_counts_all_meshes(self):
        root = SceneNode("root")
        root.add(make_box_mesh(1, 1, 1), make_box_mesh(1, 1, 1, center=(3, 0, 0)))
        info = analyze_model(root)
        assert info.mesh_count == 2
        assert info.vertex_count == 16
        assert_allclose(info.dimensions, [4, 1, 1])

    def test_empty_scene(self):
        info = analyze_model(SceneNode("empty"))
        assert info.vertex_count == 0
        assert_allclose(info.dimensions, [0, 0, 0])
        assert_allclose(info.center, [0, 0, 0])


class TestCalculateNormalization:
    def test_small_model_untouched(self, humanoid):
        norm = calculate_normalization(humanoid)
        assert norm.scale_factor == 1.0
        assert norm.max_dimension == pytest.approx(1.8)
        assert_allclose(norm.center_offset, [0.0, -0.9, 0.0])

    def test_large_model_scaled_down(self, make_box_prop):
        norm = calculate_normalization(make_box_prop(10, 4, 2))
        assert norm.scale_factor == pytest.approx(0.2)
        assert_allclose(norm.original_dimensions, [10, 4, 2])
        assert_allclose(norm.center_offset, [0, -2, 0])

    def test_never_scales_up(self, make_box_prop):
        assert calculate_normalization(make_box_prop(0.01, 0.01, 0.01)).scale_factor == 1.0

    def test_custom_target(self, make_box_prop):
        norm = calculate_normalization(make_box_prop(4, 1, 1), target_max_dimension=1.0)
        assert norm.scale_factor == pytest.approx(0.25)

    def test_empty_scene(self):
        root = SceneNode("root")
        root.add(SceneNode("bone", NodeKind.BONE))
        norm = calculate_normalization(root)
        assert norm.scale_factor == 1.0
        assert norm.max_dimension == 0.0
        assert_allclose(norm.center_offset, [0, 0, 0])


class TestDisplayScale:
    @pytest.mark.parametrize(
        ("factor", "expected"),
        [
            (1.0, "1:1 (Actual Size)"),
            (0.995, "1:1 (Actual Size)"),
            (0.01, "1:100"),
            (0.2, "1:5"),
            (3.0, "3:1"),
        ],
    )
    def test_format(self, factor, expected):
        assert format_display_scale(factor) == expected

    def test_needs_normalization(self):
        assert not needs_normalization(3.0)
        assert needs_normalization(3.01)
        assert needs_normalization(1.6, target_size=1.0)


class TestInspectScene:
    def test_payload(self, humanoid):
        payload = inspect_scene(humanoid)
        model = payload["model"]
        assert model["bone_count"] == 7
        assert model["rig_type"] == "custom"
        assert model["bounds"]["min"] == pytest.approx([-0.4, 0.0, -0.4])
        assert model["bounds"]["max"] == pytest.approx([0.4, 1.8, 0.4])
        norm = payload["normalization"]
        assert norm["display_scale"] == "1:1 (Actual Size)"
        assert norm["needs_normalization"] is False

    def test_render_text(self, make_box_prop):
        text = render_text(inspect_scene(make_box_prop(10, 4, 2)))
        lines = text.splitlines()
        assert lines[0] == "model:"
        assert "  vertex_count: 8" in lines
        assert "  has_skeleton: false" in lines
        assert "  rig_type: -" in lines
        assert "  dimensions: [10, 4, 2]" in lines
        assert "  display_scale: 1:5" in lines
        assert "  needs_normalization: true" in lines
        assert text.endswith("\n")
