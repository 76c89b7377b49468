"""Tests for vector, basis and quaternion math."""

import math

import numpy as np
from numpy.testing import assert_allclose

from orienty.math_utils import (
    IDENTITY_QUAT,
    angle_between_vectors,
    compose_matrix,
    deviation_degrees,
    extract_basis_vectors,
    matrix3x3_determinant,
    normalize,
    quat_multiply,
    quat_rotate,
    quaternion_from_axis_angle,
    quaternion_from_euler_degrees,
    rounded,
    vec3,
    vectors_approximately_equal,
)

ATOL = 1e-9


class TestExtractBasisVectors:
    def test_identity(self):
        basis = extract_basis_vectors(IDENTITY_QUAT)
        assert_allclose(basis.right, [1, 0, 0], atol=ATOL)
        assert_allclose(basis.up, [0, 1, 0], atol=ATOL)
        assert_allclose(basis.forward, [0, 0, -1], atol=ATOL)

    def test_90_degrees_about_y(self):
        q = quaternion_from_axis_angle(vec3(0, 1, 0), 90)
        basis = extract_basis_vectors(q)
        assert_allclose(basis.forward, [-1, 0, 0], atol=ATOL)
        assert_allclose(basis.right, [0, 0, -1], atol=ATOL)
        assert_allclose(basis.up, [0, 1, 0], atol=ATOL)

    def test_90_degrees_about_x_gives_z_up(self):
        q = quaternion_from_axis_angle(vec3(1, 0, 0), 90)
        basis = extract_basis_vectors(q)
        assert_allclose(basis.up, [0, 0, 1], atol=ATOL)
        assert_allclose(basis.forward, [0, 1, 0], atol=ATOL)

    def test_basis_is_orthonormal(self):
        q = quaternion_from_euler_degrees(30, 45, 60)
        basis = extract_basis_vectors(q)
        for v in basis:
            assert math.isclose(np.linalg.norm(v), 1.0, abs_tol=ATOL)
        assert abs(np.dot(basis.right, basis.up)) < ATOL
        assert abs(np.dot(basis.up, basis.forward)) < ATOL
        assert abs(np.dot(basis.right, basis.forward)) < ATOL


class TestApproximatelyEqual:
    def test_reflexive(self):
        for v in (vec3(1, 0, 0), vec3(0.3, -0.2, 0.9), vec3(-5, 2, 1)):
            assert vectors_approximately_equal(v, v)

    def test_within_five_degrees(self):
        a = vec3(0, 1, 0)
        b = quat_rotate(quaternion_from_axis_angle(vec3(1, 0, 0), 4.0), a)
        assert vectors_approximately_equal(a, b)

    def test_outside_threshold(self):
        a = vec3(0, 1, 0)
        b = quat_rotate(quaternion_from_axis_angle(vec3(1, 0, 0), 10.0), a)
        assert not vectors_approximately_equal(a, b)

    def test_opposite_never_equal(self):
        a = vec3(0, 0, -1)
        for threshold in (0.996, 0.5, 0.0, -0.99):
            assert not vectors_approximately_equal(a, -a, threshold)

    def test_length_is_ignored(self):
        assert vectors_approximately_equal(vec3(0, 5, 0), vec3(0, 0.1, 0))


class TestDeterminant:
    def test_pure_rotation(self):
        for q in (
            IDENTITY_QUAT,
            quaternion_from_axis_angle(vec3(0, 1, 0), 90),
            quaternion_from_euler_degrees(10, 20, 30),
        ):
            det = matrix3x3_determinant(compose_matrix(np.zeros(3), q, np.ones(3)))
            assert math.isclose(det, 1.0, abs_tol=1e-9)

    def test_single_axis_mirror(self):
        m = compose_matrix(np.zeros(3), IDENTITY_QUAT, vec3(-1, 1, 1))
        assert math.isclose(matrix3x3_determinant(m), -1.0)

    def test_uniform_scale_cubes(self):
        m = compose_matrix(np.zeros(3), IDENTITY_QUAT, vec3(2, 2, 2))
        assert math.isclose(matrix3x3_determinant(m), 8.0)

    def test_accepts_3x3(self):
        assert math.isclose(matrix3x3_determinant(np.diag([1.0, 2.0, 3.0])), 6.0)

    def test_translation_ignored(self):
        m = compose_matrix(vec3(5, -3, 2), IDENTITY_QUAT, np.ones(3))
        assert math.isclose(matrix3x3_determinant(m), 1.0)


class TestQuaternions:
    def test_multiply_identity(self):
        q = quaternion_from_euler_degrees(15, 25, 35)
        assert_allclose(quat_multiply(IDENTITY_QUAT, q), q, atol=ATOL)
        assert_allclose(quat_multiply(q, IDENTITY_QUAT), q, atol=ATOL)

    def test_multiply_composes(self):
        q90 = quaternion_from_axis_angle(vec3(0, 0, 1), 90)
        q180 = quat_multiply(q90, q90)
        assert_allclose(quat_rotate(q180, vec3(1, 0, 0)), [-1, 0, 0], atol=ATOL)

    def test_euler_applies_x_first(self):
        q = quaternion_from_euler_degrees(90, 90, 0)
        # X turns +Y into +Z, then Y turns +Z into +X
        assert_allclose(quat_rotate(q, vec3(0, 1, 0)), [1, 0, 0], atol=ATOL)

    def test_axis_is_normalized(self):
        q = quaternion_from_axis_angle(vec3(0, 10, 0), 180)
        assert_allclose(q, [0, 1, 0, 0], atol=ATOL)


class TestCompose:
    def test_trs_order(self):
        q = quaternion_from_axis_angle(vec3(0, 0, 1), 90)
        m = compose_matrix(vec3(1, 2, 3), q, vec3(2, 1, 1))
        p = m @ np.array([1.0, 0.0, 0.0, 1.0])
        # scale x2, rotate +X onto +Y, then translate
        assert_allclose(p[:3], [1, 4, 3], atol=ATOL)


class TestHelpers:
    def test_normalize_zero(self):
        assert_allclose(normalize(np.zeros(3)), [0, 0, 0])

    def test_normalize(self):
        assert_allclose(normalize(vec3(3, 0, 4)), [0.6, 0, 0.8])

    def test_angle_between(self):
        assert math.isclose(angle_between_vectors(vec3(1, 0, 0), vec3(0, 1, 0)), math.pi / 2)
        assert math.isclose(deviation_degrees(vec3(0, 0, 1), vec3(0, 0, -1)), 180.0)

    def test_angle_clamps_rounding(self):
        v = vec3(0.1, 0.2, 0.3)
        assert deviation_degrees(v, v * 3) < 1e-4

    def test_rounded(self):
        assert rounded(vec3(0.12345, -1.0, 2.0004)) == {"x": 0.123, "y": -1.0, "z": 2.0}
