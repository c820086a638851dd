"""Tests for affine / projective transformation utilities."""

import numpy as np
import pytest

from robustgeo.geometry import (
    affine_from_params, affine_params, apply_affine, apply_projective,
    fit_affine_least_squares, fit_affine_minimal, fit_projective, transfer_residuals,
    fit_affine_from_hyperplanes, fit_projective_from_hyperplanes, hyperplane_residuals,
    transform_hyperplanes,
)

from synthetic import random_affine, random_projective


def _normalized(H):
    H = H / np.linalg.norm(H)
    return H if H.flat[np.argmax(np.abs(H))] > 0 else -H


class TestAffine:

    @pytest.mark.parametrize("dim", [2, 3])
    def test_minimal_fit(self, rng, dim):
        T = random_affine(rng, dim)
        src = rng.uniform(-100.0, 100.0, size=(dim + 1, dim))
        T_est = fit_affine_minimal(src, apply_affine(T, src))
        assert np.allclose(T_est, T, atol=1e-8)

    def test_minimal_fit_collinear(self):
        src = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]])
        assert fit_affine_minimal(src, src) is None

    def test_minimal_fit_coplanar(self):
        src = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1.0, 1.0, 0.0]])
        assert fit_affine_minimal(src, src) is None

    def test_minimal_fit_wrong_count(self, rng):
        src = rng.uniform(size=(4, 2))
        with pytest.raises(ValueError):
            fit_affine_minimal(src, src)

    @pytest.mark.parametrize("dim", [2, 3])
    def test_least_squares(self, rng, dim):
        T = random_affine(rng, dim)
        src = rng.uniform(-100.0, 100.0, size=(30, dim))
        dst = apply_affine(T, src) + rng.normal(0.0, 1e-3, size=(30, dim))
        T_est = fit_affine_least_squares(src, dst)
        assert np.allclose(T_est, T, atol=1e-2)

    def test_least_squares_rank_deficient(self):
        src = np.column_stack([np.arange(10.0), np.arange(10.0)])
        assert fit_affine_least_squares(src, src) is None

    def test_params_round_trip(self, rng):
        T = random_affine(rng, 3)
        theta = affine_params(T)
        assert theta.shape == (12,)
        assert np.array_equal(affine_from_params(theta, 3), T)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            transfer_residuals(np.eye(3), np.zeros((3, 2)), np.zeros((4, 2)))


class TestProjective:

    @pytest.mark.parametrize("dim, n", [(2, 4), (3, 5), (2, 20), (3, 20)])
    def test_fit(self, rng, dim, n):
        H = random_projective(rng, dim)
        src = rng.uniform(-100.0, 100.0, size=(n, dim))
        H_est = fit_projective(src, apply_projective(H, src))
        assert np.allclose(_normalized(H_est), _normalized(H), atol=1e-8)

    def test_not_enough_points(self, rng):
        src = rng.uniform(size=(3, 2))
        assert fit_projective(src, src) is None

    def test_collinear_points(self):
        src = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])
        assert fit_projective(src, src) is None

    def test_apply_matches_manual_division(self, rng):
        H = random_projective(rng, 2)
        pts = rng.uniform(-100.0, 100.0, size=(10, 2))
        ph = np.column_stack([pts, np.ones(10)]) @ H.T
        assert np.allclose(apply_projective(H, pts), ph[:, :2] / ph[:, 2:])

    def test_apply_3d(self, rng):
        H = random_projective(rng, 3)
        pts = rng.uniform(-100.0, 100.0, size=(10, 3))
        ph = np.column_stack([pts, np.ones(10)]) @ H.T
        assert np.allclose(apply_projective(H, pts), ph[:, :3] / ph[:, 3:])

    def test_transfer_residuals(self, rng):
        H = random_projective(rng, 2)
        src = rng.uniform(-100.0, 100.0, size=(10, 2))
        dst = apply_projective(H, src)
        dst[0] += [3.0, 4.0]
        err = transfer_residuals(H, src, dst, projective=True)
        assert np.isclose(err[0], 5.0)
        assert np.all(err[1:] < 1e-8)

    def test_wrong_matrix_size(self):
        with pytest.raises(ValueError):
            apply_projective(np.eye(4), np.zeros((3, 2)))


def _hyperplanes(rng, n, dim):
    h = rng.uniform(-1.0, 1.0, size=(n, dim + 1))
    return h / np.linalg.norm(h, axis=1, keepdims=True)


class TestHyperplanes:

    @pytest.mark.parametrize("dim", [2, 3])
    def test_transform_keeps_incidence(self, rng, dim):
        T = random_projective(rng, dim)
        h = _hyperplanes(rng, 10, dim)
        xh = np.column_stack([rng.uniform(-10.0, 10.0, size=(10, dim)), np.ones(10)])

        mapped = np.sum(transform_hyperplanes(T, h) * (xh @ T.T), axis=1)
        assert np.allclose(mapped, np.sum(h * xh, axis=1))

    @pytest.mark.parametrize("dim, n", [(2, 4), (2, 20), (3, 5), (3, 20)])
    def test_projective_fit(self, rng, dim, n):
        H = random_projective(rng, dim)
        h0 = _hyperplanes(rng, n, dim)
        # Hyperplanes are defined up to scale, including sign
        h1 = transform_hyperplanes(H, h0) * rng.uniform(-2.0, 2.0, size=(n, 1))

        H_est = fit_projective_from_hyperplanes(h0, h1)
        assert np.allclose(_normalized(H_est), _normalized(H), atol=1e-8)

    @pytest.mark.parametrize("dim, n", [(2, 3), (2, 20), (3, 4), (3, 20)])
    def test_affine_fit(self, rng, dim, n):
        T = random_affine(rng, dim)
        h0 = _hyperplanes(rng, n, dim)
        h1 = transform_hyperplanes(T, h0) * rng.uniform(0.5, 2.0, size=(n, 1))

        T_est = fit_affine_from_hyperplanes(h0, h1)
        assert np.allclose(T_est, T, atol=1e-8)

    def test_not_enough_hyperplanes(self, rng):
        h = _hyperplanes(rng, 3, 2)
        assert fit_projective_from_hyperplanes(h, h) is None
        assert fit_affine_from_hyperplanes(h[:2], h[:2]) is None

    def test_concurrent_lines(self):
        # Lines through the origin are kept by any scaling about it
        h = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1.0, 1.0, 0.0]])
        assert fit_affine_from_hyperplanes(h, h) is None

        h4 = np.vstack([h, [1.0, 2.0, 3.0]])
        assert fit_projective_from_hyperplanes(h4, h4) is None

    def test_residuals(self):
        T = np.eye(3)
        h0 = np.array([[1.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0]])
        h1 = np.array([[-2.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1.0, 0.0, 0.0]])

        e = hyperplane_residuals(T, h0, h1)
        assert np.allclose(e, [0.0, 1.0, 1.0 - np.sqrt(0.5)])

    def test_residuals_of_exact_correspondences(self, rng):
        H = random_projective(rng, 3)
        h0 = _hyperplanes(rng, 10, 3)
        assert np.all(hyperplane_residuals(H, h0, transform_hyperplanes(H, h0)) < 1e-12)

    def test_shape_mismatch(self, rng):
        with pytest.raises(ValueError):
            fit_affine_from_hyperplanes(_hyperplanes(rng, 5, 2), _hyperplanes(rng, 5, 3))
        with pytest.raises(ValueError):
            hyperplane_residuals(np.eye(2), np.ones((3, 2)), np.ones((3, 2)))
