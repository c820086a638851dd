"""Tests for least squares refinement."""

import numpy as np

from robustgeo.robust.refine import refine
from robustgeo.robust.types import RefinementProblem


def _line_fit_problem(rng, homogeneous=False):
    """y = 2x + 1 with small noise, parameterized as [slope, intercept] or [a, b, c]."""
    x = np.linspace(-10.0, 10.0, 50)
    y = 2.0 * x + 1.0 + rng.normal(0.0, 0.01, size=x.shape)

    if homogeneous:
        pts = np.column_stack([x, y, np.ones_like(x)])
        return RefinementProblem(
            initial=np.array([2.2, -1.0, 0.5]),
            residuals=lambda v: (pts @ v) / np.hypot(v[0], v[1]),
            to_model=lambda v: v.copy(),
            homogeneous=True,
        )

    return RefinementProblem(
        initial=np.array([1.5, 0.0]),
        residuals=lambda v: v[0] * x + v[1] - y,
        to_model=lambda v: v.copy(),
    )


class TestRefine:

    def test_improves_initial_estimate(self, rng):
        result = refine(_line_fit_problem(rng), sigma=0.01)
        assert result is not None
        assert result.improved
        assert result.final_cost < result.initial_cost
        assert np.allclose(result.model, [2.0, 1.0], atol=1e-2)
        assert result.covariance is None

    def test_covariance(self, rng):
        result = refine(_line_fit_problem(rng), sigma=0.01, keep_covariance=True)
        assert result.covariance.shape == (2, 2)
        assert np.allclose(result.covariance, result.covariance.T)
        assert np.all(np.diag(result.covariance) > 0)

    def test_homogeneous_parameters_keep_unit_norm(self, rng):
        result = refine(_line_fit_problem(rng, homogeneous=True), sigma=0.01, keep_covariance=True)
        assert result is not None
        assert np.isclose(np.linalg.norm(result.params), 1.0)
        line = result.model / -result.model[1]
        assert np.allclose(line[[0, 2]], [2.0, 1.0], atol=1e-2)
        assert result.covariance.shape == (3, 3)

    def test_zero_homogeneous_vector(self):
        problem = RefinementProblem(
            initial=np.zeros(3),
            residuals=lambda v: v,
            to_model=lambda v: v,
            homogeneous=True,
        )
        assert refine(problem, sigma=1.0) is None

    def test_underdetermined_problem_uses_trust_region(self):
        """Fewer residuals than parameters cannot use Levenberg-Marquardt."""
        problem = RefinementProblem(
            initial=np.array([1.0, 1.0, 1.0]),
            residuals=lambda v: np.array([v[0] + v[1] + v[2] - 1.0]),
            to_model=lambda v: v.copy(),
        )
        result = refine(problem, sigma=1.0, keep_covariance=True)
        assert result is not None
        assert np.isclose(np.sum(result.model), 1.0)
        # J^T J has rank 1
        assert result.covariance is None
