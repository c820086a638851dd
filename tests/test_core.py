"""Tests for the generic consensus loops."""

import numpy as np
import pytest

from robustgeo.exceptions import RobustEstimatorError
from robustgeo.fitters import Line2DFitter
from robustgeo.robust import core
from robustgeo.robust.types import RobustEstimatorMethod

from synthetic import line2d_case


def _fitter(rng):
    case = line2d_case(rng)
    return Line2DFitter(case.args[0]), case


class TestRequiredIterations:

    def test_all_inliers(self):
        assert core._required_iter_for_confidence(p_all_inliers=0.99, inlier_ratio=1.0, sample_size=4) == 1

    def test_no_inliers(self):
        assert core._required_iter_for_confidence(p_all_inliers=0.99, inlier_ratio=0.0, sample_size=4) >= 10 ** 9

    def test_known_value(self):
        # log(0.01) / log(1 - 0.5^2) = 16.008...
        assert core._required_iter_for_confidence(p_all_inliers=0.99, inlier_ratio=0.5, sample_size=2) == 17

    def test_more_samples_need_more_iterations(self):
        k2 = core._required_iter_for_confidence(p_all_inliers=0.99, inlier_ratio=0.7, sample_size=2)
        k5 = core._required_iter_for_confidence(p_all_inliers=0.99, inlier_ratio=0.7, sample_size=5)
        assert k5 > k2

    def test_invalid_sample_size(self):
        with pytest.raises(ValueError):
            core._required_iter_for_confidence(p_all_inliers=0.99, inlier_ratio=0.5, sample_size=0)


class TestConsensusLoops:

    def test_ransac(self, rng):
        fitter, case = _fitter(rng)
        res = core.ransac(fitter, threshold=1e-6, rng=rng)
        assert case.matches(res.model)
        assert np.array_equal(res.inliers, ~case.outliers)
        assert res.num_inliers == int(np.sum(~case.outliers))
        assert res.threshold == 1e-6
        assert res.residuals.shape == (fitter.total_samples(),)

    def test_msac(self, rng):
        fitter, case = _fitter(rng)
        res = core.msac(fitter, threshold=1e-6, rng=rng)
        assert case.matches(res.model)
        assert np.array_equal(res.inliers, ~case.outliers)

    def test_lmeds_estimates_threshold(self, rng):
        fitter, case = _fitter(rng)
        res = core.lmeds(fitter, stop_threshold=1e-6, rng=rng)
        assert case.matches(res.model)
        # exact inliers: the estimated threshold falls back to the stop threshold
        assert res.threshold == 1e-6
        assert np.array_equal(res.inliers, ~case.outliers)

    def test_prosac(self, rng):
        fitter, case = _fitter(rng)
        scores = np.where(case.outliers, 0.0, 1.0) + rng.uniform(0.0, 0.5, size=case.outliers.shape)
        res = core.prosac(fitter, quality_scores=scores, threshold=1e-6, rng=rng)
        assert case.matches(res.model)
        assert res.num_inliers == int(np.sum(~case.outliers))

    def test_promeds(self, rng):
        fitter, case = _fitter(rng)
        scores = rng.uniform(0.0, 1.0, size=case.outliers.shape)
        res = core.promeds(fitter, quality_scores=scores, stop_threshold=1e-6, rng=rng)
        assert case.matches(res.model)

    def test_quality_scores_size_mismatch(self, rng):
        fitter, _ = _fitter(rng)
        with pytest.raises(ValueError):
            core.prosac(fitter, quality_scores=np.ones(3), threshold=1e-6, rng=rng)

    def test_method_runners(self):
        assert set(core.METHOD_RUNNERS) == set(RobustEstimatorMethod)
        assert core.METHOD_RUNNERS[RobustEstimatorMethod.MSAC] is core.msac


class _ScriptedFitter:
    """Returns the given residual vectors as models, one per draw, repeating the last one."""

    sample_size = 2

    def __init__(self, *models):
        self.models = list(models)
        self.draws = 0

    def total_samples(self):
        return self.models[0].shape[0]

    def fit_minimal(self, indices):
        model = self.models[min(self.draws, len(self.models) - 1)]
        self.draws += 1
        return [model]

    def residuals(self, model):
        return model


SPREAD = np.linspace(1.0, 2.0, 100)
EXACT_80 = np.where(np.arange(100) < 80, 0.0, 50.0)


@pytest.mark.parametrize("run", [core.lmeds, core.promeds], ids=["lmeds", "promeds"])
class TestMedianIterationCount:

    def _run(self, run, fitter, rng, **kwargs):
        if run is core.promeds:
            kwargs["quality_scores"] = np.ones(fitter.total_samples())
        return run(fitter, stop_threshold=1e-6, rng=rng, **kwargs)

    def test_estimated_threshold_does_not_shrink_iterations(self, run, rng):
        # Every sample is within the estimated threshold of the first model,
        # none within the stop threshold
        res = self._run(run, _ScriptedFitter(SPREAD, EXACT_80), rng)
        assert res.model is EXACT_80
        assert res.iterations == 2

    def test_starts_from_half_outliers_bound(self, run, rng):
        res = self._run(run, _ScriptedFitter(SPREAD), rng)
        assert res.iterations == core._median_initial_target(0.99, 2) == 17

    def test_max_iterations_caps_initial_bound(self, run, rng):
        res = self._run(run, _ScriptedFitter(SPREAD), rng, max_iterations=5)
        assert res.iterations == 5


class TestNotifications:

    def test_iterations_are_consecutive_from_zero(self, rng):
        fitter, _ = _fitter(rng)
        iterations = []
        res = core.ransac(fitter, threshold=1e-6, rng=rng, on_iteration=iterations.append)
        assert iterations == list(range(res.iterations))

    def test_progress_is_throttled_and_non_decreasing(self, rng):
        fitter, _ = _fitter(rng)
        progress = []
        core.ransac(
            fitter, threshold=1e-6, rng=rng, confidence=0.999999,
            progress_delta=0.1, on_progress=progress.append,
        )
        assert progress == sorted(progress)
        assert all(0.0 < p <= 1.0 for p in progress)
        assert all(b - a >= 0.1 - 1e-12 for a, b in zip(progress, progress[1:]))


class TestFailures:

    def test_degenerate_samples(self, rng):
        """Coincident points never give a line."""
        fitter = Line2DFitter(np.ones((10, 2)))
        with pytest.raises(RobustEstimatorError):
            core.ransac(fitter, threshold=1e-6, max_iterations=20, rng=rng)

    def test_not_enough_samples(self, rng):
        fitter = Line2DFitter(np.array([[0.0, 0.0]]))
        with pytest.raises(RobustEstimatorError):
            core.lmeds(fitter, stop_threshold=1e-6, rng=rng)

    def test_invalid_max_iterations(self, rng):
        fitter, _ = _fitter(rng)
        with pytest.raises(ValueError):
            core.msac(fitter, threshold=1e-6, max_iterations=0, rng=rng)

    def test_exhausted_iterations_return_best_model(self, rng):
        fitter, _ = _fitter(rng)
        res = core.ransac(fitter, threshold=1e-6, max_iterations=1, rng=rng)
        assert res.iterations == 1
