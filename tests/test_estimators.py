"""
End-to-end tests: every family and method recovers a random model from exact
samples with 20% of them corrupted by gaussian noise (std 100).
"""

import numpy as np
import pytest

from robustgeo.exceptions import RobustEstimatorError
from robustgeo.estimators import (
    Line2DRobustEstimator, PlaneRobustEstimator, Point2DRobustEstimator, Point3DRobustEstimator,
    ProjectiveTransformation2DRobustEstimator,
)
from robustgeo.geometry import Line2D
from robustgeo.robust.refine import RefinementResult
from robustgeo.robust.types import CoordinatesType, RobustEstimatorMethod

from synthetic import FAMILIES, line2d_case, plane_case, point2d_case, point3d_case, projective2d_case

CASES = [(family, method) for family in FAMILIES for method in RobustEstimatorMethod]
IDS = [f"{family.__name__}-{method.value}" for family, method in CASES]

MEDIAN_METHODS = {RobustEstimatorMethod.LMEDS, RobustEstimatorMethod.PROMEDS}


def _configure(estimator, seed=7):
    if estimator.method in MEDIAN_METHODS:
        estimator.stop_threshold = 1e-6
    else:
        estimator.threshold = 1e-6
    estimator.rng = np.random.default_rng(seed)
    return estimator


def _build(family, method, rng, listener=None):
    make_case, _ = FAMILIES[family]
    case = make_case(rng)
    scores = rng.uniform(0.0, 1.0, size=case.outliers.shape[0])
    estimator = family.create(method, *case.args, quality_scores=scores, listener=listener)
    return _configure(estimator), case


# Gaussian noise on uncorrupted samples for the covariance tests
COVARIANCE_NOISE = 1e-3


def _noisy_estimator(family, case, method=RobustEstimatorMethod.LMEDS):
    estimator = family.create(method, *case.args)
    estimator.max_iterations = 300
    estimator.covariance_kept = True
    estimator.rng = np.random.default_rng(7)
    return estimator


@pytest.mark.parametrize("family, method", CASES, ids=IDS)
class TestEstimate:

    def test_recovers_model(self, family, method, rng, listener):
        estimator, case = _build(family, method, rng, listener)

        model = estimator.estimate()

        assert case.matches(model)
        assert not estimator.is_locked

        data = estimator.inliers_data
        assert data is not None
        assert np.array_equal(data.inliers, ~case.outliers)
        assert data.num_inliers == int(np.sum(~case.outliers))
        assert data.residuals.shape == case.outliers.shape
        if method in MEDIAN_METHODS:
            assert data.estimated_threshold >= estimator.stop_threshold
        else:
            assert data.estimated_threshold is None

    def test_listener_notifications(self, family, method, rng, listener):
        estimator, _ = _build(family, method, rng, listener)
        estimator.estimate()

        assert listener.start == 1
        assert listener.end == 1
        assert listener.iterations == list(range(len(listener.iterations)))
        assert len(listener.iterations) >= 1
        assert listener.progress == sorted(listener.progress)
        assert not estimator.is_locked

    def test_without_refinement(self, family, method, rng):
        estimator, case = _build(family, method, rng)
        estimator.result_refined = False
        estimator.covariance_kept = True

        assert case.matches(estimator.estimate())
        assert estimator.covariance is None
        if method in MEDIAN_METHODS:
            assert estimator.inliers_data is not None
        else:
            assert estimator.inliers_data is None

    def test_repeated_estimation(self, family, method, rng):
        estimator, case = _build(family, method, rng)
        first = estimator.estimate()
        second = estimator.estimate()
        assert case.matches(first)
        assert case.matches(second)


class TestLocusOfUncorruptedSamples:

    def test_line(self, rng):
        case = line2d_case(rng)
        estimator = _configure(Line2DRobustEstimator.create(RobustEstimatorMethod.MSAC, *case.args))
        line = estimator.estimate()
        points = case.args[0][~case.outliers]
        assert np.all(np.abs(line.signed_distance(points)) < 1e-6)

    def test_plane(self, rng):
        case = plane_case(rng)
        estimator = _configure(PlaneRobustEstimator.create(RobustEstimatorMethod.LMEDS, *case.args))
        plane = estimator.estimate()
        points = case.args[0][~case.outliers]
        assert np.all(np.abs(plane.signed_distance(points)) < 1e-6)


class TestInliersDataFlags:

    def test_keep_inliers_only(self, rng):
        case = line2d_case(rng)
        estimator = _configure(Line2DRobustEstimator.create(RobustEstimatorMethod.RANSAC, *case.args))
        estimator.result_refined = False
        estimator.compute_and_keep_inliers = True

        estimator.estimate()
        data = estimator.inliers_data
        assert np.array_equal(data.inliers, ~case.outliers)
        assert data.residuals is None

    def test_keep_residuals_only(self, rng):
        case = line2d_case(rng)
        scores = rng.uniform(size=case.outliers.shape[0])
        estimator = _configure(
            Line2DRobustEstimator.create(RobustEstimatorMethod.PROSAC, *case.args, quality_scores=scores)
        )
        estimator.result_refined = False
        estimator.compute_and_keep_residuals = True

        estimator.estimate()
        data = estimator.inliers_data
        assert data.inliers is None
        assert data.residuals.shape == case.outliers.shape


class TestPointCoordinates:

    @pytest.mark.parametrize("coordinates, size", [
        (CoordinatesType.INHOMOGENEOUS, 2), (CoordinatesType.HOMOGENEOUS, 3),
    ])
    def test_point2d_covariance(self, rng, coordinates, size):
        case = point2d_case(rng, inlier_std=COVARIANCE_NOISE)
        estimator = _noisy_estimator(Point2DRobustEstimator, case)
        estimator.refinement_coordinates_type = coordinates

        estimator.estimate()
        assert estimator.covariance.shape == (size, size)

    @pytest.mark.parametrize("coordinates, size", [
        (CoordinatesType.INHOMOGENEOUS, 3), (CoordinatesType.HOMOGENEOUS, 4),
    ])
    def test_point3d_covariance(self, rng, coordinates, size):
        case = point3d_case(rng, inlier_std=COVARIANCE_NOISE)
        estimator = _noisy_estimator(Point3DRobustEstimator, case)
        estimator.refinement_coordinates_type = coordinates

        estimator.estimate()
        assert estimator.covariance.shape == (size, size)

    def test_lines_as_primitives(self, rng):
        case = point2d_case(rng)
        lines = [Line2D.from_array(row) for row in case.args[0]]
        estimator = _configure(Point2DRobustEstimator.create(RobustEstimatorMethod.LMEDS, lines))
        assert case.matches(estimator.estimate())


class TestFailures:

    def test_degenerate_samples_raise_and_unlock(self):
        estimator = Line2DRobustEstimator.create(RobustEstimatorMethod.RANSAC, np.ones((10, 2)))
        estimator.max_iterations = 10

        with pytest.raises(RobustEstimatorError):
            estimator.estimate()
        assert not estimator.is_locked
        assert estimator.inliers_data is None

    def test_listener_error_propagates_and_unlocks(self, rng):
        class FailingListener:
            def on_estimate_start(self, estimator):
                raise RuntimeError("boom")

        case = line2d_case(rng)
        estimator = Line2DRobustEstimator.create(
            RobustEstimatorMethod.LMEDS, *case.args, listener=FailingListener(),
        )
        with pytest.raises(RuntimeError):
            estimator.estimate()
        assert not estimator.is_locked

        estimator.listener = None
        assert case.matches(estimator.estimate())


@pytest.mark.parametrize("family", list(FAMILIES), ids=[family.__name__ for family in FAMILIES])
class TestCovariance:

    def test_kept_with_refined_model(self, family, rng):
        make_case, n_params = FAMILIES[family]
        estimator = _noisy_estimator(family, make_case(rng, inlier_std=COVARIANCE_NOISE))

        estimator.estimate()

        cov = estimator.covariance
        assert cov is not None
        assert cov.shape == (n_params, n_params)
        assert np.all(np.isfinite(cov))
        assert np.all(np.diag(cov) > 0.0)

    def test_not_kept_when_not_requested(self, family, rng):
        make_case, _ = FAMILIES[family]
        estimator = _noisy_estimator(family, make_case(rng, inlier_std=COVARIANCE_NOISE))
        estimator.covariance_kept = False

        estimator.estimate()
        assert estimator.covariance is None


class TestRefinementOutcome:

    def test_covariance_dropped_with_rejected_refinement(self, rng, monkeypatch):
        case = line2d_case(rng)
        estimator = _configure(Line2DRobustEstimator.create(RobustEstimatorMethod.RANSAC, *case.args))
        estimator.covariance_kept = True
        worse = Line2D(1.0, 0.0, 0.0)

        def not_improved(problem, **kwargs):
            return RefinementResult(
                model=worse,
                params=worse.as_array(),
                initial_cost=0.0,
                final_cost=1.0,
                improved=False,
                covariance=np.eye(3),
            )

        monkeypatch.setattr("robustgeo.robust.estimator.refine", not_improved)

        line = estimator.estimate()
        assert case.matches(line)
        assert line is not worse
        assert estimator.covariance is None

    def test_covariance_kept_with_accepted_refinement(self, rng, monkeypatch):
        case = line2d_case(rng)
        estimator = _configure(Line2DRobustEstimator.create(RobustEstimatorMethod.RANSAC, *case.args))
        estimator.covariance_kept = True
        refined = Line2D(1.0, 0.0, 0.0)
        cov = np.eye(3)

        def improved(problem, **kwargs):
            return RefinementResult(
                model=refined, params=refined.as_array(),
                initial_cost=1.0, final_cost=0.0, improved=True, covariance=cov,
            )

        monkeypatch.setattr("robustgeo.robust.estimator.refine", improved)

        assert estimator.estimate() is refined
        assert estimator.covariance is cov


@pytest.mark.parametrize("method", sorted(MEDIAN_METHODS, key=lambda m: m.value))
class TestMedianMethodsAcrossSeeds:

    @pytest.mark.parametrize("seed", range(5))
    def test_recovers_line(self, method, seed):
        rng = np.random.default_rng(seed)
        case = line2d_case(rng)
        scores = rng.uniform(0.0, 1.0, size=case.outliers.shape[0])
        estimator = _configure(Line2DRobustEstimator.create(method, *case.args, quality_scores=scores), seed)

        assert case.matches(estimator.estimate())
        assert np.array_equal(estimator.inliers_data.inliers, ~case.outliers)

    @pytest.mark.parametrize("seed", range(5))
    def test_recovers_projective_transformation(self, method, seed):
        rng = np.random.default_rng(seed)
        case = projective2d_case(rng)
        scores = rng.uniform(0.0, 1.0, size=case.outliers.shape[0])
        estimator = _configure(
            ProjectiveTransformation2DRobustEstimator.create(method, *case.args, quality_scores=scores), seed,
        )

        assert case.matches(estimator.estimate())
