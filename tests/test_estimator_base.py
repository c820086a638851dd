"""
Tests for configuration, validation, readiness and factories, shared by every
estimator family and method.
"""

import numpy as np
import pytest

from robustgeo.exceptions import LockedError, NotReadyError
from robustgeo.estimators import (
    AffineTransformation2DRobustEstimator, ConicRobustEstimator, DualConicRobustEstimator,
    DualQuadricRobustEstimator, Line2DRobustEstimator,
    LineCorrespondenceProjectiveTransformation2DRobustEstimator,
    PlaneCorrespondenceAffineTransformation3DRobustEstimator,
    Point2DRobustEstimator, Point3DRobustEstimator, QuadricRobustEstimator, SphereRobustEstimator,
)
from robustgeo.estimators.base import (
    HyperplaneSetRobustEstimator, IntersectionRobustEstimator,
    LineCorrespondenceRobustEstimator, PlaneCorrespondenceRobustEstimator,
)
from robustgeo.geometry import Line2D, Plane
from robustgeo.robust.types import CoordinatesType, RobustEstimatorMethod

from synthetic import FAMILIES

SCORE_METHODS = {RobustEstimatorMethod.PROSAC, RobustEstimatorMethod.PROMEDS}
THRESHOLD_METHODS = {RobustEstimatorMethod.RANSAC, RobustEstimatorMethod.MSAC, RobustEstimatorMethod.PROSAC}

CASES = [(family, method) for family in FAMILIES for method in RobustEstimatorMethod]
IDS = [f"{family.__name__}-{method.value}" for family, method in CASES]


def _samples(family, rng, n=20):
    make_case, _ = FAMILIES[family]
    return make_case(rng, n=n).args


def _estimator_class(family, method):
    return type(family.create(method))


@pytest.mark.parametrize("family, method", CASES, ids=IDS)
class TestDefaults:

    def test_factory_returns_method_class(self, family, method):
        estimator = family.create(method)
        assert isinstance(estimator, family)
        assert estimator.method is method
        assert type(estimator).__name__ == f"{_prefix(method)}{family.__name__}"

    def test_factory_accepts_method_name(self, family, method):
        assert type(family.create(method.value)) is _estimator_class(family, method)

    def test_default_state(self, family, method):
        estimator = _estimator_class(family, method)()

        assert estimator.confidence == family.DEFAULT_CONFIDENCE == 0.99
        assert estimator.max_iterations == family.DEFAULT_MAX_ITERATIONS == 5000
        assert estimator.progress_delta == family.DEFAULT_PROGRESS_DELTA == 0.05
        assert estimator.listener is None
        assert not estimator.is_listener_available
        assert not estimator.is_locked
        assert estimator.result_refined
        assert not estimator.covariance_kept
        assert estimator.quality_scores is None
        assert estimator.inliers_data is None
        assert estimator.covariance is None
        assert not estimator.is_ready

        if method in THRESHOLD_METHODS:
            assert estimator.threshold == family.DEFAULT_THRESHOLD
            assert not estimator.compute_and_keep_inliers
            assert not estimator.compute_and_keep_residuals
        else:
            assert estimator.stop_threshold == family.DEFAULT_STOP_THRESHOLD

    def test_factory_matches_constructor(self, family, method):
        created = family.create(method)
        built = _estimator_class(family, method)()
        for name in ("confidence", "max_iterations", "progress_delta", "listener",
                     "result_refined", "covariance_kept", "quality_scores", "is_ready"):
            assert getattr(created, name) == getattr(built, name)

    def test_constructor_with_samples(self, family, method, rng, listener):
        args = _samples(family, rng)
        scores = np.ones(20)
        estimator = family.create(method, *args, quality_scores=scores, listener=listener)

        assert estimator.listener is listener
        assert estimator.is_listener_available
        assert estimator.is_ready
        if method in SCORE_METHODS:
            assert estimator.quality_scores is scores
        else:
            assert estimator.quality_scores is None

    def test_constructor_with_too_few_samples(self, family, method, rng):
        args = _samples(family, rng, n=family.MINIMUM_SIZE)
        short = tuple(a[:-1] for a in args)
        with pytest.raises(ValueError):
            _estimator_class(family, method)(*short)


@pytest.mark.parametrize("family, method", CASES, ids=IDS)
class TestValidation:

    def test_confidence(self, family, method):
        estimator = family.create(method)
        estimator.confidence = 0.5
        assert estimator.confidence == 0.5
        for bad in (-1.0, 2.0):
            with pytest.raises(ValueError):
                estimator.confidence = bad
        assert estimator.confidence == 0.5

    def test_max_iterations(self, family, method):
        estimator = family.create(method)
        estimator.max_iterations = 10
        assert estimator.max_iterations == 10
        with pytest.raises(ValueError):
            estimator.max_iterations = 0
        assert estimator.max_iterations == 10

    def test_progress_delta(self, family, method):
        estimator = family.create(method)
        estimator.progress_delta = 0.5
        assert estimator.progress_delta == 0.5
        for bad in (-1.0, 2.0):
            with pytest.raises(ValueError):
                estimator.progress_delta = bad
        assert estimator.progress_delta == 0.5

    def test_thresholds(self, family, method):
        estimator = family.create(method)
        name = "threshold" if method in THRESHOLD_METHODS else "stop_threshold"
        setattr(estimator, name, 0.5)
        assert getattr(estimator, name) == 0.5
        for bad in (0.0, -1.0):
            with pytest.raises(ValueError):
                setattr(estimator, name, bad)
        assert getattr(estimator, name) == 0.5

    def test_flags(self, family, method):
        estimator = family.create(method)
        estimator.result_refined = False
        estimator.covariance_kept = True
        assert not estimator.result_refined
        assert estimator.covariance_kept

    def test_listener(self, family, method, listener):
        estimator = family.create(method)
        estimator.listener = listener
        assert estimator.listener is listener
        estimator.listener = None
        assert not estimator.is_listener_available

    def test_quality_scores(self, family, method, rng):
        estimator = family.create(method, *_samples(family, rng))
        scores = np.ones(20)
        estimator.quality_scores = scores

        if method in SCORE_METHODS:
            assert estimator.quality_scores is scores
            with pytest.raises(ValueError):
                estimator.quality_scores = np.ones(family.MINIMUM_SIZE - 1)
            with pytest.raises(ValueError):
                estimator.quality_scores = np.ones(19)
            with pytest.raises(ValueError):
                estimator.quality_scores = None
            assert estimator.quality_scores is scores
        else:
            # Silently discarded
            assert estimator.quality_scores is None


@pytest.mark.parametrize("family, method", CASES, ids=IDS)
class TestReadiness:

    def test_ready_lifecycle(self, family, method, rng):
        estimator = family.create(method)
        assert not estimator.is_ready

        args = _samples(family, rng)
        _set_samples(estimator, args)
        if method in SCORE_METHODS:
            assert not estimator.is_ready
            estimator.quality_scores = np.ones(20)
        assert estimator.is_ready

    def test_clearing_samples_makes_not_ready(self, family, method, rng):
        args = tuple([row for row in a] for a in _samples(family, rng))
        estimator = family.create(method, *args, quality_scores=np.ones(20))
        assert estimator.is_ready

        args[0].clear()
        assert not estimator.is_ready

    def test_estimate_when_not_ready(self, family, method):
        with pytest.raises(NotReadyError):
            family.create(method).estimate()

    def test_too_few_samples_rejected(self, family, method, rng):
        estimator = family.create(method)
        args = tuple(a[:family.MINIMUM_SIZE - 1] for a in _samples(family, rng))
        with pytest.raises(ValueError):
            _set_samples(estimator, args)
        assert not estimator.is_ready


def _set_samples(estimator, args):
    for setter in ("set_points", "set_lines", "set_planes"):
        if hasattr(estimator, setter):
            getattr(estimator, setter)(*args)
            return
    for name in ("points", "lines", "planes"):
        if hasattr(estimator, name):
            setattr(estimator, name, args[0])
            return
    raise AssertionError(f"no sample setter on {type(estimator).__name__}")


def _prefix(method):
    return {
        RobustEstimatorMethod.RANSAC: "RANSAC",
        RobustEstimatorMethod.MSAC: "MSAC",
        RobustEstimatorMethod.PROSAC: "PROSAC",
        RobustEstimatorMethod.LMEDS: "LMedS",
        RobustEstimatorMethod.PROMEDS: "PROMedS",
    }[method]


class TestFamilySpecifics:

    def test_default_method_is_promeds(self):
        assert Line2DRobustEstimator.create().method is RobustEstimatorMethod.PROMEDS

    def test_family_thresholds(self):
        assert Line2DRobustEstimator.DEFAULT_THRESHOLD == 1e-6
        assert ConicRobustEstimator.DEFAULT_STOP_THRESHOLD == 1e-9
        assert Point2DRobustEstimator.DEFAULT_STOP_THRESHOLD == 1e-3
        assert AffineTransformation2DRobustEstimator.DEFAULT_THRESHOLD == 1.0
        assert SphereRobustEstimator.DEFAULT_STOP_THRESHOLD == 1e-6
        assert QuadricRobustEstimator.DEFAULT_STOP_THRESHOLD == 1e-9
        assert DualConicRobustEstimator.DEFAULT_STOP_THRESHOLD == 1e-9
        assert DualQuadricRobustEstimator.DEFAULT_STOP_THRESHOLD == 1e-9
        assert LineCorrespondenceProjectiveTransformation2DRobustEstimator.DEFAULT_THRESHOLD == 1e-6

    def test_minimum_sizes(self):
        sizes = {family.__name__: family.MINIMUM_SIZE for family in FAMILIES}
        assert sizes == {
            "Line2DRobustEstimator": 2,
            "PlaneRobustEstimator": 3,
            "ConicRobustEstimator": 5,
            "Point2DRobustEstimator": 2,
            "Point3DRobustEstimator": 3,
            "AffineTransformation2DRobustEstimator": 3,
            "AffineTransformation3DRobustEstimator": 4,
            "ProjectiveTransformation2DRobustEstimator": 4,
            "ProjectiveTransformation3DRobustEstimator": 5,
            "SphereRobustEstimator": 4,
            "QuadricRobustEstimator": 9,
            "DualConicRobustEstimator": 5,
            "DualQuadricRobustEstimator": 9,
            "LineCorrespondenceAffineTransformation2DRobustEstimator": 3,
            "LineCorrespondenceProjectiveTransformation2DRobustEstimator": 4,
            "PlaneCorrespondenceAffineTransformation3DRobustEstimator": 4,
            "PlaneCorrespondenceProjectiveTransformation3DRobustEstimator": 5,
        }

    def test_only_one_side_of_correspondences(self, rng):
        src = rng.uniform(size=(10, 2))
        with pytest.raises(ValueError):
            AffineTransformation2DRobustEstimator.create(RobustEstimatorMethod.RANSAC, src)

    def test_only_one_side_of_line_correspondences(self, rng):
        lines = rng.uniform(size=(10, 3))
        with pytest.raises(ValueError):
            LineCorrespondenceProjectiveTransformation2DRobustEstimator.create(
                RobustEstimatorMethod.RANSAC, input_lines=lines,
            )

    def test_line_correspondences_accept_primitives(self, rng):
        lines = [Line2D.from_array(row) for row in rng.uniform(-1.0, 1.0, size=(10, 3))]
        estimator = LineCorrespondenceProjectiveTransformation2DRobustEstimator.create(RobustEstimatorMethod.MSAC)
        assert isinstance(estimator, LineCorrespondenceRobustEstimator)

        estimator.set_lines(lines, lines)
        assert estimator.input_lines is lines
        assert estimator.output_lines is lines
        assert estimator.is_ready

    def test_plane_correspondences_width_checked(self, rng):
        estimator = PlaneCorrespondenceAffineTransformation3DRobustEstimator.create(RobustEstimatorMethod.RANSAC)
        assert isinstance(estimator, PlaneCorrespondenceRobustEstimator)
        with pytest.raises(ValueError):
            estimator.set_planes(rng.uniform(size=(10, 3)), rng.uniform(size=(10, 3)))
        assert estimator.input_planes is None

        planes = [Plane.from_array(row) for row in rng.uniform(-1.0, 1.0, size=(10, 4))]
        estimator.set_planes(planes, planes)
        assert estimator.is_ready

    @pytest.mark.parametrize("family", [DualConicRobustEstimator, DualQuadricRobustEstimator])
    def test_tangent_hyperplane_samples(self, family, rng):
        estimator = family.create(RobustEstimatorMethod.LMEDS)
        assert isinstance(estimator, HyperplaneSetRobustEstimator)
        assert not isinstance(estimator, IntersectionRobustEstimator)
        with pytest.raises(ValueError):
            _set_samples(estimator, (rng.uniform(size=(10, family.DIM)),))
        _set_samples(estimator, (rng.uniform(size=(10, family.DIM + 1)),))
        assert estimator.is_ready

    def test_correspondence_size_mismatch(self, rng):
        estimator = AffineTransformation2DRobustEstimator.create(RobustEstimatorMethod.RANSAC)
        with pytest.raises(ValueError):
            estimator.set_points(rng.uniform(size=(10, 2)), rng.uniform(size=(9, 2)))
        assert estimator.input_points is None

    def test_wrong_point_dimension(self, rng):
        with pytest.raises(ValueError):
            Line2DRobustEstimator.create(RobustEstimatorMethod.RANSAC, rng.uniform(size=(10, 3)))

    @pytest.mark.parametrize("family", [Point2DRobustEstimator, Point3DRobustEstimator])
    def test_refinement_coordinates_type(self, family):
        estimator = family.create(RobustEstimatorMethod.LMEDS)
        assert isinstance(estimator, IntersectionRobustEstimator)
        assert estimator.refinement_coordinates_type is CoordinatesType.INHOMOGENEOUS
        estimator.refinement_coordinates_type = "homogeneous"
        assert estimator.refinement_coordinates_type is CoordinatesType.HOMOGENEOUS
        with pytest.raises(ValueError):
            estimator.refinement_coordinates_type = "polar"
        assert estimator.refinement_coordinates_type is CoordinatesType.HOMOGENEOUS

    def test_prosac_scores_size_checked_in_constructor(self, rng):
        points = rng.uniform(size=(10, 2))
        with pytest.raises(ValueError):
            Line2DRobustEstimator.create(RobustEstimatorMethod.PROSAC, points, quality_scores=np.ones(9))

    def test_locked_estimator_rejects_changes(self, rng):
        estimator = Line2DRobustEstimator.create(RobustEstimatorMethod.RANSAC)
        estimator._locked = True
        with pytest.raises(LockedError):
            estimator.threshold = 0.1
        with pytest.raises(LockedError):
            estimator.estimate()
        assert estimator.threshold == Line2DRobustEstimator.DEFAULT_THRESHOLD
