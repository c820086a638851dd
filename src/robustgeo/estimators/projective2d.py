"""
Robust projective transformation estimation from 2D point correspondences.

The estimate is a 3x3 matrix mapping input points to output points:
    H defined up to scale (unit Frobenius norm), residual = || H(input) - output || after division by w
"""
from __future__ import annotations

from typing import Optional

from ..fitters.transforms import ProjectiveTransformation2DFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import CorrespondenceRobustEstimator


class ProjectiveTransformation2DRobustEstimator(CorrespondenceRobustEstimator):
    DIM = 2
    MINIMUM_SIZE = ProjectiveTransformation2DFitter.sample_size
    DEFAULT_THRESHOLD = 1.0
    DEFAULT_STOP_THRESHOLD = 1.0

    def _make_fitter(self) -> ProjectiveTransformation2DFitter:
        return ProjectiveTransformation2DFitter(*self._pair_arrays())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            input_points=None,
            output_points=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "ProjectiveTransformation2DRobustEstimator":
        return create_estimator(
            _ESTIMATORS, method, input_points, output_points,
            listener=listener, quality_scores=quality_scores,
        )


class RANSACProjectiveTransformation2DRobustEstimator(RANSACRobustEstimator, ProjectiveTransformation2DRobustEstimator):
    pass


class MSACProjectiveTransformation2DRobustEstimator(MSACRobustEstimator, ProjectiveTransformation2DRobustEstimator):
    pass


class PROSACProjectiveTransformation2DRobustEstimator(PROSACRobustEstimator, ProjectiveTransformation2DRobustEstimator):
    pass


class LMedSProjectiveTransformation2DRobustEstimator(LMedSRobustEstimator, ProjectiveTransformation2DRobustEstimator):
    pass


class PROMedSProjectiveTransformation2DRobustEstimator(PROMedSRobustEstimator, ProjectiveTransformation2DRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACProjectiveTransformation2DRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACProjectiveTransformation2DRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACProjectiveTransformation2DRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSProjectiveTransformation2DRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSProjectiveTransformation2DRobustEstimator,
}
