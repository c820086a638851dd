"""
Robust projective transformation estimation from 3D point correspondences.

The estimate is a 4x4 matrix mapping input points to output points:
    H defined up to scale (unit Frobenius norm), residual = || H(input) - output || after division by w
"""
from __future__ import annotations

from typing import Optional

from ..fitters.transforms import ProjectiveTransformation3DFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import CorrespondenceRobustEstimator


class ProjectiveTransformation3DRobustEstimator(CorrespondenceRobustEstimator):
    DIM = 3
    MINIMUM_SIZE = ProjectiveTransformation3DFitter.sample_size
    DEFAULT_THRESHOLD = 1.0
    DEFAULT_STOP_THRESHOLD = 1.0

    def _make_fitter(self) -> ProjectiveTransformation3DFitter:
        return ProjectiveTransformation3DFitter(*self._pair_arrays())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            input_points=None,
            output_points=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "ProjectiveTransformation3DRobustEstimator":
        return create_estimator(
            _ESTIMATORS, method, input_points, output_points,
            listener=listener, quality_scores=quality_scores,
        )


class RANSACProjectiveTransformation3DRobustEstimator(RANSACRobustEstimator, ProjectiveTransformation3DRobustEstimator):
    pass


class MSACProjectiveTransformation3DRobustEstimator(MSACRobustEstimator, ProjectiveTransformation3DRobustEstimator):
    pass


class PROSACProjectiveTransformation3DRobustEstimator(PROSACRobustEstimator, ProjectiveTransformation3DRobustEstimator):
    pass


class LMedSProjectiveTransformation3DRobustEstimator(LMedSRobustEstimator, ProjectiveTransformation3DRobustEstimator):
    pass


class PROMedSProjectiveTransformation3DRobustEstimator(PROMedSRobustEstimator, ProjectiveTransformation3DRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACProjectiveTransformation3DRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACProjectiveTransformation3DRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACProjectiveTransformation3DRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSProjectiveTransformation3DRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSProjectiveTransformation3DRobustEstimator,
}
