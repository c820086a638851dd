"""
Robust affine transformation estimation from 2D point correspondences.

The estimate is a 3x3 matrix mapping input points to output points:
    T = [[A, t], [0, 1]], residual = || T(input) - output ||
"""
from __future__ import annotations

from typing import Optional

from ..fitters.transforms import AffineTransformation2DFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import CorrespondenceRobustEstimator


class AffineTransformation2DRobustEstimator(CorrespondenceRobustEstimator):
    DIM = 2
    MINIMUM_SIZE = AffineTransformation2DFitter.sample_size
    DEFAULT_THRESHOLD = 1.0
    DEFAULT_STOP_THRESHOLD = 1.0

    def _make_fitter(self) -> AffineTransformation2DFitter:
        return AffineTransformation2DFitter(*self._pair_arrays())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            input_points=None,
            output_points=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "AffineTransformation2DRobustEstimator":
        return create_estimator(
            _ESTIMATORS, method, input_points, output_points,
            listener=listener, quality_scores=quality_scores,
        )


class RANSACAffineTransformation2DRobustEstimator(RANSACRobustEstimator, AffineTransformation2DRobustEstimator):
    pass


class MSACAffineTransformation2DRobustEstimator(MSACRobustEstimator, AffineTransformation2DRobustEstimator):
    pass


class PROSACAffineTransformation2DRobustEstimator(PROSACRobustEstimator, AffineTransformation2DRobustEstimator):
    pass


class LMedSAffineTransformation2DRobustEstimator(LMedSRobustEstimator, AffineTransformation2DRobustEstimator):
    pass


class PROMedSAffineTransformation2DRobustEstimator(PROMedSRobustEstimator, AffineTransformation2DRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACAffineTransformation2DRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACAffineTransformation2DRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACAffineTransformation2DRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSAffineTransformation2DRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSAffineTransformation2DRobustEstimator,
}
