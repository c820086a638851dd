"""
Robust affine transformation estimation from 3D point correspondences.

The estimate is a 4x4 matrix mapping input points to output points:
    T = [[A, t], [0, 1]], residual = || T(input) - output ||
"""
from __future__ import annotations

from typing import Optional

from ..fitters.transforms import AffineTransformation3DFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import CorrespondenceRobustEstimator


class AffineTransformation3DRobustEstimator(CorrespondenceRobustEstimator):
    DIM = 3
    MINIMUM_SIZE = AffineTransformation3DFitter.sample_size
    DEFAULT_THRESHOLD = 1.0
    DEFAULT_STOP_THRESHOLD = 1.0

    def _make_fitter(self) -> AffineTransformation3DFitter:
        return AffineTransformation3DFitter(*self._pair_arrays())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            input_points=None,
            output_points=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "AffineTransformation3DRobustEstimator":
        return create_estimator(
            _ESTIMATORS, method, input_points, output_points,
            listener=listener, quality_scores=quality_scores,
        )


class RANSACAffineTransformation3DRobustEstimator(RANSACRobustEstimator, AffineTransformation3DRobustEstimator):
    pass


class MSACAffineTransformation3DRobustEstimator(MSACRobustEstimator, AffineTransformation3DRobustEstimator):
    pass


class PROSACAffineTransformation3DRobustEstimator(PROSACRobustEstimator, AffineTransformation3DRobustEstimator):
    pass


class LMedSAffineTransformation3DRobustEstimator(LMedSRobustEstimator, AffineTransformation3DRobustEstimator):
    pass


class PROMedSAffineTransformation3DRobustEstimator(PROMedSRobustEstimator, AffineTransformation3DRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACAffineTransformation3DRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACAffineTransformation3DRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACAffineTransformation3DRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSAffineTransformation3DRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSAffineTransformation3DRobustEstimator,
}
