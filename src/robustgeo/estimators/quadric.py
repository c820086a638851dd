"""
Robust quadric estimation from 3D points.

    quadric: a*x^2 + b*y^2 + c*z^2 + 2*(d*x*y + e*y*z + f*x*z + g*x + h*y + i*z) + j = 0

Algebraic residual (|p^T Q p| with normalized Q and p), like conics.
"""
from __future__ import annotations

from typing import Optional

from ..fitters.shapes import QuadricFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import PointSetRobustEstimator


class QuadricRobustEstimator(PointSetRobustEstimator):
    DIM = 3
    MINIMUM_SIZE = QuadricFitter.sample_size
    DEFAULT_THRESHOLD = 1e-6
    DEFAULT_STOP_THRESHOLD = 1e-9

    def _make_fitter(self) -> QuadricFitter:
        return QuadricFitter(self._points_array())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            points=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "QuadricRobustEstimator":
        return create_estimator(_ESTIMATORS, method, points, listener=listener, quality_scores=quality_scores)


class RANSACQuadricRobustEstimator(RANSACRobustEstimator, QuadricRobustEstimator):
    pass


class MSACQuadricRobustEstimator(MSACRobustEstimator, QuadricRobustEstimator):
    pass


class PROSACQuadricRobustEstimator(PROSACRobustEstimator, QuadricRobustEstimator):
    pass


class LMedSQuadricRobustEstimator(LMedSRobustEstimator, QuadricRobustEstimator):
    pass


class PROMedSQuadricRobustEstimator(PROMedSRobustEstimator, QuadricRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACQuadricRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACQuadricRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACQuadricRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSQuadricRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSQuadricRobustEstimator,
}
