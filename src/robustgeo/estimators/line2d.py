"""
Robust 2D line estimation from points.

    line: a*x + b*y + c = 0, residual = distance from a point to the line
"""
from __future__ import annotations

from typing import Optional

from ..fitters.shapes import Line2DFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import PointSetRobustEstimator


class Line2DRobustEstimator(PointSetRobustEstimator):
    DIM = 2
    MINIMUM_SIZE = Line2DFitter.sample_size
    DEFAULT_THRESHOLD = 1e-6
    DEFAULT_STOP_THRESHOLD = 1e-6

    def _make_fitter(self) -> Line2DFitter:
        return Line2DFitter(self._points_array())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            points=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "Line2DRobustEstimator":
        return create_estimator(_ESTIMATORS, method, points, listener=listener, quality_scores=quality_scores)


class RANSACLine2DRobustEstimator(RANSACRobustEstimator, Line2DRobustEstimator):
    pass


class MSACLine2DRobustEstimator(MSACRobustEstimator, Line2DRobustEstimator):
    pass


class PROSACLine2DRobustEstimator(PROSACRobustEstimator, Line2DRobustEstimator):
    pass


class LMedSLine2DRobustEstimator(LMedSRobustEstimator, Line2DRobustEstimator):
    pass


class PROMedSLine2DRobustEstimator(PROMedSRobustEstimator, Line2DRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACLine2DRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACLine2DRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACLine2DRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSLine2DRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSLine2DRobustEstimator,
}
