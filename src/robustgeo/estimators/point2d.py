"""
Robust 2D point estimation: the point where most lines intersect.

Samples are Line2D instances or (N,3) rows [a, b, c].
Residual = distance from the point to each line.
"""
from __future__ import annotations

from typing import Optional

from ..fitters.points import Point2DFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import IntersectionRobustEstimator


class Point2DRobustEstimator(IntersectionRobustEstimator):
    DIM = 2
    MINIMUM_SIZE = Point2DFitter.sample_size
    DEFAULT_THRESHOLD = 1.0
    DEFAULT_STOP_THRESHOLD = 1e-3

    def __init__(self, lines=None, listener: Optional[RobustEstimatorListener] = None):
        super().__init__(lines, listener)

    @property
    def lines(self):
        return self._samples

    @lines.setter
    def lines(self, lines) -> None:
        self._set_samples(lines)

    def _make_fitter(self) -> Point2DFitter:
        return Point2DFitter(self._coefficients(), self._coordinates_type)

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            lines=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "Point2DRobustEstimator":
        return create_estimator(_ESTIMATORS, method, lines, listener=listener, quality_scores=quality_scores)


class RANSACPoint2DRobustEstimator(RANSACRobustEstimator, Point2DRobustEstimator):
    pass


class MSACPoint2DRobustEstimator(MSACRobustEstimator, Point2DRobustEstimator):
    pass


class PROSACPoint2DRobustEstimator(PROSACRobustEstimator, Point2DRobustEstimator):
    pass


class LMedSPoint2DRobustEstimator(LMedSRobustEstimator, Point2DRobustEstimator):
    pass


class PROMedSPoint2DRobustEstimator(PROMedSRobustEstimator, Point2DRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACPoint2DRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACPoint2DRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACPoint2DRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSPoint2DRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSPoint2DRobustEstimator,
}
