"""
Robust plane estimation from 3D points.

    plane: a*x + b*y + c*z + d = 0, residual = distance from a point to the plane
"""
from __future__ import annotations

from typing import Optional

from ..fitters.shapes import PlaneFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import PointSetRobustEstimator


class PlaneRobustEstimator(PointSetRobustEstimator):
    DIM = 3
    MINIMUM_SIZE = PlaneFitter.sample_size
    DEFAULT_THRESHOLD = 1e-6
    DEFAULT_STOP_THRESHOLD = 1e-6

    def _make_fitter(self) -> PlaneFitter:
        return PlaneFitter(self._points_array())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            points=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "PlaneRobustEstimator":
        return create_estimator(_ESTIMATORS, method, points, listener=listener, quality_scores=quality_scores)


class RANSACPlaneRobustEstimator(RANSACRobustEstimator, PlaneRobustEstimator):
    pass


class MSACPlaneRobustEstimator(MSACRobustEstimator, PlaneRobustEstimator):
    pass


class PROSACPlaneRobustEstimator(PROSACRobustEstimator, PlaneRobustEstimator):
    pass


class LMedSPlaneRobustEstimator(LMedSRobustEstimator, PlaneRobustEstimator):
    pass


class PROMedSPlaneRobustEstimator(PROMedSRobustEstimator, PlaneRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACPlaneRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACPlaneRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACPlaneRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSPlaneRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSPlaneRobustEstimator,
}
