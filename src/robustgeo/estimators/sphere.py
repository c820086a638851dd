"""
Robust sphere estimation from 3D points.

    sphere: center (cx, cy, cz) and radius r, residual = | ||p - center|| - r |
"""
from __future__ import annotations

from typing import Optional

from ..fitters.shapes import SphereFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import PointSetRobustEstimator


class SphereRobustEstimator(PointSetRobustEstimator):
    DIM = 3
    MINIMUM_SIZE = SphereFitter.sample_size
    DEFAULT_THRESHOLD = 1e-6
    DEFAULT_STOP_THRESHOLD = 1e-6

    def _make_fitter(self) -> SphereFitter:
        return SphereFitter(self._points_array())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            points=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "SphereRobustEstimator":
        return create_estimator(_ESTIMATORS, method, points, listener=listener, quality_scores=quality_scores)


class RANSACSphereRobustEstimator(RANSACRobustEstimator, SphereRobustEstimator):
    pass


class MSACSphereRobustEstimator(MSACRobustEstimator, SphereRobustEstimator):
    pass


class PROSACSphereRobustEstimator(PROSACRobustEstimator, SphereRobustEstimator):
    pass


class LMedSSphereRobustEstimator(LMedSRobustEstimator, SphereRobustEstimator):
    pass


class PROMedSSphereRobustEstimator(PROMedSRobustEstimator, SphereRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACSphereRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACSphereRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACSphereRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSSphereRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSSphereRobustEstimator,
}
