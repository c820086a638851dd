"""
Robust conic estimation from 2D points.

    conic: a*x^2 + b*x*y + c*y^2 + d*x + e*y + f = 0

The residual is algebraic (|p^T C p| with normalized C and p), hence the much
smaller default stop threshold than for lines / planes.
"""
from __future__ import annotations

from typing import Optional

from ..fitters.shapes import ConicFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import PointSetRobustEstimator


class ConicRobustEstimator(PointSetRobustEstimator):
    DIM = 2
    MINIMUM_SIZE = ConicFitter.sample_size
    DEFAULT_THRESHOLD = 1e-6
    DEFAULT_STOP_THRESHOLD = 1e-9

    def _make_fitter(self) -> ConicFitter:
        return ConicFitter(self._points_array())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            points=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "ConicRobustEstimator":
        return create_estimator(_ESTIMATORS, method, points, listener=listener, quality_scores=quality_scores)


class RANSACConicRobustEstimator(RANSACRobustEstimator, ConicRobustEstimator):
    pass


class MSACConicRobustEstimator(MSACRobustEstimator, ConicRobustEstimator):
    pass


class PROSACConicRobustEstimator(PROSACRobustEstimator, ConicRobustEstimator):
    pass


class LMedSConicRobustEstimator(LMedSRobustEstimator, ConicRobustEstimator):
    pass


class PROMedSConicRobustEstimator(PROMedSRobustEstimator, ConicRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACConicRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACConicRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACConicRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSConicRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSConicRobustEstimator,
}
