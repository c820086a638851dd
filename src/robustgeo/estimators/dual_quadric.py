"""
Robust dual quadric estimation: the quadric tangent to most of the given planes.

Samples are Plane instances or (N,4) rows [a, b, c, d].
"""
from __future__ import annotations

from typing import Optional

from ..fitters.shapes import DualQuadricFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import HyperplaneSetRobustEstimator


class DualQuadricRobustEstimator(HyperplaneSetRobustEstimator):
    DIM = 3
    MINIMUM_SIZE = DualQuadricFitter.sample_size
    DEFAULT_THRESHOLD = 1e-6
    DEFAULT_STOP_THRESHOLD = 1e-9

    def __init__(self, planes=None, listener: Optional[RobustEstimatorListener] = None):
        super().__init__(planes, listener)

    @property
    def planes(self):
        return self._samples

    @planes.setter
    def planes(self, planes) -> None:
        self._set_samples(planes)

    def _make_fitter(self) -> DualQuadricFitter:
        return DualQuadricFitter(self._coefficients())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            planes=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "DualQuadricRobustEstimator":
        return create_estimator(_ESTIMATORS, method, planes, listener=listener, quality_scores=quality_scores)


class RANSACDualQuadricRobustEstimator(RANSACRobustEstimator, DualQuadricRobustEstimator):
    pass


class MSACDualQuadricRobustEstimator(MSACRobustEstimator, DualQuadricRobustEstimator):
    pass


class PROSACDualQuadricRobustEstimator(PROSACRobustEstimator, DualQuadricRobustEstimator):
    pass


class LMedSDualQuadricRobustEstimator(LMedSRobustEstimator, DualQuadricRobustEstimator):
    pass


class PROMedSDualQuadricRobustEstimator(PROMedSRobustEstimator, DualQuadricRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACDualQuadricRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACDualQuadricRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACDualQuadricRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSDualQuadricRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSDualQuadricRobustEstimator,
}
