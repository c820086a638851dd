"""
Robust dual conic estimation: the conic tangent to most of the given 2D lines.

Samples are Line2D instances or (N,3) rows [a, b, c].
Residual = |l^T C* l| with normalized C* and l.
"""
from __future__ import annotations

from typing import Optional

from ..fitters.shapes import DualConicFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import HyperplaneSetRobustEstimator


class DualConicRobustEstimator(HyperplaneSetRobustEstimator):
    DIM = 2
    MINIMUM_SIZE = DualConicFitter.sample_size
    DEFAULT_THRESHOLD = 1e-6
    DEFAULT_STOP_THRESHOLD = 1e-9

    def __init__(self, lines=None, listener: Optional[RobustEstimatorListener] = None):
        super().__init__(lines, listener)

    @property
    def lines(self):
        return self._samples

    @lines.setter
    def lines(self, lines) -> None:
        self._set_samples(lines)

    def _make_fitter(self) -> DualConicFitter:
        return DualConicFitter(self._coefficients())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            lines=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "DualConicRobustEstimator":
        return create_estimator(_ESTIMATORS, method, lines, listener=listener, quality_scores=quality_scores)


class RANSACDualConicRobustEstimator(RANSACRobustEstimator, DualConicRobustEstimator):
    pass


class MSACDualConicRobustEstimator(MSACRobustEstimator, DualConicRobustEstimator):
    pass


class PROSACDualConicRobustEstimator(PROSACRobustEstimator, DualConicRobustEstimator):
    pass


class LMedSDualConicRobustEstimator(LMedSRobustEstimator, DualConicRobustEstimator):
    pass


class PROMedSDualConicRobustEstimator(PROMedSRobustEstimator, DualConicRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACDualConicRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACDualConicRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACDualConicRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSDualConicRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSDualConicRobustEstimator,
}
