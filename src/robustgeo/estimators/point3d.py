"""
Robust 3D point estimation: the point where most planes intersect.

Samples are Plane instances or (N,4) rows [a, b, c, d].
"""
from __future__ import annotations

from typing import Optional

from ..fitters.points import Point3DFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import IntersectionRobustEstimator


class Point3DRobustEstimator(IntersectionRobustEstimator):
    DIM = 3
    MINIMUM_SIZE = Point3DFitter.sample_size
    DEFAULT_THRESHOLD = 1.0
    DEFAULT_STOP_THRESHOLD = 1e-3

    def __init__(self, planes=None, listener: Optional[RobustEstimatorListener] = None):
        super().__init__(planes, listener)

    @property
    def planes(self):
        return self._samples

    @planes.setter
    def planes(self, planes) -> None:
        self._set_samples(planes)

    def _make_fitter(self) -> Point3DFitter:
        return Point3DFitter(self._coefficients(), self._coordinates_type)

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            planes=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "Point3DRobustEstimator":
        return create_estimator(_ESTIMATORS, method, planes, listener=listener, quality_scores=quality_scores)


class RANSACPoint3DRobustEstimator(RANSACRobustEstimator, Point3DRobustEstimator):
    pass


class MSACPoint3DRobustEstimator(MSACRobustEstimator, Point3DRobustEstimator):
    pass


class PROSACPoint3DRobustEstimator(PROSACRobustEstimator, Point3DRobustEstimator):
    pass


class LMedSPoint3DRobustEstimator(LMedSRobustEstimator, Point3DRobustEstimator):
    pass


class PROMedSPoint3DRobustEstimator(PROMedSRobustEstimator, Point3DRobustEstimator):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACPoint3DRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACPoint3DRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACPoint3DRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSPoint3DRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSPoint3DRobustEstimator,
}
