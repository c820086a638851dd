"""
Robust projective transformation estimation from plane correspondences.

The estimate is the 4x4 point transform H (unit Frobenius norm).
"""
from __future__ import annotations

from typing import Optional

from ..fitters.transforms import PlaneCorrespondenceProjectiveTransformation3DFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import PlaneCorrespondenceRobustEstimator


class PlaneCorrespondenceProjectiveTransformation3DRobustEstimator(PlaneCorrespondenceRobustEstimator):
    MINIMUM_SIZE = PlaneCorrespondenceProjectiveTransformation3DFitter.sample_size
    DEFAULT_THRESHOLD = 1e-6
    DEFAULT_STOP_THRESHOLD = 1e-6

    def _make_fitter(self) -> PlaneCorrespondenceProjectiveTransformation3DFitter:
        return PlaneCorrespondenceProjectiveTransformation3DFitter(*self._pair_arrays())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            input_planes=None,
            output_planes=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "PlaneCorrespondenceProjectiveTransformation3DRobustEstimator":
        return create_estimator(
            _ESTIMATORS, method, input_planes, output_planes,
            listener=listener, quality_scores=quality_scores,
        )


class RANSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator(
        RANSACRobustEstimator, PlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
):
    pass


class MSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator(
        MSACRobustEstimator, PlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
):
    pass


class PROSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator(
        PROSACRobustEstimator, PlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
):
    pass


class LMedSPlaneCorrespondenceProjectiveTransformation3DRobustEstimator(
        LMedSRobustEstimator, PlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
):
    pass


class PROMedSPlaneCorrespondenceProjectiveTransformation3DRobustEstimator(
        PROMedSRobustEstimator, PlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSPlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSPlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
}
