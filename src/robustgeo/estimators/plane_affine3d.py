"""
Robust affine transformation estimation from plane correspondences.

The estimate is the 4x4 point transform T = [[A, t], [0, 1]]; an input plane p
maps to p T^-1. Residual = 1 - |cos| between the mapped and the output plane.
"""
from __future__ import annotations

from typing import Optional

from ..fitters.transforms import PlaneCorrespondenceAffineTransformation3DFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import PlaneCorrespondenceRobustEstimator


class PlaneCorrespondenceAffineTransformation3DRobustEstimator(PlaneCorrespondenceRobustEstimator):
    MINIMUM_SIZE = PlaneCorrespondenceAffineTransformation3DFitter.sample_size
    DEFAULT_THRESHOLD = 1e-6
    DEFAULT_STOP_THRESHOLD = 1e-6

    def _make_fitter(self) -> PlaneCorrespondenceAffineTransformation3DFitter:
        return PlaneCorrespondenceAffineTransformation3DFitter(*self._pair_arrays())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            input_planes=None,
            output_planes=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "PlaneCorrespondenceAffineTransformation3DRobustEstimator":
        return create_estimator(
            _ESTIMATORS, method, input_planes, output_planes,
            listener=listener, quality_scores=quality_scores,
        )


class RANSACPlaneCorrespondenceAffineTransformation3DRobustEstimator(
        RANSACRobustEstimator, PlaneCorrespondenceAffineTransformation3DRobustEstimator,
):
    pass


class MSACPlaneCorrespondenceAffineTransformation3DRobustEstimator(
        MSACRobustEstimator, PlaneCorrespondenceAffineTransformation3DRobustEstimator,
):
    pass


class PROSACPlaneCorrespondenceAffineTransformation3DRobustEstimator(
        PROSACRobustEstimator, PlaneCorrespondenceAffineTransformation3DRobustEstimator,
):
    pass


class LMedSPlaneCorrespondenceAffineTransformation3DRobustEstimator(
        LMedSRobustEstimator, PlaneCorrespondenceAffineTransformation3DRobustEstimator,
):
    pass


class PROMedSPlaneCorrespondenceAffineTransformation3DRobustEstimator(
        PROMedSRobustEstimator, PlaneCorrespondenceAffineTransformation3DRobustEstimator,
):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACPlaneCorrespondenceAffineTransformation3DRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACPlaneCorrespondenceAffineTransformation3DRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACPlaneCorrespondenceAffineTransformation3DRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSPlaneCorrespondenceAffineTransformation3DRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSPlaneCorrespondenceAffineTransformation3DRobustEstimator,
}
