"""
Robust projective transformation estimation from 2D line correspondences.

The estimate is the 3x3 point transform H (unit Frobenius norm); an input line l
maps to l H^-1.
"""
from __future__ import annotations

from typing import Optional

from ..fitters.transforms import LineCorrespondenceProjectiveTransformation2DFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import LineCorrespondenceRobustEstimator


class LineCorrespondenceProjectiveTransformation2DRobustEstimator(LineCorrespondenceRobustEstimator):
    MINIMUM_SIZE = LineCorrespondenceProjectiveTransformation2DFitter.sample_size
    DEFAULT_THRESHOLD = 1e-6
    DEFAULT_STOP_THRESHOLD = 1e-6

    def _make_fitter(self) -> LineCorrespondenceProjectiveTransformation2DFitter:
        return LineCorrespondenceProjectiveTransformation2DFitter(*self._pair_arrays())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            input_lines=None,
            output_lines=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "LineCorrespondenceProjectiveTransformation2DRobustEstimator":
        return create_estimator(
            _ESTIMATORS, method, input_lines, output_lines,
            listener=listener, quality_scores=quality_scores,
        )


class RANSACLineCorrespondenceProjectiveTransformation2DRobustEstimator(
        RANSACRobustEstimator, LineCorrespondenceProjectiveTransformation2DRobustEstimator,
):
    pass


class MSACLineCorrespondenceProjectiveTransformation2DRobustEstimator(
        MSACRobustEstimator, LineCorrespondenceProjectiveTransformation2DRobustEstimator,
):
    pass


class PROSACLineCorrespondenceProjectiveTransformation2DRobustEstimator(
        PROSACRobustEstimator, LineCorrespondenceProjectiveTransformation2DRobustEstimator,
):
    pass


class LMedSLineCorrespondenceProjectiveTransformation2DRobustEstimator(
        LMedSRobustEstimator, LineCorrespondenceProjectiveTransformation2DRobustEstimator,
):
    pass


class PROMedSLineCorrespondenceProjectiveTransformation2DRobustEstimator(
        PROMedSRobustEstimator, LineCorrespondenceProjectiveTransformation2DRobustEstimator,
):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACLineCorrespondenceProjectiveTransformation2DRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACLineCorrespondenceProjectiveTransformation2DRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACLineCorrespondenceProjectiveTransformation2DRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSLineCorrespondenceProjectiveTransformation2DRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSLineCorrespondenceProjectiveTransformation2DRobustEstimator,
}
