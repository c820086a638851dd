"""
Robust affine transformation estimation from 2D line correspondences.

The estimate is the 3x3 point transform T = [[A, t], [0, 1]]; an input line l
maps to l T^-1. Residual = 1 - |cos| between the mapped and the output line.
"""
from __future__ import annotations

from typing import Optional

from ..fitters.transforms import LineCorrespondenceAffineTransformation2DFitter
from ..robust.estimator import RobustEstimator, create_estimator
from ..robust.methods import (
    LMedSRobustEstimator, MSACRobustEstimator, PROMedSRobustEstimator,
    PROSACRobustEstimator, RANSACRobustEstimator,
)
from ..robust.types import RobustEstimatorListener, RobustEstimatorMethod
from .base import LineCorrespondenceRobustEstimator


class LineCorrespondenceAffineTransformation2DRobustEstimator(LineCorrespondenceRobustEstimator):
    MINIMUM_SIZE = LineCorrespondenceAffineTransformation2DFitter.sample_size
    DEFAULT_THRESHOLD = 1e-6
    DEFAULT_STOP_THRESHOLD = 1e-6

    def _make_fitter(self) -> LineCorrespondenceAffineTransformation2DFitter:
        return LineCorrespondenceAffineTransformation2DFitter(*self._pair_arrays())

    @staticmethod
    def create(
            method: RobustEstimatorMethod | str = RobustEstimator.DEFAULT_ROBUST_METHOD,
            input_lines=None,
            output_lines=None,
            quality_scores=None,
            listener: Optional[RobustEstimatorListener] = None,
    ) -> "LineCorrespondenceAffineTransformation2DRobustEstimator":
        return create_estimator(
            _ESTIMATORS, method, input_lines, output_lines,
            listener=listener, quality_scores=quality_scores,
        )


class RANSACLineCorrespondenceAffineTransformation2DRobustEstimator(
        RANSACRobustEstimator, LineCorrespondenceAffineTransformation2DRobustEstimator,
):
    pass


class MSACLineCorrespondenceAffineTransformation2DRobustEstimator(
        MSACRobustEstimator, LineCorrespondenceAffineTransformation2DRobustEstimator,
):
    pass


class PROSACLineCorrespondenceAffineTransformation2DRobustEstimator(
        PROSACRobustEstimator, LineCorrespondenceAffineTransformation2DRobustEstimator,
):
    pass


class LMedSLineCorrespondenceAffineTransformation2DRobustEstimator(
        LMedSRobustEstimator, LineCorrespondenceAffineTransformation2DRobustEstimator,
):
    pass


class PROMedSLineCorrespondenceAffineTransformation2DRobustEstimator(
        PROMedSRobustEstimator, LineCorrespondenceAffineTransformation2DRobustEstimator,
):
    pass


_ESTIMATORS = {
    RobustEstimatorMethod.RANSAC: RANSACLineCorrespondenceAffineTransformation2DRobustEstimator,
    RobustEstimatorMethod.MSAC: MSACLineCorrespondenceAffineTransformation2DRobustEstimator,
    RobustEstimatorMethod.PROSAC: PROSACLineCorrespondenceAffineTransformation2DRobustEstimator,
    RobustEstimatorMethod.LMEDS: LMedSLineCorrespondenceAffineTransformation2DRobustEstimator,
    RobustEstimatorMethod.PROMEDS: PROMedSLineCorrespondenceAffineTransformation2DRobustEstimator,
}
