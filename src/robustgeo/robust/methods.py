"""
Method bases: how the consensus loop of an estimator runs.

Combined with a family base by multiple inheritance, method base first:

    class RANSACPlaneRobustEstimator(RANSACRobustEstimator, PlaneRobustEstimator): ...

Family defaults (DEFAULT_THRESHOLD, DEFAULT_STOP_THRESHOLD, MINIMUM_SIZE) are
read from `self`, so they are never redefined here.
"""
from __future__ import annotations

from typing import Any, ClassVar, Optional

from ..config import DEFAULTS
from .estimator import RobustEstimator
from .types import ConsensusResult, InliersData, RobustEstimatorMethod


class _ThresholdRobustEstimator(RobustEstimator):
    """Shared by methods splitting inliers / outliers with a fixed threshold."""

    DEFAULT_COMPUTE_AND_KEEP_INLIERS: ClassVar[bool] = False
    DEFAULT_COMPUTE_AND_KEEP_RESIDUALS: ClassVar[bool] = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._threshold = self.DEFAULT_THRESHOLD
        self._compute_and_keep_inliers = self.DEFAULT_COMPUTE_AND_KEEP_INLIERS
        self._compute_and_keep_residuals = self.DEFAULT_COMPUTE_AND_KEEP_RESIDUALS

    @property
    def threshold(self) -> float:
        """Maximum residual for a sample to be an inlier."""
        return self._threshold

    @threshold.setter
    def threshold(self, value: float) -> None:
        self._check_locked()
        if value <= self.MIN_THRESHOLD:
            raise ValueError(f"threshold must be > 0, got {value}")
        self._threshold = float(value)

    @property
    def compute_and_keep_inliers(self) -> bool:
        return self._compute_and_keep_inliers

    @compute_and_keep_inliers.setter
    def compute_and_keep_inliers(self, value: bool) -> None:
        self._check_locked()
        self._compute_and_keep_inliers = bool(value)

    @property
    def compute_and_keep_residuals(self) -> bool:
        return self._compute_and_keep_residuals

    @compute_and_keep_residuals.setter
    def compute_and_keep_residuals(self, value: bool) -> None:
        self._check_locked()
        self._compute_and_keep_residuals = bool(value)

    def _method_kwargs(self) -> dict[str, Any]:
        return dict(threshold=self._threshold)

    def _make_inliers_data(self, result: ConsensusResult) -> Optional[InliersData]:
        keep_inliers = self._refine_result or self._compute_and_keep_inliers
        keep_residuals = self._refine_result or self._compute_and_keep_residuals
        if not (keep_inliers or keep_residuals):
            return None
        return InliersData(
            inliers=result.inliers if keep_inliers else None,
            residuals=result.residuals if keep_residuals else None,
            num_inliers=result.num_inliers,
        )

    def _refinement_sigma(self, result: ConsensusResult) -> float:
        return self._threshold


class _MedianRobustEstimator(RobustEstimator):
    """Shared by methods minimizing the median residual."""

    DEFAULT_INLIER_FACTOR: ClassVar[float] = DEFAULTS.lmeds_inlier_factor

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._stop_threshold = self.DEFAULT_STOP_THRESHOLD
        self._inlier_factor = self.DEFAULT_INLIER_FACTOR

    @property
    def stop_threshold(self) -> float:
        """
        Median residual below which iterating stops.
        Also the lowest inlier threshold that can be estimated.
        """
        return self._stop_threshold

    @stop_threshold.setter
    def stop_threshold(self, value: float) -> None:
        self._check_locked()
        if value <= self.MIN_THRESHOLD:
            raise ValueError(f"stop_threshold must be > 0, got {value}")
        self._stop_threshold = float(value)

    @property
    def inlier_factor(self) -> float:
        return self._inlier_factor

    @inlier_factor.setter
    def inlier_factor(self, value: float) -> None:
        self._check_locked()
        if value <= 0.0:
            raise ValueError(f"inlier_factor must be > 0, got {value}")
        self._inlier_factor = float(value)

    def _method_kwargs(self) -> dict[str, Any]:
        return dict(stop_threshold=self._stop_threshold, inlier_factor=self._inlier_factor)

    def _make_inliers_data(self, result: ConsensusResult) -> Optional[InliersData]:
        return InliersData(
            inliers=result.inliers,
            residuals=result.residuals,
            num_inliers=result.num_inliers,
            estimated_threshold=result.threshold,
        )

    def _refinement_sigma(self, result: ConsensusResult) -> float:
        return result.threshold


class _QualityScoredRobustEstimator(RobustEstimator):
    """Keeps one quality score per sample; higher scores are sampled first."""

    USES_QUALITY_SCORES: ClassVar[bool] = True

    def __init__(self, *args, quality_scores=None, **kwargs):
        super().__init__(*args, **kwargs)
        self._quality_scores = None
        if quality_scores is not None:
            self.quality_scores = quality_scores

    @property
    def quality_scores(self):
        return self._quality_scores

    @quality_scores.setter
    def quality_scores(self, scores) -> None:
        self._check_locked()
        if scores is None or len(scores) < self.MINIMUM_SIZE:
            raise ValueError(f"at least {self.MINIMUM_SIZE} quality scores are required")
        count = self._sample_count()
        if count and len(scores) != count:
            raise ValueError(f"got {len(scores)} quality scores for {count} samples")
        # Kept by reference
        self._quality_scores = scores

    def _method_kwargs(self) -> dict[str, Any]:
        return dict(super()._method_kwargs(), quality_scores=self._quality_scores)

    @property
    def is_ready(self) -> bool:
        return (
            super().is_ready
            and self._quality_scores is not None
            and len(self._quality_scores) == self._sample_count()
        )


# ---------- Concrete method bases ----------
# Each one only selects its loop in core.METHOD_RUNNERS
class RANSACRobustEstimator(_ThresholdRobustEstimator):
    METHOD = RobustEstimatorMethod.RANSAC


class MSACRobustEstimator(_ThresholdRobustEstimator):
    METHOD = RobustEstimatorMethod.MSAC


class PROSACRobustEstimator(_QualityScoredRobustEstimator, _ThresholdRobustEstimator):
    METHOD = RobustEstimatorMethod.PROSAC


class LMedSRobustEstimator(_MedianRobustEstimator):
    METHOD = RobustEstimatorMethod.LMEDS


class PROMedSRobustEstimator(_QualityScoredRobustEstimator, _MedianRobustEstimator):
    METHOD = RobustEstimatorMethod.PROMEDS
