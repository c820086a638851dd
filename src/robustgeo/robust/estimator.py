"""
Base class of every robust estimator.

Lifecycle:
    configure (constructor / properties) -> estimate() -> model + diagnostics

Every mutator checks the lock first, so a listener callback running inside
estimate() can observe the estimator but never modify it.

Concrete estimators combine:
- a method base from methods.py (how the consensus loop runs)
- a family base from robustgeo.estimators (what samples are and how a model is fitted)
"""
from __future__ import annotations

import logging
from typing import Any, ClassVar, Mapping, Optional

import numpy as np

from ..config import DEFAULTS
from ..exceptions import LockedError, NotReadyError
from . import core
from .refine import refine
from .types import (
    ConsensusResult, FloatArray, InliersData, ModelFitter,
    RobustEstimatorListener, RobustEstimatorMethod,
)

logger = logging.getLogger(__name__)


class RobustEstimator:
    # ---------- Bounds ----------
    MIN_CONFIDENCE: ClassVar[float] = 0.0
    MAX_CONFIDENCE: ClassVar[float] = 1.0
    MIN_ITERATIONS: ClassVar[int] = 1
    MIN_PROGRESS_DELTA: ClassVar[float] = 0.0
    MAX_PROGRESS_DELTA: ClassVar[float] = 1.0
    MIN_THRESHOLD: ClassVar[float] = 0.0     # exclusive

    # ---------- Defaults ----------
    DEFAULT_CONFIDENCE: ClassVar[float] = DEFAULTS.confidence
    DEFAULT_MAX_ITERATIONS: ClassVar[int] = DEFAULTS.max_iterations
    DEFAULT_PROGRESS_DELTA: ClassVar[float] = DEFAULTS.progress_delta
    DEFAULT_REFINE_RESULT: ClassVar[bool] = DEFAULTS.refine_result
    DEFAULT_KEEP_COVARIANCE: ClassVar[bool] = DEFAULTS.keep_covariance
    DEFAULT_ROBUST_METHOD: ClassVar[RobustEstimatorMethod] = RobustEstimatorMethod(DEFAULTS.robust_method)

    # Overridden by every family
    MINIMUM_SIZE: ClassVar[int] = 1
    DEFAULT_THRESHOLD: ClassVar[float] = 1.0
    DEFAULT_STOP_THRESHOLD: ClassVar[float] = 1e-3

    # Set by method bases
    METHOD: ClassVar[Optional[RobustEstimatorMethod]] = None
    USES_QUALITY_SCORES: ClassVar[bool] = False

    def __init__(self, listener: Optional[RobustEstimatorListener] = None):
        self._listener = listener
        self._locked = False

        self._progress_delta = self.DEFAULT_PROGRESS_DELTA
        self._confidence = self.DEFAULT_CONFIDENCE
        self._max_iterations = self.DEFAULT_MAX_ITERATIONS
        self._refine_result = self.DEFAULT_REFINE_RESULT
        self._keep_covariance = self.DEFAULT_KEEP_COVARIANCE
        self._rng: Optional[np.random.Generator] = None

        self._inliers_data: Optional[InliersData] = None
        self._covariance: Optional[FloatArray] = None

    def _check_locked(self) -> None:
        if self._locked:
            raise LockedError(f"{type(self).__name__} is locked while estimating")

    # ---------- Configuration ----------
    @property
    def listener(self) -> Optional[RobustEstimatorListener]:
        return self._listener

    @listener.setter
    def listener(self, listener: Optional[RobustEstimatorListener]) -> None:
        self._check_locked()
        self._listener = listener

    @property
    def is_listener_available(self) -> bool:
        return self._listener is not None

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def progress_delta(self) -> float:
        """Minimum progress increment between two progress notifications."""
        return self._progress_delta

    @progress_delta.setter
    def progress_delta(self, value: float) -> None:
        self._check_locked()
        if not self.MIN_PROGRESS_DELTA <= value <= self.MAX_PROGRESS_DELTA:
            raise ValueError(f"progress_delta must be in [0, 1], got {value}")
        self._progress_delta = float(value)

    @property
    def confidence(self) -> float:
        """Probability of having drawn at least one outlier free subset when stopping."""
        return self._confidence

    @confidence.setter
    def confidence(self, value: float) -> None:
        self._check_locked()
        if not self.MIN_CONFIDENCE <= value <= self.MAX_CONFIDENCE:
            raise ValueError(f"confidence must be in [0, 1], got {value}")
        self._confidence = float(value)

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @max_iterations.setter
    def max_iterations(self, value: int) -> None:
        self._check_locked()
        if value < self.MIN_ITERATIONS:
            raise ValueError(f"max_iterations must be >= {self.MIN_ITERATIONS}, got {value}")
        self._max_iterations = int(value)

    @property
    def result_refined(self) -> bool:
        return self._refine_result

    @result_refined.setter
    def result_refined(self, value: bool) -> None:
        self._check_locked()
        self._refine_result = bool(value)

    @property
    def covariance_kept(self) -> bool:
        return self._keep_covariance

    @covariance_kept.setter
    def covariance_kept(self, value: bool) -> None:
        self._check_locked()
        self._keep_covariance = bool(value)

    @property
    def rng(self) -> Optional[np.random.Generator]:
        """Random generator used to draw subsets. None means a fresh default_rng() per run."""
        return self._rng

    @rng.setter
    def rng(self, rng: Optional[np.random.Generator]) -> None:
        self._check_locked()
        self._rng = rng

    @property
    def quality_scores(self):
        # Only score driven methods keep quality scores
        return None

    @quality_scores.setter
    def quality_scores(self, scores) -> None:
        self._check_locked()

    @property
    def method(self) -> Optional[RobustEstimatorMethod]:
        return self.METHOD

    # ---------- Results ----------
    @property
    def inliers_data(self) -> Optional[InliersData]:
        return self._inliers_data

    @property
    def covariance(self) -> Optional[FloatArray]:
        return self._covariance

    # ---------- Samples ----------
    def _sample_count(self) -> int:
        raise NotImplementedError

    def _samples_ready(self) -> bool:
        return self._sample_count() >= self.MINIMUM_SIZE

    @property
    def is_ready(self) -> bool:
        return self._samples_ready()

    def _make_fitter(self) -> ModelFitter:
        raise NotImplementedError

    # ---------- Method hooks ----------
    def _method_kwargs(self) -> dict[str, Any]:
        """Keyword arguments of the consensus loop specific to the method."""
        return {}

    def _run_consensus(self, fitter: ModelFitter) -> ConsensusResult:
        runner = core.METHOD_RUNNERS[self.METHOD]
        return runner(fitter, **self._method_kwargs(), **self._loop_kwargs())

    def _make_inliers_data(self, result: ConsensusResult) -> Optional[InliersData]:
        raise NotImplementedError

    def _refinement_sigma(self, result: ConsensusResult) -> float:
        raise NotImplementedError

    # ---------- Listener plumbing ----------
    def _notify_start(self) -> None:
        if self._listener is not None:
            self._listener.on_estimate_start(self)

    def _notify_end(self) -> None:
        if self._listener is not None:
            self._listener.on_estimate_end(self)

    def _notify_next_iteration(self, iteration: int) -> None:
        if self._listener is not None:
            self._listener.on_estimate_next_iteration(self, iteration)

    def _notify_progress_change(self, progress: float) -> None:
        if self._listener is not None:
            self._listener.on_estimate_progress_change(self, progress)

    def _loop_kwargs(self) -> dict[str, Any]:
        return dict(
            confidence=self._confidence,
            max_iterations=self._max_iterations,
            progress_delta=self._progress_delta,
            on_iteration=self._notify_next_iteration,
            on_progress=self._notify_progress_change,
            rng=self._rng,
        )

    # ---------- Estimation ----------
    def estimate(self):
        """
        Run the consensus loop, then refine the best model over its inliers when requested.

        Raises:
            LockedError: already estimating
            NotReadyError: not enough samples (or quality scores)
            RobustEstimatorError: no model could be estimated
        """
        self._check_locked()
        if not self.is_ready:
            raise NotReadyError(f"{type(self).__name__} is not ready")

        self._locked = True
        try:
            self._inliers_data = None
            self._covariance = None

            fitter = self._make_fitter()
            self._notify_start()

            result = self._run_consensus(fitter)
            self._inliers_data = self._make_inliers_data(result)
            model = self._attempt_refine(fitter, result)

            self._notify_end()
            return model
        finally:
            self._locked = False

    def _attempt_refine(self, fitter: ModelFitter, result: ConsensusResult):
        if not self._refine_result:
            return result.model

        inliers = np.flatnonzero(result.inliers)
        problem = fitter.refinement_problem(result.model, inliers)
        if problem is None:
            return result.model

        refined = refine(
            problem,
            sigma=self._refinement_sigma(result),
            keep_covariance=self._keep_covariance,
            max_evaluations=DEFAULTS.refinement_max_evaluations,
        )
        if refined is None:
            return result.model

        if not refined.improved:
            logger.debug("refinement did not improve the cost, keeping the consensus model")
            return result.model

        # Covariance of the refined parameters, only valid with the refined model
        if self._keep_covariance:
            self._covariance = refined.covariance
        return refined.model


def create_estimator(
        classes: Mapping[RobustEstimatorMethod, type],
        method: RobustEstimatorMethod | str,
        *args,
        quality_scores=None,
        **kwargs,
) -> RobustEstimator:
    """
    Instantiate the class bound to `method`.
    Quality scores are only forwarded to score driven methods.
    """
    cls = classes[RobustEstimatorMethod(method)]
    if cls.USES_QUALITY_SCORES:
        kwargs["quality_scores"] = quality_scores
    return cls(*args, **kwargs)
