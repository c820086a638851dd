"""
Generic consensus loops (model-agnostic).

Overview:
- Randomly sample a *minimal* subset of samples
- Fit candidate model(s) from that subset
- Score all samples by computing residual errors
- Keep the best scoring model
- Stop once enough iterations were run to reach the requested confidence

Variants only differ in how subsets are drawn and how a candidate is scored:
- RANSAC : most samples with residual <= threshold
- MSAC   : lowest sum of residuals truncated at threshold
- LMedS  : lowest median residual
- PROSAC : RANSAC scoring, subsets drawn from the best quality samples first
- PROMedS: LMedS scoring, subsets drawn from the best quality samples first

Uses the ModelFitter Protocol from types.py, so every entity family shares these loops.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

import numpy as np

from ..config import DEFAULTS
from ..exceptions import RobustEstimatorError
from .sampling import ProsacSampler, UniformSampler
from .types import (
    ConsensusResult, FloatArray, Mask, ModelFitter, RobustEstimatorMethod,
)

M = TypeVar("M")
logger = logging.getLogger(__name__)

IterationCallback = Callable[[int], None]
ProgressCallback = Callable[[float], None]

# Normal-consistency constant for the median absolute residual
_MEDIAN_TO_STD = 1.4826

# Outlier ratio tolerated by median scoring, used for its initial iteration count
_MEDIAN_BREAKDOWN = 0.5


def _required_iter_for_confidence(
        *,
        p_all_inliers: float,
        inlier_ratio: float,
        sample_size: int,
) -> int:
    """
    Compute the number of iterations needed so that the probability
    of having drawn at least ONE all-inlier minimal sample is >= p_all_inliers.

    inlier ratio w = (# inliers) / N, Minimal sample s:
    - P(all-inliers) = w^s
    - P(not-all-inlier-for-k-times) = (1 - w^s)^k
    - P(at-least-once-all-inliers) = 1 - (1 - w^s)^k >= p

    Formula:
       k >= log(1 - p) / log(1 - w^s)

    Edge cases:
     - w == 0  -> impossible, return "infinite-ish" (capped by max iterations)
     - w == 1  -> 1 iteration is enough
    """
    p = float(np.clip(p_all_inliers, 1e-12, 1.0 - 1e-12))
    w = float(np.clip(inlier_ratio, 0.0, 1.0))
    s = int(sample_size)

    if s <= 0:
        raise ValueError("sample_size must be >= 1")

    if w >= 1.0:
        return 1

    if w <= 0.0:
        return int(1e9)

    w_to_s = float(np.clip(w ** s, 1e-12, 1.0 - 1e-12))

    denominator = np.log(1 - w_to_s)
    numerator = np.log(1 - p)
    k = int(np.ceil(numerator / denominator))
    return max(1, k)


@dataclass
class _Hypothesis:
    score: tuple            # lower is better
    model: object
    residuals: FloatArray
    inliers: Mask
    num_inliers: int
    threshold: float
    support: int            # inliers under a threshold fixed before the run


class _ProgressNotifier:
    """Forwards iteration / throttled progress notifications."""

    def __init__(
            self,
            progress_delta: float,
            on_iteration: Optional[IterationCallback],
            on_progress: Optional[ProgressCallback],
    ):
        self.progress_delta = float(progress_delta)
        self.on_iteration = on_iteration
        self.on_progress = on_progress
        self.last_progress = 0.0

    def iteration(self, i: int) -> None:
        if self.on_iteration is not None:
            self.on_iteration(i)

    def progress(self, done: int, target: int) -> None:
        if self.on_progress is None:
            return
        progress = min(1.0, done / float(max(target, 1)))
        if progress - self.last_progress >= self.progress_delta and progress > self.last_progress:
            self.last_progress = progress
            self.on_progress(progress)


def _consensus_loop(
        fitter: ModelFitter[M],
        draw: Callable[[], np.ndarray],
        evaluate: Callable[[object, FloatArray], Optional[_Hypothesis]],
        *,
        confidence: float,
        max_iterations: int,
        notifier: _ProgressNotifier,
        stop: Optional[Callable[[_Hypothesis], bool]] = None,
        initial_target: Optional[int] = None,
        name: str = "consensus",
) -> ConsensusResult[M]:
    """
    target_iters starts at min(max_iterations, initial_target) and only shrinks
    from the support of the best hypothesis, which every scoring rule counts
    under a threshold fixed before the run.
    """
    n = fitter.total_samples()
    s = fitter.sample_size

    if max_iterations < 1:
        raise ValueError("max_iterations must be >= 1")

    best: Optional[_Hypothesis] = None
    target_iters = max_iterations if initial_target is None else min(max_iterations, initial_target)
    iters_run = 0

    i = 0
    while i < max_iterations and i < target_iters:
        iters_run = i + 1
        notifier.iteration(i)

        sample_idx = draw()
        for model in fitter.fit_minimal(sample_idx):
            err = fitter.residuals(model)
            candidate = evaluate(model, err)
            if candidate is None:
                continue

            if best is None or candidate.score < best.score:
                best = candidate

                w = best.support / float(n)
                iter_needed = _required_iter_for_confidence(
                    p_all_inliers=confidence,
                    inlier_ratio=w,
                    sample_size=s,
                )
                target_iters = min(target_iters, max(iter_needed, iters_run))
                logger.debug(
                    "[%s] better model: inliers=%d/%d, support=%d, w=%.3f, target_iters=%d",
                    name, best.num_inliers, n, best.support, w, target_iters,
                )

        i += 1
        notifier.progress(i, min(target_iters, max_iterations))

        if stop is not None and best is not None and stop(best):
            break

    if best is None:
        raise RobustEstimatorError(f"{name}: no model could be estimated after {iters_run} iterations")

    logger.debug("[%s] finished after %d iterations with %d/%d inliers",
                 name, iters_run, best.num_inliers, n)

    return ConsensusResult(
        model=best.model,
        inliers=best.inliers,
        residuals=best.residuals,
        num_inliers=best.num_inliers,
        iterations=iters_run,
        threshold=best.threshold,
    )


# ---------- Scoring rules ----------
def _inlier_count_evaluator(threshold: float, sample_size: int):
    def evaluate(model, err: FloatArray) -> Optional[_Hypothesis]:
        inliers: Mask = (err <= threshold)
        num_inliers = int(np.count_nonzero(inliers))
        if num_inliers < sample_size:
            # Not enough inliers to be meaningful
            return None
        # Primary criterion: more inliers. If tie: lower inlier error
        inlier_sum = float(np.sum(err[inliers]))
        return _Hypothesis(
            (-num_inliers, inlier_sum), model, err, inliers, num_inliers, threshold, num_inliers,
        )

    return evaluate


def _truncated_cost_evaluator(threshold: float):
    def evaluate(model, err: FloatArray) -> Optional[_Hypothesis]:
        inliers: Mask = (err <= threshold)
        num_inliers = int(np.count_nonzero(inliers))
        cost = float(np.sum(np.minimum(err, threshold)))
        return _Hypothesis((cost,), model, err, inliers, num_inliers, threshold, num_inliers)

    return evaluate


def _median_evaluator(stop_threshold: float, inlier_factor: float, total: int, sample_size: int):
    # Finite-sample correction of the robust standard deviation
    correction = 1.0 + 5.0 / max(total - sample_size, 1)

    def evaluate(model, err: FloatArray) -> Optional[_Hypothesis]:
        median = float(np.median(err))
        if not np.isfinite(median):
            return None
        estimated = inlier_factor * _MEDIAN_TO_STD * correction * median
        threshold = max(estimated, stop_threshold)
        inliers: Mask = (err <= threshold)
        # Counted under the fixed stop threshold, never the estimated one
        support = int(np.count_nonzero(err <= stop_threshold))
        return _Hypothesis(
            (median,), model, err, inliers, int(np.count_nonzero(inliers)), threshold, support,
        )

    return evaluate


def _median_stop(stop_threshold: float):
    # Hypothesis.score[0] is the median residual
    return lambda best: best.score[0] <= stop_threshold


def _median_initial_target(confidence: float, sample_size: int) -> int:
    # Enough subsets to draw an outlier free one with up to 50% outliers
    return _required_iter_for_confidence(
        p_all_inliers=confidence,
        inlier_ratio=_MEDIAN_BREAKDOWN,
        sample_size=sample_size,
    )


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def _check_sample_count(fitter: ModelFitter, name: str) -> None:
    n = fitter.total_samples()
    if n < fitter.sample_size:
        raise RobustEstimatorError(
            f"{name}: {n} samples but {fitter.sample_size} are needed for a minimal subset"
        )


# ---------- Public loops ----------
def ransac(
        fitter: ModelFitter[M],
        *,
        threshold: float,
        confidence: float = DEFAULTS.confidence,
        max_iterations: int = DEFAULTS.max_iterations,
        progress_delta: float = DEFAULTS.progress_delta,
        on_iteration: Optional[IterationCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
        rng: Optional[np.random.Generator] = None,
) -> ConsensusResult[M]:
    """
    RANSAC: keep the model with the most samples within threshold.
    """
    _check_sample_count(fitter, "RANSAC")
    sampler = UniformSampler(fitter.total_samples(), fitter.sample_size, _rng(rng))
    return _consensus_loop(
        fitter, sampler.sample, _inlier_count_evaluator(threshold, fitter.sample_size),
        confidence=confidence, max_iterations=max_iterations,
        notifier=_ProgressNotifier(progress_delta, on_iteration, on_progress),
        name="RANSAC",
    )


def msac(
        fitter: ModelFitter[M],
        *,
        threshold: float,
        confidence: float = DEFAULTS.confidence,
        max_iterations: int = DEFAULTS.max_iterations,
        progress_delta: float = DEFAULTS.progress_delta,
        on_iteration: Optional[IterationCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
        rng: Optional[np.random.Generator] = None,
) -> ConsensusResult[M]:
    """
    MSAC: inliers contribute their residual, outliers contribute the threshold.
    Lowest total wins, so among models with equal support the most accurate one is kept.
    """
    _check_sample_count(fitter, "MSAC")
    sampler = UniformSampler(fitter.total_samples(), fitter.sample_size, _rng(rng))
    return _consensus_loop(
        fitter, sampler.sample, _truncated_cost_evaluator(threshold),
        confidence=confidence, max_iterations=max_iterations,
        notifier=_ProgressNotifier(progress_delta, on_iteration, on_progress),
        name="MSAC",
    )


def lmeds(
        fitter: ModelFitter[M],
        *,
        stop_threshold: float,
        inlier_factor: float = DEFAULTS.lmeds_inlier_factor,
        confidence: float = DEFAULTS.confidence,
        max_iterations: int = DEFAULTS.max_iterations,
        progress_delta: float = DEFAULTS.progress_delta,
        on_iteration: Optional[IterationCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
        rng: Optional[np.random.Generator] = None,
) -> ConsensusResult[M]:
    """
    LMedS: keep the model with the least median residual.

    No inlier threshold is needed up front; it is estimated from the median as
        inlier_factor * 1.4826 * (1 + 5 / (N - s)) * median
    and never goes below stop_threshold. The loop ends early once the best
    median is <= stop_threshold.

    The iteration count starts from the one tolerating 50% outliers and only
    shrinks from the samples within stop_threshold.
    """
    _check_sample_count(fitter, "LMedS")
    n = fitter.total_samples()
    s = fitter.sample_size
    sampler = UniformSampler(n, s, _rng(rng))
    return _consensus_loop(
        fitter, sampler.sample, _median_evaluator(stop_threshold, inlier_factor, n, s),
        confidence=confidence, max_iterations=max_iterations,
        notifier=_ProgressNotifier(progress_delta, on_iteration, on_progress),
        stop=_median_stop(stop_threshold),
        initial_target=_median_initial_target(confidence, s),
        name="LMedS",
    )


def prosac(
        fitter: ModelFitter[M],
        *,
        quality_scores,
        threshold: float,
        confidence: float = DEFAULTS.confidence,
        max_iterations: int = DEFAULTS.max_iterations,
        progress_delta: float = DEFAULTS.progress_delta,
        on_iteration: Optional[IterationCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
        rng: Optional[np.random.Generator] = None,
        convergence_iterations: Optional[int] = None,
) -> ConsensusResult[M]:
    """
    PROSAC: RANSAC scoring with subsets drawn progressively from the best quality samples.
    """
    _check_sample_count(fitter, "PROSAC")
    _check_quality_scores(fitter, quality_scores)
    sampler = ProsacSampler(quality_scores, fitter.sample_size, _rng(rng), convergence_iterations)
    return _consensus_loop(
        fitter, sampler.sample, _inlier_count_evaluator(threshold, fitter.sample_size),
        confidence=confidence, max_iterations=max_iterations,
        notifier=_ProgressNotifier(progress_delta, on_iteration, on_progress),
        name="PROSAC",
    )


def promeds(
        fitter: ModelFitter[M],
        *,
        quality_scores,
        stop_threshold: float,
        inlier_factor: float = DEFAULTS.lmeds_inlier_factor,
        confidence: float = DEFAULTS.confidence,
        max_iterations: int = DEFAULTS.max_iterations,
        progress_delta: float = DEFAULTS.progress_delta,
        on_iteration: Optional[IterationCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
        rng: Optional[np.random.Generator] = None,
        convergence_iterations: Optional[int] = None,
) -> ConsensusResult[M]:
    """
    PROMedS: LMedS scoring with subsets drawn progressively from the best quality samples.
    """
    _check_sample_count(fitter, "PROMedS")
    _check_quality_scores(fitter, quality_scores)
    n = fitter.total_samples()
    s = fitter.sample_size
    sampler = ProsacSampler(quality_scores, s, _rng(rng), convergence_iterations)
    return _consensus_loop(
        fitter, sampler.sample, _median_evaluator(stop_threshold, inlier_factor, n, s),
        confidence=confidence, max_iterations=max_iterations,
        notifier=_ProgressNotifier(progress_delta, on_iteration, on_progress),
        stop=_median_stop(stop_threshold),
        initial_target=_median_initial_target(confidence, s),
        name="PROMedS",
    )


def _check_quality_scores(fitter: ModelFitter, quality_scores) -> None:
    if quality_scores is None or len(quality_scores) != fitter.total_samples():
        raise ValueError("quality_scores must contain one score per sample")


METHOD_RUNNERS = {
    RobustEstimatorMethod.RANSAC: ransac,
    RobustEstimatorMethod.MSAC: msac,
    RobustEstimatorMethod.LMEDS: lmeds,
    RobustEstimatorMethod.PROSAC: prosac,
    RobustEstimatorMethod.PROMEDS: promeds,
}
