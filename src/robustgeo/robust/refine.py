"""
Non-linear refinement of a consensus model over its inliers.

The fitter describes the problem (initial parameters + residual function), this module:
- runs Levenberg-Marquardt (scipy.optimize.least_squares)
- tells whether the refined parameters improved the initial cost
- optionally estimates the covariance of the refined parameters
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

import numpy as np
from scipy.optimize import least_squares

from ..config import DEFAULTS
from .types import FloatArray, RefinementProblem

M = TypeVar("M")
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefinementResult(Generic[M]):
    model: M
    params: FloatArray
    initial_cost: float
    final_cost: float
    improved: bool
    covariance: Optional[FloatArray]


def _gauge_fixed(problem: RefinementProblem):
    """Append ||x|| - 1 so that a homogeneous vector cannot drift in scale."""
    if not problem.homogeneous:
        return problem.residuals

    def residuals(x: FloatArray) -> FloatArray:
        return np.append(problem.residuals(x), np.linalg.norm(x) - 1.0)

    return residuals


def _covariance(jacobian: FloatArray, sigma: float) -> Optional[FloatArray]:
    jtj = jacobian.T @ jacobian
    cond = np.linalg.cond(jtj)
    if not np.isfinite(cond) or cond >= 1.0 / np.finfo(np.float64).eps:
        return None
    return (sigma ** 2) * np.linalg.inv(jtj)


def refine(
        problem: RefinementProblem[M],
        *,
        sigma: float,
        keep_covariance: bool = False,
        max_evaluations: int = DEFAULTS.refinement_max_evaluations,
) -> Optional[RefinementResult[M]]:
    """
    Minimize the sum of squared residuals of `problem`.

    sigma: standard deviation of a residual, only scales the covariance.
    Returns None when the optimizer fails numerically.
    """
    x0 = np.asarray(problem.initial, dtype=np.float64).ravel()
    if problem.homogeneous:
        norm = np.linalg.norm(x0)
        if norm <= 0.0:
            return None
        x0 = x0 / norm

    fun = _gauge_fixed(problem)

    try:
        r0 = fun(x0)
        initial_cost = 0.5 * float(r0 @ r0)

        # LM needs at least as many residuals as unknowns
        method = "lm" if r0.shape[0] >= x0.shape[0] else "trf"
        sol = least_squares(fun, x0, method=method, max_nfev=max_evaluations)

        params = sol.x
        if problem.homogeneous:
            params = params / np.linalg.norm(params)
            r = fun(params)
            final_cost = 0.5 * float(r @ r)
        else:
            final_cost = float(sol.cost)

        cov = _covariance(sol.jac, sigma) if keep_covariance else None
        model = problem.to_model(params)
    except (ValueError, np.linalg.LinAlgError) as e:
        logger.debug("refinement failed: %s", e)
        return None

    if not np.isfinite(final_cost):
        logger.debug("refinement diverged")
        return None

    return RefinementResult(
        model=model,
        params=params,
        initial_cost=initial_cost,
        final_cost=final_cost,
        improved=final_cost <= initial_cost,
        covariance=cov,
    )
