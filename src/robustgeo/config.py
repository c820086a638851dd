"""
Default configuration shared by all robust estimators.

Values are exposed as class constants on the estimators
(e.g. PlaneRobustEstimator.DEFAULT_CONFIDENCE), so changing them here
changes every family at once.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEBUG_ENV_VAR = "ROBUSTGEO_DEBUG"


@dataclass(frozen=True)
class RobustEstimatorDefaults:
    # Probability of having drawn at least one outlier-free minimal subset.
    confidence: float = 0.99

    # Hard cap on consensus iterations.
    max_iterations: int = 5000

    # Minimum progress change between two progress notifications.
    progress_delta: float = 0.05

    # Post-consensus least squares over inliers.
    refine_result: bool = True
    keep_covariance: bool = False

    # Method used by the create() factories when none is given.
    robust_method: str = "promeds"

    # LMedS threshold = inlier_factor * robust standard deviation of residuals.
    lmeds_inlier_factor: float = 1.5

    # After this many PROSAC draws sampling becomes uniform (plain RANSAC).
    prosac_convergence_iterations: int = 200000

    # Function evaluation budget for the Levenberg-Marquardt refinement.
    refinement_max_evaluations: int = 1000


DEFAULTS = RobustEstimatorDefaults()


def debug_enabled() -> bool:
    """True when ROBUSTGEO_DEBUG=1 is set in the environment."""
    return os.environ.get(DEBUG_ENV_VAR, "0") == "1"
