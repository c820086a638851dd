"""
Shared typed primitives for the robust estimation framework.

Defines:
- Typed NumPy aliases for geometry
    - Points are (N,2) / (N,3) float arrays
    - Transforms are (d+1)x(d+1) homogeneous matrices
- Method / coordinate enums
- Generic model-fitter protocol used by the consensus loops
- Listener protocol notified by estimators
- Structured result containers (consensus result, inliers data, refinement problem)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, Protocol, TypeAlias, TypeVar

import numpy as np
import numpy.typing as npt

# ---------- Numpy typing aliases ----------
# float64 for geometry / matrices, bool_ for masks, intp for sample indices.
FloatArray: TypeAlias = npt.NDArray[np.float64]
BoolArray: TypeAlias = npt.NDArray[np.bool_]
IndexArray: TypeAlias = npt.NDArray[np.intp]

Points2D: TypeAlias = FloatArray      # shape: (N, 2)
Points3D: TypeAlias = FloatArray      # shape: (N, 3)
PointsHomog: TypeAlias = FloatArray   # shape: (N, d+1)

# Boolean inlier mask: True as inlier, False as outlier
Mask: TypeAlias = BoolArray           # shape: (N,)

Mat3x3: TypeAlias = FloatArray        # 2D affine / projective transformation
Mat4x4: TypeAlias = FloatArray        # 3D affine / projective transformation

M = TypeVar("M")


class RobustEstimatorMethod(str, Enum):
    """Consensus algorithm used by an estimator."""
    RANSAC = "ransac"
    LMEDS = "lmeds"
    MSAC = "msac"
    PROSAC = "prosac"
    PROMEDS = "promeds"


class CoordinatesType(str, Enum):
    """Coordinate system used to parameterize a point during refinement."""
    INHOMOGENEOUS = "inhomogeneous"
    HOMOGENEOUS = "homogeneous"


# ---------- Refinement ----------
@dataclass(frozen=True)
class RefinementProblem(Generic[M]):
    """
    Non-linear least squares problem built by a fitter around a consensus model.

    residuals(params) must return the signed residual vector of the inliers.
    homogeneous=True means params are only defined up to scale.
    """
    initial: FloatArray
    residuals: Callable[[FloatArray], FloatArray]
    to_model: Callable[[FloatArray], M]
    homogeneous: bool = False


# ---------- Model fitter protocol ----------
class ModelFitter(Protocol[M]):
    """
    Interface that a model must implement to be usable by the consensus loops.

    Steps:
    1) Fit candidate models from a minimal subset of sample indices
    2) Score all samples with a per-sample (non-negative) residual
    3) Describe the least squares problem used to refine the best model over its inliers
    """

    @property
    def sample_size(self) -> int:
        """Number of samples in a minimal subset."""
        ...

    def total_samples(self) -> int:
        ...

    def fit_minimal(self, indices: IndexArray) -> list[M]:
        """
        Fit from the minimal number of samples.
        Return an empty list if the subset is degenerate.
        """
        ...

    def residuals(self, model: M) -> FloatArray:
        """
        Return residuals of every sample, shape (N,). Smaller = better.
        """
        ...

    def refinement_problem(self, model: M, inliers: IndexArray) -> Optional[RefinementProblem[M]]:
        ...


# ---------- Listener protocol ----------
class RobustEstimatorListener(Protocol):
    """
    Receives lifecycle notifications from an estimator.

    Every callback runs while the estimator is locked.
    """

    def on_estimate_start(self, estimator: Any) -> None:
        ...

    def on_estimate_end(self, estimator: Any) -> None:
        ...

    def on_estimate_next_iteration(self, estimator: Any, iteration: int) -> None:
        ...

    def on_estimate_progress_change(self, estimator: Any, progress: float) -> None:
        ...


# ---------- Output containers ----------
@dataclass(frozen=True)
class ConsensusResult(Generic[M]):
    model: M                # best model found by the consensus loop (not refined)
    inliers: Mask           # inlier mask under the best model
    residuals: FloatArray   # residual of every sample under the best model
    num_inliers: int
    iterations: int         # how many iterations were actually run
    threshold: float        # threshold used to split inliers / outliers


@dataclass(frozen=True)
class InliersData:
    """Diagnostics kept by an estimator after estimate()."""
    inliers: Optional[Mask]
    residuals: Optional[FloatArray]
    num_inliers: int
    # Only set by median based methods (LMedS, PROMedS)
    estimated_threshold: Optional[float] = None


# ---------- Helper Function ----------
def as_homogeneous(pts: FloatArray) -> PointsHomog:
    """
    Convert (N,d) points -> (N,d+1) homogeneous points: [x, ..., 1].
    """
    if pts.ndim != 2:
        raise ValueError(f"Expected points shape (N, d) but got {pts.shape}")

    ones = np.ones((pts.shape[0], 1), dtype=np.float64)
    return np.hstack([pts.astype(np.float64), ones])
