"""
Adapters: make affine / projective transformation fitting conform to the ModelFitter Protocol.

This keeps robust/core.py generic and reusable.

Residual of a point correspondence = L2 transfer error || T(input) - output ||.
Residual of a line / plane correspondence = 1 - |cos| between the transformed input
and the output coefficient vectors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

import numpy as np

from ..geometry.transforms import (
    affine_from_params, affine_params, apply_affine, apply_projective,
    fit_affine_from_hyperplanes, fit_affine_least_squares, fit_affine_minimal,
    fit_projective, fit_projective_from_hyperplanes, hyperplane_residuals,
    transfer_residuals, transform_hyperplanes,
)
from ..robust.types import FloatArray, IndexArray, RefinementProblem


@dataclass(frozen=True, eq=False)
class _CorrespondenceFitter:
    input_points: FloatArray     # (N,d)
    output_points: FloatArray    # (N,d)

    sample_size: ClassVar[int]
    dim: ClassVar[int]

    def total_samples(self) -> int:
        return self.input_points.shape[0]


@dataclass(frozen=True, eq=False)
class _AffineFitter(_CorrespondenceFitter):
    eps: float = 1e-6

    def fit_minimal(self, indices: IndexArray) -> list[FloatArray]:
        T = fit_affine_minimal(self.input_points[indices], self.output_points[indices], eps=self.eps)
        return [] if T is None else [T]

    def residuals(self, model: FloatArray) -> FloatArray:
        return transfer_residuals(model, self.input_points, self.output_points)

    def refinement_problem(self, model: FloatArray, inliers: IndexArray) -> Optional[RefinementProblem[FloatArray]]:
        if inliers.shape[0] < self.sample_size:
            return None
        src = self.input_points[inliers]
        dst = self.output_points[inliers]
        dim = self.dim

        def residuals(x: FloatArray) -> FloatArray:
            return (apply_affine(affine_from_params(x, dim), src) - dst).ravel()

        # Linear least squares over all inliers, the consensus model if they are degenerate
        T0 = fit_affine_least_squares(src, dst)

        return RefinementProblem(
            initial=affine_params(model if T0 is None else T0),
            residuals=residuals,
            to_model=lambda x: affine_from_params(x, dim),
        )


@dataclass(frozen=True, eq=False)
class _ProjectiveFitter(_CorrespondenceFitter):
    eps: float = 1e-10

    def fit_minimal(self, indices: IndexArray) -> list[FloatArray]:
        H = fit_projective(self.input_points[indices], self.output_points[indices], eps=self.eps)
        return [] if H is None else [H]

    def residuals(self, model: FloatArray) -> FloatArray:
        return transfer_residuals(model, self.input_points, self.output_points, projective=True)

    def refinement_problem(self, model: FloatArray, inliers: IndexArray) -> Optional[RefinementProblem[FloatArray]]:
        if inliers.shape[0] < self.sample_size:
            return None
        src = self.input_points[inliers]
        dst = self.output_points[inliers]
        dp1 = self.dim + 1

        def residuals(x: FloatArray) -> FloatArray:
            return (apply_projective(x.reshape(dp1, dp1), src) - dst).ravel()

        return RefinementProblem(
            initial=np.asarray(model, dtype=np.float64).ravel(),
            residuals=residuals,
            to_model=lambda x: x.reshape(dp1, dp1) / np.linalg.norm(x),
            homogeneous=True,
        )


@dataclass(frozen=True, eq=False)
class AffineTransformation2DFitter(_AffineFitter):
    sample_size: ClassVar[int] = 3
    dim: ClassVar[int] = 2


@dataclass(frozen=True, eq=False)
class AffineTransformation3DFitter(_AffineFitter):
    sample_size: ClassVar[int] = 4
    dim: ClassVar[int] = 3


@dataclass(frozen=True, eq=False)
class ProjectiveTransformation2DFitter(_ProjectiveFitter):
    sample_size: ClassVar[int] = 4
    dim: ClassVar[int] = 2


@dataclass(frozen=True, eq=False)
class ProjectiveTransformation3DFitter(_ProjectiveFitter):
    sample_size: ClassVar[int] = 5
    dim: ClassVar[int] = 3


# ---------- Line / plane correspondences ----------
def _aligned_unit_difference(predicted: FloatArray, observed: FloatArray) -> FloatArray:
    """unit(predicted) - unit(observed), with predicted flipped to the observed side."""
    p = predicted / np.linalg.norm(predicted, axis=1, keepdims=True)
    o = observed / np.linalg.norm(observed, axis=1, keepdims=True)
    sign = np.where(np.sum(p * o, axis=1) < 0.0, -1.0, 1.0)
    return (p * sign[:, None] - o).ravel()


@dataclass(frozen=True, eq=False)
class _HyperplaneCorrespondenceFitter:
    input_hyperplanes: FloatArray     # (N,d+1)
    output_hyperplanes: FloatArray    # (N,d+1)

    sample_size: ClassVar[int]
    dim: ClassVar[int]

    def total_samples(self) -> int:
        return self.input_hyperplanes.shape[0]

    def residuals(self, model: FloatArray) -> FloatArray:
        return hyperplane_residuals(model, self.input_hyperplanes, self.output_hyperplanes)


@dataclass(frozen=True, eq=False)
class _HyperplaneAffineFitter(_HyperplaneCorrespondenceFitter):
    eps: float = 1e-10

    def fit_minimal(self, indices: IndexArray) -> list[FloatArray]:
        T = fit_affine_from_hyperplanes(
            self.input_hyperplanes[indices], self.output_hyperplanes[indices], eps=self.eps,
        )
        return [] if T is None else [T]

    def refinement_problem(self, model: FloatArray, inliers: IndexArray) -> Optional[RefinementProblem[FloatArray]]:
        if inliers.shape[0] < self.sample_size:
            return None
        src = self.input_hyperplanes[inliers]
        dst = self.output_hyperplanes[inliers]
        dim = self.dim

        def residuals(x: FloatArray) -> FloatArray:
            return _aligned_unit_difference(transform_hyperplanes(affine_from_params(x, dim), src), dst)

        # Linear fit over all inliers, the consensus model if they are degenerate
        T0 = fit_affine_from_hyperplanes(src, dst, eps=self.eps)

        return RefinementProblem(
            initial=affine_params(model if T0 is None else T0),
            residuals=residuals,
            to_model=lambda x: affine_from_params(x, dim),
        )


@dataclass(frozen=True, eq=False)
class _HyperplaneProjectiveFitter(_HyperplaneCorrespondenceFitter):
    eps: float = 1e-10

    def fit_minimal(self, indices: IndexArray) -> list[FloatArray]:
        H = fit_projective_from_hyperplanes(
            self.input_hyperplanes[indices], self.output_hyperplanes[indices], eps=self.eps,
        )
        return [] if H is None else [H]

    def refinement_problem(self, model: FloatArray, inliers: IndexArray) -> Optional[RefinementProblem[FloatArray]]:
        if inliers.shape[0] < self.sample_size:
            return None
        src = self.input_hyperplanes[inliers]
        dst = self.output_hyperplanes[inliers]
        dp1 = self.dim + 1

        def residuals(x: FloatArray) -> FloatArray:
            return _aligned_unit_difference(transform_hyperplanes(x.reshape(dp1, dp1), src), dst)

        return RefinementProblem(
            initial=np.asarray(model, dtype=np.float64).ravel(),
            residuals=residuals,
            to_model=lambda x: x.reshape(dp1, dp1) / np.linalg.norm(x),
            homogeneous=True,
        )


@dataclass(frozen=True, eq=False)
class LineCorrespondenceAffineTransformation2DFitter(_HyperplaneAffineFitter):
    sample_size: ClassVar[int] = 3
    dim: ClassVar[int] = 2


@dataclass(frozen=True, eq=False)
class LineCorrespondenceProjectiveTransformation2DFitter(_HyperplaneProjectiveFitter):
    sample_size: ClassVar[int] = 4
    dim: ClassVar[int] = 2


@dataclass(frozen=True, eq=False)
class PlaneCorrespondenceAffineTransformation3DFitter(_HyperplaneAffineFitter):
    sample_size: ClassVar[int] = 4
    dim: ClassVar[int] = 3


@dataclass(frozen=True, eq=False)
class PlaneCorrespondenceProjectiveTransformation3DFitter(_HyperplaneProjectiveFitter):
    sample_size: ClassVar[int] = 5
    dim: ClassVar[int] = 3
