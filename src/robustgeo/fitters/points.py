"""
Adapters: estimate a point as the common intersection of lines (2D) or planes (3D).

Residual of a sample = euclidean distance from the point to the line / plane.

Refinement parameterization depends on the coordinates type:
- INHOMOGENEOUS: [x, y] / [x, y, z]
- HOMOGENEOUS:   [x, y, w] / [x, y, z, w], defined up to scale
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

import numpy as np

from ..geometry.primitives import Line2D, Plane
from ..robust.types import CoordinatesType, FloatArray, IndexArray, RefinementProblem


@dataclass(frozen=True, eq=False)
class _PointFitter:
    """
    coefficients: (N, d+1) rows [n, offset] of the lines / planes  n . p + offset = 0
    """
    coefficients: FloatArray
    coordinates_type: CoordinatesType = CoordinatesType.INHOMOGENEOUS

    sample_size: ClassVar[int]
    dim: ClassVar[int]

    def total_samples(self) -> int:
        return self.coefficients.shape[0]

    def _normalized(self, rows: FloatArray) -> FloatArray:
        # Unit normal vectors, so that n . p + offset is a distance
        return rows / np.linalg.norm(rows[:, :self.dim], axis=1, keepdims=True)

    def residuals(self, model: FloatArray) -> FloatArray:
        return np.abs(self._normalized(self.coefficients) @ np.append(model, 1.0))

    def refinement_problem(self, model: FloatArray, inliers: IndexArray) -> Optional[RefinementProblem[FloatArray]]:
        if inliers.shape[0] < self.sample_size:
            return None
        rows = self._normalized(self.coefficients[inliers])
        dim = self.dim

        if self.coordinates_type == CoordinatesType.HOMOGENEOUS:
            def residuals(x: FloatArray) -> FloatArray:
                return (rows @ x) / x[dim]

            return RefinementProblem(
                initial=np.append(model, 1.0),
                residuals=residuals,
                to_model=lambda x: x[:dim] / x[dim],
                homogeneous=True,
            )

        def residuals(x: FloatArray) -> FloatArray:
            return rows[:, :dim] @ x + rows[:, dim]

        return RefinementProblem(
            initial=np.asarray(model, dtype=np.float64).copy(),
            residuals=residuals,
            to_model=lambda x: np.array(x, dtype=np.float64),
        )


@dataclass(frozen=True, eq=False)
class Point2DFitter(_PointFitter):
    sample_size: ClassVar[int] = 2
    dim: ClassVar[int] = 2

    def fit_minimal(self, indices: IndexArray) -> list[FloatArray]:
        l1 = Line2D.from_array(self.coefficients[indices[0]])
        l2 = Line2D.from_array(self.coefficients[indices[1]])
        point = l1.intersection(l2)
        return [] if point is None else [point]


@dataclass(frozen=True, eq=False)
class Point3DFitter(_PointFitter):
    sample_size: ClassVar[int] = 3
    dim: ClassVar[int] = 3

    def fit_minimal(self, indices: IndexArray) -> list[FloatArray]:
        p1, p2, p3 = (Plane.from_array(self.coefficients[i]) for i in indices[:3])
        point = p1.intersection(p2, p3)
        return [] if point is None else [point]
