"""
Adapters: make line / plane / conic / quadric / sphere fitting conform to the ModelFitter Protocol.

Refinement parameters are the implicit coefficients, defined up to scale:
    Line2D -> [a, b, c]            (3)
    Plane  -> [a, b, c, d]         (4)
    Conic  -> [a, b, c, d, e, f]   (6)
    Quadric, DualQuadric -> [a..j]  (10)
    DualConic            -> [a..f]  (6)

Spheres are refined in center / radius form: [cx, cy, cz, r] (4).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

import numpy as np

from ..geometry.primitives import (
    Conic, DualConic, DualQuadric, Line2D, Plane, Quadric, Sphere,
    conic_matrix, conic_terms, quadric_matrix, quadric_terms,
)
from ..robust.types import (
    FloatArray, IndexArray, Points2D, Points3D, RefinementProblem, as_homogeneous,
)


def _unit(coeffs: FloatArray) -> FloatArray:
    return coeffs / np.linalg.norm(coeffs)


def _form_refinement(model, h: FloatArray, terms, matrix) -> RefinementProblem:
    """
    Refinement of a quadratic form over (N,k) homogeneous vectors h:
        r_i = h_i^T M h_i / (||h_i||^2 ||M||_F)
    the scale free algebraic residual also used for scoring.
    """
    D = terms(h)
    sq_norm = np.sum(h * h, axis=1)

    def residuals(x: FloatArray) -> FloatArray:
        return (D @ x) / (sq_norm * np.linalg.norm(matrix(x)))

    return RefinementProblem(
        initial=_unit(model.as_array()),
        residuals=residuals,
        to_model=type(model).from_array,
        homogeneous=True,
    )


@dataclass(frozen=True, eq=False)
class Line2DFitter:
    points: Points2D                   # (N,2)
    sample_size: ClassVar[int] = 2

    def total_samples(self) -> int:
        return self.points.shape[0]

    def fit_minimal(self, indices: IndexArray) -> list[Line2D]:
        line = Line2D.from_points(self.points[indices[0]], self.points[indices[1]])
        return [] if line is None else [line]

    def residuals(self, model: Line2D) -> FloatArray:
        return np.abs(model.signed_distance(self.points))

    def refinement_problem(self, model: Line2D, inliers: IndexArray) -> Optional[RefinementProblem[Line2D]]:
        if inliers.shape[0] < self.sample_size:
            return None
        ph = as_homogeneous(self.points[inliers])

        def residuals(x: FloatArray) -> FloatArray:
            return (ph @ x) / np.hypot(x[0], x[1])

        return RefinementProblem(
            initial=_unit(model.as_array()),
            residuals=residuals,
            to_model=Line2D.from_array,
            homogeneous=True,
        )


@dataclass(frozen=True, eq=False)
class PlaneFitter:
    points: Points3D                   # (N,3)
    sample_size: ClassVar[int] = 3

    def total_samples(self) -> int:
        return self.points.shape[0]

    def fit_minimal(self, indices: IndexArray) -> list[Plane]:
        p1, p2, p3 = self.points[indices[:3]]
        plane = Plane.from_points(p1, p2, p3)
        return [] if plane is None else [plane]

    def residuals(self, model: Plane) -> FloatArray:
        return np.abs(model.signed_distance(self.points))

    def refinement_problem(self, model: Plane, inliers: IndexArray) -> Optional[RefinementProblem[Plane]]:
        if inliers.shape[0] < self.sample_size:
            return None
        ph = as_homogeneous(self.points[inliers])

        def residuals(x: FloatArray) -> FloatArray:
            return (ph @ x) / np.linalg.norm(x[:3])

        return RefinementProblem(
            initial=_unit(model.as_array()),
            residuals=residuals,
            to_model=Plane.from_array,
            homogeneous=True,
        )


@dataclass(frozen=True, eq=False)
class ConicFitter:
    points: Points2D                   # (N,2)
    sample_size: ClassVar[int] = 5

    def total_samples(self) -> int:
        return self.points.shape[0]

    def fit_minimal(self, indices: IndexArray) -> list[Conic]:
        conic = Conic.from_points(self.points[indices])
        return [] if conic is None else [conic]

    def residuals(self, model: Conic) -> FloatArray:
        return model.algebraic_residual(self.points)

    def refinement_problem(self, model: Conic, inliers: IndexArray) -> Optional[RefinementProblem[Conic]]:
        if inliers.shape[0] < self.sample_size:
            return None
        return _form_refinement(model, as_homogeneous(self.points[inliers]), conic_terms, conic_matrix)


@dataclass(frozen=True, eq=False)
class DualConicFitter:
    lines: FloatArray                  # (N,3) line coefficients
    sample_size: ClassVar[int] = 5

    def total_samples(self) -> int:
        return self.lines.shape[0]

    def fit_minimal(self, indices: IndexArray) -> list[DualConic]:
        dual = DualConic.from_lines(self.lines[indices])
        return [] if dual is None else [dual]

    def residuals(self, model: DualConic) -> FloatArray:
        return model.algebraic_residual(self.lines)

    def refinement_problem(self, model: DualConic, inliers: IndexArray) -> Optional[RefinementProblem[DualConic]]:
        if inliers.shape[0] < self.sample_size:
            return None
        return _form_refinement(model, self.lines[inliers], conic_terms, conic_matrix)


@dataclass(frozen=True, eq=False)
class QuadricFitter:
    points: Points3D                   # (N,3)
    sample_size: ClassVar[int] = 9

    def total_samples(self) -> int:
        return self.points.shape[0]

    def fit_minimal(self, indices: IndexArray) -> list[Quadric]:
        quadric = Quadric.from_points(self.points[indices])
        return [] if quadric is None else [quadric]

    def residuals(self, model: Quadric) -> FloatArray:
        return model.algebraic_residual(self.points)

    def refinement_problem(self, model: Quadric, inliers: IndexArray) -> Optional[RefinementProblem[Quadric]]:
        if inliers.shape[0] < self.sample_size:
            return None
        return _form_refinement(model, as_homogeneous(self.points[inliers]), quadric_terms, quadric_matrix)


@dataclass(frozen=True, eq=False)
class DualQuadricFitter:
    planes: FloatArray                 # (N,4) plane coefficients
    sample_size: ClassVar[int] = 9

    def total_samples(self) -> int:
        return self.planes.shape[0]

    def fit_minimal(self, indices: IndexArray) -> list[DualQuadric]:
        dual = DualQuadric.from_planes(self.planes[indices])
        return [] if dual is None else [dual]

    def residuals(self, model: DualQuadric) -> FloatArray:
        return model.algebraic_residual(self.planes)

    def refinement_problem(
            self, model: DualQuadric, inliers: IndexArray,
    ) -> Optional[RefinementProblem[DualQuadric]]:
        if inliers.shape[0] < self.sample_size:
            return None
        return _form_refinement(model, self.planes[inliers], quadric_terms, quadric_matrix)


@dataclass(frozen=True, eq=False)
class SphereFitter:
    points: Points3D                   # (N,3)
    sample_size: ClassVar[int] = 4

    def total_samples(self) -> int:
        return self.points.shape[0]

    def fit_minimal(self, indices: IndexArray) -> list[Sphere]:
        sphere = Sphere.from_points(self.points[indices])
        return [] if sphere is None else [sphere]

    def residuals(self, model: Sphere) -> FloatArray:
        return np.abs(model.signed_distance(self.points))

    def refinement_problem(self, model: Sphere, inliers: IndexArray) -> Optional[RefinementProblem[Sphere]]:
        if inliers.shape[0] < self.sample_size:
            return None
        pts = self.points[inliers]

        def residuals(x: FloatArray) -> FloatArray:
            return np.linalg.norm(pts - x[:3], axis=1) - x[3]

        return RefinementProblem(
            initial=model.as_array(),
            residuals=residuals,
            to_model=Sphere.from_array,
        )
