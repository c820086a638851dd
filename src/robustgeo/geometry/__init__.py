"""
Geometry package

This module provides:
- Implicit primitives: 2D lines, planes, conics, quadrics and their duals
- Spheres
- Affine / projective transformation fitting and application, from points or hyperplanes
"""

from .primitives import (
    Line2D, Plane, Conic, DualConic, Quadric, DualQuadric, Sphere,
    as_coefficient_array, conic_design_matrix, conic_matrix, conic_terms,
    quadric_matrix, quadric_terms,
)

from .transforms import (
    AFFINE_MIN_POINTS, PROJECTIVE_MIN_POINTS,
    affine_from_params, affine_params,
    fit_affine_minimal, fit_affine_least_squares, fit_projective,
    projective_design_matrix, apply_affine, apply_projective, transfer_residuals,
    AFFINE_MIN_HYPERPLANES, PROJECTIVE_MIN_HYPERPLANES,
    fit_affine_from_hyperplanes, fit_projective_from_hyperplanes,
    hyperplane_design_matrix, transform_hyperplanes, hyperplane_residuals,
)

__all__ = [
    "Line2D", "Plane", "Conic", "DualConic", "Quadric", "DualQuadric", "Sphere",
    "as_coefficient_array", "conic_design_matrix", "conic_matrix", "conic_terms",
    "quadric_matrix", "quadric_terms",
    "AFFINE_MIN_POINTS", "PROJECTIVE_MIN_POINTS",
    "affine_from_params", "affine_params",
    "fit_affine_minimal", "fit_affine_least_squares", "fit_projective",
    "projective_design_matrix", "apply_affine", "apply_projective", "transfer_residuals",
    "AFFINE_MIN_HYPERPLANES", "PROJECTIVE_MIN_HYPERPLANES",
    "fit_affine_from_hyperplanes", "fit_projective_from_hyperplanes",
    "hyperplane_design_matrix", "transform_hyperplanes", "hyperplane_residuals",
]
