"""
Model fitters: adapters between the geometry package and the consensus loops.
"""

from .shapes import (
    Line2DFitter, PlaneFitter, ConicFitter, DualConicFitter,
    QuadricFitter, DualQuadricFitter, SphereFitter,
)

from .points import Point2DFitter, Point3DFitter

from .transforms import (
    AffineTransformation2DFitter, AffineTransformation3DFitter,
    ProjectiveTransformation2DFitter, ProjectiveTransformation3DFitter,
    LineCorrespondenceAffineTransformation2DFitter, LineCorrespondenceProjectiveTransformation2DFitter,
    PlaneCorrespondenceAffineTransformation3DFitter, PlaneCorrespondenceProjectiveTransformation3DFitter,
)

__all__ = [
    "Line2DFitter", "PlaneFitter", "ConicFitter", "DualConicFitter",
    "QuadricFitter", "DualQuadricFitter", "SphereFitter",
    "Point2DFitter", "Point3DFitter",
    "AffineTransformation2DFitter", "AffineTransformation3DFitter",
    "ProjectiveTransformation2DFitter", "ProjectiveTransformation3DFitter",
    "LineCorrespondenceAffineTransformation2DFitter", "LineCorrespondenceProjectiveTransformation2DFitter",
    "PlaneCorrespondenceAffineTransformation3DFitter", "PlaneCorrespondenceProjectiveTransformation3DFitter",
]
