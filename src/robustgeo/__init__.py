"""
robustgeo

Robust model fitting for geometric entities:
- Lines, planes, conics, quadrics and spheres from points
- Dual conics / dual quadrics from tangent lines / planes
- Points from intersecting lines / planes
- 2D/3D affine and projective transformations from point, line or plane correspondences

Every entity family offers RANSAC, MSAC, LMedS, PROSAC and PROMedS estimators.
"""
import logging

from .exceptions import RobustGeoError, LockedError, NotReadyError, RobustEstimatorError
from .robust.types import RobustEstimatorMethod, CoordinatesType, InliersData

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "RobustGeoError", "LockedError", "NotReadyError", "RobustEstimatorError",
    "RobustEstimatorMethod", "CoordinatesType", "InliersData",
    "__version__",
]
