"""
Robust estimation framework

This module provides:
- Typed numpy aliases and result containers
- Subset samplers (uniform, PROSAC)
- Generic RANSAC / MSAC / LMedS / PROSAC / PROMedS consensus loops
- Least squares refinement with covariance estimation
- Estimator base class and method bases shared by every entity family
"""

from .types import (
    FloatArray, BoolArray, IndexArray, Points2D, Points3D, PointsHomog, Mask, Mat3x3, Mat4x4,
    RobustEstimatorMethod, CoordinatesType, RefinementProblem, ModelFitter,
    RobustEstimatorListener, ConsensusResult, InliersData, as_homogeneous,
)

from .sampling import UniformSampler, ProsacSampler

from .core import ransac, msac, lmeds, prosac, promeds, METHOD_RUNNERS

from .refine import RefinementResult, refine

from .estimator import RobustEstimator, create_estimator

from .methods import (
    RANSACRobustEstimator, MSACRobustEstimator, PROSACRobustEstimator,
    LMedSRobustEstimator, PROMedSRobustEstimator,
)

__all__ = [
    "FloatArray", "BoolArray", "IndexArray", "Points2D", "Points3D", "PointsHomog", "Mask",
    "Mat3x3", "Mat4x4",
    "RobustEstimatorMethod", "CoordinatesType", "RefinementProblem", "ModelFitter",
    "RobustEstimatorListener", "ConsensusResult", "InliersData", "as_homogeneous",
    "UniformSampler", "ProsacSampler",
    "ransac", "msac", "lmeds", "prosac", "promeds", "METHOD_RUNNERS",
    "RefinementResult", "refine",
    "RobustEstimator", "create_estimator",
    "RANSACRobustEstimator", "MSACRobustEstimator", "PROSACRobustEstimator",
    "LMedSRobustEstimator", "PROMedSRobustEstimator",
]
