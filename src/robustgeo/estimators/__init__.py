"""
Robust estimators, one family per geometric entity.

Every family base offers `create(method, ...)` and five concrete classes:
RANSAC<Family>, MSAC<Family>, PROSAC<Family>, LMedS<Family>, PROMedS<Family>.
"""

from .line2d import (
    Line2DRobustEstimator, RANSACLine2DRobustEstimator, MSACLine2DRobustEstimator,
    PROSACLine2DRobustEstimator, LMedSLine2DRobustEstimator, PROMedSLine2DRobustEstimator,
)

from .plane import (
    PlaneRobustEstimator, RANSACPlaneRobustEstimator, MSACPlaneRobustEstimator,
    PROSACPlaneRobustEstimator, LMedSPlaneRobustEstimator, PROMedSPlaneRobustEstimator,
)

from .conic import (
    ConicRobustEstimator, RANSACConicRobustEstimator, MSACConicRobustEstimator,
    PROSACConicRobustEstimator, LMedSConicRobustEstimator, PROMedSConicRobustEstimator,
)

from .point2d import (
    Point2DRobustEstimator, RANSACPoint2DRobustEstimator, MSACPoint2DRobustEstimator,
    PROSACPoint2DRobustEstimator, LMedSPoint2DRobustEstimator, PROMedSPoint2DRobustEstimator,
)

from .point3d import (
    Point3DRobustEstimator, RANSACPoint3DRobustEstimator, MSACPoint3DRobustEstimator,
    PROSACPoint3DRobustEstimator, LMedSPoint3DRobustEstimator, PROMedSPoint3DRobustEstimator,
)

from .affine2d import (
    AffineTransformation2DRobustEstimator,
    RANSACAffineTransformation2DRobustEstimator, MSACAffineTransformation2DRobustEstimator,
    PROSACAffineTransformation2DRobustEstimator, LMedSAffineTransformation2DRobustEstimator,
    PROMedSAffineTransformation2DRobustEstimator,
)

from .affine3d import (
    AffineTransformation3DRobustEstimator,
    RANSACAffineTransformation3DRobustEstimator, MSACAffineTransformation3DRobustEstimator,
    PROSACAffineTransformation3DRobustEstimator, LMedSAffineTransformation3DRobustEstimator,
    PROMedSAffineTransformation3DRobustEstimator,
)

from .projective2d import (
    ProjectiveTransformation2DRobustEstimator,
    RANSACProjectiveTransformation2DRobustEstimator, MSACProjectiveTransformation2DRobustEstimator,
    PROSACProjectiveTransformation2DRobustEstimator, LMedSProjectiveTransformation2DRobustEstimator,
    PROMedSProjectiveTransformation2DRobustEstimator,
)

from .projective3d import (
    ProjectiveTransformation3DRobustEstimator,
    RANSACProjectiveTransformation3DRobustEstimator, MSACProjectiveTransformation3DRobustEstimator,
    PROSACProjectiveTransformation3DRobustEstimator, LMedSProjectiveTransformation3DRobustEstimator,
    PROMedSProjectiveTransformation3DRobustEstimator,
)

from .sphere import (
    SphereRobustEstimator,
    RANSACSphereRobustEstimator, MSACSphereRobustEstimator,
    PROSACSphereRobustEstimator, LMedSSphereRobustEstimator,
    PROMedSSphereRobustEstimator,
)

from .quadric import (
    QuadricRobustEstimator,
    RANSACQuadricRobustEstimator, MSACQuadricRobustEstimator,
    PROSACQuadricRobustEstimator, LMedSQuadricRobustEstimator,
    PROMedSQuadricRobustEstimator,
)

from .dual_conic import (
    DualConicRobustEstimator,
    RANSACDualConicRobustEstimator, MSACDualConicRobustEstimator,
    PROSACDualConicRobustEstimator, LMedSDualConicRobustEstimator,
    PROMedSDualConicRobustEstimator,
)

from .dual_quadric import (
    DualQuadricRobustEstimator,
    RANSACDualQuadricRobustEstimator, MSACDualQuadricRobustEstimator,
    PROSACDualQuadricRobustEstimator, LMedSDualQuadricRobustEstimator,
    PROMedSDualQuadricRobustEstimator,
)

from .line_affine2d import (
    LineCorrespondenceAffineTransformation2DRobustEstimator,
    RANSACLineCorrespondenceAffineTransformation2DRobustEstimator,
    MSACLineCorrespondenceAffineTransformation2DRobustEstimator,
    PROSACLineCorrespondenceAffineTransformation2DRobustEstimator,
    LMedSLineCorrespondenceAffineTransformation2DRobustEstimator,
    PROMedSLineCorrespondenceAffineTransformation2DRobustEstimator,
)

from .line_projective2d import (
    LineCorrespondenceProjectiveTransformation2DRobustEstimator,
    RANSACLineCorrespondenceProjectiveTransformation2DRobustEstimator,
    MSACLineCorrespondenceProjectiveTransformation2DRobustEstimator,
    PROSACLineCorrespondenceProjectiveTransformation2DRobustEstimator,
    LMedSLineCorrespondenceProjectiveTransformation2DRobustEstimator,
    PROMedSLineCorrespondenceProjectiveTransformation2DRobustEstimator,
)

from .plane_affine3d import (
    PlaneCorrespondenceAffineTransformation3DRobustEstimator,
    RANSACPlaneCorrespondenceAffineTransformation3DRobustEstimator,
    MSACPlaneCorrespondenceAffineTransformation3DRobustEstimator,
    PROSACPlaneCorrespondenceAffineTransformation3DRobustEstimator,
    LMedSPlaneCorrespondenceAffineTransformation3DRobustEstimator,
    PROMedSPlaneCorrespondenceAffineTransformation3DRobustEstimator,
)

from .plane_projective3d import (
    PlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
    RANSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
    MSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
    PROSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
    LMedSPlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
    PROMedSPlaneCorrespondenceProjectiveTransformation3DRobustEstimator,
)

__all__ = [
    "Line2DRobustEstimator", "RANSACLine2DRobustEstimator", "MSACLine2DRobustEstimator",
    "PROSACLine2DRobustEstimator", "LMedSLine2DRobustEstimator", "PROMedSLine2DRobustEstimator",
    "PlaneRobustEstimator", "RANSACPlaneRobustEstimator", "MSACPlaneRobustEstimator",
    "PROSACPlaneRobustEstimator", "LMedSPlaneRobustEstimator", "PROMedSPlaneRobustEstimator",
    "ConicRobustEstimator", "RANSACConicRobustEstimator", "MSACConicRobustEstimator",
    "PROSACConicRobustEstimator", "LMedSConicRobustEstimator", "PROMedSConicRobustEstimator",
    "Point2DRobustEstimator", "RANSACPoint2DRobustEstimator", "MSACPoint2DRobustEstimator",
    "PROSACPoint2DRobustEstimator", "LMedSPoint2DRobustEstimator", "PROMedSPoint2DRobustEstimator",
    "Point3DRobustEstimator", "RANSACPoint3DRobustEstimator", "MSACPoint3DRobustEstimator",
    "PROSACPoint3DRobustEstimator", "LMedSPoint3DRobustEstimator", "PROMedSPoint3DRobustEstimator",
    "AffineTransformation2DRobustEstimator",
    "RANSACAffineTransformation2DRobustEstimator", "MSACAffineTransformation2DRobustEstimator",
    "PROSACAffineTransformation2DRobustEstimator", "LMedSAffineTransformation2DRobustEstimator",
    "PROMedSAffineTransformation2DRobustEstimator",
    "AffineTransformation3DRobustEstimator",
    "RANSACAffineTransformation3DRobustEstimator", "MSACAffineTransformation3DRobustEstimator",
    "PROSACAffineTransformation3DRobustEstimator", "LMedSAffineTransformation3DRobustEstimator",
    "PROMedSAffineTransformation3DRobustEstimator",
    "ProjectiveTransformation2DRobustEstimator",
    "RANSACProjectiveTransformation2DRobustEstimator", "MSACProjectiveTransformation2DRobustEstimator",
    "PROSACProjectiveTransformation2DRobustEstimator", "LMedSProjectiveTransformation2DRobustEstimator",
    "PROMedSProjectiveTransformation2DRobustEstimator",
    "ProjectiveTransformation3DRobustEstimator",
    "RANSACProjectiveTransformation3DRobustEstimator", "MSACProjectiveTransformation3DRobustEstimator",
    "PROSACProjectiveTransformation3DRobustEstimator", "LMedSProjectiveTransformation3DRobustEstimator",
    "PROMedSProjectiveTransformation3DRobustEstimator",
    "SphereRobustEstimator",
    "RANSACSphereRobustEstimator", "MSACSphereRobustEstimator",
    "PROSACSphereRobustEstimator", "LMedSSphereRobustEstimator",
    "PROMedSSphereRobustEstimator",
    "QuadricRobustEstimator",
    "RANSACQuadricRobustEstimator", "MSACQuadricRobustEstimator",
    "PROSACQuadricRobustEstimator", "LMedSQuadricRobustEstimator",
    "PROMedSQuadricRobustEstimator",
    "DualConicRobustEstimator",
    "RANSACDualConicRobustEstimator", "MSACDualConicRobustEstimator",
    "PROSACDualConicRobustEstimator", "LMedSDualConicRobustEstimator",
    "PROMedSDualConicRobustEstimator",
    "DualQuadricRobustEstimator",
    "RANSACDualQuadricRobustEstimator", "MSACDualQuadricRobustEstimator",
    "PROSACDualQuadricRobustEstimator", "LMedSDualQuadricRobustEstimator",
    "PROMedSDualQuadricRobustEstimator",
    "LineCorrespondenceAffineTransformation2DRobustEstimator",
    "RANSACLineCorrespondenceAffineTransformation2DRobustEstimator",
    "MSACLineCorrespondenceAffineTransformation2DRobustEstimator",
    "PROSACLineCorrespondenceAffineTransformation2DRobustEstimator",
    "LMedSLineCorrespondenceAffineTransformation2DRobustEstimator",
    "PROMedSLineCorrespondenceAffineTransformation2DRobustEstimator",
    "LineCorrespondenceProjectiveTransformation2DRobustEstimator",
    "RANSACLineCorrespondenceProjectiveTransformation2DRobustEstimator",
    "MSACLineCorrespondenceProjectiveTransformation2DRobustEstimator",
    "PROSACLineCorrespondenceProjectiveTransformation2DRobustEstimator",
    "LMedSLineCorrespondenceProjectiveTransformation2DRobustEstimator",
    "PROMedSLineCorrespondenceProjectiveTransformation2DRobustEstimator",
    "PlaneCorrespondenceAffineTransformation3DRobustEstimator",
    "RANSACPlaneCorrespondenceAffineTransformation3DRobustEstimator",
    "MSACPlaneCorrespondenceAffineTransformation3DRobustEstimator",
    "PROSACPlaneCorrespondenceAffineTransformation3DRobustEstimator",
    "LMedSPlaneCorrespondenceAffineTransformation3DRobustEstimator",
    "PROMedSPlaneCorrespondenceAffineTransformation3DRobustEstimator",
    "PlaneCorrespondenceProjectiveTransformation3DRobustEstimator",
    "RANSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator",
    "MSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator",
    "PROSACPlaneCorrespondenceProjectiveTransformation3DRobustEstimator",
    "LMedSPlaneCorrespondenceProjectiveTransformation3DRobustEstimator",
    "PROMedSPlaneCorrespondenceProjectiveTransformation3DRobustEstimator",
]
