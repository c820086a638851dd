"""
Error taxonomy for robust estimators.

Invalid arguments are reported with the built-in ValueError.
"""


class RobustGeoError(Exception):
    """Base class for every robustgeo specific error."""


class LockedError(RobustGeoError):
    """Raised when an estimator is modified or re-run while an estimation is in progress."""


class NotReadyError(RobustGeoError):
    """Raised by estimate() when input data is missing or inconsistent."""


class RobustEstimatorError(RobustGeoError):
    """Raised when the consensus algorithm could not produce any model."""
