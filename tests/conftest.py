"""
Shared fixtures for the robustgeo tests.
"""

import numpy as np
import pytest

from robustgeo.exceptions import LockedError

# Setters every estimator exposes, with a value that would be valid when unlocked
_COMMON_SETTERS = {
    "listener": None,
    "progress_delta": 0.5,
    "confidence": 0.5,
    "max_iterations": 10,
    "result_refined": True,
    "covariance_kept": True,
    "rng": None,
    "quality_scores": [1.0] * 10,
}

# Only present on some method / family combinations
_OPTIONAL_SETTERS = {
    "threshold": 0.5,
    "stop_threshold": 0.5,
    "inlier_factor": 2.0,
    "compute_and_keep_inliers": True,
    "compute_and_keep_residuals": True,
    "refinement_coordinates_type": "homogeneous",
}

_SAMPLE_ATTRIBUTES = ("points", "lines", "planes")

# Correspondence setters and the getters of their two sides
_PAIR_SETTERS = {
    "set_points": ("input_points", "output_points"),
    "set_lines": ("input_lines", "output_lines"),
    "set_planes": ("input_planes", "output_planes"),
}


class LockCheckingListener:
    """
    Counts notifications and, on each of them, checks that the estimator
    refuses every modification while it is estimating.
    """

    def __init__(self):
        self.start = 0
        self.end = 0
        self.iterations = []
        self.progress = []

    def check_locked(self, estimator):
        assert estimator.is_locked

        for name, value in _COMMON_SETTERS.items():
            with pytest.raises(LockedError):
                setattr(estimator, name, value)

        for name, value in _OPTIONAL_SETTERS.items():
            if hasattr(estimator, name):
                with pytest.raises(LockedError):
                    setattr(estimator, name, value)

        for name in _SAMPLE_ATTRIBUTES:
            if hasattr(estimator, name):
                with pytest.raises(LockedError):
                    setattr(estimator, name, getattr(estimator, name))

        for setter, (inputs, outputs) in _PAIR_SETTERS.items():
            if hasattr(estimator, setter):
                with pytest.raises(LockedError):
                    getattr(estimator, setter)(getattr(estimator, inputs), getattr(estimator, outputs))

        with pytest.raises(LockedError):
            estimator.estimate()

    def on_estimate_start(self, estimator):
        self.start += 1
        self.check_locked(estimator)

    def on_estimate_end(self, estimator):
        self.end += 1
        self.check_locked(estimator)

    def on_estimate_next_iteration(self, estimator, iteration):
        self.iterations.append(iteration)
        self.check_locked(estimator)

    def on_estimate_progress_change(self, estimator, progress):
        self.progress.append(progress)
        self.check_locked(estimator)


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(12345)


@pytest.fixture
def listener():
    """Listener checking the lock during estimation."""
    return LockCheckingListener()
