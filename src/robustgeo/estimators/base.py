"""
Sample holders shared by the entity families.

- point sets (lines, planes, conics, spheres, quadrics are fitted to points)
- hyperplane sets (points and dual conics / quadrics are fitted to lines / planes)
- correspondences (transformations are fitted to input -> output points, lines or planes)

Samples are kept by reference: a caller shrinking its own list below
MINIMUM_SIZE makes the estimator not ready, no copy hides it.
"""
from __future__ import annotations

from typing import ClassVar, Optional

import numpy as np

from ..geometry.primitives import as_coefficient_array
from ..robust.estimator import RobustEstimator
from ..robust.types import CoordinatesType, FloatArray, RobustEstimatorListener


def _as_points(points, dim: int) -> FloatArray:
    arr = np.asarray(points, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != dim:
        raise ValueError(f"Expected points shape (N,{dim}), got {arr.shape}")
    return arr


class PointSetRobustEstimator(RobustEstimator):
    """Family base whose samples are (N, DIM) points."""

    DIM: ClassVar[int] = 2

    def __init__(self, points=None, listener: Optional[RobustEstimatorListener] = None):
        super().__init__(listener)
        self._points = None
        if points is not None:
            self.points = points

    @property
    def points(self):
        return self._points

    @points.setter
    def points(self, points) -> None:
        self._check_locked()
        if points is None or len(points) < self.MINIMUM_SIZE:
            raise ValueError(f"at least {self.MINIMUM_SIZE} points are required")
        _as_points(points, self.DIM)
        self._points = points

    def _sample_count(self) -> int:
        return 0 if self._points is None else len(self._points)

    def _points_array(self) -> FloatArray:
        return _as_points(self._points, self.DIM)


class HyperplaneSetRobustEstimator(RobustEstimator):
    """
    Family base whose samples are hyperplanes (lines in 2D, planes in 3D).
    Samples are the entities themselves or their (N, DIM+1) coefficient rows.
    """

    DIM: ClassVar[int] = 2

    def __init__(self, samples=None, listener: Optional[RobustEstimatorListener] = None):
        super().__init__(listener)
        self._samples = None
        if samples is not None:
            self._set_samples(samples)

    def _set_samples(self, samples) -> None:
        self._check_locked()
        if samples is None or len(samples) < self.MINIMUM_SIZE:
            raise ValueError(f"at least {self.MINIMUM_SIZE} samples are required")
        as_coefficient_array(samples, self.DIM + 1)
        self._samples = samples

    def _sample_count(self) -> int:
        return 0 if self._samples is None else len(self._samples)

    def _coefficients(self) -> FloatArray:
        return as_coefficient_array(self._samples, self.DIM + 1)


class IntersectionRobustEstimator(HyperplaneSetRobustEstimator):
    """Family base estimating a point from implicit entities (lines in 2D, planes in 3D)."""

    DEFAULT_COORDINATES_TYPE: ClassVar[CoordinatesType] = CoordinatesType.INHOMOGENEOUS

    def __init__(self, samples=None, listener: Optional[RobustEstimatorListener] = None):
        super().__init__(samples, listener)
        self._coordinates_type = self.DEFAULT_COORDINATES_TYPE

    @property
    def refinement_coordinates_type(self) -> CoordinatesType:
        """Coordinates used to parameterize the point during refinement."""
        return self._coordinates_type

    @refinement_coordinates_type.setter
    def refinement_coordinates_type(self, value: CoordinatesType | str) -> None:
        self._check_locked()
        self._coordinates_type = CoordinatesType(value)


class _PairedSamplesRobustEstimator(RobustEstimator):
    """
    Family base whose samples are matched input / output entities.
    Subclasses tell how one side is validated and converted to an array.
    """

    DIM: ClassVar[int] = 2
    SAMPLE_NAME: ClassVar[str] = "points"

    def __init__(self, inputs=None, outputs=None, listener: Optional[RobustEstimatorListener] = None):
        super().__init__(listener)
        self._inputs = None
        self._outputs = None
        if (inputs is None) != (outputs is None):
            raise ValueError(
                f"input_{self.SAMPLE_NAME} and output_{self.SAMPLE_NAME} must be provided together"
            )
        if inputs is not None:
            self._set_pairs(inputs, outputs)

    def _as_array(self, samples) -> FloatArray:
        raise NotImplementedError

    def _set_pairs(self, inputs, outputs) -> None:
        self._check_locked()
        if inputs is None or outputs is None:
            raise ValueError(f"input_{self.SAMPLE_NAME} and output_{self.SAMPLE_NAME} are required")
        if len(inputs) < self.MINIMUM_SIZE:
            raise ValueError(f"at least {self.MINIMUM_SIZE} correspondences are required")
        if len(inputs) != len(outputs):
            raise ValueError(f"input / output sizes differ: {len(inputs)} vs {len(outputs)}")
        self._as_array(inputs)
        self._as_array(outputs)
        self._inputs = inputs
        self._outputs = outputs

    def _sample_count(self) -> int:
        return 0 if self._inputs is None else len(self._inputs)

    def _pair_arrays(self) -> tuple[FloatArray, FloatArray]:
        return self._as_array(self._inputs), self._as_array(self._outputs)

    def _samples_ready(self) -> bool:
        return (
            self._inputs is not None
            and self._outputs is not None
            and len(self._inputs) == len(self._outputs)
            and len(self._inputs) >= self.MINIMUM_SIZE
        )


class CorrespondenceRobustEstimator(_PairedSamplesRobustEstimator):
    """Family base whose samples are matched (N, DIM) input / output points."""

    def __init__(
            self,
            input_points=None,
            output_points=None,
            listener: Optional[RobustEstimatorListener] = None,
    ):
        super().__init__(input_points, output_points, listener)

    @property
    def input_points(self):
        return self._inputs

    @property
    def output_points(self):
        return self._outputs

    def set_points(self, input_points, output_points) -> None:
        """Replace both sides of the correspondences at once."""
        self._set_pairs(input_points, output_points)

    def _as_array(self, samples) -> FloatArray:
        return _as_points(samples, self.DIM)


class LineCorrespondenceRobustEstimator(_PairedSamplesRobustEstimator):
    """
    Family base whose samples are matched input / output 2D lines
    (Line2D instances or (N,3) rows [a, b, c]).
    """

    DIM = 2
    SAMPLE_NAME = "lines"

    def __init__(self, input_lines=None, output_lines=None, listener: Optional[RobustEstimatorListener] = None):
        super().__init__(input_lines, output_lines, listener)

    @property
    def input_lines(self):
        return self._inputs

    @property
    def output_lines(self):
        return self._outputs

    def set_lines(self, input_lines, output_lines) -> None:
        """Replace both sides of the correspondences at once."""
        self._set_pairs(input_lines, output_lines)

    def _as_array(self, samples) -> FloatArray:
        return as_coefficient_array(samples, 3)


class PlaneCorrespondenceRobustEstimator(_PairedSamplesRobustEstimator):
    """
    Family base whose samples are matched input / output planes
    (Plane instances or (N,4) rows [a, b, c, d]).
    """

    DIM = 3
    SAMPLE_NAME = "planes"

    def __init__(self, input_planes=None, output_planes=None, listener: Optional[RobustEstimatorListener] = None):
        super().__init__(input_planes, output_planes, listener)

    @property
    def input_planes(self):
        return self._inputs

    @property
    def output_planes(self):
        return self._outputs

    def set_planes(self, input_planes, output_planes) -> None:
        """Replace both sides of the correspondences at once."""
        self._set_pairs(input_planes, output_planes)

    def _as_array(self, samples) -> FloatArray:
        return as_coefficient_array(samples, 4)
