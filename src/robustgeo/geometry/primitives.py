"""
Geometric primitives fitted by the estimators.

All of them are implicit, defined up to scale:

    Line2D : a*x + b*y + c = 0
    Plane  : a*x + b*y + c*z + d = 0
    Conic  : a*x^2 + b*x*y + c*y^2 + d*x + e*y + f = 0
    Quadric: a*x^2 + b*y^2 + c*z^2 + 2*(d*x*y + e*y*z + f*x*z + g*x + h*y + i*z) + j = 0

Dual conics and dual quadrics hold the same layouts, evaluated on lines and planes.
Spheres are explicit: center and radius.

Points are plain numpy arrays: (2,) / (3,) for one point, (N,2) / (N,3) for many.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields
from typing import Optional, Sequence

import numpy as np

from ..robust.types import FloatArray, Mat3x3, Mat4x4, Points2D, Points3D, as_homogeneous

# Below this norm a normal vector / homogeneous coordinate is treated as zero
_EPS = 1e-12


def _unit(v: np.ndarray) -> Optional[np.ndarray]:
    norm = np.linalg.norm(v)
    if norm <= _EPS:
        return None
    return v / norm


def _equal_up_to_sign(u: np.ndarray, v: np.ndarray, threshold: float) -> bool:
    u = _unit(u)
    v = _unit(v)
    if u is None or v is None:
        return False
    return bool(min(np.max(np.abs(u - v)), np.max(np.abs(u + v))) <= threshold)


def _points(pts, dim: int) -> FloatArray:
    arr = np.asarray(pts, dtype=np.float64)
    if arr.ndim == 1:
        arr = arr.reshape(1, -1)
    if arr.ndim != 2 or arr.shape[1] != dim:
        raise ValueError(f"Expected points shape (N,{dim}) or ({dim},), got {np.shape(pts)}")
    return arr


def as_coefficient_array(items, width: int) -> FloatArray:
    """
    Stack primitives (anything with as_array()) or raw coefficient rows into a (N, width) array.
    """
    if isinstance(items, np.ndarray):
        arr = items.astype(np.float64)
    else:
        arr = np.array(
            [item.as_array() if hasattr(item, "as_array") else item for item in items],
            dtype=np.float64,
        )
    if arr.ndim != 2 or arr.shape[1] != width:
        raise ValueError(f"Expected coefficients shape (N,{width}), got {arr.shape}")
    return arr


def _coefficient_rows(items, width: int) -> FloatArray:
    # One primitive, one raw row, or many of either
    if hasattr(items, "as_array"):
        return items.as_array().reshape(1, width)
    if np.ndim(items) == 1 and np.isscalar(items[0]):
        return _points(items, width)
    return as_coefficient_array(items, width)


# ---------- 2D line ----------
@dataclass(frozen=True)
class Line2D:
    a: float
    b: float
    c: float

    @classmethod
    def from_array(cls, coeffs: Sequence[float]) -> "Line2D":
        a, b, c = map(float, coeffs)
        return cls(a, b, c)

    @classmethod
    def from_points(cls, p1, p2) -> Optional["Line2D"]:
        """
        Line through 2 points, the cross product of their homogeneous coordinates.
        None if the points coincide.
        """
        h1 = np.append(np.asarray(p1, dtype=np.float64), 1.0)
        h2 = np.append(np.asarray(p2, dtype=np.float64), 1.0)
        coeffs = np.cross(h1, h2)
        if np.linalg.norm(coeffs[:2]) <= _EPS:
            return None
        return cls.from_array(coeffs)

    def as_array(self) -> FloatArray:
        return np.array(astuple(self), dtype=np.float64)

    def normalize(self) -> "Line2D":
        """Same line with unit norm coefficients."""
        return Line2D.from_array(self.as_array() / np.linalg.norm(self.as_array()))

    def signed_distance(self, points: Points2D) -> FloatArray:
        pts = _points(points, 2)
        return (pts @ np.array([self.a, self.b]) + self.c) / np.hypot(self.a, self.b)

    def is_locus(self, point, threshold: float = 1e-9) -> bool:
        return bool(abs(self.signed_distance(point)[0]) <= threshold)

    def equals(self, other: "Line2D", threshold: float = 1e-9) -> bool:
        return _equal_up_to_sign(self.as_array(), other.as_array(), threshold)

    def intersection(self, other: "Line2D") -> Optional[FloatArray]:
        """Intersection point (2,), None for parallel lines."""
        h = np.cross(self.as_array(), other.as_array())
        scale = np.linalg.norm(self.as_array()) * np.linalg.norm(other.as_array())
        if abs(h[2]) <= _EPS * scale:
            return None
        return h[:2] / h[2]


# ---------- Plane ----------
@dataclass(frozen=True)
class Plane:
    a: float
    b: float
    c: float
    d: float

    @classmethod
    def from_array(cls, coeffs: Sequence[float]) -> "Plane":
        a, b, c, d = map(float, coeffs)
        return cls(a, b, c, d)

    @classmethod
    def from_points(cls, p1, p2, p3) -> Optional["Plane"]:
        """Plane through 3 points, None if they are collinear."""
        p1, p2, p3 = (np.asarray(p, dtype=np.float64) for p in (p1, p2, p3))
        normal = np.cross(p2 - p1, p3 - p1)
        scale = np.linalg.norm(p2 - p1) * np.linalg.norm(p3 - p1)
        if np.linalg.norm(normal) <= _EPS * max(scale, 1.0):
            return None
        return cls.from_array(np.append(normal, -normal @ p1))

    def as_array(self) -> FloatArray:
        return np.array(astuple(self), dtype=np.float64)

    @property
    def normal(self) -> FloatArray:
        return np.array([self.a, self.b, self.c], dtype=np.float64)

    def normalize(self) -> "Plane":
        return Plane.from_array(self.as_array() / np.linalg.norm(self.as_array()))

    def signed_distance(self, points: Points3D) -> FloatArray:
        pts = _points(points, 3)
        return (pts @ self.normal + self.d) / np.linalg.norm(self.normal)

    def is_locus(self, point, threshold: float = 1e-9) -> bool:
        return bool(abs(self.signed_distance(point)[0]) <= threshold)

    def equals(self, other: "Plane", threshold: float = 1e-9) -> bool:
        return _equal_up_to_sign(self.as_array(), other.as_array(), threshold)

    def intersection(self, p2: "Plane", p3: "Plane") -> Optional[FloatArray]:
        """Common point (3,) of 3 planes, None if their normals are not independent."""
        A = np.vstack([self.normal, p2.normal, p3.normal])
        b = -np.array([self.d, p2.d, p3.d], dtype=np.float64)
        if np.linalg.matrix_rank(A) < 3:
            return None
        try:
            return np.linalg.solve(A, b)
        except np.linalg.LinAlgError:
            return None


# ---------- Quadratic forms ----------
def _null_vector(A: FloatArray, rank: int) -> Optional[FloatArray]:
    """
    Unit vector x minimizing ||A x||, None if rank(A) < rank.
    Columns are scaled first so that squared terms do not dominate the decomposition.
    """
    col_scale = np.linalg.norm(A, axis=0)
    col_scale[col_scale <= _EPS] = 1.0
    A_scaled = A / col_scale

    if np.linalg.matrix_rank(A_scaled) < rank:
        return None
    _, _, Vt = np.linalg.svd(A_scaled)
    return _unit(Vt[-1] / col_scale)


def _form_residual(M: FloatArray, h: FloatArray) -> FloatArray:
    """|h^T M h| with M of unit Frobenius norm and each row h of unit norm."""
    M = M / np.linalg.norm(M)
    h = h / np.linalg.norm(h, axis=1, keepdims=True)
    return np.abs(np.einsum("ni,ij,nj->n", h, M, h))


def conic_matrix(coeffs: Sequence[float]) -> Mat3x3:
    """[a, b, c, d, e, f] -> symmetric 3x3 matrix, off-diagonal terms halved."""
    a, b, c, d, e, f = coeffs
    return np.array(
        [
            [a, 0.5 * b, 0.5 * d],
            [0.5 * b, c, 0.5 * e],
            [0.5 * d, 0.5 * e, f],
        ],
        dtype=np.float64,
    )


def conic_terms(h: FloatArray) -> FloatArray:
    """(N,3) homogeneous vectors -> (N,6) rows such that rows @ [a..f] = h^T C h."""
    x, y, w = h[:, 0], h[:, 1], h[:, 2]
    return np.column_stack([x * x, x * y, y * y, x * w, y * w, w * w])


def conic_design_matrix(pts: Points2D) -> FloatArray:
    return conic_terms(as_homogeneous(pts))


def quadric_matrix(coeffs: Sequence[float]) -> Mat4x4:
    """
    [a, b, c, d, e, f, g, h, i, j] -> symmetric 4x4 matrix

        [[a, d, f, g],
         [d, b, e, h],
         [f, e, c, i],
         [g, h, i, j]]
    """
    a, b, c, d, e, f, g, h, i, j = coeffs
    return np.array(
        [
            [a, d, f, g],
            [d, b, e, h],
            [f, e, c, i],
            [g, h, i, j],
        ],
        dtype=np.float64,
    )


def quadric_terms(h: FloatArray) -> FloatArray:
    """(N,4) homogeneous vectors -> (N,10) rows such that rows @ [a..j] = h^T Q h."""
    x, y, z, w = h[:, 0], h[:, 1], h[:, 2], h[:, 3]
    return np.column_stack([
        x * x, y * y, z * z,
        2.0 * x * y, 2.0 * y * z, 2.0 * x * z,
        2.0 * x * w, 2.0 * y * w, 2.0 * z * w,
        w * w,
    ])


class _QuadraticForm:
    """
    Primitive defined by a symmetric matrix, up to scale.
    Subclasses are frozen dataclasses whose fields are the independent matrix terms.
    """

    @classmethod
    def from_array(cls, coeffs: Sequence[float]):
        values = [float(v) for v in coeffs]
        if len(values) != len(fields(cls)):
            raise ValueError(f"{cls.__name__} expects {len(fields(cls))} coefficients, got {len(values)}")
        return cls(*values)

    @classmethod
    def _from_rows(cls, terms: FloatArray, min_rows: int, kind: str):
        if terms.shape[0] < min_rows:
            raise ValueError(f"At least {min_rows} {kind} are needed, got {terms.shape[0]}")
        coeffs = _null_vector(terms, terms.shape[1] - 1)
        return None if coeffs is None else cls.from_array(coeffs)

    def as_array(self) -> FloatArray:
        return np.array(astuple(self), dtype=np.float64)

    def normalize(self):
        """Same primitive with a unit Frobenius norm matrix."""
        M = self.as_matrix()
        return type(self).from_matrix(M / np.linalg.norm(M))

    def equals(self, other, threshold: float = 1e-9) -> bool:
        return _equal_up_to_sign(self.as_array(), other.as_array(), threshold)

    def _inverse_matrix(self) -> Optional[FloatArray]:
        M = self.as_matrix()
        if abs(np.linalg.det(M / np.linalg.norm(M))) <= _EPS:
            return None
        return np.linalg.inv(M)


class _ConicLayout(_QuadraticForm):
    @classmethod
    def from_matrix(cls, C: Mat3x3):
        C = 0.5 * (C + C.T)
        return cls(C[0, 0], 2.0 * C[0, 1], C[1, 1], 2.0 * C[0, 2], 2.0 * C[1, 2], C[2, 2])

    def as_matrix(self) -> Mat3x3:
        return conic_matrix(self.as_array())


class _QuadricLayout(_QuadraticForm):
    @classmethod
    def from_matrix(cls, Q: Mat4x4):
        Q = 0.5 * (Q + Q.T)
        return cls(
            Q[0, 0], Q[1, 1], Q[2, 2],
            Q[0, 1], Q[1, 2], Q[0, 2],
            Q[0, 3], Q[1, 3], Q[2, 3],
            Q[3, 3],
        )

    def as_matrix(self) -> Mat4x4:
        return quadric_matrix(self.as_array())


# ---------- Conic / dual conic ----------
@dataclass(frozen=True)
class Conic(_ConicLayout):
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    @classmethod
    def from_points(cls, points: Points2D) -> Optional["Conic"]:
        """
        Conic through >= 5 points: null vector of the design matrix
            [x^2, x*y, y^2, x, y, 1]
        None if the points do not determine a single conic.
        """
        return cls._from_rows(conic_design_matrix(_points(points, 2)), 5, "points")

    def algebraic_residual(self, points: Points2D) -> FloatArray:
        """
        |p^T C p| with C of unit Frobenius norm and p the unit norm homogeneous point.
        Scale free, so it can be compared against a fixed threshold.
        """
        return _form_residual(self.as_matrix(), as_homogeneous(_points(points, 2)))

    def is_locus(self, point, threshold: float = 1e-9) -> bool:
        return bool(self.algebraic_residual(point)[0] <= threshold)

    def dual_conic(self) -> Optional["DualConic"]:
        """Conic of tangent lines (inverse matrix), None for a degenerate conic."""
        inv = self._inverse_matrix()
        return None if inv is None else DualConic.from_matrix(inv)


@dataclass(frozen=True)
class DualConic(_ConicLayout):
    """
    Lines tangent to a conic: l^T C* l = 0 for l = [a, b, c].
    Same coefficient layout as Conic.
    """
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    @classmethod
    def from_lines(cls, lines) -> Optional["DualConic"]:
        """Dual conic tangent to >= 5 lines (Line2D or [a, b, c] rows)."""
        return cls._from_rows(conic_terms(as_coefficient_array(lines, 3)), 5, "lines")

    def algebraic_residual(self, lines) -> FloatArray:
        return _form_residual(self.as_matrix(), _coefficient_rows(lines, 3))

    def is_locus(self, line, threshold: float = 1e-9) -> bool:
        """Whether the line is tangent to the conic."""
        return bool(self.algebraic_residual(line)[0] <= threshold)

    def conic(self) -> Optional[Conic]:
        inv = self._inverse_matrix()
        return None if inv is None else Conic.from_matrix(inv)


# ---------- Quadric / dual quadric ----------
@dataclass(frozen=True)
class Quadric(_QuadricLayout):
    """
    a*x^2 + b*y^2 + c*z^2 + 2*(d*x*y + e*y*z + f*x*z + g*x + h*y + i*z) + j = 0
    """
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float
    g: float
    h: float
    i: float
    j: float

    @classmethod
    def from_points(cls, points: Points3D) -> Optional["Quadric"]:
        """Quadric through >= 9 points, None if they do not determine a single one."""
        return cls._from_rows(quadric_terms(as_homogeneous(_points(points, 3))), 9, "points")

    def algebraic_residual(self, points: Points3D) -> FloatArray:
        return _form_residual(self.as_matrix(), as_homogeneous(_points(points, 3)))

    def is_locus(self, point, threshold: float = 1e-9) -> bool:
        return bool(self.algebraic_residual(point)[0] <= threshold)

    def dual_quadric(self) -> Optional["DualQuadric"]:
        inv = self._inverse_matrix()
        return None if inv is None else DualQuadric.from_matrix(inv)


@dataclass(frozen=True)
class DualQuadric(_QuadricLayout):
    """Planes tangent to a quadric: p^T Q* p = 0. Same coefficient layout as Quadric."""
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float
    g: float
    h: float
    i: float
    j: float

    @classmethod
    def from_planes(cls, planes) -> Optional["DualQuadric"]:
        """Dual quadric tangent to >= 9 planes (Plane or [a, b, c, d] rows)."""
        return cls._from_rows(quadric_terms(as_coefficient_array(planes, 4)), 9, "planes")

    def algebraic_residual(self, planes) -> FloatArray:
        return _form_residual(self.as_matrix(), _coefficient_rows(planes, 4))

    def is_locus(self, plane, threshold: float = 1e-9) -> bool:
        """Whether the plane is tangent to the quadric."""
        return bool(self.algebraic_residual(plane)[0] <= threshold)

    def quadric(self) -> Optional[Quadric]:
        inv = self._inverse_matrix()
        return None if inv is None else Quadric.from_matrix(inv)


# ---------- Sphere ----------
@dataclass(frozen=True)
class Sphere:
    cx: float
    cy: float
    cz: float
    radius: float

    @classmethod
    def from_array(cls, params: Sequence[float]) -> "Sphere":
        """[cx, cy, cz, radius]"""
        cx, cy, cz, radius = map(float, params)
        return cls(cx, cy, cz, radius)

    @classmethod
    def from_points(cls, points: Points3D) -> Optional["Sphere"]:
        """
        Sphere through >= 4 points, solving the linear system
            x^2 + y^2 + z^2 + D*x + E*y + F*z + G = 0
        center = -[D, E, F] / 2, radius^2 = |center|^2 - G.
        None if the points are coplanar or do not give a real sphere.
        """
        pts = _points(points, 3)
        if pts.shape[0] < 4:
            raise ValueError(f"At least 4 points are needed, got {pts.shape[0]}")

        A = as_homogeneous(pts)
        b = -np.sum(pts * pts, axis=1)
        try:
            X, _, rank, _ = np.linalg.lstsq(A, b, rcond=None)
        except np.linalg.LinAlgError:
            return None
        if rank < 4:
            return None

        center = -0.5 * X[:3]
        r2 = float(center @ center - X[3])
        if not np.isfinite(r2) or r2 <= 0.0:
            return None
        return cls.from_array(np.append(center, np.sqrt(r2)))

    def as_array(self) -> FloatArray:
        return np.array(astuple(self), dtype=np.float64)

    @property
    def center(self) -> FloatArray:
        return np.array([self.cx, self.cy, self.cz], dtype=np.float64)

    def signed_distance(self, points: Points3D) -> FloatArray:
        """Distance to the surface, negative inside."""
        pts = _points(points, 3)
        return np.linalg.norm(pts - self.center, axis=1) - self.radius

    def is_locus(self, point, threshold: float = 1e-9) -> bool:
        return bool(abs(self.signed_distance(point)[0]) <= threshold)

    def equals(self, other: "Sphere", threshold: float = 1e-9) -> bool:
        return bool(np.max(np.abs(self.as_array() - other.as_array())) <= threshold)
