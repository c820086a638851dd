"""
Affine and projective transformation utilities ((d+1)x(d+1) homogeneous form).

We estimate a transform T such that:

    [x', 1]^T  ≈  T @ [x, 1]^T              (affine, last row = [0, ..., 0, 1])
    w * [x', 1]^T  =  H @ [x, 1]^T          (projective, defined up to scale)

for d = 2 (3x3 matrices) and d = 3 (4x4 matrices).

The same transforms can be fitted from hyperplane correspondences (lines in 2D,
planes in 3D): a hyperplane h maps to h T^-1.

Unknowns:
- affine 2D: a, b, tx, c, d, ty                          (6)
- affine 3D: 3x3 linear part + translation                (12)
- projective 2D / 3D: all entries of H, up to scale        (9 / 16)
"""

from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

from ..robust.types import FloatArray, PointsHomog, as_homogeneous

# Minimal number of correspondences per (kind, dimension)
AFFINE_MIN_POINTS = {2: 3, 3: 4}
PROJECTIVE_MIN_POINTS = {2: 4, 3: 5}


# ---------- Degeneracy Check Helpers ----------
def _triangle_area(p1: np.ndarray, p2: np.ndarray, p3: np.ndarray) -> float:
    """
    Return 2x the triangle area formed by (p1, p2, p3).

        area2 = |(p2 - p1) x (p3 - p1)|

    If area2 is near 0, the three points are collinear.
    """
    u = p2 - p1
    v = p3 - p1
    return float(abs(u[0] * v[1] - u[1] * v[0]))


def _tetrahedron_volume(p1: np.ndarray, p2: np.ndarray, p3: np.ndarray, p4: np.ndarray) -> float:
    """
    Return 6x the volume of the tetrahedron (p1, p2, p3, p4).
    Near 0 means the four points are coplanar.
    """
    return float(abs(np.linalg.det(np.vstack([p2 - p1, p3 - p1, p4 - p1]))))


def _is_degenerate_affine_subset(pts: FloatArray, eps: float) -> bool:
    """
    Check whether a minimal affine subset spans less than its dimension.
    (3,2) -> collinear triplet, (4,3) -> coplanar quadruplet.
    """
    if pts.shape == (3, 2):
        return _triangle_area(pts[0], pts[1], pts[2]) < eps
    if pts.shape == (4, 3):
        return _tetrahedron_volume(pts[0], pts[1], pts[2], pts[3]) < eps
    raise ValueError(f"Expected (3,2) or (4,3) minimal subset, got {pts.shape}")


def _check_pairs(pts0: FloatArray, pts1: FloatArray) -> int:
    if pts0.shape != pts1.shape:
        raise ValueError(f"pts0 and pts1 must have same shape, got {pts0.shape} vs {pts1.shape}")
    if pts0.ndim != 2 or pts0.shape[1] not in (2, 3):
        raise ValueError(f"Expected pts shape (N,2) or (N,3), got {pts0.shape}")
    return pts0.shape[1]


# ---------- Affine parameterization ----------
def affine_from_params(theta: np.ndarray, dim: int) -> FloatArray:
    """
    Convert theta (row-major top d rows of T) into a (d+1)x(d+1) affine matrix.

    2D: theta = [a, b, tx, c, d, ty]
    """
    T = np.eye(dim + 1, dtype=np.float64)
    T[:dim, :] = np.asarray(theta, dtype=np.float64).reshape(dim, dim + 1)
    return T


def affine_params(T: FloatArray) -> FloatArray:
    dim = T.shape[0] - 1
    return T[:dim, :].reshape(-1).astype(np.float64)


# ---------- Affine Fitting ----------
def fit_affine_least_squares(pts0: FloatArray, pts1: FloatArray) -> Optional[FloatArray]:
    """
    Fit an affine transform from N >= d+1 correspondences using least squares.

    For each correspondence x -> x' (d equations):
        x'_k = T[k, :d] @ x + T[k, d]

    All k share the same design matrix [x, 1], so the d right-hand sides are solved at once:
        [x_i, 1] @ T[:d, :]^T = x'_i

    Returns None when the points do not span the space (rank < d+1).
    """
    dim = _check_pairs(pts0, pts1)
    if pts0.shape[0] < dim + 1:
        return None

    A = as_homogeneous(pts0)                 # (N, d+1)
    B = pts1.astype(np.float64)              # (N, d)

    try:
        X, _, rank, _ = np.linalg.lstsq(A, B, rcond=None)
    except np.linalg.LinAlgError:
        return None

    # The data must constrain every column of the linear part plus the translation.
    # Low rank happens when points are collinear (2D) / coplanar (3D) or repeated.
    if rank < dim + 1:
        return None

    T = np.eye(dim + 1, dtype=np.float64)
    T[:dim, :] = X.T
    if not np.all(np.isfinite(T)):
        return None
    return T


def fit_affine_minimal(pts0: FloatArray, pts1: FloatArray, eps: float = 1e-6) -> Optional[FloatArray]:
    """
    Fit an affine transform from exactly d+1 correspondences (3 in 2D, 4 in 3D).

    Returns None if the source subset is degenerate / solve fails.
    Only the source needs to span the space: a degenerate target is a valid
    (singular) affine map.
    """
    dim = _check_pairs(pts0, pts1)
    if pts0.shape[0] != AFFINE_MIN_POINTS[dim]:
        raise ValueError(
            f"fit_affine_minimal expects {AFFINE_MIN_POINTS[dim]} correspondences in {dim}D, "
            f"got {pts0.shape[0]}"
        )
    if _is_degenerate_affine_subset(pts0, eps):
        return None

    # Square system, exact solution
    A = as_homogeneous(pts0)
    try:
        X = np.linalg.solve(A, pts1.astype(np.float64))
    except np.linalg.LinAlgError:
        return None

    T = np.eye(dim + 1, dtype=np.float64)
    T[:dim, :] = X.T
    if not np.all(np.isfinite(T)):
        return None
    return T


# ---------- Projective Fitting ----------
def _normalization_matrix(pts: FloatArray) -> FloatArray:
    """
    Similarity moving the centroid to the origin with mean distance sqrt(d).
    Improves the conditioning of the DLT system.
    """
    dim = pts.shape[1]
    centroid = pts.mean(axis=0)
    mean_dist = float(np.mean(np.linalg.norm(pts - centroid, axis=1)))
    scale = np.sqrt(dim) / mean_dist if mean_dist > 0 else 1.0

    N = np.eye(dim + 1, dtype=np.float64)
    N[:dim, :dim] *= scale
    N[:dim, dim] = -scale * centroid
    return N


def projective_design_matrix(ph0: PointsHomog, ph1: PointsHomog) -> FloatArray:
    """
    Stack the DLT equations of homogeneous correspondences x -> x'.

    With h_k the k-th row of H, x' ~ H x gives for every k < d:
        x'_d * (h_k . x) - x'_k * (h_d . x) = 0
    so d rows per correspondence and (d+1)^2 unknowns.
    """
    n, dp1 = ph0.shape
    dim = dp1 - 1
    A = np.zeros((n * dim, dp1 * dp1), dtype=np.float64)
    for k in range(dim):
        rows = slice(k, n * dim, dim)
        A[rows, k * dp1:(k + 1) * dp1] = ph1[:, [dim]] * ph0
        A[rows, dim * dp1:] = -ph1[:, [k]] * ph0
    return A


def fit_projective(pts0: FloatArray, pts1: FloatArray, eps: float = 1e-10) -> Optional[FloatArray]:
    """
    Normalized DLT: fit H from N >= d+2 correspondences (4 in 2D, 5 in 3D).

    H is the null vector (least squares when N is larger) of the DLT matrix,
    de-normalized and scaled to unit Frobenius norm.
    Returns None if the correspondences do not determine H or H is singular.
    """
    dim = _check_pairs(pts0, pts1)
    dp1 = dim + 1
    if pts0.shape[0] < PROJECTIVE_MIN_POINTS[dim]:
        return None

    N0 = _normalization_matrix(pts0)
    N1 = _normalization_matrix(pts1)
    ph0 = as_homogeneous(pts0) @ N0.T
    ph1 = as_homogeneous(pts1) @ N1.T

    A = projective_design_matrix(ph0, ph1)
    try:
        _, s, Vt = np.linalg.svd(A)
    except np.linalg.LinAlgError:
        return None

    # The solution must be the only null direction
    unknowns = dp1 * dp1
    if s.shape[0] < unknowns - 1 or s[unknowns - 2] <= eps * s[0]:
        return None

    Hn = Vt[-1].reshape(dp1, dp1)
    try:
        H = np.linalg.solve(N1, Hn @ N0)
    except np.linalg.LinAlgError:
        return None

    H = H / np.linalg.norm(H)
    # Degenerate configurations (e.g. 3 collinear points in 2D) give a singular H
    if abs(np.linalg.det(H)) <= eps:
        return None
    return H


# ---------- Apply transform + residuals ----------
def apply_affine(T: FloatArray, pts: FloatArray) -> FloatArray:
    """
    Apply a (d+1)x(d+1) affine transform to (N,d) points, returning (N,d) points.

        [x', 1]^T = T @ [x, 1]^T
    """
    dim = pts.shape[1] if pts.ndim == 2 else -1
    if T.shape != (dim + 1, dim + 1):
        raise ValueError(f"Transform shape {T.shape} does not match points shape {pts.shape}")

    # Each point is a row, so multiply by T^T
    ph = as_homogeneous(pts) @ T.T
    return ph[:, :dim].astype(np.float64)


def apply_projective(H: FloatArray, pts: FloatArray) -> FloatArray:
    """
    Apply a (d+1)x(d+1) projective transform to (N,d) points (with the division by w).
    Points mapped to infinity come back as 0 (OpenCV convention).
    """
    dim = pts.shape[1] if pts.ndim == 2 else -1
    if H.shape != (dim + 1, dim + 1):
        raise ValueError(f"Transform shape {H.shape} does not match points shape {pts.shape}")
    if pts.shape[0] == 0:
        return np.zeros((0, dim), dtype=np.float64)

    # OpenCV expects (N,1,d) float
    src = np.ascontiguousarray(pts, dtype=np.float64).reshape(-1, 1, dim)
    out = cv2.perspectiveTransform(src, np.asarray(H, dtype=np.float64))
    return out.reshape(-1, dim).astype(np.float64)


def transfer_residuals(T: FloatArray, pts0: FloatArray, pts1: FloatArray, projective: bool = False) -> FloatArray:
    """
    Per-correspondence L2 transfer error:

        e_i = || T(pts0[i]) - pts1[i] ||_2

    Returns shape (N,)
    """
    _check_pairs(pts0, pts1)
    predicted = apply_projective(T, pts0) if projective else apply_affine(T, pts0)
    diff = predicted - pts1.astype(np.float64)
    return np.linalg.norm(diff, axis=1).astype(np.float64)


# ---------- Hyperplane correspondences (lines in 2D, planes in 3D) ----------
# Minimal number of hyperplane correspondences per (kind, dimension)
AFFINE_MIN_HYPERPLANES = {2: 3, 3: 4}
PROJECTIVE_MIN_HYPERPLANES = {2: 4, 3: 5}


def _check_hyperplane_pairs(h0: FloatArray, h1: FloatArray) -> int:
    if h0.shape != h1.shape:
        raise ValueError(f"h0 and h1 must have same shape, got {h0.shape} vs {h1.shape}")
    if h0.ndim != 2 or h0.shape[1] not in (3, 4):
        raise ValueError(f"Expected hyperplanes shape (N,3) or (N,4), got {h0.shape}")
    return h0.shape[1] - 1


def _unit_rows(h: FloatArray) -> FloatArray:
    norms = np.linalg.norm(h, axis=1, keepdims=True)
    norms[norms <= 0.0] = 1.0
    return h / norms


def transform_hyperplanes(T: FloatArray, h: FloatArray) -> FloatArray:
    """
    Map (N,d+1) hyperplane coefficients through the point transform T.

    A hyperplane h holds the points h . x = 0, so the image of h is h T^-1:
        (h T^-1) . (T x) = h . x = 0
    """
    # h T^-1 = (T^-T h^T)^T, solved without forming the inverse
    return np.linalg.solve(T.T, np.asarray(h, dtype=np.float64).T).T


def hyperplane_design_matrix(x: FloatArray, y: FloatArray) -> FloatArray:
    """
    Stack the equations of y ~ G x for (N,d+1) homogeneous vectors.

    With g_k the k-th row of G, every pair i < j gives:
        y_i * (g_j . x) - y_j * (g_i . x) = 0
    All pairs are used, so no coordinate of y needs to be non zero.
    """
    n, dp1 = x.shape
    pairs = [(i, j) for i in range(dp1) for j in range(i + 1, dp1)]
    A = np.zeros((n * len(pairs), dp1 * dp1), dtype=np.float64)
    for p, (i, j) in enumerate(pairs):
        rows = slice(p, n * len(pairs), len(pairs))
        A[rows, j * dp1:(j + 1) * dp1] = y[:, [i]] * x
        A[rows, i * dp1:(i + 1) * dp1] -= y[:, [j]] * x
    return A


def fit_projective_from_hyperplanes(h0: FloatArray, h1: FloatArray, eps: float = 1e-10) -> Optional[FloatArray]:
    """
    Fit the point transform H mapping the input hyperplanes h0 onto the output hyperplanes h1.

    h1 ~ h0 H^-1 is equivalent to h0^T ~ H^T h1^T, so G = H^T is solved as a
    DLT from h1 to h0 (4 lines in 2D, 5 planes in 3D).
    Returns None if the hyperplanes do not determine H or H is singular.
    """
    dim = _check_hyperplane_pairs(h0, h1)
    dp1 = dim + 1
    if h0.shape[0] < PROJECTIVE_MIN_HYPERPLANES[dim]:
        return None

    A = hyperplane_design_matrix(_unit_rows(h1), _unit_rows(h0))
    try:
        _, s, Vt = np.linalg.svd(A)
    except np.linalg.LinAlgError:
        return None

    unknowns = dp1 * dp1
    if s.shape[0] < unknowns - 1 or s[unknowns - 2] <= eps * s[0]:
        return None

    H = Vt[-1].reshape(dp1, dp1).T
    H = H / np.linalg.norm(H)
    if abs(np.linalg.det(H)) <= eps:
        return None
    return H


def fit_affine_from_hyperplanes(h0: FloatArray, h1: FloatArray, eps: float = 1e-10) -> Optional[FloatArray]:
    """
    Fit the affine point transform T mapping the input hyperplanes h0 onto h1
    (exactly or in the least squares sense, 3 lines in 2D, 4 planes in 3D).

    G = T^T has its last column fixed to [0, ..., 0, 1], the remaining d(d+1)
    entries solve the linear part of the hyperplane DLT.
    Returns None if the hyperplanes do not determine T or its linear part is singular.
    """
    dim = _check_hyperplane_pairs(h0, h1)
    dp1 = dim + 1
    if h0.shape[0] < AFFINE_MIN_HYPERPLANES[dim]:
        return None

    A = hyperplane_design_matrix(_unit_rows(h1), _unit_rows(h0))
    fixed = np.arange(dp1) * dp1 + dim       # G[k, d] for every row k
    free = np.setdiff1d(np.arange(dp1 * dp1), fixed)
    b = -A[:, fixed[-1]]                     # G[d, d] = 1, the other fixed entries are 0

    try:
        X, _, rank, _ = np.linalg.lstsq(A[:, free], b, rcond=None)
    except np.linalg.LinAlgError:
        return None
    if rank < free.shape[0]:
        return None

    G = np.zeros(dp1 * dp1, dtype=np.float64)
    G[free] = X
    G[fixed[-1]] = 1.0
    T = G.reshape(dp1, dp1).T
    if not np.all(np.isfinite(T)):
        return None

    linear = T[:dim, :dim]
    if abs(np.linalg.det(linear)) <= eps * max(1.0, np.linalg.norm(linear) ** dim):
        return None
    return T


def hyperplane_residuals(T: FloatArray, h0: FloatArray, h1: FloatArray) -> FloatArray:
    """
    Per-correspondence error between the transformed input hyperplane and the output one:

        e_i = 1 - | unit(h0[i] T^-1) . unit(h1[i]) |

    0 for the same hyperplane, 1 for orthogonal coefficient vectors. Returns shape (N,)
    """
    _check_hyperplane_pairs(h0, h1)
    predicted = _unit_rows(transform_hyperplanes(T, h0))
    observed = _unit_rows(np.asarray(h1, dtype=np.float64))
    cos = np.abs(np.sum(predicted * observed, axis=1))
    return np.clip(1.0 - cos, 0.0, 1.0)
