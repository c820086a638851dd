"""
Synthetic 2D affine demo: 200 noisy correspondences plus 80 wrong matches,
estimated with every robust method.

Prints the estimated transform, the inlier count and the transfer error against
the true transform. Library debug logs go to stdout when ROBUSTGEO_DEBUG is set.
"""
import numpy as np

from robustgeo.estimators import AffineTransformation2DRobustEstimator
from robustgeo.geometry import apply_affine, transfer_residuals
from robustgeo.robust.types import RobustEstimatorMethod
from robustgeo.utils import setup_logger


def main() -> None:
    setup_logger("robustgeo")
    rng = np.random.default_rng(0)

    # True affine transform
    T_true = np.array(
        [[1.05, 0.02, 15.0],
         [-0.01, 0.98, -8.0],
         [0.0,  0.0,  1.0]],
        dtype=np.float64,
    )

    # Generate inlier points
    n_in = 200
    pts0 = rng.uniform([0, 0], [640, 480], size=(n_in, 2)).astype(np.float64)
    pts1 = apply_affine(T_true, pts0)

    # Add Gaussian noise (pixel noise)
    pts1 += rng.normal(0.0, 0.8, size=pts1.shape)

    # Add outliers (wrong matches)
    n_out = 80
    o0 = rng.uniform([0, 0], [640, 480], size=(n_out, 2)).astype(np.float64)
    o1 = rng.uniform([0, 0], [640, 480], size=(n_out, 2)).astype(np.float64)

    pts0_all = np.vstack([pts0, o0]).astype(np.float64)
    pts1_all = np.vstack([pts1, o1]).astype(np.float64)

    # Inliers first: a good matcher would give them the best scores
    quality_scores = np.concatenate([np.ones(n_in), np.zeros(n_out)])

    print("T_true:\n", T_true)
    for method in RobustEstimatorMethod:
        estimator = AffineTransformation2DRobustEstimator.create(
            method, pts0_all, pts1_all, quality_scores=quality_scores,
        )
        if method in (RobustEstimatorMethod.LMEDS, RobustEstimatorMethod.PROMEDS):
            estimator.stop_threshold = 1.0
        else:
            estimator.threshold = 3.0     # your choice
        estimator.covariance_kept = True
        estimator.rng = np.random.default_rng(42)

        T_est = estimator.estimate()
        err = transfer_residuals(T_est, pts0, apply_affine(T_true, pts0))
        inliers = estimator.inliers_data

        print(f"--- {method.value} ---")
        print("T_est:\n", T_est)
        print("num_inliers:", inliers.num_inliers, "/", pts0_all.shape[0])
        print("rms transfer error vs T_true:", float(np.sqrt(np.mean(err ** 2))))
        if estimator.covariance is not None:
            print("parameter std:", np.sqrt(np.diag(estimator.covariance)))


if __name__ == "__main__":
    main()
