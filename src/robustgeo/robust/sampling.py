"""
Minimal subset samplers used by the consensus loops.

- UniformSampler: every subset equally likely (RANSAC, MSAC, LMedS)
- ProsacSampler: progressive sampling from the best quality samples first (PROSAC, PROMedS)
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from ..config import DEFAULTS
from .types import IndexArray


class UniformSampler:
    """Draws unique random indices in [0, total)."""

    def __init__(self, total: int, sample_size: int, rng: np.random.Generator):
        if sample_size <= 0 or sample_size > total:
            raise ValueError(f"sample_size must be in [1, {total}], got {sample_size}")
        self.total = total
        self.sample_size = sample_size
        self.rng = rng

    def sample(self) -> IndexArray:
        return self.rng.choice(self.total, size=self.sample_size, replace=False)


class ProsacSampler:
    """
    PROSAC progressive sampler.

    Samples are sorted in descending order w.r.t. their quality score. Let T_N
    be the number of draws after which PROSAC behaves like RANSAC. The average
    number of draws containing only the first n samples is

                    n - i
        T_n = T_N * Product i = 0...m-1 -------,  m = sample size, N = total
                    N - i

    and the growth function g(t) = min {n, T'_n >= t} tells how many of the
    best samples the t-th draw may use. Each draw contains the n-th sample plus
    m-1 random samples among the first n-1.
    """

    def __init__(
            self,
            quality_scores,
            sample_size: int,
            rng: np.random.Generator,
            convergence_iterations: Optional[int] = None,
    ):
        scores = np.asarray(quality_scores, dtype=np.float64)
        total = scores.shape[0]
        if sample_size <= 0 or sample_size > total:
            raise ValueError(f"sample_size must be in [1, {total}], got {sample_size}")

        self.total = total
        self.sample_size = sample_size
        self.rng = rng
        self.convergence_iterations = (
            DEFAULTS.prosac_convergence_iterations if convergence_iterations is None
            else int(convergence_iterations)
        )

        # Stable sort keeps the input order among equal scores
        self.order: IndexArray = np.argsort(-scores, kind="stable")
        self.growth = self._growth_function(total, sample_size, self.convergence_iterations)

        self.subset_size = sample_size      # n: size of the currently sampled prefix
        self.kth_sample = 1                 # t: index of the next draw

    @staticmethod
    def _growth_function(total: int, sample_size: int, convergence_iterations: int) -> np.ndarray:
        growth = np.zeros(total, dtype=np.int64)

        T_n = float(convergence_iterations)
        for i in range(sample_size):
            T_n *= (sample_size - i) / (total - i)

        # T(n+1) = (n + 1) / (n + 1 - m) * T(n)
        # T'(n+1) = T'(n) + ceil(T(n+1) - T(n))
        T_n_prime = 1
        for i in range(total):
            if i + 1 <= sample_size:
                growth[i] = T_n_prime
                continue
            T_n_plus1 = float(i + 1) * T_n / (i + 1 - sample_size)
            growth[i] = T_n_prime + math.ceil(T_n_plus1 - T_n)
            T_n = T_n_plus1
            T_n_prime = int(growth[i])
        return growth

    def sample(self) -> IndexArray:
        t = self.kth_sample
        self.kth_sample += 1

        # Fully equivalent to RANSAC from here on
        if t > self.convergence_iterations:
            return self.rng.choice(self.total, size=self.sample_size, replace=False)

        # Grow the sampled prefix as required by the growth function
        while self.subset_size < self.total and t > self.growth[self.subset_size - 1]:
            self.subset_size += 1

        n = self.subset_size
        positions = self.rng.choice(n - 1, size=self.sample_size - 1, replace=False)
        positions = np.append(positions, n - 1)
        return self.order[positions]
