"""
Similarity Network Fusion.

Every source contributes a dense global kernel, which carries its full
similarity structure, and a sparse local kernel restricted to each entity's
nearest neighbours. At every sweep each source's global kernel is diffused
through its own local kernel over the average of the other sources' global
kernels, so information only travels along strong local edges. The consensus
is the mean of the final global kernels.

Reference: Wang et al., "Similarity network fusion for aggregating data
types on a genomic scale", Nature Methods 11 (2014).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidInputError, NumericInstabilityError


__all__ = ["FusionResult", "global_kernel", "local_kernel", "snf"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FusionResult:
    """
    Output of :func:`snf`.

    Attributes
    ----------
    fused:
        Consensus matrix, the mean of the final per-source global kernels.
    kernels:
        Final global kernel of every source, in input order.
    n_iter:
        Number of sweeps performed.
    stopped_early:
        True when the tolerance check ended the run before ``t`` sweeps.
    """

    fused: np.ndarray
    kernels: Tuple[np.ndarray, ...]
    n_iter: int
    stopped_early: bool

    @property
    def n_sources(self) -> int:
        return len(self.kernels)


def global_kernel(affinity: np.ndarray) -> np.ndarray:
    """
    Row-stochastic kernel with half of each row's mass on the diagonal.

    Off-diagonal entries are divided by twice the row sum excluding self and
    the diagonal is fixed at 1/2, so rows sum to exactly one.
    """

    off_diagonal = np.array(affinity, dtype=np.float64, copy=True)
    np.fill_diagonal(off_diagonal, 0.0)
    row_mass = off_diagonal.sum(axis=1)
    if np.any(row_mass <= 0):
        isolated = np.flatnonzero(row_mass <= 0)
        raise NumericInstabilityError(
            f"Entities {isolated.tolist()} have no off-diagonal similarity mass."
        )
    kernel = off_diagonal / (2.0 * row_mass[:, None])
    np.fill_diagonal(kernel, 0.5)
    return kernel


def local_kernel(affinity: np.ndarray, K: int) -> np.ndarray:
    """
    Row-normalised affinity restricted to each entity's ``K`` nearest neighbours.

    The neighbourhood always contains the entity itself plus its ``K - 1``
    strongest partners; ties go to the lower index.
    """

    affinity = np.asarray(affinity, dtype=np.float64)
    n = affinity.shape[0]
    if not 1 <= K <= n:
        raise InvalidInputError(f"K must be in [1, {n}], got {K}.")

    ranked = affinity.copy()
    np.fill_diagonal(ranked, -np.inf)
    neighbours = np.argsort(-ranked, axis=1, kind="stable")[:, : K - 1]

    mask = np.eye(n, dtype=bool)
    mask[np.arange(n)[:, None], neighbours] = True

    kernel = np.where(mask, affinity, 0.0)
    row_mass = kernel.sum(axis=1)
    if np.any(row_mass <= 0):
        raise NumericInstabilityError("Local kernel has a row with zero neighbourhood mass.")
    return kernel / row_mass[:, None]


def snf(
    affinities: Sequence[np.ndarray],
    *,
    K: int = 20,
    t: int = 20,
    tol: Optional[float] = None,
) -> FusionResult:
    """
    Fuse several affinity matrices over the same entities into one consensus.

    Parameters
    ----------
    affinities
        Two or more symmetric, non-negative (n, n) affinity matrices sharing
        the entity order.
    K
        Neighbourhood size of the local kernels, counting the entity itself.
    t
        Maximum number of fusion sweeps.
    tol
        If given, stop once no source kernel changes by more than ``tol`` in
        Frobenius norm during a sweep.

    Returns
    -------
    FusionResult
        Consensus matrix together with the per-source kernels.
    """

    matrices = _validate_affinities(affinities)
    if t < 0:
        raise InvalidInputError("t must be non-negative.")
    if tol is not None and tol <= 0:
        raise InvalidInputError("tol must be strictly positive when given.")

    n_sources = len(matrices)
    n = matrices[0].shape[0]
    if not 1 <= K <= n:
        raise InvalidInputError(f"K must be in [1, {n}], got {K}.")

    kernels = [global_kernel(matrix) for matrix in matrices]
    locals_ = [local_kernel(matrix, K) for matrix in matrices]
    logger.debug("Fusing %d sources over %d entities (K=%d, t=%d).", n_sources, n, K, t)

    n_iter = 0
    stopped_early = False
    for sweep in range(t):
        total = np.sum(kernels, axis=0)
        updated: List[np.ndarray] = []
        for s in range(n_sources):
            others = (total - kernels[s]) / (n_sources - 1)
            diffused = locals_[s] @ others @ locals_[s].T
            updated.append(global_kernel(diffused))

        change = max(
            np.linalg.norm(new - old, ord="fro") for new, old in zip(updated, kernels)
        )
        kernels = updated
        n_iter = sweep + 1
        logger.debug("Sweep %d: max kernel change %.3e.", n_iter, change)

        if tol is not None and change < tol:
            stopped_early = True
            break

    fused = np.mean(kernels, axis=0)
    return FusionResult(
        fused=fused,
        kernels=tuple(kernels),
        n_iter=n_iter,
        stopped_early=stopped_early,
    )


def _validate_affinities(affinities: Sequence[np.ndarray]) -> List[np.ndarray]:
    matrices = [np.asarray(matrix, dtype=np.float64) for matrix in affinities]
    if len(matrices) < 2:
        raise InvalidInputError("Fusion requires at least two affinity matrices.")

    n = None
    for idx, matrix in enumerate(matrices):
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise InvalidInputError(f"Affinity matrix {idx} must be square, got {matrix.shape}.")
        if n is None:
            n = matrix.shape[0]
        elif matrix.shape[0] != n:
            raise InvalidInputError(
                f"Affinity matrix {idx} has shape {matrix.shape}, expected ({n}, {n})."
            )
        if not np.all(np.isfinite(matrix)):
            raise InvalidInputError(f"Affinity matrix {idx} contains non-finite values.")
        if np.any(matrix < 0):
            raise InvalidInputError(f"Affinity matrix {idx} has negative entries.")
    return matrices
