"""
Partitioning Around Medoids on a precomputed dissimilarity matrix.

Implements the classic BUILD/SWAP procedure of Kaufman and Rousseeuw. BUILD
greedily selects ``k`` initial medoids; SWAP repeatedly exchanges one medoid
with one non-medoid as long as the exchange lowers the total distance of the
entities to their nearest medoid. The result is a local optimum.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..errors import InvalidInputError


__all__ = ["PAMResult", "affinity_to_dissimilarity", "run_pam"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PAMResult:
    """
    Results from a PAM run.

    Attributes
    ----------
    labels:
        Cluster label in ``[1, k]`` for every entity; label ``c`` belongs to
        ``medoids[c - 1]``.
    medoids:
        Entity indices of the chosen medoids.
    cost:
        Sum of the distances of all entities to their nearest medoid.
    n_swaps:
        Number of accepted swaps.
    converged:
        False only when ``max_swaps`` stopped the SWAP phase while an
        improving swap still existed.
    empty_clusters:
        Labels that received no entity. Only possible with duplicate entities.
    """

    labels: np.ndarray
    medoids: np.ndarray
    cost: float
    n_swaps: int
    converged: bool
    empty_clusters: Tuple[int, ...] = ()

    @property
    def k(self) -> int:
        return int(self.medoids.size)

    def cluster_sizes(self) -> np.ndarray:
        """Number of entities per label, indexed by ``label - 1``."""
        return np.bincount(self.labels - 1, minlength=self.k)


def affinity_to_dissimilarity(affinity: np.ndarray) -> np.ndarray:
    """
    Turn a similarity matrix into a PAM-ready dissimilarity.

    The matrix is symmetrised, min-max scaled over its off-diagonal entries
    and negated, ``D = 1 - minmax(W)``, with a zero diagonal.
    """

    sim = np.asarray(affinity, dtype=np.float64)
    if sim.ndim != 2 or sim.shape[0] != sim.shape[1]:
        raise InvalidInputError("affinity must be square.")
    if sim.shape[0] < 2:
        raise InvalidInputError("affinity must contain off-diagonal entries.")

    sim = (sim + sim.T) / 2.0
    off_diag = sim[~np.eye(sim.shape[0], dtype=bool)]
    low, high = off_diag.min(), off_diag.max()
    span = high - low
    if span > 0:
        scaled = np.clip((sim - low) / span, 0.0, 1.0)
    else:
        scaled = np.ones_like(sim)

    dissimilarity = 1.0 - scaled
    np.fill_diagonal(dissimilarity, 0.0)
    return dissimilarity


def run_pam(
    dissimilarity: np.ndarray,
    k: int,
    *,
    max_swaps: Optional[int] = None,
    tol: float = 1e-12,
) -> PAMResult:
    """
    Cluster entities around ``k`` medoids.

    Parameters
    ----------
    dissimilarity
        Symmetric (n, n) matrix with a zero diagonal and non-negative entries.
    k
        Number of clusters, ``1 <= k < n``.
    max_swaps
        Optional cap on accepted swaps. ``None`` runs until no swap improves.
    tol
        A swap is accepted only if it lowers the cost by more than ``tol``.

    Returns
    -------
    PAMResult
        Labels, medoids and diagnostics.
    """

    dist = _validate_dissimilarity(dissimilarity, k)

    medoids = _build(dist, k)
    logger.debug("BUILD selected medoids %s.", medoids)

    n_swaps = 0
    converged = True
    while True:
        nearest, d_near, d_second = _nearest_two(dist, medoids)
        position, candidate, delta = _best_swap(dist, medoids, nearest, d_near, d_second)
        if delta >= -tol:
            break
        if max_swaps is not None and n_swaps >= max_swaps:
            converged = False
            logger.warning("PAM stopped after %d swaps with an improving swap left.", n_swaps)
            break
        logger.debug(
            "SWAP medoid %d -> %d (cost change %.6g).", medoids[position], candidate, delta
        )
        medoids[position] = candidate
        n_swaps += 1

    labels = nearest + 1
    sizes = np.bincount(nearest, minlength=k)
    empty = tuple(int(label) for label in np.flatnonzero(sizes == 0) + 1)
    if empty:
        logger.warning("PAM produced empty clusters %s; the input has duplicate entities.", empty)

    return PAMResult(
        labels=labels.astype(int),
        medoids=np.asarray(medoids, dtype=int),
        cost=float(d_near.sum()),
        n_swaps=n_swaps,
        converged=converged,
        empty_clusters=empty,
    )


def _validate_dissimilarity(dissimilarity: np.ndarray, k: int) -> np.ndarray:
    dist = np.asarray(dissimilarity, dtype=np.float64)
    if dist.ndim != 2 or dist.shape[0] != dist.shape[1]:
        raise InvalidInputError("dissimilarity must be square.")
    n = dist.shape[0]
    if not 1 <= k < n:
        raise InvalidInputError(f"k must be in [1, {n - 1}], got {k}.")
    if not np.all(np.isfinite(dist)):
        raise InvalidInputError("dissimilarity contains non-finite values.")
    if not np.allclose(dist, dist.T):
        raise InvalidInputError("dissimilarity must be symmetric.")
    if np.any(dist < 0):
        raise InvalidInputError("dissimilarity must be non-negative.")
    if not np.allclose(np.diag(dist), 0.0):
        raise InvalidInputError("dissimilarity must have a zero diagonal.")
    return dist


def _build(dist: np.ndarray, k: int) -> List[int]:
    selected = [int(np.argmin(dist.sum(axis=1)))]
    is_selected = np.zeros(dist.shape[0], dtype=bool)
    is_selected[selected[0]] = True

    for _ in range(k - 1):
        d_near = dist[:, selected].min(axis=1)
        candidates = np.flatnonzero(~is_selected)
        # gain[i] = sum over unselected j != i of max(D_j - d(i, j), 0)
        contrib = np.maximum(d_near[candidates][None, :] - dist[np.ix_(candidates, candidates)], 0.0)
        np.fill_diagonal(contrib, 0.0)
        choice = int(candidates[np.argmax(contrib.sum(axis=1))])
        selected.append(choice)
        is_selected[choice] = True
    return selected


def _nearest_two(
    dist: np.ndarray, medoids: List[int]
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Nearest medoid position, its distance (D_j) and the second-nearest distance (E_j).
    """

    columns = dist[:, medoids]
    rows = np.arange(dist.shape[0])

    # equal distances resolve to the medoid with the lowest entity index
    order = np.argsort(medoids, kind="stable")
    nearest = order[np.argmin(columns[:, order], axis=1)]
    d_near = columns[rows, nearest]

    if len(medoids) == 1:
        d_second = np.full(dist.shape[0], np.inf)
    else:
        masked = columns.copy()
        masked[rows, nearest] = np.inf
        d_second = masked.min(axis=1)
    return nearest, d_near, d_second


def _best_swap(
    dist: np.ndarray,
    medoids: List[int],
    nearest: np.ndarray,
    d_near: np.ndarray,
    d_second: np.ndarray,
) -> Tuple[int, int, float]:
    """
    Return ``(medoid position, candidate, cost change)`` of the best swap.

    For each entity the distance after swapping medoid ``i`` for ``h`` is
    ``min(d(j, h), D_j)`` when ``i`` is not its nearest medoid and
    ``min(d(j, h), E_j)`` when it is.
    """

    is_medoid = np.zeros(dist.shape[0], dtype=bool)
    is_medoid[medoids] = True
    candidates = np.flatnonzero(~is_medoid)
    to_candidates = dist[:, candidates]

    deltas = np.empty((len(medoids), candidates.size))
    for position in range(len(medoids)):
        fallback = np.where(nearest == position, d_second, d_near)
        after = np.minimum(to_candidates, fallback[:, None])
        deltas[position] = (after - d_near[:, None]).sum(axis=0)

    position, column = np.unravel_index(int(np.argmin(deltas)), deltas.shape)
    return int(position), int(candidates[column]), float(deltas[position, column])
