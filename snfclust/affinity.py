"""
Per-source affinity matrices from feature matrices.

Each source is turned into an entity-by-entity similarity with the scaled
exponential kernel used by Similarity Network Fusion: the bandwidth of every
pair is the average of the two local neighbourhood scales and the pair
distance itself.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np
from sklearn.metrics import pairwise_distances

from .data_io import MatrixLike, as_feature_array, check_aligned
from .errors import InvalidInputError


__all__ = ["pairwise_euclidean", "neighbourhood_scale", "make_affinity", "make_affinities"]

logger = logging.getLogger(__name__)


def pairwise_euclidean(data: MatrixLike, *, metric: str = "euclidean") -> np.ndarray:
    """
    Pairwise distance matrix between the rows of ``data``.

    The result is exactly symmetric with a zero diagonal.
    """

    values = as_feature_array(data)
    distances = pairwise_distances(values, metric=metric)
    distances = (distances + distances.T) / 2.0
    np.fill_diagonal(distances, 0.0)
    return distances


def neighbourhood_scale(distances: np.ndarray, K: int) -> np.ndarray:
    """
    Mean distance from every entity to its ``K`` nearest entities, itself included.
    """

    n = distances.shape[0]
    if not 1 <= K <= n:
        raise InvalidInputError(f"K must be in [1, {n}], got {K}.")
    nearest = np.sort(distances, axis=1)[:, :K]
    return nearest.mean(axis=1)


def make_affinity(
    data: MatrixLike,
    *,
    K: int,
    mu: float = 0.5,
    metric: str = "euclidean",
    diagonal: float = 1.0,
) -> np.ndarray:
    """
    Build the scaled exponential affinity matrix for one source.

    Parameters
    ----------
    data
        Feature matrix with entities as rows.
    K
        Neighbourhood size used for the local scale, counting the entity itself.
    mu
        Kernel bandwidth; larger values flatten the similarity profile.
    metric
        Any metric accepted by ``sklearn.metrics.pairwise_distances``.
    diagonal
        Constant written on the diagonal of the result.

    Returns
    -------
    np.ndarray
        Symmetric (n, n) matrix with entries in [0, 1].
    """

    if mu <= 0:
        raise InvalidInputError("mu must be strictly positive.")
    if not 0.0 <= diagonal <= 1.0:
        raise InvalidInputError("diagonal must lie in [0, 1].")

    distances = pairwise_euclidean(data, metric=metric)
    n = distances.shape[0]
    if n < 2:
        raise InvalidInputError("At least two entities are required.")

    scale = neighbourhood_scale(distances, K)
    epsilon = (scale[:, None] + scale[None, :] + distances) / 3.0

    # eps == 0 only when rho == 0 as well; the exponent is then taken as 0.
    exponent = np.divide(
        distances**2,
        mu * epsilon,
        out=np.zeros_like(distances),
        where=epsilon > 0,
    )
    affinity = np.exp(-exponent)
    affinity = (affinity + affinity.T) / 2.0
    np.fill_diagonal(affinity, diagonal)

    logger.debug(
        "Affinity built for %d entities (K=%d, mu=%.3g, mean off-diagonal=%.4f).",
        n,
        K,
        mu,
        affinity[~np.eye(n, dtype=bool)].mean(),
    )
    return affinity


def make_affinities(
    sources: Sequence[MatrixLike],
    *,
    K: int,
    mu: float = 0.5,
    metric: str = "euclidean",
    diagonal: float = 1.0,
) -> List[np.ndarray]:
    """
    Build one affinity matrix per source after checking the sources are aligned.
    """

    check_aligned(sources)
    return [
        make_affinity(source, K=K, mu=mu, metric=metric, diagonal=diagonal)
        for source in sources
    ]
