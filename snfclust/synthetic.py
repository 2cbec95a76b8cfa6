from __future__ import annotations

from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import InvalidInputError

SeedLike = Union[int, np.random.RandomState]


def _as_random_state(seed: Optional[SeedLike]) -> np.random.RandomState:
    """Return a RandomState no matter how the seed is specified."""
    if seed is None:
        return np.random.RandomState()
    if isinstance(seed, np.random.RandomState):
        return seed
    return np.random.RandomState(seed)


def _cluster_labels(n_per_cluster: Union[int, Sequence[int]], n_clusters: int) -> np.ndarray:
    if np.isscalar(n_per_cluster):
        sizes = [int(n_per_cluster)] * n_clusters
    else:
        sizes = [int(size) for size in n_per_cluster]
        if len(sizes) != n_clusters:
            raise InvalidInputError("`n_per_cluster` must have one entry per cluster.")
    if any(size <= 0 for size in sizes):
        raise InvalidInputError("Cluster sizes must be positive.")
    return np.repeat(np.arange(n_clusters), sizes)


def generate_multiview_blobs(
    *,
    n_per_cluster: Union[int, Sequence[int]],
    n_clusters: int,
    n_features: Sequence[int],
    separation: Union[float, Sequence[float]] = 4.0,
    noise: float = 1.0,
    seed: Optional[SeedLike] = None,
) -> Tuple[List[np.ndarray], np.ndarray]:
    """
    Sample several views of the same entities from per-view Gaussian blobs.

    Every view places the cluster centres at random directions scaled by its
    ``separation``; a small separation in one view makes that view weak on its
    own while the others still carry the structure.

    Returns the list of (n, p_v) feature matrices and the 1-based true labels.
    """
    if n_clusters < 1:
        raise InvalidInputError("`n_clusters` must be positive.")
    if noise <= 0:
        raise InvalidInputError("`noise` must be strictly positive.")
    if len(n_features) == 0:
        raise InvalidInputError("At least one view is required.")

    seps = [float(separation)] * len(n_features) if np.isscalar(separation) else list(separation)
    if len(seps) != len(n_features):
        raise InvalidInputError("`separation` must have one entry per view.")

    rng = _as_random_state(seed)
    labels = _cluster_labels(n_per_cluster, n_clusters)

    views = []
    for p, sep in zip(n_features, seps):
        if p <= 0:
            raise InvalidInputError("Every view needs a positive number of features.")
        centres = rng.standard_normal(size=(n_clusters, p))
        centres /= np.linalg.norm(centres, axis=1, keepdims=True)
        centres *= sep
        views.append(centres[labels] + noise * rng.standard_normal(size=(labels.size, p)))
    return views, labels + 1


def block_distance_matrix(
    sizes: Sequence[int],
    *,
    within: float = 0.1,
    between: float = 10.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """Dissimilarity matrix of perfectly separated groups and its 1-based labels."""
    if within < 0 or between < 0:
        raise InvalidInputError("Distances must be non-negative.")
    labels = _cluster_labels(sizes, len(sizes))
    same = labels[:, None] == labels[None, :]
    dist = np.where(same, within, between).astype(np.float64)
    np.fill_diagonal(dist, 0.0)
    return dist, labels + 1
