"""
Shared fixtures for the snfclust test-suite.
"""

import numpy as np
import pytest


def _separated_view(labels: np.ndarray, n_features: int, rng: np.random.Generator) -> np.ndarray:
    n_clusters = int(labels.max()) + 1
    centres = np.zeros((n_clusters, n_features))
    centres[np.arange(n_clusters), np.arange(n_clusters)] = 8.0
    return centres[labels] + 0.1 * rng.standard_normal((labels.size, n_features))


@pytest.fixture
def three_blob_views():
    """Two views of 45 entities in three well separated groups, plus 1-based truth."""
    rng = np.random.default_rng(7)
    labels = np.repeat(np.arange(3), 15)
    views = [_separated_view(labels, 5, rng), _separated_view(labels, 4, rng)]
    return views, labels + 1


@pytest.fixture
def random_affinity():
    """Symmetric affinity over 12 entities with a unit diagonal."""
    rng = np.random.default_rng(3)
    raw = rng.uniform(0.05, 1.0, size=(12, 12))
    affinity = (raw + raw.T) / 2.0
    np.fill_diagonal(affinity, 1.0)
    return affinity
