"""
Tests for affinity matrix construction.
"""

import numpy as np
import pytest

from snfclust.affinity import (
    make_affinities,
    make_affinity,
    neighbourhood_scale,
    pairwise_euclidean,
)
from snfclust.data_io import DataMatrix
from snfclust.errors import InvalidInputError


def test_pairwise_euclidean_symmetric_zero_diagonal():
    X = np.array([[0.0, 0.0], [3.0, 4.0], [6.0, 8.0]])
    dist = pairwise_euclidean(X)
    np.testing.assert_allclose(dist, dist.T)
    np.testing.assert_allclose(np.diag(dist), 0.0)
    assert dist[0, 1] == pytest.approx(5.0)
    assert dist[0, 2] == pytest.approx(10.0)


def test_neighbourhood_scale_includes_self():
    dist = np.array([[0.0, 1.0, 2.0], [1.0, 0.0, 3.0], [2.0, 3.0, 0.0]])
    np.testing.assert_allclose(neighbourhood_scale(dist, 2), [0.5, 0.5, 1.0])
    np.testing.assert_allclose(neighbourhood_scale(dist, 1), [0.0, 0.0, 0.0])


def test_affinity_symmetric_and_bounded():
    rng = np.random.default_rng(0)
    X = rng.standard_normal((20, 6))
    W = make_affinity(X, K=5, mu=0.5)
    assert W.shape == (20, 20)
    np.testing.assert_allclose(W, W.T)
    assert np.all(W >= 0.0)
    assert np.all(W <= 1.0)
    np.testing.assert_allclose(np.diag(W), 1.0)


def test_affinity_matches_formula():
    X = np.array([[0.0], [1.0], [3.0]])
    K, mu = 2, 0.5
    W = make_affinity(X, K=K, mu=mu)

    rho = np.abs(X - X.T)
    scale = np.array([0.5, 0.5, 1.0])
    eps = (scale[0] + scale[2] + rho[0, 2]) / 3.0
    expected = np.exp(-rho[0, 2] ** 2 / (mu * eps))
    assert W[0, 2] == pytest.approx(expected)


def test_duplicate_rows_have_unit_affinity():
    X = np.array([[1.0, 2.0], [1.0, 2.0], [4.0, 0.0], [7.0, 5.0]])
    W = make_affinity(X, K=2, diagonal=1.0)
    np.testing.assert_allclose(np.diag(W), 1.0)
    assert W[0, 1] == pytest.approx(1.0)
    assert W[0, 2] < 1.0


def test_custom_diagonal_constant():
    X = np.arange(10, dtype=float).reshape(5, 2)
    W = make_affinity(X, K=3, diagonal=0.0)
    np.testing.assert_allclose(np.diag(W), 0.0)


def test_larger_mu_flattens_affinity():
    rng = np.random.default_rng(1)
    X = rng.standard_normal((15, 3))
    narrow = make_affinity(X, K=5, mu=0.3)
    wide = make_affinity(X, K=5, mu=1.0)
    off = ~np.eye(15, dtype=bool)
    assert wide[off].mean() > narrow[off].mean()


def test_accepts_data_matrix():
    X = np.arange(12, dtype=float).reshape(6, 2)
    W_array = make_affinity(X, K=3)
    W_container = make_affinity(DataMatrix(X), K=3)
    np.testing.assert_allclose(W_array, W_container)


@pytest.mark.parametrize("K", [0, 7])
def test_invalid_neighbourhood_size(K):
    X = np.arange(12, dtype=float).reshape(6, 2)
    with pytest.raises(InvalidInputError):
        make_affinity(X, K=K)


def test_invalid_inputs():
    X = np.arange(12, dtype=float).reshape(6, 2)
    with pytest.raises(InvalidInputError):
        make_affinity(X, K=3, mu=0.0)
    with pytest.raises(InvalidInputError):
        make_affinity(np.arange(6, dtype=float), K=3)
    bad = X.copy()
    bad[0, 0] = np.nan
    with pytest.raises(InvalidInputError):
        make_affinity(bad, K=3)
    with pytest.raises(InvalidInputError):
        make_affinity(X[:1], K=1)


def test_make_affinities_per_source(three_blob_views):
    views, _ = three_blob_views
    affinities = make_affinities(views, K=10)
    assert len(affinities) == 2
    for W in affinities:
        assert W.shape == (45, 45)


def test_make_affinities_rejects_misaligned_sources():
    rng = np.random.default_rng(2)
    with pytest.raises(InvalidInputError):
        make_affinities([rng.standard_normal((10, 3)), rng.standard_normal((9, 3))], K=3)
