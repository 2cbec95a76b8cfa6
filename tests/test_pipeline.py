"""
End-to-end tests for the integration strategies.
"""

import numpy as np
import pytest

from snfclust.config import SNFConfig
from snfclust.errors import InvalidInputError
from snfclust.pipeline import STRATEGIES, integrate, score_against
from snfclust.synthetic import generate_multiview_blobs


CONFIG = SNFConfig(mu=0.5, K=10, t=10)


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_strategies_recover_separated_groups(three_blob_views, strategy):
    views, truth = three_blob_views
    result = integrate(views, 3, strategy=strategy, config=CONFIG)

    assert result.strategy == strategy
    assert result.affinity.shape == (45, 45)
    assert sorted(np.unique(result.labels).tolist()) == [1, 2, 3]
    scores = score_against(result, truth)
    assert scores["ARI"] == pytest.approx(1.0)
    assert scores["strategy"] == strategy
    assert (result.fusion is not None) == (strategy == "snf")


def test_snf_result_carries_fusion_diagnostics(three_blob_views):
    views, _ = three_blob_views
    result = integrate(views, 3, config=CONFIG)
    assert result.fusion.n_iter == 10
    np.testing.assert_allclose(result.affinity, result.fusion.fused)


def test_single_strategy_source_index(three_blob_views):
    views, _ = three_blob_views
    result = integrate(views, 3, strategy="single", config=CONFIG, source=1)
    assert result.partition.k == 3
    with pytest.raises(InvalidInputError):
        integrate(views, 3, strategy="single", config=CONFIG, source=2)


def test_unknown_strategy(three_blob_views):
    views, _ = three_blob_views
    with pytest.raises(InvalidInputError):
        integrate(views, 3, strategy="concatenate", config=CONFIG)


def test_snf_needs_two_sources(three_blob_views):
    views, _ = three_blob_views
    with pytest.raises(InvalidInputError):
        integrate(views[:1], 3, config=CONFIG)


def test_generate_multiview_blobs_shapes():
    views, labels = generate_multiview_blobs(
        n_per_cluster=[4, 6], n_clusters=2, n_features=(3, 7), seed=0
    )
    assert [view.shape for view in views] == [(10, 3), (10, 7)]
    np.testing.assert_array_equal(labels, [1] * 4 + [2] * 6)

    again, _ = generate_multiview_blobs(
        n_per_cluster=[4, 6], n_clusters=2, n_features=(3, 7), seed=0
    )
    np.testing.assert_array_equal(views[0], again[0])
