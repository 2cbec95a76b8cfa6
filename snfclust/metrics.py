"""
Agreement scores between two labelings of the same entities.

All scores are computed from the contingency table or the pair confusion
matrix, so they only depend on which entities share a cluster and never on
the literal label values.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from scipy.stats import entropy
from sklearn.metrics import adjusted_rand_score
from sklearn.metrics.cluster import pair_confusion_matrix

from .errors import DegenerateInputError, InvalidInputError


__all__ = [
    "cluster_counts",
    "contingency_table",
    "rand_index",
    "adjusted_rand_index",
    "normalized_mutual_information",
    "partition_metrics",
]

_ZERO_ENTROPY = 1e-12


def cluster_counts(labels: np.ndarray, *, name: str = "cluster") -> pd.DataFrame:
    """
    Return a DataFrame of cluster sizes.
    """

    unique, counts = np.unique(labels, return_counts=True)
    frame = pd.DataFrame({name: unique, "size": counts})
    return frame.sort_values(by=name).reset_index(drop=True)


def contingency_table(labels_a: np.ndarray, labels_b: np.ndarray) -> pd.DataFrame:
    """
    Cross-tabulate two cluster labelings.
    """

    labels_a, labels_b = _check_labelings(labels_a, labels_b)
    return pd.crosstab(labels_a, labels_b, rownames=["labels_a"], colnames=["labels_b"])


def rand_index(labels_a: np.ndarray, labels_b: np.ndarray) -> float:
    """
    Fraction of entity pairs on which the two labelings agree.

    A pair agrees when it is grouped together in both labelings or separated
    in both.
    """

    labels_a, labels_b = _check_labelings(labels_a, labels_b)
    pairs = pair_confusion_matrix(labels_a, labels_b)
    agreeing = int(pairs[0, 0]) + int(pairs[1, 1])
    return agreeing / int(pairs.sum())


def adjusted_rand_index(labels_a: np.ndarray, labels_b: np.ndarray) -> float:
    """
    Rand index corrected for chance (Hubert and Arabie).
    """

    labels_a, labels_b = _check_labelings(labels_a, labels_b)
    return float(adjusted_rand_score(labels_a, labels_b))


def normalized_mutual_information(labels_a: np.ndarray, labels_b: np.ndarray) -> float:
    """
    Mutual information normalised by the geometric mean of the entropies.

    Entropies and mutual information are measured in bits over the empirical
    joint distribution given by the contingency table. When either labeling
    has zero entropy the score is 0, provided the mutual information is 0 too.
    """

    table = contingency_table(labels_a, labels_b).to_numpy(dtype=np.float64)
    joint = table / table.sum()
    p_a = joint.sum(axis=1)
    p_b = joint.sum(axis=0)

    h_a = float(entropy(p_a, base=2))
    h_b = float(entropy(p_b, base=2))

    nonzero = joint > 0
    outer = np.outer(p_a, p_b)
    mutual_info = float(np.sum(joint[nonzero] * np.log2(joint[nonzero] / outer[nonzero])))
    mutual_info = max(mutual_info, 0.0)

    if h_a <= _ZERO_ENTROPY or h_b <= _ZERO_ENTROPY:
        if mutual_info > _ZERO_ENTROPY:
            raise DegenerateInputError(
                f"Labeling has zero entropy but mutual information is {mutual_info:.3g}."
            )
        return 0.0
    return min(mutual_info / np.sqrt(h_a * h_b), 1.0)


def partition_metrics(labels_a: np.ndarray, labels_b: np.ndarray) -> pd.Series:
    """
    Compute Rand index (RI), adjusted Rand index (ARI) and normalised mutual
    information (NMI).
    """

    return pd.Series(
        {
            "RI": rand_index(labels_a, labels_b),
            "ARI": adjusted_rand_index(labels_a, labels_b),
            "NMI": normalized_mutual_information(labels_a, labels_b),
        }
    )


def _check_labelings(labels_a: np.ndarray, labels_b: np.ndarray):
    labels_a = np.asarray(labels_a).ravel()
    labels_b = np.asarray(labels_b).ravel()
    if labels_a.shape != labels_b.shape:
        raise InvalidInputError(
            f"Labelings cover different numbers of entities: {labels_a.size} vs {labels_b.size}."
        )
    if labels_a.size < 2:
        raise InvalidInputError("At least two entities are required to compare labelings.")
    return labels_a, labels_b
