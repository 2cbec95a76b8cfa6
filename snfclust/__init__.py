"""
Multi-omics patient clustering with Similarity Network Fusion.

This package provides the numerical building blocks: per-source affinity
construction, Similarity Network Fusion, Partitioning Around Medoids on a
precomputed dissimilarity and agreement scores between partitions. Data
preparation and reporting are left to the caller.
"""

from .affinity import make_affinities, make_affinity, neighbourhood_scale, pairwise_euclidean
from .clustering.pam import PAMResult, affinity_to_dissimilarity, run_pam
from .config import SNFConfig, load_config, save_config
from .data_io import DataMatrix, check_aligned, load_matrix
from .errors import (
    DegenerateInputError,
    InvalidInputError,
    NumericInstabilityError,
    SNFClustError,
)
from .fusion import FusionResult, global_kernel, local_kernel, snf
from .metrics import (
    adjusted_rand_index,
    cluster_counts,
    contingency_table,
    normalized_mutual_information,
    partition_metrics,
    rand_index,
)
from .pipeline import STRATEGIES, IntegrationResult, integrate, score_against
from .synthetic import block_distance_matrix, generate_multiview_blobs

__all__ = [
    "make_affinity",
    "make_affinities",
    "neighbourhood_scale",
    "pairwise_euclidean",
    "FusionResult",
    "global_kernel",
    "local_kernel",
    "snf",
    "PAMResult",
    "affinity_to_dissimilarity",
    "run_pam",
    "cluster_counts",
    "contingency_table",
    "rand_index",
    "adjusted_rand_index",
    "normalized_mutual_information",
    "partition_metrics",
    "STRATEGIES",
    "IntegrationResult",
    "integrate",
    "score_against",
    "SNFConfig",
    "load_config",
    "save_config",
    "DataMatrix",
    "check_aligned",
    "load_matrix",
    "SNFClustError",
    "InvalidInputError",
    "DegenerateInputError",
    "NumericInstabilityError",
    "block_distance_matrix",
    "generate_multiview_blobs",
]
