"""
Clustering on precomputed dissimilarity matrices.
"""

from .pam import PAMResult, affinity_to_dissimilarity, run_pam

__all__ = ["PAMResult", "affinity_to_dissimilarity", "run_pam"]
