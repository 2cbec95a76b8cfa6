"""
Exception types raised by the fusion and clustering routines.
"""

from __future__ import annotations


__all__ = [
    "SNFClustError",
    "InvalidInputError",
    "DegenerateInputError",
    "NumericInstabilityError",
]


class SNFClustError(Exception):
    """Base class for every error raised by ``snfclust``."""


class InvalidInputError(SNFClustError, ValueError):
    """Shape mismatch, non-square matrix or a parameter out of range."""


class DegenerateInputError(SNFClustError, ValueError):
    """Zero-entropy labeling paired with non-zero mutual information."""


class NumericInstabilityError(SNFClustError, ArithmeticError):
    """Division by a zero scaling factor or a zero-mass kernel row."""
