"""
clustering/errors.py

Exceptions raised by the k-means clustering core.
"""

from __future__ import annotations


class ClusteringError(Exception):
    """Base exception for clustering failures."""


class InvalidConfigurationError(ClusteringError):
    """Raised when k, the iteration cap, or seed selection cannot be satisfied."""


class DimensionMismatchError(ClusteringError):
    """Raised when feature vectors of different lengths are combined."""


class EmptyDatasetError(ClusteringError):
    """Raised when there are no observations to cluster."""


class MissingValuesError(ClusteringError):
    """Raised when normalization is attempted before missing values are imputed."""
