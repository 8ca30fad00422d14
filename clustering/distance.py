"""
clustering/distance.py

Euclidean distance between feature vectors.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from clustering.errors import DimensionMismatchError


def euclidean_distance(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """
    Return ``sqrt(sum((a[i] - b[i]) ** 2))``.

    Raises:
        DimensionMismatchError: If ``a`` and ``b`` differ in length.
    """

    left = np.asarray(a, dtype=np.float64)
    right = np.asarray(b, dtype=np.float64)
    if left.shape != right.shape:
        raise DimensionMismatchError(
            f"Cannot compare vectors of length {left.size} and {right.size}."
        )
    return float(np.sqrt(np.sum((left - right) ** 2)))


def distances_to_centroids(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Euclidean distance from every point to every centroid.

    Args:
        points:    Array of shape (n_samples, n_features).
        centroids: Array of shape (n_clusters, n_features).

    Returns:
        Array of shape (n_samples, n_clusters).

    Raises:
        DimensionMismatchError: If the feature counts differ.
    """

    if points.shape[1] != centroids.shape[1]:
        raise DimensionMismatchError(
            f"Points have {points.shape[1]} features, centroids have {centroids.shape[1]}."
        )
    deltas = points[:, None, :] - centroids[None, :, :]
    return np.sqrt(np.sum(deltas ** 2, axis=2))
