"""
clustering/assignment.py

Nearest-centroid assignment step of k-means.
"""

from __future__ import annotations

import numpy as np

from clustering.distance import distances_to_centroids
from clustering.types import Dataset


class ClusterAssigner:
    """
    Assigns every observation to its nearest centroid.

    Ties go to the lowest centroid index: ``np.argmin`` returns the first
    occurrence of the minimum, same as a linear scan that only replaces
    the best index on a strictly smaller distance.
    """

    def assign(self, dataset: Dataset, centroids: np.ndarray) -> bool:
        """
        Update ``dataset.labels`` in place.

        Args:
            dataset:   Preprocessed dataset.
            centroids: Array of shape (k, n_features).

        Returns:
            True if at least one observation changed cluster.

        Raises:
            DimensionMismatchError: If centroid and feature widths differ.
        """
        if dataset.is_empty:
            return False

        distances = distances_to_centroids(dataset.features, centroids)
        nearest = np.argmin(distances, axis=1)

        changed = nearest != dataset.labels
        if not changed.any():
            return False

        dataset.labels[changed] = nearest[changed]
        return True
