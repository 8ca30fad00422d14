"""
clustering/centroids.py

Centroid update step of k-means.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from clustering.types import Dataset


class EmptyClusterPolicy(str, Enum):
    """
    Centroid used for a cluster that received no observations.
    """

    RETAIN = "retain"
    ORIGIN = "origin"


class CentroidUpdater:
    """
    Recomputes centroids as the mean of their assigned observations.

    Always returns a new array; centroids passed in are never mutated.

    Args:
        empty_cluster_policy: ``RETAIN`` keeps the previous centroid of an
                              empty cluster, ``ORIGIN`` resets it to the
                              all-zero vector.
    """

    def __init__(
        self,
        empty_cluster_policy: EmptyClusterPolicy = EmptyClusterPolicy.RETAIN,
    ) -> None:
        self._empty_cluster_policy = EmptyClusterPolicy(empty_cluster_policy)

    def update(
        self,
        dataset: Dataset,
        n_clusters: int,
        previous: np.ndarray | None = None,
    ) -> np.ndarray:
        """
        Compute the next set of centroids from the current assignment.

        Args:
            dataset:    Dataset with every label in ``[0, n_clusters)``.
            n_clusters: Number of clusters (k).
            previous:   Centroids of the previous iteration, used by the
                        ``RETAIN`` policy. Without it empty clusters fall
                        back to the origin.

        Returns:
            Array of shape (n_clusters, n_features).

        Raises:
            ValueError: If any label is outside ``[0, n_clusters)``.
        """
        labels = dataset.labels
        if labels.size and (labels.min() < 0 or labels.max() >= n_clusters):
            raise ValueError(
                f"Every observation must be assigned to a cluster in [0, {n_clusters})."
            )

        sums = np.zeros((n_clusters, dataset.n_features), dtype=np.float64)
        np.add.at(sums, labels, dataset.features)
        counts = np.bincount(labels, minlength=n_clusters)

        filled = counts > 0
        sums[filled] /= counts[filled][:, None]

        if (
            self._empty_cluster_policy is EmptyClusterPolicy.RETAIN
            and previous is not None
            and not filled.all()
        ):
            sums[~filled] = previous[~filled]

        return sums
