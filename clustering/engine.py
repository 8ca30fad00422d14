"""
K-means clustering engine.

Accepts a preprocessed dataset and alternates assignment and centroid
updates until assignments stop changing or the iteration cap is hit.
No feature engineering or I/O here.
"""

import logging
import numbers

import numpy as np

from app.logging_utils import log_event
from clustering.assignment import ClusterAssigner
from clustering.centroids import CentroidUpdater, EmptyClusterPolicy
from clustering.errors import EmptyDatasetError, InvalidConfigurationError
from clustering.initialization import BaseCentroidInitializer
from clustering.types import ClusteringResult, Dataset, RunState

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100


class KMeansDriver:
    """
    Runs Lloyd's k-means loop over a dataset.

    Responsibilities:
        - Seed centroids through the configured initializer.
        - Alternate centroid updates and assignment passes.
        - Stop on convergence or at the iteration cap.

    Not responsible for:
        - Imputation or normalization (the dataset must be preprocessed).
        - Label offsets for human-facing output.
        - Any file access.

    Args:
        initializer:          Seeding strategy.
        max_iterations:       Cap on update/assign rounds after the
                              initial assignment pass.
        empty_cluster_policy: Passed to :class:`CentroidUpdater`.
        assigner:             Optional assigner override.
        updater:              Optional updater override.
    """

    def __init__(
        self,
        initializer: BaseCentroidInitializer,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        empty_cluster_policy: EmptyClusterPolicy = EmptyClusterPolicy.RETAIN,
        assigner: ClusterAssigner | None = None,
        updater: CentroidUpdater | None = None,
    ) -> None:
        self._initializer = initializer
        self._max_iterations = max_iterations
        self._assigner = assigner or ClusterAssigner()
        self._updater = updater or CentroidUpdater(empty_cluster_policy)
        self.state = RunState.INITIALIZING

    def run(self, dataset: Dataset, n_clusters: int) -> ClusteringResult:
        """
        Cluster ``dataset`` into ``n_clusters`` groups.

        The first assignment pass establishes the initial labels and is not
        counted. Each later round recomputes centroids from the current
        labels and reassigns; the run converges on the first round that
        changes nothing. Hitting the cap is not an error: the last
        assignment is returned with state ``ITERATION_CAP_REACHED``.

        Args:
            dataset:    Preprocessed dataset; ``labels`` are overwritten.
            n_clusters: Number of clusters (k).

        Returns:
            :class:`ClusteringResult` with 0-based labels.

        Raises:
            EmptyDatasetError:         If ``dataset`` has no observations.
            InvalidConfigurationError: If ``n_clusters`` or the iteration
                                       cap is out of range.
        """
        self.state = RunState.INITIALIZING
        n_clusters = self._validate(dataset, n_clusters)

        centroids = self._initializer.initialize(dataset, n_clusters)
        self._assigner.assign(dataset, centroids)

        iterations = self._max_iterations
        self.state = RunState.ITERATION_CAP_REACHED
        for iteration in range(self._max_iterations):
            centroids = self._updater.update(dataset, n_clusters, previous=centroids)
            if not self._assigner.assign(dataset, centroids):
                iterations = iteration
                self.state = RunState.CONVERGED
                break

        level = logging.INFO if self.state is RunState.CONVERGED else logging.WARNING
        log_event(
            logger,
            level,
            "kmeans_finished",
            state=self.state.value,
            iterations=iterations,
            n_clusters=n_clusters,
            observations=len(dataset),
        )

        return ClusteringResult(
            assignments=dataset.assignments(),
            iterations=iterations,
            state=self.state,
            centroids=np.array(centroids, copy=True),
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _validate(self, dataset: Dataset, n_clusters: int) -> int:
        if dataset.is_empty:
            raise EmptyDatasetError("Dataset has no observations to cluster.")
        return validate_run_configuration(len(dataset), n_clusters, self._max_iterations)


def validate_run_configuration(n_samples: int, n_clusters: int, max_iterations: int) -> int:
    """
    Check k and the iteration cap before any clustering work.

    Any integral ``n_clusters`` (including NumPy integers) is accepted;
    ``bool`` is not.

    Args:
        n_samples:      Number of observations to cluster.
        n_clusters:     Requested cluster count (k).
        max_iterations: Cap on update/assign rounds.

    Returns:
        ``n_clusters`` as a plain ``int``.

    Raises:
        InvalidConfigurationError: If ``n_clusters`` is not in
                                   ``[1, n_samples]`` or ``max_iterations``
                                   is below 1.
    """
    if (
        isinstance(n_clusters, bool)
        or not isinstance(n_clusters, numbers.Integral)
        or n_clusters < 1
    ):
        raise InvalidConfigurationError(
            f"n_clusters must be a positive integer, got {n_clusters!r}."
        )

    if n_clusters > n_samples:
        raise InvalidConfigurationError(
            f"n_clusters ({n_clusters}) cannot exceed "
            f"number of observations ({n_samples})."
        )

    if max_iterations < 1:
        raise InvalidConfigurationError(
            f"max_iterations must be at least 1, got {max_iterations}."
        )

    return int(n_clusters)
