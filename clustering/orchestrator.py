"""
Clustering orchestrator.

Wires together feature preprocessing, centroid seeding, and the k-means
loop into a single deterministic pipeline call.
No math and no file access here.
"""

import logging
from dataclasses import replace
from typing import Sequence

from app.config import ClusteringSettings
from app.logging_utils import log_event
from clustering.engine import KMeansDriver, validate_run_configuration
from clustering.errors import EmptyDatasetError
from clustering.features import FeaturePreprocessor
from clustering.initialization import BaseCentroidInitializer, build_initializer
from clustering.types import ClusteringResult, Dataset, Observation

logger = logging.getLogger(__name__)


class ClusteringOrchestrator:
    """
    Coordinates the end-to-end clustering pipeline.

    Each pipeline step is delegated entirely to its dedicated module:
        1. Dataset              - packs observations into a feature matrix.
        2. FeaturePreprocessor  - imputes missing values and normalizes.
        3. KMeansDriver         - seeds centroids and runs the k-means loop.

    The orchestrator then shifts labels by ``settings.label_origin``.

    Args:
        settings:    Clustering settings for this run.
        initializer: Optional seeding strategy override. When ``None`` a
                     fresh initializer is built from ``settings`` for every
                     run, so a fixed ``random_seed`` gives the same seeds
                     on each call.
    """

    def __init__(
        self,
        settings: ClusteringSettings,
        initializer: BaseCentroidInitializer | None = None,
    ) -> None:
        self._settings = settings
        self._preprocessor = FeaturePreprocessor(settings.degenerate_range_policy)
        self._initializer = initializer

    def run_clustering(
        self,
        observations: Sequence[Observation],
        n_clusters: int,
    ) -> ClusteringResult:
        """
        Execute the full clustering pipeline.

        Args:
            observations: Ingested observations in input order.
            n_clusters:   Number of clusters (k).

        Returns:
            :class:`ClusteringResult` whose labels start at
            ``settings.label_origin``.

        Raises:
            EmptyDatasetError:         If ``observations`` is empty.
            DimensionMismatchError:    If an observation's feature count
                                       differs from ``settings.n_features``.
            InvalidConfigurationError: If ``n_clusters`` or
                                       ``settings.max_iterations`` is out of
                                       range; raised before preprocessing.
        """
        if not observations:
            raise EmptyDatasetError("No observations were ingested.")

        n_clusters = validate_run_configuration(
            len(observations), n_clusters, self._settings.max_iterations
        )

        log_event(
            logger,
            logging.INFO,
            "clustering_started",
            observations=len(observations),
            n_clusters=n_clusters,
            initialization=self._settings.initialization.value,
        )

        # Step 1: Dataset construction
        dataset = Dataset.from_observations(observations, n_features=self._settings.n_features)

        # Step 2: Imputation and normalization
        self._preprocessor.prepare(dataset)

        # Step 3: K-means
        initializer = self._initializer
        if initializer is None:
            initializer = self._build_initializer()
        driver = KMeansDriver(
            initializer=initializer,
            max_iterations=self._settings.max_iterations,
            empty_cluster_policy=self._settings.empty_cluster_policy,
        )
        result = driver.run(dataset, n_clusters)

        labeled = replace(
            result,
            assignments=dataset.assignments(label_origin=self._settings.label_origin),
        )

        log_event(
            logger,
            logging.INFO,
            "clustering_finished",
            state=labeled.state.value,
            iterations=labeled.iterations,
            cluster_sizes=labeled.cluster_sizes(),
        )
        return labeled

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_initializer(self) -> BaseCentroidInitializer:
        return build_initializer(
            self._settings.initialization,
            seed=self._settings.random_seed,
            offset=self._settings.init_offset,
        )
