"""
clustering/initialization.py

Centroid seeding strategies for k-means.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence

import numpy as np

from app.logging_utils import log_event
from clustering.errors import InvalidConfigurationError
from clustering.types import Dataset

logger = logging.getLogger(__name__)

_DRAW_BUDGET_FACTOR = 64


class InitializationStrategy(str, Enum):
    DETERMINISTIC = "deterministic"
    RANDOMIZED = "randomized"


class BaseCentroidInitializer(ABC):
    """
    Contract for seeding strategies.

    Subclasses choose ``k`` distinct observation positions; the base class
    validates ``k`` and copies the chosen feature rows so later centroid
    updates never touch the dataset.
    """

    def initialize(self, dataset: Dataset, n_clusters: int) -> np.ndarray:
        """
        Return ``n_clusters`` initial centroids, shape (k, n_features).

        Raises:
            InvalidConfigurationError: If ``n_clusters`` is not in
                                       ``[1, len(dataset)]`` or the strategy
                                       cannot pick enough seeds.
        """
        if n_clusters < 1:
            raise InvalidConfigurationError(
                f"Number of clusters must be at least 1, got {n_clusters}."
            )
        if n_clusters > len(dataset):
            raise InvalidConfigurationError(
                f"Number of clusters ({n_clusters}) cannot exceed "
                f"number of observations ({len(dataset)})."
            )

        positions = self.select_positions(len(dataset), n_clusters)
        log_event(
            logger,
            logging.DEBUG,
            "centroids_seeded",
            strategy=type(self).__name__,
            positions=positions,
        )
        return dataset.features[positions].copy()

    @abstractmethod
    def select_positions(self, n_samples: int, n_clusters: int) -> list[int]:
        """
        Pick ``n_clusters`` distinct positions in ``[0, n_samples)``.
        """


class DeterministicInitializer(BaseCentroidInitializer):
    """
    Seeds from fixed positions.

    Args:
        offset:    First seed position when ``positions`` is not given; seeds
                   are ``offset .. offset + k - 1``.
        positions: Explicit seed positions, one per cluster.
    """

    def __init__(self, offset: int = 0, positions: Sequence[int] | None = None) -> None:
        if offset < 0:
            raise InvalidConfigurationError(f"Seed offset must be non-negative, got {offset}.")
        self._offset = offset
        self._positions = list(positions) if positions is not None else None

    def select_positions(self, n_samples: int, n_clusters: int) -> list[int]:
        if self._positions is None:
            if n_samples < self._offset + n_clusters:
                raise InvalidConfigurationError(
                    f"Seed offset {self._offset} with {n_clusters} clusters needs at "
                    f"least {self._offset + n_clusters} observations, got {n_samples}."
                )
            return list(range(self._offset, self._offset + n_clusters))

        positions = self._positions
        if len(positions) != n_clusters:
            raise InvalidConfigurationError(
                f"Expected {n_clusters} seed positions, got {len(positions)}."
            )
        if len(set(positions)) != len(positions):
            raise InvalidConfigurationError(f"Seed positions must be distinct, got {positions}.")
        out_of_range = [p for p in positions if not 0 <= p < n_samples]
        if out_of_range:
            raise InvalidConfigurationError(
                f"Seed positions {out_of_range} are outside [0, {n_samples})."
            )
        return list(positions)


class RandomizedInitializer(BaseCentroidInitializer):
    """
    Seeds from ``k`` distinct positions drawn uniformly at random.

    Positions are drawn one at a time and redrawn on collision with an
    already chosen one. Centroids follow ascending position order.

    Args:
        rng:       Random generator owned by the caller.
        max_draws: Cap on the total number of draws. Defaults to
                   ``64 * n_samples``.
    """

    def __init__(self, rng: np.random.Generator, max_draws: int | None = None) -> None:
        self._rng = rng
        self._max_draws = max_draws

    def select_positions(self, n_samples: int, n_clusters: int) -> list[int]:
        budget = self._max_draws if self._max_draws is not None else _DRAW_BUDGET_FACTOR * n_samples
        chosen: set[int] = set()
        draws = 0

        while len(chosen) < n_clusters:
            if draws >= budget:
                raise InvalidConfigurationError(
                    f"Found only {len(chosen)} of {n_clusters} distinct seeds "
                    f"among {n_samples} observations after {draws} draws."
                )
            chosen.add(int(self._rng.integers(0, n_samples)))
            draws += 1

        return sorted(chosen)


def build_initializer(
    strategy: InitializationStrategy | str,
    *,
    seed: int | None = None,
    offset: int = 0,
) -> BaseCentroidInitializer:
    """
    Construct the initializer for ``strategy``.

    Args:
        strategy: ``deterministic`` or ``randomized``.
        seed:     Seed for the randomized strategy's generator; ``None``
                  draws fresh OS entropy.
        offset:   First seed position for the deterministic strategy.
    """

    strategy = InitializationStrategy(strategy)
    if strategy is InitializationStrategy.DETERMINISTIC:
        return DeterministicInitializer(offset=offset)
    return RandomizedInitializer(rng=np.random.default_rng(seed))
