"""
clustering/types.py

Domain models shared by the clustering pipeline.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

import numpy as np

from clustering.errors import DimensionMismatchError

UNASSIGNED = -1


class RunState(str, Enum):
    """
    Lifecycle of one k-means run.
    """

    INITIALIZING = "initializing"
    CONVERGED = "converged"
    ITERATION_CAP_REACHED = "iteration_cap_reached"


@dataclass(frozen=True)
class Observation:
    """
    One input record: an identifier and its feature vector.

    Missing feature values are represented as ``NaN``.
    """

    identifier: str
    features: tuple[float, ...]

    @property
    def missing_count(self) -> int:
        return sum(1 for value in self.features if math.isnan(value))


@dataclass(frozen=True)
class ClusterAssignment:
    """
    Output pair: observation identifier and its cluster label.
    """

    identifier: str
    cluster: int


@dataclass(frozen=True)
class ClusteringResult:
    """
    Terminal output of one k-means run.

    ``iterations`` counts the update/assign rounds that changed at least
    one assignment; a run whose first round changes nothing reports 0.
    """

    assignments: list[ClusterAssignment]
    iterations: int
    state: RunState
    centroids: np.ndarray = field(repr=False, compare=False)

    @property
    def converged(self) -> bool:
        return self.state is RunState.CONVERGED

    def cluster_sizes(self) -> dict[int, int]:
        """
        Count observations per cluster label, sorted by label.
        """

        sizes: dict[int, int] = {}
        for assignment in self.assignments:
            sizes[assignment.cluster] = sizes.get(assignment.cluster, 0) + 1
        return dict(sorted(sizes.items()))


class Dataset:
    """
    Ordered observations held as a dense feature matrix.

    ``features`` is mutated in place by preprocessing; ``labels`` is
    mutated only by the cluster assigner. Both stay index-aligned with
    ``identifiers``.

    Args:
        identifiers: Observation identifiers in input order.
        features:    Rows of feature values, one per identifier.
        n_features:  Expected feature count. When ``None`` the width of the
                     first row is used.

    Raises:
        DimensionMismatchError: If a row's width differs from the expected
                                feature count, or the identifier and row
                                counts differ.
    """

    def __init__(
        self,
        identifiers: Sequence[str],
        features: Sequence[Sequence[float]] | np.ndarray,
        n_features: int | None = None,
    ) -> None:
        rows = [list(row) for row in features]
        if len(identifiers) != len(rows):
            raise DimensionMismatchError(
                f"Got {len(identifiers)} identifiers for {len(rows)} feature rows."
            )

        width = n_features if n_features is not None else (len(rows[0]) if rows else 0)
        for identifier, row in zip(identifiers, rows):
            if len(row) != width:
                raise DimensionMismatchError(
                    f"Observation {identifier!r} has {len(row)} features, expected {width}."
                )

        self.identifiers: list[str] = list(identifiers)
        self.features: np.ndarray = np.array(rows, dtype=np.float64).reshape(len(rows), width)
        self.labels: np.ndarray = np.full(len(rows), UNASSIGNED, dtype=np.int64)

    @classmethod
    def from_observations(
        cls,
        observations: Sequence[Observation],
        n_features: int | None = None,
    ) -> "Dataset":
        return cls(
            identifiers=[observation.identifier for observation in observations],
            features=[observation.features for observation in observations],
            n_features=n_features,
        )

    def __len__(self) -> int:
        return len(self.identifiers)

    @property
    def n_features(self) -> int:
        return int(self.features.shape[1])

    @property
    def is_empty(self) -> bool:
        return len(self.identifiers) == 0

    def assignments(self, label_origin: int = 0) -> list[ClusterAssignment]:
        """
        Return ``(identifier, cluster)`` pairs in input order.

        Args:
            label_origin: Offset added to every 0-based label
                          (``1`` for human-facing output).
        """

        return [
            ClusterAssignment(identifier=identifier, cluster=int(label) + label_origin)
            for identifier, label in zip(self.identifiers, self.labels)
        ]
