"""
tests/test_engine.py

Pytest unit tests for KMeansDriver.

Coverage
--------
- Two well separated groups converge with the expected membership
- k equal to dataset size converges without further changes
- Iteration cap is a soft terminal state
- Configuration and empty dataset errors raised before any work
"""

from __future__ import annotations

import numpy as np
import pytest

from clustering.errors import EmptyDatasetError, InvalidConfigurationError
from clustering.engine import KMeansDriver, validate_run_configuration
from clustering.initialization import DeterministicInitializer, RandomizedInitializer
from clustering.types import Dataset, RunState


def _groups(result) -> dict[int, set[str]]:
    groups: dict[int, set[str]] = {}
    for assignment in result.assignments:
        groups.setdefault(assignment.cluster, set()).add(assignment.identifier)
    return groups


@pytest.fixture()
def two_groups() -> Dataset:
    return Dataset(
        ["A", "B", "C", "D"],
        [[0.0, 0.0], [0.0, 1.0], [10.0, 10.0], [10.0, 11.0]],
    )


@pytest.fixture()
def line() -> Dataset:
    return Dataset(["p0", "p1", "p2", "p3"], [[0.0], [1.0], [2.0], [10.0]])


class TestConvergence:
    def test_separated_groups_cluster_together(self, two_groups: Dataset) -> None:
        driver = KMeansDriver(DeterministicInitializer(positions=[0, 2]))

        result = driver.run(two_groups, 2)

        assert result.state is RunState.CONVERGED
        assert result.converged
        assert result.iterations <= 2
        assert sorted(map(sorted, _groups(result).values())) == [["A", "B"], ["C", "D"]]

    def test_labels_are_zero_based(self, two_groups: Dataset) -> None:
        result = KMeansDriver(DeterministicInitializer(positions=[0, 2])).run(two_groups, 2)

        assert [a.cluster for a in result.assignments] == [0, 0, 1, 1]
        np.testing.assert_allclose(result.centroids, [[0.0, 0.5], [10.0, 10.5]])

    def test_k_equal_to_size_gives_singletons_without_iterations(
        self, two_groups: Dataset
    ) -> None:
        result = KMeansDriver(DeterministicInitializer()).run(two_groups, 4)

        assert result.state is RunState.CONVERGED
        assert result.iterations == 0
        assert [a.cluster for a in result.assignments] == [0, 1, 2, 3]

    def test_iteration_count_excludes_confirming_round(self, line: Dataset) -> None:
        result = KMeansDriver(DeterministicInitializer()).run(line, 2)

        assert result.state is RunState.CONVERGED
        assert result.iterations == 1
        assert [a.cluster for a in result.assignments] == [0, 0, 0, 1]

    def test_output_keeps_input_order(self, two_groups: Dataset) -> None:
        result = KMeansDriver(RandomizedInitializer(np.random.default_rng(1))).run(two_groups, 2)

        assert [a.identifier for a in result.assignments] == ["A", "B", "C", "D"]


class TestIterationCap:
    def test_cap_reached_returns_last_assignment(self, line: Dataset) -> None:
        driver = KMeansDriver(DeterministicInitializer(), max_iterations=1)

        result = driver.run(line, 2)

        assert result.state is RunState.ITERATION_CAP_REACHED
        assert driver.state is RunState.ITERATION_CAP_REACHED
        assert not result.converged
        assert result.iterations == 1
        assert [a.cluster for a in result.assignments] == [0, 0, 0, 1]

    @pytest.mark.parametrize("seed", range(5))
    def test_always_terminates_within_cap(self, seed: int) -> None:
        rng = np.random.default_rng(seed)
        rows = rng.random((60, 3)).tolist()
        dataset = Dataset([f"day-{i}" for i in range(60)], rows)

        result = KMeansDriver(RandomizedInitializer(rng), max_iterations=3).run(dataset, 6)

        assert result.iterations <= 3
        assert all(0 <= a.cluster < 6 for a in result.assignments)


class TestValidation:
    def test_empty_dataset(self) -> None:
        with pytest.raises(EmptyDatasetError):
            KMeansDriver(DeterministicInitializer()).run(Dataset([], [], n_features=2), 1)

    @pytest.mark.parametrize("n_clusters", [0, -2, 5])
    def test_cluster_count_out_of_range(self, two_groups: Dataset, n_clusters: int) -> None:
        with pytest.raises(InvalidConfigurationError):
            KMeansDriver(DeterministicInitializer()).run(two_groups, n_clusters)

    def test_iteration_cap_below_one(self, two_groups: Dataset) -> None:
        with pytest.raises(InvalidConfigurationError):
            KMeansDriver(DeterministicInitializer(), max_iterations=0).run(two_groups, 2)

    def test_no_labels_written_on_invalid_configuration(self, two_groups: Dataset) -> None:
        with pytest.raises(InvalidConfigurationError):
            KMeansDriver(DeterministicInitializer()).run(two_groups, 9)

        assert (two_groups.labels == -1).all()


class TestClusterCountTypes:
    def test_numpy_integer_is_accepted(self, two_groups: Dataset) -> None:
        result = KMeansDriver(DeterministicInitializer(positions=[0, 2])).run(
            two_groups, np.int64(2)
        )

        assert result.converged
        assert {a.cluster for a in result.assignments} == {0, 1}

    def test_bool_is_rejected(self, two_groups: Dataset) -> None:
        with pytest.raises(InvalidConfigurationError):
            KMeansDriver(DeterministicInitializer()).run(two_groups, True)


@pytest.mark.parametrize(
    "n_samples, n_clusters, max_iterations",
    [
        (4, 0, 10),
        (4, 5, 10),
        (4, 2, 0),
        (4, 2.0, 10),
    ],
)
def test_validate_run_configuration_rejects(
    n_samples: int, n_clusters: int, max_iterations: int
) -> None:
    with pytest.raises(InvalidConfigurationError):
        validate_run_configuration(n_samples, n_clusters, max_iterations)


def test_validate_run_configuration_returns_plain_int() -> None:
    value = validate_run_configuration(4, np.int32(3), 10)

    assert value == 3
    assert type(value) is int
