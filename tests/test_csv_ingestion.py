"""
tests/test_csv_ingestion.py

Pytest tests for CSV observation ingestion and results writing.
"""

from __future__ import annotations

import math
from pathlib import Path

import numpy as np
import pytest

from app.services.csv_ingestion_service import CSVObservationReader, CSVReadError
from app.services.results_writer import ClusteringResultWriter, ResultsWriteError
from app.validators.csv_validator import CSVRowValidator
from clustering.types import ClusterAssignment, ClusteringResult, RunState


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "water-treatment.data"
    path.write_text(
        "D-1/3/90,1.0,2.0\n"
        "\n"
        "D-2/3/90,?,4.0\n"
        "D-4/3/90,1.0\n"
        "D-5/3/90,3.0,6.0\n",
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# Row validator
# ---------------------------------------------------------------------------


class TestCSVRowValidator:
    def test_unparseable_feature_becomes_missing(self) -> None:
        observation, errors = CSVRowValidator(n_features=3).validate_row(
            row=["D-1", "1.5", "?", ""], row_number=1
        )

        assert errors == []
        assert observation is not None
        assert observation.identifier == "D-1"
        assert observation.features[0] == 1.5
        assert math.isnan(observation.features[1])
        assert math.isnan(observation.features[2])
        assert observation.missing_count == 2

    def test_wrong_column_count_is_rejected(self) -> None:
        observation, errors = CSVRowValidator(n_features=3).validate_row(
            row=["D-1", "1.0"], row_number=7
        )

        assert observation is None
        assert errors[0].row_number == 7
        assert "expected 4" in errors[0].message

    def test_blank_identifier_is_rejected(self) -> None:
        observation, errors = CSVRowValidator(n_features=1).validate_row(
            row=["  ", "1.0"], row_number=2
        )

        assert observation is None
        assert errors[0].column == 0

    def test_identifier_is_stripped(self) -> None:
        observation, _ = CSVRowValidator(n_features=1).validate_row(
            row=[" D-9 ", "2"], row_number=1
        )

        assert observation is not None
        assert observation.identifier == "D-9"

    def test_empty_row_detection(self) -> None:
        validator = CSVRowValidator(n_features=2)

        assert validator.is_completely_empty_row(["", "  ", ""])
        assert not validator.is_completely_empty_row(["D-1", "", ""])


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------


class TestCSVObservationReader:
    def test_reads_valid_rows_and_skips_malformed(self, data_file: Path) -> None:
        observations, summary = CSVObservationReader(n_features=2).read(data_file)

        assert [o.identifier for o in observations] == ["D-1/3/90", "D-2/3/90", "D-5/3/90"]
        assert summary.rows_processed == 3
        assert summary.rows_failed == 1
        assert summary.missing_values == 1
        assert summary.validation_errors[0].row_number == 4
        assert math.isnan(observations[1].features[0])

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CSVReadError):
            CSVObservationReader(n_features=2).read(tmp_path / "absent.data")

    def test_error_capture_is_capped(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.data"
        path.write_text("a,1\nb,2\nc,3\n", encoding="utf-8")

        observations, summary = CSVObservationReader(
            n_features=2, max_validation_errors=2, log_validation_errors=False
        ).read(path)

        assert observations == []
        assert summary.rows_failed == 3
        assert len(summary.validation_errors) == 2


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------


def _result() -> ClusteringResult:
    return ClusteringResult(
        assignments=[
            ClusterAssignment("D-1/3/90", 1),
            ClusterAssignment("D-2/3/90", 2),
        ],
        iterations=3,
        state=RunState.CONVERGED,
        centroids=np.zeros((2, 2)),
    )


def test_writer_emits_identifier_and_label_lines(tmp_path: Path) -> None:
    path = tmp_path / "clustering_results"

    written = ClusteringResultWriter().write(path, _result())

    assert written == 2
    assert path.read_text(encoding="utf-8") == "D-1/3/90,1\nD-2/3/90,2\n"


def test_writer_reports_unwritable_path(tmp_path: Path) -> None:
    with pytest.raises(ResultsWriteError):
        ClusteringResultWriter().write(tmp_path / "missing-dir" / "out", _result())
