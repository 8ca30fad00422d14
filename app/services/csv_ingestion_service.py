"""
app/services/csv_ingestion_service.py

Reads a headerless ``identifier,feature_1,...,feature_F`` CSV file into
observations for the clustering pipeline.

Blank lines are ignored. Lines with the wrong number of values are logged
at WARNING level and skipped; the run continues with the remaining rows.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from app.domain.ingestion import IngestionSummary, RowValidationError
from app.validators.csv_validator import CSVRowValidator
from clustering.types import Observation

logger = logging.getLogger(__name__)

_DEFAULT_MAX_VALIDATION_ERRORS = 500


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CSVReadError(RuntimeError):
    """
    Raised when the input file cannot be opened, decoded, or parsed as CSV.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CSVObservationReader:
    """
    Coordinates CSV parsing and row validation.

    Args:
        n_features:            Feature columns expected after the identifier.
        max_validation_errors: Cap on errors kept in the summary; every
                               error is still logged.
        log_validation_errors: Emit one WARNING per rejected row.
        validator:             Optional row validator override.
    """

    def __init__(
        self,
        *,
        n_features: int,
        max_validation_errors: int = _DEFAULT_MAX_VALIDATION_ERRORS,
        log_validation_errors: bool = True,
        validator: CSVRowValidator | None = None,
    ) -> None:
        self._max_validation_errors = max(1, max_validation_errors)
        self._log_validation_errors = log_validation_errors
        self._validator = validator or CSVRowValidator(n_features=n_features)

    def read(self, path: str | Path) -> tuple[list[Observation], IngestionSummary]:
        """
        Parse every row of ``path``.

        Returns:
            The accepted observations in file order and an
            :class:`IngestionSummary`.

        Raises:
            CSVReadError: If the file cannot be read.
        """
        observations: list[Observation] = []
        rows_failed = 0
        missing_values = 0
        captured_errors: list[RowValidationError] = []

        try:
            with open(path, encoding="utf-8-sig", newline="") as handle:
                reader = csv.reader(handle)
                for row_number, row in enumerate(reader, start=1):
                    if not row or self._validator.is_completely_empty_row(row):
                        continue

                    observation, row_errors = self._validator.validate_row(
                        row=row,
                        row_number=row_number,
                    )
                    if row_errors or observation is None:
                        rows_failed += 1
                        for error in row_errors:
                            self._record_error(captured_errors, error)
                        continue

                    missing_values += observation.missing_count
                    observations.append(observation)
        except OSError as exc:
            raise CSVReadError(f"Failed to open data file {str(path)!r}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise CSVReadError("CSV must be UTF-8 encoded.") from exc
        except csv.Error as exc:
            raise CSVReadError(f"Invalid CSV format: {exc}") from exc

        summary = IngestionSummary(
            rows_processed=len(observations),
            rows_failed=rows_failed,
            missing_values=missing_values,
            validation_errors=captured_errors,
        )
        logger.info(
            "CSV ingestion finished path=%s rows_processed=%s rows_failed=%s missing_values=%s",
            path,
            summary.rows_processed,
            summary.rows_failed,
            summary.missing_values,
        )
        return observations, summary

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _record_error(
        self,
        captured_errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        if self._log_validation_errors:
            logger.warning(
                "Skipping CSV row=%s column=%s message=%s value=%r",
                error.row_number,
                error.column,
                error.message,
                error.value,
            )

        if len(captured_errors) < self._max_validation_errors:
            captured_errors.append(error)
