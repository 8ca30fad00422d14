"""
app/validators/csv_validator.py

Row-level validation and type parsing for observation CSV ingestion.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from pydantic import ValidationError

from app.domain.ingestion import RowValidationError
from app.schemas.observation_record import ObservationRecordSchema
from clustering.types import Observation


class CSVRowValidator:
    """
    Validates and parses one ``identifier,feature_1,...,feature_F`` row.

    Feature cells that do not parse as a number (``?``, blanks, text) are
    kept as missing values rather than rejecting the row.

    Args:
        n_features: Number of feature columns expected after the identifier.
    """

    def __init__(self, n_features: int) -> None:
        self._n_features = n_features

    @property
    def expected_columns(self) -> int:
        return self._n_features + 1

    def is_completely_empty_row(self, row: Sequence[Any]) -> bool:
        """
        Return True when all values in the row are empty or whitespace.
        """

        return all(self._is_blank(value) for value in row)

    def validate_row(
        self,
        *,
        row: Sequence[str],
        row_number: int,
    ) -> tuple[Observation | None, list[RowValidationError]]:
        """
        Validate and parse one raw CSV row.
        """

        if len(row) != self.expected_columns:
            return None, [
                RowValidationError(
                    row_number=row_number,
                    message=(
                        f"Found {len(row)} comma separated values, "
                        f"expected {self.expected_columns}."
                    ),
                )
            ]

        features = [self._parse_feature(value) for value in row[1:]]

        try:
            record = ObservationRecordSchema(identifier=row[0], features=features)
        except ValidationError as exc:
            return None, [
                RowValidationError(
                    row_number=row_number,
                    column=self._column_for(error.get("loc", ())),
                    message=error.get("msg", "Invalid value."),
                    value=self._stringify_value(error.get("input")),
                )
                for error in exc.errors()
            ]

        return record.to_observation(), []

    @staticmethod
    def _parse_feature(value: Any) -> float:
        if value is None:
            return math.nan
        try:
            parsed = float(str(value).strip())
        except ValueError:
            return math.nan
        return parsed if math.isfinite(parsed) else math.nan

    @staticmethod
    def _column_for(location: tuple[Any, ...]) -> int | None:
        if not location:
            return None
        if location[0] == "identifier":
            return 0
        if location[0] == "features" and len(location) > 1 and isinstance(location[1], int):
            return location[1] + 1
        return None

    @staticmethod
    def _is_blank(value: Any) -> bool:
        return value is None or (isinstance(value, str) and not value.strip())

    @staticmethod
    def _stringify_value(value: Any) -> str | None:
        if value is None:
            return None
        text = str(value)
        return text if len(text) <= 200 else f"{text[:197]}..."
