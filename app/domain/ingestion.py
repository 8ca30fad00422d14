"""
app/domain/ingestion.py

Domain models used by the CSV ingestion flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RowValidationError:
    """
    One CSV row validation error detail.
    """

    row_number: int
    message: str
    column: int | None = None
    value: str | None = None


@dataclass(frozen=True)
class IngestionSummary:
    """
    End-of-run ingestion summary.
    """

    rows_processed: int
    rows_failed: int
    missing_values: int = 0
    validation_errors: list[RowValidationError] = field(default_factory=list)
