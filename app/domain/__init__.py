"""
app/domain package marker.
"""

from app.domain.ingestion import IngestionSummary, RowValidationError

__all__ = [
    "IngestionSummary",
    "RowValidationError",
]
