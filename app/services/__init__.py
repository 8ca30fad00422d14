"""
app/services package marker.
"""

from app.services.csv_ingestion_service import CSVObservationReader, CSVReadError
from app.services.results_writer import ClusteringResultWriter, ResultsWriteError

__all__ = [
    "CSVObservationReader",
    "CSVReadError",
    "ClusteringResultWriter",
    "ResultsWriteError",
]
