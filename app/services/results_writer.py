"""
app/services/results_writer.py

Writes clustering assignments as ``identifier,cluster`` lines.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from clustering.types import ClusteringResult

logger = logging.getLogger(__name__)


class ResultsWriteError(RuntimeError):
    """
    Raised when the results file cannot be written.
    """


class ClusteringResultWriter:
    """
    Persists one run's assignments in input order.
    """

    def write(self, path: str | Path, result: ClusteringResult) -> int:
        """
        Write ``result`` to ``path``, replacing any existing file.

        Returns:
            Number of lines written.

        Raises:
            ResultsWriteError: If the file cannot be opened or written.
        """

        try:
            with open(path, "w", encoding="utf-8", newline="") as handle:
                writer = csv.writer(handle, lineterminator="\n")
                for assignment in result.assignments:
                    writer.writerow([assignment.identifier, assignment.cluster])
        except OSError as exc:
            raise ResultsWriteError(f"Failed to open output file {str(path)!r}: {exc}") from exc

        logger.info("Clustering results written path=%s rows=%s", path, len(result.assignments))
        return len(result.assignments)
