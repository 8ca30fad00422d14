"""
Run k-means clustering over a CSV data file from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from typing import Sequence

from app.config import get_clustering_settings
from app.logging_utils import configure_logging
from app.services.csv_ingestion_service import CSVObservationReader, CSVReadError
from app.services.results_writer import ClusteringResultWriter, ResultsWriteError
from clustering.errors import ClusteringError
from clustering.initialization import InitializationStrategy
from clustering.orchestrator import ClusteringOrchestrator

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cluster daily plant readings with k-means.")
    parser.add_argument("data_file", help="Headerless CSV: identifier followed by feature values.")
    parser.add_argument("k", type=int, help="Number of clusters.")
    parser.add_argument(
        "--max-iterations",
        dest="max_iterations",
        type=int,
        default=None,
        help="Cap on update/assign rounds.",
    )
    parser.add_argument(
        "--init",
        dest="initialization",
        choices=[strategy.value for strategy in InitializationStrategy],
        default=None,
        help="Centroid seeding strategy.",
    )
    parser.add_argument(
        "--seed",
        dest="random_seed",
        type=int,
        default=None,
        help="Seed for randomized initialization.",
    )
    parser.add_argument(
        "--offset",
        dest="init_offset",
        type=int,
        default=None,
        help="First seed position for deterministic initialization.",
    )
    parser.add_argument(
        "--output",
        dest="output_path",
        default=None,
        help="Results file path.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    settings = get_clustering_settings()
    overrides = {
        name: value
        for name, value in (
            ("max_iterations", args.max_iterations),
            ("initialization", args.initialization and InitializationStrategy(args.initialization)),
            ("random_seed", args.random_seed),
            ("init_offset", args.init_offset),
            ("output_path", args.output_path),
        )
        if value is not None
    }
    settings = replace(settings, **overrides)
    configure_logging(settings.log_level)

    try:
        observations, summary = CSVObservationReader(n_features=settings.n_features).read(
            args.data_file
        )
        logger.info("Found %s data lines and successfully parsed them.", summary.rows_processed)

        result = ClusteringOrchestrator(settings).run_clustering(observations, args.k)
        logger.info("Total number of iterations == %s", result.iterations)

        ClusteringResultWriter().write(settings.output_path, result)
    except (CSVReadError, ResultsWriteError, ClusteringError) as exc:
        logger.error("%s", exc)
        return 1

    payload = {
        "data_file": args.data_file,
        "output_path": settings.output_path,
        "rows_processed": summary.rows_processed,
        "rows_failed": summary.rows_failed,
        "missing_values": summary.missing_values,
        "n_clusters": args.k,
        "state": result.state.value,
        "iterations": result.iterations,
        "cluster_sizes": result.cluster_sizes(),
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
