"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from clustering.centroids import EmptyClusterPolicy
from clustering.engine import DEFAULT_MAX_ITERATIONS
from clustering.features import DegenerateRangePolicy
from clustering.initialization import InitializationStrategy

DEFAULT_N_FEATURES = 38
DEFAULT_OUTPUT_PATH = "clustering_results"


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_optional_int_env(name: str) -> int | None:
    """
    Read an optional integer; unset, blank, or malformed values give None.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return None
    try:
        return int(raw_value)
    except ValueError:
        return None


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_choice_env(name: str, default: str, allowed: set[str]) -> str:
    """
    Read a lower-cased string restricted to ``allowed``.

    Raises RuntimeError for values outside ``allowed`` so a typo does not
    silently switch clustering behaviour.
    """

    value = _get_str_env(name, default).lower()
    if value not in allowed:
        raise RuntimeError(
            f"{name} '{value}' is not valid. Allowed values: {sorted(allowed)}."
        )
    return value


@dataclass(frozen=True)
class ClusteringSettings:
    """
    Runtime settings for k-means clustering runs.
    """

    n_features: int = DEFAULT_N_FEATURES
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    initialization: InitializationStrategy = InitializationStrategy.RANDOMIZED
    init_offset: int = 0
    random_seed: int | None = None
    degenerate_range_policy: DegenerateRangePolicy = DegenerateRangePolicy.ZERO
    empty_cluster_policy: EmptyClusterPolicy = EmptyClusterPolicy.RETAIN
    label_origin: int = 1
    output_path: str = DEFAULT_OUTPUT_PATH
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_clustering_settings() -> ClusteringSettings:
    """
    Return cached clustering settings from environment variables.
    """

    return ClusteringSettings(
        n_features=max(1, _get_int_env("CLUSTERING_N_FEATURES", DEFAULT_N_FEATURES)),
        max_iterations=max(1, _get_int_env("CLUSTERING_MAX_ITERATIONS", DEFAULT_MAX_ITERATIONS)),
        initialization=InitializationStrategy(
            _get_choice_env(
                "CLUSTERING_INITIALIZATION",
                InitializationStrategy.RANDOMIZED.value,
                {strategy.value for strategy in InitializationStrategy},
            )
        ),
        init_offset=max(0, _get_int_env("CLUSTERING_INIT_OFFSET", 0)),
        random_seed=_get_optional_int_env("CLUSTERING_RANDOM_SEED"),
        degenerate_range_policy=DegenerateRangePolicy(
            _get_choice_env(
                "CLUSTERING_DEGENERATE_RANGE_POLICY",
                DegenerateRangePolicy.ZERO.value,
                {policy.value for policy in DegenerateRangePolicy},
            )
        ),
        empty_cluster_policy=EmptyClusterPolicy(
            _get_choice_env(
                "CLUSTERING_EMPTY_CLUSTER_POLICY",
                EmptyClusterPolicy.RETAIN.value,
                {policy.value for policy in EmptyClusterPolicy},
            )
        ),
        label_origin=_get_int_env("CLUSTERING_LABEL_ORIGIN", 1),
        output_path=_get_str_env("CLUSTERING_OUTPUT_PATH", DEFAULT_OUTPUT_PATH),
        log_level=_get_str_env("CLUSTERING_LOG_LEVEL", "INFO").upper(),
    )
