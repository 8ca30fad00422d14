"""
Feature preprocessing module for clustering.

Fills missing values and min-max normalizes the feature matrix of a
dataset in place. No clustering or I/O here.
"""

import logging
from enum import Enum

import numpy as np
from sklearn.impute import SimpleImputer
from sklearn.preprocessing import MinMaxScaler

from app.logging_utils import log_event
from clustering.errors import MissingValuesError
from clustering.types import Dataset

logger = logging.getLogger(__name__)


class DegenerateRangePolicy(str, Enum):
    """
    What normalization does with a feature whose min equals its max.
    """

    ZERO = "zero"
    PRESERVE = "preserve"


class FeaturePreprocessor:
    """
    Imputes and normalizes dataset features column-wise.

    Responsibilities:
        - Replace missing values with the per-feature mean.
        - Scale every feature to [0, 1] with min-max normalization.

    Not responsible for:
        - Parsing or validating raw records.
        - Cluster assignment or centroid math.

    Args:
        degenerate_range_policy: Handling of constant features during
                                 normalization. ``ZERO`` maps every value
                                 to 0.0; ``PRESERVE`` leaves the feature
                                 unscaled.
    """

    def __init__(
        self,
        degenerate_range_policy: DegenerateRangePolicy = DegenerateRangePolicy.ZERO,
    ) -> None:
        self._degenerate_range_policy = DegenerateRangePolicy(degenerate_range_policy)

    def prepare(self, dataset: Dataset) -> None:
        """
        Impute then normalize ``dataset`` in place.

        Normalization bounds must be computed over imputed values, so the
        order of the two steps is fixed here.
        """
        self.impute_missing(dataset)
        self.normalize(dataset)

    def impute_missing(self, dataset: Dataset) -> None:
        """
        Overwrite every missing value with its feature's mean.

        The mean is taken over the non-missing values of that feature only.
        A feature that is missing in every observation is filled with 0.0.
        An empty dataset is left untouched.

        Args:
            dataset: Dataset whose ``features`` may contain ``NaN``.
        """
        if dataset.is_empty:
            return

        missing = int(np.isnan(dataset.features).sum())
        if missing == 0:
            return

        imputer = SimpleImputer(strategy="mean", keep_empty_features=True)
        dataset.features[:] = imputer.fit_transform(dataset.features)

        log_event(
            logger,
            logging.DEBUG,
            "features_imputed",
            missing_values=missing,
            observations=len(dataset),
        )

    def normalize(self, dataset: Dataset) -> None:
        """
        Min-max scale every feature of ``dataset`` in place.

        Each value ``v`` becomes ``(v - min) / (max - min)`` for its feature.
        Features with ``max == min`` follow the configured
        :class:`DegenerateRangePolicy` and are logged as warnings.

        Args:
            dataset: Imputed dataset.

        Raises:
            MissingValuesError: If ``dataset`` still contains missing values.
        """
        if dataset.is_empty:
            return

        original = dataset.features.copy()
        if np.isnan(original).any():
            raise MissingValuesError(
                "Dataset contains missing values; impute before normalizing."
            )

        scaler = MinMaxScaler().fit(original)
        scaled = np.zeros_like(original)

        # MinMaxScaler treats ranges below 10 * eps as constant; only an
        # exact zero range is degenerate here.
        spread = np.flatnonzero(scaler.data_range_ > 0)
        scaled[:, spread] = np.clip(
            (original[:, spread] - scaler.data_min_[spread]) / scaler.data_range_[spread],
            0.0,
            1.0,
        )

        degenerate = np.flatnonzero(scaler.data_range_ == 0)
        if degenerate.size:
            if self._degenerate_range_policy is DegenerateRangePolicy.PRESERVE:
                scaled[:, degenerate] = original[:, degenerate]
            else:
                scaled[:, degenerate] = 0.0
            log_event(
                logger,
                logging.WARNING,
                "degenerate_feature_range",
                features=degenerate.tolist(),
                policy=self._degenerate_range_policy.value,
            )

        dataset.features[:] = scaled
