"""
K-Fold Cross-Validation.

Runs one metrics-only training per fold and aggregates the per-iteration
curves into fold means and standard deviations, one ``CVResult`` per
metric. The search metric always comes first, so ``results[0]`` drives
model selection.

Fold assignment follows scikit-learn splitters:
    - ``GroupKFold`` when the dataset carries group ids
    - ``StratifiedKFold`` for classification (unless disabled)
    - ``KFold`` otherwise

Splitters never shuffle: the search loop shuffles the data by group once,
with the partition seed, before any fold is built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from sklearn.model_selection import GroupKFold, KFold, StratifiedKFold

from ..core.paths import LOGGER_NAME
from ..data_handler import TabularDataset
from ..exceptions import HyperGridDatasetError
from .options import TrainerOptions
from .trainer import Trainer, TrainingHistory

if TYPE_CHECKING:  # pragma: no cover
    from ..core.config import CrossValidationConfig

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class CVResult:
    """
    Fold-aggregated curves of one metric.

    Attributes:
        metric_name: Metric identifier.
        iterations: Iteration indices (0-based).
        average_train: Mean train value per iteration.
        std_train: Standard deviation of the train value per iteration.
        average_test: Mean test value per iteration.
        std_test: Standard deviation of the test value per iteration.
    """

    metric_name: str
    iterations: tuple[int, ...]
    average_train: tuple[float, ...]
    std_train: tuple[float, ...]
    average_test: tuple[float, ...]
    std_test: tuple[float, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "metric_name": self.metric_name,
            "iterations": list(self.iterations),
            "average_train": list(self.average_train),
            "std_train": list(self.std_train),
            "average_test": list(self.average_test),
            "std_test": list(self.std_test),
        }


class CrossValidator:
    """
    Fold builder and aggregator around a Trainer.

    Args:
        trainer: Trainer used for every fold (injectable for tests).
    """

    def __init__(self, trainer: Trainer | None = None) -> None:
        self.trainer = trainer or Trainer()

    def run(
        self,
        options: TrainerOptions,
        data: TabularDataset,
        cv_config: "CrossValidationConfig",
    ) -> list[CVResult]:
        """
        Cross-validate one option set.

        Args:
            options: Validated trainer options.
            data: Quantized dataset.
            cv_config: Fold count and stratification settings.

        Returns:
            One CVResult per metric, search metric first.
        """
        histories = [
            self.trainer.fit_eval(options, data.subset(train_idx), data.subset(test_idx))
            for train_idx, test_idx in self.split(data, cv_config)
        ]
        logger.debug(f"Cross-validated {len(histories)} folds")
        return aggregate_histories(histories)

    @staticmethod
    def split(
        data: TabularDataset, cv_config: "CrossValidationConfig"
    ) -> list[tuple[np.ndarray, np.ndarray]]:
        """
        Build (train, test) index pairs for every fold.

        Raises:
            HyperGridDatasetError: If there are fewer groups than folds.
        """
        n_folds = cv_config.fold_count
        stratified = cv_config.stratified
        if stratified is None:
            stratified = data.is_classification and data.group_id is None

        if data.group_id is not None:
            n_groups = len(np.unique(data.group_id))
            if n_groups < n_folds:
                raise HyperGridDatasetError(
                    f"Cannot build {n_folds} folds from {n_groups} groups"
                )
            folds = GroupKFold(n_splits=n_folds).split(data.features, groups=data.group_id)
        elif stratified:
            folds = StratifiedKFold(n_splits=n_folds).split(data.features, data.target)
        else:
            if data.n_objects < n_folds:
                raise HyperGridDatasetError(
                    f"Cannot build {n_folds} folds from {data.n_objects} objects"
                )
            folds = KFold(n_splits=n_folds).split(data.features)
        return list(folds)


# HELPER FUNCTIONS
def aggregate_histories(histories: list[TrainingHistory]) -> list[CVResult]:
    """Average fold curves per metric; std uses ddof=1 and is 0 for a single fold."""
    results: list[CVResult] = []
    ddof = 1 if len(histories) > 1 else 0
    for name in histories[0].metric_names:
        train = np.array([h.train[name] for h in histories], dtype=np.float64)
        test = np.array([h.test[name] for h in histories], dtype=np.float64)
        results.append(
            CVResult(
                metric_name=name,
                iterations=tuple(range(train.shape[1])),
                average_train=tuple(train.mean(axis=0).tolist()),
                std_train=tuple(train.std(axis=0, ddof=ddof).tolist()),
                average_test=tuple(test.mean(axis=0).tolist()),
                std_test=tuple(test.std(axis=0, ddof=ddof).tolist()),
            )
        )
    return results
