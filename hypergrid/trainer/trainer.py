"""
Histogram Gradient Boosting Trainer.

Reference trainer behind the search loop. It fits scikit-learn's
``HistGradientBoostingRegressor`` / ``HistGradientBoostingClassifier`` on
pre-quantized bin indices and runs in a metrics-only mode: no model is
returned, only the per-iteration metric history on the train and test
parts, computed from staged predictions.

Key Features:
    - Option Mapping: TrainerOptions are translated to estimator arguments
      (iterations → max_iter, depth → max_depth, l2_leaf_reg → l2_regularization)
    - Label Encoding: Class labels are mapped to contiguous indices so every
      probability matrix has one column per class
    - Thread Control: ``thread_count`` caps the OpenMP pool via threadpoolctl
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from sklearn.ensemble import HistGradientBoostingClassifier, HistGradientBoostingRegressor
from threadpoolctl import threadpool_limits

from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME
from ..data_handler import TabularDataset
from ..exceptions import InvalidParameterError
from .metrics import Metric, MetricBestValue, get_metric
from .options import TrainerOptions

logger = logging.getLogger(LOGGER_NAME)

_LOSS_TO_SKLEARN = {
    "RMSE": "squared_error",
    "MAE": "absolute_error",
    "Logloss": "log_loss",
    "MultiClass": "log_loss",
}

# Bin indices never exceed 255
_MAX_BINS = 255


# RESULT CONTAINERS
@dataclass(frozen=True)
class TrainingHistory:
    """
    Per-iteration metric curves of one metrics-only training run.

    Attributes:
        metric_names: Search metric first, then the remaining metrics.
        train: metric name → value after each iteration on the train part.
        test: metric name → value after each iteration on the test part.
    """

    metric_names: tuple[str, ...]
    train: dict[str, list[float]] = field(default_factory=dict)
    test: dict[str, list[float]] = field(default_factory=dict)

    @property
    def search_metric(self) -> str:
        return self.metric_names[0]

    def best_test(self, name: str | None = None) -> float:
        """Best test value of a metric over all iterations (last value if directionless or all NaN)."""
        return self.test[name or self.search_metric][self._best_position(name)]

    def best_iteration(self, name: str | None = None) -> int:
        """Zero-based iteration at which the test value of a metric is best."""
        return self._best_position(name)

    def _best_position(self, name: str | None) -> int:
        name = name or self.search_metric
        if name not in self.test or not self.test[name]:
            raise KeyError(f"No test history for metric '{name}'")
        curve = np.asarray(self.test[name], dtype=np.float64)
        if np.isnan(curve).all():
            return len(curve) - 1
        best_value = get_metric(name).best_value
        if best_value == MetricBestValue.MIN:
            return int(np.nanargmin(curve))
        if best_value == MetricBestValue.MAX:
            return int(np.nanargmax(curve))
        return len(curve) - 1


# TRAINING LOGIC
class Trainer:
    """
    Metrics-only gradient boosting trainer.

    Example:
        >>> history = Trainer().fit_eval(options, train_part, test_part)
        >>> history.best_test()
        0.4213
    """

    def fit_eval(
        self,
        options: TrainerOptions,
        train: TabularDataset,
        test: TabularDataset | None = None,
    ) -> TrainingHistory:
        """
        Train on ``train`` and record metric curves for both parts.

        Args:
            options: Validated trainer options.
            train: Quantized train part.
            test: Quantized test part (None records train curves only).

        Returns:
            TrainingHistory with one value per boosting iteration.

        Raises:
            InvalidParameterError: If the loss or a metric does not match the
                dataset task.
        """
        metrics = self._resolve_metrics(options, train)
        estimator = self._build_estimator(options)

        if options.is_classification:
            classes = np.unique(
                train.target if test is None else np.concatenate([train.target, test.target])
            )
            y_train = np.searchsorted(classes, train.target)
            y_test = None if test is None else np.searchsorted(classes, test.target)
        else:
            classes = None
            y_train = train.target.astype(np.float64)
            y_test = None if test is None else test.target.astype(np.float64)

        with threadpool_limits(limits=None if options.thread_count == -1 else options.thread_count):
            estimator.fit(train.features, y_train)
            train_curves = self._staged_metrics(estimator, train.features, y_train, metrics, classes)
            test_curves = (
                {}
                if test is None
                else self._staged_metrics(estimator, test.features, y_test, metrics, classes)
            )

        history = TrainingHistory(
            metric_names=tuple(m.name for m in metrics), train=train_curves, test=test_curves
        )
        if options.verbose:
            self._log_history(history)
        return history

    @staticmethod
    def _resolve_metrics(options: TrainerOptions, data: TabularDataset) -> list[Metric]:
        task = "classification" if options.is_classification else "regression"
        if task != data.task:
            raise InvalidParameterError(
                f"loss_function '{options.loss_function}' is a {task} loss, "
                f"but the dataset task is {data.task}"
            )
        metrics = [get_metric(name) for name in options.metric_names]
        mismatched = [m.name for m in metrics if m.task != task]
        if mismatched:
            raise InvalidParameterError(f"Metrics {mismatched} do not apply to {task} data")
        return metrics

    @staticmethod
    def _build_estimator(
        options: TrainerOptions,
    ) -> HistGradientBoostingRegressor | HistGradientBoostingClassifier:
        kwargs = dict(
            loss=_LOSS_TO_SKLEARN[options.loss_function],
            learning_rate=options.learning_rate,
            max_iter=options.iterations,
            max_depth=options.depth,
            max_leaf_nodes=None,
            l2_regularization=options.l2_leaf_reg,
            max_bins=_MAX_BINS,
            early_stopping=False,
            random_state=options.random_seed,
        )
        if options.is_classification:
            return HistGradientBoostingClassifier(**kwargs)
        return HistGradientBoostingRegressor(**kwargs)

    @staticmethod
    def _staged_metrics(
        estimator: HistGradientBoostingRegressor | HistGradientBoostingClassifier,
        features: np.ndarray,
        y_true: np.ndarray,
        metrics: list[Metric],
        classes: np.ndarray | None,
    ) -> dict[str, list[float]]:
        curves: dict[str, list[float]] = {m.name: [] for m in metrics}

        if classes is None:
            stages = estimator.staged_predict(features)
        else:
            stages = (
                _expand_proba(proba, estimator.classes_, len(classes))
                for proba in estimator.staged_predict_proba(features)
            )

        for prediction in stages:
            for metric in metrics:
                curves[metric.name].append(metric(y_true, prediction))
        return curves

    @staticmethod
    def _log_history(history: TrainingHistory) -> None:
        name = history.search_metric
        for i, train_value in enumerate(history.train[name]):
            line = f"{LogStyle.INDENT}{i:>5}: learn {name}={train_value:.6f}"
            if history.test:
                line += f"  test {name}={history.test[name][i]:.6f}"
            logger.info(line)


# HELPER FUNCTIONS
def _expand_proba(proba: np.ndarray, fitted: np.ndarray, n_classes: int) -> np.ndarray:
    """Place fitted-class probability columns into a full ``n_classes`` matrix."""
    if proba.shape[1] == n_classes:
        return proba
    full = np.zeros((proba.shape[0], n_classes), dtype=proba.dtype)
    full[:, fitted.astype(np.int64)] = proba
    return full
