"""
Metric Registry.

Maps metric names (``RMSE``, ``Logloss``, ``AUC``, ...) to scoring callables
plus the direction in which the metric improves. The search loop reads only
the direction; the trainer and cross-validator call the scoring function.

Scoring functions receive the true targets and the raw model output:
predicted values for regression, a class-probability matrix (one column per
label index) for classification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    f1_score,
    log_loss,
    mean_absolute_error,
    mean_squared_error,
    r2_score,
    roc_auc_score,
)

from ..core.paths import LOGGER_NAME
from ..exceptions import InvalidParameterError

logger = logging.getLogger(LOGGER_NAME)

MetricFn = Callable[[np.ndarray, np.ndarray], float]


class MetricBestValue(str, Enum):
    """Direction in which a metric value improves."""

    MIN = "min"
    MAX = "max"
    FIXED_VALUE = "fixed_value"
    UNDEFINED = "undefined"


@dataclass(frozen=True)
class Metric:
    """
    Named scoring function with its improvement direction.

    Attributes:
        name: Registry key.
        best_value: MIN/MAX for searchable metrics; FIXED_VALUE or UNDEFINED
            for metrics that cannot drive a search.
        fn: ``fn(y_true, raw_prediction) -> float``.
        task: "regression" or "classification".
    """

    name: str
    best_value: MetricBestValue
    fn: MetricFn
    task: str

    def __call__(self, y_true: np.ndarray, prediction: np.ndarray) -> float:
        return float(self.fn(y_true, prediction))


# SCORING FUNCTIONS
def _rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def _logloss(y_true: np.ndarray, proba: np.ndarray) -> float:
    return float(log_loss(y_true, proba, labels=np.arange(proba.shape[1])))


def _accuracy(y_true: np.ndarray, proba: np.ndarray) -> float:
    return float(accuracy_score(y_true, proba.argmax(axis=1)))


def _f1(y_true: np.ndarray, proba: np.ndarray) -> float:
    return float(f1_score(y_true, proba.argmax(axis=1), average="macro"))


def _auc(y_true: np.ndarray, proba: np.ndarray) -> float:
    try:
        if proba.shape[1] <= 2:
            auc = roc_auc_score(y_true, proba[:, -1])
        else:
            auc = roc_auc_score(
                y_true, proba, multi_class="ovr", average="macro", labels=np.arange(proba.shape[1])
            )
    except ValueError as e:
        logger.warning(f"ROC-AUC calculation failed: {e}. Defaulting to 0.0")
        return 0.0
    return 0.0 if np.isnan(auc) else float(auc)


_REGISTRY: dict[str, Metric] = {
    m.name: m
    for m in (
        Metric("RMSE", MetricBestValue.MIN, _rmse, "regression"),
        Metric("MAE", MetricBestValue.MIN, mean_absolute_error, "regression"),
        Metric("R2", MetricBestValue.MAX, r2_score, "regression"),
        Metric("Logloss", MetricBestValue.MIN, _logloss, "classification"),
        Metric("MultiClass", MetricBestValue.MIN, _logloss, "classification"),
        Metric("Accuracy", MetricBestValue.MAX, _accuracy, "classification"),
        Metric("AUC", MetricBestValue.MAX, _auc, "classification"),
        Metric("F1", MetricBestValue.MAX, _f1, "classification"),
    )
}


# REGISTRY API
def get_metric(name: str) -> Metric:
    """
    Look up a metric by name.

    Raises:
        InvalidParameterError: If the metric is not registered.
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        raise InvalidParameterError(
            f"Unknown metric '{name}'. Available: {sorted(_REGISTRY)}"
        ) from None


def register_metric(
    name: str,
    fn: MetricFn,
    best_value: MetricBestValue = MetricBestValue.MIN,
    task: str = "regression",
) -> Metric:
    """Register (or replace) a custom metric and return it."""
    metric = Metric(name, MetricBestValue(best_value), fn, task)
    _REGISTRY[name] = metric
    return metric


def unregister_metric(name: str) -> None:
    """Remove a custom metric; unknown names are ignored."""
    _REGISTRY.pop(name, None)


def available_metrics() -> list[str]:
    return sorted(_REGISTRY)
