"""
Trainer Package

Metrics-only gradient boosting trainer, k-fold cross-validation and the
metric registry that tells the search which way each metric improves.
"""

from .cross_validator import CrossValidator, CVResult, aggregate_histories
from .metrics import (
    Metric,
    MetricBestValue,
    available_metrics,
    get_metric,
    register_metric,
    unregister_metric,
)
from .options import (
    BORDER_COUNT_ALIASES,
    BORDER_TYPE_ALIASES,
    NAN_MODE_ALIASES,
    TrainerOptions,
)
from .trainer import Trainer, TrainingHistory

__all__ = [
    "Trainer",
    "TrainingHistory",
    "TrainerOptions",
    "CrossValidator",
    "CVResult",
    "aggregate_histories",
    "Metric",
    "MetricBestValue",
    "get_metric",
    "register_metric",
    "unregister_metric",
    "available_metrics",
    "BORDER_COUNT_ALIASES",
    "BORDER_TYPE_ALIASES",
    "NAN_MODE_ALIASES",
]
