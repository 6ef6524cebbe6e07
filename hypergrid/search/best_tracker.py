"""
Best Result Tracking.

Direction-aware selection of the best trial. Values are compared through
the metric's sign (+1 for minimized metrics, -1 for maximized ones):
a candidate replaces the incumbent iff ``sign * value < sign * best``, so
ties keep the earlier trial. Before the first update the running best is
seeded to ``first_value + sign``, which guarantees that the first trial is
accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from ..data_handler import QuantizationParams
from ..exceptions import AmbiguousMetricError
from ..trainer import CVResult, Metric, MetricBestValue, get_metric


class Direction(str, Enum):
    """Optimization direction of the search metric."""

    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"

    @property
    def sign(self) -> int:
        return 1 if self is Direction.MINIMIZE else -1

    def is_better(self, candidate: float, incumbent: float) -> bool:
        """Strict direction-aware comparison; ties and NaN are never better."""
        return self.sign * candidate < self.sign * incumbent


def metric_direction(metric: Metric | str) -> Direction:
    """
    Map a metric to its optimization direction.

    Args:
        metric: Metric instance or registry name.

    Raises:
        AmbiguousMetricError: If the metric is neither minimized nor maximized.
    """
    if isinstance(metric, str):
        metric = get_metric(metric)
    if metric.best_value == MetricBestValue.MIN:
        return Direction.MINIMIZE
    if metric.best_value == MetricBestValue.MAX:
        return Direction.MAXIMIZE
    raise AmbiguousMetricError(
        f"Error: metric '{metric.name}' for parameter search must be minimized or maximized"
    )


@dataclass(frozen=True)
class BestState:
    """
    Snapshot of the best trial of one grid.

    Attributes:
        combination: Grid tuple as produced by the iterator.
        quantization: Resolved quantization settings.
        params: Resolved values of the free grid options.
        metric_value: Search metric value of the trial.
        cv_results: Cross-validation curves, if available.
        iteration: Zero-based trial index within the grid.
    """

    combination: tuple[Any, ...]
    quantization: QuantizationParams
    params: Mapping[str, Any]
    metric_value: float
    iteration: int
    cv_results: tuple[CVResult, ...] | None = field(default=None)


class BestTracker:
    """
    Running best of one grid under a fixed direction.

    Example:
        >>> tracker = BestTracker(Direction.MINIMIZE)
        >>> [tracker.update(v, state_for(v)) for v in (0.5, 0.3, 0.4)]
        [True, True, False]
        >>> tracker.best_iteration
        1
    """

    def __init__(self, direction: Direction) -> None:
        self.direction = direction
        self._best_value: float | None = None
        self._best_state: BestState | None = None
        self._best_iteration: int | None = None
        self._seen = 0

    @property
    def best_value(self) -> float | None:
        """Running best value (the seeded value until a trial is accepted)."""
        return self._best_value

    @property
    def best_state(self) -> BestState | None:
        return self._best_state

    @property
    def best_iteration(self) -> int | None:
        return self._best_iteration

    def update(self, value: float, state: BestState) -> bool:
        """
        Offer a trial result.

        Returns:
            True if the trial became the new best.
        """
        iteration = self._seen
        self._seen += 1
        if self._best_state is None:
            self._best_value = value + self.direction.sign

        if not self.direction.is_better(value, self._best_value):
            return False

        self._best_value = value
        self._best_state = state
        self._best_iteration = iteration
        return True
