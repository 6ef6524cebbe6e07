"""
Search Observers.

Observers receive search events without being able to influence the
search. The driver notifies every registered observer when a grid starts
and after each trial. Two observers ship with the package:

    - ``LoggingObserver``: one console line per trial with the running best
      and elapsed / estimated remaining time.
    - ``TrialHistory``: collects every TrialResult for reporting.
"""

from __future__ import annotations

import logging
import math
import time
from typing import TYPE_CHECKING, Protocol

import pandas as pd

from ..core.logger import log_grid_start, log_trial_result
from ..core.paths import LOGGER_NAME
from .results import TrialResult

if TYPE_CHECKING:  # pragma: no cover
    from .best_tracker import BestTracker, Direction
    from .grid_spec import GridSpec

logger = logging.getLogger(LOGGER_NAME)


class SearchObserver(Protocol):
    """Read-only listener for search progress."""

    def on_grid_start(self, grid_index: int, n_grids: int, spec: "GridSpec", total: int) -> None:
        ...  # pragma: no cover

    def on_trial_end(self, result: TrialResult, best: "BestTracker", total: int) -> None:
        ...  # pragma: no cover


class LoggingObserver:
    """
    Console progress reporter.

    Remaining time is the mean trial duration so far times the number of
    trials left in the current grid.
    """

    def __init__(self, logger_instance: logging.Logger | None = None) -> None:
        self.log = logger_instance or logger
        self._grid_started = time.perf_counter()

    def on_grid_start(self, grid_index: int, n_grids: int, spec: "GridSpec", total: int) -> None:
        self._grid_started = time.perf_counter()
        log_grid_start(grid_index, n_grids, total, spec.names, logger_instance=self.log)

    def on_trial_end(self, result: TrialResult, best: "BestTracker", total: int) -> None:
        elapsed = time.perf_counter() - self._grid_started
        done = result.iteration + 1
        remaining = elapsed / done * (total - done)
        log_trial_result(
            result,
            best_value=best.best_value if best.best_state is not None else None,
            best_iteration=best.best_iteration,
            total=total,
            elapsed=elapsed,
            remaining=remaining,
            logger_instance=self.log,
        )


class TrialHistory:
    """
    Collector of every finished trial.

    Example:
        >>> history = TrialHistory()
        >>> driver = SearchDriver(data, observers=[LoggingObserver(), history])
        >>> driver.grid_search(grid)
        >>> history.to_dataframe().head()
    """

    def __init__(self) -> None:
        self.results: list[TrialResult] = []

    def __len__(self) -> int:
        return len(self.results)

    def on_grid_start(self, grid_index: int, n_grids: int, spec: "GridSpec", total: int) -> None:
        return None

    def on_trial_end(self, result: TrialResult, best: "BestTracker", total: int) -> None:
        self.results.append(result)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per trial; free options become columns."""
        return pd.DataFrame([r.as_dict() for r in self.results])

    def top(self, k: int, direction: "Direction") -> list[TrialResult]:
        """The ``k`` best trials under ``direction``, earlier trials first on ties, NaN last."""
        ranked = sorted(
            enumerate(self.results),
            key=lambda item: (
                math.isnan(item[1].metric_value),
                direction.sign * item[1].metric_value,
                item[0],
            ),
        )
        return [result for _, result in ranked[:k]]
